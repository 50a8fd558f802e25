from __future__ import annotations

import json

import pytest

FILLER = "<p>" + "Spacious home close to parks and schools. " * 20 + "</p>"


def _ld(obj) -> str:
    return f'<script type="application/ld+json">{json.dumps(obj)}</script>'


@pytest.fixture
def filler() -> str:
    return FILLER


@pytest.fixture
def ld_json():
    return _ld


@pytest.fixture
def zillow_html() -> str:
    return f"""
    <html><head><title>1 Main St | Zillow</title></head><body>
      <h1 data-testid="address">1 Main St, Springfield, IL 62704</h1>
      <span data-testid="price">$500,000</span>
      <div data-testid="bed-bath-beyond">3 bd 2.5 ba 1,800 sqft</div>
      <span data-testid="property-type">Single Family Residence</span>
      {FILLER}
    </body></html>
    """


@pytest.fixture
def empty_listing_html() -> str:
    return f"<html><body><h1>Homes for you</h1>{FILLER}</body></html>"


@pytest.fixture
def homes_html() -> str:
    return f"""
    <html><body>
      <div class="price">$349,900</div>
      <div class="address">55 Elm Ave, Peoria, IL 61602</div>
      <div class="property-details">2 Beds 1 Bath 950 Sq Ft</div>
      <div class="property-type">Condo</div>
      {FILLER}
    </body></html>
    """


def _comp_anchor(i: int) -> str:
    return (
        f'<a href="/IL/Springfield/{i}-Oak-St-62704/home/{1000 + i}">'
        f"${400 + i},000 3 beds 2 baths 1,{400 + i} sq ft</a>"
    )


@pytest.fixture
def redfin_html() -> str:
    comps = "".join(_comp_anchor(i) for i in range(1, 9))
    return f"""
    <html><body>
      <div class="street-address">1 Main St, Springfield, IL 62704</div>
      <div class="home-main-stats">
        <div class="statsValue">$525,000</div>
        <div class="statsValue">3 Beds</div>
        <div class="statsValue">2 Baths</div>
        <div class="statsValue">1,500 Sq Ft</div>
      </div>
      <div class="PropertyType">Single Family Residential</div>
      <a href="/IL/Springfield/1-Main-St-62704/home/12345">$525,000 this home</a>
      <a href="/IL/Springfield/99-Pine-St-62704/home/9999">Pine St, price on request</a>
      <a href="/about">About $ and more</a>
      {comps}
      {FILLER}
    </body></html>
    """


@pytest.fixture
def redfin_off_market_html() -> str:
    return f"""
    <html><body>
      <div class="street-address">1 Main St, Springfield, IL 62704</div>
      <div class="status">OFF MARKET</div>
      <div class="bed-bath-beyond">4 beds 3 baths 2,200 sq ft</div>
      <div class="avm">Redfin Estimate $512,300</div>
      <div class="avm-trend">+$45K since sold in Mar 2019</div>
      <div class="history">SOLD MAR 2019 FOR $455,000</div>
      {FILLER}
    </body></html>
    """
