"""
Full-page-text heuristics for facts that listing sites render as prose rather
than structured markup: market status, valuation estimate, last sale and
nearby comparable listings.
"""
import re
from typing import Iterable, List, Optional, Pattern, Tuple
from urllib.parse import urljoin, urlparse

from backend.py_models.property import ComparableListing, MarketStatus
from backend.scrape.config import MAX_COMPARABLES
from backend.scrape.parsing import parse_details, parse_money

_off_market = re.compile(r"\boff[\s-]market\b", re.I)
_trend = re.compile(
    r"(\$\s*[\d,.]+\s*[KkMm]?\s+since\s+sold\s+in\s+[A-Z][a-z]+\.?\s+\d{4})",
    re.I,
)
_last_sold = re.compile(r"SOLD\s+([A-Z]{3})\.?\s+(\d{4})\s+FOR\s+(\$\s*[\d,.]+(?:\s*[KkMm]\b)?)", re.I)


def market_status(text: str) -> MarketStatus:
    return "off-market" if _off_market.search(text or "") else "active"


def valuation(text: str, brand: str) -> Tuple[Optional[float], Optional[str]]:
    """Return (estimate, trend note). The note is kept verbatim for display."""
    pattern = re.compile(re.escape(brand) + r"\s+Estimate\s*:?\s*(\$\s*[\d,.]+(?:\s*[KkMm]\b)?)", re.I)
    m = pattern.search(text or "")
    estimate = parse_money(m.group(1)) if m else None
    t = _trend.search(text or "")
    note = re.sub(r"\s+", " ", t.group(1)).strip() if t else None
    return estimate, note


def last_sale(text: str) -> Tuple[Optional[float], Optional[str]]:
    m = _last_sold.search(text or "")
    if not m:
        return None, None
    return parse_money(m.group(3)), f"{m.group(1).upper()} {m.group(2)}"


def comparables(
    anchors: Iterable[Tuple[str, str]],
    page_url: str,
    listing_path: Pattern[str],
    limit: int = MAX_COMPARABLES,
) -> List[ComparableListing]:
    """
    Turn listing-like anchors into comps in document order.
    Anchors without a '$' price are dropped, as is the subject listing itself.
    """
    own_path = urlparse(page_url).path.rstrip("/")
    out: List[ComparableListing] = []
    for href, text in anchors:
        if len(out) >= limit:
            break
        if not href or not listing_path.search(href):
            continue
        absolute = urljoin(page_url, href)
        if urlparse(absolute).path.rstrip("/") == own_path:
            continue
        price = parse_money(text)
        if not price:
            continue
        d = parse_details(text)
        out.append(ComparableListing(
            price=price,
            beds=d.beds or None,
            baths=d.baths or None,
            sqft=d.sqft or None,
            url=absolute,
        ))
    return out
