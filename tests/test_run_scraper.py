from __future__ import annotations

import asyncio
import csv
import json
from pathlib import Path
from typing import Any

from backend.py_models.property import ListingRecord, ScrapeResponse
from backend.scrape import run_scraper

GOOD = "https://www.homes.com/property/55-elm-ave/abc/"
BAD = "https://example.com/nope"


async def _fake_scrape(url: str, orchestrator: Any = None) -> ScrapeResponse:
    if url == GOOD:
        record = ListingRecord(price=349900, address="55 Elm Ave", beds=2, baths=1, sqft=950, source_url=url)
        return ScrapeResponse(success=True, data=record, platform="Homes.com")
    return ScrapeResponse(success=False, error="Unsupported URL. Please use Zillow, Redfin, or Homes.com")


def _patch(monkeypatch: Any) -> None:
    monkeypatch.setattr(run_scraper, "scrape_listing", _fake_scrape)
    monkeypatch.setattr(run_scraper, "AcquisitionOrchestrator", lambda: None)
    monkeypatch.setattr(run_scraper.random, "uniform", lambda a, b: 0)


def test_main_writes_json(monkeypatch: Any, tmp_path: Path) -> None:
    _patch(monkeypatch)
    out = tmp_path / "out.json"

    rows = asyncio.run(run_scraper.main([GOOD, BAD, "--output", str(out)]))

    saved = json.loads(out.read_text(encoding="utf-8"))
    assert saved == rows
    assert saved[0]["price"] == 349900
    assert saved[0]["error"] is None
    assert saved[1]["error"].startswith("Unsupported URL")


def test_main_reads_urls_file_and_writes_csv(monkeypatch: Any, tmp_path: Path) -> None:
    _patch(monkeypatch)
    urls = tmp_path / "urls.txt"
    urls.write_text(f"# listings\n{GOOD}\n\n", encoding="utf-8")
    out = tmp_path / "out.csv"

    asyncio.run(run_scraper.main(["--urls-file", str(urls), "--output", str(out)]))

    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 1
    assert rows[0]["address"] == "55 Elm Ave"
    assert rows[0]["market_status"] == "unknown"
