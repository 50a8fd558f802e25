"""
Per-URL acquisition: pick the platform, then walk its tiers in order.

A tier is one (fetch method, extraction profile) pairing. ``PLATFORMS`` holds
the tier order for each site; only Zillow gets the headless-browser tier.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import httpx

from backend.py_models.property import ListingRecord, ScrapeResponse
from backend.scrape.config import ALTERNATE_FETCH, PIPELINE_DEADLINE_SEC, PRIMARY_FETCH, FetchSettings
from backend.scrape.errors import TIER_ERRORS, ExtractionFailed, MalformedUrl, ScrapeError, UnsupportedSource
from backend.scrape.fetcher import ResilientFetcher
from backend.scrape.renderer import HeadlessRenderer
from backend.scrape.sources.base import SourceExtractor
from backend.scrape.sources.homes import HomesExtractor
from backend.scrape.sources.redfin import RedfinExtractor
from backend.scrape.sources.zillow import ZillowExtractor

log = logging.getLogger("scrape")

UNSUPPORTED_MESSAGE = "Unsupported URL. Please use Zillow, Redfin, or Homes.com"
MALFORMED_MESSAGE = "Failed to scrape property data. Please check the URL and try again."


@dataclass(frozen=True)
class Tier:
    name: str
    method: str  # "http" | "browser"
    profile: str = "primary"
    settings: Optional[FetchSettings] = None


@dataclass(frozen=True)
class Platform:
    name: str
    markers: Tuple[str, ...]
    extractor: SourceExtractor
    tiers: Tuple[Tier, ...]
    remediation: str = ""


HTTP_PRIMARY = Tier("http-primary", "http", "primary", PRIMARY_FETCH)
HTTP_ALTERNATE = Tier("http-alternate", "http", "alternate", ALTERNATE_FETCH)
BROWSER = Tier("headless-browser", "browser", "primary")

PLATFORMS: Tuple[Platform, ...] = (
    Platform(
        name="Zillow",
        markers=("zillow.com",),
        extractor=ZillowExtractor(),
        tiers=(HTTP_PRIMARY, HTTP_ALTERNATE, BROWSER),
        remediation="Try using Redfin or Homes.com instead, or try again later.",
    ),
    Platform(
        name="Redfin",
        markers=("redfin.com",),
        extractor=RedfinExtractor(),
        tiers=(HTTP_PRIMARY, HTTP_ALTERNATE),
    ),
    Platform(
        name="Homes.com",
        markers=("homes.com",),
        extractor=HomesExtractor(),
        # single selector skin: tier 2 only changes the fetch fingerprint
        tiers=(HTTP_PRIMARY, HTTP_ALTERNATE),
    ),
)


def check_url(url: str) -> None:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise MalformedUrl(MALFORMED_MESSAGE) from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise MalformedUrl(MALFORMED_MESSAGE)


def platform_for(url: str, platforms: Tuple[Platform, ...] = PLATFORMS) -> Platform:
    low = (url or "").lower()
    for p in platforms:
        if any(m in low for m in p.markers):
            return p
    raise UnsupportedSource(UNSUPPORTED_MESSAGE)


class AcquisitionOrchestrator:
    def __init__(
        self,
        platforms: Tuple[Platform, ...] = PLATFORMS,
        fetcher_factory: Callable[[FetchSettings], ResilientFetcher] = ResilientFetcher,
        renderer: Optional[HeadlessRenderer] = None,
        deadline: Optional[float] = PIPELINE_DEADLINE_SEC,
    ):
        self.platforms = platforms
        self._fetcher_factory = fetcher_factory
        self._renderer = renderer
        self.deadline = deadline
        self._fetchers: Dict[FetchSettings, ResilientFetcher] = {}

    def _fetcher(self, settings: FetchSettings) -> ResilientFetcher:
        # one fetcher per immutable settings object; fetchers hold no per-request state
        if settings not in self._fetchers:
            self._fetchers[settings] = self._fetcher_factory(settings)
        return self._fetchers[settings]

    @property
    def renderer(self) -> HeadlessRenderer:
        if self._renderer is None:
            self._renderer = HeadlessRenderer()
        return self._renderer

    async def acquire(self, url: str) -> ListingRecord:
        check_url(url)
        platform = platform_for(url, self.platforms)
        attempted: List[str] = []
        try:
            return await asyncio.wait_for(self._run_chain(platform, url, attempted), timeout=self.deadline)
        except asyncio.TimeoutError as e:
            raise ExtractionFailed(
                self._failure_message(platform, attempted, f"overall deadline of {self.deadline:g}s exceeded"),
                platform=platform.name,
                tiers=attempted,
            ) from e

    async def _run_chain(self, platform: Platform, url: str, attempted: List[str]) -> ListingRecord:
        last_err: Optional[ScrapeError] = None
        for tier in platform.tiers:
            attempted.append(tier.name)
            log.info("[%s] tier %d/%d %s → %s", platform.name, len(attempted), len(platform.tiers), tier.name, url)
            try:
                record = await self.run_tier(platform, tier, url)
                log.info("[%s] %s succeeded: price=%s address=%r", platform.name, tier.name, record.price, record.address)
                return record
            except TIER_ERRORS as e:
                last_err = e
                log.warning("[%s] %s failed: %s", platform.name, tier.name, e)

        raise ExtractionFailed(
            self._failure_message(platform, attempted, str(last_err or "no tiers configured")),
            platform=platform.name,
            tiers=attempted,
        ) from last_err

    async def run_tier(self, platform: Platform, tier: Tier, url: str) -> ListingRecord:
        if tier.method == "browser":
            return await self.renderer.render_and_extract(url, platform.extractor, tier.profile)
        result = await self._fetcher(tier.settings or PRIMARY_FETCH).fetch(url)
        return await platform.extractor.extract_from_html(result.body, url, tier.profile)

    @staticmethod
    def _failure_message(platform: Platform, attempted: List[str], reason: str) -> str:
        n = len(attempted)
        if platform.remediation:
            return (
                f"{platform.name} anti-scraping detected. Extraction failed after {n} tier(s) "
                f"({', '.join(attempted)}): {reason}. {platform.remediation}"
            )
        return f"{platform.name} scraping failed after {n} tier(s): {reason}"


async def scrape_listing(url: str, orchestrator: Optional[AcquisitionOrchestrator] = None) -> ScrapeResponse:
    """Boundary wrapper: never raises for pipeline failures, always returns a ScrapeResponse."""
    if not url or not url.strip():
        return ScrapeResponse(success=False, error="URL is required")
    orch = orchestrator or AcquisitionOrchestrator()
    try:
        record = await orch.acquire(url.strip())
    except ExtractionFailed as e:
        return ScrapeResponse(success=False, error=str(e), platform=e.platform, tiers=e.tiers)
    except (UnsupportedSource, MalformedUrl) as e:
        return ScrapeResponse(success=False, error=str(e))
    platform = platform_for(url, orch.platforms).name
    return ScrapeResponse(success=True, data=record, platform=platform)
