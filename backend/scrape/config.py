"""
Static, process-wide configuration for the listing scraper.

Everything here is read once at import time and never mutated afterwards.
Header pools are tuples of frozen profiles shared by every fetcher.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, Tuple


def _flag(name: str) -> bool:
    return os.getenv(name, "").lower() in {"1", "true", "yes"}


SCRAPE_PROXY = os.getenv("SCRAPE_PROXY", "").strip()
SCRAPE_DEBUG = _flag("SCRAPE_DEBUG")
HTTP_DEBUG = _flag("HTTP_DEBUG")
BROWSER_NO_SANDBOX = _flag("SCRAPE_BROWSER_NO_SANDBOX")
PIPELINE_DEADLINE_SEC = float(os.getenv("SCRAPE_DEADLINE_SEC", "90"))

MIN_BODY_BYTES = 500
MAX_COMPARABLES = 6

# Lower-cased phrases that only show up on challenge / rate-limit pages.
BLOCK_MARKERS: Tuple[str, ...] = (
    "captcha",
    "robot check",
    "verify you are a human",
    "access denied",
    "temporarily unavailable",
    "request blocked",
    "_cf_chl_opt",  # Cloudflare interstitial
)
BLOCK_STATUSES = frozenset({403, 429})


@dataclass(frozen=True)
class HeaderProfile:
    user_agent: str
    accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8"
    accept_language: str = "en-US,en;q=0.9"
    referer: str = "https://www.google.com/"
    extra: Tuple[Tuple[str, str], ...] = ()

    def as_headers(self) -> Dict[str, str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": self.accept,
            "Accept-Language": self.accept_language,
        }
        if self.referer:
            headers["Referer"] = self.referer
        headers.update(dict(self.extra))
        return headers


_CHROME_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
_CHROME_WIN = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/119.0.0.0 Safari/537.36"
)
_SAFARI_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) "
    "Version/17.1 Safari/605.1.15"
)
_FIREFOX_WIN = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) "
    "Gecko/20100101 Firefox/121.0"
)

_NAVIGATE_HINTS = (
    ("DNT", "1"),
    ("Upgrade-Insecure-Requests", "1"),
    ("Sec-Fetch-Dest", "document"),
    ("Sec-Fetch-Mode", "navigate"),
    ("Sec-Fetch-Site", "none"),
    ("Cache-Control", "max-age=0"),
)

PRIMARY_HEADERS: Tuple[HeaderProfile, ...] = (
    HeaderProfile(user_agent=_CHROME_MAC, extra=_NAVIGATE_HINTS),
    HeaderProfile(user_agent=_SAFARI_MAC, accept="text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"),
    HeaderProfile(user_agent=_CHROME_WIN, referer="https://www.bing.com/", extra=_NAVIGATE_HINTS),
)

ALTERNATE_HEADERS: Tuple[HeaderProfile, ...] = (
    HeaderProfile(
        user_agent=_CHROME_WIN,
        accept="text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        accept_language="en-US,en;q=0.5",
        referer="",
        extra=(("Upgrade-Insecure-Requests", "1"),),
    ),
    HeaderProfile(
        user_agent=_FIREFOX_WIN,
        accept="text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        accept_language="en-US,en;q=0.5",
        referer="https://duckduckgo.com/",
    ),
)


@dataclass(frozen=True)
class FetchSettings:
    name: str
    headers: Tuple[HeaderProfile, ...]
    timeout: float = 15.0
    max_redirects: int = 5
    max_attempts: int = 3
    # seconds; the upper bound widens with each attempt
    jitter: Tuple[float, float] = (0.4, 1.2)
    backoff_step: float = 1.5
    status_ceiling: int = 500
    min_body_bytes: int = MIN_BODY_BYTES


PRIMARY_FETCH = FetchSettings(name="primary", headers=PRIMARY_HEADERS)

ALTERNATE_FETCH = FetchSettings(
    name="alternate",
    headers=ALTERNATE_HEADERS,
    timeout=20.0,
    max_redirects=10,
    max_attempts=2,
    jitter=(2.0, 5.0),
    backoff_step=2.5,
)


@dataclass(frozen=True)
class RenderSettings:
    user_agent: str = _CHROME_MAC
    viewport: Tuple[int, int] = (1366, 768)
    nav_timeout_ms: int = 30_000
    settle_ms: int = 2_000
    no_sandbox: bool = BROWSER_NO_SANDBOX
    extra_headers: Tuple[Tuple[str, str], ...] = field(default=(
        ("Accept-Language", "en-US,en;q=0.9"),
        ("Accept", "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8"),
        ("Referer", "https://www.google.com/"),
    ))


RENDER = RenderSettings()
