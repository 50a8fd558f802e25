import asyncio
import logging
import random
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional

import httpx
from tenacity import AsyncRetrying, RetryError, retry_if_exception_type, stop_after_attempt, wait_incrementing

from backend.scrape.blocks import is_blocked
from backend.scrape.client import new_client
from backend.scrape.config import PRIMARY_FETCH, SCRAPE_DEBUG, FetchSettings
from backend.scrape.errors import FetchBlocked, FetchError, FetchExhausted, FetchTimeout

log = logging.getLogger("scrape")


@dataclass
class FetchResult:
    body: str
    status: int
    attempts: int
    url: str


class ResilientFetcher:
    """
    GET a page with rotating header profiles, jittered delays and escalating backoff.
    Only bodies that look like real pages are returned; every other outcome
    (transport error, timeout, 5xx, tiny body, challenge page) is retried the same way.
    """

    def __init__(
        self,
        settings: FetchSettings = PRIMARY_FETCH,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings
        self._transport = transport
        self._sleep = sleep
        self._rng = rng or random.Random()

    def headers_for(self, attempt: int, overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        pool = self.settings.headers
        headers = pool[attempt % len(pool)].as_headers()
        if overrides:
            headers.update(overrides)
        return headers

    def jitter_for(self, attempt: int) -> float:
        lo, hi = self.settings.jitter
        return self._rng.uniform(lo, hi * (1 + attempt / 2))

    def backoff(self):
        """Linear backoff between attempts: backoff_step, 2 * backoff_step, ..."""
        step = self.settings.backoff_step
        return wait_incrementing(start=step, increment=step)

    async def fetch(
        self,
        url: str,
        header_overrides: Optional[Dict[str, str]] = None,
        max_attempts: Optional[int] = None,
    ) -> FetchResult:
        attempts = max_attempts or self.settings.max_attempts
        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=self.backoff(),
            retry=retry_if_exception_type(FetchError),
            sleep=self._sleep,
        )

        async with new_client(
            timeout=self.settings.timeout,
            max_redirects=self.settings.max_redirects,
            transport=self._transport,
        ) as client:
            try:
                async for attempt in retrying:
                    with attempt:
                        i = attempt.retry_state.attempt_number - 1
                        await self._sleep(self.jitter_for(i))
                        try:
                            result = await self._attempt(client, url, i, header_overrides)
                        except FetchError as e:
                            log.warning("fetch attempt %d/%d failed | %s | %s", i + 1, attempts, url, e)
                            raise
            except RetryError as e:
                last_err = e.last_attempt.exception()
                raise FetchExhausted(url, attempts, str(last_err or "")) from last_err

        log.debug("fetch ok | %s | profile=%s attempt=%d status=%d bytes=%d",
                  url, self.settings.name, result.attempts, result.status, len(result.body))
        return result

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        url: str,
        attempt: int,
        header_overrides: Optional[Dict[str, str]],
    ) -> FetchResult:
        try:
            r = await client.get(url, headers=self.headers_for(attempt, header_overrides))
        except httpx.TimeoutException as e:
            raise FetchTimeout(f"timed out after {self.settings.timeout}s") from e
        except httpx.HTTPError as e:
            # DNS failures, resets and redirect loops get the same treatment as a block
            raise FetchBlocked(f"transport error: {e.__class__.__name__}: {e}") from e

        text = r.text or ""
        _debug_dump(url, text)
        if r.status_code >= self.settings.status_ceiling:
            raise FetchBlocked(f"server error {r.status_code}", status=r.status_code)
        if is_blocked(text, r.status_code):
            raise FetchBlocked(f"challenge or block page (status {r.status_code})", status=r.status_code)
        size = len(r.content)
        if size < self.settings.min_body_bytes:
            raise FetchBlocked(f"body too short ({size} bytes)", status=r.status_code)
        return FetchResult(body=text, status=r.status_code, attempts=attempt + 1, url=str(r.url))


def _debug_dump(url: str, text: str) -> None:
    """When SCRAPE_DEBUG is set, save the body so selectors can be inspected offline."""
    if not SCRAPE_DEBUG:
        return
    try:
        h = abs(hash(f"{url}|{len(text)}"))
        fname = Path(tempfile.gettempdir()) / f"scrape_http_{h}.html"
        fname.write_text(text, encoding="utf-8", errors="ignore")
        log.debug("saved HTTP → %s :: %s", fname, url)
    except OSError as e:
        log.debug("debug save failed: %s", e)
