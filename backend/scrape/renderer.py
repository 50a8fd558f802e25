import logging
from typing import Callable

from playwright.async_api import Error as PWError
from playwright.async_api import async_playwright

from backend.py_models.property import ListingRecord
from backend.scrape.config import RENDER, RenderSettings
from backend.scrape.dom import PageView
from backend.scrape.errors import InsufficientData, RenderFailed
from backend.scrape.sources.base import SourceExtractor

log = logging.getLogger("scrape")

_LAUNCH_ARGS = [
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--disable-gpu",
]


class HeadlessRenderer:
    """
    Last-resort tier: render the page in headless Chromium and run the shared
    heuristics against the live DOM.

    A browser is launched per call and always torn down before returning,
    whether extraction succeeds, finds nothing, navigation times out, or the
    owning task is cancelled.
    """

    def __init__(self, settings: RenderSettings = RENDER, playwright_factory: Callable = async_playwright):
        self.settings = settings
        self._playwright_factory = playwright_factory

    def launch_args(self) -> list[str]:
        args = list(_LAUNCH_ARGS)
        if self.settings.no_sandbox:
            args += ["--no-sandbox", "--disable-setuid-sandbox"]
        return args

    async def render_and_extract(
        self,
        url: str,
        extractor: SourceExtractor,
        profile: str = "primary",
    ) -> ListingRecord:
        pw = await self._playwright_factory().start()
        browser = None
        try:
            browser = await pw.chromium.launch(headless=True, args=self.launch_args())
            width, height = self.settings.viewport
            context = await browser.new_context(
                viewport={"width": width, "height": height},
                user_agent=self.settings.user_agent,
                extra_http_headers=dict(self.settings.extra_headers),
            )
            page = await context.new_page()
            log.info("[render] goto %s", url)
            await page.goto(url, wait_until="networkidle", timeout=self.settings.nav_timeout_ms)
            # deferred widgets keep rendering after network idle
            await page.wait_for_timeout(self.settings.settle_ms)
            return await extractor.extract(PageView(page), url, profile)
        except InsufficientData as e:
            raise RenderFailed(f"Headless render found no usable data: {e}", platform=extractor.platform) from e
        except PWError as e:
            raise RenderFailed(f"Headless render failed: {e}", platform=extractor.platform) from e
        finally:
            await self._teardown(pw, browser)

    async def _teardown(self, pw, browser) -> None:
        try:
            if browser is not None:
                await browser.close()
        except PWError as e:
            log.warning("[render] browser.close failed: %s", e)
        finally:
            await pw.stop()
