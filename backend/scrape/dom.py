"""
Read-only page views shared by every extraction tier.

The same heuristics run against HTML fetched over plain HTTP (``SoupView``) and
against a live, script-rendered Playwright page (``PageView``). Both expose the
same small async surface, so selector tables and regex scans are written once.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from bs4 import BeautifulSoup, Tag
from playwright.async_api import Error as PWError

from backend.scrape.parsing import clean_text
from backend.scrape.structured import script_blocks

log = logging.getLogger("scrape")


@dataclass(frozen=True)
class Probe:
    """One selector candidate: the ``index``-th match, optionally only among elements containing ``contains``."""
    selector: str
    index: int = 0
    contains: Optional[str] = None


ProbeLike = Union[str, Probe]


def as_probe(p: ProbeLike) -> Probe:
    return p if isinstance(p, Probe) else Probe(p)


class DomView(Protocol):
    async def select_text(self, probe: Probe) -> str: ...

    async def anchors(self) -> List[Tuple[str, str]]: ...

    async def page_text(self) -> str: ...

    async def script_blocks(self) -> List[str]: ...


async def first_text(view: DomView, candidates: Sequence[ProbeLike]) -> str:
    """Walk the candidates in order; the first non-empty text wins."""
    for cand in candidates:
        txt = await view.select_text(as_probe(cand))
        if txt:
            return txt
    return ""


def _text(el: Tag) -> str:
    if el.name == "meta":
        return clean_text(el.get("content"))
    return clean_text(el.get_text(" ", strip=True))


class SoupView:
    def __init__(self, html: Union[str, BeautifulSoup]):
        self.soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html or "", "lxml")

    async def select_text(self, probe: Probe) -> str:
        els = self.soup.select(probe.selector)
        if probe.contains is not None:
            els = [el for el in els if probe.contains in el.get_text()]
        if len(els) <= probe.index:
            return ""
        return _text(els[probe.index])

    async def anchors(self) -> List[Tuple[str, str]]:
        return [(a.get("href") or "", _text(a)) for a in self.soup.select("a[href]")]

    async def page_text(self) -> str:
        body = self.soup.body or self.soup
        return clean_text(body.get_text(" ", strip=True))

    async def script_blocks(self) -> List[str]:
        return script_blocks(self.soup)


_ANCHORS_JS = "els => els.map(e => [e.getAttribute('href') || '', e.textContent || ''])"
_LD_JSON_JS = "els => els.map(e => e.textContent || '')"


class PageView:
    """Same surface as ``SoupView`` but evaluated inside a live browser page."""

    def __init__(self, page):
        self.page = page

    async def select_text(self, probe: Probe) -> str:
        try:
            if probe.contains is not None:
                loc = self.page.locator(probe.selector, has_text=probe.contains)
            else:
                loc = self.page.locator(probe.selector)
            if await loc.count() <= probe.index:
                return ""
            el = loc.nth(probe.index)
            tag = await el.evaluate("e => e.tagName.toLowerCase()")
            if tag == "meta":
                return clean_text(await el.get_attribute("content"))
            return clean_text(await el.text_content())
        except PWError as e:
            log.debug("live selector %r failed: %s", probe.selector, e)
            return ""

    async def anchors(self) -> List[Tuple[str, str]]:
        rows = await self.page.eval_on_selector_all("a[href]", _ANCHORS_JS)
        return [(href, clean_text(txt)) for href, txt in rows]

    async def page_text(self) -> str:
        return clean_text(await self.page.inner_text("body"))

    async def script_blocks(self) -> List[str]:
        blocks = await self.page.eval_on_selector_all("script[type='application/ld+json']", _LD_JSON_JS)
        return [b for b in blocks if b and b.strip()]
