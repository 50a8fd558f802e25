from __future__ import annotations

import asyncio
from typing import Any

from backend.scrape.dom import PageView, Probe, SoupView, first_text

HTML = """
<html><head>
  <meta itemprop="price" content="410000">
  <script type="application/ld+json">{"@type": "House"}</script>
</head><body>
  <div class="stat">$410,000</div>
  <div class="stat">  12 Oak   Rd </div>
  <span>no money</span><span>Listed at $410,000</span>
  <a href="/home/1">first</a><a>no href</a>
</body></html>
"""


def test_soup_view_probes() -> None:
    view = SoupView(HTML)

    async def run() -> tuple:
        return (
            await view.select_text(Probe(".stat", index=1)),
            await view.select_text(Probe("span", contains="$")),
            await view.select_text(Probe("meta[itemprop='price']")),
            await view.select_text(Probe(".stat", index=5)),
            await first_text(view, [".missing", ".stat"]),
            await view.anchors(),
            await view.script_blocks(),
        )

    second, money_span, meta, out_of_range, first, anchors, blocks = asyncio.run(run())

    assert second == "12 Oak Rd"
    assert money_span == "Listed at $410,000"
    assert meta == "410000"
    assert out_of_range == ""
    assert first == "$410,000"
    assert anchors == [("/home/1", "first")]
    assert blocks == ['{"@type": "House"}']


class _FakeLocator:
    def __init__(self, texts: list[str]) -> None:
        self.texts = texts
        self.i = 0

    async def count(self) -> int:
        return len(self.texts)

    def nth(self, i: int) -> "_FakeLocator":
        loc = _FakeLocator(self.texts)
        loc.i = i
        return loc

    async def evaluate(self, js: str) -> str:
        return "div"

    async def get_attribute(self, name: str) -> None:
        return None

    async def text_content(self) -> str:
        return self.texts[self.i]


class _FakePage:
    def __init__(self) -> None:
        self.locator_calls: list[tuple[str, Any]] = []

    def locator(self, selector: str, has_text: str | None = None) -> _FakeLocator:
        self.locator_calls.append((selector, has_text))
        if selector == ".stat":
            return _FakeLocator(["$410,000", " 12 Oak\n Rd "])
        return _FakeLocator([])

    async def eval_on_selector_all(self, selector: str, js: str) -> list:
        if selector == "a[href]":
            return [["/home/1", " first "]]
        return ['{"@type": "House"}', "  "]

    async def inner_text(self, selector: str) -> str:
        return "Off   Market\nRedfin Estimate $1"


def test_page_view_mirrors_soup_view() -> None:
    page = _FakePage()
    view = PageView(page)

    async def run() -> tuple:
        return (
            await view.select_text(Probe(".stat", index=1)),
            await view.select_text(Probe("span", contains="$")),
            await view.anchors(),
            await view.page_text(),
            await view.script_blocks(),
        )

    second, missing, anchors, text, blocks = asyncio.run(run())

    assert second == "12 Oak Rd"
    assert missing == ""
    assert page.locator_calls[1] == ("span", "$")
    assert anchors == [("/home/1", "first")]
    assert text == "Off Market Redfin Estimate $1"
    assert blocks == ['{"@type": "House"}']
