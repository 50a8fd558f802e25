"""
Embedded structured-data (JSON-LD) extraction.

Listing pages usually embed one or more ``<script type="application/ld+json">``
blocks describing the residence / product / offer. These are schema-driven and
survive visual redesigns far better than CSS selectors, so they are read first.

Every probe is independent and optional: a block that fails to parse, or a node
missing a key, simply contributes nothing.
"""
import json
import logging
from typing import Iterable, Iterator, Optional

from bs4 import BeautifulSoup

from backend.py_models.property import PartialListing
from backend.scrape.parsing import clean_text, to_number

log = logging.getLogger("scrape")

__all__ = ["extract", "extract_from_blocks", "script_blocks"]

LISTING_TYPES = (
    "residence",
    "house",
    "apartment",
    "condominium",
    "townhouse",
    "accommodation",
    "realestatelisting",
    "product",
    "place",
    "offer",
)

_ADDRESS_PARTS = ("streetAddress", "addressLocality", "addressRegion", "postalCode")


def script_blocks(soup: BeautifulSoup) -> list[str]:
    out = []
    for s in soup.select("script[type='application/ld+json']"):
        raw = s.string or s.get_text() or ""
        if raw.strip():
            out.append(raw)
    return out


def extract(soup: BeautifulSoup) -> PartialListing:
    return extract_from_blocks(script_blocks(soup))


def extract_from_blocks(blocks: Iterable[str]) -> PartialListing:
    """
    Return the first listing-like node with a usable price or address.
    When several nodes qualify the first one in document order wins, even if a
    later one is more complete.
    """
    for node in _candidates(blocks):
        partial = _from_node(node)
        if (partial.price or 0) > 0 or partial.address:
            return partial
    return PartialListing()


def _candidates(blocks: Iterable[str]) -> Iterator[dict]:
    for raw in blocks:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            log.debug("skipping malformed ld+json block: %s", e)
            continue
        for node in _flatten(data):
            if _is_listing_type(node.get("@type")):
                yield node


def _flatten(obj) -> Iterator[dict]:
    # top-level arrays and @graph containers both hold sibling nodes
    if isinstance(obj, list):
        for it in obj:
            yield from _flatten(it)
    elif isinstance(obj, dict):
        yield obj
        graph = obj.get("@graph")
        if isinstance(graph, list):
            yield from _flatten(graph)
        main = obj.get("mainEntity") or obj.get("about")
        if isinstance(main, (dict, list)):
            yield from _flatten(main)


def _is_listing_type(typ) -> bool:
    names = typ if isinstance(typ, list) else [typ]
    for name in names:
        low = str(name or "").lower()
        if low and any(t in low for t in LISTING_TYPES):
            return True
    return False


def _price(node: dict) -> Optional[float]:
    offers = node.get("offers")
    if isinstance(offers, list):
        offers = offers[0] if offers else None
    for host in (offers, node):
        if not isinstance(host, dict):
            continue
        for key in ("price", "lowPrice"):
            if host.get(key) is not None:
                val = to_number(host.get(key))
                if val is not None:
                    return val
    return None


def _address(node: dict) -> Optional[str]:
    addr = node.get("address")
    if isinstance(addr, str):
        return clean_text(addr) or None
    if not isinstance(addr, dict):
        return None
    parts = []
    for key in _ADDRESS_PARTS:
        val = addr.get(key)
        if isinstance(val, dict):
            val = val.get("name")
        val = clean_text(str(val)) if val is not None else ""
        if val:
            parts.append(val)
    return ", ".join(parts) or None


def _first_int(node: dict, *keys) -> Optional[int]:
    for key in keys:
        val = to_number(node.get(key))
        if val is not None:
            return int(val)
    return None


def _type_label(node: dict) -> Optional[str]:
    for key in ("category", "additionalType"):
        val = node.get(key)
        if isinstance(val, str) and val.strip():
            return val.strip()
    typ = node.get("@type")
    if isinstance(typ, list):
        typ = next((t for t in typ if isinstance(t, str)), None)
    return typ if isinstance(typ, str) and typ else None


def _from_node(node: dict) -> PartialListing:
    baths = None
    for key in ("numberOfBathroomsTotal", "numberOfFullBathrooms", "numberOfBathrooms"):
        baths = to_number(node.get(key))
        if baths is not None:
            break
    return PartialListing(
        price=_price(node),
        address=_address(node),
        beds=_first_int(node, "numberOfBedrooms"),
        baths=baths,
        sqft=_first_int(node, "floorSize"),
        property_type=_type_label(node),
    )
