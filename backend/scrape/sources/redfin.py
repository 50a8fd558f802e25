import logging
import re

from backend.py_models.property import ListingRecord
from backend.scrape.dom import DomView, Probe
from backend.scrape.sources import extras
from backend.scrape.sources.base import SelectorProfile, SourceExtractor

log = logging.getLogger("scrape")

# Redfin detail URLs look like /IL/Springfield/1-Main-St-62704/home/12345678
LISTING_PATH = re.compile(r"/home/\d+")

PRIMARY = SelectorProfile(
    name="primary",
    price=(
        Probe(".home-main-stats .statsValue", index=0),
        ".price",
        "[class*='price']",
        Probe("span", contains="$"),
    ),
    address=(
        ".street-address",
        Probe(".home-main-stats .statsValue", index=1),
        ".address",
        "h1",
    ),
    details=(
        ".home-main-stats",
        ".bed-bath-beyond",
        "[class*='bed']",
    ),
    property_type=(
        ".PropertyType",
        ".property-type",
    ),
)

# Newer "above the fold" skin driven by data-rf-test-id attributes.
ALTERNATE = SelectorProfile(
    name="alternate",
    price=(
        "[data-rf-test-id='abp-price'] .statsValue",
        "[data-rf-test-id='abp-price']",
        ".price-section .price",
        "[class*='price']",
    ),
    address=(
        "[data-rf-test-id='abp-streetLine']",
        ".full-address",
        "h1.address",
        "h1",
    ),
    details=(
        ".home-main-stats-variant",
        ".stats-container",
        "[data-rf-test-id='abp-beds']",
        ".home-main-stats",
    ),
    property_type=(
        "[data-rf-test-id='abp-propertyType']",
        ".keyDetail .content",
        ".PropertyType",
    ),
)


class RedfinExtractor(SourceExtractor):
    platform = "Redfin"
    profiles = {"primary": PRIMARY, "alternate": ALTERNATE}

    async def enrich(self, view: DomView, record: ListingRecord) -> ListingRecord:
        text = await view.page_text()
        status = extras.market_status(text)
        estimate, note = extras.valuation(text, "Redfin")
        sold_price, sold_date = extras.last_sale(text)
        comps = extras.comparables(await view.anchors(), record.source_url, LISTING_PATH)

        price = record.price
        if status == "off-market" and price <= 0:
            # off-market pages carry no list price; show the estimate, then the last sale
            price = estimate or sold_price or 0
            log.debug("[redfin] off-market, price fallback → %s", price)

        return record.model_copy(update={
            "price": price,
            "market_status": status,
            "valuation_estimate": estimate,
            "valuation_estimate_note": note,
            "last_sold_price": sold_price,
            "last_sold_date": sold_date,
            "comparable_listings": comps,
        })
