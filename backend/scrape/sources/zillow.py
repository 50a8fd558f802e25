from backend.scrape.dom import Probe
from backend.scrape.sources.base import SelectorProfile, SourceExtractor

PRIMARY = SelectorProfile(
    name="primary",
    price=(
        "[data-testid='price']",
        ".ds-price",
        "[data-test='property-price']",
        ".price",
        "[class*='price']",
        Probe("span", contains="$"),
    ),
    address=(
        "[data-testid='address']",
        ".ds-address-container",
        ".address",
        "h1",
        "[class*='address']",
    ),
    details=(
        "[data-testid='bed-bath-beyond']",
        ".ds-bed-bath-living-area",
        ".bed-bath-beyond",
        "[class*='bed']",
        "[class*='bath']",
    ),
    property_type=(
        "[data-testid='property-type']",
        ".ds-property-type",
        ".property-type",
        "[class*='property-type']",
    ),
)

# Zillow A/B tests its detail skin; this ordering favours the newer heading-based markup.
ALTERNATE = SelectorProfile(
    name="alternate",
    price=(
        "span[data-testid='price']",
        ".ds-price",
        "h3[data-testid='price']",
        ".price",
        Probe("span", contains="$"),
        "[class*='price']",
    ),
    address=(
        "h1[data-testid='address']",
        ".ds-address-container",
        "h1",
        ".address",
    ),
    details=(
        "[data-testid='bed-bath-beyond']",
        ".ds-bed-bath-living-area",
        ".bed-bath-beyond",
        "[data-testid='bed-bath-item']",
        "[class*='bed']",
    ),
    property_type=(
        "[data-testid='property-type']",
        ".ds-property-type",
        ".property-type",
    ),
)


class ZillowExtractor(SourceExtractor):
    platform = "Zillow"
    profiles = {"primary": PRIMARY, "alternate": ALTERNATE}
