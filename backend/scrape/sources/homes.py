from backend.scrape.dom import Probe
from backend.scrape.sources.base import SelectorProfile, SourceExtractor

PRIMARY = SelectorProfile(
    name="primary",
    price=(
        ".price",
        "[data-testid='price']",
        "#price",
        "[class*='price']",
        Probe("span", contains="$"),
    ),
    address=(
        ".address",
        "[data-testid='address']",
        ".property-info-address",
        "h1",
    ),
    details=(
        ".property-details",
        ".beds-baths-sqft",
        ".property-info-features",
        "[class*='bed']",
    ),
    property_type=(
        ".property-type",
        "[class*='property-type']",
    ),
)


class HomesExtractor(SourceExtractor):
    platform = "Homes.com"
    profiles = {"primary": PRIMARY}
