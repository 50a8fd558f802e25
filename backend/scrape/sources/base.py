import logging
from dataclasses import dataclass
from typing import Dict, Sequence

from backend.py_models.property import ListingRecord, PartialListing
from backend.scrape import structured
from backend.scrape.dom import DomView, ProbeLike, SoupView, first_text
from backend.scrape.errors import InsufficientData
from backend.scrape.parsing import clean_text, parse_details, parse_price

log = logging.getLogger("scrape")


@dataclass(frozen=True)
class SelectorProfile:
    """Ordered selector candidates per field; the first candidate with text wins."""
    name: str
    price: Sequence[ProbeLike]
    address: Sequence[ProbeLike]
    details: Sequence[ProbeLike]
    property_type: Sequence[ProbeLike]


class SourceExtractor:
    """
    Assemble a ListingRecord for one platform.

    Embedded structured data is read first; any field it leaves empty falls back
    to the profile's selector candidates. Subclasses add platform extras in
    ``enrich``.
    """

    platform: str = ""
    profiles: Dict[str, SelectorProfile] = {}

    def profile(self, name: str) -> SelectorProfile:
        # platforms without an alternate skin reuse the primary one
        return self.profiles.get(name) or self.profiles["primary"]

    async def extract_from_html(self, html: str, url: str, profile: str = "primary") -> ListingRecord:
        return await self.extract(SoupView(html), url, profile)

    async def extract(self, view: DomView, url: str, profile: str = "primary") -> ListingRecord:
        prof = self.profile(profile)
        sd = structured.extract_from_blocks(await view.script_blocks())
        if not sd.is_empty():
            log.debug("[%s] structured data: %s", self.platform, sd.model_dump(exclude_none=True))

        record = await self._assemble(view, url, prof, sd)
        record = await self.enrich(view, record)

        if not record.has_core_facts:
            raise InsufficientData(
                f"Unable to extract property data from {self.platform} "
                f"({prof.name} profile: price={record.price:g}, address={record.address!r}).",
                platform=self.platform,
            )
        return record

    async def _assemble(self, view: DomView, url: str, prof: SelectorProfile, sd: PartialListing) -> ListingRecord:
        price = sd.price if sd.price and sd.price > 0 else parse_price(await first_text(view, prof.price))
        address = sd.address or clean_text(await first_text(view, prof.address))

        beds, baths, sqft = sd.beds, sd.baths, sd.sqft
        if not (beds and baths and sqft):
            parsed = parse_details(await first_text(view, prof.details))
            beds = beds or parsed.beds
            baths = baths or parsed.baths
            sqft = sqft or parsed.sqft

        property_type = sd.property_type or clean_text(await first_text(view, prof.property_type)) or "unknown"

        return ListingRecord(
            price=price,
            address=address,
            beds=beds or 0,
            baths=baths or 0,
            sqft=sqft or 0,
            property_type=property_type,
            source_url=url,
        )

    async def enrich(self, view: DomView, record: ListingRecord) -> ListingRecord:
        return record
