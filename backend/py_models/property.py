from pydantic import BaseModel, Field
from typing import List, Literal, Optional

MarketStatus = Literal["active", "off-market", "sold", "unknown"]


class ComparableListing(BaseModel):
    price: float = Field(..., gt=0, description="Numeric USD price")
    address: Optional[str] = None
    beds: Optional[int] = None
    baths: Optional[float] = None
    sqft: Optional[int] = None
    url: Optional[str] = None


class PartialListing(BaseModel):
    """Whatever a single extraction layer managed to find; every field optional."""
    price: Optional[float] = None
    address: Optional[str] = None
    beds: Optional[int] = None
    baths: Optional[float] = None
    sqft: Optional[int] = None
    property_type: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.price or self.address)


class ListingRecord(BaseModel):
    price: float = Field(0, ge=0, description="Numeric USD price, 0 when unknown")
    address: str = ""
    beds: int = Field(0, ge=0)
    baths: float = Field(0, ge=0)
    sqft: int = Field(0, ge=0)
    property_type: str = "unknown"
    source_url: str
    market_status: MarketStatus = "unknown"
    valuation_estimate: Optional[float] = None
    valuation_estimate_note: Optional[str] = None
    last_sold_price: Optional[float] = None
    last_sold_date: Optional[str] = None
    comparable_listings: List[ComparableListing] = Field(default_factory=list)

    @property
    def has_core_facts(self) -> bool:
        # price == 0 / address == "" mean the tier found nothing usable
        return self.price > 0 and bool(self.address.strip())


class ScrapeResponse(BaseModel):
    success: bool
    data: Optional[ListingRecord] = None
    error: Optional[str] = None
    platform: Optional[str] = None
    tiers: List[str] = Field(default_factory=list)
