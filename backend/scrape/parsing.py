# backend/scrape/parsing.py
import re
from typing import NamedTuple, Optional

__all__ = ["parse_price", "parse_details", "parse_money", "clean_text", "Details"]

# --- number helpers ---------------------------------------------------------
_non_digits = re.compile(r"[^0-9]")
_money = re.compile(r"\$\s*(\d{1,3}(?:,\d{3})+|\d+)(\.\d+)?(?:\s*([kKmM])\b)?")
_beds = re.compile(r"(\d+)\s*(?:bed|br|bd|bedroom)", re.I)
_baths = re.compile(r"(\d+(?:\.\d+)?)\s*(?:bath|ba|bathroom)", re.I)
_sqft = re.compile(r"(\d+(?:,\d+)*)\s*(?:sqft|sq\.?\s*ft|square\s*feet)", re.I)
_spaces = re.compile(r"\s+")


class Details(NamedTuple):
    beds: int
    baths: float
    sqft: int


def parse_price(text: Optional[str]) -> int:
    """
    Keep every digit in the text and read them as one integer.
    '$1,234,567' → 1234567; anything without digits → 0.
    """
    if not text:
        return 0
    digits = _non_digits.sub("", text)
    return int(digits) if digits else 0


def parse_details(text: Optional[str]) -> Details:
    """Pull bed / bath / square-foot counts out of a free-form fact line."""
    t = text or ""
    beds = _beds.search(t)
    baths = _baths.search(t)
    sqft = _sqft.search(t)
    return Details(
        beds=int(beds.group(1)) if beds else 0,
        baths=float(baths.group(1)) if baths else 0.0,
        sqft=int(sqft.group(1).replace(",", "")) if sqft else 0,
    )


def parse_money(text: Optional[str]) -> Optional[float]:
    """First '$<amount>' in the text, honouring a trailing K/M suffix."""
    if not text:
        return None
    m = _money.search(text)
    if not m:
        return None
    val = float(m.group(1).replace(",", "") + (m.group(2) or ""))
    suf = (m.group(3) or "").lower()
    if suf == "k":
        val *= 1_000
    elif suf == "m":
        val *= 1_000_000
    return val


def clean_text(text: Optional[str]) -> str:
    if not text:
        return ""
    return _spaces.sub(" ", text).strip()


def to_number(x) -> Optional[float]:
    """Return a float from a raw number, numeric string, or QuantitativeValue-ish dict."""
    if isinstance(x, dict):
        x = x.get("value")
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, (int, float)):
        return float(x)
    s = re.sub(r"[^0-9.]", "", str(x))
    try:
        return float(s) if s else None
    except ValueError:
        return None
