from __future__ import annotations

import pytest

from backend.scrape.parsing import clean_text, parse_details, parse_money, parse_price, to_number


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("$1,234,567", 1234567),
        ("Contact for price", 0),
        ("", 0),
        (None, 0),
        ("  $ 350,000  ", 350000),
    ],
)
def test_parse_price_keeps_only_digits(text: str | None, expected: int) -> None:
    assert parse_price(text) == expected


def test_parse_details_reads_beds_baths_and_area() -> None:
    d = parse_details("3 bed, 2.5 bath, 1,800 sqft")
    assert (d.beds, d.baths, d.sqft) == (3, 2.5, 1800)


def test_parse_details_defaults_to_zero_without_matches() -> None:
    d = parse_details("Studio")
    assert (d.beds, d.baths, d.sqft) == (0, 0, 0)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("4 bd | 3 ba | 2,100 sq ft", (4, 3.0, 2100)),
        ("2 Bedrooms 1 Bathroom 950 square feet", (2, 1.0, 950)),
        ("5 BR 4 BA", (5, 4.0, 0)),
    ],
)
def test_parse_details_site_variants(text: str, expected: tuple) -> None:
    assert tuple(parse_details(text)) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Redfin Estimate $512,300", 512300.0),
        ("+$45K since sold", 45000.0),
        ("$1.2M", 1200000.0),
        ("$950000 list", 950000.0),
        ("no price here", None),
    ],
)
def test_parse_money(text: str, expected: float | None) -> None:
    assert parse_money(text) == expected


def test_to_number_handles_quantitative_values() -> None:
    assert to_number({"value": "1,800", "unitCode": "FTK"}) == 1800.0
    assert to_number("2.5") == 2.5
    assert to_number(True) is None
    assert to_number({"unitCode": "FTK"}) is None


def test_clean_text_collapses_whitespace() -> None:
    assert clean_text("  1 Main St,\n   Springfield ") == "1 Main St, Springfield"
