import pytest

from trono.display.format import (
    format_distance,
    format_price,
    format_rating,
    format_short_address,
    parse_address,
)


@pytest.mark.parametrize(
    "meters, expected",
    [
        (0, "10m"),
        (4, "10m"),
        (73, "70m"),
        (85, "90m"),
        (95, "100m"),
        (123.7, "100m"),
        (125, "150m"),
        (500, "500m"),
        (974, "950m"),
        (999, "950m"),
        (1000, "1.0km"),
        (1500, "1.5km"),
        (1999, "2.0km"),
        (2345, "2.3km"),
    ],
)
def test_format_distance_tiers(meters, expected):
    assert format_distance(meters) == expected


def test_format_distance_dampens_small_fluctuations():
    assert {format_distance(m) for m in (72, 73, 74)} == {"70m"}


def test_format_price():
    assert format_price(0) == "Gratis"
    assert format_price(5) == "5 Bs"
    assert format_price(10.5) == "11 Bs"
    assert format_price(0, free_label="Free") == "Free"
    assert format_price(3.2, currency="USD") == "3 USD"


def test_format_rating_always_one_decimal():
    assert format_rating(4.567) == "4.6"
    assert format_rating(3) == "3.0"
    assert format_rating(0.25) == "0.3"


def test_format_rating_without_votes_uses_placeholder():
    assert format_rating(4.0, vote_count=0) == "—"
    assert format_rating(4.0, vote_count=0, no_rating_label="n/a") == "n/a"
    assert format_rating(4.0, vote_count=3) == "4.0"


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_numbers_render_placeholders(value):
    assert format_distance(value) == "-"
    assert format_price(value) == "-"
    assert format_rating(value) == "—"
    assert format_rating(value, no_rating_label="n/a") == "n/a"


def test_parse_address_full_hierarchy():
    parsed = parse_address(" Main St 123 , Springfield, IL, USA ")
    assert parsed.street == "Main St 123"
    assert parsed.city == "Springfield"
    assert parsed.state == "IL"
    assert parsed.country == "USA"
    assert parsed.postal_code is None
    assert parsed.full == " Main St 123 , Springfield, IL, USA "


def test_parse_address_partial_and_empty():
    assert parse_address("Only Street").city is None
    assert parse_address(None).full == ""
    assert parse_address("").street is None
    assert parse_address(",, ,").street is None


def test_format_short_address():
    assert format_short_address("Main St 123, Springfield, IL, USA") == "Main St 123, Springfield"
    assert format_short_address("Main St 123") == "Main St 123"
    assert format_short_address(None, "No address") == "No address"
    assert format_short_address("") == "Sin dirección"
    assert format_short_address(" , ") == " , "
