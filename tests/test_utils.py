import math

import pytest

from sustaingraph.modules.utils import (
    format_number,
    format_weight,
    parse_number,
    rating_to_score,
    safe_float,
    safe_int,
    yes_no_score,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("$45.90", 45.9),
        ("$ 1 200", 1200.0),
        (" 12.5 ", 12.5),
        (7, 7.0),
        (3.25, 3.25),
    ],
)
def test_parse_number_strips_currency_and_spaces(raw, expected):
    assert parse_number(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [None, "", "   ", "n/a", "12,5kg"])
def test_parse_number_returns_nan_for_garbage(raw):
    assert math.isnan(parse_number(raw))


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("A", 4.0), ("b", 3.0), (" C ", 2.0), ("D", 1.0), ("3.5", 3.5), ("Z", 2.5), ("", 2.5), (None, 2.5)],
)
def test_rating_to_score(raw, expected):
    assert rating_to_score(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("Yes", 1.0), ("no", 0.0), ("TRUE", 1.0), ("n", 0.0), ("1", 1.0), ("0", 0.0), ("maybe", 0.5), (None, 0.5)],
)
def test_yes_no_score(raw, expected):
    assert yes_no_score(raw) == expected


def test_safe_conversions():
    assert safe_int("4.7") == 4
    assert safe_int("", default=None) is None
    assert safe_int(float("nan"), default=-1) == -1
    assert safe_float("1.5") == 1.5
    assert safe_float("abc") is None


def test_formatters():
    assert format_number(3.14159, precision=3) == "3.142"
    assert format_number(None) == "—"
    assert format_number(float("nan"), placeholder="n/a") == "n/a"
    assert format_weight(0.5163) == "51.6%"
    assert format_weight("x") == "—"
