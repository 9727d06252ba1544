"""Tests for cell coercion and number display."""

import math

import pytest

from curvelab.numeric import format_number, parse_number


@pytest.mark.parametrize("value, expected", [
    ("3.5", 3.5),
    ("  4 ", 4.0),
    ("1,5", 1.5),
    ("-3e2", -300.0),
    (".5", 0.5),
    ("5.", 5.0),
    (7, 7.0),
    (2.5, 2.5),
])
def test_parse_valid(value, expected):
    assert parse_number(value) == expected


@pytest.mark.parametrize("value", [
    None, "", "   ", "abc", "12abc", "nan", "inf", "-Infinity", "1e999",
    "1_000", "1,2,3", True, float("nan"), float("inf"),
])
def test_parse_invalid(value):
    assert parse_number(value) is None


def test_parse_returns_finite_float():
    """Everything that parses is a finite float."""
    for raw in ["0", "1e300", "-0.0", "42"]:
        result = parse_number(raw)
        assert isinstance(result, float)
        assert math.isfinite(result)


@pytest.mark.parametrize("value, expected", [
    (None, "—"),
    (float("nan"), "—"),
    ("not a number", "—"),
    (float("inf"), "inf"),
    (float("-inf"), "-inf"),
    (3.0, "3"),
    (2.5, "2.5"),
    (0, "0"),
    (1234567.0, "1.23456700000e+06"),
    (1e-7, "1.00000000000e-07"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_format_precision():
    assert format_number(1 / 3, precision=4) == "0.3333"


def test_parse_int_past_string_conversion_limit():
    assert parse_number(10 ** 5000) is None
