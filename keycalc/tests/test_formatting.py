"""Tests for display formatting and buffer parsing."""

import locale
import math

import pytest

from keycalc.formatting import (
    DEFAULT_STYLE,
    ERROR_TEXT,
    NumberStyle,
    format_number,
    format_result,
    parse_number,
    plain_number,
)
from keycalc.models import EvalResult, EvalStatus

GERMAN = NumberStyle(group=".", decimal=",")


# --- Error and zero ---

@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_is_error(value):
    assert format_number(value) == "Error"


def test_negative_zero_is_zero():
    assert format_number(-0.0) == "0"
    assert format_number(0.0) == "0"


def test_failed_result_is_error():
    assert format_result(EvalResult.failure(EvalStatus.DIVISION_BY_ZERO)) == ERROR_TEXT
    assert format_result(EvalResult.failure(EvalStatus.MALFORMED)) == ERROR_TEXT


def test_ok_result_formats_value():
    assert format_result(EvalResult.success(14.0)) == "14"


# --- Fixed notation ---

def test_integer_has_no_fraction():
    assert format_number(15.0) == "15"


def test_grouping():
    assert format_number(1234.5) == "1,234.5"
    assert format_number(-1234567.25) == "-1,234,567.25"


def test_float_noise_is_trimmed():
    assert format_number(0.1 + 0.2) == "0.3"


def test_at_most_ten_fraction_digits():
    assert format_number(2 / 3) == "0.6666666667"


def test_just_below_upper_threshold_is_fixed():
    assert format_number(999_999_999_999.0) == "999,999,999,999"


def test_lower_threshold_is_fixed():
    assert format_number(1e-6) == "0.000001"
    assert format_number(-1e-6) == "-0.000001"


# --- Exponential notation ---

def test_upper_threshold_is_exponential():
    assert format_number(1e12) == "1.000000e+12"


def test_large_value_mantissa_rounds_to_six_digits():
    assert format_number(1234567890123.0) == "1.234568e+12"


def test_small_value_exponent_is_not_padded():
    assert format_number(1e-7) == "1.000000e-7"
    assert format_number(-2.5e-9) == "-2.500000e-9"


# --- Rounding ties go away from zero ---

def test_fixed_tie_rounds_up():
    """1 ÷ 2048 = 0.00048828125 exactly; the 11th digit is a tie."""
    assert format_number(1 / 2048) == "0.0004882813"
    assert format_number(-1 / 2048) == "-0.0004882813"


def test_exponential_tie_rounds_up():
    assert format_number(1000000500000.0) == "1.000001e+12"
    assert format_number(-1000000500000.0) == "-1.000001e+12"


def test_exponential_mantissa_carry():
    assert format_number(9999999500000.0) == "1.000000e+13"
    assert format_number(9.99999996e-8) == "1.000000e-7"


# --- Styles ---

def test_german_style_fixed():
    assert format_number(1234.5, GERMAN) == "1.234,5"


def test_german_style_exponential():
    assert format_number(1234567890123.0, GERMAN) == "1,234568e+12"


def test_no_grouping_style():
    assert format_number(1234567.5, NumberStyle(group="")) == "1234567.5"


def test_empty_grouping_disables_grouping():
    assert format_number(1234567.5, NumberStyle(grouping=())) == "1234567.5"


def test_indian_grouping():
    style = NumberStyle(grouping=(3, 2))
    assert format_number(12345678.5, style) == "1,23,45,678.5"
    assert format_number(-123.25, style) == "-123.25"


def test_grouping_stops_at_zero_size():
    assert format_number(12345678.0, NumberStyle(grouping=(3, 0))) == "12345,678"


def test_style_rejects_negative_group_size():
    with pytest.raises(ValueError):
        NumberStyle(grouping=(3, -1))


def test_style_from_locale_carries_grouping(monkeypatch):
    monkeypatch.setattr(locale, "setlocale", lambda category, name=None: "C")
    monkeypatch.setattr(locale, "localeconv", lambda: {
        "thousands_sep": ",",
        "decimal_point": ".",
        "grouping": [3, 2, 0],
    })
    style = NumberStyle.from_locale("hi_IN.UTF-8")
    assert style.grouping == (3, 2)
    assert format_number(1234567.0, style) == "12,34,567"


def test_style_rejects_equal_separators():
    with pytest.raises(ValueError):
        NumberStyle(group=".", decimal=".")


@pytest.mark.parametrize("decimal", ["", "..", "5", "-", "e"])
def test_style_rejects_bad_decimal_point(decimal):
    with pytest.raises(ValueError):
        NumberStyle(group=",", decimal=decimal)


def test_style_from_c_locale():
    style = NumberStyle.from_locale("C")
    assert style.decimal == "."
    assert style.group == ""
    assert style.grouping == ()


def test_style_from_unknown_locale():
    with pytest.raises(ValueError, match="Unknown locale"):
        NumberStyle.from_locale("xx_NOWHERE.bogus")


# --- Parsing the buffer ---

def test_parse_plain_and_partial_numbers():
    assert parse_number("42") == 42.0
    assert parse_number("0.") == 0.0
    assert parse_number("-3.5") == -3.5


def test_parse_grouped_display():
    assert parse_number("1,234.5") == 1234.5


def test_parse_exponential_display():
    assert parse_number("1.234568e+12") == pytest.approx(1.234568e12)
    assert parse_number("1.000000e-7") == pytest.approx(1e-7)


def test_parse_german_display():
    assert parse_number("1.234,5", GERMAN) == 1234.5


@pytest.mark.parametrize("text", ["", "-", "Error", "nan", "inf", "1e999", "--5", "1.2.3"])
def test_parse_rejects_non_numbers(text):
    assert parse_number(text) is None


def test_formatted_values_parse_back():
    for value in (0.0, 1234.5, -7.25, 5e13, 3e-9):
        assert parse_number(format_number(value)) == pytest.approx(value)


# --- Plain rendering (percent) ---

def test_plain_number():
    assert plain_number(0.5) == "0.5"
    assert plain_number(0.05) == "0.05"
    assert plain_number(1.0) == "1"
    assert plain_number(-12.34) == "-12.34"


def test_plain_number_keeps_long_values_positional():
    assert plain_number(0.00000123) == "0.00000123"
    assert plain_number(123456789012.5) == "123456789012.5"


def test_plain_number_exponential_outside_fixed_range():
    assert plain_number(1e-7) == "1.000000e-7"
    assert plain_number(1e22) == "1.000000e+22"
    assert plain_number(9.999958e291) == "9.999958e+291"
    assert parse_number(plain_number(9.999958e291)) == pytest.approx(9.999958e291)


def test_plain_number_negative_zero():
    assert plain_number(-0.0) == "0"


def test_plain_number_uses_style_decimal():
    assert plain_number(0.25, GERMAN) == "0,25"
    assert plain_number(0.25, DEFAULT_STYLE) == "0.25"
