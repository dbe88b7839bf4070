"""Number formatting and parsing for the calculator display.

Two rendering tiers: exponential for very large or very small magnitudes,
grouped fixed-point with at most 10 fraction digits otherwise. The
thresholds (1e12 and 1e-6) and the exponential shape (``1.234568e+12``,
exponent without zero padding) are part of the display contract.
"""

from __future__ import annotations

import locale
import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from keycalc.models import EvalResult

ERROR_TEXT = "Error"

_EXPONENTIAL_ABOVE = 1e12
_EXPONENTIAL_BELOW = 1e-6
_MAX_FRACTION_DIGITS = 10
_FRACTION_STEP = Decimal(1).scaleb(-_MAX_FRACTION_DIGITS)
_MANTISSA_DIGITS = 6

_NUMBER_RE = re.compile(r"-?(\d+\.?\d*|\.\d+)(e[+-]?\d+)?", re.IGNORECASE)


@dataclass(frozen=True)
class NumberStyle:
    """Digit-group separator, decimal point and group sizes for the display.

    ``grouping`` lists group sizes from the decimal point leftwards; the last
    size repeats, and a size of 0 leaves the remaining digits ungrouped
    (``(3, 2)`` gives ``1,23,45,678``). An empty group separator or an empty
    ``grouping`` disables grouping.
    """

    group: str = ","
    decimal: str = "."
    grouping: tuple[int, ...] = (3,)

    def __post_init__(self) -> None:
        if any(size < 0 for size in self.grouping):
            raise ValueError(f"Group sizes must not be negative: {self.grouping!r}")
        if len(self.decimal) != 1:
            raise ValueError(f"Decimal point must be one character: {self.decimal!r}")
        if len(self.group) > 1:
            raise ValueError(f"Group separator must be at most one character: {self.group!r}")
        if self.group == self.decimal:
            raise ValueError("Group separator and decimal point must differ")
        for ch in (self.group, self.decimal):
            if ch and (ch.isdigit() or ch in "+-eE"):
                raise ValueError(f"Separator would be read as part of a number: {ch!r}")

    @classmethod
    def from_locale(cls, name: str) -> NumberStyle:
        """Build a style from a locale's LC_NUMERIC conventions.

        Group sizes follow ``localeconv()["grouping"]``. The process locale
        is restored afterwards.
        """
        previous = locale.setlocale(locale.LC_NUMERIC)
        try:
            locale.setlocale(locale.LC_NUMERIC, name)
            conv = locale.localeconv()
        except locale.Error as e:
            raise ValueError(f"Unknown locale: {name}") from e
        finally:
            locale.setlocale(locale.LC_NUMERIC, previous)
        return cls(
            group=conv["thousands_sep"],
            decimal=conv["decimal_point"],
            grouping=_locale_grouping(conv["grouping"]),
        )

    def group_digits(self, digits: str) -> str:
        """Insert group separators into a run of integer digits."""
        if not self.group or not self.grouping:
            return digits
        groups = []
        rest = digits
        for i in range(len(digits)):
            size = self.grouping[min(i, len(self.grouping) - 1)]
            if size == 0 or len(rest) <= size:
                break
            groups.append(rest[-size:])
            rest = rest[:-size]
        groups.append(rest)
        return self.group.join(reversed(groups))


def _locale_grouping(raw: list[int]) -> tuple[int, ...]:
    # localeconv: 0 repeats the previous size, CHAR_MAX stops grouping
    sizes = []
    for size in raw:
        if size == 0:
            break
        if size == locale.CHAR_MAX:
            sizes.append(0)
            break
        sizes.append(size)
    return tuple(sizes)


DEFAULT_STYLE = NumberStyle()


def _exponential(n: float, style: NumberStyle) -> str:
    # Ties round away from zero on the exact binary value
    exact = Decimal(n)
    exp = exact.adjusted()
    rounded = exact.quantize(Decimal(1).scaleb(exp - _MANTISSA_DIGITS), rounding=ROUND_HALF_UP)
    if rounded.adjusted() > exp:
        # 9.9999995 -> 10.000000: carry into the exponent
        exp += 1
        rounded = exact.quantize(Decimal(1).scaleb(exp - _MANTISSA_DIGITS), rounding=ROUND_HALF_UP)
    mantissa = format(rounded.scaleb(-exp), "f")
    sign = "+" if exp >= 0 else "-"
    return f"{mantissa.replace('.', style.decimal)}e{sign}{abs(exp)}"


def _fixed(n: float, style: NumberStyle) -> str:
    # Ties round away from zero on the shortest decimal form
    rounded = Decimal(repr(n)).quantize(_FRACTION_STEP, rounding=ROUND_HALF_UP)
    text = format(rounded, "f")
    sign = "-" if text.startswith("-") else ""
    whole, _, fraction = text.lstrip("-").partition(".")
    fraction = fraction.rstrip("0")
    out = sign + style.group_digits(whole)
    if fraction:
        out += style.decimal + fraction
    return out


def _outside_fixed_range(magnitude: float) -> bool:
    return magnitude >= _EXPONENTIAL_ABOVE or (magnitude != 0 and magnitude < _EXPONENTIAL_BELOW)


def format_number(n: float, style: NumberStyle = DEFAULT_STYLE) -> str:
    """Render a number for the display, or ``Error`` if it is not finite."""
    n = float(n)
    if not math.isfinite(n):
        return ERROR_TEXT
    if n == 0:
        # -0.0 == 0, so this also drops the sign of negative zero
        n = 0.0
    if _outside_fixed_range(abs(n)):
        return _exponential(n, style)
    return _fixed(n, style)


def format_result(result: EvalResult, style: NumberStyle = DEFAULT_STYLE) -> str:
    """Render a tagged evaluation result; every failure shows as ``Error``."""
    if not result.ok:
        return ERROR_TEXT
    return format_number(result.value, style)


def parse_number(text: str, style: NumberStyle = DEFAULT_STYLE) -> Optional[float]:
    """Parse display text written in ``style``.

    Returns None for anything that is not a finite decimal literal, including
    ``Error``, an empty buffer and a lone ``-``.
    """
    canonical = text.replace(style.group, "") if style.group else text
    canonical = canonical.replace(style.decimal, ".")
    if not _NUMBER_RE.fullmatch(canonical):
        return None
    value = float(canonical)
    if not math.isfinite(value):
        return None
    return value


def plain_number(value: float, style: NumberStyle = DEFAULT_STYLE) -> str:
    """Shortest positional text for a finite value, ungrouped.

    Used where the result goes back into the editing buffer. Magnitudes the
    display would show in exponential form get that form here too, so the
    buffer stays short. Negative zero comes out as ``0``.
    """
    if value == 0:
        return "0"
    if _outside_fixed_range(abs(value)):
        return _exponential(value, style)
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text.replace(".", style.decimal)
