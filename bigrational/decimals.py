"""Decimal string codec for :class:`~bigrational.rational.Rational` values."""
from __future__ import annotations

import logging
import numbers
import re
from typing import TYPE_CHECKING, Optional, Tuple

from .errors import FormatError

if TYPE_CHECKING:  # pragma: no cover - import cycle only matters to type checkers
    from .rational import Rational

LOG = logging.getLogger(__name__)

# Fraction digits used when the decimal expansion never terminates.
NON_TERMINATING_FRACTION_DIGITS = 10

_DECIMAL_PATTERN = re.compile(r"(-?[0-9]+)(?:\.([0-9]+))?")


def parse_decimal(text: str) -> Tuple[int, int]:
    """Split a decimal literal such as ``-12.50`` into ``(numerator, denominator)``.

    The pair is not reduced; callers normalise it by building a
    :class:`Rational`. Anything other than an optional minus sign, one or more
    ASCII digits and an optional ``.`` followed by one or more digits raises
    :class:`FormatError`.
    """
    if not isinstance(text, str):
        raise TypeError(f"decimal literal must be a string, got {type(text)!r}")
    match = _DECIMAL_PATTERN.fullmatch(text)
    if match is None:
        raise FormatError(text)
    integer_digits, fraction_digits = match.groups()
    if fraction_digits is None:
        return int(integer_digits), 1
    return int(integer_digits + fraction_digits), 10 ** len(fraction_digits)


def _check_digits(digits: int) -> int:
    if isinstance(digits, bool) or not isinstance(digits, numbers.Integral):
        raise TypeError(f"digits must be an integer, got {type(digits)!r}")
    if digits < 0:
        raise ValueError("digits must be >= 0")
    return int(digits)


def to_string_as_fixed(value: "Rational", digits: int) -> str:
    """Render *value* with exactly *digits* digits after the decimal point.

    Rounding is half away from zero. For ``digits > 0`` the magnitude is
    shifted by one before scaling so that the rounded integer always has more
    than *digits* characters; a carry produced by rounding (``0.999`` to
    ``1.00``) then lands in the integer part without special casing.
    """
    digits = _check_digits(digits)
    if digits == 0:
        return str(value.round().numerator)

    scale = 10 ** digits
    scaled = ((abs(value) + 1) * scale).round().numerator
    integer_part = scaled // scale - 1
    fraction_part = str(scaled)[-digits:]
    sign = "-" if value.is_negative() else ""
    return f"{sign}{integer_part}.{fraction_part}"


def terminating_fraction_digits(value: "Rational") -> Optional[int]:
    """Return how many fraction digits represent *value* exactly, or ``None``.

    Dividing by 2 or 5 adds a bounded number of decimal digits, so the
    expansion terminates once those factors are removed from the denominator
    and what is left divides the numerator.
    """
    denominator = value.denominator
    fraction_digits = 0
    for factor in (2, 5):
        while denominator % factor == 0:
            denominator //= factor
            fraction_digits += 1
    if value.numerator % denominator != 0:
        return None
    return fraction_digits


def to_decimal_string(value: "Rational") -> str:
    """Render *value* in its shortest decimal form.

    Non-terminating expansions are cut at
    :data:`NON_TERMINATING_FRACTION_DIGITS` digits (rounded), so the result is
    only an approximation for them.
    """
    if value.is_integer():
        return to_string_as_fixed(value, 0)

    fraction_digits = terminating_fraction_digits(value)
    if fraction_digits is None:
        LOG.debug(
            "%s has no terminating decimal expansion, rounding to %d digits",
            value,
            NON_TERMINATING_FRACTION_DIGITS,
        )
        fraction_digits = NON_TERMINATING_FRACTION_DIGITS

    rendered = to_string_as_fixed(value, fraction_digits)
    if "." in rendered:
        rendered = rendered.rstrip("0").rstrip(".")
    return rendered


__all__ = [
    "NON_TERMINATING_FRACTION_DIGITS",
    "parse_decimal",
    "terminating_fraction_digits",
    "to_decimal_string",
    "to_string_as_fixed",
]
