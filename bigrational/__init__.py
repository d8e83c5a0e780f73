"""Exact rational arithmetic over unbounded integers."""

from .decimals import NON_TERMINATING_FRACTION_DIGITS
from .errors import FormatError
from .rational import (
    Rational,
    as_rational_array,
    parse,
    rationalize,
    zeros,
    zeros_like,
)

__all__ = [
    "Rational",
    "FormatError",
    "NON_TERMINATING_FRACTION_DIGITS",
    "parse",
    "rationalize",
    "as_rational_array",
    "zeros",
    "zeros_like",
]
