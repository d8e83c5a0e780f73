"""Exact rational numbers over unbounded integers with NumPy interoperability."""
from __future__ import annotations

import math
import numbers
import operator
from fractions import Fraction
from typing import Any, Optional, Tuple, Union

from . import decimals

try:  # NumPy is optional but recommended for array workflows.
    import numpy as np  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - optional dependency may be absent.
    np = None  # type: ignore

NumberLike = Union["Rational", Fraction, numbers.Real, str]


def _ensure_int(value: Any, *, name: str) -> int:
    """Convert *value* to ``int`` when it represents an integer."""
    if isinstance(value, numbers.Integral):
        return int(value)
    raise TypeError(f"{name} must be an integer, got {type(value)!r}")


class Rational:
    """Exact fraction kept in lowest terms with a positive denominator.

    Instances are immutable. Every operation returns a new, normalised value,
    so two instances are equal exactly when their numerators and denominators
    are.
    """

    __slots__ = ("_numerator", "_denominator")
    __array_priority__ = 1000.0  # Prefer Rational semantics in NumPy expressions.

    def __init__(
        self,
        numerator: Union[int, numbers.Integral] = 0,
        denominator: Union[int, numbers.Integral] = 1,
    ) -> None:
        num = _ensure_int(numerator, name="numerator")
        den = _ensure_int(denominator, name="denominator")
        self._numerator, self._denominator = self._normalize(num, den)

    @classmethod
    def _from_normalized(cls, numerator: int, denominator: int) -> "Rational":
        # Caller guarantees lowest terms and a positive denominator.
        value = cls.__new__(cls)
        value._numerator = numerator
        value._denominator = denominator
        return value

    # ------------------------------------------------------------------
    # Constructors
    @classmethod
    def parse(cls, text: str) -> "Rational":
        """Parse a decimal literal such as ``"-0.25"`` into an exact value."""
        numerator, denominator = decimals.parse_decimal(text)
        return cls(numerator, denominator)

    @classmethod
    def from_float(cls, value: float) -> "Rational":
        """Return the exact value of the binary float *value*."""
        if isinstance(value, bool):  # bool is a subclass of int; treat explicitly.
            return cls(int(value), 1)
        value = float(value)
        if math.isnan(value) or math.isinf(value):
            raise ValueError("cannot convert NaN or infinity to Rational")
        numerator, denominator = value.as_integer_ratio()
        return cls(numerator, denominator)

    @classmethod
    def from_fraction(cls, value: Fraction) -> "Rational":
        """Create a :class:`Rational` from :class:`fractions.Fraction`."""
        return cls._from_normalized(value.numerator, value.denominator)

    @classmethod
    def rationalize(cls, value: NumberLike) -> "Rational":
        """Coerce a numeric-like value into :class:`Rational`."""
        if isinstance(value, Rational):
            return value
        if isinstance(value, Fraction):
            return cls.from_fraction(value)
        if isinstance(value, numbers.Integral):
            return cls(int(value), 1)
        if isinstance(value, str):
            return cls.parse(value)
        if np is not None and isinstance(value, np.generic):
            return cls.rationalize(value.item())
        if isinstance(value, numbers.Real):
            return cls.from_float(float(value))
        raise TypeError(f"Cannot convert {type(value)!r} to Rational")

    # ------------------------------------------------------------------
    # Properties and helpers
    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    def is_integer(self) -> bool:
        return self._denominator == 1

    def is_negative(self) -> bool:
        return self._numerator < 0

    def is_nan(self) -> bool:
        return False

    def is_infinite(self) -> bool:
        return False

    def as_fraction(self) -> Fraction:
        """Return a :class:`Fraction` with the same value."""
        return Fraction(self._numerator, self._denominator)

    def limit_denominator(self, max_denominator: int = 10**6) -> "Rational":
        """Return the closest :class:`Rational` whose denominator is at most *max_denominator*."""
        if max_denominator < 1:
            raise ValueError("max_denominator must be >= 1")
        fraction = self.as_fraction().limit_denominator(max_denominator)
        return Rational.from_fraction(fraction)

    # ------------------------------------------------------------------
    # Rounding
    def truncate(self) -> "Rational":
        """Discard the fractional digits, rounding toward zero."""
        quotient = abs(self._numerator) // self._denominator
        if self._numerator < 0:
            quotient = -quotient
        return Rational._from_normalized(quotient, 1)

    def floor(self) -> "Rational":
        """Greatest integral value no greater than this one."""
        if self.is_integer():
            return self.truncate()
        if self.is_negative():
            return self.truncate() - _ONE
        return self.truncate()

    def ceil(self) -> "Rational":
        """Least integral value no smaller than this one."""
        if self.is_integer():
            return self.truncate()
        if self.is_negative():
            return self.truncate()
        return self.truncate() + _ONE

    def round(self) -> "Rational":
        """Closest integral value, rounding ties away from zero.

        ``Rational(7, 2).round() == 4`` and ``Rational(-7, 2).round() == -4``.
        """
        magnitude = abs(self)
        if (magnitude * _TEN) % _TEN < _FIVE:
            rounded = magnitude.truncate()
        else:
            rounded = magnitude.truncate() + _ONE
        return -rounded if self.is_negative() else rounded

    def clamp(self, lower_limit: NumberLike, upper_limit: NumberLike) -> "Rational":
        """Restrict this value to ``[lower_limit, upper_limit]``."""
        lower = self._coerce_scalar(lower_limit)
        upper = self._coerce_scalar(upper_limit)
        if self < lower:
            return lower
        if self > upper:
            return upper
        return self

    # ------------------------------------------------------------------
    # Numeric protocol
    def __float__(self) -> float:
        try:
            return self._numerator / self._denominator
        except OverflowError:
            # Too large for a double.
            return math.inf if self._numerator > 0 else -math.inf

    def __int__(self) -> int:
        return self.truncate()._numerator

    def __bool__(self) -> bool:
        return self._numerator != 0

    def __trunc__(self) -> int:
        return self.truncate()._numerator

    def __floor__(self) -> int:
        return self.floor()._numerator

    def __ceil__(self) -> int:
        return self.ceil()._numerator

    def __round__(self, ndigits: Optional[int] = None) -> Union[int, "Rational"]:
        if ndigits is None:
            return self.round()._numerator
        shift = Rational(10) ** ndigits
        return (self * shift).round() / shift

    # ------------------------------------------------------------------
    # Representation
    def __repr__(self) -> str:
        return f"Rational({self._numerator}, {self._denominator})"

    def __str__(self) -> str:
        if self._denominator == 1:
            return str(self._numerator)
        return f"{self._numerator}/{self._denominator}"

    def __format__(self, format_spec: str) -> str:
        if format_spec in ("", "r", "R"):
            return str(self)
        if format_spec == "d":
            return self.to_decimal_string()
        if (
            format_spec.startswith(".")
            and format_spec.endswith("f")
            and format_spec[1:-1].isdigit()
        ):
            return self.to_string_as_fixed(int(format_spec[1:-1]))
        try:
            return format(float(self), format_spec)
        except (ValueError, TypeError):
            return format(str(self), format_spec)

    def to_decimal_string(self) -> str:
        """Shortest decimal rendering; non-terminating values are approximated."""
        return decimals.to_decimal_string(self)

    def to_string_as_fixed(self, fraction_digits: int) -> str:
        """Exact decimal rendering with *fraction_digits* digits after the point."""
        return decimals.to_string_as_fixed(self, fraction_digits)

    def to_string_as_exponential(self, fraction_digits: int) -> str:
        return format(float(self), f".{fraction_digits}e")

    def to_string_as_precision(self, precision: int) -> str:
        return format(float(self), f".{precision}g")

    # ------------------------------------------------------------------
    # Internal helpers
    def _coerce_scalar(self, value: Any) -> "Rational":
        if isinstance(value, Rational):
            return value
        if isinstance(value, Fraction):
            return Rational.from_fraction(value)
        if isinstance(value, numbers.Integral):
            return Rational(int(value), 1)
        if np is not None and isinstance(value, np.generic):  # NumPy scalars
            return self._coerce_scalar(value.item())
        if isinstance(value, numbers.Real):
            return Rational.from_float(float(value))
        raise TypeError(f"Cannot interpret {type(value)!r} as Rational")

    def _vectorize_iterable(self, iterable, func):
        mapped = [func(item) for item in iterable]
        if np is not None:
            return np.array(mapped, dtype=object)
        if isinstance(iterable, tuple):
            return tuple(mapped)
        return mapped

    def _binary_operation(self, other: Any, op):
        if np is not None and isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: op(self, self._coerce_scalar(x)),
                otypes=[object],
            )
            return vectorised(other)
        if isinstance(other, (list, tuple)):
            return self._vectorize_iterable(
                other,
                lambda x: op(self, self._coerce_scalar(x)),
            )
        other_rat = self._coerce_scalar(other)
        return op(self, other_rat)

    def _reflected_operation(self, other: Any, op):
        if np is not None and isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: op(self._coerce_scalar(x), self),
                otypes=[object],
            )
            return vectorised(other)
        if isinstance(other, (list, tuple)):
            return self._vectorize_iterable(
                other,
                lambda x: op(self._coerce_scalar(x), self),
            )
        return op(self._coerce_scalar(other), self)

    @staticmethod
    def _normalize(num: int, den: int) -> Tuple[int, int]:
        if den == 0:
            raise ZeroDivisionError("denominator must be non-zero")
        if num == 0:
            return 0, 1
        if den < 0:
            num, den = -num, -den
        gcd = math.gcd(num, den)
        if gcd != 1:
            num //= gcd
            den //= gcd
        return num, den

    def _coerce_power(self, value: Any) -> int:
        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, Rational):
            if not value.is_integer():
                raise ValueError("Exponent must be an integer")
            return value.numerator
        if np is not None and isinstance(value, np.generic):
            return self._coerce_power(value.item())
        if isinstance(value, numbers.Real):
            if not float(value).is_integer():
                raise ValueError("Exponent must be an integer")
            return int(value)
        raise TypeError("Unsupported exponent type")

    # ------------------------------------------------------------------
    # Arithmetic operators
    @staticmethod
    def _add(a: "Rational", b: "Rational") -> "Rational":
        return Rational(
            a._numerator * b._denominator + b._numerator * a._denominator,
            a._denominator * b._denominator,
        )

    @staticmethod
    def _sub(a: "Rational", b: "Rational") -> "Rational":
        return Rational(
            a._numerator * b._denominator - b._numerator * a._denominator,
            a._denominator * b._denominator,
        )

    @staticmethod
    def _mul(a: "Rational", b: "Rational") -> "Rational":
        return Rational(
            a._numerator * b._numerator,
            a._denominator * b._denominator,
        )

    @staticmethod
    def _truediv(a: "Rational", b: "Rational") -> "Rational":
        if b._numerator == 0:
            raise ZeroDivisionError("division by zero")
        return Rational(
            a._numerator * b._denominator,
            a._denominator * b._numerator,
        )

    @staticmethod
    def _truncdiv(a: "Rational", b: "Rational") -> "Rational":
        return Rational._truediv(a, b).truncate()

    @staticmethod
    def _remainder(a: "Rational", b: "Rational") -> "Rational":
        return Rational._sub(a, Rational._mul(Rational._truncdiv(a, b), b))

    @staticmethod
    def _mod(a: "Rational", b: "Rational") -> "Rational":
        remainder = Rational._remainder(a, b)
        if remainder.is_negative():
            return Rational._add(remainder, abs(b))
        return remainder

    def __add__(self, other: Any) -> Any:
        return self._binary_operation(other, Rational._add)

    def __radd__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._add)

    def __sub__(self, other: Any) -> Any:
        return self._binary_operation(other, Rational._sub)

    def __rsub__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._sub)

    def __mul__(self, other: Any) -> Any:
        return self._binary_operation(other, Rational._mul)

    def __rmul__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._mul)

    def __truediv__(self, other: Any) -> Any:
        return self._binary_operation(other, Rational._truediv)

    def __rtruediv__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._truediv)

    def __floordiv__(self, other: Any) -> Any:
        """Truncating division: ``a // b == (a / b).truncate()``."""
        return self._binary_operation(other, Rational._truncdiv)

    def __rfloordiv__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._truncdiv)

    def __mod__(self, other: Any) -> Any:
        """Euclidean modulo: the result is never negative.

        This differs from :meth:`remainder`, whose sign follows the dividend.
        """
        return self._binary_operation(other, Rational._mod)

    def __rmod__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._mod)

    def truncating_divide(self, other: NumberLike) -> "Rational":
        return Rational._truncdiv(self, self._coerce_scalar(other))

    def remainder(self, other: NumberLike) -> "Rational":
        """Remainder of truncating division, carrying the sign of ``self``."""
        return Rational._remainder(self, self._coerce_scalar(other))

    def __pow__(self, exponent: Any) -> Any:
        if np is not None and isinstance(exponent, np.ndarray):
            vectorised = np.vectorize(lambda x: self.__pow__(x), otypes=[object])
            return vectorised(exponent)
        power = self._coerce_power(exponent)
        if power >= 0:
            return Rational(self._numerator ** power, self._denominator ** power)
        if self._numerator == 0:
            raise ZeroDivisionError("0 cannot be raised to a negative power")
        positive = -power
        return Rational(self._denominator ** positive, self._numerator ** positive)

    def __neg__(self) -> "Rational":
        return Rational._from_normalized(-self._numerator, self._denominator)

    def __pos__(self) -> "Rational":
        return self

    def __abs__(self) -> "Rational":
        return -self if self.is_negative() else self

    # ------------------------------------------------------------------
    # Comparisons
    def compare_to(self, other: NumberLike) -> int:
        """Return -1, 0 or 1 as this value is less than, equal to or greater than *other*."""
        other_rat = self._coerce_scalar(other)
        left = self._numerator * other_rat._denominator
        right = other_rat._numerator * self._denominator
        return (left > right) - (left < right)

    def _compare_scalar(self, other: Any, op) -> bool:
        if isinstance(other, numbers.Real) and not isinstance(
            other, (Rational, numbers.Rational)
        ):
            value = float(other)
            if math.isnan(value):
                # NaN is unordered and unequal to everything.
                return op is operator.ne
            if math.isinf(value):
                return op(-1 if value > 0 else 1, 0)
        return op(self.compare_to(other), 0)

    def _compare(self, other: Any, op) -> Any:
        if np is not None and isinstance(other, np.ndarray):
            # Reflected through the ndarray operator and __array_ufunc__.
            return NotImplemented
        if isinstance(other, (list, tuple)):
            results = [self._compare_scalar(item, op) for item in other]
            if np is not None:
                return np.array(results, dtype=bool)
            if isinstance(other, tuple):
                return tuple(results)
            return results
        try:
            return self._compare_scalar(other, op)
        except TypeError:
            return NotImplemented

    def __eq__(self, other: Any) -> Any:
        if isinstance(other, Rational):
            return (
                self._numerator == other._numerator
                and self._denominator == other._denominator
            )
        return self._compare(other, operator.eq)

    def __ne__(self, other: Any) -> Any:
        if isinstance(other, Rational):
            return not self.__eq__(other)
        return self._compare(other, operator.ne)

    def __lt__(self, other: Any) -> bool:
        return self._compare(other, operator.lt)

    def __le__(self, other: Any) -> bool:
        return self._compare(other, operator.le)

    def __gt__(self, other: Any) -> bool:
        return self._compare(other, operator.gt)

    def __ge__(self, other: Any) -> bool:
        return self._compare(other, operator.ge)

    def __hash__(self) -> int:
        # Matches int, float and Fraction hashes for equal values.
        return hash(self.as_fraction())

    # ------------------------------------------------------------------
    # NumPy interoperability
    if np is not None:
        _UFUNC_DISPATCH = {
            np.add: operator.add,
            np.subtract: operator.sub,
            np.multiply: operator.mul,
            np.divide: operator.truediv,
            np.true_divide: operator.truediv,
            np.floor_divide: operator.floordiv,
            np.remainder: operator.mod,
            np.negative: operator.neg,
            np.positive: operator.pos,
            np.absolute: abs,
            np.power: operator.pow,
        }
        _UFUNC_PREDICATES = {
            np.equal: operator.eq,
            np.not_equal: operator.ne,
            np.less: operator.lt,
            np.less_equal: operator.le,
            np.greater: operator.gt,
            np.greater_equal: operator.ge,
        }
    else:  # pragma: no cover - executed when NumPy unavailable
        _UFUNC_DISPATCH = {}
        _UFUNC_PREDICATES = {}

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        if np is None:
            return NotImplemented
        if method != "__call__":
            return NotImplemented
        if kwargs.get("out") is not None:
            raise NotImplementedError("`out` argument is not supported for Rational ufuncs")
        if ufunc in self._UFUNC_PREDICATES:
            op, otype = self._UFUNC_PREDICATES[ufunc], bool
        elif ufunc in self._UFUNC_DISPATCH:
            op, otype = self._UFUNC_DISPATCH[ufunc], object
        else:
            return NotImplemented

        coerced = []
        has_array = False
        for value in inputs:
            if isinstance(value, Rational):
                coerced.append(value)
            elif isinstance(value, np.ndarray):
                vectorised = np.vectorize(lambda x: self._coerce_scalar(x), otypes=[object])
                coerced.append(vectorised(value))
                has_array = True
            else:
                coerced.append(self._coerce_scalar(value))
        if has_array:
            vectorised = np.vectorize(lambda *args: op(*args), otypes=[otype])
            return vectorised(*coerced)
        return op(*coerced)


_ZERO = Rational(0)
_ONE = Rational(1)
_FIVE = Rational(5)
_TEN = Rational(10)


def parse(text: str) -> Rational:
    """Parse a decimal literal such as ``"1.5"`` into a :class:`Rational`."""

    return Rational.parse(text)


def rationalize(value: NumberLike) -> Rational:
    """Public helper to convert *value* into :class:`Rational`."""

    return Rational.rationalize(value)


def as_rational_array(values: Any, *, copy: bool = True) -> "np.ndarray":
    """Return a ``numpy.ndarray`` of :class:`Rational` values.

    ``values`` can be any iterable containing numeric-like entries or an existing
    NumPy array. When ``copy`` is ``False`` and ``values`` is already a NumPy
    array with ``dtype=object`` holding only :class:`Rational` entries, the
    original array is returned.
    """

    if np is None:
        raise RuntimeError("NumPy is required to construct Rational arrays")

    if isinstance(values, np.ndarray):
        array = values.copy() if copy else values
        if array.dtype == object and all(isinstance(item, Rational) for item in array.flat):
            return array
        vectorised = np.vectorize(Rational.rationalize, otypes=[object])
        return vectorised(array)

    if isinstance(values, (list, tuple)):
        return np.array([Rational.rationalize(item) for item in values], dtype=object)

    return as_rational_array(list(values), copy=copy)


def zeros(length: int) -> "np.ndarray":
    """Return a one-dimensional array of length ``length`` filled with zeros."""

    if length < 0:
        raise ValueError("length must be non-negative")
    return as_rational_array([_ZERO] * length, copy=False)


def zeros_like(values: Any) -> "np.ndarray":
    """Return a zero-filled array that matches the shape of ``values``."""

    array = as_rational_array(values, copy=False)
    return np.array([_ZERO] * array.size, dtype=object).reshape(array.shape)


__all__ = [
    "Rational",
    "parse",
    "rationalize",
    "as_rational_array",
    "zeros",
    "zeros_like",
]
