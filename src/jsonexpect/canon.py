"""Canonical numeric form shared by all numeric assertions.

Every accepted input is first classified into one of four representations
(signed integer, unsigned integer, binary float, decimal text) and then
converted into a ``decimal.Decimal``. Integers and finite binary floats are
exactly representable as decimals, so values that are mathematically equal
compare equal regardless of the type they came from::

    >>> to_canonical(123) == to_canonical(123.0) == to_canonical(JSONNumber("123"))
    True
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from decimal import MAX_EMAX, MIN_EMIN, ROUND_05UP, Context, Decimal, Inexact, InvalidOperation, localcontext
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import numpy as np

from jsonexpect.failure import ConversionError, FailureKind, FailureRecord

if TYPE_CHECKING:
    from jsonexpect.chain import Chain

logger = logging.getLogger(__name__)

JSON_NUMBER_PATTERN = re.compile(r"-?(0|[1-9][0-9]*)(\.[0-9]+)?([eE][+-]?[0-9]+)?")

T = TypeVar("T")


class JSONNumber(str):
    """Text of a JSON number kept verbatim, as produced by a JSON decoder.

    Use it as ``json.loads(text, parse_float=JSONNumber, parse_int=JSONNumber)``
    to keep numbers exactly as they were written on the wire.
    """

    __slots__ = ()


# Accepted representations


@dataclass(frozen=True, slots=True)
class SignedInteger:
    width: int | None  # None for Python's unbounded int
    value: int


@dataclass(frozen=True, slots=True)
class UnsignedInteger:
    width: int
    value: int


@dataclass(frozen=True, slots=True)
class Float:
    width: int
    value: float


@dataclass(frozen=True, slots=True)
class DecimalText:
    text: str


NumericInput = SignedInteger | UnsignedInteger | Float | DecimalText


def classify(raw: Any) -> NumericInput:
    """Map a raw value onto one of the accepted numeric representations.

    Raises
    ------
    ConversionError
        If ``raw`` is not a number (booleans, plain strings, ``None``,
        containers, fractions, complex numbers and so on).
    """
    if isinstance(raw, (bool, np.bool_)):
        raise ConversionError(raw, "boolean is not a number")
    if isinstance(raw, int):
        return SignedInteger(None, raw)
    if isinstance(raw, np.signedinteger):
        return SignedInteger(raw.dtype.itemsize * 8, int(raw))
    if isinstance(raw, np.unsignedinteger):
        return UnsignedInteger(raw.dtype.itemsize * 8, int(raw))
    if isinstance(raw, float):
        # also catches numpy.float64, a float subclass
        return Float(64, float(raw))
    if isinstance(raw, np.floating):
        width = raw.dtype.itemsize * 8
        if width > 64:
            raise ConversionError(raw, "extended precision float is not supported")
        return Float(width, float(raw))
    if isinstance(raw, JSONNumber):
        return DecimalText(str(raw))
    if isinstance(raw, Decimal):
        return DecimalText(str(raw))
    raise ConversionError(raw, f"unsupported type {type(raw).__name__}")


def _parse_text(text: str, raw: Any) -> Decimal:
    if not JSON_NUMBER_PATTERN.fullmatch(text):
        raise ConversionError(raw, "invalid number literal")
    return Decimal(text)


def to_canonical(raw: Any) -> Decimal:
    """Convert ``raw`` into its exact canonical decimal.

    Raises
    ------
    ConversionError
        If ``raw`` has no numeric representation.
    """
    match classify(raw):
        case SignedInteger(value=value) | UnsignedInteger(value=value):
            return Decimal(value)
        case Float(value=value):
            # Decimal(float) is the exact binary expansion, NaN and inf included
            return Decimal(value)
        case DecimalText(text=text):
            return _parse_text(text, raw)


def canonicalize(chain: Chain, raw: Any) -> Decimal | None:
    """Convert ``raw`` or report a usage failure through ``chain``.

    Returns
    -------
    Decimal or None
        The canonical value, or ``None`` after a failure was reported.
    """
    try:
        return to_canonical(raw)
    except ConversionError as exc:
        logger.debug("rejected numeric argument %r: %s", raw, exc.reason)
        chain.fail(
            FailureRecord(
                kind=FailureKind.USAGE,
                actual=raw,
                errors=[
                    "unexpected non-number argument",
                    exc.reason,
                ],
            )
        )
        return None


# Conversions back out of canonical form


def to_float(value: Decimal, width: int = 64) -> float | np.floating:
    """Convert back to a binary float of the given width (16, 32 or 64)."""
    if width == 64:
        return float(value)
    if width == 32:
        return np.float32(float(value))
    if width == 16:
        return np.float16(float(value))
    raise ValueError(f"unsupported float width: {width}")


def to_text(value: Decimal) -> str:
    """Exact JSON number text for ``value``."""
    if not value.is_finite():
        raise ConversionError(value, "value has no JSON representation")
    return str(value)


def is_integral(value: Decimal) -> bool:
    return value.is_finite() and value == value.to_integral_value()


# Exact arithmetic


def compare(a: Decimal, b: Decimal) -> int | None:
    """Three-way comparison, ``None`` if either side is NaN."""
    if a.is_nan() or b.is_nan():
        return None
    return (a > b) - (a < b)


def _digits(value: Decimal) -> int:
    return len(value.as_tuple().digits)


def exact_sub(a: Decimal, b: Decimal, *, limit: int | None = None) -> Decimal:
    """Return ``a - b``.

    The context precision is derived from the operands so the difference of
    any two canonical values fits; ``Inexact`` is trapped to keep it that way.

    Parameters
    ----------
    a, b : Decimal
        Canonical operands.
    limit : int or None
        Upper bound on the precision. A difference needing more digits is
        rounded with ``ROUND_05UP`` to ``limit`` digits instead. The rounded
        result lies strictly between the same two numbers of at most
        ``limit - 1`` significant digits as the exact one, so comparing it
        with such a number gives the exact answer.
    """
    if not (a.is_finite() and b.is_finite()):
        with localcontext() as ctx:
            ctx.traps[InvalidOperation] = False
            return a - b
    exponent = min(a.as_tuple().exponent, b.as_tuple().exponent)
    digits = max(a.adjusted(), b.adjusted()) - exponent + 2
    if limit is not None and digits > limit:
        # exponent spread too wide to materialize, e.g. 1e999999999999999 - 1e-999999999999999
        ctx = Context(prec=limit, rounding=ROUND_05UP, Emax=MAX_EMAX, Emin=MIN_EMIN, traps=[InvalidOperation])
        return ctx.subtract(a, b)
    ctx = Context(prec=max(digits, 1), Emax=MAX_EMAX, Emin=MIN_EMIN, traps=[InvalidOperation, Inexact])
    return ctx.subtract(a, b)


def compare_distance(a: Decimal, b: Decimal, delta: Decimal) -> int | None:
    """Three-way comparison of ``|a - b|`` with ``delta``.

    Returns ``None`` if either side is NaN, ``inf - inf`` included. The work
    is bounded by the digits the operands carry, not by their exponents.
    """
    if delta.is_nan():
        return None
    limit = max(_digits(a), _digits(b), _digits(delta)) + 2
    return compare(exact_sub(a, b, limit=limit).copy_abs(), delta)


# Decoding


class DecodeTarget(Generic[T]):
    """Mutable destination for ``Number.decode``.

    Parameters
    ----------
    type_
        Target type. ``typing.Any`` or ``object`` accept any number (integral
        values become ``int``, the rest ``float``); numeric types such as
        ``int``, ``float``, ``numpy.int8`` or ``Decimal`` restrict it.

    Examples
    --------
    >>> target = DecodeTarget(int)
    >>> _ = new_number(123).decode(target)
    >>> target.value
    123
    """

    def __init__(self, type_: type[T] | Any = Any):
        self.type = type_
        self.value: T | None = None

    def __repr__(self) -> str:
        type_name = getattr(self.type, "__name__", repr(self.type))
        return f"DecodeTarget({type_name}, value={self.value!r})"


def decode(value: Decimal, target_type: Any) -> Any:
    """Convert a canonical value into ``target_type``.

    Raises
    ------
    ConversionError
        If the value cannot be represented by ``target_type``.
    TypeError
        If ``target_type`` is not a supported numeric type.
    """
    if target_type is Any or target_type is object:
        return int(value) if is_integral(value) else float(value)

    if not isinstance(target_type, type):
        raise TypeError(f"unsupported decode target: {target_type!r}")

    if issubclass(target_type, (bool, np.bool_)):
        raise TypeError("cannot decode a number into a boolean")

    if issubclass(target_type, np.integer):
        if not is_integral(value):
            raise ConversionError(value, f"cannot decode non-integral number into {target_type.__name__}")
        info = np.iinfo(target_type)
        if not info.min <= value <= info.max:
            raise ConversionError(value, f"number overflows {target_type.__name__}")
        return target_type(int(value))

    if issubclass(target_type, int):
        if not is_integral(value):
            raise ConversionError(value, f"cannot decode non-integral number into {target_type.__name__}")
        return target_type(int(value))

    if issubclass(target_type, (np.floating, float)):
        result = target_type(float(value))
        if value.is_finite() and math.isinf(result):
            raise ConversionError(value, f"number overflows {target_type.__name__}")
        return result

    if issubclass(target_type, Decimal):
        return value

    if issubclass(target_type, Fraction):
        if not value.is_finite():
            raise ConversionError(value, "cannot decode non-finite number into Fraction")
        return Fraction(value)

    raise TypeError(f"unsupported decode target: {target_type.__name__}")
