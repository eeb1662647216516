"""Fluent assertions for numeric values."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable

import numpy as np

from jsonexpect.assertions._json import load_exact, resolve_pointer, validate_schema
from jsonexpect.assertions.value import Value
from jsonexpect.canon import (
    DecodeTarget,
    canonicalize,
    compare,
    compare_distance,
    decode,
    is_integral,
    to_float,
    to_text,
)
from jsonexpect.chain import Chain
from jsonexpect.config import ExpectSettings
from jsonexpect.context import get_current_reporter
from jsonexpect.failure import AssertionRange, ConversionError, FailureKind, FailureRecord
from jsonexpect.reporters import Reporter


class Number:
    """Assertions for a numeric value.

    The value is converted once, at construction, into an exact decimal.
    Every operation compares against that decimal without rounding, so
    ``int32(123)``, ``123.0`` and ``JSONNumber("123")`` are all equal.

    Operations never raise on a failed check. They report a failure record
    to the reporter, mark the chain failed and return the instance; after the
    first failure, further operations on the instance do nothing.

    Parameters
    ----------
    reporter : Reporter
        Receives failure records. Must not be ``None``.
    value : Any
        Integer, float, numpy scalar, ``Decimal`` or ``JSONNumber``. Anything
        else is reported as a usage failure and yields an instance whose chain
        is already failed.
    settings : ExpectSettings or None
        Overrides process-wide settings.

    Examples
    --------
    >>> number = Number(reporter, 123)
    >>> number.is_equal(123.0).in_range(100, 200).gt(122).not_in_list(1, 2)
    """

    def __init__(self, reporter: Reporter, value: Any, *, settings: ExpectSettings | None = None):
        self._init(Chain("Number()", reporter, settings), value)

    @classmethod
    def _from_chain(cls, parent: Chain, value: Any) -> Number:
        number = cls.__new__(cls)
        number._init(parent, value)
        return number

    def _init(self, parent: Chain, value: Any) -> None:
        canonical = None
        if not parent.failed():
            canonical = canonicalize(parent, value)
        self._chain = parent.clone()
        self._value = canonical if canonical is not None else Decimal(0)

    def __repr__(self) -> str:
        return f"Number({self._value})"

    @property
    def chain(self) -> Chain:
        return self._chain

    @property
    def raw(self) -> Decimal:
        """The canonical value (``Decimal(0)`` if construction failed)."""
        return self._value

    def as_float(self, width: int = 64) -> float | np.floating:
        """Return the value as a binary float of the given width.

        Parameters
        ----------
        width : int
            16, 32 or 64.

        Returns
        -------
        float or numpy.floating
            A Python ``float`` for width 64, ``numpy.float32`` or
            ``numpy.float16`` otherwise.
        """
        return to_float(self._value, width)

    def as_int(self) -> int:
        """Return the value as ``int``.

        Returns
        -------
        int
            The integral value. A non-integral value is reported as a usage
            failure and ``0`` is returned.
        """
        with self._chain.scope("as_int()") as chain:
            if chain.failed():
                return 0
            if not is_integral(self._value):
                chain.fail(
                    FailureRecord(
                        kind=FailureKind.USAGE,
                        actual=self._value,
                        errors=["expected: number is integral"],
                    )
                )
                return 0
            return int(self._value)

    def decode(self, target: DecodeTarget) -> Number:
        """Write the value into ``target``.

        Parameters
        ----------
        target : DecodeTarget
            Destination whose ``type`` selects the conversion. A value that does
            not fit the type is reported as a usage failure and ``target`` is
            left untouched.

        Returns
        -------
        Number
            This instance, for chaining.

        Examples
        --------
        >>> target = DecodeTarget(int)
        >>> Number(reporter, 123).decode(target)
        >>> target.value
        123
        """
        with self._chain.scope("decode()") as chain:
            if chain.failed():
                return self

            if not isinstance(target, DecodeTarget):
                chain.fail(
                    FailureRecord(
                        kind=FailureKind.USAGE,
                        errors=[f"unexpected target argument, expected DecodeTarget, got {type(target).__name__}"],
                    )
                )
                return self

            try:
                target.value = decode(self._value, target.type)
            except ConversionError as exc:
                chain.fail(
                    FailureRecord(
                        kind=FailureKind.USAGE,
                        actual=self._value,
                        errors=["conversion error", exc.reason],
                    )
                )
            except TypeError as exc:
                chain.fail(FailureRecord(kind=FailureKind.USAGE, errors=[str(exc)]))
        return self

    def alias(self, name: str) -> Number:
        """Name the value in failure records instead of ``Number()``.

        Parameters
        ----------
        name : str
            Name shown in failure records, e.g. ``"order.total"``.

        Returns
        -------
        Number
            This instance, for chaining.
        """
        with self._chain.scope(f"alias({name!r})"):
            self._chain.set_alias(name)
        return self

    def _exact_document(self, chain: Chain) -> tuple[Any, bool]:
        try:
            return load_exact(to_text(self._value)), True
        except ConversionError as exc:
            chain.fail(
                FailureRecord(
                    kind=FailureKind.USAGE,
                    actual=self._value,
                    errors=["conversion error", exc.reason],
                )
            )
            return None, False

    def path(self, pointer: str) -> Value:
        """Navigate the value with an RFC 6901 JSON Pointer.

        For a number only the empty pointer ``""`` resolves; it yields a
        ``Value`` holding the exact number.

        Parameters
        ----------
        pointer : str
            RFC 6901 pointer, e.g. ``""``.

        Returns
        -------
        Value
            The resolved value, sharing this instance's failure state. Holds
            ``None`` if the pointer does not resolve.
        """
        with self._chain.scope(f"path({pointer!r})") as chain:
            if chain.failed():
                return Value._from_chain(chain, None)
            document, ok = self._exact_document(chain)
            if ok:
                document, ok = resolve_pointer(chain, document, pointer)
            return Value._from_chain(chain, document if ok else None)

    def schema(self, schema: Any) -> Number:
        """Validate the exact value against a JSON Schema.

        Parameters
        ----------
        schema : Mapping, bool or str
            Draft 2020-12 schema as a mapping, a boolean schema or JSON text.
            Numbers in the schema are read exactly, so ``multipleOf: 0.1``
            means one tenth.

        Returns
        -------
        Number
            This instance, for chaining.
        """
        with self._chain.scope("schema()") as chain:
            if chain.failed():
                return self
            document, ok = self._exact_document(chain)
            if ok:
                validate_schema(chain, document, schema)
        return self

    def is_equal(self, value: Any) -> Number:
        """Succeed if the number is equal to ``value``.

        Parameters
        ----------
        value : Any
            Number to compare with, of any accepted numeric type.

        Returns
        -------
        Number
            This instance, for chaining.

        Examples
        --------
        >>> number = Number(reporter, 123)
        >>> number.is_equal(123.0)
        >>> number.is_equal(numpy.int32(123))
        """
        with self._chain.scope("is_equal()") as chain:
            if chain.failed():
                return self
            num = canonicalize(chain, value)
            if num is None:
                return self
            if compare(self._value, num) != 0:
                chain.fail(
                    FailureRecord(
                        kind=FailureKind.EQUAL,
                        actual=self._value,
                        expected=num,
                        errors=["expected: numbers are equal"],
                    )
                )
        return self

    equal = is_equal

    def not_equal(self, value: Any) -> Number:
        """Succeed if the number is not equal to ``value``.

        An argument that is not a number is reported as a usage failure, the
        same way every other operation treats it.

        Parameters
        ----------
        value : Any
            Number to compare with.

        Returns
        -------
        Number
            This instance, for chaining.
        """
        with self._chain.scope("not_equal()") as chain:
            if chain.failed():
                return self
            num = canonicalize(chain, value)
            if num is None:
                return self
            if compare(self._value, num) == 0:
                chain.fail(
                    FailureRecord(
                        kind=FailureKind.NOT_EQUAL,
                        actual=self._value,
                        expected=num,
                        errors=["expected: numbers are non-equal"],
                    )
                )
        return self

    def _delta_operands(
        self, chain: Chain, value: Any, delta: Any, kind: FailureKind
    ) -> tuple[Decimal, Decimal, int] | None:
        """Canonicalize ``value`` and ``delta`` and compare the distance.

        Returns ``(value, delta, cmp)`` where ``cmp`` compares
        ``|subject - value|`` with ``delta``, or ``None`` once a failure was
        reported.
        """
        num = canonicalize(chain, value)
        if num is None:
            return None
        dlt = canonicalize(chain, delta)
        if dlt is None:
            return None

        distance = compare_distance(self._value, num, dlt)
        if distance is None:
            chain.fail(
                FailureRecord(
                    kind=kind,
                    actual=self._value,
                    expected=num,
                    delta=dlt,
                    errors=["expected: numbers are comparable"],
                )
            )
            return None
        if dlt.is_signed() and not dlt.is_zero():
            chain.fail(
                FailureRecord(
                    kind=FailureKind.USAGE,
                    delta=dlt,
                    errors=["unexpected negative delta argument"],
                )
            )
            return None
        return num, dlt, distance

    def in_delta(self, value: Any, delta: Any) -> Number:
        """Succeed if ``value - delta <= number <= value + delta``.

        Parameters
        ----------
        value : Any
            Expected number.
        delta : Any
            Allowed distance, inclusive. A negative delta is a usage failure.

        Returns
        -------
        Number
            This instance, for chaining.

        Examples
        --------
        >>> Number(reporter, 123.0).in_delta(123.2, 0.3)
        """
        with self._chain.scope("in_delta()") as chain:
            if chain.failed():
                return self
            operands = self._delta_operands(chain, value, delta, FailureKind.EQUAL)
            if operands is None:
                return self
            num, dlt, distance = operands
            if distance > 0:
                chain.fail(
                    FailureRecord(
                        kind=FailureKind.EQUAL,
                        actual=self._value,
                        expected=num,
                        delta=dlt,
                        errors=["expected: numbers lie within delta"],
                    )
                )
        return self

    equal_delta = in_delta

    def not_in_delta(self, value: Any, delta: Any) -> Number:
        """Succeed if the number differs from ``value`` by more than ``delta``.

        Parameters
        ----------
        value : Any
            Number to keep away from.
        delta : Any
            Distance the number must exceed. A negative delta is a usage failure.

        Returns
        -------
        Number
            This instance, for chaining.

        Examples
        --------
        >>> Number(reporter, 123.0).not_in_delta(123.2, 0.1)
        """
        with self._chain.scope("not_in_delta()") as chain:
            if chain.failed():
                return self
            operands = self._delta_operands(chain, value, delta, FailureKind.NOT_EQUAL)
            if operands is None:
                return self
            num, dlt, distance = operands
            if distance <= 0:
                chain.fail(
                    FailureRecord(
                        kind=FailureKind.NOT_EQUAL,
                        actual=self._value,
                        expected=num,
                        delta=dlt,
                        errors=["expected: numbers do not lie within delta"],
                    )
                )
        return self

    not_equal_delta = not_in_delta

    def _range_bounds(self, chain: Chain, min: Any, max: Any, kind: FailureKind) -> tuple[int, int, AssertionRange] | None:
        lo = canonicalize(chain, min)
        if lo is None:
            return None
        hi = canonicalize(chain, max)
        if hi is None:
            return None

        bounds = AssertionRange(min=lo, max=hi)
        lo_cmp = compare(self._value, lo)
        hi_cmp = compare(self._value, hi)
        if lo_cmp is None or hi_cmp is None:
            chain.fail(
                FailureRecord(
                    kind=kind,
                    actual=self._value,
                    expected=bounds,
                    errors=["expected: numbers are comparable"],
                )
            )
            return None
        return lo_cmp, hi_cmp, bounds

    def in_range(self, min: Any, max: Any) -> Number:
        """Succeed if ``min <= number <= max``.

        Parameters
        ----------
        min, max : Any
            Inclusive bounds. They are not reordered, so ``min > max`` never
            succeeds.

        Returns
        -------
        Number
            This instance, for chaining.

        Examples
        --------
        >>> number = Number(reporter, 123)
        >>> number.in_range(numpy.float32(100), numpy.int32(200))
        >>> number.in_range(123, 123)
        """
        with self._chain.scope("in_range()") as chain:
            if chain.failed():
                return self
            result = self._range_bounds(chain, min, max, FailureKind.IN_RANGE)
            if result is None:
                return self
            lo_cmp, hi_cmp, bounds = result
            if lo_cmp < 0 or hi_cmp > 0:
                chain.fail(
                    FailureRecord(
                        kind=FailureKind.IN_RANGE,
                        actual=self._value,
                        expected=bounds,
                        errors=["expected: number is within given range"],
                    )
                )
        return self

    def not_in_range(self, min: Any, max: Any) -> Number:
        """Succeed if the number is below ``min`` or above ``max``.

        Parameters
        ----------
        min, max : Any
            Bounds of the excluded range; both belong to it.

        Returns
        -------
        Number
            This instance, for chaining.
        """
        with self._chain.scope("not_in_range()") as chain:
            if chain.failed():
                return self
            result = self._range_bounds(chain, min, max, FailureKind.NOT_IN_RANGE)
            if result is None:
                return self
            lo_cmp, hi_cmp, bounds = result
            if lo_cmp >= 0 and hi_cmp <= 0:
                chain.fail(
                    FailureRecord(
                        kind=FailureKind.NOT_IN_RANGE,
                        actual=self._value,
                        expected=bounds,
                        errors=["expected: number is not within given range"],
                    )
                )
        return self

    def _empty_list(self, chain: Chain) -> None:
        chain.fail(
            FailureRecord(
                kind=FailureKind.USAGE,
                errors=["unexpected empty list argument"],
            )
        )

    def in_list(self, *values: Any) -> Number:
        """Succeed if the number equals one of ``values``.

        Every value must be a number; a single bad value is reported as a usage
        failure before anything is compared.

        Parameters
        ----------
        *values : Any
            Candidates. An empty list is a usage failure.

        Returns
        -------
        Number
            This instance, for chaining.

        Examples
        --------
        >>> Number(reporter, 123).in_list(123.0, numpy.int32(123))
        """
        with self._chain.scope("in_list()") as chain:
            if chain.failed():
                return self
            if not values:
                self._empty_list(chain)
                return self

            candidates = []
            for value in values:
                num = canonicalize(chain, value)
                if num is None:
                    return self
                candidates.append(num)

            if not any(compare(self._value, num) == 0 for num in candidates):
                chain.fail(
                    FailureRecord(
                        kind=FailureKind.BELONGS,
                        actual=self._value,
                        expected=candidates,
                        errors=["expected: number is equal to one of the values"],
                    )
                )
        return self

    def not_in_list(self, *values: Any) -> Number:
        """Succeed if the number equals none of ``values``.

        Values are checked in order; the first match is reported and the rest
        are not looked at.

        Parameters
        ----------
        *values : Any
            Excluded numbers. An empty list is a usage failure.

        Returns
        -------
        Number
            This instance, for chaining.

        Examples
        --------
        >>> Number(reporter, 123).not_in_list(456.0, numpy.int32(456))
        """
        with self._chain.scope("not_in_list()") as chain:
            if chain.failed():
                return self
            if not values:
                self._empty_list(chain)
                return self

            for value in values:
                num = canonicalize(chain, value)
                if num is None:
                    return self
                if compare(self._value, num) == 0:
                    chain.fail(
                        FailureRecord(
                            kind=FailureKind.NOT_BELONGS,
                            actual=self._value,
                            expected=list(values),
                            errors=["expected: number is not equal to any of the values"],
                        )
                    )
                    return self
        return self

    def _order(
        self,
        label: str,
        value: Any,
        kind: FailureKind,
        holds: Callable[[int], bool],
        message: str,
    ) -> Number:
        with self._chain.scope(label) as chain:
            if chain.failed():
                return self
            num = canonicalize(chain, value)
            if num is None:
                return self
            result = compare(self._value, num)
            if result is None:
                message = "expected: numbers are comparable"
            elif holds(result):
                return self
            chain.fail(
                FailureRecord(
                    kind=kind,
                    actual=self._value,
                    expected=num,
                    errors=[message],
                )
            )
        return self

    def gt(self, value: Any) -> Number:
        """Succeed if the number is greater than ``value``.

        Parameters
        ----------
        value : Any
            Exclusive lower bound.

        Returns
        -------
        Number
            This instance, for chaining.
        """
        return self._order("gt()", value, FailureKind.GT, lambda c: c > 0, "expected: number is larger than given value")

    def ge(self, value: Any) -> Number:
        """Succeed if the number is greater than or equal to ``value``.

        Parameters
        ----------
        value : Any
            Inclusive lower bound.

        Returns
        -------
        Number
            This instance, for chaining.
        """
        return self._order(
            "ge()", value, FailureKind.GE, lambda c: c >= 0, "expected: number is larger than or equal to given value"
        )

    def lt(self, value: Any) -> Number:
        """Succeed if the number is less than ``value``.

        Parameters
        ----------
        value : Any
            Exclusive upper bound.

        Returns
        -------
        Number
            This instance, for chaining.
        """
        return self._order("lt()", value, FailureKind.LT, lambda c: c < 0, "expected: number is less than given value")

    def le(self, value: Any) -> Number:
        """Succeed if the number is less than or equal to ``value``.

        Parameters
        ----------
        value : Any
            Inclusive upper bound.

        Returns
        -------
        Number
            This instance, for chaining.
        """
        return self._order(
            "le()", value, FailureKind.LE, lambda c: c <= 0, "expected: number is less than or equal to given value"
        )


def new_number(value: Any, reporter: Reporter | None = None, *, settings: ExpectSettings | None = None) -> Number:
    """Create a ``Number``, defaulting to the reporter bound to the current context.

    Parameters
    ----------
    value : Any
        Value under test.
    reporter : Reporter or None
        Receives failure records. ``None`` uses the reporter bound by
        ``reporter_scope``, or the one named by ``default_reporter`` in the
        settings.
    settings : ExpectSettings or None
        Overrides process-wide settings.

    Returns
    -------
    Number
        The assertion instance.

    Examples
    --------
    >>> with reporter_scope(CollectingReporter()) as reporter:
    ...     new_number(123).gt(200)
    >>> len(reporter.records)
    1
    """
    return Number(reporter if reporter is not None else get_current_reporter(), value, settings=settings)
