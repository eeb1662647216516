"""Assertions for arbitrary JSON values."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import numpy as np

from jsonexpect.assertions._json import resolve_pointer, validate_schema
from jsonexpect.canon import JSONNumber, to_canonical
from jsonexpect.chain import Chain
from jsonexpect.config import ExpectSettings
from jsonexpect.failure import ConversionError, FailureKind, FailureRecord
from jsonexpect.reporters import Reporter

if TYPE_CHECKING:
    from jsonexpect.assertions.number import Number


def _normalize(value: Any) -> Any:
    """Replace numbers by their canonical decimal so ``1`` and ``1.0`` compare equal."""
    if isinstance(value, Mapping):
        return {key: _normalize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(item) for item in value]
    if isinstance(value, str) and not isinstance(value, JSONNumber):
        return value
    if isinstance(value, (bool, np.bool_)):
        # JSON true is not 1, while True == Decimal(1) holds in Python
        return ("bool", bool(value))
    try:
        return to_canonical(value)
    except ConversionError:
        return value


class Value:
    """Assertions for a JSON value of any type.

    Returned by ``Number.path``; ``number()`` turns it back into a ``Number``
    that shares the failure state.
    """

    def __init__(self, reporter: Reporter, value: Any, *, settings: ExpectSettings | None = None):
        self._chain = Chain("Value()", reporter, settings)
        self._value = value

    @classmethod
    def _from_chain(cls, parent: Chain, value: Any) -> Value:
        instance = cls.__new__(cls)
        instance._chain = parent.clone()
        instance._value = value
        return instance

    def __repr__(self) -> str:
        return f"Value({self._value!r})"

    @property
    def chain(self) -> Chain:
        return self._chain

    @property
    def raw(self) -> Any:
        return self._value

    def alias(self, name: str) -> Value:
        with self._chain.scope(f"alias({name!r})"):
            self._chain.set_alias(name)
        return self

    def path(self, pointer: str) -> Value:
        """Navigate into the value with an RFC 6901 JSON Pointer."""
        with self._chain.scope(f"path({pointer!r})") as chain:
            if chain.failed():
                return Value._from_chain(chain, None)
            result, ok = resolve_pointer(chain, self._value, pointer)
            return Value._from_chain(chain, result if ok else None)

    def schema(self, schema: Any) -> Value:
        with self._chain.scope("schema()") as chain:
            if not chain.failed():
                validate_schema(chain, self._value, schema)
        return self

    def is_equal(self, value: Any) -> Value:
        with self._chain.scope("is_equal()") as chain:
            if chain.failed():
                return self
            if _normalize(self._value) != _normalize(value):
                chain.fail(
                    FailureRecord(
                        kind=FailureKind.EQUAL,
                        actual=self._value,
                        expected=value,
                        errors=["expected: values are equal"],
                    )
                )
        return self

    def not_equal(self, value: Any) -> Value:
        with self._chain.scope("not_equal()") as chain:
            if chain.failed():
                return self
            if _normalize(self._value) == _normalize(value):
                chain.fail(
                    FailureRecord(
                        kind=FailureKind.NOT_EQUAL,
                        actual=self._value,
                        expected=value,
                        errors=["expected: values are non-equal"],
                    )
                )
        return self

    def number(self) -> Number:
        """Return a ``Number`` for the value; non-numbers are reported as usage failures."""
        from jsonexpect.assertions.number import Number

        with self._chain.scope("number()") as chain:
            return Number._from_chain(chain, self._value)
