"""JSON Pointer and JSON Schema delegation shared by assertion types."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from decimal import Decimal
from fractions import Fraction
from typing import Any

from jsonpointer import JsonPointer, JsonPointerException
from jsonschema import Draft202012Validator, validators
from jsonschema.exceptions import SchemaError, ValidationError
from jsonschema.protocols import Validator

from jsonexpect.canon import is_integral
from jsonexpect.chain import Chain
from jsonexpect.failure import FailureKind, FailureRecord

logger = logging.getLogger(__name__)


def _parse_exact(text: str) -> int | Decimal:
    value = Decimal(text)
    return int(value) if is_integral(value) else value


def load_exact(text: str) -> Any:
    """Parse JSON text keeping every number exact.

    Integral numbers become ``int`` (``1E+2`` included) and the rest
    ``Decimal``, so schema keywords such as ``multipleOf`` never see a
    rounded binary float.
    """
    return json.loads(text, parse_float=_parse_exact)


def _exact_node(node: Any) -> Any:
    if isinstance(node, float):
        # repr is the shortest text that reads back as the same float
        return _parse_exact(repr(node))
    if isinstance(node, Mapping):
        return {key: _exact_node(value) for key, value in node.items()}
    if isinstance(node, (list, tuple)):
        return [_exact_node(value) for value in node]
    return node


def _exact_schema(schema: Any) -> Any:
    if isinstance(schema, str):
        return load_exact(schema)
    if isinstance(schema, (Mapping, bool)):
        return _exact_node(schema)
    raise TypeError(f"schema must be a mapping, a boolean or JSON text, got {type(schema).__name__}")


def _multiple_of(validator: Validator, multiple_of: Any, instance: Any, schema: Any) -> Iterator[ValidationError]:
    # jsonschema divides Decimals in the default 28-digit context; fractions are exact at any size
    if not validator.is_type(instance, "number"):
        return
    try:
        remainder = Fraction(instance) % Fraction(multiple_of)
    except (ValueError, OverflowError):
        yield ValidationError(f"{instance!r} is not a finite number")
        return
    if remainder:
        yield ValidationError(f"{instance!r} is not a multiple of {multiple_of}")


ExactValidator = validators.extend(Draft202012Validator, {"multipleOf": _multiple_of})


def resolve_pointer(chain: Chain, document: Any, pointer: str) -> tuple[Any, bool]:
    """Resolve an RFC 6901 pointer, reporting a failure if it does not resolve."""
    try:
        return JsonPointer(pointer).resolve(document), True
    except JsonPointerException as exc:
        logger.debug("pointer %r does not resolve: %s", pointer, exc)
        chain.fail(
            FailureRecord(
                kind=FailureKind.USAGE,
                actual=document,
                expected=pointer,
                errors=[
                    "expected: JSON pointer resolves against value",
                    str(exc),
                ],
            )
        )
        return None, False


def validate_schema(chain: Chain, instance: Any, schema: Any) -> bool:
    """Validate ``instance`` against ``schema``, reporting the first violation set."""
    try:
        exact_schema = _exact_schema(schema)
        ExactValidator.check_schema(exact_schema)
    except (TypeError, ValueError, SchemaError) as exc:
        chain.fail(
            FailureRecord(
                kind=FailureKind.USAGE,
                expected=schema,
                errors=[
                    "unexpected invalid schema argument",
                    getattr(exc, "message", str(exc)),
                ],
            )
        )
        return False

    validator = ExactValidator(exact_schema)
    errors = sorted(validator.iter_errors(_exact_node(instance)), key=lambda e: [str(p) for p in e.path])
    if not errors:
        return True

    chain.fail(
        FailureRecord(
            kind=FailureKind.SCHEMA,
            actual=instance,
            expected=schema,
            errors=["expected: value matches schema"] + [error.message for error in errors],
        )
    )
    return False
