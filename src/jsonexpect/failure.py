"""Failure records and error types."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, SerializationInfo, field_serializer


class FailureKind(str, Enum):
    """Kind of a reported failure."""

    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"
    IN_RANGE = "in_range"
    NOT_IN_RANGE = "not_in_range"
    BELONGS = "belongs"
    NOT_BELONGS = "not_belongs"
    SCHEMA = "schema"
    USAGE = "usage"


class AssertionRange(BaseModel):
    """Inclusive range ``[min; max]`` used as the expected value of range checks."""

    model_config = {"frozen": True}

    min: Any
    max: Any

    def __str__(self) -> str:
        return f"[{format_value(self.min)}; {format_value(self.max)}]"


def format_value(value: Any) -> str:
    """Render a failure operand for humans.

    Decimals are shown as their exact text, ranges as ``[min; max]`` and
    sequences element by element.
    """
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, AssertionRange):
        return str(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    return repr(value)


def _truncate(text: str, max_len: int) -> str:
    return text if len(text) <= max_len else text[:max_len] + "..."


class FailureRecord(BaseModel):
    """Structured description of one failed assertion.

    Records are built by assertion operations, stamped with the diagnostic name
    and operation trail by the chain, and handed over to a reporter. They are
    never stored by the chain itself.

    Attributes
    ----------
    id
        Unique identifier for this record.
    timestamp
        UTC time the record was created.
    kind
        What kind of check failed.
    name
        Alias of the failing instance, or the root label of its trail.
    trail
        Operation labels from the root down to the failing operation.
    actual
        Subject value, when the check inspected one.
    expected
        Expected value, ``AssertionRange`` or list of candidates.
    delta
        Tolerance for delta checks.
    errors
        Human-readable diagnostic messages.
    """

    id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    kind: FailureKind
    name: str | None = None
    trail: list[str] = Field(default_factory=list)
    actual: Any = None
    expected: Any = None
    delta: Any = None
    errors: list[str] = Field(default_factory=list)

    @field_serializer("actual", "expected", "delta")
    def _serialize_operand(self, v: Any, info: SerializationInfo) -> str | None:
        if v is None:
            return None
        text = format_value(v)
        ctx = info.context or {}
        if max_len := ctx.get("truncate"):
            return _truncate(text, max_len)
        return text

    @property
    def path(self) -> str:
        """Operation trail joined for display, e.g. ``Number(123).in_range()``."""
        return ".".join(self.trail)

    def render(self, *, show_trail: bool = True, max_value_length: int | None = None) -> str:
        """Render the record as a multi-line message."""
        header = self.name or self.kind.value
        if show_trail and self.trail:
            header = f"{header}: {self.path}"
        lines = [header]
        lines.extend(f"  {error}" for error in self.errors)
        for label, operand in (("actual", self.actual), ("expected", self.expected), ("delta", self.delta)):
            if operand is None:
                continue
            text = format_value(operand)
            if max_value_length:
                text = _truncate(text, max_value_length)
            lines.append(f"  {label}: {text}")
        return "\n".join(lines)

    @property
    def message(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return self.model_dump_json(
            indent=2,
            exclude_none=True,
            context={"truncate": 50},
        )


class ConversionError(ValueError):
    """Raised when a value has no canonical numeric representation."""

    def __init__(self, value: Any, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"{reason}: {value!r}")


class AssertionFailedError(AssertionError):
    """AssertionError with attached FailureRecord."""

    def __init__(self, record: FailureRecord, message: str | None = None):
        self.record = record
        super().__init__(message or record.message)
