"""jsonexpect - fluent, precision-preserving assertions for JSON values."""

from .assertions import Number, Value, new_number
from .canon import DecodeTarget, JSONNumber, canonicalize, to_canonical
from .chain import Chain
from .config import ExpectSettings, get_settings
from .context import reporter_scope
from .failure import AssertionFailedError, AssertionRange, ConversionError, FailureKind, FailureRecord
from .reporters import (
    CollectingReporter,
    ConsoleReporter,
    LoggingReporter,
    RaisingReporter,
    Reporter,
    get_reporter,
)
from .version import __version__


__all__ = [
    # Assertions
    "Number",
    "Value",
    "new_number",
    # Canonical numbers
    "DecodeTarget",
    "JSONNumber",
    "canonicalize",
    "to_canonical",
    # Chain and failures
    "Chain",
    "FailureKind",
    "FailureRecord",
    "AssertionRange",
    "AssertionFailedError",
    "ConversionError",
    # Reporters
    "Reporter",
    "RaisingReporter",
    "CollectingReporter",
    "LoggingReporter",
    "ConsoleReporter",
    "get_reporter",
    "reporter_scope",
    # Configuration
    "ExpectSettings",
    "get_settings",
]
