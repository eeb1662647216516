"""Fluent assertions for JSON values."""

from jsonexpect.assertions.number import Number, new_number
from jsonexpect.assertions.value import Value

__all__ = [
    "Number",
    "Value",
    "new_number",
]
