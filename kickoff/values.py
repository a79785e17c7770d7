"""Typed variable values.

A resolved variable holds exactly one of three kinds of value: a string, a
boolean or an integer.  The same three classes are produced whatever the
input source (prompt, JSON file or template default), and nothing else is
representable: floats, nulls, lists and mappings are rejected where external
data enters the system.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from kickoff.errors import (
    FloatValueError,
    NestedValueError,
    NullValueError,
    UnsupportedValueError,
)

# Bounds of a signed 64-bit integer; larger JSON numbers are rejected.
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


class ValueKind(str, Enum):
    """The three variants a value can take."""
    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"


@dataclass(frozen=True)
class StringValue:
    value: str

    kind = ValueKind.STRING

    def to_json(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BooleanValue:
    value: bool

    kind = ValueKind.BOOLEAN

    def to_json(self) -> bool:
        return self.value

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class IntegerValue:
    value: int

    kind = ValueKind.INTEGER

    def to_json(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


Value = Union[StringValue, BooleanValue, IntegerValue]


def value_from_json(raw: Any, name: str | None = None) -> Value:
    """Convert a decoded JSON value into a :data:`Value`.

    Args:
        raw: The value as produced by :func:`json.loads`.
        name: Variable name, used in error messages.

    Returns:
        The matching ``StringValue``, ``BooleanValue`` or ``IntegerValue``.

    Raises:
        FloatValueError: For non-integer numbers and out-of-range integers.
        NullValueError: For ``null``.
        NestedValueError: For arrays and objects.
        UnsupportedValueError: For anything else.
    """
    # bool is a subclass of int, so it must be matched first.
    if isinstance(raw, bool):
        return BooleanValue(raw)
    if isinstance(raw, str):
        return StringValue(raw)
    if isinstance(raw, int):
        if not INT_MIN <= raw <= INT_MAX:
            raise FloatValueError(name)
        return IntegerValue(raw)
    if isinstance(raw, float):
        raise FloatValueError(name)
    if raw is None:
        raise NullValueError(name)
    if isinstance(raw, (list, dict)):
        raise NestedValueError(name)
    raise UnsupportedValueError(name)


def values_to_json(values: dict[str, Value]) -> dict[str, Any]:
    """Return a resolved mapping as a plain JSON-serialisable dict."""
    return {name: value.to_json() for name, value in values.items()}


def values_to_context(values: dict[str, Value]) -> dict[str, Any]:
    """Return a resolved mapping as native Python values for template rendering."""
    return {name: value.value for name, value in values.items()}
