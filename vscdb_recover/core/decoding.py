"""
Decoding of raw values read from VSCode-family state databases.

Values in ``ItemTable`` and ``cursorDiskKV`` are stored as TEXT or BLOB and
most of them are JSON documents. ``decode_scalar`` turns them into native
Python values; ``kind_of`` classifies a decoded value so that callers can
dispatch on an explicit tag instead of probing attributes.
"""

import json
import math
from enum import Enum
from typing import Any, Dict, List, Union

DecodedValue = Union[None, str, int, float, bool, Dict[str, Any], List[Any]]


class ValueKind(str, Enum):
    """Tag for a decoded value."""

    NULL = "null"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    OTHER = "other"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _looks_like_json(text: str) -> bool:
    stripped = text.strip()
    return (stripped.startswith("{") and stripped.endswith("}")) or (
        stripped.startswith("[") and stripped.endswith("]")
    )


def decode_scalar(value: Any) -> DecodedValue:
    """
    Convert a stored scalar into a native value.

    Parameters
    ----------
    value : Any
        Raw column value (``None``, ``str``, ``bytes`` or anything else the
        SQLite driver returned)

    Returns
    -------
    DecodedValue
        Parsed JSON structure when the text looks like a JSON object/array and
        parses strictly, otherwise the text itself. Non-text values are
        returned unchanged. Never raises.
    """
    if value is None:
        return None

    if isinstance(value, (bytes, bytearray, memoryview)):
        value = bytes(value).decode("utf-8", errors="replace")

    if isinstance(value, str):
        if not _looks_like_json(value):
            return value
        try:
            return json.loads(value, parse_constant=_reject_constant)
        except ValueError:
            # Not JSON after all; keep the original text
            return value

    return value


def kind_of(value: Any) -> ValueKind:
    """Classify a decoded value."""
    if value is None:
        return ValueKind.NULL
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, dict):
        return ValueKind.OBJECT
    if isinstance(value, list):
        return ValueKind.ARRAY
    return ValueKind.OTHER


def is_finite_number(value: Any) -> bool:
    """True for ints and finite floats, False for booleans and everything else."""
    if kind_of(value) is not ValueKind.NUMBER:
        return False
    return not isinstance(value, float) or math.isfinite(value)


def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def coerce_text(value: Any) -> str:
    """
    Coerce a decoded value to display text.

    Mirrors how the IDE's own front end stringifies a field: missing values
    become an empty string, booleans are lowercase, integral floats drop their
    fractional part, arrays are comma-joined and objects collapse to
    ``[object Object]``.

    Parameters
    ----------
    value : Any
        Decoded value

    Returns
    -------
    str
        Text representation
    """
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return ""
    if kind is ValueKind.TEXT:
        return value
    if kind is ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER:
        return _format_number(value)
    if kind is ValueKind.ARRAY:
        return ",".join(coerce_text(item) for item in value)
    if kind is ValueKind.OBJECT:
        return "[object Object]"
    return str(value)
