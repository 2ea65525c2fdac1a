"""
Text coercion and escaping for workflow command values.

Payloads and property values are escaped differently: property values also
escape `:` and `,` because those delimit the property segment of a command line.
"""

from __future__ import annotations

import json
from typing import Any, Protocol, runtime_checkable

# Order matters: `%` must go first so later substitutions are not re-escaped.
_DATA_ESCAPES: list[tuple[str, str]] = [
    ("%", "%25"),
    ("\r", "%0D"),
    ("\n", "%0A"),
]

_PROPERTY_ESCAPES: list[tuple[str, str]] = _DATA_ESCAPES + [
    (":", "%3A"),
    (",", "%2C"),
]


@runtime_checkable
class CommandValue(Protocol):
    """A value that knows how to render itself into command text."""

    def to_command_text(self) -> str: ...


def to_command_value(value: Any) -> str:
    """
    Render any value as command text. `None` becomes the empty string, strings
    pass through, `CommandValue` objects render themselves, and everything else
    is written as JSON (falling back to `str()` when JSON can't represent it).
    Never raises: a value whose own rendering fails falls back to its default repr.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        if isinstance(value, CommandValue):
            return str(value.to_command_text())
        try:
            return json.dumps(value, default=str)
        except (TypeError, ValueError):
            return str(value)
    except Exception:
        return object.__repr__(value)


def _replace_all(text: str, pairs: list[tuple[str, str]]) -> str:
    for old, new in pairs:
        text = text.replace(old, new)
    return text


def escape_data(value: Any) -> str:
    return _replace_all(to_command_value(value), _DATA_ESCAPES)


def escape_property(value: Any) -> str:
    return _replace_all(to_command_value(value), _PROPERTY_ESCAPES)


def unescape_data(text: str) -> str:
    """Inverse of `escape_data`; `%25` is decoded last."""
    return _replace_all(text, [(new, old) for old, new in reversed(_DATA_ESCAPES)])


def unescape_property(text: str) -> str:
    return _replace_all(text, [(new, old) for old, new in reversed(_PROPERTY_ESCAPES)])
