"""
Workflow command value object and its line encoding.

Command format::

    ::name key=value,key=value::message

For example `::warning::This is the message` or `::set-env name=MY_VAR::some value`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from actionkit.commands.values import (
    escape_data,
    escape_property,
    unescape_data,
    unescape_property,
)

CMD_STRING = "::"

# Command names understood by the runner. Anything else is still emitted.
CONVENTIONAL_COMMANDS: frozenset[str] = frozenset(
    {
        "add-mask",
        "add-matcher",
        "add-path",
        "debug",
        "echo",
        "endgroup",
        "error",
        "group",
        "notice",
        "remove-matcher",
        "save-state",
        "set-env",
        "set-output",
        "stop-commands",
        "warning",
    }
)

Properties = Mapping[str, Any] | Iterable[tuple[str, Any]]


class CommandParseError(ValueError):
    """Raised when a line is not a well-formed workflow command."""


def is_conventional(name: str | None) -> bool:
    return name in CONVENTIONAL_COMMANDS


def _as_pairs(properties: Properties | None) -> tuple[tuple[str, Any], ...]:
    if not properties:
        return ()
    if isinstance(properties, Mapping):
        return tuple(properties.items())
    return tuple((key, value) for key, value in properties)


@dataclass(frozen=True)
class Command:
    """
    A single workflow command. `properties` keeps insertion order, which is the
    order they are written in. Mappings and `(key, value)` pair iterables are
    both accepted and stored as a tuple of pairs.
    """

    name: str | None
    message: Any = None
    properties: tuple[tuple[str, Any], ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", _as_pairs(self.properties))

    @property
    def conventional(self) -> bool:
        return is_conventional(self.name)

    def __str__(self) -> str:
        parts = [CMD_STRING, self.name or ""]
        if self.properties:
            parts.append(" ")
            parts.append(
                ",".join(f"{key}={escape_property(value)}" for key, value in self.properties)
            )
        parts.append(CMD_STRING)
        parts.append(escape_data(self.message))
        return "".join(parts)


def encode(name: str | None, properties: Properties | None = None, message: Any = None) -> str:
    """Encode a command as a single line, e.g. `encode("set-output", {"name": "x"}, 1)`."""
    return str(Command(name, message, _as_pairs(properties)))


def parse_command(line: str) -> Command:
    """
    Parse a line produced by `encode` back into a `Command`. The message and
    property values come back as unescaped strings.

    Property keys are never escaped, so a command only round-trips when its
    keys contain no `,`, `=`, space or `::`.
    """
    text = line.rstrip("\r\n")
    if not text.startswith(CMD_STRING):
        raise CommandParseError(f"Not a workflow command (missing leading '::'): {line!r}")
    end = text.find(CMD_STRING, len(CMD_STRING))
    if end < 0:
        raise CommandParseError(f"Not a workflow command (missing closing '::'): {line!r}")

    header = text[len(CMD_STRING) : end]
    message = unescape_data(text[end + len(CMD_STRING) :])

    name, _, props_text = header.partition(" ")
    properties: list[tuple[str, str]] = []
    if props_text:
        for item in props_text.split(","):
            key, sep, value = item.partition("=")
            if not sep:
                raise CommandParseError(f"Malformed command property {item!r} in: {line!r}")
            properties.append((key, unescape_property(value)))

    return Command(name, message, tuple(properties))
