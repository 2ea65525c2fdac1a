"""
Workflow command encoding: `::name key=value,key=value::message` lines.

Usage::

    from actionkit.commands import CommandIssuer

    issuer = CommandIssuer(print)
    issuer.issue_command("set-output", {"name": "result"}, "ok")
"""

from actionkit.commands.command import (
    CONVENTIONAL_COMMANDS,
    Command,
    CommandParseError,
    encode,
    is_conventional,
    parse_command,
)
from actionkit.commands.issuer import CommandIssuer
from actionkit.commands.values import CommandValue, to_command_value

__all__ = [
    "CONVENTIONAL_COMMANDS",
    "Command",
    "CommandIssuer",
    "CommandParseError",
    "CommandValue",
    "encode",
    "is_conventional",
    "parse_command",
    "to_command_value",
]
