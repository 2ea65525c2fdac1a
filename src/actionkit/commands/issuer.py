"""Issues workflow commands to an injected line sink."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from actionkit.commands.command import Command, Properties

log = structlog.get_logger(__name__)

UNCONVENTIONAL_NOTICE = "Issuing unconventional command."


class CommandIssuer:
    """
    Encodes commands and writes each one as a single line via `write_line`.

    Unconventional command names are still written, but a warning is logged
    (and passed to `notify`, if given) before the line goes out.
    """

    def __init__(
        self,
        write_line: Callable[[str], None],
        notify: Callable[[str], None] | None = None,
    ) -> None:
        self._write_line = write_line
        self._notify = notify

    def issue(self, name: str, message: Any = None) -> None:
        self.issue_command(name, None, message)

    def issue_command(
        self,
        name: str,
        properties: Properties | None = None,
        message: Any = None,
    ) -> None:
        cmd = Command(name, message, properties or ())

        if not cmd.conventional:
            log.warning("unconventional_command", command=name)
            if self._notify is not None:
                self._notify(UNCONVENTIONAL_NOTICE)

        self._write_line(str(cmd))
