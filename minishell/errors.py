"""Error reporting in the shell's diagnostic format."""

from __future__ import annotations

import sys
from typing import Optional

PROGRAM_PREFIX = "ms: "


class ShellError(Exception):
    """A failure that ends a command with a non-zero exit status."""

    def __init__(self, message: str, status: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def format_error(
    prefix: Optional[str],
    subject: Optional[str],
    detail: Optional[str],
) -> str:
    """Build a diagnostic line, without the trailing newline.

    The line is ``ms: `` followed by ``prefix``, then ``subject`` and ``": "``
    when a subject is given, then ``detail``. Missing parts are left out.
    """
    parts = [PROGRAM_PREFIX]
    if prefix:
        parts.append(prefix)
    if subject is not None:
        parts.append(f"{subject}: ")
    if detail:
        parts.append(detail)
    return "".join(parts)


def print_error(
    prefix: Optional[str],
    subject: Optional[str],
    detail: Optional[str],
) -> None:
    """Write a diagnostic line to standard error."""
    sys.stderr.write(format_error(prefix, subject, detail) + "\n")
    sys.stderr.flush()