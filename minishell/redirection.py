"""Opening the files named by ``<``, ``>`` and ``>>`` redirections."""

from __future__ import annotations

import os
from collections.abc import Iterable

from .ast import Argument, Redirection
from .errors import ShellError

_FILE_MODE = 0o644


class RedirectionError(ShellError):
    """A redirection target could not be opened; ``status`` is the errno."""

    def __init__(self, filename: str, errno: int, strerror: str) -> None:
        super().__init__(f"{filename}: {strerror}", status=errno)
        self.filename = filename
        self.errno = errno
        self.strerror = strerror


def open_redirection(
    redirection: Redirection, fd_in: int, fd_out: int
) -> tuple[int, int]:
    """Open the target of one redirection and return the new ``(fd_in, fd_out)``.

    ``>`` truncates or creates the file, ``>>`` appends to it, and any other
    operator opens it for reading. The descriptors passed in are not closed.
    """
    try:
        if redirection.op == ">":
            fd_out = os.open(
                redirection.file, os.O_CREAT | os.O_TRUNC | os.O_WRONLY, _FILE_MODE
            )
        elif redirection.op == ">>":
            fd_out = os.open(
                redirection.file, os.O_APPEND | os.O_CREAT | os.O_WRONLY, _FILE_MODE
            )
        else:
            fd_in = os.open(redirection.file, os.O_RDONLY)
    except OSError as exc:
        errno = exc.errno or 1
        raise RedirectionError(
            redirection.file, errno, exc.strerror or os.strerror(errno)
        ) from exc
    return fd_in, fd_out


def apply_redirections(
    items: Iterable[Argument], fd_in: int, fd_out: int
) -> tuple[int, int]:
    """Apply every redirection among ``items`` in order.

    Returns the resulting ``(fd_in, fd_out)``. Descriptors opened here and
    then replaced by a later redirection are closed; if a redirection fails,
    all descriptors opened here are closed before the error propagates.
    """
    opened: set[int] = set()
    try:
        for item in items:
            if not item.is_redirect():
                continue
            new_in, new_out = open_redirection(item.redirection, fd_in, fd_out)
            for old, new in ((fd_in, new_in), (fd_out, new_out)):
                if old != new:
                    opened.add(new)
                    if old in opened:
                        os.close(old)
                        opened.discard(old)
            fd_in, fd_out = new_in, new_out
    except RedirectionError:
        for fd in opened:
            os.close(fd)
        raise
    return fd_in, fd_out