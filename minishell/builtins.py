"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import enum
import os
import sys
from collections.abc import Callable, Sequence
from typing import Optional, TextIO

from .ast import Command
from .environment import Environment, format_export
from .errors import print_error
from .libft import isalpha, split
from .redirection import RedirectionError, apply_redirections


class Builtin(enum.Enum):
    """The built-in commands, numbered as the shell dispatches them."""

    ECHO = 1
    CD = 2
    PWD = 3
    EXPORT = 4
    UNSET = 5
    ENV = 6
    EXIT = 7


_NAMES = {
    "echo": Builtin.ECHO,
    "cd": Builtin.CD,
    "pwd": Builtin.PWD,
    "export": Builtin.EXPORT,
    "unset": Builtin.UNSET,
    "env": Builtin.ENV,
    "exit": Builtin.EXIT,
}


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``status``."""

    def __init__(self, status: int = 0) -> None:
        super().__init__(status)
        self.status = status


def builtin_kind(name: Optional[str]) -> Optional[Builtin]:
    """The built-in called ``name``, or None if it names an external program."""
    if not name:
        return None
    return _NAMES.get(name)


def _is_no_newline_flag(arg: str) -> bool:
    return arg.startswith("-") and all(ch == "n" for ch in arg[1:])


def echo(args: Sequence[str], out: TextIO) -> int:
    """Print the arguments separated by spaces; a leading ``-n`` drops the newline."""
    words = list(args)
    newline = True
    if words and _is_no_newline_flag(words[0]):
        newline = False
        words = words[1:]
    try:
        out.write(" ".join(words))
        if newline:
            out.write("\n")
    except OSError:
        return 1
    return 0


def cd(args: Sequence[str], env: Environment) -> int:
    """Change directory to the argument, or to ``HOME`` without one."""
    if len(args) > 1:
        print_error(None, "cd", "too many arguments")
        return 1
    if args:
        try:
            os.chdir(args[0])
        except OSError as exc:
            print_error("cd: ", args[0], exc.strerror)
            return exc.errno or 1
        return 0
    home = env.get("HOME")
    try:
        if home is None:
            raise FileNotFoundError
        os.chdir(home)
    except OSError:
        print_error("cd: ", None, "HOME not set")
        return 1
    return 0


def pwd(out: TextIO) -> int:
    """Print the current working directory."""
    try:
        cwd = os.getcwd()
    except OSError:
        return 126
    out.write(cwd + "\n")
    return 0


def valid_identifier(text: str) -> bool:
    """True if the key of ``text`` starts with a letter or ``_`` and continues with letters."""
    parts = split(text, "=")
    if not parts:
        return False
    key = parts[0]
    if not (isalpha(key[0]) or key[0] == "_"):
        return False
    return all(isalpha(ch) for ch in key[1:])


def export(args: Sequence[str], env: Environment, out: TextIO) -> int:
    """Add or replace variables, or list them all sorted when given none."""
    if not args:
        for entry in env.sorted_entries():
            out.write(format_export(entry) + "\n")
        return 0
    for arg in args:
        if not valid_identifier(arg):
            print_error("export: ", arg, "not a valid identifier")
            return 1
        env.set(arg)
    return 0


def unset(args: Sequence[str], env: Environment) -> int:
    """Remove the named variables; fails when no name is given."""
    if not args:
        return 1
    for name in args:
        env.unset(name)
    return 0


def print_env(env: Environment, out: TextIO) -> int:
    """Print every environment entry on its own line."""
    for entry in env:
        out.write(entry + "\n")
    return 0


def _close_descriptors(*fds: int) -> None:
    for fd in set(fds) - {0, 1, 2}:
        try:
            os.close(fd)
        except OSError:
            pass


def run_builtin(
    command: Command, env: Environment, fd_in: int = 0, fd_out: int = 1
) -> int:
    """Run a built-in command with its redirections and return its status.

    Output goes to ``fd_out`` (or the last output redirection). Descriptors
    other than the standard ones, passed in or opened here, are closed when
    done. ``exit`` raises :class:`ShellExit` after that cleanup.
    """
    kind = builtin_kind(command.name)
    if kind is None:
        raise ValueError(f"{command.name!r} is not a built-in command")
    try:
        in_fd, out_fd = apply_redirections(
            [*command.prefix, *command.suffix], fd_in, fd_out
        )
    except RedirectionError as exc:
        print_error(None, exc.filename, exc.strerror)
        _close_descriptors(fd_in, fd_out)
        return exc.status

    args = [arg.text for arg in command.suffix if arg.text is not None]
    sys.stdout.flush()
    if out_fd == 1:
        out: TextIO = sys.stdout
    else:
        out = os.fdopen(out_fd, "w", closefd=False)

    handlers: dict[Builtin, Callable[[], int]] = {
        Builtin.ECHO: lambda: echo(args, out),
        Builtin.CD: lambda: cd(args, env),
        Builtin.PWD: lambda: pwd(out),
        Builtin.EXPORT: lambda: export(args, env, out),
        Builtin.UNSET: lambda: unset(args, env),
        Builtin.ENV: lambda: print_env(env, out),
    }
    try:
        if kind is Builtin.EXIT:
            raise ShellExit(0)
        return handlers[kind]()
    finally:
        try:
            out.flush()
        except OSError:
            pass
        if out is not sys.stdout:
            out.close()
        _close_descriptors(fd_in, fd_out, in_fd, out_fd)