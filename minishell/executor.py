"""Running a parsed command tree: commands, pipelines, subshells and ``&&``/``||``."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Callable, Sequence
from typing import Optional

from .ast import Command, LogicalExpression, Node, NodeType, Pipeline, Root, Subshell, node_type
from .builtins import ShellExit, builtin_kind, run_builtin
from .environment import Environment
from .errors import print_error
from .libft import itoa, split
from .redirection import RedirectionError, apply_redirections

NOT_FOUND_STATUS = 127


def resolve_command(name: Optional[str], env: Environment) -> Optional[str]:
    """Find the program ``name`` runs, or None if there is none.

    A name that is itself executable is used as given. Otherwise a name
    starting with ``.`` is not searched for; any other name is looked up in
    each directory of ``PATH`` in turn.
    """
    if not name:
        return None
    if os.access(name, os.X_OK):
        return name
    if name.startswith("."):
        return None
    search = env.get("PATH")
    if search is None:
        return None
    for directory in split(search, ":"):
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def _close_descriptors(*fds: int) -> None:
    for fd in set(fds) - {0, 1, 2}:
        try:
            os.close(fd)
        except OSError:
            pass


def _flush_standard_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            pass


def _status_from_wait(status: int) -> int:
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    if os.WIFSIGNALED(status):
        return os.WTERMSIG(status)
    return status


class Executor:
    """Runs command trees against one shell environment."""

    def __init__(self, env: Environment) -> None:
        self.env = env

    def run(self, root: Optional[Root]) -> int:
        """Run a whole input line and record its status in ``?``.

        Returns -1 when there is nothing to run. :class:`ShellExit` from the
        ``exit`` built-in propagates to the caller.
        """
        if root is None:
            return -1
        status = 0
        if root.items:
            status = self.execute_list(root.items, 0, 1)
        self.env.set(f"?={itoa(status)}")
        return status

    def execute_list(self, items: Sequence[Node], fd_in: int, fd_out: int) -> int:
        """Run the items in order, stopping at the first non-zero status."""
        status = 0
        for item in items:
            kind = node_type(item)
            if kind is NodeType.COMMAND:
                status = self.execute_command(item, fd_in, fd_out)
            elif kind is NodeType.SUBSHELL:
                status = self.execute_subshell(item, fd_in, fd_out)
            elif kind is NodeType.PIPELINE:
                status = self.execute_pipeline(item, fd_in, fd_out)
            elif kind is NodeType.LOGICAL_EXPRESSION:
                status = self.execute_logical(item, fd_in, fd_out)
            if status != 0:
                return status
        return status

    def execute_command(self, command: Command, fd_in: int, fd_out: int) -> int:
        """Run a built-in in this process, or an external program and wait for it.

        Descriptors other than the standard ones are closed afterwards.
        """
        if builtin_kind(command.name) is not None:
            return run_builtin(command, self.env, fd_in, fd_out)
        try:
            in_fd, out_fd = apply_redirections(
                [*command.prefix, *command.suffix], fd_in, fd_out
            )
        except RedirectionError as exc:
            print_error(None, exc.filename, exc.strerror)
            _close_descriptors(fd_in, fd_out)
            return exc.status
        try:
            path = resolve_command(command.name, self.env)
            if path is None:
                print_error(None, command.name, "command not found")
                return NOT_FOUND_STATUS
            argv = [path, *command.words()[1:]]
            executable = path if "/" in path else f"./{path}"
            _flush_standard_streams()
            try:
                completed = subprocess.run(
                    argv,
                    executable=executable,
                    stdin=in_fd,
                    stdout=out_fd,
                    env=self.env.as_dict(),
                    check=False,
                )
            except OSError as exc:
                return exc.errno or 1
            code = completed.returncode
            return -code if code < 0 else code
        finally:
            _close_descriptors(fd_in, fd_out, in_fd, out_fd)

    def execute_logical(
        self, expression: LogicalExpression, fd_in: int, fd_out: int
    ) -> int:
        """Run the left side, then the right one as ``&&`` or ``||`` demands."""
        status = self.execute_list(expression.left, fd_in, fd_out)
        if status == 0 and expression.op is NodeType.AND:
            return self.execute_list(expression.right, fd_in, fd_out)
        if status != 0 and expression.op is NodeType.OR:
            return self.execute_list(expression.right, fd_in, fd_out)
        return status

    def execute_subshell(self, subshell: Subshell, fd_in: int, fd_out: int) -> int:
        """Run the subshell's list in a child process and return its status."""
        try:
            pid = self._fork(lambda: self.execute_list(subshell.items, fd_in, fd_out))
            _, status = os.waitpid(pid, 0)
        except OSError as exc:
            return exc.errno or 1
        return _status_from_wait(status)

    def execute_pipeline(self, pipeline: Pipeline, fd_in: int, fd_out: int) -> int:
        """Run every element in its own process, joined by pipes.

        The status is that of the last element, or 1 if it did not exit
        normally.
        """
        items = list(pipeline.items)
        if not items:
            return 0
        pipes: list[tuple[int, int]] = []
        pids: list[int] = []
        try:
            for _ in range(len(items) - 1):
                pipes.append(os.pipe())
            pipe_fds = [fd for pair in pipes for fd in pair]
            last = len(items) - 1
            for index, item in enumerate(items):
                child_in = fd_in if index == 0 else pipes[index - 1][0]
                child_out = fd_out if index == last else pipes[index][1]
                pids.append(
                    self._fork(self._pipeline_job(item, child_in, child_out, pipe_fds))
                )
        except OSError as exc:
            _close_descriptors(*(fd for pair in pipes for fd in pair))
            for pid in pids:
                os.waitpid(pid, 0)
            return exc.errno or 1
        _close_descriptors(*(fd for pair in pipes for fd in pair))
        result = 1
        for index, pid in enumerate(pids):
            _, status = os.waitpid(pid, 0)
            if index == len(pids) - 1 and os.WIFEXITED(status):
                result = os.WEXITSTATUS(status)
        return result

    def _pipeline_job(
        self, item: Node, fd_in: int, fd_out: int, pipe_fds: list[int]
    ) -> Callable[[], int]:
        def job() -> int:
            _close_descriptors(*(fd for fd in pipe_fds if fd not in (fd_in, fd_out)))
            if fd_in != 0:
                os.dup2(fd_in, 0)
                os.close(fd_in)
            if fd_out != 1:
                os.dup2(fd_out, 1)
                os.close(fd_out)
            sys.stdout = open(1, "w", closefd=False)
            if isinstance(item, Command):
                if builtin_kind(item.name) is not None:
                    return run_builtin(item, self.env, 0, 1)
                return self._exec_command(item)
            if isinstance(item, Subshell):
                return self.execute_list(item.items, 0, 1)
            raise TypeError(f"cannot run {type(item).__name__} in a pipeline")

        return job

    def _exec_command(self, command: Command) -> int:
        """Replace the current (child) process with the command's program."""
        try:
            in_fd, out_fd = apply_redirections(
                [*command.prefix, *command.suffix], 0, 1
            )
        except RedirectionError as exc:
            print_error(None, exc.filename, exc.strerror)
            return exc.status
        path = resolve_command(command.name, self.env)
        if path is None:
            print_error(None, command.name, "command not found")
            return NOT_FOUND_STATUS
        if in_fd != 0:
            os.dup2(in_fd, 0)
            os.close(in_fd)
        if out_fd != 1:
            os.dup2(out_fd, 1)
            os.close(out_fd)
        _flush_standard_streams()
        try:
            os.execve(path, [path, *command.words()[1:]], self.env.as_dict())
        except OSError as exc:
            return exc.errno or 1
        return 1

    @staticmethod
    def _fork(job: Callable[[], int]) -> int:
        """Start ``job`` in a child process that exits with its status."""
        _flush_standard_streams()
        pid = os.fork()
        if pid != 0:
            return pid
        status = 1
        try:
            status = job()
        except ShellExit as exc:
            status = exc.status
        except BaseException as exc:  # the child must never return to the caller
            try:
                print_error(None, None, str(exc) or type(exc).__name__)
            except BaseException:
                pass
            status = 1
        finally:
            _flush_standard_streams()
            os._exit(int(status) & 0xFF)
        return pid