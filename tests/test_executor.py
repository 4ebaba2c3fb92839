import errno
import os
import signal
import sys

import pytest

from minishell.ast import (
    Argument,
    Command,
    LogicalExpression,
    NodeType,
    Pipeline,
    Redirection,
    Root,
    Subshell,
)
from minishell.builtins import ShellExit
from minishell.environment import Environment
from minishell.executor import Executor, resolve_command


@pytest.fixture
def env(tmp_path):
    return Environment(["PATH=/usr/bin:/bin", f"HOME={tmp_path}"])


@pytest.fixture
def executor(env):
    return Executor(env)


def words(*texts):
    return [Argument(text) for text in texts]


def to_file(path, op=">"):
    return Argument(redirection=Redirection(op, str(path)))


def test_resolve_command_searches_path(env):
    found = resolve_command("sh", env)
    assert found.endswith("/sh")
    assert os.access(found, os.X_OK)


def test_resolve_command_keeps_executable_path(env):
    assert resolve_command(sys.executable, env) == sys.executable


def test_resolve_command_missing(env):
    assert resolve_command("no-such-program-here", env) is None
    assert resolve_command("./no-such-program-here", env) is None
    assert resolve_command("", env) is None


def test_resolve_command_without_path(tmp_path):
    assert resolve_command("sh", Environment([f"HOME={tmp_path}"])) is None


def test_builtin_echo_to_file(executor, tmp_path):
    out = tmp_path / "out.txt"
    cmd = Command("echo", suffix=[*words("hello", "world"), to_file(out)])
    assert executor.execute_command(cmd, 0, 1) == 0
    assert out.read_text() == "hello world\n"


def test_external_command_sees_environment(executor, env, tmp_path):
    env.set("FOO=bar")
    out = tmp_path / "out.txt"
    cmd = Command("sh", suffix=[*words("-c", 'printf %s "$FOO"'), to_file(out)])
    assert executor.execute_command(cmd, 0, 1) == 0
    assert out.read_text() == "bar"


def test_external_exit_status(executor):
    assert executor.execute_command(Command("sh", suffix=words("-c", "exit 3")), 0, 1) == 3


def test_command_not_found(executor):
    assert executor.execute_command(Command("no-such-program-here"), 0, 1) == 127


def test_missing_input_file(executor, tmp_path):
    cmd = Command("cat", suffix=[to_file(tmp_path / "missing", "<")])
    assert executor.execute_command(cmd, 0, 1) == errno.ENOENT


def test_killed_by_signal(executor):
    cmd = Command("sh", suffix=words("-c", "kill -TERM $$"))
    assert executor.execute_command(cmd, 0, 1) == signal.SIGTERM


def test_export_persists_in_shell(executor, env):
    assert executor.execute_command(Command("export", suffix=words("FOO=bar")), 0, 1) == 0
    assert env.get("FOO") == "bar"


def test_list_stops_at_failure(executor, tmp_path):
    out = tmp_path / "out.txt"
    items = [Command("false"), Command("echo", suffix=[*words("x"), to_file(out)])]
    assert executor.execute_list(items, 0, 1) != 0
    assert not out.exists()


@pytest.mark.parametrize(
    "left, op, runs",
    [
        ("true", NodeType.AND, True),
        ("false", NodeType.AND, False),
        ("true", NodeType.OR, False),
        ("false", NodeType.OR, True),
    ],
)
def test_logical(executor, tmp_path, left, op, runs):
    out = tmp_path / "out.txt"
    expr = LogicalExpression(
        [Command(left)], op, [Command("echo", suffix=[*words("ran"), to_file(out)])]
    )
    status = executor.execute_logical(expr, 0, 1)
    assert out.exists() is runs
    if runs:
        assert status == 0
        assert out.read_text() == "ran\n"


def test_pipeline_passes_output(executor, tmp_path):
    out = tmp_path / "out.txt"
    pipeline = Pipeline(
        [Command("echo", suffix=words("hello")), Command("cat", suffix=[to_file(out)])]
    )
    assert executor.execute_pipeline(pipeline, 0, 1) == 0
    assert out.read_text() == "hello\n"


def test_pipeline_three_stages(executor, tmp_path):
    out = tmp_path / "out.txt"
    pipeline = Pipeline(
        [
            Command("sh", suffix=words("-c", "printf 'b\\na\\n'")),
            Command("sort"),
            Command("cat", suffix=[to_file(out)]),
        ]
    )
    assert executor.execute_pipeline(pipeline, 0, 1) == 0
    assert out.read_text() == "a\nb\n"


def test_pipeline_status_is_last(executor):
    assert executor.execute_pipeline(Pipeline([Command("true"), Command("false")]), 0, 1) == 1
    assert executor.execute_pipeline(Pipeline([Command("false"), Command("true")]), 0, 1) == 0
    last = Command("sh", suffix=words("-c", "exit 4"))
    assert executor.execute_pipeline(Pipeline([Command("true"), last]), 0, 1) == 4


def test_pipeline_builtin_does_not_change_shell(executor, env):
    pipeline = Pipeline([Command("export", suffix=words("FOO=bar")), Command("true")])
    assert executor.execute_pipeline(pipeline, 0, 1) == 0
    assert env.get("FOO") is None


def test_subshell_status(executor):
    sub = Subshell([Command("sh", suffix=words("-c", "exit 5"))])
    assert executor.execute_subshell(sub, 0, 1) == 5


def test_subshell_is_isolated(executor, env, tmp_path):
    before = os.getcwd()
    target = tmp_path / "inner"
    target.mkdir()
    sub = Subshell(
        [Command("export", suffix=words("FOO=bar")), Command("cd", suffix=words(str(target)))]
    )
    assert executor.execute_subshell(sub, 0, 1) == 0
    assert env.get("FOO") is None
    assert os.getcwd() == before


def test_run_records_status(executor, env):
    assert executor.run(Root([Command("false")])) == 1
    assert env.get("?") == "1"
    assert executor.run(Root([Command("true")])) == 0
    assert env.get("?") == "0"


def test_run_nothing(executor, env):
    assert executor.run(None) == -1
    assert executor.run(Root([])) == 0
    assert env.get("?") == "0"


def test_exit_raises(executor):
    with pytest.raises(ShellExit) as info:
        executor.run(Root([Command("exit")]))
    assert info.value.status == 0