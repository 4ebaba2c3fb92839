# minishell

This package is the execution core of a small POSIX-style shell, written as a
Python library. You pass it a syntax tree that has already been parsed, and it
runs that tree the way a shell would. It handles external programs, built-in
commands, the redirections `<`, `>` and `>>`, pipelines, `&&` / `||`
expressions and subshells. It keeps its own shell environment, separate from
`os.environ`.

Pipelines and subshells run in processes made with `os.fork`, so the package
needs a POSIX system.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Example

```python
from minishell.ast import Argument, Command, Root
from minishell.environment import Environment
from minishell.executor import Executor

env = Environment.from_mapping({"PATH": "/usr/bin:/bin", "HOME": "/tmp"})
command = Command(name="echo", suffix=[Argument(text="hello"), Argument(text="world")])
status = Executor(env).run(Root(items=[command]))

print(status)          # 0
print(env.get("?"))    # "0"
```

## Modules

### `minishell.ast`

This module holds the tree nodes:

- `Root` holds the whole line.
- `Command` has a `name`, a `prefix` and a `suffix`. The prefix and suffix are
  lists of `Argument`. `Command.words()` gives the argument vector.
- `Argument` holds either a word (`text`) or a `Redirection(op, file)`.
  `is_redirect()` tells you which.
- `Pipeline` has `items`, each a `Command` or a `Subshell`.
- `Subshell` has `items`.
- `LogicalExpression(left, op, right)` takes an `op` of `NodeType.AND` or
  `NodeType.OR`. Any other value raises `ValueError`.

`node_type(node)` classifies a node. Anything it does not know is
`NodeType.ERROR`.

### `minishell.environment`

`Environment` is an ordered list of entries of the form `KEY=value`. It also
keeps entries that have no `=`. Its methods:

- `get(name)` returns the value, or `None`.
- `set(assignment)` replaces the entry with the same key, or appends a new one.
- `unset(name)` returns whether anything was removed.
- `has_key(key)` reports whether an entry has that key.
- `sorted_entries()` returns a sorted copy of the entries.
- `as_dict()` returns the entries that have a value, as a mapping for child
  processes.

`Environment.from_mapping` builds an environment from a mapping such as
`os.environ`. The module also provides `get_key`, `has_value`,
`compare_entries` and `format_export`.

### `minishell.builtins`

The built-in commands are `echo`, `cd`, `pwd`, `export`, `unset` and `env`.
Each has its own function; `env` is implemented by `print_env`. There is also
`exit`, which `run_builtin` handles by raising `ShellExit`.

`builtin_kind(name)` maps a name to a `Builtin` member, or to `None` for an
external program. `run_builtin(command, env, fd_in, fd_out)` applies the
command's redirections, runs the built-in and returns its status.

### `minishell.redirection`

- `open_redirection(redirection, fd_in, fd_out)` opens the target of one
  redirection. `>` truncates the file, `>>` appends to it, and any other
  operator opens the file for reading. Files are created with mode `0644`.
- `apply_redirections(items, fd_in, fd_out)` applies every redirection in a
  list of arguments and returns the final `(fd_in, fd_out)`.

A failure raises `RedirectionError`. Its `status` is the errno.

### `minishell.executor`

`Executor(env)` walks a tree:

- `run(root)` runs a whole line.
- `execute_list` runs a list of nodes.
- `execute_command` runs a single command.
- `execute_pipeline` runs a pipeline.
- `execute_logical` runs an `&&` / `||` expression.
- `execute_subshell` runs a subshell.

`resolve_command(name, env)` finds the program that a name runs. It uses the
name as given when that is executable. Otherwise it searches each directory in
`PATH`, except for names that start with `.`, which it does not search for.

### `minishell.errors`

This module provides `ShellError`, `format_error` and `print_error`.
Diagnostic messages are written to standard error with the prefix `ms: `.

### `minishell.libft`

This module has small string helpers with C-string semantics: `atoi`, `itoa`,
`split`, `strtrim`, `substr`, `strncmp`, `strnstr`, `memcmp`, `isalpha`,
`isalnum` and `isdigit`.

## Behaviour notes

- `Executor.run` stores the exit status under the key `?`. It returns `-1` if
  it is given `None`.
- A list stops at the first command that fails.
- The status of a pipeline is the status of its last element, or 1 if that
  element did not exit normally.
- A command that cannot be found prints `command not found` and returns 127.
- `echo` takes a first argument of `-n`, `-nn` and so on to leave out the
  newline.
- `cd` with more than one argument fails with `too many arguments`. With no
  argument it changes to `$HOME`, and prints `HOME not set` if that fails.
- `pwd` returns 126 if it cannot get the current directory.
- `export` with no arguments prints the sorted entries. Entries with a value
  appear as `declare -x KEY="value"`. Entries without one appear as
  `declare -x KEY`.
- `export` accepts a key that starts with a letter or `_` and continues with
  letters only. Any other key is reported as `not a valid identifier` and
  returns 1.
- `unset` with no arguments returns 1.
- `exit` raises `ShellExit` with status 0. Catching it and ending the session
  is up to the caller.

## What this package does not do

The package does not read input, show a prompt, or tokenise and parse command
lines. It has no here-documents, no variable expansion, no quote handling and
no signal handling. There is no command-line program: trees are built in code
from the classes in `minishell.ast` and run with `Executor`.