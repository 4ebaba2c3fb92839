"""Execution core of a small POSIX-style shell: tree nodes, environment, built-ins, redirections and an executor."""

__version__ = "0.1.0"
__all__ = ["ast", "builtins", "environment", "errors", "executor", "libft", "redirection"]