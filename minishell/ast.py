"""Syntax tree produced by the parser and consumed by the executor."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Union


class NodeType(enum.Enum):
    """Kinds of nodes and operators in a command tree."""

    COMMAND = "command"
    PIPELINE = "pipeline"
    SUBSHELL = "subshell"
    LOGICAL_EXPRESSION = "logical_expression"
    REDIRECT = "redirect"
    WORD = "word"
    AND = "and"
    OR = "or"
    ERROR = "error"


@dataclass
class Redirection:
    """A redirection operator such as ``<``, ``>`` or ``>>`` and its target file."""

    op: str
    file: str


@dataclass
class Argument:
    """A prefix or suffix element: either a word or a redirection."""

    text: Optional[str] = None
    redirection: Optional[Redirection] = None

    def is_redirect(self) -> bool:
        """True if this element is a redirection rather than a word."""
        return self.redirection is not None


@dataclass
class Command:
    """A simple command: name, leading redirections and trailing arguments."""

    name: str
    prefix: list[Argument] = field(default_factory=list)
    suffix: list[Argument] = field(default_factory=list)

    def words(self) -> list[str]:
        """The argument vector: the name followed by every suffix word."""
        return [self.name] + [arg.text for arg in self.suffix if arg.text is not None]


@dataclass
class Subshell:
    """A parenthesised list run in a child process."""

    items: list["Node"] = field(default_factory=list)


@dataclass
class Pipeline:
    """Commands or subshells joined by pipes."""

    items: list[Union[Command, Subshell]] = field(default_factory=list)


@dataclass
class LogicalExpression:
    """Two lists joined by ``&&`` or ``||``."""

    left: list["Node"]
    op: NodeType
    right: list["Node"]

    def __post_init__(self) -> None:
        if self.op not in (NodeType.AND, NodeType.OR):
            raise ValueError(f"logical operator must be AND or OR, not {self.op}")


Node = Union[Command, Pipeline, Subshell, LogicalExpression]


@dataclass
class Root:
    """The whole parsed input line."""

    items: list[Node] = field(default_factory=list)


def node_type(node: object) -> NodeType:
    """Classify a list element; anything unknown is ``NodeType.ERROR``."""
    if isinstance(node, Command):
        return NodeType.COMMAND
    if isinstance(node, Pipeline):
        return NodeType.PIPELINE
    if isinstance(node, Subshell):
        return NodeType.SUBSHELL
    if isinstance(node, LogicalExpression):
        return NodeType.LOGICAL_EXPRESSION
    return NodeType.ERROR