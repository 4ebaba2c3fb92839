"""The shell's environment: an ordered list of ``KEY=VALUE`` entries."""

from __future__ import annotations

import functools
from collections.abc import Iterable, Iterator, Mapping
from typing import Optional


def get_key(entry: str) -> str:
    """Return the part of ``entry`` before the first ``=``."""
    return entry.split("=", 1)[0]


def has_value(entry: str) -> bool:
    """True if ``entry`` contains an ``=``, even with an empty value."""
    return "=" in entry


def compare_entries(a: Optional[str], b: Optional[str]) -> int:
    """Order two entries character by character.

    A missing first entry sorts first, then a missing second one. A string
    that is a prefix of the other sorts first, with result -1 or 1; otherwise
    the difference of the first differing characters is returned.
    """
    if a is None:
        return -1
    if b is None:
        return 1
    for ca, cb in zip(a, b):
        if ca != cb:
            return ord(ca) - ord(cb)
    if len(a) == len(b):
        return 0
    return -1 if len(a) < len(b) else 1


def format_export(entry: str) -> str:
    """Render an entry the way ``export`` without arguments lists it."""
    if has_value(entry):
        key, value = entry.split("=", 1)
        return f'declare -x {key}="{value}"'
    return f"declare -x {entry}"


class Environment:
    """Variables in insertion order; entries without ``=`` are kept too."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries: list[str] = list(entries)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "Environment":
        """Build an environment from a mapping such as ``os.environ``."""
        return cls(f"{key}={value}" for key, value in mapping.items())

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> Optional[str]:
        """Value of the first ``name=value`` entry, or None."""
        prefix = name + "="
        for entry in self._entries:
            if entry.startswith(prefix):
                return entry[len(prefix):]
        return None

    def has_key(self, key: str) -> bool:
        """True if some entry has the key of ``key`` (which may be an assignment)."""
        wanted = get_key(key)
        return any(get_key(entry) == wanted for entry in self._entries)

    def set(self, assignment: str) -> None:
        """Replace the entry with the same key, or append ``assignment``."""
        key = get_key(assignment)
        for index, entry in enumerate(self._entries):
            if get_key(entry) == key:
                self._entries[index] = assignment
                return
        self._entries.append(assignment)

    def unset(self, name: str) -> bool:
        """Remove every entry whose key is ``name``; report whether any was."""
        kept = [entry for entry in self._entries if get_key(entry) != name]
        removed = len(kept) != len(self._entries)
        self._entries = kept
        return removed

    def sorted_entries(self) -> list[str]:
        """A sorted copy of the entries, as ``export`` lists them."""
        return sorted(self._entries, key=functools.cmp_to_key(compare_entries))

    def as_dict(self) -> dict[str, str]:
        """The entries that carry a value, as a mapping for child processes."""
        result: dict[str, str] = {}
        for entry in self._entries:
            if has_value(entry):
                key, value = entry.split("=", 1)
                result.setdefault(key, value)
        return result