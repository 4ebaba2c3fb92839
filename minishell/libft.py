"""Small string helpers with C-string semantics used throughout the shell.

Positions past the end of a string read as a terminating zero, so a
comparison over ``len(s) + 1`` characters also checks the terminator.
"""

from __future__ import annotations

from typing import Optional, Union

Text = Union[str, bytes]

_WHITESPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"


def _code(text: Text, index: int) -> int:
    """Return the character code at ``index``, or 0 past the end."""
    if index >= len(text):
        return 0
    value = text[index]
    return value if isinstance(value, int) else ord(value) & 0xFF


def _char_code(c: Union[str, int]) -> int:
    if isinstance(c, int):
        return c
    if not c:
        return 0
    if len(c) != 1:
        raise ValueError(f"expected a single character, got {c!r}")
    return ord(c)


def isalpha(c: Union[str, int]) -> bool:
    """True for an ASCII letter."""
    code = _char_code(c)
    return 65 <= code <= 90 or 97 <= code <= 122


def isdigit(c: Union[str, int]) -> bool:
    """True for an ASCII decimal digit."""
    return 48 <= _char_code(c) <= 57


def isalnum(c: Union[str, int]) -> bool:
    """True for an ASCII letter or digit."""
    return isalpha(c) or isdigit(c)


def atoi(text: str) -> int:
    """Parse a leading decimal integer, skipping whitespace; 0 if none."""
    stripped = text.lstrip(_WHITESPACE)
    sign = 1
    if stripped[:1] == "-":
        sign = -1
    if stripped[:1] in ("-", "+") and stripped:
        stripped = stripped[1:]
    digits = []
    for ch in stripped:
        if ch not in _DIGITS:
            break
        digits.append(ch)
    if not digits:
        return 0
    return sign * int("".join(digits))


def itoa(n: int) -> str:
    """Return the decimal representation of ``n``."""
    return str(int(n))


def split(text: str, sep: str) -> list[str]:
    """Split ``text`` on the single character ``sep``, dropping empty parts."""
    if len(sep) != 1:
        raise ValueError(f"separator must be a single character, got {sep!r}")
    return [part for part in text.split(sep) if part]


def strtrim(text: str, chars: str) -> str:
    """Remove any of ``chars`` from both ends of ``text``."""
    return text.strip(chars) if chars else text


def substr(text: str, start: int, length: int) -> str:
    """Return at most ``length`` characters of ``text`` beginning at ``start``."""
    if start < 0 or length < 0:
        raise ValueError("start and length must not be negative")
    if start >= len(text):
        return ""
    return text[start:start + length]


def strncmp(s1: Text, s2: Text, n: int) -> int:
    """Compare at most ``n`` characters; return the difference of the first mismatch."""
    if n <= 0:
        return 0
    i = 0
    while i < n - 1 and i < len(s1) and i < len(s2) and _code(s1, i) == _code(s2, i):
        i += 1
    return _code(s1, i) - _code(s2, i)


def memcmp(a: Text, b: Text, n: int) -> int:
    """Compare the first ``n`` character codes of ``a`` and ``b``."""
    for i in range(max(n, 0)):
        diff = _code(a, i) - _code(b, i)
        if diff:
            return diff
    return 0


def strnstr(haystack: str, needle: str, length: int) -> Optional[int]:
    """Index of ``needle`` lying wholly within the first ``length`` characters, or None."""
    if not needle:
        return 0
    if not haystack:
        return None
    limit = min(max(length, 0), len(haystack))
    index = haystack.find(needle, 0, limit)
    return None if index < 0 else index