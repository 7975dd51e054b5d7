"""Best-effort key → line index for TOML text.

``tomllib`` yields values without positions, so a second, line-oriented pass
records where each table header and key assignment first appears. The index
is built per manifest and dropped once the manifest model exists.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

KeyPath = Tuple[str, ...]

_BARE_KEY = re.compile(r"[A-Za-z0-9_-]+")
_ARRAY_MARK = "\x00[]"
_INVALID_MARK = "\x00invalid"
_SIMPLE_ESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}


class KeyLineIndex:
    """Maps dotted key paths to the 1-based line where they are first defined."""

    def __init__(self, lines: Dict[KeyPath, int]) -> None:
        self._lines = lines

    @classmethod
    def build(cls, text: str) -> "KeyLineIndex":
        lines: Dict[KeyPath, int] = {}
        current: KeyPath = ()
        open_string: Optional[str] = None

        for lineno, raw in enumerate(text.splitlines(), start=1):
            if open_string is not None:
                if open_string in raw:
                    open_string = None
                continue

            stripped = raw.strip()
            if not stripped or stripped.startswith("#"):
                continue

            if stripped.startswith("[["):
                parsed = _scan_key(stripped, 2)
                if parsed is not None and stripped.startswith("]]", parsed[1]):
                    current = tuple(parsed[0]) + (_ARRAY_MARK,)
                else:
                    current = (_INVALID_MARK,)
                continue

            if stripped.startswith("["):
                parsed = _scan_key(stripped, 1)
                if parsed is not None and stripped.startswith("]", parsed[1]):
                    current = tuple(parsed[0])
                    _record(lines, current, 0, lineno)
                else:
                    current = (_INVALID_MARK,)
                continue

            parsed = _scan_key(stripped, 0)
            if parsed is None or not stripped.startswith("=", parsed[1]):
                continue
            full = current + tuple(parsed[0])
            _record(lines, full, len(current), lineno)

            value = stripped[parsed[1] + 1 :].lstrip()
            for delimiter in ('"""', "'''"):
                if value.startswith(delimiter) and delimiter not in value[3:]:
                    open_string = delimiter
                    break

        return cls(lines)

    def line_for(self, path: KeyPath) -> Optional[int]:
        """Line of ``path``, else of its longest recorded prefix.

        Keys inside an inline table (``dependencies = { serde = "1" }``) are
        not indexed, so they resolve to the line of the enclosing assignment.
        """
        path = tuple(path)
        for end in range(len(path), 0, -1):
            line = self._lines.get(path[:end])
            if line is not None:
                return line
        return None

    def __len__(self) -> int:
        return len(self._lines)


def _record(lines: Dict[KeyPath, int], path: KeyPath, start: int, lineno: int) -> None:
    for end in range(max(start, 0) + 1, len(path) + 1):
        lines.setdefault(path[:end], lineno)


def _scan_key(text: str, pos: int) -> Optional[Tuple[List[str], int]]:
    """Parse a dotted key starting at ``pos``; return segments and the end offset."""
    segments: List[str] = []
    length = len(text)
    while True:
        pos = _skip_ws(text, pos)
        if pos >= length:
            return None
        char = text[pos]
        if char == '"':
            end = _basic_string_end(text, pos + 1)
            if end is None:
                return None
            segments.append(_unescape(text[pos + 1 : end]))
            pos = end + 1
        elif char == "'":
            end = text.find("'", pos + 1)
            if end == -1:
                return None
            segments.append(text[pos + 1 : end])
            pos = end + 1
        else:
            match = _BARE_KEY.match(text, pos)
            if match is None:
                return None
            segments.append(match.group(0))
            pos = match.end()
        pos = _skip_ws(text, pos)
        if pos < length and text[pos] == ".":
            pos += 1
            continue
        return segments, pos


def _skip_ws(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in " \t":
        pos += 1
    return pos


def _basic_string_end(text: str, pos: int) -> Optional[int]:
    while pos < len(text):
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if char == '"':
            return pos
        pos += 1
    return None


def _unescape(value: str) -> str:
    if "\\" not in value:
        return value
    out: List[str] = []
    index = 0
    while index < len(value):
        char = value[index]
        if char != "\\" or index + 1 >= len(value):
            out.append(char)
            index += 1
            continue
        marker = value[index + 1]
        if marker in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[marker])
            index += 2
            continue
        width = {"u": 4, "U": 8}.get(marker)
        digits = value[index + 2 : index + 2 + width] if width else ""
        if width and len(digits) == width and all(c in "0123456789abcdefABCDEF" for c in digits):
            codepoint = int(digits, 16)
            if codepoint <= 0x10FFFF:
                out.append(chr(codepoint))
                index += 2 + width
                continue
        out.append(char)
        index += 1
    return "".join(out)


__all__ = ["KeyLineIndex", "KeyPath"]
