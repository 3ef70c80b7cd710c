"""
Path Mapper - Locate JSON paths in formatted JSON text

Paths use dots for object keys and brackets for array indices
(`users[0].name`); the document root is the empty path.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from models.diff import LineRange

_KEY_PATTERN = re.compile(r'^"((?:[^"\\]|\\.)*)"\s*:\s*(.*)$')
_OPENERS = "{["
_CLOSERS = "}]"


@dataclass
class _Frame:
    """An open object or array while scanning"""

    path: str
    array_index: int | None = None  # None for objects, -1 before the first element


def _structural_brackets(line: str) -> Iterator[str]:
    """Yield the bracket characters of a line that sit outside string literals"""
    in_string = False
    escaped = False
    for char in line:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char in _OPENERS or char in _CLOSERS:
            yield char


def _bracket_counts(line: str) -> tuple[int, int]:
    opens = closes = 0
    for char in _structural_brackets(line):
        if char in _OPENERS:
            opens += 1
        else:
            closes += 1
    return opens, closes


def _decode_key(raw: str) -> str:
    try:
        return json.loads(f'"{raw}"')
    except ValueError:
        return raw


def _opens_container(line: str) -> bool:
    opens, closes = _bracket_counts(line)
    return opens > closes


def find_closing_line(lines: list[str], start_line: int) -> int:
    """Find the line closing the bracket opened on start_line"""
    depth = 0
    for index in range(start_line, len(lines)):
        for char in _structural_brackets(lines[index]):
            if char in _OPENERS:
                depth += 1
            else:
                depth -= 1
                if depth == 0:
                    return index
    return start_line


def build_path_line_map(formatted_json: str) -> dict[str, LineRange]:
    """
    Build a map from JSON paths to the line ranges they occupy.

    Single forward scan keeping a stack of open containers. Lines that fit
    no known shape are skipped, so malformed text yields a partial map
    instead of an error.
    """
    lines = formatted_json.split("\n")
    path_map: dict[str, LineRange] = {}
    stack: list[_Frame] = []

    for index, line in enumerate(lines):
        trimmed = line.strip()
        if not trimmed:
            continue

        # Pop on standalone closing brackets
        if trimmed.rstrip(",") in ("}", "]"):
            opens, closes = _bracket_counts(line)
            if closes > opens and stack:
                stack.pop()
            continue

        if not stack:
            path = ""
            value = trimmed
        elif stack[-1].array_index is not None:
            parent = stack[-1]
            parent.array_index += 1
            path = f"{parent.path}[{parent.array_index}]"
            value = trimmed
        else:
            key_match = _KEY_PATTERN.match(trimmed)
            if not key_match:
                continue
            parent_path = stack[-1].path
            key = _decode_key(key_match.group(1))
            path = f"{parent_path}.{key}" if parent_path else key
            value = key_match.group(2)

        end_line = index
        if value[:1] in ("{", "[") and _opens_container(value):
            end_line = find_closing_line(lines, index)
            stack.append(_Frame(path=path, array_index=-1 if value[0] == "[" else None))

        path_map[path] = LineRange(start=index, end=end_line)

    return path_map


def find_approximate_line(formatted_json: str, key: str, value: Any) -> LineRange | None:
    """
    Find an approximate line range for a key/value pair by text search.

    Prefers the first line holding both the quoted key and the rendered
    value, then the first line holding the key. Returns None if the key
    does not occur.
    """
    lines = formatted_json.split("\n")
    search_key = json.dumps(key, ensure_ascii=False)
    value_str = json.dumps(value, ensure_ascii=False)

    key_lines = [index for index, line in enumerate(lines) if search_key in line]
    if not key_lines:
        return None

    start = next((index for index in key_lines if value_str in lines[index]), key_lines[0])
    end = find_closing_line(lines, start) if _opens_container(lines[start]) else start
    return LineRange(start=start, end=end)
