"""Character-level change detection for modified scalar values"""

from __future__ import annotations

import json
from typing import Any

from models.diff import CharRange


def stringify_value(value: Any) -> str:
    """Strings as-is, everything else as its JSON rendering"""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def find_char_changes(old_value: Any, new_value: Any) -> list[CharRange]:
    """
    Find the single span that differs between two values.

    Trims the common prefix, then the common suffix (never crossing the
    prefix), and reports one range from the first differing character to
    the end of the longer differing middle. Identical values yield [].
    """
    old_str = stringify_value(old_value)
    new_str = stringify_value(new_value)

    start = 0
    while start < len(old_str) and start < len(new_str) and old_str[start] == new_str[start]:
        start += 1

    old_end = len(old_str) - 1
    new_end = len(new_str) - 1
    while old_end > start and new_end > start and old_str[old_end] == new_str[new_end]:
        old_end -= 1
        new_end -= 1

    if start <= old_end or start <= new_end:
        return [CharRange(start=start, end=max(old_end, new_end) + 1)]
    return []
