"""
Diff Service - Compare two JSON documents and map changes onto lines

Both inputs are re-rendered through the JSON codec; the structural delta is
then mapped back onto line numbers of each side's formatted text. Nothing
here raises on bad input: unparseable documents give an empty result and
changes that cannot be located are counted without line marks.
"""

from __future__ import annotations

import re
from typing import Any

from models.diff import (
    ChangeType,
    CharRange,
    DiffOptions,
    DiffResult,
    DiffStats,
    LineMark,
    LineRange,
    UnifiedDiffResult,
)
from services.char_diff import find_char_changes
from services.diff_generator import DiffGenerator
from services.json_codec import format_json, parse_json, render_json
from services.path_mapper import build_path_line_map, find_approximate_line
from services.structural_delta import ARRAY_MARKER, ARRAY_MARKER_KEY, MOVE_MARKER, compute_delta

_LEFT_INDEX_KEY = re.compile(r"^_(\d+)$")


def _is_scalar(value: Any) -> bool:
    return not isinstance(value, (dict, list))


def _is_move(value: Any) -> bool:
    return isinstance(value, list) and len(value) == 3 and value[0] == "" and value[2] == MOVE_MARKER


def _mark_range(
    marks: list[LineMark],
    line_range: LineRange | None,
    change_type: ChangeType,
    path: str,
    char_changes: list[CharRange] | None = None,
) -> None:
    if line_range is None:
        return
    for line in range(line_range.start, line_range.end + 1):
        marks.append(LineMark(line=line, change_type=change_type, path=path, char_changes=char_changes))


class DiffService:
    """Service for comparing JSON documents"""

    def __init__(self, options: DiffOptions | None = None):
        self.options = options or DiffOptions()

    def format_json(self, content: str) -> str:
        """Format JSON content with the configured indentation"""
        return format_json(content, self.options.indent)

    def calculate_diff(self, left_content: str, right_content: str) -> DiffResult:
        """Calculate differences between two JSON strings"""
        try:
            left_json = parse_json(left_content)
            right_json = parse_json(right_content)
        except ValueError as e:
            print(f"[DiffService] Cannot diff unparseable input: {e}")
            return DiffResult.empty()

        left_formatted = render_json(left_json, self.options.indent)
        right_formatted = render_json(right_json, self.options.indent)

        try:
            delta = compute_delta(left_json, right_json, self.options)
        except Exception as e:
            print(f"[DiffService] Structural diff failed: {e}")
            return DiffResult.empty()

        stats, left_lines, right_lines = self.analyze_delta(delta, left_formatted, right_formatted)
        return DiffResult(delta=delta, stats=stats, left_lines=left_lines, right_lines=right_lines)

    def generate_unified_diff(
        self,
        left_content: str,
        right_content: str,
        left_diff_lines: list[LineMark],
        right_diff_lines: list[LineMark],
    ) -> UnifiedDiffResult:
        """Generate unified diff from two JSON strings and the lines from calculate_diff"""
        return DiffGenerator(self.options).generate_unified_diff(
            left_content, right_content, left_diff_lines, right_diff_lines
        )

    def are_equal(self, left_content: str, right_content: str) -> bool:
        """Check if two JSON strings are semantically equal (False if either is unparseable)"""
        try:
            left = parse_json(left_content)
            right = parse_json(right_content)
            return compute_delta(left, right, self.options) is None
        except Exception:
            return False

    def analyze_delta(
        self,
        delta: dict[str, Any] | list[Any] | None,
        left_formatted: str,
        right_formatted: str,
    ) -> tuple[DiffStats, list[LineMark], list[LineMark]]:
        """Classify each delta entry and map it to line numbers on both sides.

        Paths are tracked per side: an array element that shifted position is
        found under its left index in the left text and its right index in the
        right text. Marks carry the path of their own side.
        """
        stats = DiffStats()
        left_lines: list[LineMark] = []
        right_lines: list[LineMark] = []

        if delta is None:
            return stats, left_lines, right_lines

        left_line_map = build_path_line_map(left_formatted)
        right_line_map = build_path_line_map(right_formatted)

        def locate(line_map: dict[str, LineRange], formatted: str, path: str, key: str, value: Any):
            return line_map.get(path) or find_approximate_line(formatted, key, value)

        def classify(value: Any, left: tuple[str, str], right: tuple[str, str]) -> None:
            left_key, left_path = left
            right_key, right_path = right
            if isinstance(value, dict):
                traverse(value, left_path, right_path)
                return
            if not isinstance(value, list):
                return

            if len(value) == 1:
                stats.added += 1
                right_loc = locate(right_line_map, right_formatted, right_path, right_key, value[0])
                _mark_range(right_lines, right_loc, ChangeType.ADDED, right_path)
            elif len(value) == 3 and value[1] == 0 and value[2] == 0:
                stats.removed += 1
                left_loc = locate(left_line_map, left_formatted, left_path, left_key, value[0])
                _mark_range(left_lines, left_loc, ChangeType.REMOVED, left_path)
            elif len(value) == 2:
                stats.modified += 1
                old_value, new_value = value
                left_loc = locate(left_line_map, left_formatted, left_path, left_key, old_value)
                right_loc = locate(right_line_map, right_formatted, right_path, right_key, new_value)
                char_changes = None
                if _is_scalar(old_value) and _is_scalar(new_value):
                    char_changes = find_char_changes(old_value, new_value)
                _mark_range(left_lines, left_loc, ChangeType.MODIFIED, left_path, char_changes)
                _mark_range(right_lines, right_loc, ChangeType.MODIFIED, right_path, char_changes)
            # Moves (["", new_index, 3]) are neither counted nor highlighted

        def traverse_array(node: dict[str, Any], left_path: str, right_path: str) -> None:
            left_index_of: dict[int, int] = {}
            for key, value in node.items():
                match = _LEFT_INDEX_KEY.match(key)
                if match and _is_move(value):
                    left_index_of[value[1]] = int(match.group(1))

            for key, value in node.items():
                match = _LEFT_INDEX_KEY.match(key)
                if match:
                    index = match.group(1)
                    left = (index, f"{left_path}[{index}]")
                    classify(value, left, left)
                elif key.isdigit():
                    left_index = str(left_index_of.get(int(key), int(key)))
                    classify(
                        value,
                        (left_index, f"{left_path}[{left_index}]"),
                        (key, f"{right_path}[{key}]"),
                    )
                # "_t" and anything else unknown under an array is a marker

        def traverse(node: dict[str, Any], left_path: str, right_path: str) -> None:
            if node.get(ARRAY_MARKER_KEY) == ARRAY_MARKER:
                traverse_array(node, left_path, right_path)
                return
            for key, value in node.items():
                classify(
                    value,
                    (key, f"{left_path}.{key}" if left_path else key),
                    (key, f"{right_path}.{key}" if right_path else key),
                )

        if isinstance(delta, dict):
            traverse(delta, "", "")
        else:
            classify(delta, ("", ""), ("", ""))

        return stats, left_lines, right_lines
