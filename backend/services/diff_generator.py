"""
Diff Generator Service - Merge two classified sides into a unified diff
"""

from __future__ import annotations

from models.diff import ChangeType, DiffOptions, LineMark, UnifiedDiffResult
from services.json_codec import format_json

_PREFIXES = {
    ChangeType.ADDED: "+ ",
    ChangeType.REMOVED: "- ",
    ChangeType.CONTEXT: "  ",
}


def _index_marks(marks: list[LineMark]) -> dict[ChangeType, dict[int, LineMark]]:
    """Group marks by classification, then by line (first mark wins)"""
    indexed: dict[ChangeType, dict[int, LineMark]] = {change_type: {} for change_type in ChangeType}
    for mark in marks:
        indexed[mark.change_type].setdefault(mark.line, mark)
    return indexed


def _mark_path(*candidates: LineMark | None) -> str | None:
    for mark in candidates:
        if mark is not None and mark.path is not None:
            return mark.path
    return None


def reconcile(
    left_lines: list[str],
    right_lines: list[str],
    left_marks: list[LineMark],
    right_marks: list[LineMark],
) -> UnifiedDiffResult:
    """
    Interleave the two sides into one stream.

    At each step the first matching rule wins: an exhausted side drains the
    other, left removals, right additions (unless also modified), paired
    modifications, identical lines as context, and finally any other
    textual difference as a removal followed by an addition.
    """
    left_index = _index_marks(left_marks)
    right_index = _index_marks(right_marks)
    left_removed = left_index[ChangeType.REMOVED]
    left_modified = left_index[ChangeType.MODIFIED]
    right_added = right_index[ChangeType.ADDED]
    right_modified = right_index[ChangeType.MODIFIED]

    unified_lines: list[str] = []
    diff_infos: list[LineMark] = []

    def emit(change_type: ChangeType, text: str, path: str | None = None) -> None:
        unified_lines.append(_PREFIXES[change_type] + text)
        diff_infos.append(LineMark(line=len(diff_infos), change_type=change_type, path=path))

    left_idx = 0
    right_idx = 0
    while left_idx < len(left_lines) or right_idx < len(right_lines):
        if left_idx >= len(left_lines):
            # Only right lines remain - they're additions
            emit(ChangeType.ADDED, right_lines[right_idx], _mark_path(right_added.get(right_idx)))
            right_idx += 1
        elif right_idx >= len(right_lines):
            emit(ChangeType.REMOVED, left_lines[left_idx], _mark_path(left_removed.get(left_idx)))
            left_idx += 1
        elif left_idx in left_removed:
            emit(ChangeType.REMOVED, left_lines[left_idx], left_removed[left_idx].path)
            left_idx += 1
        elif right_idx in right_added and right_idx not in right_modified:
            emit(ChangeType.ADDED, right_lines[right_idx], right_added[right_idx].path)
            right_idx += 1
        elif left_idx in left_modified and right_idx in right_modified:
            # Both modified - show old then new
            emit(ChangeType.REMOVED, left_lines[left_idx], left_modified[left_idx].path)
            emit(ChangeType.ADDED, right_lines[right_idx], right_modified[right_idx].path)
            left_idx += 1
            right_idx += 1
        elif left_lines[left_idx] == right_lines[right_idx]:
            emit(ChangeType.CONTEXT, left_lines[left_idx])
            left_idx += 1
            right_idx += 1
        else:
            # Lines differ but the structural delta did not classify them
            emit(ChangeType.REMOVED, left_lines[left_idx], _mark_path(left_modified.get(left_idx)))
            emit(ChangeType.ADDED, right_lines[right_idx], _mark_path(right_modified.get(right_idx)))
            left_idx += 1
            right_idx += 1

    return UnifiedDiffResult(content="\n".join(unified_lines), lines=diff_infos)


class DiffGenerator:
    """Generate unified diffs for JSON documents"""

    def __init__(self, options: DiffOptions | None = None):
        self.options = options or DiffOptions()

    def generate_unified_diff(
        self,
        left_content: str,
        right_content: str,
        left_diff_lines: list[LineMark],
        right_diff_lines: list[LineMark],
    ) -> UnifiedDiffResult:
        """Generate unified diff content from two JSON strings and their line classifications"""
        left_formatted = format_json(left_content, self.options.indent)
        right_formatted = format_json(right_content, self.options.indent)
        return reconcile(
            left_formatted.split("\n"),
            right_formatted.split("\n"),
            left_diff_lines,
            right_diff_lines,
        )
