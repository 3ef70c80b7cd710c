"""Tests for the unified view in services/diff_generator.py."""

from __future__ import annotations

import pytest

from models.diff import ChangeType, DiffOptions, LineMark
from services.diff_generator import DiffGenerator, reconcile
from services.diff_service import DiffService
from services.json_codec import format_json


def kinds(result) -> list[str]:
    return [mark.change_type.value for mark in result.lines]


def unified_for(left: str, right: str):
    diff_service = DiffService(DiffOptions())
    diff = diff_service.calculate_diff(left, right)
    return diff, diff_service.generate_unified_diff(left, right, diff.left_lines, diff.right_lines)


class TestReconcileRules:
    """Precedence of the merge rules."""

    def test_identical_lines_are_context(self):
        result = reconcile(["a", "b"], ["a", "b"], [], [])
        assert kinds(result) == ["context", "context"]
        assert result.content == "  a\n  b"

    def test_left_exhausted_drains_right_as_added(self):
        result = reconcile(["a"], ["a", "b", "c"], [], [])
        assert kinds(result) == ["context", "added", "added"]

    def test_right_exhausted_drains_left_as_removed(self):
        result = reconcile(["a", "b"], ["a"], [], [])
        assert kinds(result) == ["context", "removed"]

    def test_removed_takes_precedence_over_added(self):
        left_marks = [LineMark(line=0, change_type=ChangeType.REMOVED, path="x")]
        right_marks = [LineMark(line=0, change_type=ChangeType.ADDED, path="y")]
        result = reconcile(["x"], ["y"], left_marks, right_marks)
        assert kinds(result) == ["removed", "added"]
        assert [mark.path for mark in result.lines] == ["x", "y"]

    def test_added_that_is_also_modified_waits_for_pairing(self):
        left_marks = [LineMark(line=0, change_type=ChangeType.MODIFIED, path="a")]
        right_marks = [
            LineMark(line=0, change_type=ChangeType.ADDED, path="a"),
            LineMark(line=0, change_type=ChangeType.MODIFIED, path="a"),
        ]
        result = reconcile(["old"], ["new"], left_marks, right_marks)
        assert result.content == "- old\n+ new"
        assert kinds(result) == ["removed", "added"]

    def test_paired_modification_emits_old_then_new(self):
        left_marks = [LineMark(line=1, change_type=ChangeType.MODIFIED, path="a")]
        right_marks = [LineMark(line=1, change_type=ChangeType.MODIFIED, path="a")]
        result = reconcile(["{", "a: 1", "}"], ["{", "a: 2", "}"], left_marks, right_marks)
        assert result.content == "  {\n- a: 1\n+ a: 2\n  }"

    def test_unclassified_difference_falls_back_to_remove_then_add(self):
        result = reconcile(["a,"], ["a"], [], [])
        assert result.content == "- a,\n+ a"

    def test_output_lines_are_renumbered(self):
        result = reconcile(["a", "x", "b"], ["a", "y", "b", "c"], [], [])
        assert [mark.line for mark in result.lines] == list(range(len(result.lines)))

    def test_empty_inputs(self):
        result = reconcile([], [], [], [])
        assert result.content == ""
        assert result.lines == []


class TestUnifiedScenarios:
    """Unified view on real diffs."""

    def test_modified_value(self):
        _, unified = unified_for('{"a":1}', '{"a":2}')
        assert unified.content == '  {\n-   "a": 1\n+   "a": 2\n  }'
        assert kinds(unified) == ["context", "removed", "added", "context"]

    def test_added_key_with_trailing_comma_change(self):
        _, unified = unified_for('{"a":1}', '{"a":1,"b":2}')
        assert kinds(unified) == ["context", "removed", "added", "added", "context"]
        assert unified.lines[3].path == "b"

    def test_removed_array_element(self):
        _, unified = unified_for('{"list":[1,2,3]}', '{"list":[1,2]}')
        assert unified.content.split("\n") == [
            "  {",
            '    "list": [',
            "      1,",
            "-     2,",
            "+     2",
            "-     3",
            "    ]",
            "  }",
        ]

    @pytest.mark.parametrize(
        "left,right",
        [
            ('{"a":1}', '{"a":2}'),
            ('{"a":1}', '{"a":1,"b":2}'),
            ('{"list":[1,2,3]}', '{"list":[1,2]}'),
            ('{"a":{"x":1,"y":2},"b":[1,2,3]}', '{"a":{"x":3},"b":[1,4],"c":null}'),
            ("[]", '[{"id":"a","v":[1,2]}]'),
        ],
    )
    def test_length_law(self, left, right):
        _, unified = unified_for(left, right)
        left_lines = format_json(left).split("\n")
        right_lines = format_json(right).split("\n")
        context = sum(1 for mark in unified.lines if mark.change_type == ChangeType.CONTEXT)

        assert len(unified.lines) == len(left_lines) + len(right_lines) - context
        assert len(unified.content.split("\n")) == len(unified.lines)


class TestDiffGenerator:
    """Canonicalization before merging."""

    def test_inputs_are_reformatted(self):
        unified = DiffGenerator().generate_unified_diff('{"a":1}', '{ "a" : 1 }', [], [])
        assert kinds(unified) == ["context", "context", "context"]

    def test_unparseable_input_is_merged_as_text(self):
        unified = DiffGenerator(DiffOptions()).generate_unified_diff("not json", "not json", [], [])
        assert unified.content == "  not json"
