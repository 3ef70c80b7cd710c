"""
Structural Delta - Tree-shaped differences between two parsed JSON values

DeepDiff reports a flat list of changes; they are folded here into a
nested delta whose leaves encode the change kind:

    [new]               added
    [old, 0, 0]         removed
    [old, new]          modified
    ["", new_index, 3]  moved (array element now sits at new_index)

Array containers carry "_t": "a". Removed and moved array entries are
keyed by their left index with a leading underscore ("_2"), everything
else by the right index or object key. An element that changed inside
and also shifted position gets both a nested entry under its right index
and a move entry under its left index, so either side can be located.
"""

from __future__ import annotations

import json
from typing import Any, Callable, NamedTuple

from deepdiff import DeepDiff
from deepdiff.helper import notpresent

from models.diff import DiffOptions

ARRAY_MARKER_KEY = "_t"
ARRAY_MARKER = "a"
MOVE_MARKER = 3

ADDED_REPORTS = ("dictionary_item_added", "iterable_item_added")
REMOVED_REPORTS = ("dictionary_item_removed", "iterable_item_removed")
MODIFIED_REPORTS = ("values_changed", "type_changes")
MOVED_REPORTS = ("iterable_item_moved",)


class Step(NamedTuple):
    """One path step; left/right are None where the element is absent on that side"""

    left: Any
    right: Any
    in_array: bool


def element_identity(item: Any, identity_fields: tuple[str, ...]) -> tuple[str, str]:
    """Identity of an array element: declared id/name field, else its full value"""
    if isinstance(item, dict):
        for field in identity_fields:
            value = item.get(field)
            if isinstance(value, str):
                return (field, value)
    return ("value", json.dumps(item, sort_keys=True, ensure_ascii=False))


def _build_compare_func(identity_fields: tuple[str, ...]) -> Callable[..., bool]:
    def compare(x: Any, y: Any, level: Any = None) -> bool:
        return element_identity(x, identity_fields) == element_identity(y, identity_fields)

    return compare


def diff_tree(left: Any, right: Any, options: DiffOptions) -> Any:
    """Run DeepDiff in tree view with the identity matching implied by options"""
    compare_func = _build_compare_func(options.identity_fields) if options.detect_moves else None
    return DeepDiff(
        left,
        right,
        view="tree",
        threshold_to_diff_deeper=0,
        iterable_compare_func=compare_func,
    )


def _holds(items: list[Any], index: Any, item: Any) -> bool:
    return isinstance(index, int) and 0 <= index < len(items) and (
        items[index] is item or items[index] == item
    )


def _index_of(items: list[Any], hint: Any, item: Any) -> int | None:
    if _holds(items, hint, item):
        return hint
    for index, candidate in enumerate(items):
        if candidate is item:
            return index
    return hint if isinstance(hint, int) else None


def _array_step(parent: Any, child: Any, left_param: Any, right_param: Any) -> Step:
    """Left and right index of an array element, checked against both lists"""
    left_list, right_list = parent.t1, parent.t2
    if child.t1 is notpresent:
        return Step(None, _index_of(right_list, right_param, child.t2), True)
    if child.t2 is notpresent:
        return Step(_index_of(left_list, left_param, child.t1), None, True)

    # Relationship params of moved elements are not ordered consistently
    for i, j in ((left_param, right_param), (right_param, left_param)):
        if _holds(left_list, i, child.t1) and _holds(right_list, j, child.t2):
            return Step(i, j, True)
    return Step(
        _index_of(left_list, left_param, child.t1),
        _index_of(right_list, right_param, child.t2),
        True,
    )


def resolve_steps(level: Any) -> list[Step]:
    """Walk a DeepDiff level from the root and name each step on both sides"""
    chain = []
    node = level
    while node.up is not None:
        chain.append(node)
        node = node.up

    steps: list[Step] = []
    for child in reversed(chain):
        parent = child.up
        left_param = parent.t1_child_rel.param if parent.t1_child_rel is not None else None
        right_param = parent.t2_child_rel.param if parent.t2_child_rel is not None else None
        if isinstance(parent.t1, list) and isinstance(parent.t2, list):
            steps.append(_array_step(parent, child, left_param, right_param))
        else:
            key = left_param if left_param is not None else right_param
            steps.append(Step(key, key, False))
    return steps


def _record_position(node: dict[str, Any], step: Step) -> None:
    if step.left is not None and step.right is not None and step.left != step.right:
        node.setdefault(f"_{step.left}", ["", step.right, MOVE_MARKER])


def _insert(delta: dict[str, Any], steps: list[Step], leaf: list[Any], left_keyed: bool) -> None:
    """Place a leaf into the nested delta, creating containers along the path.

    An entry already present under the same key is never overwritten.
    """
    node = delta
    for step in steps[:-1]:
        if step.in_array:
            node.setdefault(ARRAY_MARKER_KEY, ARRAY_MARKER)
            _record_position(node, step)
            key = str(step.right)
        else:
            key = step.left
        child = node.setdefault(key, {})
        if not isinstance(child, dict):
            return
        node = child

    last = steps[-1]
    if last.in_array:
        node.setdefault(ARRAY_MARKER_KEY, ARRAY_MARKER)
        if left_keyed:
            key = f"_{last.left}"
        else:
            _record_position(node, last)
            key = str(last.right)
    else:
        key = last.left
    node.setdefault(key, leaf)


def compute_delta(left: Any, right: Any, options: DiffOptions) -> dict[str, Any] | list[Any] | None:
    """Compute the structural delta between two parsed values. None means equal."""
    tree = diff_tree(left, right, options)

    delta: dict[str, Any] = {}
    changes = [
        (ADDED_REPORTS, lambda level, steps: [level.t2], False),
        (REMOVED_REPORTS, lambda level, steps: [level.t1, 0, 0], True),
        (MODIFIED_REPORTS, lambda level, steps: [level.t1, level.t2], False),
        (MOVED_REPORTS, lambda level, steps: ["", steps[-1].right, MOVE_MARKER], True),
    ]
    for report_types, make_leaf, left_keyed in changes:
        for report_type in report_types:
            for level in tree.get(report_type, ()):
                steps = resolve_steps(level)
                leaf = make_leaf(level, steps)
                if not steps:
                    return leaf
                _insert(delta, steps, leaf, left_keyed)

    return delta or None
