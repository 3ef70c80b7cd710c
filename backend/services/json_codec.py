"""
JSON Codec - Parse and re-render JSON with deterministic indentation
"""

from __future__ import annotations

import json
from typing import Any


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def parse_json(content: str) -> Any:
    """Parse strict JSON. Raises ValueError on invalid input."""
    try:
        return json.loads(content, parse_constant=_reject_constant)
    except RecursionError as e:
        raise ValueError(f"JSON nested too deeply: {e}") from e


def render_json(value: Any, indent: int = 2) -> str:
    """Render a parsed value as canonical text (key order preserved)"""
    return json.dumps(value, indent=indent, ensure_ascii=False)


def format_json(content: str, indent: int = 2) -> str:
    """Format JSON content with consistent indentation, or return it unchanged if unparseable"""
    try:
        return render_json(parse_json(content), indent)
    except ValueError:
        return content
