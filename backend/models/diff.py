"""Diff-related data models"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChangeType(str, Enum):
    """Classification of a single line in a diff view"""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    CONTEXT = "context"


class CharRange(BaseModel):
    """Changed character span within a modified value (end exclusive)"""

    start: int
    end: int


class LineMark(BaseModel):
    """A classified line of one side's formatted text"""

    line: int  # 0-indexed
    change_type: ChangeType
    path: str | None = None
    char_changes: list[CharRange] | None = None


class LineRange(BaseModel):
    """Inclusive line span occupied by a value in formatted text"""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int


class DiffStats(BaseModel):
    """Per-change counts; best effort, moves are not counted"""

    added: int = 0
    removed: int = 0
    modified: int = 0


class DiffOptions(BaseModel):
    """Settings passed explicitly into every diff call"""

    identity_fields: tuple[str, ...] = ("id", "name")
    detect_moves: bool = True
    indent: int = Field(default=2, ge=0, le=8)


class DiffResult(BaseModel):
    """Complete side-by-side diff result"""

    delta: Any = None
    stats: DiffStats = Field(default_factory=DiffStats)
    left_lines: list[LineMark] = []
    right_lines: list[LineMark] = []

    @classmethod
    def empty(cls) -> "DiffResult":
        return cls(delta=None, stats=DiffStats(), left_lines=[], right_lines=[])


class UnifiedDiffResult(BaseModel):
    """Merged single-column diff"""

    content: str
    lines: list[LineMark]
