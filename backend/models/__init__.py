"""Models module - Pydantic data models"""

from .diff import (
    ChangeType,
    CharRange,
    DiffOptions,
    DiffResult,
    DiffStats,
    LineMark,
    LineRange,
    UnifiedDiffResult,
)

__all__ = [
    "ChangeType",
    "CharRange",
    "DiffOptions",
    "DiffResult",
    "DiffStats",
    "LineMark",
    "LineRange",
    "UnifiedDiffResult",
]
