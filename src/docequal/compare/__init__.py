"""
Comparison layer.

- engine: structural walk, first mismatch or every mismatch
- normalize: scalar normalization and order-independent sort keys
- report: failure report rendering
"""

from .engine import (
    ComparisonEngine,
    ComparisonResult,
    Mismatch,
    MismatchKind,
    compare,
    find_differences,
)
from .normalize import ScalarNormalizer, canonical_text
from .report import ReportBuilder, render_report

__all__ = [
    "ComparisonEngine",
    "ComparisonResult",
    "Mismatch",
    "MismatchKind",
    "compare",
    "find_differences",
    "ScalarNormalizer",
    "canonical_text",
    "ReportBuilder",
    "render_report",
]
