"""StageTree Tree - The in-memory folder model.

This module provides:
- VirtualItem / VirtualFolder: the tree nodes and their structural transforms
- Structural comparison with per-path diagnostics
- Side-by-side comparison reports (Jinja2)
"""

from .item import VirtualItem, split_filename
from .compare import (
    ComparisonResult,
    Difference,
    DifferenceKind,
    compare_folders,
    compare_items,
    compare_sorted_collections,
    folders_equal,
    items_equal,
)
from .folder import VirtualFolder
from .report import render_comparison

__all__ = [
    # Nodes
    "VirtualItem",
    "VirtualFolder",
    "split_filename",
    # Comparison
    "ComparisonResult",
    "Difference",
    "DifferenceKind",
    "compare_folders",
    "compare_items",
    "compare_sorted_collections",
    "folders_equal",
    "items_equal",
    # Reporting
    "render_comparison",
]
