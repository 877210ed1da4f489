"""StageTree IO - Reading trees from disk and writing them back."""

from .reader import HierarchyReader, read_folder_hierarchy
from .writer import (
    DRY_RUN_PREFIX,
    HierarchyWriter,
    WriteFailure,
    WriteResult,
    write_folder_hierarchy,
)

__all__ = [
    "HierarchyReader",
    "read_folder_hierarchy",
    "HierarchyWriter",
    "WriteFailure",
    "WriteResult",
    "write_folder_hierarchy",
    "DRY_RUN_PREFIX",
]
