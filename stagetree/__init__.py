"""StageTree - Virtual folder hierarchies for staging and verifying exports.

Read a directory into an in-memory tree, reshape it, replay it onto disk and
check that what landed there matches what was intended.
"""

from stagetree.core.constants import STAGETREE_VERSION, ItemAction
from stagetree.core.errors import (
    AccessDeniedError,
    DuplicateChildError,
    InvalidArgumentError,
    MissingSourceError,
    NotFoundError,
    StageTreeError,
    TreeIOError,
)
from stagetree.tree import ComparisonResult, VirtualFolder, VirtualItem
from stagetree.io import read_folder_hierarchy, write_folder_hierarchy
from stagetree.stager import TreeStager

__version__ = STAGETREE_VERSION

__all__ = [
    "__version__",
    "ItemAction",
    "VirtualItem",
    "VirtualFolder",
    "ComparisonResult",
    "read_folder_hierarchy",
    "write_folder_hierarchy",
    "TreeStager",
    "StageTreeError",
    "InvalidArgumentError",
    "DuplicateChildError",
    "NotFoundError",
    "AccessDeniedError",
    "MissingSourceError",
    "TreeIOError",
]
