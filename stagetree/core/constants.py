"""
StageTree Core: Constants and Type Definitions

This module provides package-wide constants, error codes, the writer action
descriptor and configuration keys.
"""
from enum import Enum, IntEnum

# Version information
STAGETREE_VERSION = "1.0.0"


# Error codes (0-9 range)
class ErrorCode(IntEnum):
    """Standardized error codes for StageTree operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad name, bad argument, invalid configuration
    NOT_FOUND = 2  # File or directory doesn't exist
    PERMISSION_DENIED = 3  # Insufficient permissions
    CONFLICT = 4  # Name collision (sibling exists, destination exists)
    MISSING_SOURCE = 5  # Copy/move/rename without a recorded source path
    INTERNAL_ERROR = 6  # Any other filesystem or internal failure


class ItemAction(Enum):
    """What the hierarchy writer does with each item it visits."""

    NO_ACTION = "none"  # Traverse only
    WRITE = "write"  # Create file with in-memory content
    COPY = "copy"  # Copy from recorded source path
    MOVE = "move"  # Move from recorded source path
    DELETE = "delete"  # Remove destination file
    CLEAR = "clear"  # Truncate destination file
    RENAME = "rename"  # Rename destination file from source name to item name
    TOUCH = "touch"  # Create empty or bump mtime

    @property
    def creates_folders(self) -> bool:
        """Whether folders must exist (or be created) before items are handled."""
        return self in (ItemAction.WRITE, ItemAction.COPY, ItemAction.MOVE, ItemAction.TOUCH)

    @property
    def needs_source(self) -> bool:
        """Whether the action reads from the item's recorded source path."""
        return self in (ItemAction.COPY, ItemAction.MOVE, ItemAction.RENAME)


class Limits:
    """Limits and rendering defaults."""

    MAX_PATH_LENGTH = 4096
    MAX_FILENAME_LENGTH = 255

    # print_folder indentation per level
    INDENT_WIDTH = 4

    # Side-by-side report column width
    REPORT_COLUMN_WIDTH = 48


class StepType(Enum):
    """Structural transform step types."""

    REMOVE_MATCHES = "remove_matches"
    CHANGE_EXTENSION = "change_extension"


# Configuration keys
class ConfigKey:
    """Configuration key constants."""

    ROOT = "stagetree"

    # Top-level keys
    DRY_RUN = "dry_run"
    LOGGING = "logging"
    MATCHING = "matching"
    COMPARE = "compare"
    WRITER = "writer"
    TRANSFORMS = "transforms"

    # Logging configuration
    LOG_LEVEL = "level"
    LOG_FILE = "file"

    # Matching / compare / writer configuration
    CASE_SENSITIVE = "case_sensitive"
    COMPARE_CONTENTS = "contents"
    OVERWRITE = "overwrite"

    # Transform step configuration
    STEP_NAME = "name"
    STEP_TYPE = "type"
    STEP_PATTERN = "pattern"
    STEP_MATCH_FOLDERS = "match_folders"
    STEP_MATCH_ITEMS = "match_items"
    STEP_OLD_EXT = "old_ext"
    STEP_NEW_EXT = "new_ext"
    STEP_RECURSIVE = "recursive"
    STEP_ENABLED = "enabled"


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.DRY_RUN: True,
    ConfigKey.LOGGING: {
        ConfigKey.LOG_LEVEL: "INFO",
        ConfigKey.LOG_FILE: None,
    },
    ConfigKey.MATCHING: {
        ConfigKey.CASE_SENSITIVE: False,
    },
    ConfigKey.COMPARE: {
        ConfigKey.COMPARE_CONTENTS: True,
    },
    ConfigKey.WRITER: {
        ConfigKey.OVERWRITE: True,
    },
    ConfigKey.TRANSFORMS: [],
}
