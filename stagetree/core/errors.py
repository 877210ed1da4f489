"""
StageTree Core: Error taxonomy.

Every error raised by the tree model, the hierarchy reader and the hierarchy
writer derives from StageTreeError and carries an ErrorCode.
"""
from typing import Optional

from stagetree.core.constants import ErrorCode


class StageTreeError(Exception):
    """Base exception for StageTree errors."""

    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        path: Optional[str] = None,
    ):
        """Initialize StageTreeError.

        Args:
            message: Error message
            error_code: Associated error code (defaults to the class code)
            path: Offending real or virtual path, if any
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code if error_code is not None else self.default_code
        self.path = path


class InvalidArgumentError(StageTreeError, ValueError):
    """Malformed construction input (empty base name, missing argument)."""

    default_code = ErrorCode.INVALID_INPUT


class DuplicateChildError(StageTreeError):
    """A sibling with the same identity already exists."""

    default_code = ErrorCode.CONFLICT


class NotFoundError(StageTreeError):
    """A referenced real path does not exist."""

    default_code = ErrorCode.NOT_FOUND


class AccessDeniedError(StageTreeError):
    """A real path could not be enumerated or read."""

    default_code = ErrorCode.PERMISSION_DENIED


class MissingSourceError(StageTreeError):
    """Copy, move or rename requested for an item with no source path."""

    default_code = ErrorCode.MISSING_SOURCE


class TreeIOError(StageTreeError):
    """Any other filesystem failure while reading or writing a tree."""

    default_code = ErrorCode.INTERNAL_ERROR
