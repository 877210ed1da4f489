#!/usr/bin/env python3
"""Hierarchy reader: build a virtual tree from a real directory.

The walk is depth-first and synchronous, with entries visited in name order
so two reads of the same directory produce identically ordered trees. Every
item records the real file as its source_path; with read_contents=True its
bytes are loaded eagerly as well.

Errors abort the whole read. A directory that cannot be listed or a file
that cannot be read is raised, never skipped, so a partial tree is never
returned as if it were complete.

Example:
    >>> tree = read_folder_hierarchy("/srv/export", read_contents=False)
    >>> tree.count_items()
    42
"""

import os
from typing import Optional

from stagetree.core import file_ops
from stagetree.core.constants import ErrorCode
from stagetree.core.errors import (
    AccessDeniedError,
    InvalidArgumentError,
    NotFoundError,
    StageTreeError,
    TreeIOError,
)
from stagetree.core.logging import Logger, get_logger
from stagetree.tree.folder import VirtualFolder
from stagetree.tree.item import VirtualItem, split_filename


def _translate(error: file_ops.FileOperationError, path: str) -> StageTreeError:
    if error.error_code == ErrorCode.NOT_FOUND:
        return NotFoundError(str(error), path=path)
    if error.error_code == ErrorCode.PERMISSION_DENIED:
        return AccessDeniedError(str(error), path=path)
    if error.error_code == ErrorCode.INVALID_INPUT:
        return InvalidArgumentError(str(error), path=path)
    return TreeIOError(str(error), path=path)


class HierarchyReader:
    """Reads real directories into VirtualFolder trees."""

    def __init__(self, logger: Optional[Logger] = None):
        """Initialize reader.

        Args:
            logger: Logger for progress and skip messages
        """
        self._logger = logger or get_logger()

    def read(self, real_path: str, read_contents: bool = False) -> VirtualFolder:
        """Read the directory at real_path into a new tree.

        Args:
            real_path: Directory to read; its leaf name becomes the root name
            read_contents: Load file bytes now instead of on demand

        Returns:
            Root VirtualFolder

        Raises:
            NotFoundError: If real_path does not exist
            InvalidArgumentError: If real_path is not a directory
            AccessDeniedError: If a directory or file cannot be read
            TreeIOError: On any other filesystem failure
        """
        if not real_path:
            raise InvalidArgumentError("Path cannot be empty")

        real_path = os.path.abspath(real_path)
        if not os.path.exists(real_path):
            raise NotFoundError(f"Cannot read hierarchy: {real_path} does not exist", path=real_path)
        if not os.path.isdir(real_path):
            raise InvalidArgumentError(
                f"Cannot read hierarchy: {real_path} is not a directory", path=real_path
            )

        root_name = os.path.basename(real_path.rstrip(os.sep)) or real_path
        root = VirtualFolder(root_name)
        self._logger.debug("Reading hierarchy", path=real_path, read_contents=read_contents)
        self._read_into(root, real_path, read_contents)
        self._logger.info(
            "Read hierarchy",
            path=real_path,
            folders=root.count_folders(),
            items=root.count_items(),
        )
        return root

    def _read_into(self, folder: VirtualFolder, real_path: str, read_contents: bool) -> None:
        try:
            names = file_ops.list_directory(real_path)
        except file_ops.FileOperationError as e:
            raise _translate(e, real_path) from e

        for name in names:
            entry_path = os.path.join(real_path, name)

            if os.path.isdir(entry_path):
                if os.path.islink(entry_path):
                    self._logger.warning("Skipping symlinked directory", path=entry_path)
                    continue
                child = folder.new_sub_folder(name)
                self._read_into(child, entry_path, read_contents)
                continue

            if not os.path.isfile(entry_path):
                self._logger.warning("Skipping special file", path=entry_path)
                continue

            base_name, extension = split_filename(name)
            item = VirtualItem(base_name, extension, source_path=entry_path)
            if read_contents:
                try:
                    item.set_contents(file_ops.read_file(entry_path, binary=True))
                except file_ops.FileOperationError as e:
                    raise _translate(e, entry_path) from e
            folder.add_item(item)


def read_folder_hierarchy(
    real_path: str, read_contents: bool = False, logger: Optional[Logger] = None
) -> VirtualFolder:
    """Build a VirtualFolder tree from the real directory at real_path."""
    return HierarchyReader(logger=logger).read(real_path, read_contents=read_contents)
