#!/usr/bin/env python3
"""Hierarchy writer: replay a virtual tree onto a real filesystem.

The root folder is materialized at ``dest_path/<root name>``. Each folder is
ensured (for actions that create files) and then its items are handled with
one ItemAction, followed by its sub folders.

Dry-run is the default: with execute=False the writer walks and logs exactly
as it would for a real run, prefixing messages with ``[DRY-RUN]``, and never
touches the filesystem beyond read-only existence checks.

Failures are per item: the failure is logged and recorded in the WriteResult
and the writer moves on to the next sibling. A folder that cannot be created
counts as one failure and its subtree is skipped.

Example:
    >>> result = write_folder_hierarchy("/out", tree, ItemAction.COPY, execute=True)
    >>> result.ok, result.success_count, result.failure_count
    (True, 12, 0)
"""

import os
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Union

from stagetree.core import file_ops
from stagetree.core.constants import ErrorCode, ItemAction
from stagetree.core.errors import (
    InvalidArgumentError,
    MissingSourceError,
    NotFoundError,
    StageTreeError,
)
from stagetree.core.logging import Logger, get_logger
from stagetree.tree.folder import VirtualFolder
from stagetree.tree.item import VirtualItem

DRY_RUN_PREFIX = "[DRY-RUN] "


@dataclass(frozen=True)
class WriteFailure:
    """One node the writer could not handle."""

    path: str
    action: ItemAction
    error: str
    error_code: ErrorCode


@dataclass
class WriteResult:
    """Outcome of a write pass."""

    dry_run: bool
    success_count: int = 0
    failures: List[WriteFailure] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures

    def failed_paths(self) -> List[str]:
        return [failure.path for failure in self.failures]


class HierarchyWriter:
    """Materializes VirtualFolder trees with a configurable per-item action."""

    def __init__(self, logger: Optional[Logger] = None, overwrite: bool = True):
        """Initialize writer.

        Args:
            logger: Logger for progress and failure messages
            overwrite: Replace existing destination files on write/copy/move/rename
        """
        self._logger = logger or get_logger()
        self._overwrite = overwrite
        self._handlers: Dict[ItemAction, Callable[[VirtualItem, str, str, bool], None]] = {
            ItemAction.NO_ACTION: self._visit,
            ItemAction.WRITE: self._write,
            ItemAction.COPY: self._copy,
            ItemAction.MOVE: self._move,
            ItemAction.DELETE: self._delete,
            ItemAction.CLEAR: self._clear,
            ItemAction.RENAME: self._rename,
            ItemAction.TOUCH: self._touch,
        }

    def write(
        self,
        dest_path: str,
        folder: VirtualFolder,
        action: Union[ItemAction, str] = ItemAction.NO_ACTION,
        execute: bool = False,
    ) -> WriteResult:
        """Replay folder onto dest_path.

        Args:
            dest_path: Real directory that receives the root folder
            folder: Tree to materialize
            action: What to do with every item
            execute: Perform the operations; False simulates them

        Returns:
            WriteResult with success and failure counts

        Raises:
            InvalidArgumentError: If dest_path, folder or action is malformed
        """
        if not dest_path:
            raise InvalidArgumentError("Destination path cannot be empty")
        if not isinstance(folder, VirtualFolder):
            raise InvalidArgumentError(f"Expected VirtualFolder, got {type(folder).__name__}")
        try:
            action = ItemAction(action)
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown action: {action}") from e

        result = WriteResult(dry_run=not execute)
        root_dir = os.path.join(os.path.abspath(dest_path), folder.name)

        with self._logger.add_context(action=action.value, dry_run=not execute):
            self._step(execute, "Writing hierarchy", dest=root_dir)
            self._write_folder(folder, root_dir, action, execute, result)
            self._logger.info(
                "Write finished",
                succeeded=result.success_count,
                failed=result.failure_count,
            )
        return result

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _step(self, execute: bool, message: str, **context) -> None:
        prefix = "" if execute else DRY_RUN_PREFIX
        self._logger.info(f"{prefix}{message}", **context)

    def _record_failure(
        self,
        result: WriteResult,
        path: str,
        action: ItemAction,
        error: Exception,
    ) -> None:
        error_code = getattr(error, "error_code", ErrorCode.INTERNAL_ERROR)
        result.failures.append(
            WriteFailure(path=path, action=action, error=str(error), error_code=error_code)
        )
        self._logger.error(
            f"Failed to {action.value}", path=path, error=str(error), error_code=error_code.name
        )

    def _write_folder(
        self,
        folder: VirtualFolder,
        real_dir: str,
        action: ItemAction,
        execute: bool,
        result: WriteResult,
    ) -> None:
        if action.creates_folders:
            self._step(execute, "Create directory", path=real_dir)
            if execute:
                try:
                    file_ops.create_directory(real_dir, parents=True, exist_ok=True)
                except file_ops.FileOperationError as e:
                    self._record_failure(result, real_dir, action, e)
                    return

        for item in folder.items:
            dest = os.path.join(real_dir, item.name)
            try:
                self._handlers[action](item, real_dir, dest, execute)
            except (StageTreeError, file_ops.FileOperationError) as e:
                self._record_failure(result, dest, action, e)
            else:
                result.success_count += 1

        for sub_folder in folder.folders:
            self._write_folder(
                sub_folder, os.path.join(real_dir, sub_folder.name), action, execute, result
            )

        if action == ItemAction.DELETE:
            self._remove_if_empty(real_dir, execute, result)

    def _remove_if_empty(self, real_dir: str, execute: bool, result: WriteResult) -> None:
        self._step(execute, "Remove directory if empty", path=real_dir)
        if not execute:
            return
        try:
            if not os.path.isdir(real_dir) or file_ops.list_directory(real_dir):
                return
            file_ops.remove_directory(real_dir)
        except file_ops.FileOperationError as e:
            self._record_failure(result, real_dir, ItemAction.DELETE, e)

    # ------------------------------------------------------------------
    # Item actions (single dispatch point: self._handlers)
    # ------------------------------------------------------------------

    @staticmethod
    def _require_source(item: VirtualItem, action: ItemAction) -> str:
        if not item.source_path:
            raise MissingSourceError(
                f"Cannot {action.value} '{item.relative_path}': no source path recorded",
                path=item.relative_path,
            )
        return item.source_path

    @staticmethod
    def _require_existing(path: str, action: ItemAction) -> None:
        if not file_ops.file_exists(path):
            raise NotFoundError(f"Cannot {action.value} {path}: not found", path=path)

    def _visit(self, item: VirtualItem, real_dir: str, dest: str, execute: bool) -> None:
        self._logger.debug("Visit item", path=dest)

    def _write(self, item: VirtualItem, real_dir: str, dest: str, execute: bool) -> None:
        self._step(execute, "Write file", path=dest)
        if not self._overwrite and file_ops.file_exists(dest):
            raise file_ops.FileOperationError(
                f"Cannot write {dest}: already exists", ErrorCode.CONFLICT
            )
        if not execute:
            if item.is_lazy:
                self._require_existing(item.source_path, ItemAction.WRITE)
            return
        file_ops.write_file(dest, item.get_contents(), binary=True, atomic=True)

    def _copy(self, item: VirtualItem, real_dir: str, dest: str, execute: bool) -> None:
        source = self._require_source(item, ItemAction.COPY)
        self._step(execute, "Copy file", source=source, path=dest)
        if not execute:
            self._require_existing(source, ItemAction.COPY)
            return
        file_ops.copy_file(source, dest, overwrite=self._overwrite)

    def _move(self, item: VirtualItem, real_dir: str, dest: str, execute: bool) -> None:
        source = self._require_source(item, ItemAction.MOVE)
        self._step(execute, "Move file", source=source, path=dest)
        if not execute:
            self._require_existing(source, ItemAction.MOVE)
            return
        file_ops.move_file(source, dest, overwrite=self._overwrite)
        item.source_path = dest

    def _delete(self, item: VirtualItem, real_dir: str, dest: str, execute: bool) -> None:
        self._step(execute, "Delete file", path=dest)
        if not execute:
            self._require_existing(dest, ItemAction.DELETE)
            return
        file_ops.delete_file(dest)

    def _clear(self, item: VirtualItem, real_dir: str, dest: str, execute: bool) -> None:
        self._step(execute, "Clear file", path=dest)
        if not execute:
            self._require_existing(dest, ItemAction.CLEAR)
            return
        file_ops.truncate_file(dest)

    def _rename(self, item: VirtualItem, real_dir: str, dest: str, execute: bool) -> None:
        source = self._require_source(item, ItemAction.RENAME)
        current = os.path.join(real_dir, os.path.basename(source))
        self._step(execute, "Rename file", source=current, path=dest)
        if current == dest:
            return
        if not execute:
            self._require_existing(current, ItemAction.RENAME)
            return
        file_ops.move_file(current, dest, overwrite=self._overwrite)

    def _touch(self, item: VirtualItem, real_dir: str, dest: str, execute: bool) -> None:
        self._step(execute, "Touch file", path=dest)
        if execute:
            file_ops.touch_file(dest)


def write_folder_hierarchy(
    dest_path: str,
    folder: VirtualFolder,
    action: Union[ItemAction, str] = ItemAction.NO_ACTION,
    execute: bool = False,
    logger: Optional[Logger] = None,
    overwrite: bool = True,
) -> WriteResult:
    """Materialize folder at ``dest_path/<folder.name>`` (dry-run unless execute)."""
    return HierarchyWriter(logger=logger, overwrite=overwrite).write(
        dest_path, folder, action=action, execute=execute
    )
