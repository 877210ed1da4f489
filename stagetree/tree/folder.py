"""
StageTree Tree: VirtualFolder.

A VirtualFolder is a named container that exclusively owns an ordered list
of VirtualItems and an ordered list of child VirtualFolders. The link back to
the parent is a weak reference used only to rebuild paths.

The two structural transforms live here as well:
- remove_matches(): prune folders and drop items whose names match a pattern
- change_item_exts(): rename item extensions, optionally recursively

Example:
    >>> root = VirtualFolder("root")
    >>> _ = root.new_item("a", "ps1")
    >>> _ = root.new_item("a", "tmp")
    >>> root.remove_matches("*.tmp", match_folders=False)
    ['root/a.tmp']
    >>> root.change_item_exts("ps1", "txt")
    1
"""
import re
import weakref
from typing import Iterator, List, Optional, Union

from stagetree.core.constants import Limits
from stagetree.core.errors import DuplicateChildError, InvalidArgumentError
from stagetree.core.logging import Logger, get_logger
from stagetree.core.validators import (
    ValidationError,
    normalize_extension,
    validate_extension,
    validate_name,
)
from stagetree.filters.patterns import PatternMatcher
from stagetree.tree.compare import ComparisonResult, compare_folders, folders_equal
from stagetree.tree.item import Content, VirtualItem

PatternLike = Union[str, PatternMatcher]


class VirtualFolder:
    """A directory in a virtual tree."""

    def __init__(self, name: str, parent: Optional["VirtualFolder"] = None):
        """Create an empty folder.

        Args:
            name: Leaf directory name
            parent: Optional folder to register this one under

        Raises:
            InvalidArgumentError: If name is empty or contains a separator
            DuplicateChildError: If parent already holds a folder with this name
        """
        try:
            validate_name(name, "Folder name")
        except ValidationError as e:
            raise InvalidArgumentError(str(e)) from e

        self._name = name
        self._items: List[VirtualItem] = []
        self._folders: List["VirtualFolder"] = []
        self._parent: Optional[weakref.ref] = None

        if parent is not None:
            parent.add_sub_folder(self)

    # ------------------------------------------------------------------
    # Identity and navigation
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def items(self) -> List[VirtualItem]:
        """Child items in insertion order (copy)."""
        return list(self._items)

    @property
    def folders(self) -> List["VirtualFolder"]:
        """Child folders in insertion order (copy)."""
        return list(self._folders)

    @property
    def parent(self) -> Optional["VirtualFolder"]:
        return self._parent() if self._parent is not None else None

    @property
    def path(self) -> str:
        """Slash-separated names from the root folder down to this one."""
        names = []
        node: Optional[VirtualFolder] = self
        while node is not None:
            names.append(node.name)
            node = node.parent
        return "/".join(reversed(names))

    @property
    def is_empty(self) -> bool:
        return not self._items and not self._folders

    def get_item(self, name: str) -> Optional[VirtualItem]:
        """Return the child item with this filename, if any."""
        for item in self._items:
            if item.name == name:
                return item
        return None

    def get_folder(self, name: str) -> Optional["VirtualFolder"]:
        """Return the child folder with this name, if any."""
        for folder in self._folders:
            if folder.name == name:
                return folder
        return None

    def walk(self) -> Iterator["VirtualFolder"]:
        """Depth-first, pre-order iteration over this folder and its subtree."""
        yield self
        for folder in self._folders:
            yield from folder.walk()

    def iter_items(self, recursive: bool = True) -> Iterator[VirtualItem]:
        """Iterate over items here and, if recursive, in every sub folder."""
        folders = self.walk() if recursive else iter([self])
        for folder in folders:
            yield from folder._items

    def count_items(self, recursive: bool = True) -> int:
        return sum(1 for _ in self.iter_items(recursive))

    def count_folders(self, recursive: bool = True) -> int:
        if not recursive:
            return len(self._folders)
        return sum(1 for _ in self.walk()) - 1

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_item(self, item: VirtualItem) -> VirtualItem:
        """Append an item and take ownership of it.

        Raises:
            InvalidArgumentError: If item is not a VirtualItem or belongs elsewhere
            DuplicateChildError: If a sibling has the same base name and extension
        """
        if not isinstance(item, VirtualItem):
            raise InvalidArgumentError(f"Expected VirtualItem, got {type(item).__name__}")
        if item.parent is not None:
            raise InvalidArgumentError(
                f"Item '{item.name}' already belongs to '{item.parent.path}'"
            )
        if any(existing.sort_key == item.sort_key for existing in self._items):
            raise DuplicateChildError(
                f"Folder '{self.path}' already contains item '{item.name}'",
                path=f"{self.path}/{item.name}",
            )

        self._items.append(item)
        item._set_parent(self)
        return item

    def add_sub_folder(self, folder: "VirtualFolder") -> "VirtualFolder":
        """Append a child folder and take ownership of it.

        Raises:
            InvalidArgumentError: If folder belongs elsewhere or is an ancestor of self
            DuplicateChildError: If a sibling folder has the same name
        """
        if not isinstance(folder, VirtualFolder):
            raise InvalidArgumentError(f"Expected VirtualFolder, got {type(folder).__name__}")
        if folder.parent is not None:
            raise InvalidArgumentError(
                f"Folder '{folder.name}' already belongs to '{folder.parent.path}'"
            )
        node: Optional[VirtualFolder] = self
        while node is not None:
            if node is folder:
                raise InvalidArgumentError(f"Folder '{folder.name}' cannot contain itself")
            node = node.parent
        if any(existing.name == folder.name for existing in self._folders):
            raise DuplicateChildError(
                f"Folder '{self.path}' already contains folder '{folder.name}'",
                path=f"{self.path}/{folder.name}",
            )

        self._folders.append(folder)
        folder._parent = weakref.ref(self)
        return folder

    def new_item(
        self,
        base_name: str,
        extension: str = "",
        contents: Optional[Content] = None,
        source_path: Optional[str] = None,
    ) -> VirtualItem:
        """Create an item and add it here."""
        return self.add_item(VirtualItem(base_name, extension, contents, source_path))

    def new_sub_folder(self, name: str) -> "VirtualFolder":
        """Create a child folder and add it here."""
        return VirtualFolder(name, parent=self)

    def remove_item(self, item: VirtualItem) -> None:
        """Detach a child item.

        Raises:
            InvalidArgumentError: If item is not a child of this folder
        """
        for i, existing in enumerate(self._items):
            if existing is item:
                del self._items[i]
                item._set_parent(None)
                return
        raise InvalidArgumentError(f"Item '{item.name}' is not a child of '{self.path}'")

    def remove_folder(self, folder: "VirtualFolder") -> None:
        """Detach a child folder (and its whole subtree).

        Raises:
            InvalidArgumentError: If folder is not a child of this folder
        """
        for i, existing in enumerate(self._folders):
            if existing is folder:
                del self._folders[i]
                folder._parent = None
                return
        raise InvalidArgumentError(f"Folder '{folder.name}' is not a child of '{self.path}'")

    def clone(self, recursive: bool = False) -> "VirtualFolder":
        """Copy this folder into a new, detached tree.

        Args:
            recursive: Deep-copy every item and sub folder; otherwise only the
                name is copied and the clone is empty

        Returns:
            Independent folder with no parent
        """
        copy = VirtualFolder(self._name)
        if recursive:
            for item in self._items:
                copy.add_item(item.clone())
            for folder in self._folders:
                copy.add_sub_folder(folder.clone(recursive=True))
        return copy

    # ------------------------------------------------------------------
    # Structural transforms
    # ------------------------------------------------------------------

    def remove_matches(
        self,
        pattern: PatternLike,
        match_folders: bool = True,
        match_items: bool = True,
        case_sensitive: bool = False,
        logger: Optional[Logger] = None,
    ) -> List[str]:
        """Recursively remove folders and items whose names match a pattern.

        A matching folder is pruned together with everything below it; its
        contents are not visited. This folder itself is never removed.

        Args:
            pattern: Glob string (``regex:`` prefix for regex) or PatternMatcher
            match_folders: Prune matching sub folders
            match_items: Remove matching items
            case_sensitive: Case sensitivity when pattern is a string
            logger: Logger for removal messages

        Returns:
            Paths of the removed nodes, in traversal order
        """
        if pattern is None or pattern == "":
            raise InvalidArgumentError("Pattern cannot be empty")
        try:
            matcher = PatternMatcher.from_pattern(pattern, case_sensitive=case_sensitive)
        except re.error as e:
            raise InvalidArgumentError(f"Invalid pattern {pattern!r}: {e}") from e
        logger = logger or get_logger()
        removed: List[str] = []
        self._remove_matches(matcher, match_folders, match_items, logger, removed)
        logger.debug(
            "Pattern removal finished",
            folder=self.path,
            pattern=matcher,
            removed=len(removed),
        )
        return removed

    def _remove_matches(
        self,
        matcher: PatternMatcher,
        match_folders: bool,
        match_items: bool,
        logger: Logger,
        removed: List[str],
    ) -> None:
        if match_items:
            for item in [i for i in self._items if matcher.matches(i.name)]:
                removed.append(item.relative_path)
                logger.info("Removed matching item", path=item.relative_path)
                self.remove_item(item)

        for folder in list(self._folders):
            if match_folders and matcher.matches(folder.name):
                removed.append(folder.path)
                logger.info("Removed matching folder", path=folder.path)
                self.remove_folder(folder)
            else:
                folder._remove_matches(matcher, match_folders, match_items, logger, removed)

    def change_item_exts(
        self,
        old_ext: str,
        new_ext: str,
        recursive: bool = False,
        logger: Optional[Logger] = None,
    ) -> int:
        """Change the extension of matching items.

        Extensions are compared case-insensitively; leading dots are ignored.
        Folder names are never touched.

        Args:
            old_ext: Extension to replace
            new_ext: Replacement extension
            recursive: Also descend into sub folders
            logger: Logger for rename messages

        Returns:
            Number of items changed

        Raises:
            InvalidArgumentError: If either extension is malformed
            DuplicateChildError: If a rename would collide with a sibling; no
                item in that folder is changed
        """
        try:
            validate_extension(old_ext)
            validate_extension(new_ext)
        except ValidationError as e:
            raise InvalidArgumentError(str(e)) from e

        logger = logger or get_logger()
        old_key = normalize_extension(old_ext).lower()
        new_ext = normalize_extension(new_ext)

        folders = self.walk() if recursive else iter([self])
        changed = 0
        for folder in folders:
            changed += folder._change_own_item_exts(old_key, new_ext, logger)
        return changed

    def _change_own_item_exts(self, old_key: str, new_ext: str, logger: Logger) -> int:
        targets = [item for item in self._items if item.extension.lower() == old_key]
        if not targets:
            return 0

        target_ids = {id(item) for item in targets}
        taken = {item.sort_key for item in self._items if id(item) not in target_ids}
        for item in targets:
            new_key = (item.base_name, new_ext)
            if new_key in taken:
                raise DuplicateChildError(
                    f"Renaming '{item.name}' to extension '{new_ext}' collides in '{self.path}'",
                    path=item.relative_path,
                )
            taken.add(new_key)

        for item in targets:
            old_path = item.relative_path
            item.extension = new_ext
            logger.info("Changed item extension", path=old_path, new_name=item.name)
        return len(targets)

    # ------------------------------------------------------------------
    # Comparison and rendering
    # ------------------------------------------------------------------

    def equals(self, other: "VirtualFolder", compare_contents: bool = True) -> bool:
        """Deep, order-insensitive structural equality."""
        if not isinstance(other, VirtualFolder):
            return False
        return folders_equal(self, other, compare_contents)

    def compare(self, other: "VirtualFolder", compare_contents: bool = True) -> ComparisonResult:
        """Like equals(), but report every difference (self is the expected side)."""
        return compare_folders(self, other, compare_contents)

    def print_folder(
        self,
        show_contents: bool = False,
        indent: int = 0,
        filter: Optional[PatternLike] = None,
    ) -> str:
        """Render the subtree as indented text.

        Children are sorted so the output does not depend on insertion
        order. Folder lines end with ``/``.

        Args:
            show_contents: Print each item's text below it, prefixed with ``| ``
            indent: Starting indentation level
            filter: Only print items matching this glob or matcher

        Returns:
            Rendered tree, one node per line
        """
        matcher = PatternMatcher.from_pattern(filter) if filter else None
        lines: List[str] = []
        self._render(lines, show_contents, indent, matcher)
        return "\n".join(lines)

    def _render(
        self,
        lines: List[str],
        show_contents: bool,
        level: int,
        matcher: Optional[PatternMatcher],
    ) -> None:
        pad = " " * (Limits.INDENT_WIDTH * level)
        child_pad = " " * (Limits.INDENT_WIDTH * (level + 1))
        lines.append(f"{pad}{self._name}/")

        for item in sorted(self._items, key=lambda i: i.sort_key):
            if matcher is not None and not matcher.matches(item.name):
                continue
            lines.append(f"{child_pad}{item.name}")
            if show_contents:
                text = item.get_contents().decode("utf-8", errors="replace")
                for content_line in text.splitlines():
                    lines.append(f"{child_pad}| {content_line}")

        for folder in sorted(self._folders, key=lambda f: f.name):
            folder._render(lines, show_contents, level + 1, matcher)

    def __repr__(self) -> str:
        return (
            f"VirtualFolder(name='{self._name}', items={len(self._items)}, "
            f"folders={len(self._folders)})"
        )
