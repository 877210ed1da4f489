"""
StageTree Tree: VirtualItem.

A VirtualItem is a leaf node standing for one file. Its identity is the pair
(base_name, extension); its content is either held in memory or read on
demand from a recorded source path.
"""
import os
import weakref
from typing import TYPE_CHECKING, Optional, Tuple, Union

from stagetree.core import file_ops
from stagetree.core.constants import ErrorCode
from stagetree.core.errors import AccessDeniedError, InvalidArgumentError, NotFoundError, TreeIOError
from stagetree.core.validators import (
    ValidationError,
    normalize_extension,
    validate_extension,
    validate_name,
)

if TYPE_CHECKING:
    from stagetree.tree.folder import VirtualFolder

Content = Union[bytes, str]


def split_filename(filename: str) -> Tuple[str, str]:
    """Split a filename into (base_name, extension) without the dot.

    ``archive.tar.gz`` gives ``("archive.tar", "gz")`` and ``.hidden`` gives
    ``(".hidden", "")``. A trailing dot stays in the base name, so ``notes.``
    gives ``("notes.", "")``.
    """
    base_name, extension = os.path.splitext(filename)
    if extension == ".":
        return filename, ""
    return base_name, normalize_extension(extension)


def _to_bytes(contents: Optional[Content]) -> Optional[bytes]:
    if contents is None:
        return None
    if isinstance(contents, str):
        return contents.encode("utf-8")
    if isinstance(contents, (bytes, bytearray, memoryview)):
        return bytes(contents)
    raise InvalidArgumentError(f"Contents must be bytes or str, got {type(contents).__name__}")


class VirtualItem:
    """A file in a virtual tree.

    Attributes:
        base_name: File name without extension (never empty)
        extension: Extension without leading dot (may be empty)
        source_path: Real file backing this item, if any
    """

    def __init__(
        self,
        base_name: str,
        extension: str = "",
        contents: Optional[Content] = None,
        source_path: Optional[str] = None,
    ):
        """Create an item.

        Args:
            base_name: File name without extension
            extension: Extension, with or without leading dot
            contents: In-memory bytes or text (text is stored as UTF-8)
            source_path: Real file read on demand when contents is None

        Raises:
            InvalidArgumentError: If base_name is empty or either part is malformed
        """
        try:
            validate_name(base_name, "Base name")
            validate_extension(extension if extension is not None else "")
        except ValidationError as e:
            raise InvalidArgumentError(str(e)) from e

        self._base_name = base_name
        self._extension = normalize_extension(extension)
        self._contents = _to_bytes(contents)
        self.source_path = source_path
        self._parent: Optional[weakref.ref] = None

    @classmethod
    def from_filename(
        cls,
        filename: str,
        contents: Optional[Content] = None,
        source_path: Optional[str] = None,
    ) -> "VirtualItem":
        """Create an item from a full filename such as ``script.ps1``."""
        base_name, extension = split_filename(filename)
        return cls(base_name, extension, contents=contents, source_path=source_path)

    @property
    def base_name(self) -> str:
        return self._base_name

    @property
    def extension(self) -> str:
        return self._extension

    @extension.setter
    def extension(self, value: str) -> None:
        try:
            validate_extension(value)
        except ValidationError as e:
            raise InvalidArgumentError(str(e)) from e
        self._extension = normalize_extension(value)

    @property
    def name(self) -> str:
        """Composed filename."""
        if self._extension:
            return f"{self._base_name}.{self._extension}"
        return self._base_name

    @property
    def sort_key(self) -> Tuple[str, str]:
        return (self._base_name, self._extension)

    @property
    def parent(self) -> Optional["VirtualFolder"]:
        """Owning folder, or None for a detached item."""
        return self._parent() if self._parent is not None else None

    def _set_parent(self, folder: Optional["VirtualFolder"]) -> None:
        self._parent = weakref.ref(folder) if folder is not None else None

    @property
    def relative_path(self) -> str:
        """Slash-separated path from the root folder, including the root name."""
        parent = self.parent
        if parent is None:
            return self.name
        return f"{parent.path}/{self.name}"

    @property
    def has_contents(self) -> bool:
        """Whether content is held in memory."""
        return self._contents is not None

    @property
    def is_lazy(self) -> bool:
        """Whether content will be read from source_path on demand."""
        return self._contents is None and self.source_path is not None

    def set_contents(self, data: Optional[Content]) -> None:
        """Replace in-memory content; the recorded source path is kept."""
        self._contents = _to_bytes(data)

    def get_contents(self) -> bytes:
        """Return the item's bytes.

        In-memory content wins; otherwise source_path is read on every call.
        An item with neither has empty content.

        Raises:
            NotFoundError: If the source file is gone
            AccessDeniedError: If the source file cannot be read
            TreeIOError: On any other read failure
        """
        if self._contents is not None:
            return self._contents
        if self.source_path is None:
            return b""

        try:
            return file_ops.read_file(self.source_path, binary=True)
        except file_ops.FileOperationError as e:
            if e.error_code == ErrorCode.NOT_FOUND:
                raise NotFoundError(str(e), path=self.source_path) from e
            if e.error_code == ErrorCode.PERMISSION_DENIED:
                raise AccessDeniedError(str(e), path=self.source_path) from e
            raise TreeIOError(str(e), path=self.source_path) from e

    def clone(self) -> "VirtualItem":
        """Return a detached copy with its own content buffer."""
        return VirtualItem(
            self._base_name,
            self._extension,
            contents=self._contents,
            source_path=self.source_path,
        )

    def equals(self, other: "VirtualItem", compare_contents: bool = False) -> bool:
        """Compare identity (case-sensitive) and optionally content bytes."""
        if not isinstance(other, VirtualItem):
            return False
        if self.sort_key != other.sort_key:
            return False
        if compare_contents:
            return self.get_contents() == other.get_contents()
        return True

    def __repr__(self) -> str:
        if self.has_contents:
            origin = f"{len(self._contents)} bytes"
        elif self.source_path:
            origin = f"source={self.source_path!r}"
        else:
            origin = "empty"
        return f"VirtualItem(name='{self.name}', {origin})"
