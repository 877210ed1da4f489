"""
StageTree Core: File Operations.

Filesystem primitives used by the hierarchy reader and writer. Every failure
is raised as FileOperationError carrying an ErrorCode so callers can map it
onto their own error handling without inspecting OSError subclasses.
"""
import os
import shutil
import tempfile
from typing import List, Optional, Union

from stagetree.core.constants import ErrorCode


class FileOperationError(Exception):
    """Exception raised for file operation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        """Initialize FileOperationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


def _raise_for(exc: OSError, action: str, path: str) -> None:
    """Translate an OSError into a FileOperationError."""
    if isinstance(exc, FileNotFoundError):
        raise FileOperationError(f"Cannot {action} {path}: not found", ErrorCode.NOT_FOUND) from exc
    if isinstance(exc, PermissionError):
        raise FileOperationError(
            f"Cannot {action} {path}: permission denied", ErrorCode.PERMISSION_DENIED
        ) from exc
    if isinstance(exc, FileExistsError):
        raise FileOperationError(f"Cannot {action} {path}: already exists", ErrorCode.CONFLICT) from exc
    raise FileOperationError(f"Cannot {action} {path}: {exc}", ErrorCode.INTERNAL_ERROR) from exc


def read_file(
    path: str, binary: bool = True, size_limit: Optional[int] = None
) -> Union[bytes, str]:
    """Read file contents.

    Args:
        path: File path
        binary: Return bytes if True, decoded text otherwise
        size_limit: Optional maximum size in bytes

    Returns:
        File contents

    Raises:
        FileOperationError: If file cannot be read
    """
    try:
        if size_limit is not None and os.path.getsize(path) > size_limit:
            raise FileOperationError(
                f"File {path} exceeds size limit ({size_limit} bytes)", ErrorCode.INVALID_INPUT
            )
        mode = "rb" if binary else "r"
        with open(path, mode) as f:
            return f.read()
    except FileOperationError:
        raise
    except OSError as e:
        _raise_for(e, "read", path)


def write_file(
    path: str,
    content: Union[bytes, str],
    binary: bool = True,
    atomic: bool = True,
    create_dirs: bool = False,
) -> None:
    """Write file contents, replacing any existing file.

    Args:
        path: File path
        content: Bytes or text to write
        binary: Write in binary mode (text is encoded as UTF-8)
        atomic: Write to a temp file in the same directory, then replace
        create_dirs: Create missing parent directories

    Raises:
        FileOperationError: If file cannot be written
    """
    if binary and isinstance(content, str):
        content = content.encode("utf-8")

    try:
        parent = os.path.dirname(os.path.abspath(path))
        if create_dirs:
            os.makedirs(parent, exist_ok=True)

        if not atomic:
            mode = "wb" if binary else "w"
            with open(path, mode) as f:
                f.write(content)
            return

        fd, tmp_path = tempfile.mkstemp(dir=parent, prefix=".stagetree-")
        try:
            with os.fdopen(fd, "wb" if binary else "w") as f:
                f.write(content)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    except OSError as e:
        _raise_for(e, "write", path)


def delete_file(path: str, safe_mode: bool = True) -> None:
    """Delete a file.

    Args:
        path: File path
        safe_mode: Refuse to delete symlinks and directories

    Raises:
        FileOperationError: If file cannot be deleted
    """
    if safe_mode and os.path.islink(path):
        raise FileOperationError(f"Refusing to delete symlink {path}", ErrorCode.INVALID_INPUT)
    if safe_mode and os.path.isdir(path):
        raise FileOperationError(f"Refusing to delete directory {path}", ErrorCode.INVALID_INPUT)

    try:
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.unlink(path)
    except OSError as e:
        _raise_for(e, "delete", path)


def copy_file(
    source: str, dest: str, preserve_metadata: bool = True, overwrite: bool = False
) -> None:
    """Copy a file.

    Args:
        source: Source file path
        dest: Destination file path
        preserve_metadata: Copy permission bits and timestamps too
        overwrite: Replace an existing destination

    Raises:
        FileOperationError: If file cannot be copied
    """
    if not os.path.exists(source):
        raise FileOperationError(f"Cannot copy {source}: not found", ErrorCode.NOT_FOUND)
    if not overwrite and os.path.exists(dest):
        raise FileOperationError(f"Cannot copy to {dest}: already exists", ErrorCode.CONFLICT)

    try:
        if preserve_metadata:
            shutil.copy2(source, dest)
        else:
            shutil.copyfile(source, dest)
    except OSError as e:
        _raise_for(e, "copy", source)


def move_file(source: str, dest: str, overwrite: bool = False) -> None:
    """Move (or rename) a file.

    Args:
        source: Source file path
        dest: Destination file path
        overwrite: Replace an existing destination

    Raises:
        FileOperationError: If file cannot be moved
    """
    if not os.path.exists(source):
        raise FileOperationError(f"Cannot move {source}: not found", ErrorCode.NOT_FOUND)
    if not overwrite and os.path.exists(dest):
        raise FileOperationError(f"Cannot move to {dest}: already exists", ErrorCode.CONFLICT)

    try:
        shutil.move(source, dest)
    except OSError as e:
        _raise_for(e, "move", source)


def truncate_file(path: str) -> None:
    """Truncate an existing file to zero bytes.

    Raises:
        FileOperationError: If the file is missing or cannot be opened
    """
    if not os.path.isfile(path):
        raise FileOperationError(f"Cannot clear {path}: not found", ErrorCode.NOT_FOUND)

    try:
        with open(path, "wb"):
            pass
    except OSError as e:
        _raise_for(e, "clear", path)


def touch_file(path: str) -> None:
    """Create an empty file, or update the modification time of an existing one."""
    try:
        with open(path, "ab"):
            pass
        os.utime(path, None)
    except OSError as e:
        _raise_for(e, "touch", path)


def file_exists(path: str) -> bool:
    """Check whether a path exists."""
    try:
        return os.path.exists(path)
    except (OSError, ValueError):
        return False


def create_directory(
    path: str, mode: int = 0o755, parents: bool = True, exist_ok: bool = True
) -> None:
    """Create a directory.

    Args:
        path: Directory path
        mode: Permission bits for new directories
        parents: Create missing parents
        exist_ok: Do not fail if the directory already exists

    Raises:
        FileOperationError: If directory cannot be created
    """
    if os.path.isdir(path):
        if exist_ok:
            return
        raise FileOperationError(f"Directory {path} already exists", ErrorCode.CONFLICT)

    try:
        if parents:
            os.makedirs(path, mode=mode, exist_ok=exist_ok)
        else:
            os.mkdir(path, mode)
    except OSError as e:
        _raise_for(e, "create directory", path)


def remove_directory(path: str) -> None:
    """Remove an empty directory.

    Raises:
        FileOperationError: If the directory is missing, not empty or protected
    """
    try:
        os.rmdir(path)
    except OSError as e:
        _raise_for(e, "remove directory", path)


def list_directory(path: str, include_hidden: bool = True) -> List[str]:
    """List directory entries, sorted by name.

    Args:
        path: Directory path
        include_hidden: Include entries whose name starts with a dot

    Returns:
        Sorted entry names

    Raises:
        FileOperationError: If directory cannot be listed
    """
    if os.path.exists(path) and not os.path.isdir(path):
        raise FileOperationError(f"{path} is not a directory", ErrorCode.INVALID_INPUT)

    try:
        entries = os.listdir(path)
    except OSError as e:
        _raise_for(e, "list", path)

    if not include_hidden:
        entries = [e for e in entries if not e.startswith(".")]
    return sorted(entries)
