"""Tests for VirtualItem."""
from unittest.mock import patch

import pytest

from stagetree.core.errors import AccessDeniedError, InvalidArgumentError, NotFoundError
from stagetree.tree.folder import VirtualFolder
from stagetree.tree.item import VirtualItem, split_filename


class TestSplitFilename:
    """Tests for split_filename."""

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("script.ps1", ("script", "ps1")),
            ("archive.tar.gz", ("archive.tar", "gz")),
            ("Makefile", ("Makefile", "")),
            (".hidden", (".hidden", "")),
            ("notes.", ("notes.", "")),
            ("a..", ("a..", "")),
        ],
    )
    def test_split(self, filename, expected):
        assert split_filename(filename) == expected


class TestConstruction:
    """Tests for creating items."""

    def test_basic(self):
        item = VirtualItem("report", "txt")
        assert item.base_name == "report"
        assert item.extension == "txt"
        assert item.name == "report.txt"
        assert item.parent is None

    def test_leading_dot_stripped(self):
        assert VirtualItem("a", ".ps1").extension == "ps1"

    def test_no_extension(self):
        item = VirtualItem("README")
        assert item.name == "README"
        assert item.extension == ""

    def test_extension_case_preserved(self):
        assert VirtualItem("a", "PS1").name == "a.PS1"

    def test_empty_base_name(self):
        with pytest.raises(InvalidArgumentError):
            VirtualItem("", "txt")

    def test_separator_in_base_name(self):
        with pytest.raises(InvalidArgumentError):
            VirtualItem("a/b", "txt")

    def test_bad_extension(self):
        with pytest.raises(InvalidArgumentError):
            VirtualItem("a", "t/xt")

    def test_bad_contents_type(self):
        with pytest.raises(InvalidArgumentError):
            VirtualItem("a", "txt", contents=42)

    def test_from_filename(self):
        item = VirtualItem.from_filename("build.log", contents="x")
        assert item.sort_key == ("build", "log")
        assert item.get_contents() == b"x"


class TestContents:
    """Tests for in-memory and lazy content."""

    def test_text_stored_as_utf8(self):
        item = VirtualItem("a", "txt", contents="naïve")
        assert item.get_contents() == "naïve".encode("utf-8")
        assert item.has_contents

    def test_no_content_no_source(self):
        item = VirtualItem("a", "txt")
        assert item.get_contents() == b""
        assert not item.is_lazy

    def test_lazy_read(self, temp_dir):
        path = temp_dir / "a.txt"
        path.write_bytes(b"from disk")
        item = VirtualItem("a", "txt", source_path=str(path))

        assert item.is_lazy
        assert item.get_contents() == b"from disk"

    def test_lazy_read_is_not_cached(self, temp_dir):
        path = temp_dir / "a.txt"
        path.write_bytes(b"first")
        item = VirtualItem("a", "txt", source_path=str(path))
        assert item.get_contents() == b"first"

        path.write_bytes(b"second")
        assert item.get_contents() == b"second"
        assert item.is_lazy

    def test_in_memory_wins_over_source(self, temp_dir):
        path = temp_dir / "a.txt"
        path.write_bytes(b"disk")
        item = VirtualItem("a", "txt", contents=b"memory", source_path=str(path))
        assert item.get_contents() == b"memory"

    def test_lazy_missing_source(self, temp_dir):
        item = VirtualItem("a", "txt", source_path=str(temp_dir / "gone.txt"))
        with pytest.raises(NotFoundError) as exc_info:
            item.get_contents()
        assert exc_info.value.path == str(temp_dir / "gone.txt")

    def test_lazy_unreadable_source(self, temp_dir):
        path = temp_dir / "locked.txt"
        path.write_bytes(b"x")
        item = VirtualItem("a", "txt", source_path=str(path))
        with patch("builtins.open", side_effect=PermissionError("denied")):
            with pytest.raises(AccessDeniedError):
                item.get_contents()

    def test_set_contents_keeps_source(self, temp_dir):
        item = VirtualItem("a", "txt", source_path=str(temp_dir / "a.txt"))
        item.set_contents(b"override")
        assert item.get_contents() == b"override"
        assert item.source_path == str(temp_dir / "a.txt")
        assert not item.is_lazy


class TestCloneAndEquality:
    """Tests for clone and equals."""

    def test_clone_is_independent(self):
        root = VirtualFolder("root")
        item = root.new_item("a", "txt", b"one", source_path="/src/a.txt")
        copy = item.clone()

        copy.extension = "md"
        copy.set_contents(b"two")

        assert copy.parent is None
        assert copy.source_path == "/src/a.txt"
        assert item.name == "a.txt"
        assert item.get_contents() == b"one"

    def test_equals_identity(self):
        assert VirtualItem("a", "txt", b"1").equals(VirtualItem("a", "txt", b"2"))
        assert not VirtualItem("a", "txt").equals(VirtualItem("a", "md"))

    def test_equals_is_case_sensitive(self):
        assert not VirtualItem("a", "TXT").equals(VirtualItem("a", "txt"))

    def test_equals_contents(self):
        left = VirtualItem("a", "txt", b"1")
        assert left.equals(VirtualItem("a", "txt", b"1"), compare_contents=True)
        assert not left.equals(VirtualItem("a", "txt", b"2"), compare_contents=True)

    def test_equals_other_type(self):
        assert not VirtualItem("a").equals("a")


class TestPaths:
    """Tests for parent links and paths."""

    def test_relative_path(self):
        root = VirtualFolder("root")
        sub = root.new_sub_folder("sub")
        item = sub.new_item("a", "txt")
        assert item.relative_path == "root/sub/a.txt"
        assert item.parent is sub

    def test_detached_relative_path(self):
        assert VirtualItem("a", "txt").relative_path == "a.txt"

    def test_repr(self):
        assert repr(VirtualItem("a", "txt", b"abc")) == "VirtualItem(name='a.txt', 3 bytes)"
        assert repr(VirtualItem("a")) == "VirtualItem(name='a', empty)"
