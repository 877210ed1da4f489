#!/usr/bin/env python3
"""End-to-end tests: build, transform, export, re-read and compare trees."""

import os

import pytest

from stagetree import ItemAction, VirtualFolder, read_folder_hierarchy, write_folder_hierarchy
from stagetree.tree.report import render_comparison

LEAF_FILES = {
    "script.ps1": b"Write-Output 'hi'",
    "tool.py": b"print('hi')",
    "settings.json": b'{"enabled": true}',
    "scratch.tmp": b"temporary",
    "notes.txt": b"remember",
}


def _fill_leaf(folder, label):
    for filename, data in LEAF_FILES.items():
        base, ext = filename.rsplit(".", 1)
        folder.new_item(base, ext, data + label.encode())


def _build_scenario():
    """root/{excluded1, level1/{sub1/{deep1}, sub2/{deep2}, excluded2}}"""
    root = VirtualFolder("root")
    _fill_leaf(root.new_sub_folder("excluded1"), "excluded1")
    level1 = root.new_sub_folder("level1")
    sub1 = level1.new_sub_folder("sub1")
    _fill_leaf(sub1.new_sub_folder("deep1"), "deep1")
    sub2 = level1.new_sub_folder("sub2")
    _fill_leaf(sub2.new_sub_folder("deep2"), "deep2")
    _fill_leaf(level1.new_sub_folder("excluded2"), "excluded2")
    return root


def _build_expected():
    """The scenario tree after pruning, temp removal and ps1 -> txt."""
    root = VirtualFolder("root")
    level1 = root.new_sub_folder("level1")
    for sub_name, deep_name in (("sub1", "deep1"), ("sub2", "deep2")):
        deep = level1.new_sub_folder(sub_name).new_sub_folder(deep_name)
        label = deep_name.encode()
        deep.new_item("script", "txt", LEAF_FILES["script.ps1"] + label)
        deep.new_item("tool", "py", LEAF_FILES["tool.py"] + label)
        deep.new_item("settings", "json", LEAF_FILES["settings.json"] + label)
        deep.new_item("notes", "txt", LEAF_FILES["notes.txt"] + label)
    return root


def _stage(tree):
    tree.remove_matches("excluded*", match_folders=True, match_items=False)
    tree.remove_matches("*.tmp", match_folders=False, match_items=True)
    tree.change_item_exts("ps1", "txt", recursive=True)
    return tree


class TestTreeProperties:
    """Properties of the in-memory model."""

    def test_clone_independence(self):
        original = _build_scenario()
        copy = original.clone(recursive=True)
        assert copy.equals(original)

        _stage(copy)

        assert not copy.equals(original)
        assert original.equals(_build_scenario())

    def test_order_insensitive_equality(self):
        names = ["a.ps1", "b.txt", "c.json", "d.tmp"]
        forward = VirtualFolder("root")
        backward = VirtualFolder("root")
        for name in names:
            base, ext = name.split(".")
            forward.new_item(base, ext)
        for name in reversed(names):
            base, ext = name.split(".")
            backward.new_item(base, ext)

        assert forward.equals(backward)

    def test_remove_matches_keeps_root(self):
        root = VirtualFolder("root")
        for base, ext in (("a", "ps1"), ("a", "tmp"), ("b", "txt")):
            root.new_item(base, ext)

        root.remove_matches("*.tmp", match_folders=False, match_items=True)

        assert sorted(i.name for i in root.items) == ["a.ps1", "b.txt"]
        assert root.name == "root"

    def test_pruning_short_circuit(self):
        root = VirtualFolder("root")
        root.new_sub_folder("excluded").new_sub_folder("nested").new_item("file", "txt")

        root.remove_matches("excluded", match_folders=True, match_items=False)

        assert root.is_empty
        assert all(f.name != "nested" for f in root.walk())

    @pytest.mark.parametrize("recursive, expected", [(False, "b.ps1"), (True, "b.txt")])
    def test_change_item_exts_scope(self, recursive, expected):
        root = VirtualFolder("root")
        root.new_item("a", "ps1")
        root.new_sub_folder("sub").new_item("b", "ps1")

        root.change_item_exts("ps1", "txt", recursive=recursive)

        assert root.get_item("a.txt") is not None
        assert root.get_folder("sub").items[0].name == expected


class TestDiskRoundTrip:
    """Properties involving the real filesystem."""

    def test_round_trip(self, source_dir, dest_dir):
        original = read_folder_hierarchy(str(source_dir), read_contents=True)

        result = write_folder_hierarchy(str(dest_dir), original, ItemAction.WRITE, execute=True)
        reread = read_folder_hierarchy(str(dest_dir / original.name))

        assert result.ok
        assert reread.equals(original)

    def test_dry_run_leaves_destination_empty(self, temp_dir):
        dest = temp_dir / "fresh"
        tree = _build_scenario()

        for action in ItemAction:
            write_folder_hierarchy(str(dest), tree, action, execute=False)

        assert not dest.exists()

    def test_end_to_end_scenario(self, temp_dir):
        staging = temp_dir / "staging"
        export = temp_dir / "export"

        write_folder_hierarchy(str(staging), _build_scenario(), ItemAction.WRITE, execute=True)
        tree = read_folder_hierarchy(str(staging / "root"))
        _stage(tree)
        result = write_folder_hierarchy(str(export), tree, ItemAction.COPY, execute=True)
        actual = read_folder_hierarchy(str(export / "root"))

        expected = _build_expected()
        comparison = expected.compare(actual)
        assert result.ok
        assert comparison.match, render_comparison(expected, actual, result=comparison)
        assert actual.equals(expected)
        assert not os.path.exists(export / "root" / "excluded1")

    def test_mismatch_is_reported(self, temp_dir):
        staging = temp_dir / "staging"
        write_folder_hierarchy(str(staging), _build_scenario(), ItemAction.WRITE, execute=True)
        (staging / "root" / "level1" / "sub1" / "deep1" / "extra.txt").write_text("surprise")

        actual = _stage(read_folder_hierarchy(str(staging / "root")))
        comparison = _build_expected().compare(actual)

        assert not comparison.match
        assert "unexpected: root/level1/sub1/deep1/extra.txt (item not expected)" in (
            comparison.summary()
        )
