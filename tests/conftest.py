"""Shared pytest fixtures for StageTree tests."""
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List

import pytest
import yaml

from stagetree.core.config import set_global_config
from stagetree.core.logging import Logger, LogLevel, set_global_logger
from stagetree.tree.folder import VirtualFolder


class RecordingHandler(logging.Handler):
    """Collects emitted records for assertions."""

    def __init__(self):
        super().__init__()
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    @property
    def messages(self) -> List[str]:
        return [record.getMessage() for record in self.records]

    def contexts(self, message_prefix: str) -> List[Dict[str, Any]]:
        return [
            record.context
            for record in self.records
            if record.getMessage().startswith(message_prefix)
        ]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def source_dir(temp_dir: Path) -> Path:
    """Create a source directory shaped like a typical export staging area.

    source/
        a.ps1, a.tmp, b.txt
        excluded_dir/c.ps1
        sub/d.ps1, sub/e.tmp
        sub/nested/f.ps1
    """
    source = temp_dir / "source"
    source.mkdir()

    (source / "a.ps1").write_text("Write-Host 'a'")
    (source / "a.tmp").write_text("scratch")
    (source / "b.txt").write_text("plain text")

    (source / "excluded_dir").mkdir()
    (source / "excluded_dir" / "c.ps1").write_text("Write-Host 'c'")

    (source / "sub").mkdir()
    (source / "sub" / "d.ps1").write_text("Write-Host 'd'")
    (source / "sub" / "e.tmp").write_text("more scratch")

    (source / "sub" / "nested").mkdir()
    (source / "sub" / "nested" / "f.ps1").write_text("Write-Host 'f'")

    return source


@pytest.fixture
def dest_dir(temp_dir: Path) -> Path:
    """Create an empty export destination."""
    dest = temp_dir / "dest"
    dest.mkdir()
    return dest


@pytest.fixture
def recorder() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def logger(recorder: RecordingHandler) -> Logger:
    """Logger at DEBUG level whose output is captured by ``recorder``."""
    return Logger(name="stagetree.test", level=LogLevel.DEBUG, handlers=[recorder])


@pytest.fixture
def sample_tree() -> VirtualFolder:
    """In-memory tree mirroring ``source_dir``."""
    root = VirtualFolder("source")
    root.new_item("a", "ps1", b"Write-Host 'a'")
    root.new_item("a", "tmp", b"scratch")
    root.new_item("b", "txt", b"plain text")

    excluded = root.new_sub_folder("excluded_dir")
    excluded.new_item("c", "ps1", b"Write-Host 'c'")

    sub = root.new_sub_folder("sub")
    sub.new_item("d", "ps1", b"Write-Host 'd'")
    sub.new_item("e", "tmp", b"more scratch")

    nested = sub.new_sub_folder("nested")
    nested.new_item("f", "ps1", b"Write-Host 'f'")
    return root


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample StageTree configuration."""
    return {
        "stagetree": {
            "dry_run": False,
            "logging": {"level": "DEBUG", "file": None},
            "matching": {"case_sensitive": False},
            "compare": {"contents": True},
            "writer": {"overwrite": True},
            "transforms": [
                {
                    "name": "Drop excluded folders",
                    "type": "remove_matches",
                    "pattern": "excluded*",
                    "match_items": False,
                },
                {
                    "name": "Drop temp files",
                    "type": "remove_matches",
                    "pattern": "*.tmp",
                    "match_folders": False,
                },
                {
                    "name": "Scripts to text",
                    "type": "change_extension",
                    "old_ext": "ps1",
                    "new_ext": "txt",
                },
            ],
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "stagetree.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Reset global logger/config and strip STAGETREE_* variables between tests."""
    for key in [k for k in os.environ if k.startswith("STAGETREE_")]:
        monkeypatch.delenv(key)
    set_global_logger(None)
    set_global_config(None)
    yield
    set_global_logger(None)
    set_global_config(None)
