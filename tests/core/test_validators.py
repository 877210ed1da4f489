"""Tests for input validators."""
import os

import pytest

from stagetree.core.constants import ErrorCode
from stagetree.core.validators import (
    ValidationError,
    normalize_extension,
    validate_config,
    validate_extension,
    validate_name,
    validate_pattern,
    validate_step_config,
)


class TestValidateName:
    """Tests for validate_name."""

    def test_valid_names(self):
        assert validate_name("report") is True
        assert validate_name(".hidden") is True
        assert validate_name("with space") is True

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "nul\0byte", "x" * 256])
    def test_invalid_names(self, name):
        with pytest.raises(ValidationError) as exc_info:
            validate_name(name)
        assert exc_info.value.error_code == ErrorCode.INVALID_INPUT

    def test_os_separator(self):
        with pytest.raises(ValidationError, match="path separator"):
            validate_name(f"a{os.sep}b")

    @pytest.mark.skipif(os.sep == "\\", reason="backslash is a separator on Windows")
    def test_backslash_allowed_on_posix(self):
        assert validate_name("a\\b") is True
        assert validate_extension("t\\xt") is True

    def test_non_string(self):
        with pytest.raises(ValidationError, match="must be string"):
            validate_name(42)

    def test_label_in_message(self):
        with pytest.raises(ValidationError, match="Folder name cannot be empty"):
            validate_name("", "Folder name")


class TestExtensions:
    """Tests for extension helpers."""

    def test_normalize(self):
        assert normalize_extension(".txt") == "txt"
        assert normalize_extension("txt") == "txt"
        assert normalize_extension("") == ""
        assert normalize_extension(None) == ""

    def test_normalize_strips_single_dot(self):
        assert normalize_extension("..gz") == ".gz"

    def test_valid(self):
        assert validate_extension("") is True
        assert validate_extension("tar.gz") is True

    @pytest.mark.parametrize("ext", ["a/b", "x\0"])
    def test_invalid(self, ext):
        with pytest.raises(ValidationError):
            validate_extension(ext)

    def test_non_string(self):
        with pytest.raises(ValidationError):
            validate_extension(None)


class TestValidatePattern:
    """Tests for validate_pattern."""

    def test_glob(self):
        assert validate_pattern("*.tmp") is True

    def test_regex(self):
        assert validate_pattern(r"regex:^\d+$") is True

    def test_bad_regex(self):
        with pytest.raises(ValidationError, match="Invalid regex"):
            validate_pattern("regex:[unclosed")

    def test_empty(self):
        with pytest.raises(ValidationError):
            validate_pattern("")

    def test_control_characters(self):
        with pytest.raises(ValidationError, match="control"):
            validate_pattern("a\x01b")


class TestValidateStepConfig:
    """Tests for transform step validation."""

    def test_remove_matches(self):
        assert validate_step_config({"type": "remove_matches", "pattern": "*.tmp"}) is True

    def test_change_extension(self):
        step = {"type": "change_extension", "old_ext": "ps1", "new_ext": "txt"}
        assert validate_step_config(step) is True

    def test_missing_type(self):
        with pytest.raises(ValidationError, match="'type'"):
            validate_step_config({"pattern": "*"})

    def test_unknown_type(self):
        with pytest.raises(ValidationError, match="Invalid transform step type"):
            validate_step_config({"type": "compress"})

    def test_not_a_dict(self):
        with pytest.raises(ValidationError):
            validate_step_config(["remove_matches"])

    def test_missing_pattern(self):
        with pytest.raises(ValidationError, match="pattern"):
            validate_step_config({"type": "remove_matches"})

    def test_matches_nothing(self):
        step = {
            "type": "remove_matches",
            "pattern": "*",
            "match_folders": False,
            "match_items": False,
        }
        with pytest.raises(ValidationError, match="folders, items or both"):
            validate_step_config(step)

    def test_non_bool_flag(self):
        step = {"type": "remove_matches", "pattern": "*", "match_items": "yes"}
        with pytest.raises(ValidationError, match="boolean"):
            validate_step_config(step)

    def test_missing_new_ext(self):
        with pytest.raises(ValidationError, match="new_ext"):
            validate_step_config({"type": "change_extension", "old_ext": "ps1"})


class TestValidateConfig:
    """Tests for validate_config."""

    def test_valid(self, sample_config):
        assert validate_config(sample_config["stagetree"]) is True

    def test_bad_dry_run(self):
        with pytest.raises(ValidationError, match="dry_run"):
            validate_config({"dry_run": "maybe"})

    def test_bad_log_level(self):
        with pytest.raises(ValidationError, match="log level"):
            validate_config({"logging": {"level": "LOUD"}})

    def test_transforms_not_list(self):
        with pytest.raises(ValidationError, match="must be a list"):
            validate_config({"transforms": {"type": "remove_matches"}})

    def test_bad_step_index(self):
        config = {"transforms": [{"type": "remove_matches", "pattern": "*"}, {"type": "nope"}]}
        with pytest.raises(ValidationError, match="index 1"):
            validate_config(config)
