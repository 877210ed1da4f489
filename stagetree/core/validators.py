"""
StageTree Core: Input Validators.

Validation for node names, extensions, patterns and the configuration
sections StageTree reads (transform steps in particular).
"""
import os
import re
from typing import Any, Dict

from stagetree.core.constants import ConfigKey, ErrorCode, Limits, StepType

_SEPARATORS = tuple(sep for sep in (os.sep, os.altsep) if sep)


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


def validate_name(name: str, what: str = "Name") -> bool:
    """Validate a file base name or folder name.

    Args:
        name: Name to validate
        what: Label used in error messages

    Returns:
        True if valid

    Raises:
        ValidationError: If name is empty, too long or contains a separator
    """
    if not isinstance(name, str):
        raise ValidationError(f"{what} must be string, got {type(name).__name__}")

    if not name:
        raise ValidationError(f"{what} cannot be empty")

    if len(name) > Limits.MAX_FILENAME_LENGTH:
        raise ValidationError(f"{what} exceeds maximum length ({Limits.MAX_FILENAME_LENGTH})")

    if "\0" in name:
        raise ValidationError(f"{what} contains null bytes")

    if any(sep in name for sep in _SEPARATORS):
        raise ValidationError(f"{what} contains a path separator: {name}")

    if name in (".", ".."):
        raise ValidationError(f"{what} cannot be '{name}'")

    return True


def normalize_extension(extension: str) -> str:
    """Strip a single leading dot from an extension."""
    if extension is None:
        return ""
    return extension[1:] if extension.startswith(".") else extension


def validate_extension(extension: str) -> bool:
    """Validate a file extension (without leading dot, may be empty).

    Raises:
        ValidationError: If extension is not a string or contains a separator
    """
    if not isinstance(extension, str):
        raise ValidationError(f"Extension must be string, got {type(extension).__name__}")

    if "\0" in extension or any(sep in extension for sep in _SEPARATORS):
        raise ValidationError(f"Invalid extension: {extension}")

    return True


def validate_pattern(pattern: str) -> bool:
    """Validate a glob or regex pattern.

    Patterns prefixed with ``regex:`` must compile as regular expressions.

    Args:
        pattern: Pattern to validate

    Returns:
        True if valid

    Raises:
        ValidationError: If pattern is invalid
    """
    if not isinstance(pattern, str):
        raise ValidationError(f"Pattern must be string, got {type(pattern).__name__}")

    if not pattern:
        raise ValidationError("Pattern cannot be empty")

    if len(pattern) > Limits.MAX_PATH_LENGTH:
        raise ValidationError(f"Pattern exceeds maximum length ({Limits.MAX_PATH_LENGTH})")

    if "\0" in pattern:
        raise ValidationError("Invalid pattern: contains null bytes")

    if any(ord(c) < 32 and c not in "\t\n\r" for c in pattern):
        raise ValidationError("Invalid pattern: contains control characters")

    if pattern.startswith("regex:"):
        try:
            re.compile(pattern[6:])
        except re.error as e:
            raise ValidationError(f"Invalid regex pattern: {e}")

    return True


def validate_step_config(step: Dict[str, Any]) -> bool:
    """Validate one structural transform step configuration.

    Args:
        step: Step configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If step is invalid
    """
    if not isinstance(step, dict):
        raise ValidationError("Transform step must be a dictionary")

    if ConfigKey.STEP_TYPE not in step:
        raise ValidationError("Transform step must have 'type' field")

    step_type = step[ConfigKey.STEP_TYPE]
    try:
        step_type = StepType(step_type)
    except ValueError:
        valid_types = [t.value for t in StepType]
        raise ValidationError(f"Invalid transform step type: {step_type}. Must be one of {valid_types}")

    for flag in (
        ConfigKey.STEP_MATCH_FOLDERS,
        ConfigKey.STEP_MATCH_ITEMS,
        ConfigKey.STEP_RECURSIVE,
        ConfigKey.STEP_ENABLED,
    ):
        if flag in step and not isinstance(step[flag], bool):
            raise ValidationError(f"Transform step '{flag}' must be boolean: {step[flag]}")

    if step_type == StepType.REMOVE_MATCHES:
        if ConfigKey.STEP_PATTERN not in step:
            raise ValidationError("remove_matches step must have 'pattern' field")
        validate_pattern(step[ConfigKey.STEP_PATTERN])
        if not step.get(ConfigKey.STEP_MATCH_FOLDERS, True) and not step.get(
            ConfigKey.STEP_MATCH_ITEMS, True
        ):
            raise ValidationError("remove_matches step must match folders, items or both")

    elif step_type == StepType.CHANGE_EXTENSION:
        for key in (ConfigKey.STEP_OLD_EXT, ConfigKey.STEP_NEW_EXT):
            if key not in step:
                raise ValidationError(f"change_extension step must have '{key}' field")
            validate_extension(step[key])

    return True


def validate_config(config: Dict[str, Any]) -> bool:
    """Validate the ``stagetree`` configuration section.

    Args:
        config: Mapping holding the ``stagetree`` section contents

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a dictionary")

    if ConfigKey.DRY_RUN in config and not isinstance(config[ConfigKey.DRY_RUN], bool):
        raise ValidationError(f"dry_run must be boolean: {config[ConfigKey.DRY_RUN]}")

    logging_config = config.get(ConfigKey.LOGGING)
    if logging_config is not None:
        if not isinstance(logging_config, dict):
            raise ValidationError("Logging configuration must be a dictionary")
        level = logging_config.get(ConfigKey.LOG_LEVEL)
        if level is not None and str(level).upper() not in (
            "DEBUG",
            "INFO",
            "WARNING",
            "ERROR",
            "CRITICAL",
        ):
            raise ValidationError(f"Invalid log level: {level}")

    if ConfigKey.TRANSFORMS in config:
        steps = config[ConfigKey.TRANSFORMS]
        if not isinstance(steps, list):
            raise ValidationError("Transforms must be a list")

        for i, step in enumerate(steps):
            try:
                validate_step_config(step)
            except ValidationError as e:
                raise ValidationError(f"Invalid transform step at index {i}: {e}")

    return True
