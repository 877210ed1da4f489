"""StageTree Core - Shared utilities and infrastructure.

Import specific functions from submodules:
    from stagetree.core.config import ConfigManager
    from stagetree.core.errors import StageTreeError
    from stagetree.core import constants
    from stagetree.core import file_ops
    from stagetree.core import logging
    from stagetree.core import validators
"""

# Re-export main module references for convenience
from stagetree.core import (
    config,
    constants,
    errors,
    file_ops,
    logging,
    validators,
)

__all__ = [
    "config",
    "constants",
    "errors",
    "file_ops",
    "logging",
    "validators",
]
