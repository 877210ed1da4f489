#!/usr/bin/env python3
"""Configured entry point tying reader, pipeline, writer and comparison together.

This module handles:
- Building the logger and transform pipeline from configuration
- Reading a real directory into a virtual tree
- Applying the configured structural transforms
- Replaying a tree onto disk (dry-run unless configured otherwise)
- Comparing an expected tree against an actual one, with a report on mismatch

Example:
    >>> stager = TreeStager(ConfigManager("stagetree.yaml"))
    >>> expected = stager.read("/srv/source")
    >>> stager.transform(expected)
    >>> stager.write("/srv/export", expected, ItemAction.COPY)
    >>> stager.compare(expected, stager.read("/srv/export/source"))
"""

from typing import Optional, Union

from stagetree.core.config import CONFIG_SCHEMA, ConfigManager
from stagetree.core.constants import ConfigKey, ItemAction
from stagetree.core.logging import Logger
from stagetree.core.validators import validate_config
from stagetree.io.reader import HierarchyReader
from stagetree.io.writer import HierarchyWriter, WriteResult
from stagetree.transforms.pipeline import PipelineResult, TreePipeline
from stagetree.tree.compare import ComparisonResult
from stagetree.tree.folder import VirtualFolder
from stagetree.tree.report import render_comparison


class TreeStager:
    """
    Main class for configured staging runs.

    Owns the components built from one ConfigManager and exposes the
    read / transform / write / compare steps of a staging job.
    """

    def __init__(self, config: Optional[ConfigManager] = None, logger: Optional[Logger] = None):
        """
        Initialize stager.

        Args:
            config: Configuration manager (defaults to compiled defaults plus environment)
            logger: Logger instance (built from the logging section when omitted)

        Raises:
            ValidationError: If the configuration or its transform steps are invalid
            ConfigError: If a configuration value has the wrong type
        """
        self.config = config or ConfigManager()
        validate_config(self.config.get_all().get(ConfigKey.ROOT, {}))
        self.config.validate_schema(CONFIG_SCHEMA)
        self.logger = logger or Logger.from_config(self.config.section(ConfigKey.LOGGING))

        self.case_sensitive = bool(self._get(ConfigKey.MATCHING, ConfigKey.CASE_SENSITIVE, False))
        self.compare_contents = bool(self._get(ConfigKey.COMPARE, ConfigKey.COMPARE_CONTENTS, True))
        self.overwrite = bool(self._get(ConfigKey.WRITER, ConfigKey.OVERWRITE, True))

        self.logger.debug("Creating HierarchyReader")
        self.reader = HierarchyReader(logger=self.logger)

        self.logger.debug("Creating TreePipeline")
        steps = self.config.get(f"{ConfigKey.ROOT}.{ConfigKey.TRANSFORMS}", []) or []
        self.pipeline = TreePipeline.from_config(
            steps, case_sensitive=self.case_sensitive, logger=self.logger
        )

        self.logger.debug("Creating HierarchyWriter")
        self.writer = HierarchyWriter(logger=self.logger, overwrite=self.overwrite)

        self.logger.info("Stager initialized", transforms=len(self.pipeline))

    def _get(self, section: str, key: str, default):
        return self.config.get(f"{ConfigKey.ROOT}.{section}.{key}", default)

    def read(self, real_path: str, read_contents: bool = False) -> VirtualFolder:
        """Read real_path into a virtual tree."""
        return self.reader.read(real_path, read_contents=read_contents)

    def transform(self, folder: VirtualFolder, in_place: bool = True) -> PipelineResult:
        """Apply the configured transform steps to folder."""
        result = self.pipeline.apply(folder, in_place=in_place)
        if not result.success:
            self.logger.warning(
                "Transforms did not complete",
                failed=[r.name for r in result.step_results if not r.success],
            )
        return result

    def write(
        self,
        dest_path: str,
        folder: VirtualFolder,
        action: Union[ItemAction, str] = ItemAction.NO_ACTION,
        execute: Optional[bool] = None,
    ) -> WriteResult:
        """Replay folder onto dest_path.

        Args:
            dest_path: Directory that receives the root folder
            folder: Tree to materialize
            action: Per-item action
            execute: Perform the operations; None follows ``stagetree.dry_run``

        Returns:
            WriteResult of the pass
        """
        if execute is None:
            execute = not self.config.is_dry_run()
        return self.writer.write(dest_path, folder, action=action, execute=execute)

    def compare(
        self,
        expected: VirtualFolder,
        actual: VirtualFolder,
        show_report: bool = True,
    ) -> ComparisonResult:
        """Compare expected against actual, logging a side-by-side report on mismatch."""
        result = expected.compare(actual, compare_contents=self.compare_contents)
        if result.match:
            self.logger.info("Trees match", root=expected.name)
        else:
            self.logger.warning(
                "Trees differ", root=expected.name, differences=len(result.differences)
            )
            if show_report:
                self.logger.info(
                    "Comparison report\n" + render_comparison(expected, actual, result=result)
                )
        return result
