#!/usr/bin/env python3
"""Structural transform pipeline for virtual trees.

A pipeline is an ordered list of steps, each a recursive traversal that
mutates a tree in place: pattern-based removal and extension renaming. It is
how a raw tree read from disk becomes the "what should be exported" tree that
is handed to the writer or compared against an actual export.

Example:
    >>> pipeline = TreePipeline()
    >>> pipeline.add_step(RemoveMatchesStep("excluded*", match_items=False))
    >>> pipeline.add_step(RemoveMatchesStep("*.tmp", match_folders=False))
    >>> pipeline.add_step(ChangeExtensionStep("ps1", "txt"))
    >>> result = pipeline.apply(tree)
    >>> result.success
    True
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from stagetree.core.constants import ConfigKey, StepType
from stagetree.core.errors import StageTreeError
from stagetree.core.logging import Logger, get_logger
from stagetree.core.validators import validate_step_config
from stagetree.tree.folder import PatternLike, VirtualFolder


@dataclass
class StepResult:
    """Result of running one step."""

    name: str
    success: bool = True
    changes: int = 0
    error: Optional[str] = None
    duration_ms: float = 0.0


@dataclass
class PipelineResult:
    """Result of running a whole pipeline."""

    folder: VirtualFolder
    success: bool = True
    halted: bool = False
    step_results: List[StepResult] = field(default_factory=list)

    @property
    def total_changes(self) -> int:
        return sum(r.changes for r in self.step_results)


class TreeStep(ABC):
    """A structural transform applied to a whole tree."""

    def __init__(self, name: Optional[str] = None, enabled: bool = True):
        self.name = name or self.__class__.__name__
        self.enabled = enabled

    @abstractmethod
    def run(self, folder: VirtualFolder, logger: Logger) -> int:
        """Mutate folder in place and return the number of changed nodes."""

    def apply(self, folder: VirtualFolder, logger: Optional[Logger] = None) -> StepResult:
        """Run the step with timing and error capture.

        Args:
            folder: Tree to transform in place
            logger: Logger passed down to the tree operations

        Returns:
            StepResult describing the outcome
        """
        logger = logger or get_logger()
        start = time.perf_counter()
        try:
            changes = self.run(folder, logger)
        except StageTreeError as e:
            logger.error("Transform step failed", step=self.name, error=str(e))
            return StepResult(
                name=self.name,
                success=False,
                error=str(e),
                duration_ms=(time.perf_counter() - start) * 1000,
            )
        return StepResult(
            name=self.name,
            changes=changes,
            duration_ms=(time.perf_counter() - start) * 1000,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


class RemoveMatchesStep(TreeStep):
    """Prune folders and remove items whose names match a pattern."""

    def __init__(
        self,
        pattern: PatternLike,
        match_folders: bool = True,
        match_items: bool = True,
        case_sensitive: bool = False,
        name: Optional[str] = None,
        enabled: bool = True,
    ):
        super().__init__(name=name or f"remove:{pattern}", enabled=enabled)
        self.pattern = pattern
        self.match_folders = match_folders
        self.match_items = match_items
        self.case_sensitive = case_sensitive

    def run(self, folder: VirtualFolder, logger: Logger) -> int:
        removed = folder.remove_matches(
            self.pattern,
            match_folders=self.match_folders,
            match_items=self.match_items,
            case_sensitive=self.case_sensitive,
            logger=logger,
        )
        return len(removed)


class ChangeExtensionStep(TreeStep):
    """Rename item extensions from old_ext to new_ext."""

    def __init__(
        self,
        old_ext: str,
        new_ext: str,
        recursive: bool = True,
        name: Optional[str] = None,
        enabled: bool = True,
    ):
        super().__init__(name=name or f"ext:{old_ext}->{new_ext}", enabled=enabled)
        self.old_ext = old_ext
        self.new_ext = new_ext
        self.recursive = recursive

    def run(self, folder: VirtualFolder, logger: Logger) -> int:
        return folder.change_item_exts(
            self.old_ext, self.new_ext, recursive=self.recursive, logger=logger
        )


class TreePipeline:
    """Ordered structural transforms applied to a tree."""

    def __init__(self, halt_on_error: bool = True, logger: Optional[Logger] = None):
        """Initialize pipeline.

        Args:
            halt_on_error: Stop at the first failing step (vs continue)
            logger: Logger for step messages
        """
        self._steps: List[TreeStep] = []
        self._halt_on_error = halt_on_error
        self._logger = logger or get_logger()

    @classmethod
    def from_config(
        cls,
        steps: List[Dict[str, Any]],
        case_sensitive: bool = False,
        halt_on_error: bool = True,
        logger: Optional[Logger] = None,
    ) -> "TreePipeline":
        """Build a pipeline from ``stagetree.transforms`` entries.

        Raises:
            ValidationError: If any step configuration is invalid
        """
        pipeline = cls(halt_on_error=halt_on_error, logger=logger)
        for step in steps:
            validate_step_config(step)
            enabled = step.get(ConfigKey.STEP_ENABLED, True)
            name = step.get(ConfigKey.STEP_NAME)
            if StepType(step[ConfigKey.STEP_TYPE]) == StepType.REMOVE_MATCHES:
                pipeline.add_step(
                    RemoveMatchesStep(
                        step[ConfigKey.STEP_PATTERN],
                        match_folders=step.get(ConfigKey.STEP_MATCH_FOLDERS, True),
                        match_items=step.get(ConfigKey.STEP_MATCH_ITEMS, True),
                        case_sensitive=case_sensitive,
                        name=name,
                        enabled=enabled,
                    )
                )
            else:
                pipeline.add_step(
                    ChangeExtensionStep(
                        step[ConfigKey.STEP_OLD_EXT],
                        step[ConfigKey.STEP_NEW_EXT],
                        recursive=step.get(ConfigKey.STEP_RECURSIVE, True),
                        name=name,
                        enabled=enabled,
                    )
                )
        return pipeline

    def add_step(self, step: TreeStep) -> None:
        """Append a step; steps run in insertion order."""
        self._steps.append(step)

    def remove_step(self, name: str) -> bool:
        """Remove step by name.

        Returns:
            True if step was removed
        """
        for i, step in enumerate(self._steps):
            if step.name == name:
                self._steps.pop(i)
                return True
        return False

    def clear_steps(self) -> None:
        self._steps.clear()

    def get_steps(self) -> List[TreeStep]:
        return self._steps.copy()

    def __len__(self) -> int:
        return len(self._steps)

    def apply(self, folder: VirtualFolder, in_place: bool = True) -> PipelineResult:
        """Run every enabled step against folder.

        Args:
            folder: Tree to transform
            in_place: Mutate folder itself; otherwise a recursive clone is
                transformed and returned in the result

        Returns:
            PipelineResult holding the transformed tree and per-step results
        """
        target = folder if in_place else folder.clone(recursive=True)
        result = PipelineResult(folder=target)

        for step in self._steps:
            if not step.enabled:
                continue

            step_result = step.apply(target, self._logger)
            result.step_results.append(step_result)
            self._logger.debug(
                "Transform step finished",
                step=step.name,
                changes=step_result.changes,
                success=step_result.success,
            )

            if not step_result.success:
                result.success = False
                if self._halt_on_error:
                    result.halted = True
                    break

        return result
