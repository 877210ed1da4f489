"""StageTree Transforms - Structural transform pipeline.

This module provides:
- TreePipeline: Chain structural steps together
- RemoveMatchesStep: Pattern-based pruning
- ChangeExtensionStep: Extension renaming
"""

from .pipeline import (
    ChangeExtensionStep,
    PipelineResult,
    RemoveMatchesStep,
    StepResult,
    TreePipeline,
    TreeStep,
)

__all__ = [
    # Pipeline
    "TreePipeline",
    "PipelineResult",
    # Steps
    "TreeStep",
    "StepResult",
    "RemoveMatchesStep",
    "ChangeExtensionStep",
]
