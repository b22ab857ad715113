"""Template transformation pipeline.

Turns a fresh clone of typescript-starter into a generated project by
applying an ordered list of conditional, typed operations.

Quick usage::

    from tstarter.transform import TransformationPipeline

    result = await TransformationPipeline().run(options, options.project_path)
    result.raise_for_failure()
"""

from tstarter.transform.operations import (
    DeletePaths,
    RemoveModuleReferences,
    RenamePath,
    ReplaceText,
    RewriteManifest,
)
from tstarter.transform.pipeline import PipelineResult, TransformationPipeline
from tstarter.transform.steps import Phase, TransformationStep, default_steps

__all__ = [
    "DeletePaths",
    "Phase",
    "PipelineResult",
    "RemoveModuleReferences",
    "RenamePath",
    "ReplaceText",
    "RewriteManifest",
    "TransformationPipeline",
    "TransformationStep",
    "default_steps",
]
