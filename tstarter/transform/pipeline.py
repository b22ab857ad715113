"""Transformation pipeline.

Runs the ordered step catalogue against a cloned template.  Steps execute
strictly one after another; each is skipped when its predicate is false.
The pipeline is forward-only: the first step that fails aborts the run, and
the partially transformed tree is left in place (no rollback).
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, Field

from tstarter.config import StarterOptions
from tstarter.errors import PipelineError, StarterError
from tstarter.utils import console, print_phase_header, print_step

from .steps import Phase, TransformationStep, default_steps


class PipelineResult(BaseModel):
    """Outcome of one pipeline run."""

    success: bool = Field(default=True)
    applied: list[str] = Field(default_factory=list, description="Steps whose predicate held")
    skipped: list[str] = Field(default_factory=list, description="Steps whose predicate was false")
    failed_step: str | None = Field(default=None)
    error: str | None = Field(default=None)

    def raise_for_failure(self) -> None:
        """Raise ``PipelineError`` if the run failed."""
        if not self.success:
            raise PipelineError(self.failed_step or "?", self.error or "unknown error")


class TransformationPipeline:
    """Applies transformation steps to a working copy.

    Args:
        steps: Step catalogue; defaults to ``default_steps()``.
        phases: Optional subset of phases to run.  Steps of other phases are
            left out entirely (neither applied nor reported as skipped).
        verbose: Also print steps whose predicate was false.
    """

    def __init__(
        self,
        steps: Iterable[TransformationStep] | None = None,
        phases: Iterable[Phase] | None = None,
        verbose: bool = False,
    ) -> None:
        self.steps = list(steps) if steps is not None else default_steps()
        self.phases = set(phases) if phases is not None else set(Phase)
        self.verbose = verbose

    async def run(self, options: StarterOptions, project_path: str | Path) -> PipelineResult:
        """Execute every selected step against *project_path*.

        Returns:
            A ``PipelineResult``.  Filesystem failures are reported in the
            result, naming the step, rather than raised.
        """
        root = Path(project_path)
        result = PipelineResult()
        current_phase: Phase | None = None

        for step in self.steps:
            if step.phase not in self.phases:
                continue
            if not step.applies(options):
                result.skipped.append(step.name)
                if self.verbose:
                    print_step(step.description, skipped=True)
                continue

            if step.phase != current_phase:
                current_phase = step.phase
                print_phase_header(int(step.phase))

            try:
                await asyncio.to_thread(step.apply, root, options)
            except (OSError, StarterError) as exc:
                result.success = False
                result.failed_step = step.name
                result.error = str(exc)
                return result

            result.applied.append(step.name)
            print_step(step.description)
            if self.verbose:
                for operation in step.operations:
                    console.print(f"    [dim]{operation.describe()}[/dim]")

        return result
