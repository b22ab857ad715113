"""Scaffolding orchestrator.

Drives one run end to end::

    clone -> drop .git -> transform -> [install] -> [initial commit]

Every step waits for the previous one; nothing here runs concurrently.
Collaborators are injected through ``Tasks`` so the whole sequence can be
exercised without spawning git or npm.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from pydantic import BaseModel, Field

from tstarter.config import StarterOptions
from tstarter.errors import CloneError, CommitError, InstallError, ToolingError
from tstarter.tasks import Tasks
from tstarter.transform import TransformationPipeline
from tstarter.utils import console, print_success, print_warning


class ScaffoldReport(BaseModel):
    """Summary of a completed run."""

    project_path: Path
    commit_hash: str
    installed: bool = Field(default=False)
    committed: bool = Field(default=False)
    warnings: list[str] = Field(default_factory=list)


async def scaffold(
    options: StarterOptions,
    tasks: Tasks,
    pipeline: TransformationPipeline | None = None,
) -> ScaffoldReport:
    """Create ``options.project_path`` from the template.

    Raises:
        GitNotInstalledError: git is missing (clone stage).
        CloneError: the clone or its rev-parse failed, or its
            git history could not be removed.
        PipelineError: a transformation step failed; install and commit are
            not attempted and the partially transformed tree is left behind.
    """
    pipeline = pipeline or TransformationPipeline()
    project_path = options.project_path

    console.print()
    cloned = await tasks.clone_repo(options.repo_info, Path(options.working_directory), options.project_name)
    if cloned.git_history_dir.exists():
        try:
            await asyncio.to_thread(shutil.rmtree, cloned.git_history_dir)
        except OSError as exc:
            raise CloneError(f"Could not remove the template's git history: {exc}") from exc
    console.print(f"[dim]Cloned at commit: {cloned.commit_hash}[/dim]\n")

    result = await pipeline.run(options, project_path)
    result.raise_for_failure()

    report = ScaffoldReport(project_path=project_path, commit_hash=cloned.commit_hash)

    if options.install:
        try:
            await tasks.install(options.runner, project_path)
            report.installed = True
        except (InstallError, ToolingError) as exc:
            report.warnings.append(str(exc))
            print_warning(str(exc))

    if options.has_identity:
        console.print("Initializing git repository...")
        try:
            await tasks.initial_commit(cloned.commit_hash, project_path)
            report.committed = True
        except (CommitError, ToolingError) as exc:
            report.warnings.append(str(exc))
            print_warning(f"Initial commit skipped: {exc}")

    print_success(f"Created {options.project_name} 🎉")
    return report
