"""Shared pytest fixtures for the tstarter test suite.

Provides reusable fixtures for:
- The miniature typescript-starter template under ``fixtures/template``
- Working copies of that template in a temporary directory
- ``StarterOptions`` factories
- Fake collaborators that stand in for git and npm
- Mock subprocess helpers
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from tstarter.config import Placeholders, RepoInfo, Runner, StarterOptions
from tstarter.tasks import CloneResult, Tasks

TEMPLATE_DIR = Path(__file__).parent / "fixtures" / "template"


# ---------------------------------------------------------------------------
# Template & working copies
# ---------------------------------------------------------------------------


@pytest.fixture
def template_dir() -> Path:
    """Path to the pristine template fixture (never mutate it)."""
    assert TEMPLATE_DIR.is_dir(), f"Template fixture not found at {TEMPLATE_DIR}"
    return TEMPLATE_DIR


def copy_template(destination: Path) -> Path:
    """Copy the template fixture to *destination* and return it."""
    shutil.copytree(TEMPLATE_DIR, destination)
    return destination


@pytest.fixture
def template_copier() -> Callable[[Path], Path]:
    """Factory fixture wrapping ``copy_template`` for tests needing several copies."""
    return copy_template


@pytest.fixture
def working_copy(tmp_path: Path) -> Path:
    """A fresh copy of the template, as a clone would leave it."""
    return copy_template(tmp_path / "my-project")


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


@pytest.fixture
def tree_snapshot() -> Callable[[Path], dict[str, bytes]]:
    """Map every file under a root (relative POSIX path) to its bytes."""
    return _snapshot


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@pytest.fixture
def make_options(tmp_path: Path) -> Callable[..., StarterOptions]:
    """Factory for ``StarterOptions`` rooted in ``tmp_path``.

    Defaults describe a real git identity, npm, and every optional feature
    at its documented default.
    """

    def factory(**overrides: Any) -> StarterOptions:
        values: dict[str, Any] = {
            "project_name": "my-project",
            "description": "an example description",
            "runner": Runner.NPM,
            "full_name": "Satoshi Nakamoto",
            "email": "satoshi@example.com",
            "github_username": "satoshi",
            "repo_info": RepoInfo(repo="https://example.invalid/template.git", branch="main"),
            "working_directory": tmp_path,
        }
        values.update(overrides)
        return StarterOptions(**values)

    return factory


@pytest.fixture
def options(make_options) -> StarterOptions:
    return make_options()


@pytest.fixture
def anonymous_options(make_options) -> StarterOptions:
    """Options whose identity probe returned the placeholders."""
    return make_options(
        full_name=Placeholders.NAME,
        email=Placeholders.EMAIL,
        github_username=Placeholders.USERNAME,
    )


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------

FAKE_COMMIT = "0123456789abcdef0123456789abcdef01234567"


class FakeTasks:
    """Records calls; ``clone_repo`` copies the template fixture."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.install_error: Exception | None = None
        self.commit_error: Exception | None = None
        self.clone_error: Exception | None = None
        self.commit_hash = FAKE_COMMIT

    async def clone_repo(self, repo_info: RepoInfo, working_directory: Path, name: str) -> CloneResult:
        self.calls.append(("clone", (repo_info, working_directory, name)))
        if self.clone_error is not None:
            raise self.clone_error
        project_dir = copy_template(Path(working_directory) / name)
        (project_dir / ".git").mkdir()
        (project_dir / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
        return CloneResult(commit_hash=FAKE_COMMIT, git_history_dir=project_dir / ".git")

    async def install(self, runner: Runner, project_dir: Path) -> None:
        self.calls.append(("install", (runner, project_dir)))
        if self.install_error is not None:
            raise self.install_error

    async def initial_commit(self, commit_hash: str, project_dir: Path) -> None:
        self.calls.append(("commit", (commit_hash, project_dir)))
        if self.commit_error is not None:
            raise self.commit_error

    def called(self, name: str) -> bool:
        return any(call == name for call, _ in self.calls)

    def as_tasks(self) -> Tasks:
        return Tasks(clone_repo=self.clone_repo, install=self.install, initial_commit=self.initial_commit)


@pytest.fixture
def fake_tasks() -> FakeTasks:
    return FakeTasks()


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
