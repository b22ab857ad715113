"""External collaborators: git, the package managers, and GitHub.

Every function here wraps a subprocess or network call so that the
orchestrator and the option resolver can be driven by substitutes in
tests.  ``Tasks`` bundles the three side-effecting collaborators the
orchestrator needs; ``live_tasks()`` returns the real implementations.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional

import httpx
from pydantic import BaseModel

from tstarter.config import Placeholders, RepoInfo, Runner
from tstarter.errors import (
    CloneError,
    CommitError,
    GitNotInstalledError,
    InstallError,
    ToolNotFoundError,
)
from tstarter.utils import run_command

GITHUB_API = "https://api.github.com"


class CloneResult(BaseModel):
    """What a successful clone leaves behind."""

    commit_hash: str
    git_history_dir: Path


class Identity(BaseModel):
    """Ambient git identity; placeholder-valued when unset."""

    name: str = Placeholders.NAME
    email: str = Placeholders.EMAIL


# ---------------------------------------------------------------------------
# Clone
# ---------------------------------------------------------------------------


async def clone_repo(
    repo_info: RepoInfo,
    working_directory: str | Path,
    dir_name: str,
    suppress_output: bool = False,
) -> CloneResult:
    """Shallow-clone the template into ``working_directory/dir_name``.

    Raises:
        GitNotInstalledError: ``git`` is not on PATH.
        CloneError: The clone itself, or reading its HEAD, failed.
    """
    project_dir = Path(working_directory) / dir_name
    if shutil.which("git") is None:
        raise GitNotInstalledError()
    try:
        returncode, _stdout, stderr = await run_command(
            ["git", "clone", "--depth=1", f"--branch={repo_info.branch}", repo_info.repo, dir_name],
            cwd=working_directory,
            capture=suppress_output,
        )
    except OSError as exc:
        # git is on PATH, so this is the working directory (missing, not a directory).
        raise CloneError(f"Git clone failed.\n{exc}") from exc
    if returncode != 0:
        raise CloneError(f"Git clone failed.\n{stderr}".strip())

    try:
        returncode, stdout, _stderr = await run_command(["git", "rev-parse", "HEAD"], cwd=project_dir)
    except OSError as exc:
        raise CloneError(f"Git rev-parse failed.\n{exc}") from exc
    if returncode != 0 or not stdout:
        raise CloneError("Git rev-parse failed.")

    return CloneResult(commit_hash=stdout, git_history_dir=project_dir / ".git")


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


async def get_user_info() -> Identity:
    """Read ``user.name`` and ``user.email`` from git config.

    Never raises: a missing git binary, an unset key or an empty value all
    yield the placeholder identity.
    """
    try:
        name_rc, name, _ = await run_command(["git", "config", "user.name"])
        email_rc, email, _ = await run_command(["git", "config", "user.email"])
    except FileNotFoundError:
        return Identity()
    if name_rc != 0 or email_rc != 0 or not name or not email:
        return Identity()
    return Identity(name=name, email=email)


Fetcher = Callable[[str], Awaitable[Optional[str]]]


async def search_github_username(email: str) -> str | None:
    """Look up the GitHub login registered with *email*."""
    async with httpx.AsyncClient(
        base_url=GITHUB_API,
        timeout=httpx.Timeout(10.0, connect=5.0),
        headers={"Accept": "application/vnd.github+json", "User-Agent": "tstarter"},
    ) as client:
        response = await client.get("/search/users", params={"q": f"{email} in:email"})
        response.raise_for_status()
        items = response.json().get("items") or []
    if not items:
        return None
    return items[0].get("login")


async def get_github_username(email: str | None, fetcher: Fetcher | None = None) -> str:
    """Best-effort reverse lookup of a GitHub username from an email.

    Returns ``Placeholders.USERNAME`` when the email is missing or itself a
    placeholder (without calling *fetcher*), when nothing is found, or on
    any lookup failure.
    """
    if not email or email == Placeholders.EMAIL:
        return Placeholders.USERNAME
    fetch = fetcher or search_github_username
    try:
        username = await fetch(email)
    except Exception:  # noqa: BLE001 - lookup is best-effort by contract
        return Placeholders.USERNAME
    return username or Placeholders.USERNAME


# ---------------------------------------------------------------------------
# Install / commit
# ---------------------------------------------------------------------------


async def install(runner: Runner, project_dir: str | Path) -> None:
    """Install dependencies with the chosen package manager.

    Output streams straight to the terminal.

    Raises:
        ToolNotFoundError: The package manager is not on PATH.
        InstallError: The installer exited non-zero.
    """
    cmd = ["npm", "install"] if runner is Runner.NPM else ["yarn"]
    if shutil.which(cmd[0]) is None:
        raise ToolNotFoundError(cmd[0])
    try:
        returncode, _, _ = await run_command(cmd, cwd=project_dir, capture=False)
    except FileNotFoundError as exc:
        raise ToolNotFoundError(cmd[0]) from exc
    if returncode != 0:
        raise InstallError("Installation failed. You'll need to install manually.")


async def initial_commit(commit_hash: str, project_dir: str | Path) -> None:
    """Create a fresh repository whose first commit records the template hash.

    Raises:
        CommitError: Any of the git commands failed.
    """
    message = f"Initial commit\n\nCreated with typescript-starter@{commit_hash}"
    for args in (["init"], ["add", "-A"], ["commit", "-m", message]):
        try:
            returncode, _, stderr = await run_command(["git", *args], cwd=project_dir)
        except FileNotFoundError as exc:
            raise GitNotInstalledError() from exc
        if returncode != 0:
            raise CommitError(f"git {args[0]} failed: {stderr}")


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------


CloneFn = Callable[[RepoInfo, Path, str], Awaitable[CloneResult]]
InstallFn = Callable[[Runner, Path], Awaitable[None]]
CommitFn = Callable[[str, Path], Awaitable[None]]


@dataclass(frozen=True)
class Tasks:
    """Side-effecting collaborators injected into the orchestrator."""

    clone_repo: CloneFn
    install: InstallFn
    initial_commit: CommitFn


def live_tasks() -> Tasks:
    """Collaborators backed by real git and package-manager processes."""
    return Tasks(clone_repo=clone_repo, install=install, initial_commit=initial_commit)
