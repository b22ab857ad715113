"""tstarter configuration.

Typed, immutable configuration for a single scaffolding run.  All settings
use Pydantic v2 models so they are validated at construction time.  A run
builds exactly one ``StarterOptions`` (see ``tstarter.resolver``) and every
later stage only reads from it.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Release of the typescript-starter template this tool is pinned to.
TEMPLATE_RELEASE = "10.1.1"

DEFAULT_REPO_URL = "https://github.com/bitjson/typescript-starter.git"

DEFAULT_DESCRIPTION = "a typescript-starter project"


class Runner(str, Enum):
    """Package manager used to install the generated project."""

    NPM = "npm"
    YARN = "yarn"


class Placeholders:
    """Sentinel identity values used when git identity is not configured."""

    EMAIL = "YOUR_EMAIL"
    NAME = "YOUR_NAME"
    USERNAME = "YOUR_GITHUB_USER_NAME"


class RepoInfo(BaseModel):
    """Location of the template repository and the ref to clone."""

    model_config = ConfigDict(frozen=True)

    repo: str = Field(default=DEFAULT_REPO_URL)
    branch: str = Field(default=f"v{TEMPLATE_RELEASE}")

    @classmethod
    def from_env(cls, release: str = TEMPLATE_RELEASE) -> "RepoInfo":
        """Build a ``RepoInfo`` from environment variables.

        Recognised variables (all optional):
            TYPESCRIPT_STARTER_REPO_URL, TYPESCRIPT_STARTER_REPO_BRANCH.

        Without a URL override the pinned release tag is cloned.  A custom
        URL defaults to ``master`` since it is unlikely to carry our tags.
        """
        url = os.environ.get("TYPESCRIPT_STARTER_REPO_URL")
        branch = os.environ.get("TYPESCRIPT_STARTER_REPO_BRANCH")
        if url:
            return cls(repo=url, branch=branch or "master")
        return cls(branch=branch or f"v{release}")


class UserOptions(BaseModel):
    """Choices made by the user, either on the command line or interactively."""

    model_config = ConfigDict(frozen=True)

    project_name: str
    description: str = Field(default=DEFAULT_DESCRIPTION)
    runner: Runner = Field(default=Runner.NPM)
    dom_definitions: bool = Field(default=False, description="Keep the DOM lib in tsconfig")
    node_definitions: bool = Field(default=False, description="Keep Node.js types and sources")
    strict: bool = Field(default=False, description="Keep the strict compiler option")
    functional: bool = Field(default=True, description="Enable eslint-plugin-functional")
    editorconfig: bool = Field(default=True)
    cspell: bool = Field(default=True)
    vscode: bool = Field(default=True, description="Include VS Code debugging config")
    circleci: bool = Field(default=False)
    appveyor: bool = Field(default=False)
    travis: bool = Field(default=False)
    install: bool = Field(default=True)


class InferredOptions(BaseModel):
    """Values probed from the environment rather than asked of the user."""

    model_config = ConfigDict(frozen=True)

    full_name: str = Field(default=Placeholders.NAME)
    email: str = Field(default=Placeholders.EMAIL)
    github_username: str = Field(default=Placeholders.USERNAME)
    repo_info: RepoInfo = Field(default_factory=RepoInfo)
    working_directory: Path = Field(default_factory=Path.cwd)


class StarterOptions(UserOptions, InferredOptions):
    """The complete configuration of one scaffolding run.

    Frozen: once resolved it is passed by value and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    @property
    def project_path(self) -> Path:
        """Directory the template is cloned into."""
        return Path(self.working_directory) / self.project_name

    @property
    def has_identity(self) -> bool:
        """``True`` when git identity was genuinely configured."""
        return self.full_name != Placeholders.NAME and self.email != Placeholders.EMAIL
