"""Option resolution.

Turns exactly one source of user choices (command-line flags *or*
interactive answers) plus the probed environment into a single immutable
``StarterOptions``.  Validation happens here, before anything touches the
filesystem.
"""

from __future__ import annotations

import argparse
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Awaitable, Callable

from tstarter.config import (
    DEFAULT_DESCRIPTION,
    InferredOptions,
    RepoInfo,
    Runner,
    StarterOptions,
    UserOptions,
)
from tstarter.errors import InvalidOptionError
from tstarter.tasks import Identity

_KEBAB_CASE = re.compile(r"^\s*[a-zA-Z0-9]+(-[a-zA-Z0-9]+)*\s*$")

# Interactive answer values.
PROJECT_TYPE_NODE = "node"
PROJECT_TYPE_LIBRARY = "lib"
DEFINITIONS_NONE = "none"
DEFINITIONS_NODE = "node"
DEFINITIONS_DOM = "dom"
DEFINITIONS_BOTH = "both"

EXTRAS = ("strict", "functional", "editorconfig", "cspell", "vscode", "circleci", "appveyor", "travis")


def validate_name(name: str, working_directory: str | Path) -> None:
    """Check *name* is kebab-case and free in *working_directory*.

    Raises:
        InvalidOptionError: naming the violated rule.
    """
    if not _KEBAB_CASE.match(name):
        raise InvalidOptionError("Name should be in-kebab-case")
    if (Path(working_directory) / name.strip()).exists():
        raise InvalidOptionError(f'The "{name}" path already exists in this directory.')


def check_name(name: str, working_directory: str | Path) -> bool | str:
    """Prompt-validator form of ``validate_name``: ``True`` or the message."""
    try:
        validate_name(name, working_directory)
    except InvalidOptionError as exc:
        return str(exc)
    return True


def user_options_from_args(args: argparse.Namespace) -> UserOptions:
    """Build ``UserOptions`` from parsed command-line flags."""
    return UserOptions(
        project_name=args.project_name.strip(),
        description=args.description,
        runner=Runner.YARN if args.yarn else Runner.NPM,
        dom_definitions=args.dom,
        node_definitions=args.node,
        strict=args.strict,
        functional=args.functional,
        editorconfig=args.editorconfig,
        cspell=args.cspell,
        vscode=args.vscode,
        circleci=args.circleci,
        appveyor=args.appveyor,
        travis=args.travis,
        install=args.install,
    )


def user_options_from_answers(answers: Mapping[str, Any], install: bool = True) -> UserOptions:
    """Build ``UserOptions`` from interactive answers.

    Expected keys: ``project_name``, ``type`` (``node``/``lib``),
    ``description``, ``runner``, ``definitions`` (libraries only) and
    ``extras`` (a collection of ``EXTRAS`` members).  *install* comes from
    the command line so ``--no-install`` always wins.
    """
    extras = set(answers.get("extras") or ())
    unknown = extras - set(EXTRAS)
    if unknown:
        raise InvalidOptionError(f"Unknown extras: {', '.join(sorted(unknown))}")

    definitions = answers.get("definitions")
    if definitions:
        dom = definitions in (DEFINITIONS_DOM, DEFINITIONS_BOTH)
        node = definitions in (DEFINITIONS_NODE, DEFINITIONS_BOTH)
    else:
        dom = False
        node = answers.get("type") == PROJECT_TYPE_NODE

    return UserOptions(
        project_name=str(answers["project_name"]).strip(),
        description=str(answers.get("description") or DEFAULT_DESCRIPTION).strip(),
        runner=Runner(answers.get("runner") or Runner.NPM),
        dom_definitions=dom,
        node_definitions=node,
        install=install,
        **{extra: extra in extras for extra in EXTRAS},
    )


async def infer_environment(
    probe: Callable[[], Awaitable[Identity]],
    lookup: Callable[[str], Awaitable[str]],
    repo_info: RepoInfo,
    working_directory: str | Path,
) -> InferredOptions:
    """Probe git identity and GitHub username for the current user."""
    identity = await probe()
    username = await lookup(identity.email)
    return InferredOptions(
        full_name=identity.name,
        email=identity.email,
        github_username=username,
        repo_info=repo_info,
        working_directory=Path(working_directory),
    )


def resolve(user_input: UserOptions, environment: InferredOptions) -> StarterOptions:
    """Validate and merge both sources into one immutable ``StarterOptions``.

    User-facing fields come only from *user_input*; probed fields only from
    *environment*, so there is no precedence to get wrong.

    Raises:
        InvalidOptionError: if the project name is invalid or already taken.
    """
    validate_name(user_input.project_name, environment.working_directory)
    return StarterOptions(
        **user_input.model_dump(),
        **environment.model_dump(),
    )
