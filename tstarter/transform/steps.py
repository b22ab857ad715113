"""Canonical transformation steps.

A ``TransformationStep`` pairs a predicate over ``StarterOptions`` with a
sequence of typed operations.  ``default_steps`` returns the fixed, ordered
catalogue that turns a fresh clone of typescript-starter into a generated
project.  Later steps rely on earlier ones (e.g. the README is deleted
during cleanup before ``README-starter.md`` takes its place), so the order
of this list is part of its contract.  A new optional feature is supported
by appending a step, not by adding branches to the pipeline.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from pathlib import Path
from typing import Callable

from tstarter.config import Runner, StarterOptions

from .manifest import rewrite_metadata, set_repository
from .operations import (
    DeletePaths,
    Operation,
    RemoveModuleReferences,
    RenamePath,
    ReplaceText,
    RewriteManifest,
)

Predicate = Callable[[StarterOptions], bool]

TEMPLATE_AUTHOR = "Jason Dreyzehner"
TEMPLATE_COPYRIGHT = "Copyright (c) 2017"


class Phase(IntEnum):
    IDENTITY = 1
    METADATA = 2
    CLEANUP = 3
    FEATURES = 4
    FINALIZE = 5
    STRICTNESS = 6


def always(options: StarterOptions) -> bool:
    return True


@dataclass(frozen=True)
class TransformationStep:
    """One conditional mutation of the working copy.

    Attributes:
        name: Stable identifier, reported when the step fails.
        phase: Canonical phase the step belongs to.
        description: Human-readable progress message.
        operations: Applied in order when ``when`` holds.
        when: Predicate over the options; the step is skipped when false.
    """

    name: str
    phase: Phase
    description: str
    operations: tuple[Operation, ...]
    when: Predicate = field(default=always)

    def applies(self, options: StarterOptions) -> bool:
        return bool(self.when(options))

    def apply(self, root: Path, options: StarterOptions) -> bool:
        """Run every operation; return ``True`` if any of them changed the tree."""
        changed = False
        for operation in self.operations:
            changed = operation.apply(root, options) or changed
        return changed


def _copyright_line(options: StarterOptions) -> str:
    return f"Copyright (c) {datetime.now(timezone.utc).year}"


def default_steps() -> list[TransformationStep]:
    """Return the canonical, ordered step catalogue."""
    return [
        # -- 1. Identity ---------------------------------------------------
        TransformationStep(
            name="license",
            phase=Phase.IDENTITY,
            description="Updating LICENSE",
            operations=(
                ReplaceText("LICENSE", TEMPLATE_COPYRIGHT, _copyright_line),
                ReplaceText("LICENSE", TEMPLATE_AUTHOR, lambda o: o.full_name),
            ),
        ),
        TransformationStep(
            name="repository-url",
            phase=Phase.IDENTITY,
            description="Pointing package.json at the new repository",
            operations=(RewriteManifest(set_repository),),
        ),
        # -- 2. Metadata ---------------------------------------------------
        TransformationStep(
            name="package-json",
            phase=Phase.METADATA,
            description="Updating package.json",
            operations=(RewriteManifest(rewrite_metadata),),
        ),
        # -- 3. Unconditional cleanup --------------------------------------
        TransformationStep(
            name="delete-template-files",
            phase=Phase.CLEANUP,
            description="Deleting unnecessary files",
            operations=(
                DeletePaths(
                    ".github/CONTRIBUTING.md",
                    ".github/ISSUE_TEMPLATE.md",
                    ".github/PULL_REQUEST_TEMPLATE.md",
                    "CHANGELOG.md",
                    "README.md",
                    "package-lock.json",
                    "yarn.lock",
                    "bin",
                    "examples",
                    "src/cli",
                    "src/types/cli.d.ts",
                ),
            ),
        ),
        TransformationStep(
            name="ignore-files",
            phase=Phase.CLEANUP,
            description="Updating .gitignore and .npmignore",
            operations=(
                ReplaceText(".gitignore", r"^diff\r?\n", "", regex=True, flags=re.MULTILINE),
                ReplaceText(".npmignore", r"^examples\r?\n", "", regex=True, flags=re.MULTILINE),
            ),
        ),
        TransformationStep(
            name="yarn-lockfile",
            phase=Phase.CLEANUP,
            description="Ignoring package-lock.json instead of yarn.lock",
            operations=(
                ReplaceText(".gitignore", r"^yarn\.lock$", "package-lock.json", regex=True, flags=re.MULTILINE),
            ),
            when=lambda o: o.runner is Runner.YARN,
        ),
        TransformationStep(
            name="cli-traces",
            phase=Phase.CLEANUP,
            description="Removing traces of the CLI",
            operations=(
                ReplaceText(
                    "tsconfig.module.json",
                    r',\s+// typescript-starter:[\s\S]*"src/cli/\*\*/\*\.ts"',
                    "",
                    regex=True,
                ),
                ReplaceText(".vscode/launch.json", r",\s*// --- cut here ---[\s\S]*\]", "]", regex=True),
            ),
        ),
        # -- 4. Feature-conditional deletion -------------------------------
        TransformationStep(
            name="appveyor",
            phase=Phase.FEATURES,
            description="Removing Appveyor config",
            operations=(DeletePaths("appveyor.yml"),),
            when=lambda o: not o.appveyor,
        ),
        TransformationStep(
            name="circleci",
            phase=Phase.FEATURES,
            description="Removing CircleCI config",
            operations=(DeletePaths(".circleci"),),
            when=lambda o: not o.circleci,
        ),
        TransformationStep(
            name="travis",
            phase=Phase.FEATURES,
            description="Removing Travis CI config",
            operations=(DeletePaths(".travis.yml"),),
            when=lambda o: not o.travis,
        ),
        TransformationStep(
            name="cspell",
            phase=Phase.FEATURES,
            description="Removing cspell",
            operations=(
                DeletePaths(".cspell.json"),
                ReplaceText(
                    ".vscode/settings.json",
                    r'^[ \t]*"cSpell\.[^\n]*\r?\n',
                    "",
                    regex=True,
                    flags=re.MULTILINE,
                ),
            ),
            when=lambda o: not o.cspell,
        ),
        TransformationStep(
            name="editorconfig",
            phase=Phase.FEATURES,
            description="Removing .editorconfig",
            operations=(DeletePaths(".editorconfig"),),
            when=lambda o: not o.editorconfig,
        ),
        TransformationStep(
            name="vscode",
            phase=Phase.FEATURES,
            description="Removing VS Code config",
            operations=(DeletePaths(".vscode"),),
            when=lambda o: not o.vscode,
        ),
        TransformationStep(
            name="functional",
            phase=Phase.FEATURES,
            description="eslint: disable eslint-plugin-functional",
            operations=(
                ReplaceText(
                    ".eslintrc.json",
                    '"plugins": ["import", "eslint-comments", "functional"]',
                    '"plugins": ["import", "eslint-comments"]',
                ),
                ReplaceText(
                    ".eslintrc.json",
                    r'^[ \t]*"plugin:functional/lite",\r?\n',
                    "",
                    regex=True,
                    flags=re.MULTILINE,
                ),
            ),
            when=lambda o: not o.functional,
        ),
        TransformationStep(
            name="dom-definitions",
            phase=Phase.FEATURES,
            description="tsconfig: don't include \"dom\" lib",
            operations=(
                ReplaceText("tsconfig.json", '"lib": ["es2017", "dom"]', '"lib": ["es2017"]'),
            ),
            when=lambda o: not o.dom_definitions,
        ),
        TransformationStep(
            name="node-definitions",
            phase=Phase.FEATURES,
            description="tsconfig: don't include \"node\" types",
            operations=(
                ReplaceText("tsconfig.json", '"types": ["node"]', '"types": []'),
                RemoveModuleReferences("src/index.ts", ("./lib/async", "./lib/hash")),
                DeletePaths(
                    "src/lib/async.ts",
                    "src/lib/async.spec.ts",
                    "src/lib/hash.ts",
                    "src/lib/hash.spec.ts",
                ),
            ),
            when=lambda o: not o.node_definitions,
        ),
        # -- 5. Text substitution finalization -----------------------------
        TransformationStep(
            name="readme",
            phase=Phase.FINALIZE,
            description="Creating README.md",
            operations=(
                RenamePath("README-starter.md", "README.md"),
                ReplaceText("README.md", "[package-name]", lambda o: o.project_name),
                ReplaceText("README.md", "[description]", lambda o: o.description),
            ),
        ),
        # -- 6. Strictness toggle ------------------------------------------
        TransformationStep(
            name="strict",
            phase=Phase.STRICTNESS,
            description="tsconfig: disable strict",
            operations=(
                ReplaceText("tsconfig.json", r'(?<!// )"strict": true', '// "strict": true', regex=True),
            ),
            when=lambda o: not o.strict,
        ),
    ]
