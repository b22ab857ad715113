"""package.json handling.

Reading, canonical writing, and the two manifest rewrites of the pipeline:
pointing ``repository`` at the new owner, and rebuilding the metadata and
dependency lists for the retained feature set.

Writes match npm's own serializer (two-space indent, trailing newline, key
order preserved) so repeated runs are byte-identical.
"""

from __future__ import annotations

import json
from typing import Any

from tstarter.config import Runner, StarterOptions
from tstarter.errors import OperationError

# Development toolchain that survives into a generated project.
KEPT_DEV_DEPENDENCIES: tuple[str, ...] = (
    "@ava/typescript",
    "@istanbuljs/nyc-config-typescript",
    "@typescript-eslint/eslint-plugin",
    "@typescript-eslint/parser",
    "ava",
    "codecov",
    "cz-conventional-changelog",
    "eslint",
    "eslint-config-prettier",
    "eslint-plugin-eslint-comments",
    "eslint-plugin-import",
    "gh-pages",
    "npm-run-all",
    "nyc",
    "open-cli",
    "prettier",
    "standard-version",
    "ts-node",
    "typedoc",
    "typescript",
)

# Runtime dependencies only needed by the Node.js-specific sources.
NODE_KEPT_DEPENDENCIES: tuple[str, ...] = ("@bitauth/libauth",)

# Scripts that only exist to test the template's own CLI.
CLI_SCRIPTS: tuple[str, ...] = (
    "check-cli",
    "check-integration-tests",
    "diff-integration-tests",
)

# Template-maintainer keys that never belong in a generated manifest.
TEMPLATE_ONLY_KEYS: tuple[str, ...] = ("bin", "NOTE", "NOTE_2")

MANIFEST_VERSION = "1.0.0"


def read_manifest(text: str) -> dict[str, Any]:
    """Parse manifest text, insisting on a top-level object."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise OperationError(f"package.json is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise OperationError("package.json must contain a JSON object")
    return data


def dump_manifest(data: dict[str, Any]) -> str:
    """Serialise *data* the way npm writes ``package.json``."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _filter_all_but(keep: tuple[str, ...], source: dict[str, Any] | None) -> dict[str, Any]:
    return {name: version for name, version in (source or {}).items() if name in keep}


def kept_dev_dependencies(options: StarterOptions) -> tuple[str, ...]:
    """Development dependencies the selected features still need."""
    kept = KEPT_DEV_DEPENDENCIES
    if options.functional:
        kept += ("eslint-plugin-functional",)
    if options.cspell:
        kept += ("cspell",)
    if options.node_definitions:
        kept += ("@types/node",)
    return kept


def yarn_preinstall_guard(project_name: str) -> str:
    """Script that aborts any install not performed by yarn."""
    return (
        "node -e \"if(process.env.npm_execpath.indexOf('yarn') === -1) "
        f"throw new Error('{project_name} must be installed with Yarn: https://yarnpkg.com/')\""
    )


def set_repository(pkg: dict[str, Any], options: StarterOptions) -> dict[str, Any]:
    """Point ``repository`` at the new owner's project."""
    updated = dict(pkg)
    updated["repository"] = f"https://github.com/{options.github_username}/{options.project_name}"
    return updated


def rewrite_metadata(pkg: dict[str, Any], options: StarterOptions) -> dict[str, Any]:
    """Rebuild name, description, version, dependencies and scripts.

    Existing keys keep their position in the document; keys the template
    lacks are appended, mirroring an object spread in the npm ecosystem.
    """
    removed_scripts = set(CLI_SCRIPTS)
    if not options.cspell:
        removed_scripts.add("test:spelling")

    scripts = {
        name: command
        for name, command in (pkg.get("scripts") or {}).items()
        if name not in removed_scripts
    }
    if options.runner is Runner.YARN:
        scripts["preinstall"] = yarn_preinstall_guard(options.project_name)
        scripts["reset-hard"] = "git clean -dfx && git reset --hard && yarn"

    updated = dict(pkg)
    updated.update(
        {
            "name": options.project_name,
            "description": options.description,
            "version": MANIFEST_VERSION,
            "keywords": [],
            "dependencies": (
                _filter_all_but(NODE_KEPT_DEPENDENCIES, pkg.get("dependencies"))
                if options.node_definitions
                else {}
            ),
            "devDependencies": _filter_all_but(
                kept_dev_dependencies(options), pkg.get("devDependencies")
            ),
            "scripts": scripts,
        }
    )
    for key in TEMPLATE_ONLY_KEYS:
        updated.pop(key, None)
    return updated
