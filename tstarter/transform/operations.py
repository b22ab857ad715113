"""Typed mutations applied to a cloned template.

Each operation is a small frozen dataclass with a single ``apply`` method
that mutates the working copy and reports whether anything changed.  All
operations share the same tolerance rules:

* a missing target (file, directory, or pattern) is a no-op;
* a file that is not valid UTF-8 raises ``OperationError``;
* any other ``OSError`` propagates and is treated as fatal by the pipeline;
* paths are always resolved inside the working copy.

Applying an operation a second time against its own output is a no-op.
"""

from __future__ import annotations

import os
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Union

from tstarter.config import StarterOptions
from tstarter.errors import OperationError

from .manifest import dump_manifest, read_manifest

Replacement = Union[str, Callable[[StarterOptions], str]]
ManifestTransform = Callable[[dict[str, Any], StarterOptions], dict[str, Any]]


def _resolve(root: Path, relative: str) -> Path:
    """Resolve *relative* under *root*, refusing anything that escapes it."""
    base = root.resolve()
    candidate = base / relative
    # The final component is not resolved so a symlink is removed, not followed.
    target = candidate.parent.resolve() / candidate.name
    if target != base and base not in target.parents:
        raise OperationError(f"Path escapes the project directory: {relative}")
    return target


def _render(replacement: Replacement, options: StarterOptions) -> str:
    return replacement(options) if callable(replacement) else replacement


def _read_text(path: Path) -> str | None:
    try:
        with path.open(encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as exc:
        raise OperationError(f"{path.name} is not valid UTF-8") from exc


def _write_text(path: Path, content: str) -> None:
    # newline="" keeps the template's own line endings untouched.
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(content)


@dataclass(frozen=True)
class DeletePaths:
    """Delete files or directory trees relative to the project root."""

    paths: tuple[str, ...]

    def __init__(self, *paths: str) -> None:
        object.__setattr__(self, "paths", tuple(paths))

    def apply(self, root: Path, options: StarterOptions) -> bool:
        changed = False
        for relative in self.paths:
            target = _resolve(root, relative)
            try:
                if target.is_dir() and not target.is_symlink():
                    shutil.rmtree(target)
                else:
                    target.unlink()
            except FileNotFoundError:
                continue
            changed = True
        return changed

    def describe(self) -> str:
        return f"delete {', '.join(self.paths)}"


@dataclass(frozen=True)
class ReplaceText:
    """Replace every occurrence of *pattern* in one file.

    With ``regex=True`` *pattern* is a regular expression (compiled with
    *flags*); otherwise it is matched literally.  The replacement text is
    inserted verbatim, never expanded as a regex template, so user input
    such as descriptions containing backslashes survives intact.
    """

    path: str
    pattern: str
    replacement: Replacement
    regex: bool = False
    flags: int = 0

    def apply(self, root: Path, options: StarterOptions) -> bool:
        target = _resolve(root, self.path)
        text = _read_text(target)
        if text is None:
            return False

        new_value = _render(self.replacement, options)
        if self.regex:
            updated = re.sub(self.pattern, lambda _match: new_value, text, flags=self.flags)
        else:
            updated = text.replace(self.pattern, new_value)

        if updated == text:
            return False
        _write_text(target, updated)
        return True

    def describe(self) -> str:
        return f"replace in {self.path}"


@dataclass(frozen=True)
class RemoveModuleReferences:
    """Drop ``import``/``export`` statements that reference given modules.

    *modules* are the specifiers exactly as written in the entry module,
    e.g. ``./lib/hash``.  Both quote styles are recognised.
    """

    path: str
    modules: tuple[str, ...]

    def _pattern(self) -> re.Pattern[str]:
        names = "|".join(re.escape(module) for module in self.modules)
        return re.compile(
            rf"^[ \t]*(?:import|export)\b[^;\n]*?['\"](?:{names})['\"];?[ \t]*(?:\r?\n|$)",
            re.MULTILINE,
        )

    def apply(self, root: Path, options: StarterOptions) -> bool:
        target = _resolve(root, self.path)
        text = _read_text(target)
        if text is None:
            return False
        updated = self._pattern().sub("", text)
        if updated == text:
            return False
        _write_text(target, updated)
        return True

    def describe(self) -> str:
        return f"remove references to {', '.join(self.modules)} from {self.path}"


@dataclass(frozen=True)
class RenamePath:
    """Move *source* to *target*, replacing *target* if it exists."""

    source: str
    target: str

    def apply(self, root: Path, options: StarterOptions) -> bool:
        source = _resolve(root, self.source)
        target = _resolve(root, self.target)
        if not source.exists():
            return False
        os.replace(source, target)
        return True

    def describe(self) -> str:
        return f"rename {self.source} to {self.target}"


@dataclass(frozen=True)
class RewriteManifest:
    """Load ``package.json``, pass it through *transform*, write it back canonically."""

    transform: ManifestTransform
    path: str = field(default="package.json")

    def apply(self, root: Path, options: StarterOptions) -> bool:
        target = _resolve(root, self.path)
        original = _read_text(target)
        if original is None:
            return False
        updated = dump_manifest(self.transform(read_manifest(original), options))
        if updated == original:
            return False
        _write_text(target, updated)
        return True

    def describe(self) -> str:
        return f"rewrite {self.path}"


Operation = Union[DeletePaths, ReplaceText, RemoveModuleReferences, RenamePath, RewriteManifest]
