"""Command-line entry point.

Usage::

    tstarter                                   # interactive
    tstarter my-library -d "do something, better" --node --yarn
    python -m tstarter my-library --no-install
"""

from __future__ import annotations

import argparse
import asyncio
import shutil
from pathlib import Path

from tstarter import __version__
from tstarter.config import DEFAULT_DESCRIPTION, RepoInfo, UserOptions
from tstarter.errors import InvalidOptionError, StarterError
from tstarter.orchestrator import scaffold
from tstarter.prompts import inquire
from tstarter.resolver import (
    infer_environment,
    resolve,
    user_options_from_answers,
    user_options_from_args,
    validate_name,
)
from tstarter.tasks import get_github_username, get_user_info, live_tasks
from tstarter.transform import TransformationPipeline
from tstarter.utils import console, get_intro, print_error


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tstarter",
        description="Create a new TypeScript project from typescript-starter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  tstarter\n"
            "  tstarter my-library -d 'do something, better'\n"
            "  tstarter my-app --node --yarn --no-install\n"
        ),
    )
    parser.add_argument("project_name", nargs="?", default=None, help="Package name (kebab-case)")
    parser.add_argument("--version", "-v", action="version", version=__version__)
    parser.add_argument("--description", "-d", default=DEFAULT_DESCRIPTION, help="package.json description")
    parser.add_argument(
        "--directory",
        type=Path,
        default=None,
        help="Directory to create the project in (default: current directory)",
    )

    parser.add_argument("--dom", action="store_true", help="include DOM type definitions")
    parser.add_argument("--node", action="store_true", help="include node.js type definitions")
    parser.add_argument("--strict", action="store_true", help="enable stricter type-checking")
    parser.add_argument("--yarn", action="store_true", help="use yarn (default: npm)")
    parser.add_argument("--appveyor", action="store_true", help="include Appveyor for Windows CI")
    parser.add_argument("--circleci", action="store_true", help="include CircleCI configuration")
    parser.add_argument("--travis", action="store_true", help="include Travis CI configuration")

    parser.add_argument("--no-cspell", dest="cspell", action="store_false", help="don't include cspell")
    parser.add_argument(
        "--no-editorconfig", dest="editorconfig", action="store_false", help="don't include .editorconfig"
    )
    parser.add_argument(
        "--no-functional", dest="functional", action="store_false", help="don't enable eslint-plugin-functional"
    )
    parser.add_argument("--no-install", dest="install", action="store_false", help="skip yarn/npm install")
    parser.add_argument(
        "--no-vscode", dest="vscode", action="store_false", help="don't include VS Code debugging config"
    )
    parser.add_argument("--verbose", action="store_true", help="also list skipped steps")
    return parser


def _collect_user_options(args: argparse.Namespace, working_directory: Path) -> UserOptions:
    if args.project_name:
        validate_name(args.project_name, working_directory)
        return user_options_from_args(args)
    console.print(get_intro(shutil.get_terminal_size((80, 24)).columns))
    # --no-install is honoured in interactive mode too.
    return user_options_from_answers(inquire(working_directory), install=args.install)


async def _run(args: argparse.Namespace) -> None:
    working_directory = (args.directory or Path.cwd()).resolve()
    if not working_directory.is_dir():
        raise InvalidOptionError(f"Not a directory: {working_directory}")
    user_options = _collect_user_options(args, working_directory)
    environment = await infer_environment(
        get_user_info, get_github_username, RepoInfo.from_env(), working_directory
    )
    options = resolve(user_options, environment)
    await scaffold(options, live_tasks(), TransformationPipeline(verbose=args.verbose))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``tstarter`` / ``python -m tstarter``."""
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(_run(args))
    except StarterError as exc:
        print_error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
