"""Interactive questions for the no-argument entry path.

A thin layer over ``rich.prompt``; it only collects raw answers.  Turning
them into options is ``resolver.user_options_from_answers``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.prompt import Confirm, Prompt

from tstarter.resolver import (
    DEFINITIONS_BOTH,
    DEFINITIONS_DOM,
    DEFINITIONS_NODE,
    DEFINITIONS_NONE,
    PROJECT_TYPE_LIBRARY,
    PROJECT_TYPE_NODE,
    check_name,
)
from tstarter.utils import console

# (answer key, question, checked by default)
EXTRA_QUESTIONS: tuple[tuple[str, str, bool], ...] = (
    ("strict", "Enable stricter type-checking", False),
    ("functional", "Enable eslint-plugin-functional", True),
    ("editorconfig", "Include .editorconfig", True),
    ("cspell", "Include cspell", True),
    ("vscode", "Include VS Code debugging config", True),
    ("circleci", "Include CircleCI config", False),
    ("appveyor", "Include Appveyor (Windows-based CI) config", False),
    ("travis", "Include Travis CI config", False),
)


def _ask_name(working_directory: Path) -> str:
    while True:
        name = Prompt.ask("📦 Enter the new package name", console=console).strip()
        verdict = check_name(name, working_directory)
        if verdict is True:
            return name
        console.print(f"[red]{verdict}[/red]")


def inquire(working_directory: Path) -> dict[str, Any]:
    """Ask every question and return the raw answers."""
    answers: dict[str, Any] = {"project_name": _ask_name(working_directory)}
    answers["type"] = Prompt.ask(
        "🔨 What are you making? (node = Node.js application, lib = Javascript library)",
        choices=[PROJECT_TYPE_NODE, PROJECT_TYPE_LIBRARY],
        default=PROJECT_TYPE_NODE,
        console=console,
    )

    description = ""
    while not description:
        description = Prompt.ask("💬 Enter the package description", console=console).strip()
    answers["description"] = description

    answers["runner"] = Prompt.ask(
        "🚄 Will this project use npm or yarn?",
        choices=["npm", "yarn"],
        default="npm",
        console=console,
    )

    if answers["type"] == PROJECT_TYPE_LIBRARY:
        answers["definitions"] = Prompt.ask(
            "📚 Which global type definitions do you want to include?",
            choices=[DEFINITIONS_NONE, DEFINITIONS_NODE, DEFINITIONS_DOM, DEFINITIONS_BOTH],
            default=DEFINITIONS_NONE,
            console=console,
        )

    console.print("🚀 More fun stuff:")
    answers["extras"] = [
        key
        for key, question, checked in EXTRA_QUESTIONS
        if Confirm.ask(f"  {question}", default=checked, console=console)
    ]
    return answers
