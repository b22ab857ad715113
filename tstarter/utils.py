"""Shared utility functions for tstarter.

Provides async command execution, Rich-based progress reporting and the
intro banner.  All user-facing output goes through the module-level
``console`` (stdout) or ``err_console`` (stderr for fatal errors).
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously.

    Args:
        cmd: Program and arguments.  Never run through a shell.
        cwd: Working directory for the child process.
        timeout: Optional wall-clock limit in seconds.  ``None`` waits for
            the process to finish however long it takes.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams, e.g. to show installer progress).
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.

    Raises:
        FileNotFoundError: If the program is not on ``PATH``.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=str(cwd) if cwd else None,
        env=merged_env,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


PHASE_NAMES: dict[int, str] = {
    1: "IDENTITY",
    2: "METADATA",
    3: "CLEANUP",
    4: "FEATURES",
    5: "FINALIZE",
    6: "STRICTNESS",
}

PHASE_COLORS: dict[int, str] = {
    1: "bright_cyan",
    2: "bright_green",
    3: "bright_yellow",
    4: "bright_magenta",
    5: "bright_blue",
    6: "bright_red",
}


def print_phase_header(phase: int) -> None:
    """Print a compact rule announcing a transformation phase."""
    color = PHASE_COLORS.get(phase, "white")
    name = PHASE_NAMES.get(phase, "UNKNOWN")
    console.print(Rule(f"[{color}]{phase}. {name.lower()}[/{color}]", style=f"dim {color}"))


def print_step(message: str, skipped: bool = False) -> None:
    """Print one transformation step line."""
    if skipped:
        console.print(f"  [dim]- {message} (skipped)[/dim]")
    else:
        console.print(f"  [green]+[/green] {message}")


def print_success(message: str) -> None:
    """Print a blue-bold completion message."""
    console.print(f"\n[bold blue]{message}[/bold blue]\n")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print()
    err_console.print(Text(message.strip(), style="red"))
    err_console.print()


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


_ASCII = r"""
 _                                   _       _            _             _
| |_ _   _ _ __   ___  ___  ___ _ __(_)_ __ | |_      ___| |_ __ _ _ __| |_ ___ _ __
| __| | | | '_ \ / _ \/ __|/ __| '__| | '_ \| __|____/ __| __/ _` | '__| __/ _ \ '__|
| |_| |_| | |_) |  __/\__ \ (__| |  | | |_) | ||_____\__ \ || (_| | |  | ||  __/ |
 \__|\__, | .__/ \___||___/\___|_|  |_| .__/ \__|    |___/\__\__,_|_|   \__\___|_|
     |___/|_|                         |_|
"""


def get_intro(columns: int | None) -> Text:
    """Return the intro banner, falling back to a plain title on narrow terminals."""
    if columns and columns >= 85:
        return Text(_ASCII, style="bold magenta")
    return Text("\ntypescript-starter\n", style="bold underline cyan")
