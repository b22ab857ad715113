"""Unit tests for utility functions (tstarter.utils).

Tests cover:
- run_command (success, failure, cwd, timeout, env vars, capture=False, missing program)
- PHASE_NAMES / PHASE_COLORS constants
- Rich output helpers (print_phase_header, print_step, print_error, ...)
- get_intro banner selection
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tstarter.transform import Phase
from tstarter.utils import (
    PHASE_COLORS,
    PHASE_NAMES,
    get_intro,
    print_error,
    print_phase_header,
    print_step,
    print_success,
    print_warning,
    run_command,
)

PY = sys.executable


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    async def test_successful_command(self):
        returncode, stdout, stderr = await run_command([PY, "-c", "print('hello')"])
        assert returncode == 0
        assert stdout == "hello"

    @pytest.mark.unit
    async def test_failed_command(self):
        returncode, _, _ = await run_command([PY, "-c", "import sys; sys.exit(3)"])
        assert returncode == 3

    @pytest.mark.unit
    async def test_command_with_cwd(self, tmp_path: Path):
        returncode, stdout, _ = await run_command(
            [PY, "-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )
        assert returncode == 0
        # Resolve both to handle symlinks/case differences across platforms
        assert Path(stdout).resolve() == tmp_path.resolve()

    @pytest.mark.unit
    async def test_command_timeout(self):
        returncode, _, stderr = await run_command(
            [PY, "-c", "import time; time.sleep(10)"], timeout=1
        )
        assert returncode == -1
        assert "timed out" in stderr

    @pytest.mark.unit
    async def test_command_with_env(self):
        returncode, stdout, _ = await run_command(
            [PY, "-c", "import os; print(os.environ['TSTARTER_TEST_VAR'])"],
            env={"TSTARTER_TEST_VAR": "test_value"},
        )
        assert returncode == 0
        assert stdout == "test_value"

    @pytest.mark.unit
    async def test_command_returns_stderr(self):
        _, _, stderr = await run_command(
            [PY, "-c", "import sys; sys.stderr.write('error_msg\\n')"], timeout=10
        )
        assert stderr == "error_msg"

    @pytest.mark.unit
    async def test_uncaptured_output_is_empty(self):
        returncode, stdout, stderr = await run_command([PY, "-c", "print('x')"], capture=False)
        assert (returncode, stdout, stderr) == (0, "", "")

    @pytest.mark.unit
    async def test_missing_program_raises(self):
        with pytest.raises(FileNotFoundError):
            await run_command(["nonexistent-binary-12345-xyz"])


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------


class TestPhaseConstants:
    @pytest.mark.unit
    def test_every_phase_named_and_coloured(self):
        for phase in Phase:
            assert PHASE_NAMES[int(phase)] == phase.name
            assert int(phase) in PHASE_COLORS


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    @pytest.mark.unit
    def test_print_phase_header(self, capsys):
        print_phase_header(3)
        assert "3. cleanup" in capsys.readouterr().out

    @pytest.mark.unit
    def test_print_step(self, capsys):
        print_step("Updating LICENSE")
        print_step("Removing cspell", skipped=True)
        out = capsys.readouterr().out
        assert "+ Updating LICENSE" in out
        assert "- Removing cspell (skipped)" in out

    @pytest.mark.unit
    def test_print_error_goes_to_stderr(self, capsys):
        print_error("  something broke  \n")
        captured = capsys.readouterr()
        assert "something broke" in captured.err
        assert captured.out == ""

    @pytest.mark.unit
    def test_print_error_keeps_brackets(self, capsys):
        print_error("Name [x] should be in-kebab-case")
        assert "Name [x] should be in-kebab-case" in capsys.readouterr().err

    @pytest.mark.unit
    def test_success_and_warning(self, capsys):
        print_success("Created demo")
        print_warning("Installation failed.")
        out = capsys.readouterr().out
        assert "Created demo" in out
        assert "Installation failed." in out


class TestGetIntro:
    @pytest.mark.unit
    def test_wide_terminal_gets_banner(self):
        assert "|___/|_|" in get_intro(120).plain

    @pytest.mark.unit
    @pytest.mark.parametrize("columns", [40, 84, None])
    def test_narrow_terminal_gets_title(self, columns):
        assert get_intro(columns).plain.strip() == "typescript-starter"
