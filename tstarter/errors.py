"""Exception hierarchy for tstarter.

Every error a user can see derives from ``StarterError`` so the CLI can
report it as a single red line and exit non-zero.  Lower layers raise the
most specific subclass; nothing below the CLI swallows them.
"""

from __future__ import annotations


class StarterError(Exception):
    """Base class for every fatal or reportable tstarter error."""


class InvalidOptionError(StarterError):
    """Raised when a user-supplied option violates a validation rule."""


class ToolingError(StarterError):
    """Raised when a required external tool is not available on PATH."""


class GitNotInstalledError(ToolingError):
    """Raised when ``git`` cannot be found."""

    def __init__(self) -> None:
        super().__init__(
            "Git is not installed on your PATH. Please install Git and try again.\n\n"
            "For more information, visit: "
            "https://git-scm.com/book/en/v2/Getting-Started-Installing-Git"
        )


class ToolNotFoundError(ToolingError):
    """Raised when a package manager binary cannot be found."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(
            f"{tool} is not installed on your PATH. Install it, then run "
            f"`{tool} install` inside the project."
        )


class CloneError(StarterError):
    """Raised when cloning the template (or reading its commit) fails."""


class InstallError(StarterError):
    """Raised when dependency installation fails."""


class CommitError(StarterError):
    """Raised when the initial commit cannot be created."""


class OperationError(StarterError):
    """Raised by a transformation operation that cannot be applied safely."""


class PipelineError(StarterError):
    """Raised when a named transformation step fails irrecoverably."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(f"Step '{step}' failed: {message}")
