"""Exception types raised by the rapid-dev orchestration layer."""

from __future__ import annotations

from typing import Sequence


class RapidDevError(RuntimeError):
    """Base class for failures the command line reports to the user."""


class NamingPolicyViolation(RapidDevError):
    """Raised when a repository name breaks one or more naming rules."""

    def __init__(self, name: str, errors: Sequence[str]) -> None:
        self.name = name
        self.errors = tuple(errors)
        details = "\n".join(f"- {error}" for error in self.errors)
        super().__init__(f'Repo name "{name}" violates rules:\n{details}')


class MissingToolError(RapidDevError):
    """Raised when a required command line tool is not on ``PATH``."""

    def __init__(self, tool: str, hint: str = "Run `rapid-dev doctor --install` first.") -> None:
        self.tool = tool
        super().__init__(f"Missing required CLI: {tool}. {hint}")


class CommandError(RapidDevError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, command: str, returncode: int) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(f"Command failed with exit code {returncode}: {command}")


class ScaffoldError(RapidDevError):
    """Raised when a project cannot be scaffolded into its target directory."""
