"""Registry of the command line tools the generated monorepo depends on."""

from __future__ import annotations

import logging
import shutil
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from .errors import MissingToolError

__all__ = [
    "AUTH_HINTS",
    "TOOLS",
    "Tool",
    "ToolStatus",
    "check_tools",
    "detect_package_manager",
    "get_tool",
    "install_command",
    "require_tools",
]

LOGGER = logging.getLogger(__name__)

Which = Callable[[str], Optional[str]]


@dataclass(frozen=True, slots=True)
class Tool:
    """A command line tool and the ways it can be installed.

    Attributes
    ----------
    key:
        Name used on the command line and in reports.
    command:
        Executable looked up on ``PATH``.
    winget, choco:
        Package identifiers for the Windows package managers.
    npm_global:
        npm package providing the tool when installed globally.
    python_package:
        Python distribution providing the tool, installed with pipx or pip.
    upgrade:
        Command that upgrades an existing installation in place.
    optional:
        Optional tools never fail a check.
    """

    key: str
    command: str
    winget: str = ""
    choco: str = ""
    npm_global: str = ""
    python_package: str = ""
    upgrade: tuple[str, ...] = ()
    optional: bool = False


TOOLS: tuple[Tool, ...] = (
    Tool("git", "git", winget="Git.Git", choco="git"),
    Tool("node", "node", winget="OpenJS.NodeJS.LTS", choco="nodejs-lts"),
    Tool("npm", "npm"),
    Tool("gh", "gh", winget="GitHub.cli", choco="gh"),
    Tool("netlify", "netlify", npm_global="netlify-cli"),
    Tool("gcloud", "gcloud", winget="Google.CloudSDK", choco="google-cloud-sdk"),
    Tool("flutter", "flutter", winget="Flutter.Flutter", choco="flutter", upgrade=("flutter", "upgrade")),
    Tool("python", "python", winget="Python.Python.3.12", choco="python", optional=True),
    Tool("pipx", "pipx", winget="Python.Pipx", choco="pipx", optional=True),
    Tool("aider", "aider", python_package="aider-chat", optional=True),
)

AUTH_HINTS: tuple[str, ...] = ("gh auth status", "netlify status", "gcloud auth list")


def get_tool(key: str) -> Tool:
    for tool in TOOLS:
        if tool.key == key:
            return tool
    raise KeyError(key)


@dataclass(frozen=True, slots=True)
class ToolStatus:
    tool: Tool
    path: str | None

    @property
    def available(self) -> bool:
        return self.path is not None


def detect_package_manager(platform: str | None = None, which: Which | None = None) -> str:
    """Return the preferred system package manager for ``platform``.

    One of ``"winget"``, ``"choco"``, ``"brew"``, ``"apt"`` or ``"none"``.
    """

    which = which or shutil.which
    platform = platform or sys.platform
    if platform.startswith("win"):
        candidates: Sequence[tuple[str, str]] = (("winget", "winget"), ("choco", "choco"))
    elif platform == "darwin":
        candidates = (("brew", "brew"),)
    else:
        candidates = (("apt", "apt-get"),)

    for kind, command in candidates:
        if which(command):
            return kind
    return "none"


def install_command(
    tool: Tool, manager: str, *, which: Which | None = None
) -> tuple[str, ...] | None:
    """Plan the command installing or upgrading ``tool``.

    Returns ``None`` when no installer is known for ``tool`` on ``manager``.
    """

    which = which or shutil.which
    installed = which(tool.command) is not None

    if tool.npm_global:
        if installed:
            return ("npm", "install", "-g", f"{tool.npm_global}@latest")
        return ("npm", "install", "-g", tool.npm_global)

    if tool.python_package:
        if which("pipx"):
            action = "upgrade" if installed else "install"
            return ("pipx", action, tool.python_package)
        if which("python"):
            return ("python", "-m", "pip", "install", "--upgrade", tool.python_package)
        return None

    if installed and tool.upgrade:
        return tool.upgrade

    if manager == "winget" and tool.winget:
        action = "upgrade" if installed else "install"
        return ("winget", action, "--id", tool.winget, "-e", "--source", "winget")
    if manager == "choco" and tool.choco:
        action = "upgrade" if installed else "install"
        return ("choco", action, tool.choco, "-y")
    return None


def check_tools(tools: Iterable[Tool] = TOOLS, *, which: Which | None = None) -> list[ToolStatus]:
    """Look every tool up on ``PATH``."""

    which = which or shutil.which
    statuses = []
    for tool in tools:
        path = which(tool.command)
        LOGGER.debug("%s -> %s", tool.command, path or "missing")
        statuses.append(ToolStatus(tool, path))
    return statuses


def require_tools(keys: Iterable[str], *, which: Which | None = None) -> None:
    """Raise :class:`MissingToolError` for the first tool in ``keys`` not on ``PATH``."""

    which = which or shutil.which
    for key in keys:
        tool = get_tool(key)
        if which(tool.command) is None:
            raise MissingToolError(tool.key)
