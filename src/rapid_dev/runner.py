"""Sequential execution of external commands."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from .errors import CommandError

__all__ = ["CommandRunner", "PlannedCommand"]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlannedCommand:
    """An external command and the directory it runs in."""

    argv: tuple[str, ...]
    cwd: Path | None = None

    def __str__(self) -> str:
        command = shlex.join(self.argv)
        if self.cwd is None:
            return command
        return f"cd {shlex.quote(str(self.cwd))} && {command}"


class CommandRunner:
    """Run commands one after another, stopping at the first failure.

    Every command is echoed as ``> command`` through ``echo`` (``print`` by
    default) and recorded in :attr:`history`, including in dry-run mode where
    nothing is executed.
    """

    def __init__(
        self,
        *,
        dry_run: bool = False,
        echo: Callable[[str], None] | None = print,
    ) -> None:
        self.dry_run = dry_run
        self._echo = echo
        self._history: list[PlannedCommand] = []

    @property
    def history(self) -> tuple[PlannedCommand, ...]:
        return tuple(self._history)

    def run(self, argv: Sequence[str], *, cwd: str | Path | None = None) -> None:
        """Run ``argv`` in ``cwd`` with inherited stdio.

        Raises
        ------
        CommandError
            When the command exits with a non-zero status or cannot be started.
        """

        command = PlannedCommand(tuple(argv), Path(cwd) if cwd is not None else None)
        self._history.append(command)
        if self._echo is not None:
            self._echo(f"\n> {command}")

        if self.dry_run:
            LOGGER.info("dry run, skipping: %s", command)
            return

        LOGGER.debug("running %s", command)
        try:
            executable = shutil.which(command.argv[0]) or command.argv[0]
            completed = subprocess.run(
                [executable, *command.argv[1:]], cwd=command.cwd, check=False
            )
        except FileNotFoundError as exc:
            raise CommandError(str(command), 127) from exc
        if completed.returncode != 0:
            raise CommandError(str(command), completed.returncode)

    def run_all(self, commands: Sequence[PlannedCommand]) -> None:
        for command in commands:
            self.run(command.argv, cwd=command.cwd)
