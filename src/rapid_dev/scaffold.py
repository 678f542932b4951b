"""Monorepo scaffolding helpers."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from .config import ProjectSettings
from .errors import ScaffoldError
from .runner import CommandRunner, PlannedCommand
from .template import TemplateRenderer
from .templates import EXECUTABLE_FILES, MONOREPO_DIRECTORIES, MONOREPO_FILES

__all__ = ["MonorepoScaffolder"]

LOGGER = logging.getLogger(__name__)

CLIENT_DIR = "apps/client"
API_DIR = "functions/api"
FLUTTER_PLATFORMS = "android,ios,web"
INITIAL_COMMIT_MESSAGE = "chore: initial scaffold"


def _make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


@dataclass(slots=True)
class MonorepoScaffolder:
    """Create the Flutter client + Node API monorepo layout."""

    renderer: TemplateRenderer

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    def create(
        self,
        settings: ProjectSettings,
        target_dir: str | Path | None = None,
        *,
        force: bool = False,
    ) -> Path:
        """Write the monorepo files described by ``settings`` into ``target_dir``.

        ``target_dir`` defaults to :attr:`ProjectSettings.directory`. Existing
        files are only overwritten when ``force`` is set.
        """

        target_path = Path(target_dir or settings.directory).expanduser().resolve()
        target_path.mkdir(parents=True, exist_ok=True)
        for directory in MONOREPO_DIRECTORIES:
            (target_path / directory).mkdir(exist_ok=True)

        context = dict(settings.context())
        for relative_path, template in MONOREPO_FILES:
            destination = target_path / relative_path
            if destination.exists() and not force:
                raise FileExistsError(f"{destination} already exists")
            destination.parent.mkdir(parents=True, exist_ok=True)
            rendered = self.renderer.render_string(template, context, missing="error")
            destination.write_text(rendered, encoding="utf-8")
            if relative_path in EXECUTABLE_FILES and os.name != "nt":
                _make_executable(destination)
            LOGGER.debug("wrote %s", destination)

        LOGGER.info("scaffolded %d files into %s", len(MONOREPO_FILES), target_path)
        return target_path

    def clone_command(self, settings: ProjectSettings) -> PlannedCommand:
        """Return the ``gh`` command creating and cloning the GitHub repository."""

        return PlannedCommand(
            ("gh", "repo", "create", settings.github_slug, f"--{settings.visibility}", "--clone"),
            cwd=settings.directory.parent,
        )

    def plan(self, settings: ProjectSettings) -> list[PlannedCommand]:
        """Return the commands that follow file generation, in execution order."""

        root = settings.directory
        api = root / API_DIR
        commands = [
            PlannedCommand(
                ("flutter", "create", CLIENT_DIR, f"--platforms={FLUTTER_PLATFORMS}"), cwd=root
            ),
            PlannedCommand(("npm", "install"), cwd=api),
            PlannedCommand(("npm", "run", "build"), cwd=api),
            PlannedCommand(("git", "add", "-A"), cwd=root),
            PlannedCommand(("git", "commit", "-m", INITIAL_COMMIT_MESSAGE), cwd=root),
        ]
        if not settings.skip_push:
            commands.append(PlannedCommand(("git", "push", "-u", "origin", "main"), cwd=root))

        if settings.netlify:
            create = ["netlify", "sites:create"]
            if settings.netlify_name:
                create.extend(["--name", settings.netlify_name])
            commands.extend(
                [
                    PlannedCommand(tuple(create), cwd=root),
                    PlannedCommand(("netlify", "link"), cwd=root),
                    PlannedCommand(("netlify", "status"), cwd=root),
                ]
            )
        return commands

    def publish(
        self, settings: ProjectSettings, runner: CommandRunner, *, force: bool = False
    ) -> Path:
        """Create the GitHub repository, scaffold it and run :meth:`plan`.

        Raises
        ------
        ScaffoldError
            When the target directory is not empty or the clone did not appear.
        """

        target = settings.directory
        if target.exists() and any(target.iterdir()):
            raise ScaffoldError(f"Target directory not empty: {target}")

        if not runner.dry_run:
            target.parent.mkdir(parents=True, exist_ok=True)
        runner.run(self.clone_command(settings).argv, cwd=target.parent)
        if runner.dry_run:
            runner.run_all(self.plan(settings))
            return target

        cloned = target.parent / settings.repo_name
        if not cloned.is_dir():
            raise ScaffoldError(
                f'Expected cloned folder "{settings.repo_name}" was not created. Check gh CLI output.'
            )
        if cloned != target:
            if target.exists():
                target.rmdir()
            cloned.rename(target)

        self.create(settings, target, force=force)
        runner.run_all(self.plan(settings))
        return target
