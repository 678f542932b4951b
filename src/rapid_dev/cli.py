"""Command line interface for the rapid-dev scaffolding kit."""

from __future__ import annotations

import argparse
import logging
import platform
import shutil
import sys
from pathlib import Path
from typing import Sequence

from .config import ProjectSettings, load_config
from .errors import RapidDevError
from .naming import NamingIntent, build_repo_name, validate_repo_name
from .runner import CommandRunner
from .scaffold import API_DIR, CLIENT_DIR, MonorepoScaffolder
from .tooling import AUTH_HINTS, TOOLS, check_tools, detect_package_manager, install_command, require_tools

LOGGER = logging.getLogger(__name__)

NAMING_FIELDS = ("prefix", "project", "description", "service", "type", "team", "component")
REQUIRED_FOR_NEW = ("git", "gh", "flutter", "node", "npm")


def _add_naming_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("naming")
    group.add_argument("--repo", help="Use this name verbatim (after normalisation)")
    for name in NAMING_FIELDS:
        group.add_argument(f"--{name}", help=f"{name.capitalize()} part of the repository name")


def _intent_from_args(args: argparse.Namespace) -> NamingIntent:
    return NamingIntent(raw=args.repo, **{name: getattr(args, name) for name in NAMING_FIELDS})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rapid-dev", description="Bootstrap toolchains and scaffold Flutter + Node monorepos"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (repeat for debug output)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    name_parser = subparsers.add_parser("name", help="build and validate a repository name")
    _add_naming_arguments(name_parser)

    check_parser = subparsers.add_parser("check", help="validate an existing repository name")
    check_parser.add_argument("name", help="Repository name to validate")

    doctor_parser = subparsers.add_parser("doctor", help="report which required CLIs are installed")
    doctor_parser.add_argument(
        "--install", action="store_true", help="Install or upgrade tools where an installer is known"
    )
    doctor_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the install commands without running them (implies --install)",
    )

    new_parser = subparsers.add_parser("new", help="create a GitHub repository with the monorepo scaffold")
    _add_naming_arguments(new_parser)
    new_parser.add_argument("--org", help="GitHub organisation owning the repository")
    new_parser.add_argument("--private", action="store_true", default=None, help="Create a private repository")
    new_parser.add_argument("--netlify", action="store_true", default=None, help="Create and link a Netlify site")
    new_parser.add_argument("--netlify-name", help="Explicit Netlify site name")
    new_parser.add_argument("--gcp", metavar="PROJECT", help="GCP project id used by the deploy scripts")
    new_parser.add_argument("--node", help="Node version pinned in netlify.toml")
    new_parser.add_argument("--dir", type=Path, help="Target directory (defaults to the repository name)")
    new_parser.add_argument("--skip-push", action="store_true", help="Do not push the initial commit")
    new_parser.add_argument(
        "-f", "--force", action="store_true", help="Overwrite existing files instead of failing"
    )
    mode = new_parser.add_mutually_exclusive_group()
    mode.add_argument("--dry-run", action="store_true", help="Print every command and write nothing")
    mode.add_argument(
        "--files-only", action="store_true", help="Only write the scaffold files, run no commands"
    )

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _report_violations(name: str, errors: Sequence[str]) -> None:
    print(f'Repo name "{name}" violates rules:', file=sys.stderr)
    for error in errors:
        print(f"- {error}", file=sys.stderr)


def _handle_name(args: argparse.Namespace) -> int:
    name = build_repo_name(_intent_from_args(args))
    result = validate_repo_name(name)
    if not result.ok:
        _report_violations(name, result.errors)
        return 1
    print(name)
    return 0


def _handle_check(args: argparse.Namespace) -> int:
    result = validate_repo_name(args.name)
    if not result.ok:
        _report_violations(args.name, result.errors)
        return 1
    print(f"{args.name}: ok")
    return 0


def _install_tools(manager: str, runner: CommandRunner) -> None:
    """Install missing tools and upgrade present ones.

    A failed upgrade or a failed optional install is logged and skipped; only a
    failed install of a required tool aborts.
    """

    for tool in TOOLS:
        command = install_command(tool, manager)
        if command is None:
            LOGGER.info("no installer configured for %s on %s", tool.key, manager)
            continue
        installed = shutil.which(tool.command) is not None
        try:
            runner.run(command)
        except RapidDevError as exc:
            if not installed and not tool.optional:
                raise
            action = "upgrade" if installed else "install"
            LOGGER.warning("%s of %s failed, continuing: %s", action, tool.key, exc)


def _handle_doctor(args: argparse.Namespace) -> int:
    manager = detect_package_manager()
    print(f"Bootstrap: OS={platform.system().lower()} pkgmgr={manager}")

    if args.install or args.dry_run:
        _install_tools(manager, CommandRunner(dry_run=args.dry_run))

    missing_required = []
    statuses = check_tools()
    print("\nTools:")
    for status in statuses:
        label = "optional" if status.tool.optional else "required"
        location = status.path or "missing"
        print(f"  {status.tool.key:<8} {label:<8} {location}")
        if not status.available and not status.tool.optional:
            missing_required.append(status.tool.key)

    if not args.dry_run:
        print("\nVersions:")
        version_runner = CommandRunner()
        for status in statuses:
            if not status.available:
                continue
            try:
                version_runner.run((status.tool.command, "--version"))
            except RapidDevError as exc:
                LOGGER.warning("could not read %s version: %s", status.tool.key, exc)

    print("\nAuth checks (run if needed):")
    for hint in AUTH_HINTS:
        print(f"  {hint}")

    if missing_required:
        print(f"\nMissing required CLIs: {', '.join(missing_required)}", file=sys.stderr)
        return 1
    return 0


def _handle_new(args: argparse.Namespace) -> int:
    config = load_config()
    settings = ProjectSettings.from_intent(
        _intent_from_args(args),
        config=config,
        org=args.org,
        private=args.private,
        netlify=args.netlify,
        netlify_name=args.netlify_name,
        gcp_project=args.gcp,
        node_version=args.node,
        directory=args.dir,
        skip_push=args.skip_push,
    )
    scaffolder = MonorepoScaffolder()

    if args.files_only:
        path = scaffolder.create(settings, force=args.force)
        print(f"Scaffold written to {path}")
        return 0

    if not args.dry_run:
        required = list(REQUIRED_FOR_NEW)
        if settings.netlify:
            required.append("netlify")
        if settings.gcp_project:
            required.append("gcloud")
        require_tools(required)

    runner = CommandRunner(dry_run=args.dry_run)
    path = scaffolder.publish(settings, runner, force=args.force)

    print(f"\nCreated repo: {settings.github_slug}")
    print(f"Location: {path}")
    print(f"Flutter: {CLIENT_DIR}")
    print(f"API (TS): {API_DIR}")
    print("\nQuick commands:")
    print("  node scripts/smoke.mjs")
    print("  node scripts/zip-flutter.mjs")
    print(f"  node scripts/deploy-api.mjs --target functions --project <id> --region {settings.gcp_region}")
    print(f"  cd {CLIENT_DIR} && flutter run")
    print(f"  cd {API_DIR} && npm run dev:ts")
    return 0


_HANDLERS = {
    "name": _handle_name,
    "check": _handle_check,
    "doctor": _handle_doctor,
    "new": _handle_new,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    handler = _HANDLERS.get(args.command)
    if handler is None:
        parser.error("no command provided")
        return 2

    try:
        return handler(args)
    except (RapidDevError, FileExistsError) as exc:
        LOGGER.debug("command %s failed", args.command, exc_info=True)
        print(f"\nERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
