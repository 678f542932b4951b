"""Configuration helpers shared by the monorepo scaffolder and CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .naming import NamingIntent, build_repo_name, ensure_valid_repo_name

__all__ = [
    "CONFIG_FILE_NAME",
    "GcpDefaults",
    "ProjectDefaults",
    "ProjectSettings",
    "RapidDevConfig",
    "load_config",
]

LOGGER = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".rapid-dev.json"


class GcpDefaults(BaseModel):
    """Google Cloud settings used by the generated deploy scripts."""

    model_config = ConfigDict(frozen=True)

    project: str = Field("", description="Default GCP project id.")
    region: str = Field("us-east1", description="Default deployment region.")


class ProjectDefaults(BaseModel):
    """Defaults applied to every new project unless a flag overrides them."""

    model_config = ConfigDict(frozen=True)

    org: str = Field("", description="GitHub organisation that owns new repositories.")
    private: bool = Field(False, description="Create private repositories.")
    netlify: bool = Field(False, description="Create and link a Netlify site.")
    gcp: GcpDefaults = Field(default_factory=GcpDefaults)


class RapidDevConfig(BaseModel):
    """Contents of the ``.rapid-dev.json`` file."""

    model_config = ConfigDict(frozen=True)

    defaults: ProjectDefaults = Field(default_factory=ProjectDefaults)


def load_config(directory: str | Path | None = None) -> RapidDevConfig:
    """Load ``.rapid-dev.json`` from ``directory`` (the working directory by default).

    A missing file yields the default configuration. A file that cannot be
    parsed is reported with a warning and the defaults are used instead.
    """

    base = Path.cwd() if directory is None else Path(directory)
    config_path = base / CONFIG_FILE_NAME
    if not config_path.is_file():
        LOGGER.debug("no %s in %s, using defaults", CONFIG_FILE_NAME, base)
        return RapidDevConfig()

    try:
        config = RapidDevConfig.model_validate_json(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValidationError) as exc:
        LOGGER.warning("Could not parse %s. Using default configuration. %s", CONFIG_FILE_NAME, exc)
        return RapidDevConfig()

    LOGGER.info("loaded configuration from %s", config_path)
    return config


@dataclass(slots=True)
class ProjectSettings:
    """Everything needed to scaffold and publish one monorepo.

    Attributes
    ----------
    repo_name:
        The validated canonical repository name. It doubles as the directory
        name of the clone and the base of the API package name.
    directory:
        Final location of the repository on disk.
    org:
        GitHub organisation or user owning the repository. Empty for the
        authenticated user.
    private:
        Whether the GitHub repository is private.
    netlify:
        Create and link a Netlify site after the first push.
    netlify_name:
        Optional explicit Netlify site name.
    gcp_project:
        GCP project id written to the generated ``.env.example``.
    gcp_region:
        GCP region written to the generated ``.env.example``.
    node_version:
        Node version pinned in ``netlify.toml``.
    skip_push:
        Skip the initial ``git push``.
    """

    repo_name: str
    directory: Path
    org: str = ""
    private: bool = False
    netlify: bool = False
    netlify_name: str = ""
    gcp_project: str = ""
    gcp_region: str = "us-east1"
    node_version: str = "20"
    skip_push: bool = False

    @classmethod
    def from_intent(
        cls,
        intent: NamingIntent,
        *,
        config: RapidDevConfig | None = None,
        org: str | None = None,
        private: bool | None = None,
        netlify: bool | None = None,
        netlify_name: str | None = None,
        gcp_project: str | None = None,
        node_version: str | None = None,
        directory: str | Path | None = None,
        skip_push: bool = False,
    ) -> "ProjectSettings":
        """Build settings from naming inputs, explicit overrides and ``config``.

        Raises
        ------
        NamingPolicyViolation
            When the name composed from ``intent`` breaks a naming rule.
        """

        defaults = (config or RapidDevConfig()).defaults
        repo_name = ensure_valid_repo_name(build_repo_name(intent))
        target = Path(directory) if directory else Path(repo_name)

        return cls(
            repo_name=repo_name,
            directory=target.expanduser().resolve(),
            org=org or defaults.org,
            private=bool(private or defaults.private),
            netlify=bool(netlify or defaults.netlify),
            netlify_name=netlify_name or "",
            gcp_project=gcp_project or defaults.gcp.project,
            gcp_region=defaults.gcp.region,
            node_version=node_version or "20",
            skip_push=skip_push,
        )

    @property
    def github_slug(self) -> str:
        return f"{self.org}/{self.repo_name}" if self.org else self.repo_name

    @property
    def visibility(self) -> str:
        return "private" if self.private else "public"

    @property
    def api_package(self) -> str:
        return f"{self.repo_name}-api"

    def context(self) -> Mapping[str, str]:
        """Return a dictionary compatible with the templating helpers."""

        return {
            "repo_name": self.repo_name,
            "api_package": self.api_package,
            "github_slug": self.github_slug,
            "node_version": self.node_version,
            "gcp_project": self.gcp_project or "your-gcp-project-id",
            "gcp_region": self.gcp_region,
        }
