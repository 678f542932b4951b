"""Scaffolding kit for Flutter + Node monorepos.

The package composes and validates repository names from loose naming inputs,
checks the local toolchain, renders the monorepo templates and drives the
``gh``/``flutter``/``npm``/``netlify`` commands that publish a new project.
"""

from __future__ import annotations

from .config import ProjectSettings, RapidDevConfig, load_config
from .errors import (
    CommandError,
    MissingToolError,
    NamingPolicyViolation,
    RapidDevError,
    ScaffoldError,
)
from .naming import (
    BAD_VERSION_TOKENS,
    NamingIntent,
    ValidationResult,
    build_repo_name,
    ensure_valid_repo_name,
    to_kebab,
    validate_repo_name,
)
from .scaffold import MonorepoScaffolder
from .template import TemplateRenderer, TemplateRenderingError

__all__ = [
    "BAD_VERSION_TOKENS",
    "CommandError",
    "MissingToolError",
    "MonorepoScaffolder",
    "NamingIntent",
    "NamingPolicyViolation",
    "ProjectSettings",
    "RapidDevConfig",
    "RapidDevError",
    "ScaffoldError",
    "TemplateRenderer",
    "TemplateRenderingError",
    "ValidationResult",
    "build_repo_name",
    "ensure_valid_repo_name",
    "load_config",
    "to_kebab",
    "validate_repo_name",
]

__version__ = "0.1.0"
