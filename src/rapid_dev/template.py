"""Placeholder substitution for the generated project files."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, MutableMapping

__all__ = [
    "MISSING_POLICIES",
    "TemplateRenderer",
    "TemplateRenderingError",
]

MISSING_POLICIES = frozenset({"keep", "empty", "error"})

_PLACEHOLDER_PATTERN = re.compile(r"{{\s*(?P<expression>[^{}]+?)\s*}}")


class TemplateRenderingError(RuntimeError):
    """Raised when the renderer cannot evaluate a placeholder."""


@dataclass(slots=True)
class TemplateRenderer:
    """Render templates with ``{{ placeholder|filters }}`` expressions.

    Single braces are left alone so JavaScript, JSON and TOML sources can be
    used as templates without escaping. The ``json`` filter is always
    available; callers may register more.
    """

    filters: MutableMapping[str, Callable[[Any], Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.filters.setdefault("json", json.dumps)

    def render_string(
        self,
        template: str,
        context: Mapping[str, Any],
        *,
        missing: str = "keep",
    ) -> str:
        """Render ``template`` using ``context``.

        Parameters
        ----------
        template:
            The template string to evaluate.
        context:
            Mapping providing values for placeholders.
        missing:
            ``"keep"`` leaves unresolved placeholders untouched, ``"empty"``
            replaces them with an empty string and ``"error"`` raises
            :class:`TemplateRenderingError`.
        """

        if missing not in MISSING_POLICIES:
            raise ValueError("missing must be 'keep', 'empty', or 'error'")

        def substitute(match: re.Match[str]) -> str:
            expression = match.group("expression")
            parts = [part.strip() for part in expression.split("|") if part.strip()]
            if not parts:
                return match.group(0)

            key, *filter_names = parts
            if key not in context:
                if missing == "keep":
                    return match.group(0)
                if missing == "empty":
                    return ""
                raise TemplateRenderingError(f"missing value for '{key}'")

            value = context[key]
            for filter_name in filter_names:
                try:
                    filter_func = self.filters[filter_name]
                except KeyError as exc:
                    raise TemplateRenderingError(f"unknown filter '{filter_name}'") from exc
                value = filter_func(value)

            return str(value)

        return _PLACEHOLDER_PATTERN.sub(substitute, template)
