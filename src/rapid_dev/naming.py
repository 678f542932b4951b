"""Repository name construction and validation.

The helpers in this module turn loosely structured naming inputs (a project, a
service, a team, ...) into a single canonical identifier that is safe to use as
a GitHub repository name, a directory name and the base of derived package
names. Validation never raises: every violated rule is reported as a message
so callers can show the user all problems at once.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Iterable

from .errors import NamingPolicyViolation

__all__ = [
    "BAD_VERSION_TOKENS",
    "NAMING_PATTERNS",
    "NamingIntent",
    "NamingPattern",
    "ValidationResult",
    "build_repo_name",
    "ensure_valid_repo_name",
    "select_pattern",
    "to_kebab",
    "validate_repo_name",
]


_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")
_EDGE_HYPHENS = re.compile(r"^-+|-+$")
_REPEATED_HYPHENS = re.compile(r"-+")

_ALLOWED_CHARACTERS = re.compile(r"[a-z0-9-]+")
_FORBIDDEN_CHARACTERS = re.compile(r"[A-Z_ ]")
_VERSION_TOKEN = re.compile(r"v[0-9]+")

BAD_VERSION_TOKENS: frozenset[str] = frozenset(
    {f"v{number}" for number in range(1, 11)}
    | {"final", "latest", "new", "old", "release", "rev"}
)

MIN_SEGMENTS = 2


def to_kebab(value: object) -> str:
    """Return ``value`` as a lowercase, hyphen separated token.

    ``None`` is treated as an empty string. Every run of characters outside
    ``[a-z0-9]`` becomes a single hyphen and edge hyphens are removed, so the
    result never starts or ends with ``-`` and never contains ``--``.
    """

    text = "" if value is None else str(value)
    text = text.strip().lower()
    text = _NON_ALPHANUMERIC.sub("-", text)
    text = _EDGE_HYPHENS.sub("", text)
    return _REPEATED_HYPHENS.sub("-", text)


@dataclass(frozen=True, slots=True)
class NamingIntent:
    """Raw naming inputs collected from the command line or a config file."""

    raw: str | None = None
    prefix: str | None = None
    project: str | None = None
    description: str | None = None
    service: str | None = None
    type: str | None = None
    team: str | None = None
    component: str | None = None

    def value(self, field_name: str) -> str:
        """Return the named field coerced to text, ``""`` when unset."""

        value = getattr(self, field_name)
        return "" if value is None else str(value)

    def has_any(self, field_names: Iterable[str]) -> bool:
        return any(self.value(name) for name in field_names)


@dataclass(frozen=True, slots=True)
class NamingPattern:
    """A composition rule selected by which intent fields are populated.

    Attributes
    ----------
    name:
        Short label used in logs and tests.
    parts:
        Intent fields joined, in order, to compose the base name. Empty fields
        are dropped.
    triggers:
        Fields whose presence selects this pattern. A pattern without triggers
        always matches and should be the last entry of a pattern table.
    """

    name: str
    parts: tuple[str, ...]
    triggers: tuple[str, ...] = ()

    def matches(self, intent: NamingIntent) -> bool:
        if not self.triggers:
            return True
        return intent.has_any(self.triggers)

    def compose(self, intent: NamingIntent) -> str:
        pieces = [intent.value(name) for name in self.parts]
        return to_kebab("-".join(piece for piece in pieces if piece))


NAMING_PATTERNS: tuple[NamingPattern, ...] = (
    NamingPattern("raw", parts=("raw",), triggers=("raw",)),
    NamingPattern("component", parts=("team", "component"), triggers=("team", "component")),
    NamingPattern("service", parts=("project", "service", "type"), triggers=("service", "type")),
    NamingPattern("general", parts=("project", "description")),
)


def select_pattern(
    intent: NamingIntent, patterns: Iterable[NamingPattern] = NAMING_PATTERNS
) -> NamingPattern | None:
    """Return the first pattern in ``patterns`` matching ``intent``."""

    for pattern in patterns:
        if pattern.matches(intent):
            return pattern
    return None


def build_repo_name(
    intent: NamingIntent, *, patterns: Iterable[NamingPattern] = NAMING_PATTERNS
) -> str:
    """Compose the canonical repository name described by ``intent``.

    The first matching entry of ``patterns`` decides which fields are joined.
    A non-empty ``prefix`` is prepended afterwards. The function never raises;
    an intent without usable fields yields ``""`` which
    :func:`validate_repo_name` rejects.
    """

    pattern = select_pattern(intent, patterns)
    base = pattern.compose(intent) if pattern is not None else ""

    prefix = intent.value("prefix")
    if prefix:
        return to_kebab(f"{prefix}-{base}")
    return base


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of :func:`validate_repo_name`."""

    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors


_Rule = Callable[[str], Iterable[str]]


def _check_characters(name: str) -> Iterable[str]:
    if not _ALLOWED_CHARACTERS.fullmatch(name):
        yield "Use only lowercase letters, numbers, and hyphens."


def _check_forbidden(name: str) -> Iterable[str]:
    if _FORBIDDEN_CHARACTERS.search(name):
        yield "No uppercase, underscores, or spaces."


def _check_double_hyphen(name: str) -> Iterable[str]:
    if "--" in name:
        yield "No double hyphens."


def _check_edge_hyphen(name: str) -> Iterable[str]:
    if name.startswith("-") or name.endswith("-"):
        yield "No leading/trailing hyphen."


def _segments(name: str) -> list[str]:
    return [segment for segment in name.split("-") if segment]


def _check_segment_count(name: str) -> Iterable[str]:
    if len(_segments(name)) < MIN_SEGMENTS:
        yield "Use at least two segments, e.g., {project}-{description}."


def _check_tokens(name: str) -> Iterable[str]:
    for segment in _segments(name):
        if segment in BAD_VERSION_TOKENS:
            yield f'Avoid versioning/placeholder token: "{segment}".'
        if _VERSION_TOKEN.fullmatch(segment):
            yield f'Avoid version token: "{segment}".'


_RULES: tuple[_Rule, ...] = (
    _check_characters,
    _check_forbidden,
    _check_double_hyphen,
    _check_edge_hyphen,
    _check_segment_count,
    _check_tokens,
)


def validate_repo_name(name: str | None) -> ValidationResult:
    """Check ``name`` against every repository naming rule.

    All rules run unconditionally and contribute their own messages, in rule
    order. ``None`` is validated as the empty string.
    """

    text = "" if name is None else str(name)
    errors: list[str] = []
    for rule in _RULES:
        errors.extend(rule(text))
    return ValidationResult(errors=tuple(errors))


def ensure_valid_repo_name(name: str | None) -> str:
    """Return ``name`` unchanged or raise :class:`NamingPolicyViolation`."""

    result = validate_repo_name(name)
    if not result.ok:
        raise NamingPolicyViolation("" if name is None else str(name), result.errors)
    return str(name)
