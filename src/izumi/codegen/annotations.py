"""
Marker comments recognised by the scanner.

Markers are plain comments and have no runtime effect:

    # @Token
    # @Reflect
    # @Injectable
    # @Scope("singleton")
    class PostgresRepository(Repository):
        ...
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .model import Scope


class Marker(Enum):
    """Kinds of marker that may appear in a declaration's leading comments."""

    TOKEN = "token"
    INJECTABLE = "injectable"
    DEPENDS = "depends"
    REFLECT = "reflect"
    SCOPE = "scope"


MARKER_PATTERNS: dict[Marker, re.Pattern[str]] = {
    Marker.TOKEN: re.compile(r"@Token", re.IGNORECASE),
    Marker.INJECTABLE: re.compile(r"@Injectable", re.IGNORECASE),
    Marker.DEPENDS: re.compile(r"@Depends", re.IGNORECASE),
    Marker.REFLECT: re.compile(r"@Reflect", re.IGNORECASE),
    Marker.SCOPE: re.compile(
        r"""@Scope\s*\(\s*["'](singleton|transient|scoped)["']\s*\)""", re.IGNORECASE
    ),
}


@dataclass(frozen=True)
class MarkerMatch:
    """Markers found in one comment block, plus the captured scope if any."""

    markers: frozenset[Marker] = frozenset()
    scope: Scope | None = None

    def has(self, marker: Marker) -> bool:
        return marker in self.markers

    @property
    def is_token(self) -> bool:
        return Marker.TOKEN in self.markers

    @property
    def is_injectable(self) -> bool:
        return Marker.INJECTABLE in self.markers

    @property
    def is_depends(self) -> bool:
        return Marker.DEPENDS in self.markers

    @property
    def is_reflect(self) -> bool:
        return Marker.REFLECT in self.markers

    @property
    def wants_registration(self) -> bool:
        """True when the declaration should be registered with the container."""
        return self.is_injectable or self.is_depends

    def scope_or_default(self) -> Scope:
        return self.scope if self.scope is not None else Scope.TRANSIENT

    def __bool__(self) -> bool:
        return bool(self.markers)


def match_markers(text: str) -> MarkerMatch:
    """Classify raw comment text into the set of markers it carries."""
    if not text:
        return MarkerMatch()

    found: set[Marker] = set()
    scope: Scope | None = None
    for marker, pattern in MARKER_PATTERNS.items():
        match = pattern.search(text)
        if match is None:
            continue
        found.add(marker)
        if marker is Marker.SCOPE:
            scope = Scope.parse(match.group(1))

    return MarkerMatch(frozenset(found), scope)
