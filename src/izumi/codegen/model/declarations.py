"""
Declarations discovered by the source scanner.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Scope(Enum):
    """Lifetime policy requested for an injectable."""

    TRANSIENT = "transient"
    SINGLETON = "singleton"
    SCOPED = "scoped"

    @classmethod
    def parse(cls, value: str) -> Scope:
        """Parse a scope name, ignoring case."""
        return cls(value.strip().lower())


class InjectableKind(Enum):
    """Declaration shapes that can be wired into the container."""

    CLASS = "class"
    FACTORY = "factory"
    VALUE = "value"


@dataclass(frozen=True)
class TokenDeclaration:
    """A stable identity under which a dependency may be requested."""

    id: str
    node_name: str
    file_path: str
    is_interface: bool = False
    module: str = ""

    def __str__(self) -> str:
        kind = "interface" if self.is_interface else "token"
        return f"{self.id} ({kind} in {self.file_path})"


@dataclass(frozen=True)
class InjectableDeclaration:
    """A class, factory function or value bound to a token."""

    token_name: str
    target_name: str
    file_path: str
    dependencies: tuple[str, ...] = ()
    scope: Scope = Scope.TRANSIENT
    kind: InjectableKind = InjectableKind.CLASS
    implements_interface: str | None = None
    module: str = ""

    def __post_init__(self) -> None:
        # Accept any sequence but always store an immutable tuple
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    def __str__(self) -> str:
        deps = ", ".join(self.dependencies)
        bound = f" as {self.token_name}" if self.token_name != self.target_name else ""
        return f"{self.target_name}{bound} ({self.kind.value}, {self.scope.value}) <- [{deps}]"
