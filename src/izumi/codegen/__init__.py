"""
Chibi Izumi Codegen - build-time dependency injection wiring.

Scans Python sources for marker comments, validates the dependency model
they describe, and writes a deterministic container configuration module:

    # @Token
    class Repository(Protocol): ...

    # @Token
    # @Reflect
    # @Injectable
    # @Scope("singleton")
    class SqlRepository(Repository):
        def __init__(self, settings: Settings): ...
"""

from .annotations import Marker, MarkerMatch, match_markers
from .config import GeneratorConfig
from .emitter import CodeEmitter
from .errors import (
    CodegenError,
    ConfigurationError,
    DuplicateTokenError,
    MissingParameterTypeError,
    SourceParseError,
    UnresolvedDependencyError,
    UnresolvedInterfaceError,
    UnresolvedTokenError,
    UnsupportedParameterError,
)
from .generator import GenerationResult, Generator, generate_di
from .model import InjectableDeclaration, InjectableKind, Scope, TokenDeclaration
from .registry import DependencyRegistry
from .scanner import SourceScanner, parse_source

__all__ = [
    "CodeEmitter",
    "CodegenError",
    "ConfigurationError",
    "DependencyRegistry",
    "DuplicateTokenError",
    "GenerationResult",
    "Generator",
    "GeneratorConfig",
    "InjectableDeclaration",
    "InjectableKind",
    "Marker",
    "MarkerMatch",
    "MissingParameterTypeError",
    "Scope",
    "SourceParseError",
    "SourceScanner",
    "TokenDeclaration",
    "UnresolvedDependencyError",
    "UnresolvedInterfaceError",
    "UnresolvedTokenError",
    "UnsupportedParameterError",
    "generate_di",
    "match_markers",
    "parse_source",
]
