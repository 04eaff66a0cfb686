"""
Model subpackage containing the declarations shared by the scanner, registry and emitter.
"""

from .declarations import InjectableDeclaration, InjectableKind, Scope, TokenDeclaration

__all__ = ["InjectableDeclaration", "InjectableKind", "Scope", "TokenDeclaration"]
