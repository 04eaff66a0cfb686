"""
Build-time registry of discovered tokens and injectables.
"""

from __future__ import annotations

import logging

from .errors import DuplicateTokenError, UnresolvedDependencyError, UnresolvedInterfaceError, UnresolvedTokenError
from .model import InjectableDeclaration, TokenDeclaration

logger = logging.getLogger(__name__)


class DependencyRegistry:
    """
    Validating store for the declarations found during one generation run.

    The registry only grows: tokens must be added before any injectable that
    refers to them, and each insertion is checked against what is already
    present. Read methods return snapshots in insertion order.
    """

    def __init__(self) -> None:
        super().__init__()
        self._tokens: dict[str, TokenDeclaration] = {}
        self._injectables: list[InjectableDeclaration] = []

    def add_token(self, token: TokenDeclaration) -> None:
        """Register a token, failing if its id is already taken."""
        existing = self._tokens.get(token.id)
        if existing is not None:
            raise DuplicateTokenError(token.id, existing.file_path, token.file_path)

        self._tokens[token.id] = token
        logger.debug("Registered token %s", token)

    def add_injectable(self, injectable: InjectableDeclaration) -> None:
        """Register an injectable after checking its interface, dependencies and own token."""
        interface = injectable.implements_interface
        if interface is not None and interface not in self._tokens:
            raise UnresolvedInterfaceError(injectable.target_name, interface)

        for index, dependency in enumerate(injectable.dependencies):
            if dependency not in self._tokens:
                raise UnresolvedDependencyError(injectable.target_name, index + 1, dependency)

        if injectable.token_name not in self._tokens:
            raise UnresolvedTokenError(injectable.target_name, injectable.token_name)

        self._injectables.append(injectable)
        logger.debug("Registered injectable %s", injectable)

    def has_token(self, token_id: str) -> bool:
        """Check if a token with the given id exists."""
        return token_id in self._tokens

    def get_token(self, token_id: str) -> TokenDeclaration | None:
        """Get a token by id."""
        return self._tokens.get(token_id)

    def tokens(self) -> tuple[TokenDeclaration, ...]:
        """Get all tokens in the order they were registered."""
        return tuple(self._tokens.values())

    def injectables(self) -> tuple[InjectableDeclaration, ...]:
        """Get all injectables in the order they were registered."""
        return tuple(self._injectables)
