#!/usr/bin/env python3
"""
Unit tests for the build-time dependency registry.
"""

import unittest

from izumi.codegen import (
    DependencyRegistry,
    DuplicateTokenError,
    InjectableDeclaration,
    InjectableKind,
    Scope,
    TokenDeclaration,
    UnresolvedDependencyError,
    UnresolvedInterfaceError,
    UnresolvedTokenError,
)


def token(name: str, path: str = "app/services.py", is_interface: bool = False) -> TokenDeclaration:
    return TokenDeclaration(id=name, node_name=name, file_path=path, is_interface=is_interface, module="app.services")


def injectable(target: str, *dependencies: str, implements: str | None = None) -> InjectableDeclaration:
    return InjectableDeclaration(
        token_name=implements or target,
        target_name=target,
        file_path="app/services.py",
        dependencies=dependencies,
        implements_interface=implements,
        module="app.services",
    )


class TestTokens(unittest.TestCase):
    """Test token registration."""

    def setUp(self):
        self.registry = DependencyRegistry()

    def test_tokens_keep_insertion_order(self):
        """Tokens are returned in the order they were added."""
        for name in ["Zeta", "Alpha", "Mid"]:
            self.registry.add_token(token(name))

        self.assertEqual([t.id for t in self.registry.tokens()], ["Zeta", "Alpha", "Mid"])

    def test_duplicate_token_fails(self):
        """A second token with the same id is rejected."""
        self.registry.add_token(token("Database", "app/db.py"))

        with self.assertRaises(DuplicateTokenError) as ctx:
            self.registry.add_token(token("Database", "app/other.py"))

        self.assertEqual(ctx.exception.token_id, "Database")
        self.assertIn("app/db.py", str(ctx.exception))
        self.assertIn("app/other.py", str(ctx.exception))
        self.assertEqual(len(self.registry.tokens()), 1)
        self.assertEqual(self.registry.get_token("Database").file_path, "app/db.py")

    def test_lookup(self):
        """Tokens can be looked up by id."""
        self.registry.add_token(token("Cache"))

        self.assertTrue(self.registry.has_token("Cache"))
        self.assertFalse(self.registry.has_token("Missing"))
        self.assertIsNone(self.registry.get_token("Missing"))

    def test_snapshots_are_immutable(self):
        """Read methods return tuples rather than live internal state."""
        self.registry.add_token(token("Cache"))

        self.assertIsInstance(self.registry.tokens(), tuple)
        self.assertIsInstance(self.registry.injectables(), tuple)


class TestInjectables(unittest.TestCase):
    """Test injectable validation."""

    def setUp(self):
        self.registry = DependencyRegistry()
        self.registry.add_token(token("Database"))
        self.registry.add_token(token("Cache"))
        self.registry.add_token(token("Repository", is_interface=True))
        self.registry.add_token(token("UserService"))

    def test_valid_injectable(self):
        """An injectable whose dependencies all exist is accepted."""
        self.registry.add_injectable(injectable("UserService", "Database", "Cache"))

        (registered,) = self.registry.injectables()
        self.assertEqual(registered.dependencies, ("Database", "Cache"))
        self.assertEqual(registered.scope, Scope.TRANSIENT)
        self.assertEqual(registered.kind, InjectableKind.CLASS)

    def test_unresolved_dependency_reports_position(self):
        """The first unknown dependency is reported with its one-based position."""
        with self.assertRaises(UnresolvedDependencyError) as ctx:
            self.registry.add_injectable(injectable("UserService", "Database", "Mailer", "Queue"))

        error = ctx.exception
        self.assertEqual(error.target_name, "UserService")
        self.assertEqual(error.position, 2)
        self.assertEqual(error.type_name, "Mailer")
        self.assertIn("#2", str(error))
        self.assertIn("'Mailer'", str(error))
        self.assertEqual(self.registry.injectables(), ())

    def test_unresolved_interface(self):
        """Binding to an interface without a token fails."""
        with self.assertRaises(UnresolvedInterfaceError) as ctx:
            self.registry.add_injectable(injectable("SqlRepository", implements="Store"))

        self.assertEqual(ctx.exception.target_name, "SqlRepository")
        self.assertEqual(ctx.exception.interface_name, "Store")

    def test_interface_checked_before_dependencies(self):
        """An unknown interface is reported even when dependencies are also unknown."""
        with self.assertRaises(UnresolvedInterfaceError):
            self.registry.add_injectable(injectable("SqlRepository", "Mailer", implements="Store"))

    def test_interface_binding(self):
        """A bound injectable is stored under the interface token."""
        self.registry.add_injectable(injectable("SqlRepository", "Database", implements="Repository"))

        (registered,) = self.registry.injectables()
        self.assertEqual(registered.token_name, "Repository")
        self.assertEqual(registered.target_name, "SqlRepository")

    def test_injectable_without_own_token(self):
        """An injectable must be registered under an existing token."""
        with self.assertRaises(UnresolvedTokenError) as ctx:
            self.registry.add_injectable(injectable("Mailer", "Database"))

        self.assertEqual(ctx.exception.target_name, "Mailer")
        self.assertEqual(ctx.exception.token_name, "Mailer")
        self.assertIn("@Token", str(ctx.exception))
        self.assertEqual(self.registry.injectables(), ())

    def test_dependencies_checked_before_own_token(self):
        """Unknown dependencies are reported before a missing own token."""
        with self.assertRaises(UnresolvedDependencyError):
            self.registry.add_injectable(injectable("Mailer", "Queue"))

    def test_injectables_keep_discovery_order(self):
        """Injectables are returned in the order they were added."""
        for name in ["C", "A", "B"]:
            self.registry.add_token(token(name))
            self.registry.add_injectable(injectable(name))

        self.assertEqual([i.target_name for i in self.registry.injectables()], ["C", "A", "B"])

    def test_fresh_registries_are_independent(self):
        """Registries share no state."""
        other = DependencyRegistry()

        self.assertFalse(other.has_token("Database"))
        self.assertEqual(other.tokens(), ())


if __name__ == "__main__":
    unittest.main()
