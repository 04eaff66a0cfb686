#!/usr/bin/env python3
"""
Unit tests for generator configuration loading.
"""

import tempfile
import textwrap
import unittest
from pathlib import Path

from izumi.codegen import ConfigurationError, GeneratorConfig
from izumi.codegen.config import find_pyproject


class TestDefaults(unittest.TestCase):
    """Test default settings and validation."""

    def test_defaults(self):
        """Defaults match the downstream container contract."""
        config = GeneratorConfig()

        self.assertEqual(config.container_module, "fioc")
        self.assertEqual(config.token_factory, "create_di_token")
        self.assertEqual(config.builder_factory, "build_di_container")
        self.assertEqual(config.entry_point, "configure_container")
        self.assertEqual(config.unknown_type_name, "Unknown")
        self.assertFalse(config.strict_factory_parameters)

    def test_invalid_identifiers(self):
        """Generated names must be valid identifiers."""
        with self.assertRaises(ConfigurationError):
            GeneratorConfig(entry_point="configure-container")
        with self.assertRaises(ConfigurationError):
            GeneratorConfig(token_factory="class")
        with self.assertRaises(ConfigurationError):
            GeneratorConfig(container_module="my..container")


class TestPyproject(unittest.TestCase):
    """Test loading from pyproject.toml."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)

    def write(self, content: str) -> Path:
        path = self.root / "pyproject.toml"
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    def test_section_is_loaded(self):
        """Keys with dashes are mapped and paths resolved against the file."""
        path = self.write(
            """
            [tool.izumi-codegen]
            sources = ["src/app"]
            output = "src/app/di_setup.py"
            source-root = "src"
            container-module = "company.di"
            entry-point = "wire"
            strict-factory-parameters = true
            exclude = ["**/migrations/**"]
            """
        )

        config = GeneratorConfig.from_pyproject(path)

        self.assertEqual(config.sources, (self.root / "src/app",))
        self.assertEqual(config.output, self.root / "src/app/di_setup.py")
        self.assertEqual(config.source_root, self.root / "src")
        self.assertEqual(config.container_module, "company.di")
        self.assertEqual(config.entry_point, "wire")
        self.assertTrue(config.strict_factory_parameters)
        self.assertEqual(config.exclude, ("**/migrations/**",))

    def test_single_source_string(self):
        """A single source may be given as a plain string."""
        path = self.write(
            """
            [tool.izumi-codegen]
            sources = "app"
            """
        )

        self.assertEqual(GeneratorConfig.from_pyproject(path).sources, (self.root / "app",))

    def test_missing_section_uses_defaults(self):
        """A pyproject without the section yields the defaults."""
        path = self.write(
            """
            [project]
            name = "example"
            """
        )

        self.assertEqual(GeneratorConfig.from_pyproject(path), GeneratorConfig())

    def test_unknown_keys_are_ignored(self):
        """Unknown keys are logged and otherwise ignored."""
        path = self.write(
            """
            [tool.izumi-codegen]
            flavour = "vanilla"
            """
        )

        with self.assertLogs("izumi.codegen.config", level="WARNING") as logs:
            config = GeneratorConfig.from_pyproject(path)

        self.assertIn("flavour", logs.output[0])
        self.assertEqual(config, GeneratorConfig())
        self.assertFalse(hasattr(config, "extra"))

    def test_wrong_types(self):
        """Values of the wrong type are rejected."""
        cases = [
            "strict-factory-parameters = 'yes'",
            "sources = [1, 2]",
            "output = 3",
            "entry-point = 5",
        ]
        for line in cases:
            with self.subTest(line=line):
                path = self.write(f"[tool.izumi-codegen]\n{line}\n")
                with self.assertRaises(ConfigurationError):
                    GeneratorConfig.from_pyproject(path)

    def test_invalid_toml(self):
        """Broken TOML is reported as a configuration error."""
        path = self.write("[tool.izumi-codegen\n")

        with self.assertRaises(ConfigurationError):
            GeneratorConfig.from_pyproject(path)

    def test_find_pyproject_walks_up(self):
        """The nearest pyproject.toml above a directory is found."""
        path = self.write("[project]\nname = 'example'\n")
        nested = self.root / "src" / "app"
        nested.mkdir(parents=True)

        self.assertEqual(find_pyproject(nested), path.resolve())


if __name__ == "__main__":
    unittest.main()
