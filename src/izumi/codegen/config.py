"""
Generator configuration and loading from pyproject.toml.

Settings live under ``[tool.izumi-codegen]``:

    [tool.izumi-codegen]
    sources = ["src/app"]
    output = "src/app/di_setup.py"
    source-root = "src"
    container-module = "fioc"
    entry-point = "configure_container"
    strict-factory-parameters = false
"""

from __future__ import annotations

import keyword
import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

PYPROJECT_SECTION = "izumi-codegen"

DEFAULT_EXCLUDES: tuple[str, ...] = ("**/__pycache__/**", "**/.venv/**", "**/build/**", "**/dist/**")


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for one generation run."""

    sources: tuple[Path, ...] = ()
    output: Path | None = None
    source_root: Path | None = None
    exclude: tuple[str, ...] = DEFAULT_EXCLUDES
    container_module: str = "fioc"
    token_factory: str = "create_di_token"
    builder_factory: str = "build_di_container"
    entry_point: str = "configure_container"
    unknown_type_name: str = "Unknown"
    strict_factory_parameters: bool = False

    def __post_init__(self) -> None:
        for name in ("token_factory", "builder_factory", "entry_point"):
            value = getattr(self, name)
            if not value.isidentifier() or keyword.iskeyword(value):
                raise ConfigurationError(f"'{name}' must be a valid Python identifier, got {value!r}")

        parts = self.container_module.split(".")
        if not all(part.isidentifier() and not keyword.iskeyword(part) for part in parts):
            raise ConfigurationError(f"'container_module' must be a dotted module path, got {self.container_module!r}")

    @classmethod
    def from_mapping(cls, data: dict[str, Any], base_dir: Path | None = None) -> GeneratorConfig:
        """
        Build a configuration from a ``[tool.izumi-codegen]`` table.

        Keys may use dashes or underscores. Relative paths are resolved against
        ``base_dir`` (usually the directory holding pyproject.toml).

        Raises:
            ConfigurationError: If a value has the wrong type
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        unknown: list[str] = []

        for raw_key, value in data.items():
            key = raw_key.replace("-", "_")
            if key not in known:
                unknown.append(raw_key)
                continue
            kwargs[key] = value

        if unknown:
            logger.warning("Ignoring unknown [tool.%s] keys: %s", PYPROJECT_SECTION, ", ".join(sorted(unknown)))

        base = base_dir or Path.cwd()

        def as_path(value: Any, key: str) -> Path:
            if not isinstance(value, str):
                raise ConfigurationError(f"'{key}' must be a string path, got {type(value).__name__}")
            path = Path(value)
            return path if path.is_absolute() else base / path

        def as_str_list(value: Any, key: str) -> list[str]:
            if isinstance(value, str):
                return [value]
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise ConfigurationError(f"'{key}' must be a string or a list of strings")
            return value

        if "sources" in kwargs:
            kwargs["sources"] = tuple(as_path(item, "sources") for item in as_str_list(kwargs["sources"], "sources"))
        for key in ("output", "source_root"):
            if key in kwargs:
                kwargs[key] = as_path(kwargs[key], key)
        if "exclude" in kwargs:
            kwargs["exclude"] = tuple(as_str_list(kwargs["exclude"], "exclude"))
        if "strict_factory_parameters" in kwargs and not isinstance(kwargs["strict_factory_parameters"], bool):
            raise ConfigurationError("'strict_factory_parameters' must be a boolean")
        for key in ("container_module", "token_factory", "builder_factory", "entry_point", "unknown_type_name"):
            if key in kwargs and not isinstance(kwargs[key], str):
                raise ConfigurationError(f"'{key}' must be a string")

        return cls(**kwargs)

    @classmethod
    def from_pyproject(cls, path: Path) -> GeneratorConfig:
        """
        Load configuration from a pyproject.toml file.

        A file without a ``[tool.izumi-codegen]`` table yields the defaults.

        Raises:
            ConfigurationError: If the file is not valid TOML
        """
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e

        section = data.get("tool", {}).get(PYPROJECT_SECTION)
        if section is None:
            logger.debug("No [tool.%s] table in %s, using defaults", PYPROJECT_SECTION, path)
            return cls()
        if not isinstance(section, dict):
            raise ConfigurationError(f"[tool.{PYPROJECT_SECTION}] in {path} must be a table")

        return cls.from_mapping(section, path.parent)


def find_pyproject(start: Path) -> Path | None:
    """Find the nearest pyproject.toml at or above ``start``."""
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None
