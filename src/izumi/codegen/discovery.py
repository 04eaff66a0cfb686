"""
Source file discovery and module name resolution.
"""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

SKIP_DIRS = {"__pycache__", ".venv", ".mypy_cache", ".pytest_cache", ".ruff_cache", ".tox", ".git"}


@dataclass(frozen=True)
class SourceUnit:
    """A Python source file together with the dotted module path used to import it."""

    path: Path
    module: str


def discover_sources(
    paths: Iterable[Path],
    source_root: Path | None = None,
    exclude: Iterable[str] = (),
    skip: Iterable[Path] = (),
) -> list[SourceUnit]:
    """
    Discover Python source files under the given files and directories.

    Args:
        paths: Files or directories to scan
        source_root: Directory that module names are computed from; when omitted,
            each file's root is the nearest ancestor that is not a package
        exclude: Glob patterns matched against POSIX-style paths
        skip: Files that must never be scanned (e.g. the generated output)

    Returns:
        Source units sorted by path, without duplicates
    """
    patterns = tuple(exclude)
    skipped = {p.resolve() for p in skip}
    found: dict[Path, None] = {}

    for path in paths:
        path = path.resolve()
        if path.is_dir():
            candidates = sorted(path.rglob("*.py"))
        elif path.is_file():
            candidates = [path]
        else:
            raise ConfigurationError(f"Source path does not exist: {path}")

        for candidate in candidates:
            if any(parent.name in SKIP_DIRS for parent in candidate.parents):
                continue
            if candidate in skipped:
                logger.debug("Skipping %s", candidate)
                continue
            if any(fnmatch.fnmatch(candidate.as_posix(), pattern) for pattern in patterns):
                logger.debug("Excluded %s", candidate)
                continue
            found[candidate] = None

    root = source_root.resolve() if source_root is not None else None
    return [SourceUnit(path, module_name_for(path, root)) for path in sorted(found)]


def module_name_for(path: Path, source_root: Path | None = None) -> str:
    """
    Compute the dotted import path of a source file.

    Raises:
        ConfigurationError: If the file does not live under ``source_root``
    """
    root = source_root if source_root is not None else package_root(path)
    try:
        relative = path.relative_to(root)
    except ValueError:
        raise ConfigurationError(f"{path} is not under source root {root}") from None

    parts = list(relative.with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    if not parts:
        raise ConfigurationError(f"Cannot derive a module name for {path} relative to {root}")

    for part in parts:
        if not part.isidentifier():
            raise ConfigurationError(f"'{part}' in {path} is not importable as a module name")

    return ".".join(parts)


def package_root(path: Path) -> Path:
    """Return the nearest ancestor directory that is not itself a package."""
    directory = path.parent
    while (directory / "__init__.py").is_file() and directory.parent != directory:
        directory = directory.parent
    return directory
