"""
Generator - runs the scan, validate and emit stages for one output module.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .config import GeneratorConfig
from .discovery import SourceUnit, discover_sources
from .emitter import CodeEmitter
from .errors import ConfigurationError
from .model import InjectableDeclaration, TokenDeclaration
from .registry import DependencyRegistry
from .scanner import ParsedSource, SourceScanner, parse_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a successful generation run."""

    output_path: Path
    code: str
    tokens: tuple[TokenDeclaration, ...]
    injectables: tuple[InjectableDeclaration, ...]
    files_scanned: int
    written: bool

    @property
    def summary(self) -> str:
        return (
            f"{len(self.tokens)} tokens, {len(self.injectables)} injectables "
            f"from {self.files_scanned} files -> {self.output_path}"
        )


class Generator:
    """
    Produces a container configuration module from annotated sources.

    Each call to ``plan`` builds a fresh registry, so one Generator can be
    reused for repeated or independent runs without sharing state.
    """

    def __init__(self, config: GeneratorConfig | None = None):
        super().__init__()
        self._config = config or GeneratorConfig()

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    def discover(self, output_path: Path | None = None) -> list[SourceUnit]:
        """Resolve the configured source paths into source units."""
        if not self._config.sources:
            raise ConfigurationError("No source paths configured")

        skip = [output_path] if output_path is not None else []
        return discover_sources(self._config.sources, self._config.source_root, self._config.exclude, skip)

    def plan(self, units: Sequence[SourceUnit]) -> DependencyRegistry:
        """
        Scan sources into a validated registry.

        Every file is parsed and run through the token pass before the
        injectable pass starts on any of them.

        Raises:
            CodegenError: On the first invalid declaration or unparsable file
        """
        sources: list[ParsedSource] = [parse_source(unit) for unit in units]
        registry = DependencyRegistry()
        scanner = SourceScanner(registry, self._config)

        token_count = sum(scanner.scan_tokens(source) for source in sources)
        logger.info("Pass 1: %d tokens in %d files", token_count, len(sources))

        injectable_count = sum(scanner.scan_injectables(source) for source in sources)
        logger.info("Pass 2: %d injectables", injectable_count)

        return registry

    def generate(self, output_path: Path | None = None, *, write: bool = True) -> GenerationResult:
        """
        Run discovery, scanning and emission.

        Args:
            output_path: Destination module; defaults to the configured output
            write: When False, render without touching the filesystem

        Returns:
            The rendered code and the declarations it was built from
        """
        output = output_path or self._config.output
        if output is None:
            raise ConfigurationError("No output path configured")
        output = output.resolve()

        units = self.discover(output)
        registry = self.plan(units)
        emitter = CodeEmitter(registry, self._config)
        code = emitter.write(output) if write else emitter.render()

        result = GenerationResult(
            output_path=output,
            code=code,
            tokens=registry.tokens(),
            injectables=registry.injectables(),
            files_scanned=len(units),
            written=write,
        )
        logger.info("Generated %s", result.summary)
        return result


def generate_di(
    source_paths: Iterable[Path | str],
    output_path: Path | str,
    config: GeneratorConfig | None = None,
) -> GenerationResult:
    """
    Generate a container configuration module.

    Args:
        source_paths: Files or directories holding annotated declarations
        output_path: Where the generated module is written
        config: Optional settings; its ``sources`` and ``output`` are replaced

    Returns:
        The generation result

    Example:
        ```python
        generate_di(["src/app"], "src/app/di_setup.py")
        ```
    """
    base = config or GeneratorConfig()
    settings = dataclasses.replace(base, sources=tuple(Path(p) for p in source_paths), output=Path(output_path))
    return Generator(settings).generate()
