"""
Command line entry point: ``izumi-codegen``.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .config import GeneratorConfig, find_pyproject
from .errors import CodegenError
from .generator import Generator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="izumi-codegen",
        description="Generate dependency injection wiring from @Token/@Injectable marker comments.",
    )
    parser.add_argument("sources", nargs="*", type=Path, help="Source files or directories to scan")
    parser.add_argument("-o", "--output", type=Path, help="Generated module path")
    parser.add_argument("--source-root", type=Path, help="Directory module import paths are computed from")
    parser.add_argument("--config", type=Path, help="pyproject.toml to read [tool.izumi-codegen] from")
    parser.add_argument("--container-module", help="Module providing the token and builder factories")
    parser.add_argument("--entry-point", help="Name of the generated configuration function")
    parser.add_argument(
        "--strict-factory-parameters",
        action="store_true",
        default=None,
        help="Fail on factory parameters without annotations instead of using a placeholder type",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Do not write; exit with status 1 if the output file is missing or out of date",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def load_config(args: argparse.Namespace) -> GeneratorConfig:
    """Merge pyproject settings with command line overrides."""
    pyproject = args.config or find_pyproject(Path.cwd())
    config = GeneratorConfig.from_pyproject(pyproject) if pyproject is not None else GeneratorConfig()
    if pyproject is not None:
        logger.debug("Loaded configuration from %s", pyproject)

    overrides: dict[str, Any] = {}
    if args.sources:
        overrides["sources"] = tuple(args.sources)
    if args.output is not None:
        overrides["output"] = args.output
    if args.source_root is not None:
        overrides["source_root"] = args.source_root
    if args.container_module is not None:
        overrides["container_module"] = args.container_module
    if args.entry_point is not None:
        overrides["entry_point"] = args.entry_point
    if args.strict_factory_parameters is not None:
        overrides["strict_factory_parameters"] = args.strict_factory_parameters

    return dataclasses.replace(config, **overrides) if overrides else config


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args)
        generator = Generator(config)
        result = generator.generate(write=not args.check)
    except CodegenError as e:
        print(f"izumi-codegen: error: {e}", file=sys.stderr)
        return 1

    if args.check:
        existing = result.output_path.read_text(encoding="utf-8") if result.output_path.is_file() else None
        if existing != result.code:
            print(f"izumi-codegen: {result.output_path} is out of date", file=sys.stderr)
            return 1
        logger.info("%s is up to date", result.output_path)

    return 0
