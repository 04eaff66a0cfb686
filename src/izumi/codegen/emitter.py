"""
Deterministic rendering of the registry into a container configuration module.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .config import GeneratorConfig
from .model import InjectableDeclaration, InjectableKind, Scope
from .registry import DependencyRegistry

logger = logging.getLogger(__name__)

INDENT = " " * 4
BUILDER_VARIABLE = "builder"

REGISTRATION_METHODS: dict[Scope, str] = {
    Scope.TRANSIENT: "register_factory",
    Scope.SINGLETON: "register_singleton_factory",
    Scope.SCOPED: "register_scoped_factory",
}

HEADER = '''"""
Dependency wiring generated by izumi-codegen.

Do not edit by hand: changes are overwritten on the next generation run.
"""'''


def token_identifier(token_id: str) -> str:
    """Name of the module-level binding that holds a token."""
    return f"{token_id}Token"


def module_alias(module: str) -> str:
    """Sanitize a dotted module path into an identifier usable as an import alias."""
    alias = re.sub(r"\W", "_", module)
    if not alias or alias[0].isdigit():
        alias = f"_{alias}"
    return alias


class CodeEmitter:
    """
    Serializes a registry snapshot into Python source.

    Output depends only on the registry's insertion order and declared names,
    so the same registry always renders to the same bytes.
    """

    def __init__(self, registry: DependencyRegistry, config: GeneratorConfig | None = None):
        super().__init__()
        self._registry = registry
        self._config = config or GeneratorConfig()

    def render(self) -> str:
        """Render the complete configuration module."""
        aliases = self._module_aliases()
        lines: list[str] = [HEADER, ""]

        imported = sorted({self._config.builder_factory, self._config.token_factory})
        lines.append(f"from {self._config.container_module} import {', '.join(imported)}")
        if aliases:
            lines.append("")
            lines.extend(f"import {module} as {alias}" for module, alias in aliases.items())

        lines.extend(["", "# --- TOKENS ---"])
        for token in self._registry.tokens():
            lines.append(f'{token_identifier(token.id)} = {self._config.token_factory}("{token.id}")')

        lines.extend(["", "", f"def {self._config.entry_point}():"])
        lines.append(f"{INDENT}{BUILDER_VARIABLE} = {self._config.builder_factory}()")
        for injectable in self._registry.injectables():
            lines.append("")
            lines.extend(self._registration(injectable, aliases[injectable.module]))
        lines.extend(["", f"{INDENT}return {BUILDER_VARIABLE}.get_result()", ""])

        return "\n".join(lines)

    def write(self, output_path: Path) -> str:
        """
        Render and write the module to ``output_path`` in a single overwrite.

        Returns:
            The rendered source
        """
        code = self.render()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(code, encoding="utf-8", newline="\n")
        logger.info("Wrote %s", output_path)
        return code

    def _module_aliases(self) -> dict[str, str]:
        """Map each module that must be imported to a unique alias, in first-seen order."""
        modules: list[str] = []
        for token in self._registry.tokens():
            if not token.is_interface and token.module not in modules:
                modules.append(token.module)
        for injectable in self._registry.injectables():
            if injectable.module not in modules:
                modules.append(injectable.module)

        reserved = {
            BUILDER_VARIABLE,
            self._config.builder_factory,
            self._config.token_factory,
            self._config.entry_point,
            self._config.container_module.split(".")[0],
        }
        reserved.update(token_identifier(token.id) for token in self._registry.tokens())

        aliases: dict[str, str] = {}
        taken: set[str] = set(reserved)
        for module in modules:
            base = module_alias(module)
            alias = base
            suffix = 2
            while alias in taken:
                alias = f"{base}_{suffix}"
                suffix += 1
            taken.add(alias)
            aliases[module] = alias
        return aliases

    def _registration(self, injectable: InjectableDeclaration, alias: str) -> list[str]:
        target = f"{alias}.{injectable.target_name}"
        if injectable.kind == InjectableKind.CLASS:
            factory = f"lambda *args: {target}(*args)"
        elif injectable.kind == InjectableKind.FACTORY:
            factory = target
        else:
            factory = f"lambda: {target}"

        dependencies = ", ".join(token_identifier(dependency) for dependency in injectable.dependencies)
        method = REGISTRATION_METHODS[injectable.scope]
        return [
            f"{INDENT}{BUILDER_VARIABLE}.{method}(",
            f"{INDENT * 2}{token_identifier(injectable.token_name)},",
            f"{INDENT * 2}factory={factory},",
            f"{INDENT * 2}dependencies=[{dependencies}],",
            f"{INDENT})",
        ]
