"""
Static scanner that discovers tokens and injectables in annotated Python sources.

Scanning happens in two passes over the same parsed sources. The first pass
registers every ``@Token`` declaration; the second registers injectables and
validates their dependencies against the complete token set, so it must not
start before the first pass has seen every file.
"""

from __future__ import annotations

import ast
import io
import logging
import tokenize
from dataclasses import dataclass

from .annotations import MarkerMatch, match_markers
from .config import GeneratorConfig
from .discovery import SourceUnit
from .errors import MissingParameterTypeError, SourceParseError, UnsupportedParameterError
from .model import InjectableDeclaration, InjectableKind, TokenDeclaration
from .registry import DependencyRegistry

logger = logging.getLogger(__name__)

INTERFACE_BASES = frozenset({"Protocol", "ABC"})
NON_CONTRACT_BASES = INTERFACE_BASES | {"Generic", "object"}

FunctionNode = ast.FunctionDef | ast.AsyncFunctionDef


@dataclass(frozen=True)
class AnnotatedDeclaration:
    """A module-level declaration with the comment block directly above it."""

    node: ast.stmt
    comments: str
    markers: MarkerMatch

    @property
    def name(self) -> str | None:
        return declared_name(self.node)


@dataclass(frozen=True)
class ParsedSource:
    """A parsed source file ready for both scanning passes."""

    unit: SourceUnit
    declarations: tuple[AnnotatedDeclaration, ...]
    exports: frozenset[str] | None = None

    @property
    def file_path(self) -> str:
        return str(self.unit.path)

    @property
    def module(self) -> str:
        return self.unit.module

    def is_exported(self, name: str) -> bool:
        """Check if a module-level name is part of the module's public surface."""
        if self.exports is not None:
            return name in self.exports
        return not name.startswith("_")


def parse_source(unit: SourceUnit) -> ParsedSource:
    """
    Parse a source file and attach leading comments to its module-level statements.

    Raises:
        SourceParseError: If the file cannot be read or is not valid Python
    """
    try:
        text = unit.path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceParseError(str(unit.path), str(e)) from e

    try:
        tree = ast.parse(text, filename=str(unit.path))
    except SyntaxError as e:
        raise SourceParseError(str(unit.path), f"line {e.lineno}: {e.msg}") from e

    return ParsedSource(unit, tuple(_annotate(tree, text)), _literal_exports(tree))


def _annotate(tree: ast.Module, text: str) -> list[AnnotatedDeclaration]:
    comments = _module_level_comments(text)
    declarations: list[AnnotatedDeclaration] = []
    previous_end = 0

    for stmt in tree.body:
        start = _first_line(stmt)
        block = "\n".join(comments[line] for line in range(previous_end + 1, start) if line in comments)
        declarations.append(AnnotatedDeclaration(stmt, block, match_markers(block)))
        previous_end = stmt.end_lineno or stmt.lineno

    return declarations


def _module_level_comments(text: str) -> dict[int, str]:
    """Map line numbers to own-line comments that start in column zero."""
    comments: dict[int, str] = {}
    for token in tokenize.generate_tokens(io.StringIO(text).readline):
        if token.type == tokenize.COMMENT and token.start[1] == 0:
            comments[token.start[0]] = token.string
    return comments


def _first_line(stmt: ast.stmt) -> int:
    decorators = getattr(stmt, "decorator_list", None) or []
    return min([stmt.lineno, *(d.lineno for d in decorators)])


def _literal_exports(tree: ast.Module) -> frozenset[str] | None:
    for stmt in tree.body:
        if isinstance(stmt, ast.Assign):
            targets, value = stmt.targets, stmt.value
        elif isinstance(stmt, ast.AnnAssign) and stmt.value is not None:
            targets, value = [stmt.target], stmt.value
        else:
            continue

        if not any(isinstance(t, ast.Name) and t.id == "__all__" for t in targets):
            continue
        if isinstance(value, (ast.List, ast.Tuple)) and all(
            isinstance(elt, ast.Constant) and isinstance(elt.value, str) for elt in value.elts
        ):
            return frozenset(elt.value for elt in value.elts)  # type: ignore[attr-defined]
    return None


def declared_name(node: ast.stmt) -> str | None:
    """Resolve the name a declaration binds, if it binds exactly one we can see."""
    if isinstance(node, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
        return node.name
    if isinstance(node, ast.Assign):
        return _target_name(node.targets[0])
    if isinstance(node, ast.AnnAssign):
        return _target_name(node.target)
    return None


def _target_name(target: ast.expr) -> str | None:
    if isinstance(target, ast.Name):
        return target.id
    if isinstance(target, (ast.Tuple, ast.List)) and target.elts:
        return _target_name(target.elts[0])
    return None


def _simple_name(expr: ast.expr) -> str | None:
    if isinstance(expr, ast.Name):
        return expr.id
    if isinstance(expr, ast.Attribute):
        return expr.attr
    if isinstance(expr, ast.Subscript):
        return _simple_name(expr.value)
    if isinstance(expr, ast.Call):
        return _simple_name(expr.func)
    return None


def is_interface(node: ast.ClassDef) -> bool:
    """Check if a class declares a contract rather than an implementation."""
    if any(_simple_name(base) in INTERFACE_BASES for base in node.bases):
        return True
    return any(kw.arg == "metaclass" and _simple_name(kw.value) == "ABCMeta" for kw in node.keywords)


def annotation_text(annotation: ast.expr) -> str:
    """Textual type reference of an annotation, unwrapping string forward references."""
    if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
        return annotation.value.strip()
    return ast.unparse(annotation)


class SourceScanner:
    """
    Walks parsed sources and feeds discovered declarations into a registry.

    The registry is owned by the caller; the scanner keeps no other state.
    """

    def __init__(self, registry: DependencyRegistry, config: GeneratorConfig | None = None):
        super().__init__()
        self._registry = registry
        self._config = config or GeneratorConfig()

    @property
    def registry(self) -> DependencyRegistry:
        return self._registry

    def scan_tokens(self, source: ParsedSource) -> int:
        """
        Pass 1: register every exported ``@Token`` declaration of a source.

        Returns:
            The number of tokens registered from this source
        """
        count = 0
        for declaration in source.declarations:
            if not declaration.markers.is_token:
                continue

            node = declaration.node
            name = declaration.name
            if name is None:
                logger.debug("%s:%d: @Token on a declaration without a name, skipped", source.file_path, node.lineno)
                continue
            if not source.is_exported(name):
                logger.debug("%s: @Token on non-exported '%s', skipped", source.file_path, name)
                continue

            self._registry.add_token(
                TokenDeclaration(
                    id=name,
                    node_name=name,
                    file_path=source.file_path,
                    is_interface=isinstance(node, ast.ClassDef) and is_interface(node),
                    module=source.module,
                )
            )
            count += 1
        return count

    def scan_injectables(self, source: ParsedSource) -> int:
        """
        Pass 2: register every ``@Injectable``/``@Depends`` declaration of a source.

        Returns:
            The number of injectables registered from this source
        """
        count = 0
        for declaration in source.declarations:
            if not declaration.markers.wants_registration:
                continue

            injectable = self._build_injectable(source, declaration)
            if injectable is None:
                continue

            self._registry.add_injectable(injectable)
            count += 1
        return count

    def _build_injectable(
        self, source: ParsedSource, declaration: AnnotatedDeclaration
    ) -> InjectableDeclaration | None:
        node = declaration.node
        scope = declaration.markers.scope_or_default()

        if isinstance(node, ast.ClassDef):
            token_name = node.name
            implements = None
            if declaration.markers.is_reflect:
                implements = self._implemented_interface(source, node)
                if implements is not None:
                    token_name = implements

            return InjectableDeclaration(
                token_name=token_name,
                target_name=node.name,
                file_path=source.file_path,
                dependencies=self._constructor_dependencies(node),
                scope=scope,
                kind=InjectableKind.CLASS,
                implements_interface=implements,
                module=source.module,
            )

        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            return InjectableDeclaration(
                token_name=node.name,
                target_name=node.name,
                file_path=source.file_path,
                dependencies=self._function_dependencies(node),
                scope=scope,
                kind=InjectableKind.FACTORY,
                module=source.module,
            )

        if isinstance(node, (ast.Assign, ast.AnnAssign)):
            name = declaration.name
            if name is None:
                logger.debug("%s:%d: @Injectable on an unnamed assignment, skipped", source.file_path, node.lineno)
                return None
            return InjectableDeclaration(
                token_name=name,
                target_name=name,
                file_path=source.file_path,
                scope=scope,
                kind=InjectableKind.VALUE,
                module=source.module,
            )

        logger.debug("%s:%d: markers on unsupported statement, skipped", source.file_path, node.lineno)
        return None

    def _implemented_interface(self, source: ParsedSource, node: ast.ClassDef) -> str | None:
        contracts = [
            base.value if isinstance(base, ast.Subscript) else base
            for base in node.bases
            if _simple_name(base) not in NON_CONTRACT_BASES
        ]
        if not contracts:
            logger.debug("%s: @Reflect on '%s' without a base class, using its own name", source.file_path, node.name)
            return None

        # Interface tokens win over concrete superclasses, then any token, then the first base
        tokens = [(base, self._token_for(base)) for base in contracts]
        interfaces = [base for base, token in tokens if token is not None and token.is_interface]
        if interfaces:
            chosen, ignored = interfaces[0], interfaces[1:]
        else:
            registered = [base for base, token in tokens if token is not None]
            chosen = registered[0] if registered else contracts[0]
            ignored = [base for base in contracts if base is not chosen]

        if ignored:
            logger.warning(
                "%s: '%s' implements several interfaces; binding to '%s' and ignoring %s",
                source.file_path,
                node.name,
                ast.unparse(chosen),
                ", ".join(ast.unparse(base) for base in ignored),
            )

        token = self._token_for(chosen)
        return token.id if token is not None else ast.unparse(chosen)

    def _token_for(self, base: ast.expr) -> TokenDeclaration | None:
        name = _simple_name(base)
        return self._registry.get_token(name) if name else None

    def _constructor_dependencies(self, node: ast.ClassDef) -> list[str]:
        init = next(
            (stmt for stmt in node.body if isinstance(stmt, ast.FunctionDef) and stmt.name == "__init__"),
            None,
        )
        if init is not None:
            dependencies = []
            for arg in _positional_args(init, node.name)[1:]:
                if arg.annotation is None:
                    raise MissingParameterTypeError(arg.arg, node.name)
                dependencies.append(annotation_text(arg.annotation))
            return dependencies

        if _is_dataclass(node):
            return [annotation_text(stmt.annotation) for stmt in _dataclass_init_fields(node)]

        return []

    def _function_dependencies(self, node: FunctionNode) -> list[str]:
        dependencies = []
        for arg in _positional_args(node, node.name):
            if arg.annotation is not None:
                dependencies.append(annotation_text(arg.annotation))
            elif self._config.strict_factory_parameters:
                raise MissingParameterTypeError(arg.arg, node.name)
            else:
                dependencies.append(self._config.unknown_type_name)
        return dependencies


def _positional_args(node: FunctionNode, declaration_name: str) -> list[ast.arg]:
    """Positional parameters of a callable, rejecting keyword-only ones that have no default."""
    for arg, default in zip(node.args.kwonlyargs, node.args.kw_defaults):
        if default is None:
            raise UnsupportedParameterError(arg.arg, declaration_name)
    return [*node.args.posonlyargs, *node.args.args]


def _is_dataclass(node: ast.ClassDef) -> bool:
    return any(_simple_name(decorator) == "dataclass" for decorator in node.decorator_list)


def _dataclass_init_fields(node: ast.ClassDef) -> list[ast.AnnAssign]:
    result = []
    for stmt in node.body:
        if not isinstance(stmt, ast.AnnAssign) or not isinstance(stmt.target, ast.Name):
            continue
        if _simple_name(stmt.annotation) == "ClassVar":
            continue
        if _excluded_from_init(stmt.value):
            continue
        result.append(stmt)
    return result


def _excluded_from_init(value: ast.expr | None) -> bool:
    if not isinstance(value, ast.Call) or _simple_name(value.func) != "field":
        return False
    return any(
        kw.arg == "init" and isinstance(kw.value, ast.Constant) and kw.value.value is False for kw in value.keywords
    )
