"""
Errors raised while generating dependency wiring.

Every error here is fatal: generation stops at the first one and no output is written.
"""

from __future__ import annotations


class CodegenError(Exception):
    """Base class for all generation failures."""


class DuplicateTokenError(CodegenError):
    """Raised when two declarations register the same token id."""

    def __init__(self, token_id: str, first_path: str, second_path: str):
        self.token_id = token_id
        self.first_path = first_path
        self.second_path = second_path
        super().__init__(
            f"Duplicate token '{token_id}': declared in {first_path} and again in {second_path}"
        )


class UnresolvedInterfaceError(CodegenError):
    """Raised when an interface-bound injectable names an interface without a token."""

    def __init__(self, target_name: str, interface_name: str):
        self.target_name = target_name
        self.interface_name = interface_name
        super().__init__(
            f"'{target_name}' is bound to interface '{interface_name}', "
            f"but '{interface_name}' has no @Token declaration"
        )


class UnresolvedDependencyError(CodegenError):
    """Raised when a dependency type name has no corresponding token."""

    def __init__(self, target_name: str, position: int, type_name: str):
        self.target_name = target_name
        self.position = position
        self.type_name = type_name
        super().__init__(
            f"'{target_name}': dependency #{position} of type '{type_name}' has no @Token declaration"
        )


class UnresolvedTokenError(CodegenError):
    """Raised when an injectable is registered under a name that has no token."""

    def __init__(self, target_name: str, token_name: str):
        self.target_name = target_name
        self.token_name = token_name
        super().__init__(
            f"'{target_name}' is registered under '{token_name}', but '{token_name}' has no @Token declaration"
        )


class MissingParameterTypeError(CodegenError):
    """Raised when a parameter has no annotation to infer its dependency from."""

    def __init__(self, parameter_name: str, declaration_name: str):
        self.parameter_name = parameter_name
        self.declaration_name = declaration_name
        super().__init__(
            f"Parameter '{parameter_name}' of '{declaration_name}' has no explicit type annotation"
        )


class UnsupportedParameterError(CodegenError):
    """Raised when a required parameter cannot be filled by positional injection."""

    def __init__(self, parameter_name: str, declaration_name: str):
        self.parameter_name = parameter_name
        self.declaration_name = declaration_name
        super().__init__(
            f"Parameter '{parameter_name}' of '{declaration_name}' is keyword-only without a default "
            "and cannot be injected"
        )


class SourceParseError(CodegenError):
    """Raised when a source file cannot be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse {path}: {reason}")


class ConfigurationError(CodegenError):
    """Raised when generator configuration is invalid."""
