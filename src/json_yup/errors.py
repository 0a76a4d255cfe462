"""Structured error types for schema compilation and validation."""

from __future__ import annotations

from dataclasses import dataclass, field


class JsonYupError(Exception):
    """Base class for structured json-yup errors."""


class SchemaCompileError(JsonYupError):
    """Failure raised at the schema node that could not be compiled."""


class NameResolutionError(SchemaCompileError):
    """Invocation name matched no custom validator and no library builder."""

    def __init__(self, name: object, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"Could not find validator {name}")


class ArgumentShapeError(SchemaCompileError):
    """An argument did not have the shape its builder requires."""

    def __init__(self, builder: str, argument: object, message: str) -> None:
        self.builder = builder
        self.argument = argument
        super().__init__(message)


@dataclass(eq=False)
class CompilationError(JsonYupError):
    """Wraps compile failures at the public entry point with the offending schema."""

    node: str
    message: str

    def __str__(self) -> str:
        return f"Could not validate {self.node}\n{self.message}"


@dataclass(eq=False)
class ValidationError(JsonYupError):
    """Raised by a compiled validator when a value does not satisfy it."""

    errors: list[str]
    value: object = None
    path: str | None = None
    inner: list["ValidationError"] = field(default_factory=list)

    def __str__(self) -> str:
        if len(self.errors) == 1:
            return self.errors[0]
        return f"{len(self.errors)} errors occurred: " + "; ".join(self.errors)
