"""Compile prefix-notation schema data into live validators.

A schema is plain data: ``[["yup.number"], ["yup.required"], ["yup.min", 5]]``
is the chain ``yup.number().required().min(5)``, and a mapping of field name to
schema fragment compiles to a shape for ``object().shape(...)``.
"""

from __future__ import annotations

import json
import os
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Final

import structlog

from .errors import ArgumentShapeError, CompilationError, NameResolutionError
from .nodes import (
    DEFAULT_MARKER,
    SHAPE_CONTINUATION_MARKER,
    NodeKind,
    bare_name,
    classify,
    invocation_name,
    is_mapping,
    is_regex,
    is_sequence,
)
from .primitives import yup
from .registry import ValidatorRegistry, builtin_validators, default_registry

logger = structlog.get_logger(__name__)

_DIAGNOSTICS: bool = os.environ.get("JSON_YUP_DEBUG", "0") == "1"
_PATTERN_BUILDER: Final[str] = "matches"
_CAMEL_BOUNDARY: Final = re.compile(r"(?<!^)(?=[A-Z])")


def set_diagnostics(enabled: bool) -> bool:
    """Toggle diagnostic logging for every compiler; returns the previous setting."""
    global _DIAGNOSTICS
    previous = _DIAGNOSTICS
    _DIAGNOSTICS = bool(enabled)
    return previous


set_debug = set_diagnostics


def diagnostics_enabled() -> bool:
    return _DIAGNOSTICS


def _trace(event: str, **fields: object) -> None:
    if _DIAGNOSTICS:
        logger.debug(event, **fields)


def _snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _lookup_member(target: object, name: str) -> Callable[..., object] | None:
    # Plain data accumulators (e.g. a ref plus its message) are never receivers.
    if target is None or is_sequence(target) or is_mapping(target):
        return None
    if not name or name.startswith("_"):
        return None
    for candidate in dict.fromkeys((name, _snake_case(name))):
        member = getattr(target, candidate, None)
        if callable(member):
            return member
    return None


def _is_placeholder(argument: object) -> bool:
    # Empty lists and mappings are real arguments: ["yup.oneOf", []] allows nothing.
    return argument is None or argument == ""


def _json_default(value: object) -> object:
    if is_regex(value):
        return value.pattern
    return repr(value)


def serialize_node(node: object) -> str:
    try:
        return json.dumps(node, indent=4, default=_json_default)
    except (TypeError, ValueError):
        return repr(node)


def _coerce_pattern_argument(name: str, raw_args: list[object]) -> list[object]:
    first = raw_args[0] if raw_args else None
    if is_regex(first):
        return raw_args
    if not isinstance(first, str):
        raise ArgumentShapeError(
            name,
            first,
            f"The first argument to {name}() must be either a regular expression or a string",
        )
    try:
        pattern = re.compile(first)
    except re.error as exc:
        raise ArgumentShapeError(name, first, f"Invalid regular expression {first!r} for {name}(): {exc}") from exc
    return [pattern, *raw_args[1:]]


@dataclass(frozen=True)
class ResolvedBuilder:
    """A builder found for an invocation name, already bound to its receiver."""

    name: str
    bare_name: str | None
    func: Callable[..., object]
    custom: bool = False

    def __call__(self, *args: object) -> object:
        return self.func(*args)


class SchemaCompiler:
    """Walks schema data and calls builders from a primitive library.

    ``library`` is the root namespace of builders (``yup`` by default) and
    ``registry`` the custom validators consulted first. Instances hold no
    per-compilation state and can be shared across threads.
    """

    def __init__(
        self,
        library: object = None,
        registry: Mapping[str, Callable[..., object]] | None = None,
        *,
        marker: str = DEFAULT_MARKER,
        shape_marker: str | None = SHAPE_CONTINUATION_MARKER,
    ) -> None:
        if not isinstance(marker, str) or not marker:
            raise ValueError("marker must be a non-empty string")
        if registry is None:
            registry = default_registry()
            if marker != DEFAULT_MARKER:
                # Built-in composites are spelled with this compiler's marker.
                for name, builder in builtin_validators(marker).items():
                    if name not in registry:
                        registry = registry.with_validator(name, builder)
        elif not isinstance(registry, ValidatorRegistry):
            registry = ValidatorRegistry(registry)
        self.library = yup if library is None else library
        self.registry: ValidatorRegistry = registry
        self.marker = marker
        self.shape_marker = shape_marker

    def resolve(self, name: object, context: object = None) -> ResolvedBuilder:
        """Find the builder for ``name``: custom registry, then ``context``, then the library root."""
        name = invocation_name(name)

        custom = self.registry.lookup(name)
        if custom is not None:
            _trace("schema_name_resolved", name=name, source="custom")
            return ResolvedBuilder(name=name, bare_name=None, func=custom, custom=True)

        bare = bare_name(name, self.marker)
        if bare:
            for source, target in (("context", context), ("library", self.library)):
                member = _lookup_member(target, bare)
                if member is not None:
                    _trace("schema_name_resolved", name=name, source=source)
                    return ResolvedBuilder(name=name, bare_name=bare, func=member)

        raise NameResolutionError(name)

    def compile_invocation(self, node: object, context: object = None) -> object:
        items = list(node) if is_sequence(node) else [node]
        if not items:
            raise NameResolutionError(None, "Empty invocation has no validator name")
        name, raw_args = items[0], items[1:]

        # [["yup.array"], ["yup.of", ...]] used in name position starts its own chain.
        if is_sequence(name):
            return self.compile_chain(items)

        builder = self.resolve(name, context)
        if not builder.custom and builder.bare_name == _PATTERN_BUILDER:
            raw_args = _coerce_pattern_argument(builder.name, raw_args)

        arguments = self.compile(raw_args)
        _trace("schema_invocation_compiled", name=builder.name, chained=context is not None)

        if isinstance(arguments, list):
            if all(_is_placeholder(argument) for argument in arguments):
                return builder()
            return builder(*arguments)
        return builder(arguments)

    def compile_chain(self, node: object, context: object = None) -> object:
        """Fold ``[inv0, inv1, ...]`` left to right, each call refining the previous result."""
        items = list(node)
        accumulator = self.compile_invocation(items[0], context)

        for item in items[1:]:
            if is_sequence(item):
                accumulator = self.compile_invocation(item, accumulator)
            elif self.shape_marker is not None and isinstance(item, str) and item == self.shape_marker:
                _trace("schema_shape_continuation", marker=item)
                accumulator = self.compile_shape({})
            elif isinstance(accumulator, list):
                # [["yup.ref", "name"], "message"] keeps trailing literals alongside the ref.
                accumulator = [*accumulator, item]
            else:
                accumulator = [accumulator, item]

        return accumulator

    def compile_shape(self, mapping: Mapping[str, object]) -> dict[str, object]:
        return {key: self.compile(value) for key, value in mapping.items()}

    def compile(self, node: object, context: object = None) -> object:
        kind = classify(node, self.marker)
        if kind is NodeKind.INVOCATION:
            return self.compile_chain(node, context)
        if kind is NodeKind.PLAIN_LIST:
            return [self.compile(item) for item in node]
        if kind is NodeKind.MAPPING:
            return self.compile_shape(node)
        return node

    def required_object_chain(self, fields: object) -> list[list[object]]:
        marker = self.marker
        return [[f"{marker}object"], [f"{marker}required"], [f"{marker}shape", fields]]

    def transform(self, node: object) -> object:
        """Compile ``node``; a bare mapping becomes a required object of that shape."""
        try:
            if not is_sequence(node):
                return self.compile(self.required_object_chain(node))
            return self.compile(node)
        except (NameResolutionError, ArgumentShapeError) as exc:
            _trace("schema_compilation_failed", error=str(exc))
            raise CompilationError(node=serialize_node(node), message=str(exc)) from exc


def transform(node: object, *, registry: Mapping[str, Callable[..., object]] | None = None) -> object:
    return SchemaCompiler(registry=registry).transform(node)


def transform_all(
    node: object,
    context: object = None,
    *,
    registry: Mapping[str, Callable[..., object]] | None = None,
) -> object:
    return SchemaCompiler(registry=registry).compile(node, context)


def transform_object(
    mapping: Mapping[str, object],
    *,
    registry: Mapping[str, Callable[..., object]] | None = None,
) -> dict[str, object]:
    return SchemaCompiler(registry=registry).compile_shape(mapping)


convert_json_to_yup = transform
