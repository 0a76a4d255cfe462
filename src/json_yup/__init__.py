"""json-yup public API."""

from .compiler import (
    ResolvedBuilder,
    SchemaCompiler,
    convert_json_to_yup,
    diagnostics_enabled,
    serialize_node,
    set_debug,
    set_diagnostics,
    transform,
    transform_all,
    transform_object,
)
from .errors import (
    ArgumentShapeError,
    CompilationError,
    JsonYupError,
    NameResolutionError,
    SchemaCompileError,
    ValidationError,
)
from .nodes import DEFAULT_MARKER, NodeKind, classify, is_prefix_notation
from .primitives import MISSING, Reference, Schema, yup
from .registry import (
    ValidatorRegistry,
    add_custom_validator,
    clear_custom_validators,
    default_registry,
    get_custom_validator,
    remove_custom_validator,
)

__all__ = [
    "transform",
    "transform_all",
    "transform_object",
    "convert_json_to_yup",
    "SchemaCompiler",
    "ResolvedBuilder",
    "serialize_node",
    "set_diagnostics",
    "set_debug",
    "diagnostics_enabled",
    "DEFAULT_MARKER",
    "NodeKind",
    "classify",
    "is_prefix_notation",
    "yup",
    "Schema",
    "Reference",
    "MISSING",
    "ValidatorRegistry",
    "add_custom_validator",
    "remove_custom_validator",
    "clear_custom_validators",
    "default_registry",
    "get_custom_validator",
    "JsonYupError",
    "SchemaCompileError",
    "NameResolutionError",
    "ArgumentShapeError",
    "CompilationError",
    "ValidationError",
]
