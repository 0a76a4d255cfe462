"""Immutable, chainable validation schemas modelled on the yup library.

Every refinement (``required()``, ``min(5)``, ``shape({...})``) returns a new
schema, so a schema can be shared and extended without affecting other users.
Schemas validate synchronously through :meth:`Schema.validate` and
:meth:`Schema.is_valid`.
"""

from __future__ import annotations

import math
import numbers
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import ClassVar, Final

from .errors import ValidationError


class _Missing:
    """Sentinel for an absent value (an object key that is not present)."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()
_INVALID: Final = object()

_MESSAGES: Final[dict[str, str]] = {
    "required": "${path} is a required field",
    "nullable": "${path} cannot be null",
    "type": "${path} must be a `${type}` type",
    "one_of": "${path} must be one of the following values: ${values}",
    "not_one_of": "${path} must not be one of the following values: ${values}",
    "test": "${path} is invalid",
    "number.min": "${path} must be greater than or equal to ${limit}",
    "number.max": "${path} must be less than or equal to ${limit}",
    "number.more_than": "${path} must be greater than ${limit}",
    "number.less_than": "${path} must be less than ${limit}",
    "number.positive": "${path} must be a positive number",
    "number.negative": "${path} must be a negative number",
    "number.integer": "${path} must be an integer",
    "string.min": "${path} must be at least ${limit} characters",
    "string.max": "${path} must be at most ${limit} characters",
    "string.length": "${path} must be exactly ${limit} characters",
    "string.matches": '${path} must match the following: "${regex}"',
    "string.email": "${path} must be a valid email",
    "string.url": "${path} must be a valid URL",
    "string.lowercase": "${path} must be a lowercase string",
    "string.uppercase": "${path} must be a upper case string",
    "array.min": "${path} field must have at least ${limit} items",
    "array.max": "${path} field must have less than or equal to ${limit} items",
    "array.length": "${path} must have ${limit} items",
    "object.no_unknown": "${path} field has unspecified keys: ${unknown}",
}

_PLACEHOLDER_RE: Final = re.compile(r"\$?\{(\w+)\}")
_EMAIL_RE: Final = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_URL_RE: Final = re.compile(r"^(https?|ftp)://[^\s/$.?#].[^\s]*$", re.IGNORECASE)


def _format(message: str, **params: object) -> str:
    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in params:
            return match.group(0)
        value = params[key]
        if isinstance(value, (list, tuple)):
            return ", ".join(str(item) for item in value)
        return str(value)

    return _PLACEHOLDER_RE.sub(_sub, message)


@dataclass(frozen=True)
class Reference:
    """Placeholder for a sibling value, resolved when the enclosing object validates."""

    key: str

    def resolve(self, parent: object) -> object:
        current = parent
        for part in self.key.split("."):
            if not isinstance(current, Mapping) or part not in current:
                return MISSING
            current = current[part]
        return current


def _resolve(value: object, parent: object) -> object:
    if isinstance(value, Reference):
        return value.resolve(parent)
    if isinstance(value, (list, tuple)):
        return tuple(_resolve(item, parent) for item in value)
    return value


def _unset(value: object) -> bool:
    return value is None or value is MISSING


@dataclass(frozen=True)
class Check:
    name: str
    message: str
    predicate: Callable[[object, Mapping[str, object]], bool]
    params: Mapping[str, object] = field(default_factory=dict)
    exclusive: bool = False


@dataclass(frozen=True, eq=False)
class Schema:
    """Base schema: presence, nullability, allowed values and custom tests."""

    type_name: ClassVar[str] = "mixed"

    checks: tuple[Check, ...] = ()
    required_message: str | None = None
    is_nullable: bool = False
    default_value: object = MISSING
    allowed: tuple[object, ...] | None = None
    allowed_message: str | None = None
    forbidden: tuple[object, ...] = ()
    forbidden_message: str | None = None
    label_text: str | None = None
    transforms: tuple[Callable[[object], object], ...] = ()

    def _with_check(self, check: Check) -> "Schema":
        checks = self.checks
        if check.exclusive:
            checks = tuple(existing for existing in checks if existing.name != check.name)
        return replace(self, checks=checks + (check,))

    def required(self, message: str | None = None) -> "Schema":
        return replace(self, required_message=message or _MESSAGES["required"])

    def not_required(self) -> "Schema":
        return replace(self, required_message=None)

    def optional(self) -> "Schema":
        return self.not_required()

    def nullable(self, is_nullable: bool = True) -> "Schema":
        return replace(self, is_nullable=bool(is_nullable))

    def default(self, value: object) -> "Schema":
        return replace(self, default_value=value)

    def label(self, text: str) -> "Schema":
        return replace(self, label_text=text)

    def one_of(self, values, message: str | None = None) -> "Schema":
        return replace(self, allowed=tuple(values), allowed_message=message or _MESSAGES["one_of"])

    def not_one_of(self, values, message: str | None = None) -> "Schema":
        return replace(self, forbidden=tuple(values), forbidden_message=message or _MESSAGES["not_one_of"])

    def test(self, name: str, message: str | None, predicate: Callable[[object], bool]) -> "Schema":
        if not callable(predicate):
            raise TypeError(f"test {name!r} needs a callable predicate")
        return self._with_check(
            Check(name=name, message=message or _MESSAGES["test"], predicate=lambda value, _params: bool(predicate(value)))
        )

    def get_default(self) -> object:
        return self.default_value

    def _coerce(self, value: object) -> object:
        return value

    def _is_empty(self, value: object) -> bool:
        return False

    def _validate_inner(self, value: object, path: str | None, errors: list[str], inner: list[ValidationError]) -> object:
        return value

    def validate(self, value: object = MISSING, parent: object = None, path: str | None = None) -> object:
        """Return the cast value or raise :class:`ValidationError` listing every failure."""
        label = path or self.label_text or "this"
        if value is MISSING:
            value = self.get_default()

        if _unset(value):
            if self.required_message is not None:
                raise ValidationError([_format(self.required_message, path=label)], value, path)
            if value is None and not self.is_nullable:
                raise ValidationError([_format(_MESSAGES["nullable"], path=label)], value, path)
            return value

        cast = self._coerce(value)
        if cast is _INVALID:
            raise ValidationError([_format(_MESSAGES["type"], path=label, type=self.type_name)], value, path)
        for transform in self.transforms:
            cast = transform(cast)

        if self.required_message is not None and self._is_empty(cast):
            raise ValidationError([_format(self.required_message, path=label)], cast, path)

        errors: list[str] = []
        if self.allowed is not None:
            allowed = _resolve(self.allowed, parent)
            if cast not in allowed:
                errors.append(_format(self.allowed_message, path=label, values=[v for v in allowed if v is not MISSING]))
        if self.forbidden:
            forbidden = _resolve(self.forbidden, parent)
            if cast in forbidden:
                errors.append(_format(self.forbidden_message, path=label, values=[v for v in forbidden if v is not MISSING]))

        for check in self.checks:
            params = {key: _resolve(param, parent) for key, param in check.params.items()}
            if not check.predicate(cast, params):
                errors.append(_format(check.message, path=label, **params))

        inner: list[ValidationError] = []
        cast = self._validate_inner(cast, path, errors, inner)
        if errors:
            raise ValidationError(errors, cast, path, inner)
        return cast

    def is_valid(self, value: object = MISSING) -> bool:
        try:
            self.validate(value)
        except ValidationError:
            return False
        return True


def _limit_check(name: str, message: str, limit: object, compare: Callable[[object, object], bool], size=None) -> Check:
    def predicate(value: object, params: Mapping[str, object]) -> bool:
        bound = params["limit"]
        if _unset(bound):
            return True
        try:
            return compare(value if size is None else size(value), bound)
        except TypeError:
            # A referenced sibling of another type never satisfies the bound.
            return False

    return Check(name=name, message=message, predicate=predicate, params={"limit": limit}, exclusive=True)


@dataclass(frozen=True, eq=False)
class MixedSchema(Schema):
    type_name: ClassVar[str] = "mixed"


@dataclass(frozen=True, eq=False)
class NumberSchema(Schema):
    type_name: ClassVar[str] = "number"

    def _coerce(self, value: object) -> object:
        if isinstance(value, bool):
            return _INVALID
        if isinstance(value, numbers.Integral):
            return value
        if isinstance(value, numbers.Real):
            return _INVALID if math.isnan(value) else value
        if isinstance(value, str):
            text = value.strip()
            try:
                return int(text)
            except ValueError:
                pass
            try:
                parsed = float(text)
            except ValueError:
                return _INVALID
            return _INVALID if math.isnan(parsed) else parsed
        return _INVALID

    def min(self, limit, message: str | None = None) -> "NumberSchema":
        return self._with_check(_limit_check("min", message or _MESSAGES["number.min"], limit, lambda v, b: v >= b))

    def max(self, limit, message: str | None = None) -> "NumberSchema":
        return self._with_check(_limit_check("max", message or _MESSAGES["number.max"], limit, lambda v, b: v <= b))

    def more_than(self, limit, message: str | None = None) -> "NumberSchema":
        return self._with_check(_limit_check("min", message or _MESSAGES["number.more_than"], limit, lambda v, b: v > b))

    def less_than(self, limit, message: str | None = None) -> "NumberSchema":
        return self._with_check(_limit_check("max", message or _MESSAGES["number.less_than"], limit, lambda v, b: v < b))

    def positive(self, message: str | None = None) -> "NumberSchema":
        return self.more_than(0, message or _MESSAGES["number.positive"])

    def negative(self, message: str | None = None) -> "NumberSchema":
        return self.less_than(0, message or _MESSAGES["number.negative"])

    def integer(self, message: str | None = None) -> "NumberSchema":
        return self._with_check(
            Check(
                name="integer",
                message=message or _MESSAGES["number.integer"],
                predicate=lambda value, _params: isinstance(value, int) or float(value).is_integer(),
                exclusive=True,
            )
        )


@dataclass(frozen=True, eq=False)
class StringSchema(Schema):
    type_name: ClassVar[str] = "string"

    def _coerce(self, value: object) -> object:
        if isinstance(value, str):
            return value
        if isinstance(value, numbers.Real) and not isinstance(value, bool):
            return str(value)
        return _INVALID

    def _is_empty(self, value: object) -> bool:
        return value == ""

    def min(self, limit, message: str | None = None) -> "StringSchema":
        return self._with_check(_limit_check("min", message or _MESSAGES["string.min"], limit, lambda v, b: v >= b, size=len))

    def max(self, limit, message: str | None = None) -> "StringSchema":
        return self._with_check(_limit_check("max", message or _MESSAGES["string.max"], limit, lambda v, b: v <= b, size=len))

    def length(self, limit, message: str | None = None) -> "StringSchema":
        return self._with_check(_limit_check("length", message or _MESSAGES["string.length"], limit, lambda v, b: v == b, size=len))

    def matches(self, pattern, message=None) -> "StringSchema":
        exclude_empty = False
        if isinstance(message, Mapping):
            exclude_empty = bool(message.get("excludeEmptyString", message.get("exclude_empty_string", False)))
            message = message.get("message")
        regex = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)

        def predicate(value: object, _params: Mapping[str, object]) -> bool:
            if exclude_empty and value == "":
                return True
            return regex.search(value) is not None

        return self._with_check(
            Check(
                name="matches",
                message=message or _MESSAGES["string.matches"],
                predicate=predicate,
                params={"regex": regex.pattern},
            )
        )

    def email(self, message: str | None = None) -> "StringSchema":
        return self.matches(_EMAIL_RE, {"message": message or _MESSAGES["string.email"], "excludeEmptyString": True})

    def url(self, message: str | None = None) -> "StringSchema":
        return self.matches(_URL_RE, {"message": message or _MESSAGES["string.url"], "excludeEmptyString": True})

    def lowercase(self, message: str | None = None) -> "StringSchema":
        return self._with_check(
            Check(name="lowercase", message=message or _MESSAGES["string.lowercase"], predicate=lambda v, _p: v == v.lower())
        )

    def uppercase(self, message: str | None = None) -> "StringSchema":
        return self._with_check(
            Check(name="uppercase", message=message or _MESSAGES["string.uppercase"], predicate=lambda v, _p: v == v.upper())
        )

    def trim(self) -> "StringSchema":
        return replace(self, transforms=self.transforms + (str.strip,))


@dataclass(frozen=True, eq=False)
class BooleanSchema(Schema):
    type_name: ClassVar[str] = "boolean"

    def _coerce(self, value: object) -> object:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered == "true":
                return True
            if lowered == "false":
                return False
        return _INVALID


@dataclass(frozen=True, eq=False)
class ObjectSchema(Schema):
    type_name: ClassVar[str] = "object"

    fields: Mapping[str, Schema] = field(default_factory=dict)
    unknown_message: str | None = None

    def get_default(self) -> object:
        """An object with fields defaults to the defaults of its fields, like yup."""
        if self.default_value is not MISSING or not self.fields:
            return self.default_value
        defaults = {}
        for key, schema in self.fields.items():
            value = schema.get_default()
            if value is not MISSING:
                defaults[key] = value
        return defaults

    def _coerce(self, value: object) -> object:
        if isinstance(value, Mapping):
            return dict(value)
        return _INVALID

    def shape(self, fields: Mapping[str, object] | None = None) -> "ObjectSchema":
        merged = dict(self.fields)
        for key, value in (fields or {}).items():
            if isinstance(value, Mapping):
                value = ObjectSchema().shape(value)
            if not isinstance(value, Schema):
                raise TypeError(f"shape field {key!r} must be a schema, got {type(value).__name__}")
            merged[key] = value
        return replace(self, fields=merged)

    def no_unknown(self, message: str | None = None) -> "ObjectSchema":
        return replace(self, unknown_message=message or _MESSAGES["object.no_unknown"])

    def _validate_inner(self, value: object, path: str | None, errors: list[str], inner: list[ValidationError]) -> object:
        out = dict(value)
        for key, schema in self.fields.items():
            child_path = f"{path}.{key}" if path else key
            try:
                result = schema.validate(value.get(key, MISSING), parent=value, path=child_path)
            except ValidationError as err:
                errors.extend(err.errors)
                inner.append(err)
                continue
            if result is not MISSING:
                out[key] = result
        if self.unknown_message is not None:
            unknown = [key for key in value if key not in self.fields]
            if unknown:
                errors.append(_format(self.unknown_message, path=path or self.label_text or "this", unknown=unknown))
        return out


@dataclass(frozen=True, eq=False)
class ArraySchema(Schema):
    type_name: ClassVar[str] = "array"

    inner_type: Schema | None = None

    def _coerce(self, value: object) -> object:
        if isinstance(value, (list, tuple)):
            return list(value)
        return _INVALID

    def of(self, schema: Schema) -> "ArraySchema":
        if not isinstance(schema, Schema):
            raise TypeError(f"array.of() needs a schema, got {type(schema).__name__}")
        return replace(self, inner_type=schema)

    def min(self, limit, message: str | None = None) -> "ArraySchema":
        return self._with_check(_limit_check("min", message or _MESSAGES["array.min"], limit, lambda v, b: v >= b, size=len))

    def max(self, limit, message: str | None = None) -> "ArraySchema":
        return self._with_check(_limit_check("max", message or _MESSAGES["array.max"], limit, lambda v, b: v <= b, size=len))

    def length(self, limit, message: str | None = None) -> "ArraySchema":
        return self._with_check(_limit_check("length", message or _MESSAGES["array.length"], limit, lambda v, b: v == b, size=len))

    def _validate_inner(self, value: object, path: str | None, errors: list[str], inner: list[ValidationError]) -> object:
        if self.inner_type is None:
            return value
        out = []
        for idx, item in enumerate(value):
            try:
                out.append(self.inner_type.validate(item, parent=value, path=f"{path or ''}[{idx}]"))
            except ValidationError as err:
                errors.extend(err.errors)
                inner.append(err)
                out.append(item)
        return out


class YupNamespace:
    """Root namespace of builders; each call starts a new chain."""

    def mixed(self) -> MixedSchema:
        return MixedSchema()

    def string(self) -> StringSchema:
        return StringSchema()

    def number(self) -> NumberSchema:
        return NumberSchema()

    def boolean(self) -> BooleanSchema:
        return BooleanSchema()

    def object(self, fields: Mapping[str, object] | None = None) -> ObjectSchema:
        schema = ObjectSchema()
        return schema.shape(fields) if fields else schema

    def array(self, of: Schema | None = None) -> ArraySchema:
        schema = ArraySchema()
        return schema.of(of) if of is not None else schema

    def ref(self, key: str) -> Reference:
        if not isinstance(key, str) or not key:
            raise TypeError("ref() needs a non-empty key")
        return Reference(key)

    def __repr__(self) -> str:
        return "yup"


yup: Final = YupNamespace()
