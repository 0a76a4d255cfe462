"""Custom validator registry consulted before the primitive library."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping

from .nodes import DEFAULT_MARKER
from .primitives import ObjectSchema, yup

Builder = Callable[..., object]


class ValidatorRegistry(Mapping[str, Builder]):
    """Read-only table of invocation name to builder.

    Registries never change after construction; ``with_validator`` and
    ``without_validator`` return new tables.
    """

    def __init__(self, validators: Mapping[str, Builder] | None = None) -> None:
        self._validators: dict[str, Builder] = {}
        for name, builder in (validators or {}).items():
            if not isinstance(name, str) or not name:
                raise TypeError(f"Custom validator names must be non-empty strings, got {name!r}")
            if not callable(builder):
                raise TypeError(f"Custom validator {name!r} is not callable")
            self._validators[name] = builder

    def __getitem__(self, name: str) -> Builder:
        return self._validators[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._validators)

    def __len__(self) -> int:
        return len(self._validators)

    def __repr__(self) -> str:
        return f"ValidatorRegistry({sorted(self._validators)!r})"

    def lookup(self, name: object) -> Builder | None:
        if not isinstance(name, str):
            return None
        return self._validators.get(name)

    def with_validator(self, name: str, builder: Builder) -> "ValidatorRegistry":
        return ValidatorRegistry({**self._validators, name: builder})

    def without_validator(self, name: str) -> "ValidatorRegistry":
        return ValidatorRegistry({key: value for key, value in self._validators.items() if key != name})


def _object_shape(fields: Mapping[str, object] | None = None) -> ObjectSchema:
    return yup.object().shape(fields)


def builtin_validators(marker: str = DEFAULT_MARKER) -> dict[str, Builder]:
    return {f"{marker}object.shape": _object_shape}


_registry = ValidatorRegistry(builtin_validators())


def default_registry() -> ValidatorRegistry:
    """Snapshot of the process-wide registry."""
    return _registry


def add_custom_validator(name: str, builder: Builder) -> None:
    global _registry
    _registry = _registry.with_validator(name, builder)


def remove_custom_validator(name: str) -> None:
    global _registry
    if name not in _registry:
        raise KeyError(name)
    _registry = _registry.without_validator(name)


def clear_custom_validators() -> None:
    """Reset the process-wide registry to the built-in validators."""
    global _registry
    _registry = ValidatorRegistry(builtin_validators())


def get_custom_validator(name: object) -> Builder | None:
    return _registry.lookup(name)
