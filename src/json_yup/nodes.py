"""Schema node kinds and the structural prefix-notation check."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from enum import Enum
from typing import Final

DEFAULT_MARKER: Final[str] = os.environ.get("JSON_YUP_MARKER", "yup.")
SHAPE_CONTINUATION_MARKER: Final[str] = "object"


class NodeKind(str, Enum):
    INVOCATION = "invocation"
    PLAIN_LIST = "plain_list"
    MAPPING = "mapping"
    SCALAR = "scalar"


def is_sequence(node: object) -> bool:
    return isinstance(node, (list, tuple))


def is_mapping(node: object) -> bool:
    return isinstance(node, Mapping)


def is_regex(node: object) -> bool:
    return isinstance(node, re.Pattern)


def is_prefix_notation(node: object, marker: str = DEFAULT_MARKER) -> bool:
    """Return True when ``node`` reads as ``[name, ...args]`` or a chain of such calls.

    The head must be a string containing ``marker``, or a sequence whose own head
    passes the same test.
    """
    if not is_sequence(node) or not node:
        return False
    head = node[0]
    if is_sequence(head):
        return is_prefix_notation(head, marker)
    return isinstance(head, str) and marker in head


def classify(node: object, marker: str = DEFAULT_MARKER) -> NodeKind:
    if is_sequence(node):
        if is_prefix_notation(node, marker):
            return NodeKind.INVOCATION
        return NodeKind.PLAIN_LIST
    if is_mapping(node):
        return NodeKind.MAPPING
    return NodeKind.SCALAR


def invocation_name(name: object) -> object:
    """Unwrap ``['yup.x']`` style 1-element name wrappers."""
    if is_sequence(name):
        return name[0] if name else None
    return name


def bare_name(name: object, marker: str = DEFAULT_MARKER) -> str | None:
    """Slice ``name`` after the first occurrence of ``marker``; None when absent."""
    if not isinstance(name, str) or not name:
        return None
    index = name.find(marker)
    if index < 0:
        return None
    return name[index + len(marker):]
