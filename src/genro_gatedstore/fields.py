# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Field value classification.

Every value held by a GatedStore field falls into one of five kinds.
The path resolver dispatches on the kind instead of inspecting types
inline:

- PRIMITIVE: str, int, float, bool or None
- ARRAY: list or tuple, opaque to permission checks
- OBJECT: a plain mapping not yet promoted to a GatedStore
- NODE: a nested GatedStore
- COMPUTED: a zero-argument callable evaluated on read
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .store import GatedStore

JSONPrimitive = Union[str, int, float, bool, None]
StoreValue = Union['GatedStore', JSONPrimitive, Mapping[str, Any], list, Callable[[], Any]]


class FieldKind(str, Enum):
    """The closed set of shapes a field value can take."""

    PRIMITIVE = 'primitive'
    ARRAY = 'array'
    OBJECT = 'object'
    NODE = 'node'
    COMPUTED = 'computed'


def classify(value: Any) -> FieldKind:
    """Return the FieldKind of a value.

    Example:
        >>> classify(5)
        <FieldKind.PRIMITIVE: 'primitive'>
        >>> classify({'a': 1})
        <FieldKind.OBJECT: 'object'>
    """
    from .store import GatedStore

    if isinstance(value, GatedStore):
        return FieldKind.NODE
    if isinstance(value, Mapping):
        return FieldKind.OBJECT
    if isinstance(value, (list, tuple)):
        return FieldKind.ARRAY
    if callable(value):
        return FieldKind.COMPUTED
    return FieldKind.PRIMITIVE


def is_vacant(value: Any) -> bool:
    """True if an intermediate write hop holding value counts as missing.

    Only falsy primitives are vacant: None, False, 0 and ''. Empty
    arrays, objects and stores are containers and are never vacant.
    """
    return classify(value) is FieldKind.PRIMITIVE and not value
