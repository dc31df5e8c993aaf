# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""GatedStore - A hierarchical key-value store with per-field permissions.

This module provides the GatedStore class, the core container of the
genro-gatedstore library. Every read and write that crosses a GatedStore
boundary is checked against the permission of the field being accessed.

Key Features:
    - **Hierarchical storage**: Nested GatedStore instances forming a tree
    - **Path navigation**: Colon-delimited paths ('a:b:c')
    - **Permission gating**: 'r', 'w', 'rw' or 'none' per field, looked up
      per concrete type with a per-instance default policy
    - **Auto-vivification**: Missing intermediate stores are created on
      write when the hop is writable
    - **Computed fields**: Zero-argument callables evaluated on read

Path Syntax:
    - Colon-delimited hops: 'parent:child:grandchild'
    - List items by index below a store: 'tags:0'
    - No escaping and no wildcards

Example:
    Basic usage::

        store = GatedStore()
        store.write('config:database:host', 'localhost')
        store.write('config:database:port', 5432)

        print(store.read('config:database:host'))  # 'localhost'

    With declared permissions::

        class UserStore(GatedStore):
            _restrictions = {'name': 'r', 'password': 'w'}

            @restrict('r')
            def greeting(self):
                return f"Hello {self.read('name')}"

        user = UserStore({'name': 'Alice'})
        user.read('greeting')           # 'Hello Alice'
        user.write('name', 'Bob')       # AccessDeniedError
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Iterator

from ..exceptions import AccessDeniedError, InvalidPathError, NotFoundError
from ..fields import FieldKind, StoreValue, classify, is_vacant
from ..permissions import Permission, collect_declarations, registry

logger = logging.getLogger(__name__)


class GatedStore:
    """A permission-gated hierarchical record.

    GatedStore provides:
    - read(path) / store[path]: Resolve a path, checking read permissions
    - write(path, value) / store[path] = value: Write with autocreate
    - write_entries(mapping): Bulk write of a nested mapping
    - entries(): Readable fields at this level
    - assign(field, value): Owner-side assignment with no checks

    Attributes:
        default_policy: Permission of any field with no registry entry.
        path_separator: Delimiter between path hops.

    Example:
        >>> store = GatedStore()
        >>> store.write('a:b', 3)
        3
        >>> store.read('a:b')
        3
    """

    default_policy: Permission = Permission.READ_WRITE
    path_separator: ClassVar[str] = ':'
    _computed_fields: ClassVar[frozenset[str]] = frozenset()

    def __init__(
        self,
        source: Mapping[str, Any] | None = None,
        *,
        default_policy: Permission | str | None = None,
    ) -> None:
        """Initialize a GatedStore.

        Args:
            source: Optional initial data, loaded without permission
                checks. Nested mappings become child GatedStore instances.
            default_policy: Overrides the class default policy for this
                instance.

        Example:
            >>> GatedStore({'a': 1, 'b': {'c': 2}})
            >>> GatedStore(default_policy='r')
        """
        self._fields: dict[str, Any] = {}
        if default_policy is not None:
            self.default_policy = Permission.coerce(default_policy)
        if source is not None:
            self._load_source(source)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Register the permissions and computed fields the subclass declares."""
        super().__init_subclass__(**kwargs)

        base = None
        for candidate in cls.__mro__[1:]:
            if issubclass(candidate, GatedStore):
                base = candidate
                break

        if 'default_policy' in cls.__dict__:
            cls.default_policy = Permission.coerce(cls.__dict__['default_policy'])

        permissions, computed_names = collect_declarations(cls, base)
        for field, perm in permissions.items():
            registry.register(cls, field, perm)
        if base is not None:
            registry.inherit(cls, base)
        cls._computed_fields = computed_names

    def _load_source(self, source: Mapping[str, Any]) -> None:
        """Assign every entry of source, promoting nested mappings.

        Raises:
            TypeError: If source is not a mapping.
        """
        if not isinstance(source, Mapping):
            raise TypeError(
                f"source must be a mapping, not {type(source).__name__}"
            )
        for field, value in source.items():
            if classify(value) is FieldKind.OBJECT:
                value = GatedStore(value)
            self._fields[field] = value

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._fields)})"

    def __len__(self) -> int:
        """Return the number of stored fields."""
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        """Iterate over stored field names in insertion order."""
        return iter(self._fields)

    def __contains__(self, field: str) -> bool:
        """True if field is stored or declared as a computed method.

        No permission check is made.
        """
        return self.field_kind(field) is not None

    def __getitem__(self, path: str) -> Any:
        return self.read(path)

    def __setitem__(self, path: str, value: StoreValue) -> None:
        self.write(path, value)

    def keys(self) -> list[str]:
        """Return stored field names in insertion order."""
        return list(self._fields)

    # ==================== Permissions ====================

    def permission_for(self, field: str) -> Permission:
        """Return the effective permission of field.

        The registry entry of this store's type wins; otherwise the
        default policy applies.
        """
        perm = registry.lookup(type(self), field)
        if perm is None:
            return self.default_policy
        return perm

    def allowed_to_read(self, field: str) -> bool:
        """True if field may be read."""
        return self.permission_for(field).readable

    def allowed_to_write(self, field: str) -> bool:
        """True if field may be written."""
        return self.permission_for(field).writable

    def _deny(self, action: str, field: str) -> AccessDeniedError:
        logger.debug(
            "%s access denied on %s for field '%s'",
            action, type(self).__name__, field,
        )
        return AccessDeniedError(f"{action} access denied for key: {field}")

    # ==================== Field Access ====================

    def field_kind(self, field: str) -> FieldKind | None:
        """Return the FieldKind of field, or None if it does not exist."""
        if field in self._fields:
            return classify(self._fields[field])
        if field in self._computed_fields:
            return FieldKind.COMPUTED
        return None

    def _field_value(self, field: str) -> Any:
        """Return the raw value of field, binding declared computed methods."""
        if field in self._fields:
            return self._fields[field]
        return getattr(self, field)

    def assign(self, field: str, value: Any) -> None:
        """Set field directly, bypassing permissions and conversion.

        This is the owner-side way to install a computed field: a
        callable assigned here is stored as-is and evaluated on every
        read, whereas write() evaluates it once.

        Example:
            >>> store.assign('now', lambda: time.time())
        """
        self._fields[field] = value

    def _split_path(self, path: str) -> list[str]:
        """Split path into hops.

        Raises:
            InvalidPathError: If any hop is empty.
        """
        hops = path.split(self.path_separator)
        if not all(hops):
            raise InvalidPathError(f"Empty segment in path '{path}'")
        return hops

    # ==================== Core API ====================

    def read(self, path: str) -> Any:
        """Resolve path and return the value found at its end.

        Each hop crossing a GatedStore requires read permission on that
        field. Hops through plain mappings and lists are not checked.
        A computed field is evaluated: if it yields a GatedStore the
        remaining hops are resolved from it, otherwise its result is
        returned at once and any remaining hops are ignored.

        Args:
            path: Colon-delimited path (e.g., 'config:database:host').

        Returns:
            The value at the path.

        Raises:
            NotFoundError: If a hop names a field that does not exist.
            AccessDeniedError: If a field exists but may not be read.
            InvalidPathError: If the path has an empty hop.
        """
        data: Any = self
        for hop in self._split_path(path):
            if not isinstance(data, GatedStore):
                data = _descend(data, hop)
                continue

            kind = data.field_kind(hop)
            if kind is None:
                raise NotFoundError(f"Property '{hop}' does not exist")
            if not data.allowed_to_read(hop):
                raise data._deny('Read', hop)

            if kind is FieldKind.COMPUTED:
                result = data._field_value(hop)()
                if isinstance(result, GatedStore):
                    data = result
                    continue
                return result

            data = data._fields[hop]
        return data

    def get(self, path: str, default: Any = None) -> Any:
        """Like read(), but return default if the path does not exist.

        AccessDeniedError is not suppressed.
        """
        try:
            return self.read(path)
        except NotFoundError:
            return default

    def write(self, path: str, value: StoreValue) -> StoreValue:
        """Write value at path, creating intermediate stores as needed.

        A missing intermediate hop is created as a new GatedStore if it
        is writable. An existing intermediate store is entered without a
        new check. The last hop always requires write permission.
        Mappings are promoted to GatedStore trees and callables are
        evaluated once, storing their result.

        Args:
            path: Colon-delimited path (e.g., 'config:database:host').
            value: The value to store.

        Returns:
            value, exactly as passed in.

        Raises:
            AccessDeniedError: If a created hop or the last hop is not
                writable.
            NotFoundError: If an intermediate hop holds a leaf value.
            InvalidPathError: If the path has an empty hop.
        """
        hops = self._split_path(path)
        data = self
        for hop in hops[:-1]:
            data = data._step_into(hop)
        data._set_field(hops[-1], value)
        return value

    def _step_into(self, field: str) -> GatedStore:
        """Return the store at an intermediate write hop, creating it if vacant."""
        kind = self.field_kind(field)
        if kind is None or is_vacant(self._field_value(field)):
            if not self.allowed_to_write(field):
                raise self._deny('Write', field)
            child = GatedStore()
            self._fields[field] = child
            logger.debug(
                "Created intermediate store '%s' on %s",
                field, type(self).__name__,
            )
            return child

        value = self._field_value(field)
        if kind is FieldKind.COMPUTED:
            if not self.allowed_to_read(field):
                raise self._deny('Read', field)
            value = value()
        if isinstance(value, GatedStore):
            return value
        raise NotFoundError(f"'{field}' is a leaf, cannot write below it")

    def _set_field(self, field: str, value: StoreValue) -> None:
        """Write a single field of this store, converting the value."""
        if not self.allowed_to_write(field):
            raise self._deny('Write', field)

        kind = classify(value)
        if kind is FieldKind.OBJECT:
            value = _promote(value)
        elif kind is FieldKind.COMPUTED:
            value = value()
        self._fields[field] = value

    def write_entries(self, entries: Mapping[str, Any]) -> None:
        """Write every leaf of a nested mapping at its colon-joined path.

        Leaves are written one at a time in iteration order; a failure
        stops the loop and leaves already written stay written.

        Example:
            >>> store.write_entries({'a': {'b': 1, 'c': 2}})
            >>> # same as store.write('a:b', 1); store.write('a:c', 2)
        """
        for path, value in self._iter_leaves(entries, ''):
            logger.debug("Bulk write of '%s'", path)
            self.write(path, value)

    def _iter_leaves(
        self, entries: Mapping[str, Any], prefix: str
    ) -> Iterator[tuple[str, Any]]:
        for key, value in entries.items():
            path = f"{prefix}{self.path_separator}{key}" if prefix else key
            if classify(value) is FieldKind.OBJECT:
                yield from self._iter_leaves(value, path)
            else:
                yield path, value

    def entries(self) -> dict[str, Any]:
        """Return the readable stored fields with their raw values.

        Computed fields are not evaluated: the callable itself is
        returned. Methods declared with restrict() or computed are not
        stored fields and are not listed.
        """
        return {
            field: value
            for field, value in self._fields.items()
            if self.allowed_to_read(field)
        }


def _promote(obj: Mapping[str, Any]) -> GatedStore:
    """Convert a plain mapping into a new GatedStore, depth first.

    Every key goes through write(), so the new store's permissions apply
    during promotion and keys containing the separator nest like paths.
    """
    store = GatedStore()
    for field, value in obj.items():
        store.write(field, value)
    logger.debug("Promoted mapping with %d keys to GatedStore", len(obj))
    return store


def _descend(container: Any, hop: str) -> Any:
    """Step into a plain mapping or list by key or index."""
    kind = classify(container)
    if kind is FieldKind.OBJECT:
        if hop in container:
            return container[hop]
    elif kind is FieldKind.ARRAY:
        if hop.isdecimal() and int(hop) < len(container):
            return container[int(hop)]
    raise NotFoundError(f"Property '{hop}' does not exist")
