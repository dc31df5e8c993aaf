# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Permission levels and the per-type permission registry.

Permissions are declared on GatedStore subclasses and recorded in a
registry keyed by (node type, field name). Declaration happens when the
class is created, so every entry exists before the first instance:

    class UserStore(GatedStore):
        _restrictions = {'name': 'r', 'password': 'none'}

        @restrict('r')
        def profile(self):
            return {'name': self.read('name')}

Lookups are per concrete type. A subclass starts from a snapshot of its
parent's entries taken at class-creation time; entries added to the
parent later are not seen by the subclass.
"""

from __future__ import annotations

import logging
import weakref
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Permission(str, Enum):
    """Access level of a single field."""

    READ_ONLY = 'r'
    WRITE_ONLY = 'w'
    READ_WRITE = 'rw'
    NONE = 'none'

    @property
    def readable(self) -> bool:
        return self in (Permission.READ_ONLY, Permission.READ_WRITE)

    @property
    def writable(self) -> bool:
        return self in (Permission.WRITE_ONLY, Permission.READ_WRITE)

    @classmethod
    def coerce(cls, value: Permission | str) -> Permission:
        """Return the Permission for a member, short value or long name.

        Args:
            value: A Permission, 'r', 'w', 'rw', 'none', or one of
                'read-only', 'write-only', 'read-write'.

        Raises:
            ValueError: If value names no permission.

        Example:
            >>> Permission.coerce('read-only')
            <Permission.READ_ONLY: 'r'>
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _ALIASES:
                return _ALIASES[key]
        raise ValueError(f"Unknown permission: {value!r}")


_ALIASES: dict[str, Permission] = {
    'r': Permission.READ_ONLY,
    'read-only': Permission.READ_ONLY,
    'w': Permission.WRITE_ONLY,
    'write-only': Permission.WRITE_ONLY,
    'rw': Permission.READ_WRITE,
    'read-write': Permission.READ_WRITE,
    'none': Permission.NONE,
}


class PermissionRegistry:
    """Mapping of (node type, field name) to Permission.

    Example:
        >>> reg = PermissionRegistry()
        >>> reg.register(UserStore, 'name', 'r')
        >>> reg.lookup(UserStore, 'name')
        <Permission.READ_ONLY: 'r'>
        >>> reg.lookup(UserStore, 'email') is None
        True
    """

    def __init__(self) -> None:
        self._entries: weakref.WeakKeyDictionary[type, dict[str, Permission]] = (
            weakref.WeakKeyDictionary()
        )

    def register(
        self, node_type: type, field: str, permission: Permission | str
    ) -> None:
        """Record the permission of field on instances of node_type.

        Re-registering a field replaces its previous entry.
        """
        perm = Permission.coerce(permission)
        self._entries.setdefault(node_type, {})[field] = perm
        logger.debug(
            "Registered %s.%s as %s", node_type.__name__, field, perm.value
        )

    def unregister(self, node_type: type, field: str) -> None:
        """Remove the entry for field, if any."""
        fields = self._entries.get(node_type)
        if fields is not None:
            fields.pop(field, None)

    def lookup(self, node_type: type, field: str) -> Permission | None:
        """Return the registered permission, or None if there is none."""
        fields = self._entries.get(node_type)
        if fields is None:
            return None
        return fields.get(field)

    def permissions_for(self, node_type: type) -> dict[str, Permission]:
        """Return a copy of all entries registered on node_type."""
        return dict(self._entries.get(node_type, {}))

    def inherit(self, node_type: type, base: type) -> None:
        """Seed node_type with a snapshot of base's entries.

        Entries already present on node_type are kept.
        """
        inherited = self._entries.get(base)
        if not inherited:
            return
        fields = self._entries.setdefault(node_type, {})
        for field, perm in inherited.items():
            fields.setdefault(field, perm)

    def __contains__(self, node_type: type) -> bool:
        return node_type in self._entries


registry = PermissionRegistry()


def restrict(permission: Permission | str = Permission.NONE) -> Callable:
    """Decorator declaring a method as a computed field with a permission.

    The method name becomes the field name. The permission is registered
    for the owning class when the class is created. With no argument the
    field is fully private, as with a bare ``@restrict()``.

    Args:
        permission: Permission of the field (default 'none').

    Example:
        >>> class Account(GatedStore):
        ...     @restrict('r')
        ...     def balance(self):
        ...         return 100
    """
    perm = Permission.coerce(permission)

    def decorator(func: Callable) -> Callable:
        func._field_permission = perm  # type: ignore[attr-defined]
        func._computed_field = True  # type: ignore[attr-defined]
        return func

    return decorator


def computed(func: Callable) -> Callable:
    """Decorator declaring a method as a computed field.

    The field has no registry entry and falls back to default_policy.
    """
    func._computed_field = True  # type: ignore[attr-defined]
    return func


def collect_declarations(
    cls: type, base: type | None
) -> tuple[dict[str, Permission], frozenset[str]]:
    """Gather the permissions and computed fields a class body declares.

    Reads the ``_restrictions`` dict and the methods marked by
    :func:`restrict` or :func:`computed` from ``cls.__dict__`` only.

    Returns:
        Tuple of (permissions, computed_field_names), where
        computed_field_names includes those inherited from base.
    """
    permissions: dict[str, Permission] = {}
    computed_names: set[str] = set(getattr(base, '_computed_fields', ()))

    declared: Any = cls.__dict__.get('_restrictions') or {}
    for field, perm in declared.items():
        permissions[field] = Permission.coerce(perm)

    for name, member in cls.__dict__.items():
        if not callable(member):
            continue
        if getattr(member, '_computed_field', False):
            computed_names.add(name)
        perm = getattr(member, '_field_permission', None)
        if perm is not None:
            permissions[name] = perm

    return permissions, frozenset(computed_names)
