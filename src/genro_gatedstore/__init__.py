# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-GatedStore - Hierarchical key-value store with per-field permissions.

A lightweight, zero-dependency library providing a tree of named fields
where every read and write is checked against a declared access level,
for the Genro ecosystem (Genro Kyō).
"""

__version__ = "0.1.0"

from .exceptions import (
    AccessDeniedError,
    GatedStoreError,
    InvalidPathError,
    NotFoundError,
)
from .fields import FieldKind, classify, is_vacant
from .permissions import Permission, PermissionRegistry, computed, registry, restrict
from .store import GatedStore

__all__ = [
    # Core classes
    "GatedStore",
    # Permissions
    "Permission",
    "PermissionRegistry",
    "registry",
    "restrict",
    "computed",
    # Fields
    "FieldKind",
    "classify",
    "is_vacant",
    # Exceptions
    "GatedStoreError",
    "NotFoundError",
    "AccessDeniedError",
    "InvalidPathError",
]
