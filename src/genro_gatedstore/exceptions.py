# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""GatedStore exceptions."""

from __future__ import annotations


class GatedStoreError(Exception):
    """Base exception for GatedStore errors."""

    pass


class NotFoundError(GatedStoreError, KeyError):
    """Raised when a path hop names a field that does not exist."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ''


class AccessDeniedError(GatedStoreError, PermissionError):
    """Raised when a field exists but its permission forbids the access."""

    pass


class InvalidPathError(GatedStoreError, ValueError):
    """Raised when a path contains an empty hop."""

    pass
