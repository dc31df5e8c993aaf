# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""GatedStore package - Permission-gated hierarchical data container.

The package is organized into:
- core: Main GatedStore class with path resolution, permission checks,
  auto-vivification and bulk writes

Example:
    >>> from genro_gatedstore import GatedStore
    >>> store = GatedStore()
    >>> store.write('config:name', 'MyApp')
    'MyApp'
    >>> store['config:name']
    'MyApp'
"""

from .core import GatedStore

__all__ = ["GatedStore"]
