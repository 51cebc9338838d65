"""Registry cleanup module.

This module provides hive identifiers, the registry capability, and
the sweep that removes keys from the current user's hive and from
every per-user hive.
"""

import sys

from appsweep.registry.base import Hive, Registry, format_key
from appsweep.registry.sweep import RegistrySweep, is_user_hive

__all__ = [
    "Hive",
    "Registry",
    "RegistrySweep",
    "format_key",
    "get_system_registry",
    "is_user_hive",
]


def get_system_registry() -> Registry | None:
    """Get the registry implementation for this platform.

    Returns:
        A WindowsRegistry on Windows, None elsewhere.
    """
    if sys.platform != "win32":
        return None

    from appsweep.registry.windows import WindowsRegistry

    return WindowsRegistry()
