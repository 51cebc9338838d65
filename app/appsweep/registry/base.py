"""Registry capability and hive identifiers.

Hives are explicit values passed into every call; implementations hold
no open handles between calls.
"""

from abc import ABC, abstractmethod
from enum import Enum


class Hive(str, Enum):
    """Registry hive identifier.

    Attributes:
        CURRENT_USER: HKEY_CURRENT_USER.
        USERS: HKEY_USERS, holding every loaded per-user hive.
        LOCAL_MACHINE: HKEY_LOCAL_MACHINE.
        CLASSES_ROOT: HKEY_CLASSES_ROOT.
        CURRENT_CONFIG: HKEY_CURRENT_CONFIG.
        OTHER: Any hive without a well-known name.
    """

    CURRENT_USER = "current_user"
    USERS = "users"
    LOCAL_MACHINE = "local_machine"
    CLASSES_ROOT = "classes_root"
    CURRENT_CONFIG = "current_config"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        """Conventional name of the hive, used in log output."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[Hive, str] = {
    Hive.CURRENT_USER: "HKEY_CURRENT_USER",
    Hive.USERS: "HKEY_USERS",
    Hive.LOCAL_MACHINE: "HKEY_LOCAL_MACHINE",
    Hive.CLASSES_ROOT: "HKEY_CLASSES_ROOT",
    Hive.CURRENT_CONFIG: "HKEY_CURRENT_CONFIG",
    Hive.OTHER: "<other hive>",
}


def format_key(hive: Hive, key_path: str) -> str:
    """Format a hive and key path as a single display string."""
    return f"{hive.display_name}\\{key_path}" if key_path else hive.display_name


class Registry(ABC):
    """Abstract base class for registry access.

    Implementations raise OSError subclasses unchanged: FileNotFoundError
    for a missing key, PermissionError for access denied.
    """

    @abstractmethod
    def key_exists(self, hive: Hive, key_path: str) -> bool:
        """Check if a key exists below a hive."""

    @abstractmethod
    def delete_key_tree(self, hive: Hive, key_path: str) -> None:
        """Delete a key together with its entire subtree."""

    @abstractmethod
    def subkey_names(self, hive: Hive, key_path: str = "") -> list[str]:
        """List the immediate child key names of a key (or the hive root)."""
