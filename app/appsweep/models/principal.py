"""Principal models.

A principal is anything the sweep iterates over on behalf of a user:
the current session, another user's profile directory, or a per-user
registry hive below HKEY_USERS.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class PrincipalKind(str, Enum):
    """Kind of principal.

    Attributes:
        CURRENT_SESSION: The user running the sweep.
        USER_PROFILE: Another profile directory under the users root.
        REGISTRY_HIVE: A per-user hive loaded below HKEY_USERS.
    """

    CURRENT_SESSION = "current_session"
    USER_PROFILE = "user_profile"
    REGISTRY_HIVE = "registry_hive"


@dataclass(frozen=True, slots=True)
class Principal:
    """A user profile or per-user registry hive the sweep operates on.

    Attributes:
        kind: What sort of principal this is.
        name: Username or SID, used only for reporting.
        root: Profile root directory (None for registry hives).
    """

    kind: PrincipalKind
    name: str
    root: Path | None = None

    def __post_init__(self) -> None:
        """Validate principal data after initialization."""
        if not self.name:
            msg = "Principal name cannot be empty"
            raise ValueError(msg)
        if self.kind != PrincipalKind.REGISTRY_HIVE and self.root is None:
            msg = f"{self.kind.value} principal requires a root directory"
            raise ValueError(msg)

    def _require_root(self) -> Path:
        if self.root is None:
            msg = f"Principal {self.name} has no profile directory"
            raise ValueError(msg)
        return self.root

    @property
    def local_app_data(self) -> Path:
        """Local (non-roaming) application data root."""
        return self._require_root() / "AppData" / "Local"

    @property
    def roaming_app_data(self) -> Path:
        """Roaming application data root."""
        return self._require_root() / "AppData" / "Roaming"

    @property
    def local_temp(self) -> Path:
        """Per-user temp directory."""
        return self.local_app_data / "Temp"

    def key_path(self, base_key_path: str) -> str:
        """Build the HKEY_USERS-relative path of a key for this hive.

        Args:
            base_key_path: Key path relative to the user's hive root.

        Returns:
            ``<sid>\\<base_key_path>``.
        """
        return f"{self.name}\\{base_key_path}"
