"""Well-known path management for appsweep.

This module resolves the per-machine and per-user locations the sweep
operates on, plus appsweep's own configuration directory.

Windows defaults:
- Config: %APPDATA%\\appsweep\\
- Users root: %SystemDrive%\\Users
- System temp: %SystemRoot%\\Temp
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

# Directory name under the platform config root
APP_NAME = "appsweep"


def get_config_dir() -> Path:
    """Return the directory holding appsweep's own files.

    Uses %APPDATA% when set (Windows), falling back to the XDG config
    home so the tool remains usable for development elsewhere.

    Returns:
        Path to %APPDATA%\\appsweep (or XDG_CONFIG_HOME/appsweep).
    """
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata) / APP_NAME
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_targets_path() -> Path:
    """Return where the user target set is read from and written to.

    Returns:
        Path to <config dir>/targets.toml.
    """
    return get_config_dir() / "targets.toml"


def get_theme_path() -> Path:
    """Return where user color overrides are read from.

    Returns:
        Path to <config dir>/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def expand_path(value: str) -> Path:
    """Expand environment variables and ``~`` in a configured path.

    Args:
        value: Raw path string, e.g. ``%ProgramFiles(x86)%\\rsTrust``.

    Returns:
        The expanded path.
    """
    return Path(os.path.expanduser(os.path.expandvars(value)))


def _drive_root(drive: str) -> Path:
    # "C:" alone is drive-relative on Windows
    if drive.endswith(("\\", "/")):
        return Path(drive)
    return Path(drive + "\\")


@dataclass(frozen=True, slots=True)
class SystemPaths:
    """Machine and current-session locations the sweep needs.

    Attributes:
        home: The current user's profile directory.
        local_app_data: Current user's local application data root.
        roaming_app_data: Current user's roaming application data root.
        user_temp: Current user's temp directory.
        users_root: Directory holding every user profile.
        system_temp: OS-wide temp directory.
    """

    home: Path
    local_app_data: Path
    roaming_app_data: Path
    user_temp: Path
    users_root: Path
    system_temp: Path


def resolve_system_paths() -> SystemPaths:
    """Resolve the current machine's well-known locations from the environment.

    Returns:
        SystemPaths for this session.
    """
    home = Path.home()
    local = os.environ.get("LOCALAPPDATA")
    roaming = os.environ.get("APPDATA")
    system_root = os.environ.get("SystemRoot") or "C:\\Windows"

    return SystemPaths(
        home=home,
        local_app_data=Path(local) if local else home / "AppData" / "Local",
        roaming_app_data=Path(roaming) if roaming else home / "AppData" / "Roaming",
        user_temp=Path(tempfile.gettempdir()),
        users_root=_drive_root(os.environ.get("SystemDrive") or "C:") / "Users",
        system_temp=Path(system_root) / "Temp",
    )
