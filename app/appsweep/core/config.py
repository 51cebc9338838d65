"""Target set configuration.

This module provides the configuration model describing what a sweep
removes, and the I/O functions that load it from TOML.

Resolution order:
1. An explicit path given on the command line
2. The user target set (%APPDATA%\\appsweep\\targets.toml)
3. The bundled defaults (data/targets.toml)
"""

import logging
import os
import re
import tomllib
from importlib import resources
from pathlib import Path, PurePosixPath, PureWindowsPath
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from appsweep.core.paths import get_targets_path

logger = logging.getLogger(__name__)

UserFolderBase = Literal["local", "roaming"]


def split_relative(value: str) -> tuple[str, ...]:
    """Split a configured relative path into components.

    Both ``/`` and ``\\`` are accepted as separators.

    Args:
        value: Relative path as written in configuration.

    Returns:
        Tuple of path components.
    """
    return PurePosixPath(value.replace("\\", "/")).parts


def _raw_segments(value: str) -> list[str]:
    # PurePosixPath drops "." segments, so split the raw text
    return value.replace("\\", "/").split("/")


def _is_rooted(value: str) -> bool:
    return value.startswith(("/", "\\")) or (len(value) > 1 and value[1] == ":")


def _has_dot_segments(value: str) -> bool:
    return any(part in (".", "..") for part in _raw_segments(value))


def _check_relative(kind: str, value: str) -> None:
    if not value.strip():
        msg = f"{kind} cannot be empty"
        raise ValueError(msg)
    if _is_rooted(value):
        msg = f"{kind} '{value}' must be relative"
        raise ValueError(msg)
    if _has_dot_segments(value):
        msg = f"{kind} '{value}' must not contain '.' or '..' segments"
        raise ValueError(msg)


# %VAR%, $VAR, ${VAR} or ~ as the first segment of a system folder
_EXPANDABLE_ANCHOR = re.compile(r"%[^%]+%|\$\{?\w+\}?|~")


class UserFolder(BaseModel):
    """A folder under a principal's application data root.

    Attributes:
        base: Which application data root the folder lives in.
        name: Folder name (or relative path) below that root.
        confirm: Process the folder file by file, asking before protected
            files are removed, instead of deleting it outright.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base: UserFolderBase
    name: Annotated[str, Field(min_length=1)]
    confirm: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Keep the folder inside its application data root."""
        _check_relative("user folder", v)
        return v


class TargetSet(BaseModel):
    """Everything a sweep removes, resolved once per run.

    Attributes:
        app_name: Display name of the application, used in prompts.
        system_folders: Absolute folder paths deleted outright. Environment
            variables are expanded when the sweep runs.
        user_folders: Folders under each principal's application data roots.
        registry_keys: Key paths relative to a user hive.
        processes_to_close: Process names to stop before cleaning.
        protected_files: File paths, relative to a folder processed with
            confirmation, that are only deleted after the user agrees.
        clean_temp_folders: Whether the temp areas are swept.
        elevation_timeout_seconds: Bounded wait for the elevated delete helper.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    app_name: Annotated[str, Field(min_length=1)] = "SirHurt"
    system_folders: tuple[str, ...] = ("%ProgramFiles(x86)%\\rsTrust",)
    user_folders: tuple[UserFolder, ...] = (
        UserFolder(base="local", name="Roblox"),
        UserFolder(base="roaming", name="sirhurt", confirm=True),
    )
    registry_keys: tuple[str, ...] = ("Software\\Asshurt",)
    processes_to_close: tuple[str, ...] = ("RobloxPlayerBeta", "SirHurtUI")
    protected_files: tuple[str, ...] = (
        "sirhui/sirhurta.dat",
        "sirhui/sirhurtp.dat",
    )
    clean_temp_folders: bool = True
    elevation_timeout_seconds: Annotated[
        int,
        Field(ge=1, le=3600, description="Timeout in seconds (1-3600)"),
    ] = 120

    @field_validator("protected_files")
    @classmethod
    def validate_protected_files(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Ensure every protected entry names a file relative to its base."""
        for entry in v:
            if not entry or entry.endswith(("/", "\\")):
                msg = f"protected file '{entry}' must name a file, not a directory"
                raise ValueError(msg)
            _check_relative("protected file", entry)
        return v

    @field_validator("system_folders")
    @classmethod
    def validate_system_folders(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Ensure every system folder is an absolute path or starts from a variable."""
        for folder in v:
            if not folder.strip():
                msg = "system folder cannot be empty"
                raise ValueError(msg)
            anchor = _raw_segments(folder)[0]
            absolute = PureWindowsPath(folder).is_absolute() or folder.startswith("/")
            if not (absolute or _EXPANDABLE_ANCHOR.fullmatch(anchor)):
                msg = f"system folder '{folder}' must be absolute"
                raise ValueError(msg)
            if _has_dot_segments(folder):
                msg = f"system folder '{folder}' must not contain '.' or '..' segments"
                raise ValueError(msg)
        return v

    @field_validator("registry_keys")
    @classmethod
    def validate_registry_keys(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Ensure registry keys are non-empty hive-relative paths."""
        for key in v:
            if not key.strip("\\"):
                msg = "registry key path cannot be empty"
                raise ValueError(msg)
            if key.upper().startswith("HKEY_"):
                msg = f"registry key '{key}' must be relative to a hive"
                raise ValueError(msg)
        return v

    def folders_under(self, base: UserFolderBase) -> tuple[UserFolder, ...]:
        """Return the user folders that live under the given root."""
        return tuple(f for f in self.user_folders if f.base == base)

    def to_toml(self) -> str:
        """Serialize the target set to TOML text."""
        return tomli_w.dumps(targets_to_dict(self))


class ConfigError(Exception):
    """Base exception for target set configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when a target set file is not found."""


class ConfigParseError(ConfigError):
    """Raised when a target set file cannot be parsed."""


def get_bundled_targets_path() -> Path:
    """Get the bundled default target set path.

    Returns:
        Path to the bundled data/targets.toml
    """
    return resources.files("appsweep.data").joinpath("targets.toml")  # type: ignore[return-value]


def load_targets(path: Path) -> TargetSet:
    """Load a target set from a TOML file.

    Args:
        path: Path to the target set file.

    Returns:
        Validated TargetSet object.

    Raises:
        ConfigNotFoundError: If the file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    if not path.exists():
        raise ConfigNotFoundError(f"Target set not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read target set {path}: {e}") from e

    try:
        return TargetSet.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid target set {path}: {e}") from e


def resolve_targets(path: Path | None = None) -> TargetSet:
    """Resolve the target set for this run.

    Args:
        path: Explicit target set file. If given, it must exist.

    Returns:
        The explicit file, else the user file, else the bundled defaults.

    Raises:
        ConfigError: If the chosen file cannot be loaded.
    """
    if path is not None:
        return load_targets(path)

    user_path = get_targets_path()
    if user_path.exists():
        logger.debug("Loading user target set from %s", user_path)
        return load_targets(user_path)

    logger.debug("Using bundled target set")
    return load_targets(Path(get_bundled_targets_path()))


def targets_to_dict(targets: TargetSet) -> dict[str, object]:
    """Convert a TargetSet to a dictionary for TOML serialization.

    Args:
        targets: The TargetSet to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return targets.model_dump(mode="json")


def save_targets(targets: TargetSet, path: Path | None = None) -> Path:
    """Save a target set to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        targets: The TargetSet to save.
        path: Destination. If None, uses the user target set path.

    Returns:
        Path where the target set was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    target_path = path or get_targets_path()
    data = targets_to_dict(targets)

    tmp_path: Path | None = None
    try:
        target_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=target_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(target_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write target set: {e}") from e

    return target_path
