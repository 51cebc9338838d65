"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from appsweep.core.paths import SystemPaths
from appsweep.filesystem.engine import DeletionEngine
from appsweep.filesystem.policy import ConfirmationPolicy
from fakes import (
    PROTECTED_FILES,
    DenyingFileSystem,
    FakeProcessManager,
    FakeRegistry,
    RecordingConfirmer,
    StubElevator,
)


@pytest.fixture
def confirmer() -> RecordingConfirmer:
    """Confirmer that agrees to everything unless told otherwise."""
    return RecordingConfirmer(answer=True)


@pytest.fixture
def filesystem() -> DenyingFileSystem:
    """Local filesystem with injectable permission failures."""
    return DenyingFileSystem()


@pytest.fixture
def elevator() -> StubElevator:
    """Elevated remover that succeeds without a subprocess."""
    return StubElevator()


@pytest.fixture
def policy() -> ConfirmationPolicy:
    """Policy protecting the default authentication files."""
    return ConfirmationPolicy(PROTECTED_FILES)


@pytest.fixture
def engine(
    filesystem: DenyingFileSystem,
    confirmer: RecordingConfirmer,
    policy: ConfirmationPolicy,
    elevator: StubElevator,
) -> DeletionEngine:
    """Deletion engine wired to the test fakes."""
    return DeletionEngine(filesystem, confirmer, policy, elevator)


@pytest.fixture
def registry() -> FakeRegistry:
    """Empty in-memory registry."""
    return FakeRegistry()


@pytest.fixture
def processes() -> FakeProcessManager:
    """Process manager with nothing running."""
    return FakeProcessManager()


@pytest.fixture
def system_paths(tmp_path: Path) -> SystemPaths:
    """Machine layout rooted in a temporary directory.

    The current user is ``me`` under ``<tmp>/Users``.
    """
    users_root = tmp_path / "Users"
    home = users_root / "me"
    local = home / "AppData" / "Local"
    paths = SystemPaths(
        home=home,
        local_app_data=local,
        roaming_app_data=home / "AppData" / "Roaming",
        user_temp=local / "Temp",
        users_root=users_root,
        system_temp=tmp_path / "Windows" / "Temp",
    )
    for directory in (paths.local_app_data, paths.roaming_app_data, paths.user_temp):
        directory.mkdir(parents=True)
    paths.system_temp.mkdir(parents=True)
    return paths


@pytest.fixture
def make_tree() -> Callable[[Path, list[str]], None]:
    """Return a helper that creates files (with parents) below a root."""

    def _make(root: Path, files: list[str]) -> None:
        for relative in files:
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(relative)

    return _make


@pytest.fixture
def make_dir_link() -> Callable[[Path, Path], None]:
    """Return a helper that links a directory, skipping where links are unsupported."""

    def _make(link: Path, target: Path) -> None:
        try:
            link.symlink_to(target, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("cannot create symlinks here")

    return _make
