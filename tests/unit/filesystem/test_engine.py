"""Unit tests for the deletion engine.

Tests run against real temporary directories; permission failures are
injected through the DenyingFileSystem fake.
"""

import os
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from appsweep.filesystem.elevation import ElevationResult
from appsweep.filesystem.engine import DeletionEngine
from appsweep.filesystem.policy import ConfirmationPolicy
from appsweep.models.outcome import DeletionOutcome
from fakes import DenyingFileSystem, RecordingConfirmer, StubElevator

MakeTree = Callable[[Path, list[str]], None]


@pytest.fixture
def profile_engine(
    filesystem: DenyingFileSystem,
    confirmer: RecordingConfirmer,
    elevator: StubElevator,
) -> DeletionEngine:
    """Engine protecting profile/secret.dat."""
    return DeletionEngine(
        filesystem, confirmer, ConfirmationPolicy(["profile/secret.dat"]), elevator
    )


class TestDeleteFolder:
    """Tests for DeletionEngine.delete_folder."""

    def test_missing_folder(
        self, engine: DeletionEngine, elevator: StubElevator, tmp_path: Path
    ) -> None:
        """A missing folder is already absent and never escalated."""
        result = engine.delete_folder(tmp_path / "missing")

        assert result.outcome == DeletionOutcome.ALREADY_ABSENT
        assert result.error is None
        assert elevator.calls == []

    def test_deletes_tree(self, engine: DeletionEngine, tmp_path: Path, make_tree: MakeTree) -> None:
        """An existing folder is removed with everything in it."""
        target = tmp_path / "Roblox"
        make_tree(target, ["logs/a.log", "b.txt"])

        result = engine.delete_folder(target)

        assert result.outcome == DeletionOutcome.DELETED
        assert result.target == str(target)
        assert not target.exists()

    def test_linked_folder_removed_not_followed(
        self,
        engine: DeletionEngine,
        elevator: StubElevator,
        tmp_path: Path,
        make_tree: MakeTree,
        make_dir_link: Callable[[Path, Path], None],
    ) -> None:
        """A linked target folder is unlinked and the linked-to data stays."""
        elsewhere = tmp_path / "D" / "Games"
        make_tree(elsewhere, ["save.dat"])
        link = tmp_path / "Roblox"
        make_dir_link(link, elsewhere)

        result = engine.delete_folder(link)

        assert result.outcome == DeletionOutcome.DELETED
        assert not os.path.lexists(link)
        assert (elsewhere / "save.dat").exists()
        assert elevator.calls == []

    def test_permission_denied_escalates(
        self,
        engine: DeletionEngine,
        filesystem: DenyingFileSystem,
        elevator: StubElevator,
        tmp_path: Path,
        make_tree: MakeTree,
    ) -> None:
        """A denied delete removed by the elevated helper is escalated_deleted."""
        target = tmp_path / "rsTrust"
        make_tree(target, ["trust.bin"])
        filesystem.denied.add(target)

        result = engine.delete_folder(target)

        assert result.outcome == DeletionOutcome.ESCALATED_DELETED
        assert result.error is None
        assert elevator.calls == [target]
        assert not target.exists()

    def test_escalation_leaves_folder(
        self,
        engine: DeletionEngine,
        filesystem: DenyingFileSystem,
        elevator: StubElevator,
        tmp_path: Path,
        make_tree: MakeTree,
    ) -> None:
        """A helper that finishes but leaves the folder is escalated_failed."""
        target = tmp_path / "rsTrust"
        make_tree(target, ["trust.bin"])
        filesystem.denied.add(target)
        elevator.removes = False

        result = engine.delete_folder(target)

        assert result.outcome == DeletionOutcome.ESCALATED_FAILED
        assert result.error is not None
        assert target.exists()

    def test_escalation_timeout(
        self,
        engine: DeletionEngine,
        filesystem: DenyingFileSystem,
        elevator: StubElevator,
        tmp_path: Path,
        make_tree: MakeTree,
    ) -> None:
        """A helper that does not finish is escalated_failed with its error."""
        target = tmp_path / "rsTrust"
        make_tree(target, ["trust.bin"])
        filesystem.denied.add(target)
        elevator.removes = False
        elevator.result = ElevationResult(completed=False, error="did not finish within 1s")

        result = engine.delete_folder(target)

        assert result.outcome == DeletionOutcome.ESCALATED_FAILED
        assert result.error == "did not finish within 1s"

    def test_escalation_stderr_but_gone(
        self,
        engine: DeletionEngine,
        filesystem: DenyingFileSystem,
        elevator: StubElevator,
        tmp_path: Path,
        make_tree: MakeTree,
    ) -> None:
        """The folder's absence decides the outcome, not the helper's stderr."""
        target = tmp_path / "rsTrust"
        make_tree(target, ["trust.bin"])
        filesystem.denied.add(target)
        elevator.result = ElevationResult(completed=True, error="some warning")

        result = engine.delete_folder(target)

        assert result.outcome == DeletionOutcome.ESCALATED_DELETED

    def test_other_error_not_escalated(
        self,
        engine: DeletionEngine,
        filesystem: DenyingFileSystem,
        elevator: StubElevator,
        tmp_path: Path,
    ) -> None:
        """Failures other than permission denied are reported as errors."""
        target = tmp_path / "busy"
        target.mkdir()

        with patch.object(filesystem, "delete_directory", side_effect=OSError("in use")):
            result = engine.delete_folder(target)

        assert result.outcome == DeletionOutcome.ERROR
        assert result.error == "in use"
        assert elevator.calls == []


class TestDeleteFolderWithConfirmation:
    """Tests for DeletionEngine.delete_folder_with_confirmation."""

    def test_declined_keeps_protected_file(
        self,
        profile_engine: DeletionEngine,
        confirmer: RecordingConfirmer,
        tmp_path: Path,
        make_tree: MakeTree,
    ) -> None:
        """Declined: the protected file and its folder stay, others go."""
        base = tmp_path / "app"
        make_tree(base, ["profile/secret.dat", "profile/other.txt"])
        confirmer.answer = False

        results = profile_engine.delete_folder_with_confirmation(base)

        outcomes = {Path(r.target).name: r.outcome for r in results}
        assert outcomes == {
            "other.txt": DeletionOutcome.DELETED,
            "secret.dat": DeletionOutcome.KEPT_BY_USER,
        }
        assert (base / "profile" / "secret.dat").exists()
        assert not (base / "profile" / "other.txt").exists()
        assert (base / "profile").is_dir()
        assert len(confirmer.messages) == 1

    def test_accepted_removes_everything(
        self,
        profile_engine: DeletionEngine,
        confirmer: RecordingConfirmer,
        filesystem: DenyingFileSystem,
        tmp_path: Path,
        make_tree: MakeTree,
    ) -> None:
        """Accepted: both files go, then the emptied folders are removed."""
        base = tmp_path / "app"
        make_tree(base, ["profile/secret.dat", "profile/other.txt"])

        results = profile_engine.delete_folder_with_confirmation(base)

        assert all(r.outcome == DeletionOutcome.DELETED for r in results)
        assert [Path(r.target).name for r in results] == [
            "other.txt",
            "secret.dat",
            "profile",
            "app",
        ]
        assert not base.exists()
        assert (base / "profile", False) in filesystem.delete_calls
        assert confirmer.messages == [
            f"The file {base / 'profile' / 'secret.dat'} is used for authentication."
        ]

    def test_unprotected_files_never_prompt(
        self,
        profile_engine: DeletionEngine,
        confirmer: RecordingConfirmer,
        tmp_path: Path,
        make_tree: MakeTree,
    ) -> None:
        """Files outside the protected set are deleted without asking."""
        base = tmp_path / "app"
        make_tree(base, ["secret.dat", "profile/nested/secret.dat", "profile/a.txt"])
        confirmer.answer = False

        profile_engine.delete_folder_with_confirmation(base)

        assert confirmer.messages == []
        assert not base.exists()

    def test_guarded_directory_never_removed_recursively(
        self,
        engine: DeletionEngine,
        filesystem: DenyingFileSystem,
        tmp_path: Path,
        make_tree: MakeTree,
    ) -> None:
        """A guarded directory is only removed by the single-level step."""
        base = tmp_path / "sirhurt"
        make_tree(base, ["sirhui/sirhurta.dat", "sirhui/sirhurtp.dat", "sirhui/settings.json"])

        engine.delete_folder_with_confirmation(base)

        assert not (base / "sirhui").exists()
        assert (base / "sirhui", True) not in filesystem.delete_calls
        assert (base / "sirhui", False) in filesystem.delete_calls

    def test_unguarded_subdirectory_removed_wholesale(
        self,
        engine: DeletionEngine,
        filesystem: DenyingFileSystem,
        tmp_path: Path,
        make_tree: MakeTree,
    ) -> None:
        """Subdirectories that cannot hold a protected file use delete_folder."""
        base = tmp_path / "sirhurt"
        make_tree(base, ["bin/x.dll", "bin/deep/y.dll"])

        results = engine.delete_folder_with_confirmation(base)

        assert (base / "bin", True) in filesystem.delete_calls
        assert results[0].target == str(base / "bin")
        assert results[0].outcome == DeletionOutcome.DELETED

    def test_missing_base(self, engine: DeletionEngine, tmp_path: Path) -> None:
        """A missing base yields a single already_absent result."""
        results = engine.delete_folder_with_confirmation(tmp_path / "missing")

        assert [r.outcome for r in results] == [DeletionOutcome.ALREADY_ABSENT]

    def test_linked_base_removed_without_prompting(
        self,
        engine: DeletionEngine,
        confirmer: RecordingConfirmer,
        tmp_path: Path,
        make_tree: MakeTree,
        make_dir_link: Callable[[Path, Path], None],
    ) -> None:
        """A linked base is unlinked; protected files behind it are not touched."""
        elsewhere = tmp_path / "shared"
        make_tree(elsewhere, ["sirhui/sirhurta.dat", "bin/x.dll"])
        base = tmp_path / "sirhurt"
        make_dir_link(base, elsewhere)

        results = engine.delete_folder_with_confirmation(base)

        assert [r.outcome for r in results] == [DeletionOutcome.DELETED]
        assert not os.path.lexists(base)
        assert (elsewhere / "sirhui" / "sirhurta.dat").exists()
        assert (elsewhere / "bin" / "x.dll").exists()
        assert confirmer.messages == []

    def test_listing_error_is_node_scoped(
        self,
        engine: DeletionEngine,
        filesystem: DenyingFileSystem,
        tmp_path: Path,
    ) -> None:
        """An unreadable folder is reported and the walk does not raise."""
        base = tmp_path / "sirhurt"
        base.mkdir()

        with patch.object(filesystem, "list_files", side_effect=PermissionError("denied")):
            results = engine.delete_folder_with_confirmation(base)

        assert [r.outcome for r in results] == [DeletionOutcome.ERROR]
        assert base.exists()

    def test_second_run_already_absent(
        self, engine: DeletionEngine, tmp_path: Path, make_tree: MakeTree
    ) -> None:
        """Sweeping a removed folder again finds nothing to do."""
        base = tmp_path / "sirhurt"
        make_tree(base, ["sirhui/sirhurta.dat", "a.txt"])
        engine.delete_folder_with_confirmation(base)

        results = engine.delete_folder_with_confirmation(base)

        assert [r.outcome for r in results] == [DeletionOutcome.ALREADY_ABSENT]


class TestDeleteFile:
    """Tests for DeletionEngine.delete_file."""

    def test_missing_file(self, engine: DeletionEngine, tmp_path: Path) -> None:
        """A missing file is already absent."""
        result = engine.delete_file(tmp_path / "missing.txt")

        assert result.outcome == DeletionOutcome.ALREADY_ABSENT

    def test_deletes_file(self, engine: DeletionEngine, tmp_path: Path) -> None:
        """An existing file is removed."""
        path = tmp_path / "a.txt"
        path.write_text("a")

        assert engine.delete_file(path).outcome == DeletionOutcome.DELETED
        assert not path.exists()

    def test_permission_denied(
        self, engine: DeletionEngine, filesystem: DenyingFileSystem, tmp_path: Path
    ) -> None:
        """A denied file delete is an error, never escalated."""
        path = tmp_path / "a.txt"
        path.write_text("a")

        with patch.object(filesystem, "delete_file", side_effect=PermissionError("denied")):
            result = engine.delete_file(path)

        assert result.outcome == DeletionOutcome.ERROR
        assert path.exists()
