"""Deletion engine.

Removes folders and files with three strategies:

- ``delete_folder``: recursive delete, with an elevated fallback when
  the direct delete is denied.
- ``delete_folder_with_confirmation``: file-by-file walk where protected
  files need the user's agreement; directories that cannot contain a
  protected file are still removed wholesale.
- ``delete_file``: delete-if-exists.

Every operation is scoped to its node: failures are logged and returned
as DeletionResult values, never raised.
"""

import logging
from pathlib import Path

from appsweep.filesystem.base import FileSystem
from appsweep.filesystem.elevation import ElevatedRemover
from appsweep.filesystem.policy import ConfirmationPolicy
from appsweep.interaction import Confirmer
from appsweep.models.outcome import DeletionOutcome, DeletionResult

logger = logging.getLogger(__name__)


class DeletionEngine:
    """Deletes folders and files on behalf of the sweep.

    Args:
        filesystem: Filesystem capability to operate through.
        confirmer: Asked before a protected file is removed.
        policy: Decides which files are protected.
        elevator: Fallback used when a recursive delete is denied.
    """

    def __init__(
        self,
        filesystem: FileSystem,
        confirmer: Confirmer,
        policy: ConfirmationPolicy,
        elevator: ElevatedRemover,
    ) -> None:
        self._fs = filesystem
        self._confirmer = confirmer
        self._policy = policy
        self._elevator = elevator

    @property
    def filesystem(self) -> FileSystem:
        """Filesystem capability the engine operates through."""
        return self._fs

    def delete_folder(self, path: Path) -> DeletionResult:
        """Delete a folder and everything in it.

        A missing folder is not an error. A symlink or junction is removed
        itself and its target is left alone. A denied delete is retried
        exactly once through the elevated helper; any other failure
        leaves the folder in place.

        Args:
            path: Folder to delete.

        Returns:
            DeletionResult for the folder.
        """
        target = str(path)
        if self._fs.is_link(path):
            return self._delete_link(path)
        if not self._fs.directory_exists(path):
            logger.debug("Folder does not exist: %s", path)
            return DeletionResult(target, DeletionOutcome.ALREADY_ABSENT)

        try:
            logger.info("Deleting folder: %s", path)
            self._fs.delete_directory(path, recursive=True)
        except PermissionError:
            logger.warning(
                "Access denied to folder: %s. Attempting with elevated permissions.", path
            )
            return self._delete_elevated(path)
        except OSError as e:
            logger.error("Unable to delete folder %s: %s", path, e)
            return DeletionResult(target, DeletionOutcome.ERROR, str(e))

        logger.info("Folder deleted: %s", path)
        return DeletionResult(target, DeletionOutcome.DELETED)

    def _delete_link(self, path: Path) -> DeletionResult:
        try:
            self._fs.delete_link(path)
        except OSError as e:
            logger.error("Unable to remove link %s: %s", path, e)
            return DeletionResult(str(path), DeletionOutcome.ERROR, str(e))

        logger.info("Removed link without following it: %s", path)
        return DeletionResult(str(path), DeletionOutcome.DELETED)

    def _delete_elevated(self, path: Path) -> DeletionResult:
        target = str(path)
        result = self._elevator.remove(path)

        if not result.completed:
            return DeletionResult(target, DeletionOutcome.ESCALATED_FAILED, result.error)

        try:
            still_there = self._fs.directory_exists(path)
        except OSError as e:
            return DeletionResult(target, DeletionOutcome.ESCALATED_FAILED, str(e))

        if still_there:
            logger.warning("Elevated delete completed but folder still exists: %s", path)
            return DeletionResult(
                target,
                DeletionOutcome.ESCALATED_FAILED,
                result.error or "Folder still exists after elevated delete",
            )

        logger.info("Successfully deleted folder with elevated permissions: %s", path)
        return DeletionResult(target, DeletionOutcome.ESCALATED_DELETED)

    def delete_folder_with_confirmation(self, base_folder: Path) -> list[DeletionResult]:
        """Delete a folder file by file, asking before protected files.

        Direct files are removed unless protected and declined.
        Subdirectories that may hold a protected file are walked by the
        same rule; all others go to delete_folder. A walked directory
        (and the base itself) is removed afterwards only if it ended up
        empty, with a non-recursive delete.

        Args:
            base_folder: Folder the protected paths are relative to.

        Returns:
            DeletionResult for every node that was acted on.
        """
        if self._fs.is_link(base_folder):
            return [self._delete_link(base_folder)]
        if not self._fs.directory_exists(base_folder):
            logger.debug("Folder does not exist: %s", base_folder)
            return [DeletionResult(str(base_folder), DeletionOutcome.ALREADY_ABSENT)]

        logger.info("Processing folder contents: %s", base_folder)
        results: list[DeletionResult] = []
        self._walk_with_confirmation(base_folder, base_folder, results)
        return results

    def _walk_with_confirmation(
        self,
        base_folder: Path,
        folder: Path,
        results: list[DeletionResult],
    ) -> None:
        try:
            files = self._fs.list_files(folder)
            subdirs = self._fs.list_directories(folder)
        except PermissionError as e:
            logger.warning("Access denied to folder: %s (%s)", folder, e)
            results.append(DeletionResult(str(folder), DeletionOutcome.ERROR, str(e)))
            return
        except OSError as e:
            logger.error("Error processing folder %s: %s", folder, e)
            results.append(DeletionResult(str(folder), DeletionOutcome.ERROR, str(e)))
            return

        for file_path in files:
            results.append(self._delete_file_gated(base_folder, file_path))

        for subdir in subdirs:
            if self._policy.guards_directory(base_folder, subdir):
                self._walk_with_confirmation(base_folder, subdir, results)
            else:
                results.append(self.delete_folder(subdir))

        removed = self._remove_if_empty(folder)
        if removed is not None:
            results.append(removed)

    def _delete_file_gated(self, base_folder: Path, file_path: Path) -> DeletionResult:
        if not self._policy.requires_confirmation(base_folder, file_path):
            return self.delete_file(file_path)

        logger.info("Protected file found: %s", file_path)
        if not self._confirmer.confirm(f"The file {file_path} is used for authentication."):
            logger.info("Protected file kept: %s", file_path)
            return DeletionResult(str(file_path), DeletionOutcome.KEPT_BY_USER)

        result = self.delete_file(file_path)
        if result.removed:
            logger.info("Protected file deleted: %s", file_path)
        return result

    def _remove_if_empty(self, folder: Path) -> DeletionResult | None:
        try:
            if not self._fs.directory_exists(folder):
                return None
            if self._fs.has_entries(folder):
                logger.info("Folder kept, not empty: %s", folder)
                return None
            self._fs.delete_directory(folder, recursive=False)
        except OSError as e:
            logger.error("Failed to delete empty folder %s: %s", folder, e)
            return DeletionResult(str(folder), DeletionOutcome.ERROR, str(e))

        logger.info("Deleted empty folder: %s", folder)
        return DeletionResult(str(folder), DeletionOutcome.DELETED)

    def delete_file(self, path: Path) -> DeletionResult:
        """Delete a single file if it exists.

        Args:
            path: File to delete.

        Returns:
            DeletionResult for the file.
        """
        target = str(path)
        try:
            if not self._fs.file_exists(path):
                logger.debug("File does not exist: %s", path)
                return DeletionResult(target, DeletionOutcome.ALREADY_ABSENT)
            self._fs.delete_file(path)
        except PermissionError as e:
            logger.warning("Access denied to file: %s (%s)", path, e)
            return DeletionResult(target, DeletionOutcome.ERROR, str(e))
        except OSError as e:
            logger.error("Failed to delete file %s: %s", path, e)
            return DeletionResult(target, DeletionOutcome.ERROR, str(e))

        logger.debug("File deleted: %s", path)
        return DeletionResult(target, DeletionOutcome.DELETED)
