"""Temp area sweep.

Temp directories are full of files other programs still hold open, so
per-file failures here are routine and only logged at debug level.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from appsweep.filesystem.engine import DeletionEngine
from appsweep.models.outcome import DeletionOutcome, DeletionResult
from appsweep.models.principal import Principal

logger = logging.getLogger(__name__)


class TempSweep:
    """Empties temp directories without any confirmation gating.

    Args:
        engine: Deletion engine used for subdirectories.
    """

    def __init__(self, engine: DeletionEngine) -> None:
        self._engine = engine
        self._fs = engine.filesystem

    def clean_folder(self, path: Path) -> list[DeletionResult]:
        """Delete everything directly inside a temp directory.

        Args:
            path: Temp directory to empty. The directory itself is kept.

        Returns:
            DeletionResult for each file removed and each subdirectory attempted.
        """
        try:
            if not self._fs.directory_exists(path):
                logger.debug("Temporary folder not found at %s", path)
                return []
            files = self._fs.list_files(path)
            subdirs = self._fs.list_directories(path)
        except OSError as e:
            logger.warning("Cannot read temporary folder %s: %s", path, e)
            return []

        logger.info("Cleaning temporary folder: %s", path)
        results: list[DeletionResult] = []
        skipped_files = 0

        for file_path in files:
            try:
                self._fs.delete_file(file_path)
            except PermissionError:
                logger.debug("Access denied to file: %s", file_path)
                skipped_files += 1
                continue
            except OSError as e:
                logger.debug("Could not delete file (in use): %s (%s)", file_path, e)
                skipped_files += 1
                continue
            results.append(DeletionResult(str(file_path), DeletionOutcome.DELETED))

        skipped_dirs = 0
        for subdir in subdirs:
            result = self._engine.delete_folder(subdir)
            results.append(result)
            if result.failed:
                skipped_dirs += 1

        logger.info(
            "Temporary folder cleanup completed. %d files and %d directories could not be removed",
            skipped_files,
            skipped_dirs,
        )
        return results

    def sweep(
        self,
        user_temp: Path,
        profiles: Iterable[Principal],
        system_temp: Path,
    ) -> list[DeletionResult]:
        """Sweep the current user's, every profile's and the OS temp areas.

        Args:
            user_temp: Current user's temp directory.
            profiles: Other user profiles whose local temp is swept.
            system_temp: OS-wide temp directory.

        Returns:
            Combined results of every directory swept.
        """
        results = self.clean_folder(user_temp)
        for profile in profiles:
            logger.info("Checking temp folders for user: %s", profile.name)
            results.extend(self.clean_folder(profile.local_temp))
        results.extend(self.clean_folder(system_temp))
        return results
