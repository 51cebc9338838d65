"""Confirmation policy for protected files.

Decides, for a file found below a folder that is processed with
confirmation, whether the user must agree before it is removed.
Matching is exact: a file one directory off, or with a different
name, is an ordinary file.
"""

from pathlib import Path

from appsweep.core.config import split_relative


class ConfirmationPolicy:
    """Matches files and directories against the protected relative paths.

    Args:
        protected_files: Paths relative to a base folder. Both ``/`` and
            ``\\`` separators are accepted; comparison is case-sensitive.
    """

    def __init__(self, protected_files: tuple[str, ...] | list[str]) -> None:
        self._protected: frozenset[tuple[str, ...]] = frozenset(
            split_relative(entry) for entry in protected_files
        )
        # Every proper directory prefix of a protected file
        self._guarded: frozenset[tuple[str, ...]] = frozenset(
            parts[:i] for parts in self._protected for i in range(1, len(parts))
        )

    @property
    def protected(self) -> frozenset[tuple[str, ...]]:
        """Protected entries as tuples of path components."""
        return self._protected

    def requires_confirmation(self, base_folder: Path, file_path: Path) -> bool:
        """Check if deleting a file needs explicit user confirmation.

        Args:
            base_folder: Folder the protected paths are relative to.
            file_path: Candidate file.

        Returns:
            True iff the file's path relative to base_folder is protected.
            A file outside base_folder is never protected.
        """
        relative = _relative_parts(base_folder, file_path)
        if relative is None:
            return False
        return relative in self._protected

    def guards_directory(self, base_folder: Path, dir_path: Path) -> bool:
        """Check if a directory may contain a protected file.

        Such a directory must be walked file by file and is never
        deleted wholesale.

        Args:
            base_folder: Folder the protected paths are relative to.
            dir_path: Candidate directory.

        Returns:
            True iff the directory's relative path is a parent of a
            protected entry.
        """
        relative = _relative_parts(base_folder, dir_path)
        if relative is None:
            return False
        return relative in self._guarded


def _relative_parts(base_folder: Path, path: Path) -> tuple[str, ...] | None:
    try:
        return Path(path).relative_to(base_folder).parts
    except ValueError:
        return None
