"""Filesystem capability used by the deletion engine.

The engine never touches the disk directly; it goes through this
interface so tests can substitute fakes for permission and in-use
failures that are hard to produce on a real disk.
"""

import os
import shutil
import stat
from abc import ABC, abstractmethod
from pathlib import Path


class FileSystem(ABC):
    """Abstract base class for filesystem access.

    Implementations raise OSError subclasses unchanged; classifying
    them (PermissionError vs. anything else) is the engine's job.
    """

    @abstractmethod
    def directory_exists(self, path: Path) -> bool:
        """Check if a directory exists at path."""

    @abstractmethod
    def file_exists(self, path: Path) -> bool:
        """Check if a file (or symlink) exists at path."""

    @abstractmethod
    def list_files(self, path: Path) -> list[Path]:
        """List the direct file children of a directory, sorted."""

    @abstractmethod
    def list_directories(self, path: Path) -> list[Path]:
        """List the direct subdirectories of a directory, sorted."""

    @abstractmethod
    def has_entries(self, path: Path) -> bool:
        """Check if a directory has any children at all."""

    @abstractmethod
    def delete_directory(self, path: Path, *, recursive: bool) -> None:
        """Delete a directory.

        Args:
            path: Directory to delete.
            recursive: If True, delete the whole tree; otherwise the
                directory must be empty.
        """

    @abstractmethod
    def is_link(self, path: Path) -> bool:
        """Check if path is a symlink or junction, without following it."""

    @abstractmethod
    def delete_link(self, path: Path) -> None:
        """Remove a symlink or junction itself, leaving its target alone."""

    @abstractmethod
    def delete_file(self, path: Path) -> None:
        """Delete a single file."""


class LocalFileSystem(FileSystem):
    """FileSystem backed by the local disk."""

    def directory_exists(self, path: Path) -> bool:
        return path.is_dir() and not path.is_symlink()

    def file_exists(self, path: Path) -> bool:
        return path.is_file() or path.is_symlink()

    def list_files(self, path: Path) -> list[Path]:
        with os.scandir(path) as entries:
            return sorted(
                Path(e.path) for e in entries if e.is_file() or e.is_symlink()
            )

    def list_directories(self, path: Path) -> list[Path]:
        with os.scandir(path) as entries:
            return sorted(
                Path(e.path) for e in entries if e.is_dir(follow_symlinks=False)
            )

    def has_entries(self, path: Path) -> bool:
        with os.scandir(path) as entries:
            return next(entries, None) is not None

    def delete_directory(self, path: Path, *, recursive: bool) -> None:
        if recursive:
            shutil.rmtree(path)
        else:
            path.rmdir()

    def is_link(self, path: Path) -> bool:
        try:
            info = path.lstat()
        except OSError:
            return False
        if stat.S_ISLNK(info.st_mode):
            return True
        # Junctions are mount-point reparse points, not S_IFLNK
        tag = getattr(info, "st_reparse_tag", 0)
        return tag == getattr(stat, "IO_REPARSE_TAG_MOUNT_POINT", None)

    def delete_link(self, path: Path) -> None:
        # Directory links on Windows are removed like empty directories
        if os.name == "nt" and path.is_dir():
            path.rmdir()
        else:
            path.unlink()

    def delete_file(self, path: Path) -> None:
        if self.is_link(path):
            self.delete_link(path)
        else:
            path.unlink()
