"""Filesystem deletion module.

This module provides the filesystem capability, the confirmation
policy for protected files, the elevated delete fallback, and the
deletion engine built on top of them.
"""

from appsweep.filesystem.base import FileSystem, LocalFileSystem
from appsweep.filesystem.elevation import ElevatedRemover, ElevationResult
from appsweep.filesystem.engine import DeletionEngine
from appsweep.filesystem.policy import ConfirmationPolicy

__all__ = [
    "ConfirmationPolicy",
    "DeletionEngine",
    "ElevatedRemover",
    "ElevationResult",
    "FileSystem",
    "LocalFileSystem",
]
