"""User profile discovery.

Lists the profile directories under the machine's users root, skipping
the shared pseudo-profiles and the current user (who is handled by a
separate stage).
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from appsweep.filesystem.base import FileSystem
from appsweep.models.principal import Principal, PrincipalKind

logger = logging.getLogger(__name__)

# Shared profiles that never belong to a real user (matched case-insensitively)
PSEUDO_PROFILES: frozenset[str] = frozenset({"public", "default", "default user", "all users"})


def _same_path(a: Path, b: Path) -> bool:
    return os.path.normcase(os.path.normpath(a)) == os.path.normcase(os.path.normpath(b))


def current_principal(home: Path) -> Principal:
    """Build the principal for the user running the sweep.

    Args:
        home: The current user's profile directory.

    Returns:
        CURRENT_SESSION principal rooted at home.
    """
    return Principal(kind=PrincipalKind.CURRENT_SESSION, name=home.name or str(home), root=home)


class ProfileEnumerator:
    """Discovers user profiles under the users root.

    Args:
        filesystem: Filesystem capability used for listing.
        users_root: Directory holding every user profile.
        current: Principal already handled separately, excluded from results.
    """

    def __init__(
        self,
        filesystem: FileSystem,
        users_root: Path,
        current: Principal | None = None,
    ) -> None:
        self._fs = filesystem
        self._users_root = users_root
        self._current = current

    def _is_excluded(self, profile_dir: Path) -> bool:
        if profile_dir.name.lower() in PSEUDO_PROFILES:
            return True
        if self._current is not None and self._current.root is not None:
            return _same_path(profile_dir, self._current.root)
        return False

    def profiles(self) -> Iterator[Principal]:
        """Yield every real user profile other than the current one.

        A missing or unreadable users root yields nothing.

        Yields:
            USER_PROFILE principals, in directory order.
        """
        try:
            if not self._fs.directory_exists(self._users_root):
                logger.warning("Users folder not found at %s", self._users_root)
                return
            entries = self._fs.list_directories(self._users_root)
        except OSError as e:
            logger.warning("Cannot list user profiles in %s: %s", self._users_root, e)
            return

        candidates = [d for d in entries if not self._is_excluded(d)]
        logger.info("Found %d user profiles to check", len(candidates))

        for profile_dir in candidates:
            yield Principal(kind=PrincipalKind.USER_PROFILE, name=profile_dir.name, root=profile_dir)
