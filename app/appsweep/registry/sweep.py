"""Registry sweep.

Deletes configured keys under a single hive, and under every per-user
hive loaded below HKEY_USERS.
"""

import logging

from appsweep.models.outcome import DeletionOutcome, DeletionResult
from appsweep.models.principal import Principal, PrincipalKind
from appsweep.registry.base import Hive, Registry, format_key

logger = logging.getLogger(__name__)

# Pseudo-profile hive that every machine carries
DEFAULT_HIVE_NAME = ".DEFAULT"
# Suffix of the class-registration shadow hive loaded next to each user hive
CLASSES_HIVE_SUFFIX = "_Classes"


def is_user_hive(name: str) -> bool:
    """Check if a HKEY_USERS child name is a real per-user hive.

    Args:
        name: Immediate child key name of HKEY_USERS.

    Returns:
        False for the default pseudo-profile and class-registration hives.
    """
    return name != DEFAULT_HIVE_NAME and not name.endswith(CLASSES_HIVE_SUFFIX)


class RegistrySweep:
    """Removes keys from one hive or from every per-user hive.

    Args:
        registry: Registry capability to operate through.
    """

    def __init__(self, registry: Registry) -> None:
        self._registry = registry

    def delete_key(self, hive: Hive, key_path: str) -> DeletionResult:
        """Delete a key and its entire subtree if it exists.

        Args:
            hive: Hive containing the key.
            key_path: Key path relative to the hive.

        Returns:
            DeletionResult for the key.
        """
        display = format_key(hive, key_path)
        try:
            logger.info("Checking registry key: %s", display)
            if not self._registry.key_exists(hive, key_path):
                logger.debug("Registry key does not exist: %s", display)
                return DeletionResult(display, DeletionOutcome.ALREADY_ABSENT)

            self._registry.delete_key_tree(hive, key_path)
        except PermissionError as e:
            logger.warning(
                "Access denied to registry key: %s. Administrative privileges may be required.",
                display,
            )
            return DeletionResult(display, DeletionOutcome.ERROR, str(e))
        except (OSError, ValueError) as e:
            logger.error("Unable to delete registry key %s: %s", display, e)
            return DeletionResult(display, DeletionOutcome.ERROR, str(e))

        logger.info("Registry key deleted: %s", display)
        return DeletionResult(display, DeletionOutcome.DELETED)

    def principals(self) -> list[Principal]:
        """List the per-user hives loaded below HKEY_USERS.

        Returns:
            One REGISTRY_HIVE principal per user SID, in enumeration order.

        Raises:
            OSError: If HKEY_USERS cannot be enumerated.
        """
        names = self._registry.subkey_names(Hive.USERS)
        logger.info("Found %d user registry hives", len(names))
        return [
            Principal(kind=PrincipalKind.REGISTRY_HIVE, name=name)
            for name in names
            if is_user_hive(name)
        ]

    def sweep_all_principals(self, base_key_path: str) -> list[DeletionResult]:
        """Delete a key from every per-user hive.

        Enumeration and per-hive failures are logged and skipped; they
        never stop the sweep over the remaining hives.

        Args:
            base_key_path: Key path relative to each user's hive root.

        Returns:
            DeletionResult for every hive that was processed.
        """
        try:
            principals = self.principals()
        except OSError as e:
            logger.error("Failed to process user registry hives: %s", e)
            return []

        results: list[DeletionResult] = []
        for principal in principals:
            logger.info("Checking registry for user SID: %s", principal.name)
            try:
                results.append(self.delete_key(Hive.USERS, principal.key_path(base_key_path)))
            except Exception as e:
                logger.warning("Error accessing registry for user SID %s: %s", principal.name, e)
        return results
