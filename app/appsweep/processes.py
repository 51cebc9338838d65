"""Process control for applications that block the cleanup.

Files held open by a running application cannot be deleted, so the
orchestrator stops those applications first.
"""

import logging
from abc import ABC, abstractmethod

import psutil

logger = logging.getLogger(__name__)

_EXE_SUFFIX = ".exe"


def _normalize_name(name: str) -> str:
    name = name.strip().lower()
    if name.endswith(_EXE_SUFFIX):
        return name[: -len(_EXE_SUFFIX)]
    return name


class ProcessManager(ABC):
    """Abstract base class for process control."""

    @abstractmethod
    def is_running(self, name: str) -> bool:
        """Check if any process with the given name is running."""

    @abstractmethod
    def kill(self, name: str) -> bool:
        """Stop every process with the given name.

        Returns:
            True if no matching process remains (zero matches counts
            as success), False otherwise.
        """


class PsutilProcessManager(ProcessManager):
    """Process control backed by psutil.

    Names match case-insensitively, with or without an ``.exe`` suffix.

    Args:
        timeout: Seconds to wait for graceful termination before killing.
    """

    def __init__(self, timeout: float = 5.0) -> None:
        self._timeout = timeout

    def _find(self, name: str) -> list[psutil.Process]:
        wanted = _normalize_name(name)
        found: list[psutil.Process] = []
        try:
            for proc in psutil.process_iter(["name"]):
                try:
                    proc_name = proc.info["name"]
                    if proc_name and _normalize_name(proc_name) == wanted:
                        found.append(proc)
                except (psutil.NoSuchProcess, psutil.AccessDenied):
                    continue
        except psutil.Error as e:
            logger.warning("Error enumerating processes: %s", e)
        return found

    def is_running(self, name: str) -> bool:
        return bool(self._find(name))

    def kill(self, name: str) -> bool:
        processes = self._find(name)
        if not processes:
            return True

        logger.info("Attempting to close %d instances of %s", len(processes), name)

        for proc in processes:
            try:
                proc.terminate()
            except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
                logger.debug("Could not terminate %s (PID %d): %s", name, proc.pid, e)

        _gone, alive = psutil.wait_procs(processes, timeout=self._timeout)

        for proc in alive:
            try:
                proc.kill()
                logger.info("Force killed %s (PID %d)", name, proc.pid)
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied as e:
                logger.warning("Could not kill %s (PID %d): %s", name, proc.pid, e)

        remaining = self._find(name)
        if remaining:
            logger.warning("Failed to close all %s processes: %d remaining", name, len(remaining))
            return False

        logger.info("Successfully closed all %s processes", name)
        return True
