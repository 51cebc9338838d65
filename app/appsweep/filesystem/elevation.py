"""Elevated delete fallback.

When a direct recursive delete is denied, the folder is handed to a
PowerShell ``Remove-Item -Force -Recurse`` run. The wait is bounded: a
helper that does not finish in time counts as a failed escalation.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from appsweep.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

POWERSHELL = "powershell.exe"
DEFAULT_TIMEOUT = 120.0


@dataclass(frozen=True, slots=True)
class ElevationResult:
    """Result of running the elevated delete helper.

    Attributes:
        completed: Whether the helper ran to completion within the timeout.
        error: Launch/timeout failure or the helper's error stream, if any.
    """

    completed: bool
    error: str | None = None


def _quote_ps(value: str) -> str:
    # Single-quoted PowerShell literal; embedded quotes are doubled
    return "'" + value.replace("'", "''") + "'"


def build_remove_command(path: Path) -> list[str]:
    """Build the PowerShell command line that force-removes a folder.

    Args:
        path: Folder to remove.

    Returns:
        Argument list for run_command.
    """
    script = (
        f"Remove-Item -LiteralPath {_quote_ps(str(path))} "
        "-Force -Recurse -ErrorAction SilentlyContinue"
    )
    return [POWERSHELL, "-NoProfile", "-ExecutionPolicy", "Bypass", "-Command", script]


class ElevatedRemover:
    """Force-removes folders through a PowerShell helper process.

    Args:
        timeout: Maximum seconds to wait for the helper.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        """Seconds the helper may run before it is abandoned."""
        return self._timeout

    def is_available(self) -> bool:
        """Check if PowerShell can be launched on this machine."""
        return command_exists(POWERSHELL)

    def remove(self, path: Path) -> ElevationResult:
        """Run the helper against a folder whose direct delete was denied.

        The helper's exit code is not trusted; callers re-check the
        folder's existence to decide the outcome. Without PowerShell on
        PATH nothing is launched and the run counts as not completed.

        Args:
            path: Folder to remove.

        Returns:
            ElevationResult describing how the helper run ended.
        """
        if not self.is_available():
            msg = "PowerShell not available"
            logger.warning("%s; cannot force-remove %s", msg, path)
            return ElevationResult(completed=False, error=msg)

        logger.info("Attempting to delete folder using PowerShell: %s", path)

        try:
            result = run_command(build_remove_command(path), timeout=self._timeout)
        except subprocess.TimeoutExpired:
            msg = f"PowerShell did not finish within {self._timeout:g}s"
            logger.warning("%s: %s", msg, path)
            return ElevationResult(completed=False, error=msg)
        except OSError as e:
            msg = f"Failed to start PowerShell: {e}"
            logger.warning("%s (%s)", msg, path)
            return ElevationResult(completed=False, error=msg)

        stderr = result.stderr.strip()
        if stderr:
            logger.warning("PowerShell reported an error: %s", stderr)
            return ElevationResult(completed=True, error=stderr)
        return ElevationResult(completed=True)
