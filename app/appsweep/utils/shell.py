"""Helper process execution.

Runs a short-lived helper (the elevated PowerShell delete) hidden from
the user, with its output captured and its wait bounded.
"""

import shutil
import subprocess
import sys
from dataclasses import dataclass

DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured result of a finished helper process.

    Attributes:
        stdout: Text written to standard output.
        stderr: Text written to standard error.
        returncode: Exit status of the process.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if the helper exited with status 0."""
        return self.returncode == 0


def _creation_flags() -> int:
    # Keep console helpers from flashing a window on Windows
    if sys.platform == "win32":
        return subprocess.CREATE_NO_WINDOW
    return 0


def run_command(args: list[str], *, timeout: float | None = DEFAULT_TIMEOUT) -> CommandResult:
    """Run a helper to completion and capture its output.

    Args:
        args: Executable followed by its arguments.
        timeout: Seconds to wait before the helper is killed.

    Returns:
        CommandResult with the decoded output and exit status.

    Raises:
        subprocess.TimeoutExpired: If the helper outlives the timeout.
        OSError: If the executable cannot be started.
    """
    completed = subprocess.run(
        args,
        capture_output=True,
        text=True,
        timeout=timeout,
        creationflags=_creation_flags(),
        check=False,
    )
    return CommandResult(completed.stdout, completed.stderr, completed.returncode)


def command_exists(name: str) -> bool:
    """Check if an executable can be found on PATH."""
    return shutil.which(name) is not None
