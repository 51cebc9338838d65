"""Shared Rich consoles and message helpers.

Reports and prompts go to ``console`` (stdout); warnings, errors and log
records go to ``err_console`` (stderr).
"""

import sys

from rich.console import Console

from appsweep.core.theme import get_theme


def _color_system() -> str | None:
    # Hex theme colors need truecolor; leave detection to Rich when piped
    return "truecolor" if sys.stdout.isatty() else None


console = Console(theme=get_theme(), color_system=_color_system())
err_console = Console(theme=get_theme(), color_system=_color_system(), stderr=True)


def print_info(message: str) -> None:
    """Print an informational line."""
    console.print(message, style="info")


def print_success(message: str) -> None:
    """Print a success line."""
    console.print(message, style="success")


def print_warning(message: str) -> None:
    """Print a warning to stderr."""
    err_console.print(f"[warning]Warning:[/warning] {message}")


def print_error(message: str) -> None:
    """Print an error to stderr."""
    err_console.print(f"[error]Error:[/error] {message}")
