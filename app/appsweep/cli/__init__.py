"""CLI package for appsweep.

This package contains the Typer application and the summary display.
"""

from appsweep.cli.main import app

__all__ = ["app"]
