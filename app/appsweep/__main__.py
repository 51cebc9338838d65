"""Allow running appsweep with ``python -m appsweep``."""

from appsweep.cli.main import run

if __name__ == "__main__":
    run()
