"""Main CLI application entry point.

Running ``appsweep`` with no arguments performs a full interactive
cleanup with the resolved target set.
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Annotated

import typer

from appsweep import __version__
from appsweep.cli.display import print_report
from appsweep.core.cleaner import Cleaner
from appsweep.core.config import ConfigError, TargetSet, resolve_targets, save_targets
from appsweep.core.logging_config import setup_logging
from appsweep.core.paths import resolve_system_paths
from appsweep.filesystem.base import LocalFileSystem
from appsweep.interaction import AutoConfirmer, Confirmer, ConsoleConfirmer
from appsweep.models.outcome import SweepReport
from appsweep.processes import PsutilProcessManager
from appsweep.registry import get_system_registry
from appsweep.utils.formatting import console, print_error, print_info, print_success

EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2

app = typer.Typer(
    name="appsweep",
    help="Remove an application's leftover files, registry keys and temp data.",
    no_args_is_help=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"appsweep version {__version__}")
        raise typer.Exit()


def _load_targets(config: Path | None) -> TargetSet:
    try:
        return resolve_targets(config)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from e


def _choose_confirmer(assume: bool | None) -> Confirmer:
    if assume is None:
        return ConsoleConfirmer()
    return AutoConfirmer(assume)


def _resolve_temp(targets: TargetSet, temp: bool | None, assume: bool | None) -> TargetSet:
    """Decide whether temp areas are swept, prompting when nothing says so.

    Args:
        targets: Loaded target set.
        temp: Value of --temp/--no-temp, None if neither was given.
        assume: Value of --yes/--no, None for an interactive run.

    Returns:
        The target set with clean_temp_folders settled.
    """
    if temp is None and assume is not None:
        temp = assume
    elif temp is None:
        temp = typer.confirm("Clean temporary folders?", default=targets.clean_temp_folders)
    if temp == targets.clean_temp_folders:
        return targets
    return targets.model_copy(update={"clean_temp_folders": temp})


def _run_cleaner(cleaner: Cleaner) -> SweepReport:
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="appsweep") as executor:
        return executor.submit(cleaner.run).result()


@app.command()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Target set TOML file to use instead of the configured one.",
            dir_okay=False,
        ),
    ] = None,
    temp: Annotated[
        bool | None,
        typer.Option(
            "--temp/--no-temp",
            help="Clean temporary folders. Asked interactively if omitted.",
            show_default=False,
        ),
    ] = None,
    assume: Annotated[
        bool | None,
        typer.Option(
            "--yes/--no",
            "-y/-n",
            help="Answer every confirmation with yes (or no) instead of asking.",
            show_default=False,
        ),
    ] = None,
    no_pause: Annotated[
        bool,
        typer.Option(
            "--no-pause",
            help="Exit immediately instead of waiting for Enter.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug log records on the console.",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Also write a rotating debug log to this file.",
            dir_okay=False,
        ),
    ] = None,
    write_config: Annotated[
        bool,
        typer.Option(
            "--write-config",
            help="Write the active target set to the user config file and exit.",
        ),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """appsweep - remove an application's leftovers from every user on the machine.

    Closes blocking applications, deletes system and per-user folders,
    removes registry keys from every user hive and empties temp folders.
    """
    setup_logging(verbose=verbose, log_file=log_file)
    targets = _load_targets(config)

    if write_config:
        try:
            path = save_targets(targets)
        except ConfigError as e:
            print_error(str(e))
            raise typer.Exit(code=EXIT_CONFIG_ERROR) from e
        print_success(f"Target set written to {path}")
        raise typer.Exit()

    targets = _resolve_temp(targets, temp, assume)

    print_info(f"Cleaning up {targets.app_name}")
    cleaner = Cleaner(
        targets=targets,
        paths=resolve_system_paths(),
        filesystem=LocalFileSystem(),
        processes=PsutilProcessManager(),
        confirmer=_choose_confirmer(assume),
        registry=get_system_registry(),
    )
    report = _run_cleaner(cleaner)
    print_report(report)

    if not no_pause:
        try:
            console.input("Press Enter to exit...")
        except EOFError:
            pass

    if not report.success:
        raise typer.Exit(code=EXIT_FAILURE)


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
