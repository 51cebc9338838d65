"""Rich display functions for sweep reports.

Builds the per-stage summary table and the closing summary line printed
after a cleanup run.
"""

from rich.markup import escape
from rich.table import Table

from appsweep.models.outcome import DeletionOutcome, DeletionResult, StageReport, SweepReport
from appsweep.utils.formatting import console, print_success, print_warning

_STAGE_TITLES = {
    "stop_blocking_processes": "Close applications",
    "clean_system_paths": "System folders",
    "clean_current_principal": "Current user",
    "clean_other_principals": "Other profiles",
    "sweep_registry": "Registry",
    "sweep_temp_areas": "Temporary folders",
}


def _stage_label(stage: StageReport) -> str:
    title = _STAGE_TITLES.get(stage.stage.value, stage.stage.value)
    if not stage.mandatory:
        return f"{title} [muted](optional)[/muted]"
    return title


def _count(results: list[DeletionResult], *outcomes: DeletionOutcome) -> int:
    return sum(1 for r in results if r.outcome in outcomes)


def create_report_table(report: SweepReport) -> Table:
    """Create a Rich table summarizing each stage of a run.

    Args:
        report: Report returned by the cleaner.

    Returns:
        Rich Table with one row per stage.
    """
    table = Table(
        title="Cleanup Summary",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Stage")
    table.add_column("Removed", justify="right")
    table.add_column("Absent", justify="right")
    table.add_column("Kept", justify="right")
    table.add_column("Failed", justify="right")

    for stage in report.stages:
        if stage.success:
            status = "[success]OK[/success]"
        elif stage.mandatory:
            status = "[error]FAIL[/error]"
        else:
            status = "[warning]WARN[/warning]"

        removed = _count(
            stage.results, DeletionOutcome.DELETED, DeletionOutcome.ESCALATED_DELETED
        )
        table.add_row(
            status,
            _stage_label(stage),
            f"[removed]{removed}[/removed]",
            f"[muted]{_count(stage.results, DeletionOutcome.ALREADY_ABSENT)}[/muted]",
            f"[kept]{_count(stage.results, DeletionOutcome.KEPT_BY_USER)}[/kept]",
            str(len(stage.failures)),
        )

    return table


def create_failures_table(report: SweepReport) -> Table:
    """Create a Rich table listing every node left behind by a failure.

    Args:
        report: Report returned by the cleaner.

    Returns:
        Rich Table with one row per failed result.
    """
    table = Table(
        title="Failures",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Outcome", width=18)
    table.add_column("Target", no_wrap=True)
    table.add_column("Error")

    for result in report.results:
        if result.failed:
            table.add_row(
                f"[error]{result.outcome.value}[/error]",
                escape(result.target),
                f"[muted]{escape(result.error or 'Unknown error')}[/muted]",
            )

    return table


def print_report(report: SweepReport) -> None:
    """Print the summary table, any failures and a closing line.

    Args:
        report: Report returned by the cleaner.
    """
    console.print(create_report_table(report))

    if any(r.failed for r in report.results):
        console.print(create_failures_table(report))

    if report.best_effort:
        print_warning("Applications were left running; some files may remain.")

    if report.success:
        print_success("Cleanup completed successfully.")
    else:
        failed_stages = sum(1 for s in report.stages if s.mandatory and not s.success)
        console.print(f"\n[error]Cleanup completed with errors in {failed_stages} stage(s).[/error]")
