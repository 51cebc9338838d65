"""Deletion outcome models.

This module defines the per-node outcome of a deletion attempt and the
per-stage and per-run reports the orchestrator aggregates them into.
"""

from dataclasses import dataclass, field
from enum import Enum


class DeletionOutcome(str, Enum):
    """Outcome of a single deletion attempt.

    Attributes:
        DELETED: The node was removed directly.
        ALREADY_ABSENT: The node did not exist; nothing to do.
        ESCALATED_DELETED: Direct deletion was denied, the elevated helper removed it.
        ESCALATED_FAILED: Direct deletion was denied and the elevated helper failed too.
        KEPT_BY_USER: The node is protected and the user declined its deletion.
        ERROR: Any other failure; the node was left in place.
    """

    DELETED = "deleted"
    ALREADY_ABSENT = "already_absent"
    ESCALATED_DELETED = "escalated_deleted"
    ESCALATED_FAILED = "escalated_failed"
    KEPT_BY_USER = "kept_by_user"
    ERROR = "error"


FAILED_OUTCOMES: frozenset[DeletionOutcome] = frozenset(
    {DeletionOutcome.ERROR, DeletionOutcome.ESCALATED_FAILED}
)


@dataclass(frozen=True, slots=True)
class DeletionResult:
    """Result of a single deletion attempt.

    Attributes:
        target: Path or registry key the attempt operated on.
        outcome: What happened to the node.
        error: Error message if the attempt failed, None otherwise.
    """

    target: str
    outcome: DeletionOutcome
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate result data after initialization."""
        if not self.target:
            msg = "Deletion target cannot be empty"
            raise ValueError(msg)

    @property
    def failed(self) -> bool:
        """Check if the node is still present because of a failure."""
        return self.outcome in FAILED_OUTCOMES

    @property
    def removed(self) -> bool:
        """Check if the node was removed during this attempt."""
        return self.outcome in (DeletionOutcome.DELETED, DeletionOutcome.ESCALATED_DELETED)


class Stage(str, Enum):
    """Orchestrator stages, in execution order."""

    STOP_BLOCKING_PROCESSES = "stop_blocking_processes"
    CLEAN_SYSTEM_PATHS = "clean_system_paths"
    CLEAN_CURRENT_PRINCIPAL = "clean_current_principal"
    CLEAN_OTHER_PRINCIPALS = "clean_other_principals"
    SWEEP_REGISTRY = "sweep_registry"
    SWEEP_TEMP_AREAS = "sweep_temp_areas"
    DONE = "done"


@dataclass(slots=True)
class StageReport:
    """Results collected while one stage ran.

    Attributes:
        stage: The stage these results belong to.
        mandatory: Whether failures in this stage fail the whole run.
        results: Per-node deletion results, in execution order.
        error: Message of an unexpected exception that ended the stage early.
    """

    stage: Stage
    mandatory: bool = True
    results: list[DeletionResult] = field(default_factory=list)
    error: str | None = None

    @property
    def failures(self) -> list[DeletionResult]:
        """Return the failed results of this stage."""
        return [r for r in self.results if r.failed]

    @property
    def success(self) -> bool:
        """Check if the stage completed without failures."""
        return self.error is None and not self.failures


@dataclass(slots=True)
class SweepReport:
    """Aggregated outcome of a full cleanup run.

    Attributes:
        stages: One report per stage that was entered.
        processes_closed: Whether blocking processes were closed (or none ran).
        best_effort: True when the user declined closing processes, which
            downgrades every later stage to non-mandatory.
    """

    stages: list[StageReport] = field(default_factory=list)
    processes_closed: bool = True
    best_effort: bool = False

    @property
    def results(self) -> list[DeletionResult]:
        """Return all results across every stage."""
        return [r for stage in self.stages for r in stage.results]

    @property
    def success(self) -> bool:
        """Check if every mandatory stage succeeded.

        Failures in optional stages (other profiles, per-user hives,
        temp areas) never fail the run.
        """
        return all(stage.success for stage in self.stages if stage.mandatory)

    def count(self, outcome: DeletionOutcome) -> int:
        """Count results with the given outcome across all stages."""
        return sum(1 for r in self.results if r.outcome == outcome)
