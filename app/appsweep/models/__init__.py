"""Data models for appsweep.

This module exports the core data structures used throughout the application.
"""

from appsweep.models.outcome import (
    FAILED_OUTCOMES,
    DeletionOutcome,
    DeletionResult,
    Stage,
    StageReport,
    SweepReport,
)
from appsweep.models.principal import Principal, PrincipalKind

__all__ = [
    "FAILED_OUTCOMES",
    "DeletionOutcome",
    "DeletionResult",
    "Principal",
    "PrincipalKind",
    "Stage",
    "StageReport",
    "SweepReport",
]
