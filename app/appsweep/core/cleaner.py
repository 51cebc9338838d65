"""Cleanup orchestration.

Runs the sweep stages in a fixed order:

1. Stop applications that hold the target files open
2. Delete system-wide folders
3. Delete the current user's folders
4. Delete the same folders from every other profile
5. Delete registry keys (current user, then every per-user hive)
6. Empty the temp areas

A failing stage is logged and the next one still runs. Only failures in
mandatory stages fail the run; other profiles, per-user hives and temp
areas are best effort.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from appsweep.core.config import TargetSet, UserFolder
from appsweep.core.paths import SystemPaths, expand_path
from appsweep.filesystem.base import FileSystem
from appsweep.filesystem.elevation import ElevatedRemover
from appsweep.filesystem.engine import DeletionEngine
from appsweep.filesystem.policy import ConfirmationPolicy
from appsweep.interaction import Confirmer
from appsweep.models.outcome import (
    DeletionOutcome,
    DeletionResult,
    Stage,
    StageReport,
    SweepReport,
)
from appsweep.models.principal import Principal
from appsweep.processes import ProcessManager
from appsweep.profiles import ProfileEnumerator, current_principal
from appsweep.registry.base import Hive, Registry
from appsweep.registry.sweep import RegistrySweep
from appsweep.temp import TempSweep

logger = logging.getLogger(__name__)


class Cleaner:
    """Sequences a full cleanup run over injected collaborators.

    Args:
        targets: What to remove.
        paths: Machine and current-session locations.
        filesystem: Filesystem capability.
        processes: Process control.
        confirmer: Asked before closing applications and deleting protected files.
        registry: Registry capability, or None where no registry exists.
        engine: Deletion engine. Built from the other collaborators if omitted.
    """

    def __init__(
        self,
        targets: TargetSet,
        paths: SystemPaths,
        filesystem: FileSystem,
        processes: ProcessManager,
        confirmer: Confirmer,
        registry: Registry | None,
        engine: DeletionEngine | None = None,
    ) -> None:
        self._targets = targets
        self._paths = paths
        self._fs = filesystem
        self._processes = processes
        self._confirmer = confirmer
        self._registry = registry
        self._engine = engine or DeletionEngine(
            filesystem,
            confirmer,
            ConfirmationPolicy(targets.protected_files),
            ElevatedRemover(timeout=float(targets.elevation_timeout_seconds)),
        )
        self._current = current_principal(paths.home)

    @property
    def engine(self) -> DeletionEngine:
        """Deletion engine used for every filesystem stage."""
        return self._engine

    def run(self) -> SweepReport:
        """Run every stage once, in order.

        Returns:
            SweepReport aggregating every stage's results.
        """
        report = SweepReport()
        logger.info("Starting cleanup of %s", self._targets.app_name)

        self._run_stage(report, Stage.STOP_BLOCKING_PROCESSES, True, self._stop_processes(report))
        self._run_stage(report, Stage.CLEAN_SYSTEM_PATHS, True, self._clean_system_paths)
        self._run_stage(report, Stage.CLEAN_CURRENT_PRINCIPAL, True, self._clean_current)
        self._run_stage(report, Stage.CLEAN_OTHER_PRINCIPALS, False, self._clean_other_profiles)
        self._run_stage(report, Stage.SWEEP_REGISTRY, True, self._sweep_current_user_registry)
        self._run_stage(report, Stage.SWEEP_REGISTRY, False, self._sweep_user_hives)

        if self._targets.clean_temp_folders:
            self._run_stage(report, Stage.SWEEP_TEMP_AREAS, False, self._sweep_temp)
        else:
            logger.info("Skipping temporary folders")

        self._log_summary(report)
        return report

    def _run_stage(
        self,
        report: SweepReport,
        stage: Stage,
        mandatory: bool,
        action: Callable[[StageReport], None],
    ) -> None:
        stage_report = StageReport(stage=stage, mandatory=mandatory and not report.best_effort)
        report.stages.append(stage_report)
        logger.debug("Entering stage %s", stage.value)
        try:
            action(stage_report)
        except Exception as e:
            logger.exception("Stage %s failed: %s", stage.value, e)
            stage_report.error = str(e)

    # === Stages ===

    def _stop_processes(self, report: SweepReport) -> Callable[[StageReport], None]:
        def stage(_: StageReport) -> None:
            closed = self.ensure_applications_closed()
            report.processes_closed = closed is True
            if closed is False:
                report.best_effort = True

        return stage

    def ensure_applications_closed(self) -> bool | None:
        """Close the applications that block the cleanup.

        Returns:
            True if all are closed (or none ran), None if closing was
            attempted but some survived, False if the user declined.
        """
        running = [n for n in self._targets.processes_to_close if self._processes.is_running(n)]
        for name in running:
            logger.info("%s is currently running", name)

        if not running:
            logger.info("No processes that need to be closed are running")
            return True

        confirmed = self._confirmer.confirm(
            f"{self._targets.app_name} applications need to be closed before cleaning. "
            "Close them now?"
        )
        if not confirmed:
            logger.warning("User declined to close applications. Cleaning may be incomplete")
            return False

        all_closed = True
        for name in running:
            if not self._processes.kill(name):
                logger.warning("Failed to close all instances of %s", name)
                all_closed = False
        return True if all_closed else None

    def _clean_system_paths(self, stage: StageReport) -> None:
        logger.info("Checking system-wide folders")
        for raw in self._targets.system_folders:
            path = expand_path(raw)
            if not path.is_absolute():
                # An unset variable must never resolve against the working directory
                logger.error("System folder %s did not expand to an absolute path", raw)
                stage.results.append(
                    DeletionResult(raw, DeletionOutcome.ERROR, f"Not an absolute path: {path}")
                )
                continue
            stage.results.append(self._engine.delete_folder(path))

    def _clean_current(self, stage: StageReport) -> None:
        logger.info("Checking folders for current user")
        stage.results.extend(
            self._clean_user_folders(self._paths.local_app_data, self._paths.roaming_app_data)
        )

    def _clean_other_profiles(self, stage: StageReport) -> None:
        logger.info("Checking all user profiles on the system")
        for profile in self._other_profiles():
            logger.info("Checking profile for user: %s", profile.name)
            try:
                stage.results.extend(
                    self._clean_user_folders(profile.local_app_data, profile.roaming_app_data)
                )
            except Exception as e:
                logger.error("Error processing user profile %s: %s", profile.root, e)

    def _sweep_current_user_registry(self, stage: StageReport) -> None:
        if self._registry is None:
            logger.warning("No registry available on this platform; skipping registry cleanup")
            return
        sweep = RegistrySweep(self._registry)
        for key_path in self._targets.registry_keys:
            stage.results.append(sweep.delete_key(Hive.CURRENT_USER, key_path))

    def _sweep_user_hives(self, stage: StageReport) -> None:
        if self._registry is None:
            return
        sweep = RegistrySweep(self._registry)
        for key_path in self._targets.registry_keys:
            stage.results.extend(sweep.sweep_all_principals(key_path))

    def _sweep_temp(self, stage: StageReport) -> None:
        logger.info("Cleaning temporary folders")
        stage.results.extend(
            TempSweep(self._engine).sweep(
                self._paths.user_temp,
                self._other_profiles(),
                self._paths.system_temp,
            )
        )

    # === Helpers ===

    def _other_profiles(self) -> list[Principal]:
        # Fresh enumeration on every call
        return list(ProfileEnumerator(self._fs, self._paths.users_root, self._current).profiles())

    def _clean_user_folders(self, local_root: Path, roaming_root: Path) -> list[DeletionResult]:
        results: list[DeletionResult] = []
        for folder in self._targets.folders_under("local"):
            results.extend(self._clean_user_folder(local_root / folder.name, folder))
        for folder in self._targets.folders_under("roaming"):
            results.extend(self._clean_user_folder(roaming_root / folder.name, folder))
        return results

    def _clean_user_folder(self, path: Path, folder: UserFolder) -> list[DeletionResult]:
        if folder.confirm:
            return self._engine.delete_folder_with_confirmation(path)
        return [self._engine.delete_folder(path)]

    @staticmethod
    def _log_summary(report: SweepReport) -> None:
        removed = report.count(DeletionOutcome.DELETED) + report.count(
            DeletionOutcome.ESCALATED_DELETED
        )
        failed = sum(1 for r in report.results if r.failed)
        kept = report.count(DeletionOutcome.KEPT_BY_USER)

        if report.best_effort:
            logger.warning("Applications were left running; cleanup ran as best effort")

        if report.success:
            logger.info(
                "Operations completed successfully: %d removed, %d kept, %d failed",
                removed,
                kept,
                failed,
            )
        else:
            logger.warning(
                "Operations completed with errors: %d removed, %d kept, %d failed",
                removed,
                kept,
                failed,
            )
