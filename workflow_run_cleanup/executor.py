"""Deletion of runs through a backend."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from workflow_run_cleanup.backends.base import RunBackend
from workflow_run_cleanup.errors import BackendError
from workflow_run_cleanup.models.result import DeletionOutcome, DeletionSummary
from workflow_run_cleanup.models.workflow import WorkflowRun

log = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 5


@dataclass(frozen=True, kw_only=True)
class DeletionExecutor:
    """Deletes runs concurrently, isolating each deletion from the others."""

    backend: RunBackend
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    async def execute(
        self, runs: Sequence[WorkflowRun], scope: str, *, dry_run: bool
    ) -> DeletionSummary:
        """Delete the given runs and count the outcomes.

        Args:
            runs: Runs to delete
            scope: Label used in log messages (workflow name or "orphan runs")
            dry_run: Log the deletions without calling the backend

        Returns:
            Counts of deleted, skipped and failed runs

        """
        if not runs:
            log.debug("[%s] No runs to delete.", scope)
            return DeletionSummary()

        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks = [self._delete(run, scope, dry_run, semaphore) for run in runs]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        summary = DeletionSummary.from_outcomes(
            self._process_results(runs, results)
        )
        log.info(
            "Deletion summary for %s: deleted=%d, skipped=%d, failed=%d",
            scope,
            summary.deleted,
            summary.skipped,
            summary.failed,
        )
        return summary

    def _process_results(
        self,
        runs: Sequence[WorkflowRun],
        results: Sequence[DeletionOutcome | BaseException],
    ) -> Sequence[DeletionOutcome]:
        """Turn unexpected exceptions into failed outcomes."""
        outcomes: list[DeletionOutcome] = []

        for run, result in zip(runs, results, strict=True):
            if isinstance(result, DeletionOutcome):
                outcomes.append(result)
            elif isinstance(result, Exception):
                log.error(
                    "Unexpected error deleting run %s: %s",
                    run.id,
                    result,
                    exc_info=result,
                )
                outcomes.append(
                    DeletionOutcome(run_id=run.id, status="failed", message=str(result))
                )
            else:
                raise result

        return outcomes

    async def _delete(
        self,
        run: WorkflowRun,
        scope: str,
        dry_run: bool,
        semaphore: asyncio.Semaphore,
    ) -> DeletionOutcome:
        if dry_run:
            log.info("[dry-run] Simulate deletion: Run %s (%s)", run.id, scope)
            return DeletionOutcome(run_id=run.id, status="skipped")

        async with semaphore:
            try:
                await self.backend.delete_run(run.id)
            except BackendError as exc:
                log.error("Failed to delete: Run %s (%s) - %s", run.id, scope, exc)
                return DeletionOutcome(run_id=run.id, status="failed", message=str(exc))

        log.info("Successfully deleted: Run %s (%s)", run.id, scope)
        return DeletionOutcome(run_id=run.id, status="deleted")
