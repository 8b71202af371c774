"""Planning and execution of a cleanup over a whole repository."""

import asyncio
import logging
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from workflow_run_cleanup.backends.base import RunBackend
from workflow_run_cleanup.executor import DeletionExecutor
from workflow_run_cleanup.models.config import RetentionConfig
from workflow_run_cleanup.models.result import (
    CleanupReport,
    Decision,
    RetentionPlan,
    ScopeReport,
)
from workflow_run_cleanup.models.workflow import Workflow, WorkflowRun
from workflow_run_cleanup.orphans import find_orphans
from workflow_run_cleanup.predicates import skip_reason
from workflow_run_cleanup.retention import select_runs
from workflow_run_cleanup.workflow_filter import filter_workflows

log = logging.getLogger(__name__)

ORPHAN_SCOPE = "orphan runs"


def plan_workflow(
    workflow: Workflow,
    runs: Sequence[WorkflowRun],
    config: RetentionConfig,
    branch_names: Collection[str],
    now: datetime,
    exclude_ids: Collection[int] = frozenset(),
) -> RetentionPlan:
    """Decide what happens to each run of a workflow.

    Args:
        workflow: Workflow the runs belong to
        runs: Runs of the workflow
        config: Active retention configuration
        branch_names: Branches that currently exist
        now: Reference time for age checks
        exclude_ids: Runs already decided elsewhere; they are left out

    Returns:
        Plan with one decision per run

    """
    seen = set(exclude_ids)
    decisions: list[Decision] = []
    candidates: list[WorkflowRun] = []

    for run in runs:
        if run.id in seen:
            continue
        seen.add(run.id)

        reason = skip_reason(
            run, config, branch_names, now, check_age=not config.use_daily_retention
        )
        if reason is None:
            candidates.append(run)
        else:
            log.debug("Skip: Run %s %s", run.id, reason)
            decisions.append(Decision(run=run, action="skip", reason=reason))

    partition = select_runs(candidates, config, now)
    decisions.extend(partition.decisions())
    return RetentionPlan(scope=workflow.name, decisions=decisions)


def plan_orphans(orphans: Sequence[WorkflowRun]) -> RetentionPlan:
    """Mark every orphan run for deletion."""
    return RetentionPlan(
        scope=ORPHAN_SCOPE,
        decisions=[
            Decision(run=run, action="delete", reason="workflow no longer exists")
            for run in orphans
        ],
    )


@dataclass(frozen=True, kw_only=True)
class CleanupOrchestrator:
    """Lists, plans and deletes workflow runs of one repository."""

    backend: RunBackend
    config: RetentionConfig
    executor: DeletionExecutor

    async def run(self, now: datetime | None = None) -> CleanupReport:
        """Plan the whole cleanup, then carry it out.

        Every decision is computed before the first deletion is issued, so a
        listing failure leaves the repository untouched.

        Raises:
            BackendError: If workflows, branches or runs cannot be listed

        """
        now = now or datetime.now(timezone.utc)
        orphan_plan, plans = await self.plan(now)
        return await self.apply(orphan_plan, plans)

    async def plan(
        self, now: datetime
    ) -> tuple[RetentionPlan | None, Sequence[RetentionPlan]]:
        """Compute the orphan plan and one plan per selected workflow."""
        workflows = await self.backend.list_workflows()

        branch_names: frozenset[str] = frozenset()
        if self.config.check_branch_existence:
            branch_names = frozenset(await self.backend.list_branches())

        all_runs = await self.backend.list_all_runs()
        orphans = find_orphans(all_runs, [workflow.id for workflow in workflows])
        orphan_plan = None
        if orphans:
            log.info("Found %d orphan runs", len(orphans))
            orphan_plan = plan_orphans(orphans)

        selected = filter_workflows(
            workflows,
            self.config.workflow_name_patterns,
            self.config.workflow_state_filter,
        )
        log.info("Processing %d workflow(s)", len(selected))

        run_lists = await asyncio.gather(
            *(self.backend.list_runs_for_workflow(w.id) for w in selected)
        )

        decided = {run.id for run in orphans}
        plans: list[RetentionPlan] = []
        for workflow, runs in zip(selected, run_lists, strict=True):
            plan = plan_workflow(
                workflow, runs, self.config, branch_names, now, exclude_ids=decided
            )
            decided.update(decision.run.id for decision in plan.decisions)
            log.info(
                "Planned %s (ID: %s): %d run(s), %d candidate(s) to delete",
                workflow.name,
                workflow.id,
                len(plan.decisions),
                len(plan.to_delete),
            )
            plans.append(plan)

        return orphan_plan, plans

    async def apply(
        self, orphan_plan: RetentionPlan | None, plans: Sequence[RetentionPlan]
    ) -> CleanupReport:
        """Delete the planned runs, orphans first."""
        orphan_report = None
        if orphan_plan is not None:
            orphan_report = await self._apply_plan(orphan_plan)

        workflow_reports = [await self._apply_plan(plan) for plan in plans]

        log.info("Cleanup completed successfully!")
        return CleanupReport(
            dry_run=self.config.dry_run,
            orphans=orphan_report,
            workflows=workflow_reports,
        )

    async def _apply_plan(self, plan: RetentionPlan) -> ScopeReport:
        log.info("Processing: %s", plan.scope)

        if retained := plan.retained:
            log.info("Retaining latest %d run(s)", len(retained))

        to_delete = plan.to_delete
        if to_delete and self.config.dry_run:
            log.info("[dry-run] Would delete %d run(s)", len(to_delete))
        elif to_delete:
            log.info("Deleting %d run(s)", len(to_delete))
        else:
            log.info("No runs to delete")

        summary = await self.executor.execute(
            to_delete, plan.scope, dry_run=self.config.dry_run
        )
        return ScopeReport(scope=plan.scope, retained=len(retained), summary=summary)
