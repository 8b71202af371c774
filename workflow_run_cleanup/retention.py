"""Selection of runs to retain among deletion candidates."""

import logging
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from workflow_run_cleanup.models.config import RetentionConfig
from workflow_run_cleanup.models.result import Decision
from workflow_run_cleanup.models.workflow import WorkflowRun

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class RetentionPartition:
    """Candidates split into runs to retain and runs to delete."""

    retain: Sequence[WorkflowRun] = field(default_factory=list)
    delete: Sequence[WorkflowRun] = field(default_factory=list)
    reasons: dict[int, str] = field(default_factory=dict)

    def decisions(self) -> Sequence[Decision]:
        """Turn the partition into decisions, retained runs first."""
        return [
            Decision(run=run, action="retain", reason=self.reasons.get(run.id, ""))
            for run in self.retain
        ] + [
            Decision(run=run, action="delete", reason=self.reasons.get(run.id, ""))
            for run in self.delete
        ]


def _created_at(run: WorkflowRun) -> datetime:
    return run.created_at


def utc_day(run: WorkflowRun) -> date:
    """Calendar day (UTC) a run was created on."""
    return run.created_at.astimezone(timezone.utc).date()


def select_global(
    candidates: Sequence[WorkflowRun], keep_minimum_runs: int
) -> RetentionPartition:
    """Retain the most recent runs overall and delete the rest."""
    ordered = sorted(candidates, key=_created_at)

    if keep_minimum_runs > 0:
        split = max(len(ordered) - keep_minimum_runs, 0)
        retain, delete = ordered[split:], ordered[:split]
    else:
        retain, delete = [], ordered

    reasons = {run.id: f"among latest {keep_minimum_runs} run(s)" for run in retain}
    reasons.update({run.id: "older than the retained runs" for run in delete})
    return RetentionPartition(retain=retain, delete=delete, reasons=reasons)


def select_daily(
    candidates: Sequence[WorkflowRun], keep_minimum_runs: int, cutoff: datetime
) -> RetentionPartition:
    """Retain the most recent runs of each calendar day.

    Runs created at or before ``cutoff`` are expired and deleted without
    taking part in the per-day selection.
    """
    retain: list[WorkflowRun] = []
    delete: list[WorkflowRun] = []
    reasons: dict[int, str] = {}
    buckets: defaultdict[date, list[WorkflowRun]] = defaultdict(list)

    for run in sorted(candidates, key=_created_at):
        if run.created_at <= cutoff:
            delete.append(run)
            reasons[run.id] = "older than the retention window"
        else:
            buckets[utc_day(run)].append(run)

    for day in sorted(buckets):
        ordered = sorted(buckets[day], key=_created_at, reverse=True)
        kept, dropped = ordered[:keep_minimum_runs], ordered[keep_minimum_runs:]
        log.debug("Day %s: retaining %d of %d run(s)", day, len(kept), len(ordered))
        retain.extend(kept)
        delete.extend(dropped)
        for run in kept:
            reasons[run.id] = f"among latest {keep_minimum_runs} run(s) of {day}"
        for run in dropped:
            reasons[run.id] = f"exceeds {keep_minimum_runs} run(s) on {day}"

    return RetentionPartition(retain=retain, delete=delete, reasons=reasons)


def select_runs(
    candidates: Sequence[WorkflowRun], config: RetentionConfig, now: datetime
) -> RetentionPartition:
    """Split candidates into retained and deleted runs.

    Uses per-day selection when daily retention is enabled, otherwise keeps
    the most recent runs overall.
    """
    if not candidates:
        return RetentionPartition()

    if config.use_daily_retention:
        cutoff = now - timedelta(days=config.retain_days)
        return select_daily(candidates, config.keep_minimum_runs, cutoff)

    return select_global(candidates, config.keep_minimum_runs)
