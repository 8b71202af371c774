"""Per-run deletion predicates."""

from collections.abc import Collection
from datetime import datetime, timedelta

from workflow_run_cleanup.models.config import RetentionConfig
from workflow_run_cleanup.models.workflow import WorkflowRun

ONE_DAY = timedelta(days=1)


def run_age_days(run: WorkflowRun, now: datetime) -> float:
    """Elapsed calendar days since the run was created."""
    return (now - run.created_at) / ONE_DAY


def is_protected_branch(
    branch: str | None, branch_names: Collection[str], config: RetentionConfig
) -> bool:
    """Check if runs of a branch are protected because the branch still exists.

    Branches listed as exceptions are treated as if they did not exist.
    """
    if not branch:
        return False
    return branch in branch_names and branch not in config.branch_existence_exceptions


def skip_reason(
    run: WorkflowRun,
    config: RetentionConfig,
    branch_names: Collection[str],
    now: datetime,
    *,
    check_age: bool = True,
) -> str | None:
    """Return why a run must be kept, or None if it is a deletion candidate.

    Checks run in a fixed order and the first failing one wins.

    Args:
        run: Run to evaluate
        config: Active retention configuration
        branch_names: Branches that currently exist in the repository
        now: Reference time for the age check
        check_age: Whether to apply the retain_days check here; daily
            retention applies it while selecting instead

    """
    if run.status != "completed":
        return f"status={run.status}, not finished"

    if config.check_pullrequest_exist and run.pull_requests:
        return f"linked to {len(run.pull_requests)} pull request(s)"

    if config.check_branch_existence and is_protected_branch(
        run.head_branch, branch_names, config
    ):
        return f"branch {run.head_branch} still exists"

    if not config.run_conclusion_filter.matches(run.conclusion):
        return f'conclusion="{run.conclusion}" not allowed'

    if check_age:
        age = run_age_days(run, now)
        if age < config.retain_days:
            return f"{age:.1f} days old (< {config.retain_days} days)"

    return None


def should_delete_run(
    run: WorkflowRun,
    config: RetentionConfig,
    branch_names: Collection[str],
    now: datetime,
    *,
    check_age: bool = True,
) -> bool:
    """Decide whether a run is a deletion candidate."""
    return skip_reason(run, config, branch_names, now, check_age=check_age) is None
