"""Detection of runs whose workflow no longer exists."""

from collections.abc import Collection, Sequence

from workflow_run_cleanup.models.workflow import WorkflowRun


def find_orphans(
    all_runs: Sequence[WorkflowRun], known_workflow_ids: Collection[int]
) -> Sequence[WorkflowRun]:
    """Return runs that belong to none of the known workflows.

    Such runs are left behind when a workflow file is removed from the
    repository, and per-workflow processing never reaches them.
    """
    known = frozenset(known_workflow_ids)
    return [run for run in all_runs if run.workflow_id not in known]
