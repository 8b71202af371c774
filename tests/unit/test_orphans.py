"""Tests for orphan run detection."""

from workflow_run_cleanup.orphans import find_orphans
from workflow_run_cleanup.testing.factories import WorkflowRunFactory


def test_returns_runs_of_unknown_workflows() -> None:
    """Runs whose workflow is not known are orphans."""
    known = WorkflowRunFactory.build(id=1, workflow_id=10)
    orphan = WorkflowRunFactory.build(id=2, workflow_id=99)

    assert find_orphans([known, orphan], [10, 11]) == [orphan]


def test_no_orphans_when_all_workflows_known() -> None:
    """Returns empty list when every run has a known workflow."""
    runs = [WorkflowRunFactory.build(id=i, workflow_id=10) for i in range(3)]

    assert find_orphans(runs, {10}) == []


def test_ignores_run_status() -> None:
    """Orphans are detected regardless of status or conclusion."""
    runs = [
        WorkflowRunFactory.build(id=1, workflow_id=5, status="in_progress"),
        WorkflowRunFactory.build(id=2, workflow_id=5, conclusion="failure"),
    ]

    assert [run.id for run in find_orphans(runs, [])] == [1, 2]


def test_empty_input() -> None:
    """Returns empty list for no runs."""
    assert find_orphans([], [1]) == []
