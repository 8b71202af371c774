"""Pydantic models for GitHub Actions API responses."""

from collections.abc import Sequence

from pydantic import BaseModel

from workflow_run_cleanup.models.workflow import Workflow, WorkflowRun


class WorkflowsResponse(BaseModel):
    """Response from list repository workflows API."""

    total_count: int = 0
    workflows: Sequence[Workflow]


class WorkflowRunsResponse(BaseModel):
    """Response from list workflow runs APIs."""

    total_count: int = 0
    workflow_runs: Sequence[WorkflowRun]


class Branch(BaseModel):
    """A branch from the list branches API."""

    name: str
    protected: bool = False
