"""Models for workflows and their runs."""

from collections.abc import Sequence
from datetime import datetime
from typing import Literal

from pydantic import Field

from workflow_run_cleanup.models.base import Model

# Known API values; unknown ones are accepted as plain strings.
type WorkflowState = Literal[
    "active",
    "deleted",
    "disabled_fork",
    "disabled_inactivity",
    "disabled_manually",
] | str

type RunStatus = Literal[
    "requested",
    "queued",
    "pending",
    "waiting",
    "in_progress",
    "action_required",
    "completed",
] | str

type RunConclusion = Literal[
    "success",
    "failure",
    "cancelled",
    "skipped",
    "action_required",
    "timed_out",
    "neutral",
    "stale",
    "startup_failure",
] | str


class Workflow(Model):
    """A workflow definition of a repository."""

    id: int
    name: str
    path: str
    state: WorkflowState

    @property
    def filename(self) -> str:
        """Workflow file name without its directory prefix."""
        return self.path.rsplit("/", 1)[-1]


class PullRequestRef(Model):
    """Pull request linked to a workflow run."""

    id: int
    number: int


class WorkflowRun(Model):
    """A single execution of a workflow."""

    id: int
    workflow_id: int
    name: str | None = None
    status: RunStatus
    conclusion: RunConclusion | None = None
    created_at: datetime
    head_branch: str | None = None
    pull_requests: Sequence[PullRequestRef] = Field(default_factory=list)
