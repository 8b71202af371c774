"""Abstract base class for workflow run backends."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from workflow_run_cleanup.models.workflow import Workflow, WorkflowRun


@dataclass(frozen=True, kw_only=True)
class RunBackend(ABC):
    """Abstract base for services that host workflow runs.

    Every listing returns the complete, fully paginated collection. Failures
    are raised as ``BackendError``.
    """

    @abstractmethod
    async def list_workflows(self) -> Sequence[Workflow]:
        """List all workflows of the repository."""

    @abstractmethod
    async def list_branches(self) -> Sequence[str]:
        """List the names of all branches of the repository."""

    @abstractmethod
    async def list_all_runs(self) -> Sequence[WorkflowRun]:
        """List all runs of the repository, across workflows."""

    @abstractmethod
    async def list_runs_for_workflow(self, workflow_id: int) -> Sequence[WorkflowRun]:
        """List all runs of a single workflow.

        Args:
            workflow_id: Identifier of the workflow

        """

    @abstractmethod
    async def delete_run(self, run_id: int) -> None:
        """Delete a single run.

        Deleting a run that is already gone is not an error.

        Args:
            run_id: Identifier of the run

        Raises:
            BackendError: If the run could not be deleted

        """
