"""Models for retention decisions and deletion results."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from workflow_run_cleanup.models.workflow import WorkflowRun

type DecisionAction = Literal["retain", "delete", "skip"]
type DeletionStatus = Literal["deleted", "skipped", "failed"]


@dataclass(frozen=True, kw_only=True)
class Decision:
    """What to do with a single run, and why."""

    run: WorkflowRun
    action: DecisionAction
    reason: str


@dataclass(frozen=True, kw_only=True)
class RetentionPlan:
    """All decisions taken for one scope (a workflow or the orphan runs)."""

    scope: str
    decisions: Sequence[Decision] = field(default_factory=list)

    @property
    def to_delete(self) -> Sequence[WorkflowRun]:
        return [d.run for d in self.decisions if d.action == "delete"]

    @property
    def retained(self) -> Sequence[WorkflowRun]:
        return [d.run for d in self.decisions if d.action == "retain"]

    @property
    def skipped(self) -> Sequence[WorkflowRun]:
        return [d.run for d in self.decisions if d.action == "skip"]


@dataclass(frozen=True, kw_only=True)
class DeletionOutcome:
    """Outcome of a single deletion attempt."""

    run_id: int
    status: DeletionStatus
    message: str | None = None


@dataclass(frozen=True, kw_only=True)
class DeletionSummary:
    """Deletion counts for one scope."""

    deleted: int = 0
    skipped: int = 0
    failed: int = 0
    outcomes: Sequence[DeletionOutcome] = field(default_factory=list)

    @classmethod
    def from_outcomes(cls, outcomes: Sequence[DeletionOutcome]) -> "DeletionSummary":
        """Count outcomes by status."""
        return cls(
            deleted=sum(1 for o in outcomes if o.status == "deleted"),
            skipped=sum(1 for o in outcomes if o.status == "skipped"),
            failed=sum(1 for o in outcomes if o.status == "failed"),
            outcomes=outcomes,
        )


@dataclass(frozen=True, kw_only=True)
class ScopeReport:
    """Result of processing one scope."""

    scope: str
    retained: int
    summary: DeletionSummary


@dataclass(frozen=True, kw_only=True)
class CleanupReport:
    """Result of a whole cleanup invocation."""

    dry_run: bool
    orphans: ScopeReport | None = None
    workflows: Sequence[ScopeReport] = field(default_factory=list)

    @property
    def scopes(self) -> Sequence[ScopeReport]:
        """Orphan scope first, then each workflow."""
        if self.orphans is None:
            return list(self.workflows)
        return [self.orphans, *self.workflows]
