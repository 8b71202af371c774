"""Selection of the workflows to clean up."""

import logging
from collections.abc import Collection, Sequence

from workflow_run_cleanup.models.workflow import Workflow
from workflow_run_cleanup.patterns import MatchFilter, Unrestricted, describe_filter

log = logging.getLogger(__name__)


def matches_name(workflow: Workflow, patterns: Collection[str]) -> bool:
    """Check if the workflow name or file name contains any of the patterns."""
    return any(
        pattern in workflow.name or pattern in workflow.filename
        for pattern in patterns
    )


def filter_workflows(
    workflows: Sequence[Workflow],
    name_patterns: Collection[str],
    state_filter: MatchFilter,
) -> Sequence[Workflow]:
    """Narrow workflows by name patterns and state.

    Args:
        workflows: All workflows of the repository
        name_patterns: Substrings matched against name and file name; empty
            means no name filtering
        state_filter: Accepted workflow states

    Returns:
        Workflows matching both filters, in their original order

    """
    selected = list(workflows)

    if name_patterns:
        log.info("Filtering by patterns: %s", ", ".join(sorted(name_patterns)))
        selected = [w for w in selected if matches_name(w, name_patterns)]

    if not isinstance(state_filter, Unrestricted):
        log.info("Filtering by state: %s", describe_filter(state_filter))
        selected = [w for w in selected if state_filter.matches(w.state)]

    return selected
