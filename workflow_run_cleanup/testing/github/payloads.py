"""Payload helpers for GitHub Actions API responses in tests."""

from collections.abc import Sequence
from typing import Any


BASE = "https://api.github.com/repos/test-owner/test-repo"
HTML_BASE = "https://github.com/test-owner/test-repo"


def workflow(
    *,
    workflow_id: int = 161335,
    name: str = "CI",
    path: str = ".github/workflows/ci.yml",
    state: str = "active",
) -> dict[str, Any]:
    """Create a workflow payload for testing."""
    return {
        "id": workflow_id,
        "node_id": "MDg6V29ya2Zsb3cxNjEzMzU=",
        "name": name,
        "path": path,
        "state": state,
        "created_at": "2099-01-01T12:00:00.000Z",
        "updated_at": "2099-01-01T12:00:00.000Z",
        "url": f"{BASE}/actions/workflows/{workflow_id}",
        "html_url": f"{HTML_BASE}/blob/main/{path}",
        "badge_url": f"{HTML_BASE}/workflows/{name}/badge.svg",
    }


def workflows_response(
    *, workflows: Sequence[dict[str, Any]] | None = None
) -> dict[str, Any]:
    """Create a list workflows response payload."""
    items = list(workflows) if workflows is not None else []
    return {"total_count": len(items), "workflows": items}


def workflow_run(
    *,
    run_id: int = 30433642,
    workflow_id: int = 161335,
    name: str = "CI",
    status: str = "completed",
    conclusion: str | None = "success",
    head_branch: str | None = "main",
    created_at: str = "2099-01-01T12:00:00Z",
    pull_requests: Sequence[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Create a workflow run payload for testing.

    Returns a realistic GitHub workflow run API response structure.
    """
    return {
        "id": run_id,
        "name": name,
        "node_id": "MDEyOldvcmtmbG93IFJ1bjI2OTI4OQ==",
        "head_branch": head_branch,
        "head_sha": "acb5820ced9479c074f688cc328bf03f341a511d",
        "run_number": 562,
        "event": "push",
        "status": status,
        "conclusion": conclusion,
        "workflow_id": workflow_id,
        "url": f"{BASE}/actions/runs/{run_id}",
        "html_url": f"{HTML_BASE}/actions/runs/{run_id}",
        "pull_requests": list(pull_requests) if pull_requests is not None else [],
        "created_at": created_at,
        "updated_at": created_at,
        "run_attempt": 1,
        "run_started_at": created_at,
        "display_title": name,
    }


def workflow_runs_response(
    *, workflow_runs: Sequence[dict[str, Any]] | None = None
) -> dict[str, Any]:
    """Create a list workflow runs response payload."""
    items = list(workflow_runs) if workflow_runs is not None else []
    return {"total_count": len(items), "workflow_runs": items}


def pull_request(*, pr_id: int = 17, number: int = 42) -> dict[str, Any]:
    """Create a minimal pull request reference payload."""
    return {
        "id": pr_id,
        "number": number,
        "url": f"{BASE}/pulls/{number}",
        "head": {"ref": "feature", "sha": "abc123"},
        "base": {"ref": "main", "sha": "def456"},
    }


def branch(*, name: str = "main", protected: bool = False) -> dict[str, Any]:
    """Create a branch payload for testing."""
    return {
        "name": name,
        "commit": {
            "sha": "c5b97d5ae6c19d5c5df71a34c7fbeeda2479ccbc",
            "url": f"{BASE}/commits/c5b97d5",
        },
        "protected": protected,
    }
