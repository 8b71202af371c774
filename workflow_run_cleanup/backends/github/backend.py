"""GitHub Actions backend implementation."""

import asyncio
import json
import logging
import time
from collections.abc import AsyncGenerator, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from pydantic import TypeAdapter, ValidationError

from workflow_run_cleanup.backends.base import RunBackend
from workflow_run_cleanup.backends.github.config import GitHubConfig
from workflow_run_cleanup.backends.github.models import (
    Branch,
    WorkflowRunsResponse,
    WorkflowsResponse,
)
from workflow_run_cleanup.errors import BackendError, RateLimitError
from workflow_run_cleanup.models.workflow import Workflow, WorkflowRun

log = logging.getLogger(__name__)

RATE_LIMIT_STATUSES = frozenset({403, 429})
BRANCH_LIST = TypeAdapter(list[Branch])


@dataclass(frozen=True, kw_only=True)
class GitHubBackend(RunBackend):
    """Workflow runs hosted on GitHub Actions."""

    config: GitHubConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: GitHubConfig
    ) -> AsyncGenerator["GitHubBackend", None]:
        """Create backend with managed session lifecycle."""
        headers = {
            "Authorization": f"Bearer {config.token.get_secret_value()}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        async with aiohttp.ClientSession(headers=headers) as session:
            yield cls(config=config, session=session)

    @property
    def repo_url(self) -> str:
        # api_base_url may carry a path prefix on GitHub Enterprise (/api/v3)
        base = self.config.api_base_url.rstrip("/")
        return f"{base}/repos/{self.config.owner}/{self.config.repo}"

    async def list_workflows(self) -> Sequence[Workflow]:
        """List all workflows of the repository."""
        workflows = await self._fetch_items(
            f"{self.repo_url}/actions/workflows",
            lambda page: WorkflowsResponse.model_validate(page).workflows,
        )
        log.info("Found %d workflow(s)", len(workflows))
        return workflows

    async def list_branches(self) -> Sequence[str]:
        """List the names of all branches of the repository."""
        branches = await self._fetch_items(
            f"{self.repo_url}/branches", BRANCH_LIST.validate_python
        )
        names = [branch.name for branch in branches]
        log.info("Found %d branches", len(names))
        return names

    async def list_all_runs(self) -> Sequence[WorkflowRun]:
        """List all runs of the repository."""
        return await self._list_runs(f"{self.repo_url}/actions/runs")

    async def list_runs_for_workflow(self, workflow_id: int) -> Sequence[WorkflowRun]:
        """List all runs of a single workflow."""
        return await self._list_runs(
            f"{self.repo_url}/actions/workflows/{workflow_id}/runs"
        )

    async def delete_run(self, run_id: int) -> None:
        """Delete a workflow run; a run that is already gone counts as deleted."""
        url = f"{self.repo_url}/actions/runs/{run_id}"
        status, text = await self._send("DELETE", url)

        if status == 404:
            log.info("Run %s already deleted", run_id)
            return
        if status != 204:
            raise BackendError(
                f"Failed to delete workflow run {run_id}: {status} {text}"
            )

    async def _list_runs(self, url: str) -> Sequence[WorkflowRun]:
        return await self._fetch_items(
            url, lambda page: WorkflowRunsResponse.model_validate(page).workflow_runs
        )

    async def _fetch_items[T](
        self, url: str, parse: Callable[[Any], Sequence[T]]
    ) -> list[T]:
        """Fetch and parse pages until a page holds fewer than per_page items.

        Raises:
            BackendError: If any page cannot be fetched or parsed

        """
        items: list[T] = []
        page = 1

        while True:
            params = {"per_page": str(self.config.per_page), "page": str(page)}
            status, data = await self._send("GET", url, params)
            if status != 200:
                raise BackendError(f"Failed to list {url}: {status} {data}")

            try:
                batch = parse(data)
            except ValidationError as exc:
                raise BackendError(f"Unexpected response from {url}: {exc}") from exc

            items.extend(batch)
            if len(batch) < self.config.per_page:
                return items

            page += 1

    async def _send(
        self, method: str, url: str, params: Mapping[str, str] | None = None
    ) -> tuple[int, Any]:
        """Send a request, retrying once on a short primary rate limit.

        Returns the status and the decoded JSON body for 200 responses, or the
        raw text otherwise.

        Raises:
            BackendError: If the request fails in transport or the body is not JSON

        """
        for attempt in range(2):
            try:
                async with self.session.request(method, url, params=params) as response:
                    if response.status == 200:
                        return response.status, await response.json()
                    text = await response.text()
                    wait = self._rate_limit_wait(response, text, method, url, attempt)
            except (aiohttp.ClientError, json.JSONDecodeError, TimeoutError) as exc:
                raise BackendError(f"Request failed: {method} {url}: {exc!r}") from exc
            if wait is None:
                return response.status, text
            await asyncio.sleep(wait)
        raise RateLimitError(f"Rate limit retries exhausted: {method} {url}")

    def _rate_limit_wait(
        self,
        response: aiohttp.ClientResponse,
        text: str,
        method: str,
        url: str,
        attempt: int,
    ) -> float | None:
        """Return how long to wait before retrying, or None to not retry.

        Primary rate limits are retried once when the wait is short. Secondary
        rate limits are never retried.

        Raises:
            RateLimitError: If the response is rate limited and not retried

        """
        if response.status not in RATE_LIMIT_STATUSES:
            return None

        headers = response.headers
        retry_after = _retry_after(headers)

        if headers.get("x-ratelimit-remaining") == "0":
            log.warning("Rate limit: %s %s - wait %ss", method, url, retry_after)
            if (
                attempt == 0
                and retry_after is not None
                and retry_after < self.config.max_retry_after
            ):
                return retry_after
            raise RateLimitError(
                f"Rate limit exceeded: {method} {url}", retry_after=retry_after
            )

        if response.status == 429 or retry_after is not None or "secondary" in text:
            log.warning("Secondary limit: %s %s", method, url)
            raise RateLimitError(
                f"Secondary rate limit: {method} {url}", retry_after=retry_after
            )

        return None


def _retry_after(headers: Mapping[str, str]) -> float | None:
    """Seconds to wait, from retry-after or x-ratelimit-reset headers."""
    if (value := headers.get("retry-after")) is not None:
        try:
            return max(float(value), 0.0)
        except ValueError:
            return None
    if (reset := headers.get("x-ratelimit-reset")) is not None:
        try:
            return max(float(reset) - time.time(), 0.0)
        except ValueError:
            return None
    return None
