"""CLI entry point for workflow run cleanup."""

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Mapping
from typing import Any

from workflow_run_cleanup.backends.loading import load_backend_manifest
from workflow_run_cleanup.errors import BackendError, ConfigurationError
from workflow_run_cleanup.executor import DEFAULT_MAX_CONCURRENCY, DeletionExecutor
from workflow_run_cleanup.models.config import RetentionConfig, load_config
from workflow_run_cleanup.models.result import CleanupReport
from workflow_run_cleanup.orchestrator import CleanupOrchestrator
from workflow_run_cleanup.patterns import describe_filter

CONFIG_KEYS = (
    "repository",
    "retain_days",
    "keep_minimum_runs",
    "use_daily_retention",
    "delete_workflow_pattern",
    "delete_workflow_by_state_pattern",
    "delete_run_by_conclusion_pattern",
    "dry_run",
    "check_branch_existence",
    "check_branch_existence_exceptions",
    "check_pullrequest_exist",
)


def log_cleanup_summary(log: logging.Logger, report: CleanupReport) -> None:
    """Log a formatted summary of the cleanup."""
    log.info("=" * 80)
    log.info("Cleanup Summary%s:", " (dry run)" if report.dry_run else "")
    log.info("=" * 80)

    for scope in report.scopes:
        log.info(
            "%s: retained=%d, deleted=%d, skipped=%d, failed=%d",
            scope.scope,
            scope.retained,
            scope.summary.deleted,
            scope.summary.skipped,
            scope.summary.failed,
        )


def format_output(report: CleanupReport) -> dict[str, Any]:
    """Format the cleanup report for JSON output."""
    scopes = [
        {
            "scope": scope.scope,
            "retained": scope.retained,
            "deleted": scope.summary.deleted,
            "skipped": scope.summary.skipped,
            "failed": scope.summary.failed,
            "failed_run_ids": [
                outcome.run_id
                for outcome in scope.summary.outcomes
                if outcome.status == "failed"
            ],
        }
        for scope in report.scopes
    ]

    return {
        "dry_run": report.dry_run,
        "deleted": sum(s["deleted"] for s in scopes),
        "skipped": sum(s["skipped"] for s in scopes),
        "failed": sum(s["failed"] for s in scopes),
        "scopes": scopes,
    }


def log_config(log: logging.Logger, config: RetentionConfig) -> None:
    """Log the effective configuration."""
    log.info(
        "Repository %s: retain_days=%d, keep_minimum_runs=%d, daily=%s, dry_run=%s",
        config.repository,
        config.retain_days,
        config.keep_minimum_runs,
        config.use_daily_retention,
        config.dry_run,
    )
    log.info(
        "Workflow states: %s, run conclusions: %s",
        describe_filter(config.workflow_state_filter),
        describe_filter(config.run_conclusion_filter),
    )


def build_backend_config(
    config: RetentionConfig, token: str | None, base_url: str | None
) -> dict[str, Any]:
    """Collect the settings shared by all backends."""
    backend_config: dict[str, Any] = {
        "token": token or "",
        "owner": config.repository.owner,
        "repo": config.repository.name,
    }
    if base_url:
        backend_config["api_base_url"] = base_url
    return backend_config


async def run(
    backend_key: str,
    raw_config: Mapping[str, str | None],
    token: str | None = None,
    base_url: str | None = None,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> int:
    """Run the cleanup and return exit code."""
    log = logging.getLogger("workflow_run_cleanup")

    try:
        config = load_config(raw_config)
        log_config(log, config)

        log.info("Loading backend: %s", backend_key)
        manifest = load_backend_manifest(backend_key)
        backend_config = manifest.config_cls(
            **build_backend_config(config, token, base_url)
        )

        async with manifest.backend_factory(backend_config) as backend:
            orchestrator = CleanupOrchestrator(
                backend=backend,
                config=config,
                executor=DeletionExecutor(
                    backend=backend, max_concurrency=max_concurrency
                ),
            )
            report = await orchestrator.run()
    except (ConfigurationError, BackendError) as exc:
        log.error("Action failed: %s", exc)
        return 1

    log_cleanup_summary(log, report)
    print(json.dumps(format_output(report), indent=2))
    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Delete old workflow runs while keeping the latest ones"
    )
    parser.add_argument(
        "--repository",
        default=os.environ.get("GITHUB_REPOSITORY", ""),
        help="Repository in owner/repo format (default: $GITHUB_REPOSITORY)",
    )
    parser.add_argument(
        "--token",
        default=os.environ.get("GITHUB_TOKEN"),
        help="API token (default: $GITHUB_TOKEN)",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="API base URL, e.g. for GitHub Enterprise Server",
    )
    parser.add_argument(
        "--backend",
        default="github",
        help="Backend key (default: github)",
    )
    parser.add_argument("--retain-days", default="", help="Days to keep runs (30)")
    parser.add_argument(
        "--keep-minimum-runs", default="", help="Runs to keep per workflow (6)"
    )
    parser.add_argument(
        "--use-daily-retention",
        default="",
        help="Keep the minimum runs per calendar day instead of overall",
    )
    parser.add_argument(
        "--delete-workflow-pattern",
        default="",
        help="Workflow name or file name substrings, separated by ',' or '|'",
    )
    parser.add_argument(
        "--delete-workflow-by-state-pattern",
        default="ALL",
        help="Workflow states to process, comma separated, or ALL",
    )
    parser.add_argument(
        "--delete-run-by-conclusion-pattern",
        default="ALL",
        help="Run conclusions to delete, comma separated, or ALL",
    )
    parser.add_argument("--dry-run", default="", help="Only log what would be deleted")
    parser.add_argument(
        "--check-branch-existence",
        default="",
        help="Keep runs whose head branch still exists",
    )
    parser.add_argument(
        "--check-branch-existence-exceptions",
        default="",
        help="Branches whose runs are not protected by the branch check",
    )
    parser.add_argument(
        "--check-pullrequest-exist",
        default="",
        help="Keep runs linked to pull requests",
    )
    parser.add_argument(
        "--max-concurrency",
        type=int,
        default=DEFAULT_MAX_CONCURRENCY,
        help="Maximum concurrent deletions",
    )
    parser.add_argument("--verbose", action="store_true", help="Log skip reasons")

    args = parser.parse_args()
    if args.max_concurrency < 1:
        parser.error("--max-concurrency must be at least 1")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    raw_config = {key: getattr(args, key) for key in CONFIG_KEYS}
    exit_code = asyncio.run(
        run(
            backend_key=args.backend,
            raw_config=raw_config,
            token=args.token,
            base_url=args.base_url,
            max_concurrency=args.max_concurrency,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
