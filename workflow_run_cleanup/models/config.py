"""Retention configuration."""

import logging
from collections.abc import Mapping

from pydantic import Field, ValidationError

from workflow_run_cleanup.errors import ConfigurationError
from workflow_run_cleanup.models.base import Model
from workflow_run_cleanup.patterns import (
    ALL_SENTINEL,
    MatchFilter,
    Unrestricted,
    parse_boolean,
    parse_filter,
    split_pattern,
)

log = logging.getLogger(__name__)

DEFAULT_RETAIN_DAYS = 30
DEFAULT_KEEP_MINIMUM_RUNS = 6


class RepositoryRef(Model):
    """Repository identified by owner and name."""

    owner: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    @classmethod
    def parse(cls, value: str | None) -> "RepositoryRef":
        """Parse an ``owner/name`` string.

        Raises:
            ConfigurationError: If the value is not exactly two non-empty segments

        """
        parts = (value or "").strip().split("/")
        if len(parts) != 2 or not all(part.strip() for part in parts):
            raise ConfigurationError(
                f'Invalid repository: "{value}". Use "owner/repo".'
            )
        return cls(owner=parts[0].strip(), name=parts[1].strip())

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


class RetentionConfig(Model):
    """Settings that drive one cleanup invocation."""

    repository: RepositoryRef
    retain_days: int = Field(default=DEFAULT_RETAIN_DAYS, ge=0)
    keep_minimum_runs: int = Field(default=DEFAULT_KEEP_MINIMUM_RUNS, ge=0)
    use_daily_retention: bool = False
    workflow_name_patterns: frozenset[str] = frozenset()
    workflow_state_filter: MatchFilter = Field(default_factory=Unrestricted)
    run_conclusion_filter: MatchFilter = Field(default_factory=Unrestricted)
    check_branch_existence: bool = False
    branch_existence_exceptions: frozenset[str] = frozenset()
    check_pullrequest_exist: bool = False
    dry_run: bool = False


def _parse_count(raw: Mapping[str, str | None], key: str, default: int) -> int:
    value = (raw.get(key) or "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(
            f"Invalid {key}: {value!r} is not an integer"
        ) from None


def load_config(raw: Mapping[str, str | None]) -> RetentionConfig:
    """Build a retention config from raw string inputs.

    Missing or empty inputs fall back to their defaults.

    Raises:
        ConfigurationError: If any input is malformed

    """
    repository = RepositoryRef.parse(raw.get("repository"))
    retain_days = _parse_count(raw, "retain_days", DEFAULT_RETAIN_DAYS)
    keep_minimum_runs = _parse_count(
        raw, "keep_minimum_runs", DEFAULT_KEEP_MINIMUM_RUNS
    )

    try:
        config = RetentionConfig(
            repository=repository,
            retain_days=retain_days,
            keep_minimum_runs=keep_minimum_runs,
            use_daily_retention=parse_boolean(raw.get("use_daily_retention")),
            workflow_name_patterns=split_pattern(raw.get("delete_workflow_pattern")),
            workflow_state_filter=parse_filter(
                raw.get("delete_workflow_by_state_pattern") or ALL_SENTINEL
            ),
            run_conclusion_filter=parse_filter(
                raw.get("delete_run_by_conclusion_pattern") or ALL_SENTINEL,
                case_sensitive=False,
            ),
            check_branch_existence=parse_boolean(raw.get("check_branch_existence")),
            branch_existence_exceptions=split_pattern(
                raw.get("check_branch_existence_exceptions")
            ),
            check_pullrequest_exist=parse_boolean(raw.get("check_pullrequest_exist")),
            dry_run=parse_boolean(raw.get("dry_run")),
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc

    log.debug("Loaded configuration: %s", config)
    return config
