"""Tests for configuration loading."""

import pytest

from workflow_run_cleanup.errors import ConfigurationError
from workflow_run_cleanup.models.config import RepositoryRef, load_config
from workflow_run_cleanup.patterns import RestrictedTo, Unrestricted


class TestRepositoryRef:
    """Tests for RepositoryRef.parse."""

    def test_parses_owner_and_name(self) -> None:
        """Splits owner/repo into its parts."""
        ref = RepositoryRef.parse("octo-org/hello-world")

        assert ref.owner == "octo-org"
        assert ref.name == "hello-world"
        assert str(ref) == "octo-org/hello-world"

    @pytest.mark.parametrize(
        "value", [None, "", "owner", "owner/", "/repo", "a/b/c", " / "]
    )
    def test_rejects_malformed_repository(self, value: str | None) -> None:
        """Anything but two non-empty segments is a configuration error."""
        with pytest.raises(ConfigurationError, match="Invalid repository"):
            RepositoryRef.parse(value)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self) -> None:
        """Missing inputs fall back to defaults."""
        config = load_config({"repository": "owner/repo"})

        assert config.repository == RepositoryRef(owner="owner", name="repo")
        assert config.retain_days == 30
        assert config.keep_minimum_runs == 6
        assert config.use_daily_retention is False
        assert config.workflow_name_patterns == frozenset()
        assert config.workflow_state_filter == Unrestricted()
        assert config.run_conclusion_filter == Unrestricted()
        assert config.check_branch_existence is False
        assert config.branch_existence_exceptions == frozenset()
        assert config.check_pullrequest_exist is False
        assert config.dry_run is False

    def test_empty_strings_use_defaults(self) -> None:
        """Empty action inputs behave like missing ones."""
        config = load_config(
            {
                "repository": "owner/repo",
                "retain_days": "",
                "keep_minimum_runs": " ",
                "delete_workflow_by_state_pattern": "",
                "delete_run_by_conclusion_pattern": None,
                "dry_run": "",
            }
        )

        assert config.retain_days == 30
        assert config.keep_minimum_runs == 6
        assert config.workflow_state_filter == Unrestricted()
        assert config.run_conclusion_filter == Unrestricted()
        assert config.dry_run is False

    def test_parses_all_inputs(self) -> None:
        """Every input is parsed into its typed value."""
        config = load_config(
            {
                "repository": "owner/repo",
                "retain_days": "5",
                "keep_minimum_runs": "0",
                "use_daily_retention": "true",
                "delete_workflow_pattern": "ci.yml | Deploy",
                "delete_workflow_by_state_pattern": "disabled_manually, deleted",
                "delete_run_by_conclusion_pattern": "Failure,cancelled",
                "dry_run": "yes",
                "check_branch_existence": "1",
                "check_branch_existence_exceptions": "main,develop",
                "check_pullrequest_exist": "TRUE",
            }
        )

        assert config.retain_days == 5
        assert config.keep_minimum_runs == 0
        assert config.use_daily_retention is True
        assert config.workflow_name_patterns == {"ci.yml", "Deploy"}
        assert config.workflow_state_filter == RestrictedTo(
            values=frozenset({"disabled_manually", "deleted"})
        )
        assert config.run_conclusion_filter == RestrictedTo(
            values=frozenset({"failure", "cancelled"}), case_sensitive=False
        )
        assert config.dry_run is True
        assert config.check_branch_existence is True
        assert config.branch_existence_exceptions == {"main", "develop"}
        assert config.check_pullrequest_exist is True

    @pytest.mark.parametrize("key", ["retain_days", "keep_minimum_runs"])
    def test_rejects_non_numeric_counts(self, key: str) -> None:
        """Unparseable numbers are configuration errors."""
        with pytest.raises(ConfigurationError, match=f"Invalid {key}"):
            load_config({"repository": "owner/repo", key: "ten"})

    @pytest.mark.parametrize("key", ["retain_days", "keep_minimum_runs"])
    def test_rejects_negative_counts(self, key: str) -> None:
        """Negative numbers are configuration errors."""
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config({"repository": "owner/repo", key: "-1"})

    def test_rejects_bad_repository_first(self) -> None:
        """The repository is validated before anything else."""
        with pytest.raises(ConfigurationError, match="Invalid repository"):
            load_config({"repository": "nope", "retain_days": "ten"})
