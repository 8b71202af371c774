"""GitHub backend module."""

from workflow_run_cleanup.backends.github.backend import GitHubBackend
from workflow_run_cleanup.backends.github.config import GitHubConfig
from workflow_run_cleanup.backends.github.manifest import github_manifest

__all__ = ["GitHubBackend", "GitHubConfig", "github_manifest"]
