"""GitHub backend manifest."""

from workflow_run_cleanup.backends.github.backend import GitHubBackend
from workflow_run_cleanup.backends.github.config import GitHubConfig
from workflow_run_cleanup.backends.manifest import BackendManifest

github_manifest = BackendManifest(
    config_cls=GitHubConfig,
    backend_factory=GitHubBackend.from_config,
)
