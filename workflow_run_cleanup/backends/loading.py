"""Lookup of installed run backends."""

from importlib.metadata import entry_points
from typing import Any

from workflow_run_cleanup.backends.manifest import BackendManifest
from workflow_run_cleanup.errors import ConfigurationError

ENTRY_POINT_GROUP = "workflow_run_cleanup.backends"


class BackendNotFoundError(ConfigurationError):
    """Raised when no installed backend is registered under the requested key."""


def load_backend_manifest(key: str) -> BackendManifest[Any]:
    """Return the manifest of the backend registered as ``key``.

    Backends register themselves in the ``workflow_run_cleanup.backends``
    entry-point group; ``github`` ships with this package.

    Raises:
        BackendNotFoundError: If no installed backend uses the key

    """
    installed = entry_points(group=ENTRY_POINT_GROUP)
    matches = installed.select(name=key)
    if not matches:
        available = sorted(installed.names)
        raise BackendNotFoundError(
            f"Backend '{key}' not found. Available backends: {available}"
        )

    manifest: BackendManifest[Any] = next(iter(matches)).load()
    return manifest
