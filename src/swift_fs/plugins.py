"""Backend discovery via Python entry points."""

from importlib.metadata import entry_points
from typing import Any

from swift_fs.exceptions import ConfigError
from swift_fs.protocols import ObjectStore

BACKEND_GROUP = "swift_fs.backends"


def discover_backends(group: str = BACKEND_GROUP) -> dict[str, Any]:
    """Discover all registered object store backends.

    Args:
        group: Entry point group name

    Returns:
        Dictionary mapping backend names to their classes
    """
    eps = entry_points(group=group)
    return {ep.name: ep.load() for ep in eps}


def get_backend(name: str) -> Any:
    """Get a specific backend class by name.

    Args:
        name: The backend name (e.g., "swift", "memory")

    Returns:
        The backend class

    Raises:
        ConfigError: If the backend is not found
    """
    backends = discover_backends()
    if name not in backends:
        available = ", ".join(sorted(backends.keys())) or "(none)"
        raise ConfigError(f"Backend '{name}' not found. Available: {available}")
    return backends[name]


def create_object_store(backend: str, **kwargs: Any) -> ObjectStore:
    """Create an ObjectStore instance.

    Args:
        backend: The backend name (e.g., "swift", "memory")
        **kwargs: Backend-specific configuration

    Returns:
        An ObjectStore implementation
    """
    cls = get_backend(backend)
    return cls(**kwargs)
