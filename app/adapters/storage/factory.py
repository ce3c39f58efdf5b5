"""Factory pattern for creating post store instances."""

from app.adapters.storage.base import AbstractPostStore
from app.adapters.storage.in_memory import InMemoryPostStore
from app.adapters.storage.sqlite import SQLitePostStore
from app.core.config import StorageSettings
from app.core.errors import ValidationAppError


def create_post_store(storage_settings: StorageSettings) -> AbstractPostStore:
    """Instantiate the post store selected by configuration.

    The store is returned uninitialized; the caller runs ``initialize()``
    during startup so schema failures can stop the process.

    Args:
        storage_settings: Resolved storage settings.

    Returns:
        AbstractPostStore: Configured store instance.

    Raises:
        ValidationAppError: If the backend is unknown or misconfigured.
    """
    backend = storage_settings.backend.lower()

    if backend == "sqlite":
        try:
            return SQLitePostStore(storage_settings.database_path)
        except ValueError as exc:
            raise ValidationAppError(
                code="storage_invalid_path",
                message=str(exc),
                details={"backend": backend},
            ) from exc

    if backend == "memory":
        return InMemoryPostStore()

    raise ValidationAppError(
        code="storage_unknown_backend",
        message=(
            f"Unknown storage backend: '{backend}'. Supported backends: sqlite, memory"
        ),
    )
