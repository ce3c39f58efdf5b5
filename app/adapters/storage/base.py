"""Post store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.models.post import Post


class AbstractPostStore(ABC):
    """Keyed collection of posts supporting append and full listing.

    Implementations own their synchronization; callers never lock.
    """

    backend: str = "abstract"

    def initialize(self) -> None:
        """Prepare the backing (e.g. create the schema). Idempotent.

        Raises:
            StorageAppError: If the backing cannot be prepared.
        """

    def close(self) -> None:
        """Release resources held by the store."""

    @abstractmethod
    def list(self) -> list[Post]:
        """Return every stored post, most recent first when order is tracked.

        Raises:
            StorageAppError: If the posts cannot be read.
        """
        raise NotImplementedError

    @abstractmethod
    def create(self, post: Post) -> None:
        """Persist a fully formed post.

        Args:
            post: Post with its id assigned and fields already sanitized.

        Raises:
            StorageAppError: On I/O failure or a duplicate id.
        """
        raise NotImplementedError
