"""In-memory post store.

Notes:
- Per-process only: posts disappear when the process exits.
- Thread-safe: listings share a reader/writer lock, creates hold it exclusively.
- Listing order is append order.
"""

from __future__ import annotations

import logging

from app.adapters.storage.base import AbstractPostStore
from app.core.errors import StorageAppError
from app.models.post import Post
from app.utils.rw_lock import ReadWriteLock

logger = logging.getLogger(__name__)


class InMemoryPostStore(AbstractPostStore):
    """Post store backed by a list guarded by a reader/writer lock."""

    backend = "memory"

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._posts: list[Post] = []
        self._ids: set[str] = set()

    def list(self) -> list[Post]:
        with self._lock.read():
            return list(self._posts)

    def create(self, post: Post) -> None:
        with self._lock.write():
            if post.id in self._ids:
                logger.error(
                    "storage.duplicate_id",
                    extra={"backend": self.backend, "post_id": post.id},
                )
                raise StorageAppError(
                    code="duplicate_post_id",
                    message=f"Post id already exists: {post.id}",
                    details={"backend": self.backend, "post_id": post.id},
                )
            self._posts.append(post)
            self._ids.add(post.id)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._posts)
