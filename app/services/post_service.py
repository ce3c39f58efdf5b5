"""Post service holding the bulletin board business rules.

The service validates and orchestrates creation and listing. It knows nothing
about HTTP: routes translate its results and errors into responses.
"""

from __future__ import annotations

import logging
from typing import Callable

from app.adapters.storage.base import AbstractPostStore
from app.core.errors import ValidationAppError
from app.models.post import Post
from app.utils.identifiers import new_post_id
from app.utils.sanitizer import sanitize

logger = logging.getLogger(__name__)

EMPTY_FIELDS_MESSAGE = "Title and content are required"


class PostService:
    """Create and list posts against an injected store."""

    def __init__(
        self,
        store: AbstractPostStore,
        *,
        id_factory: Callable[[], str] = new_post_id,
    ) -> None:
        """Initialize the service.

        Args:
            store: Post store owning persistence and its synchronization.
            id_factory: Source of unique post ids.
        """
        self._store = store
        self._id_factory = id_factory

    def list_posts(self) -> list[Post]:
        """Return all posts in the store's order.

        Raises:
            StorageAppError: Propagated unchanged from the store.
        """
        return self._store.list()

    def create_post(self, title: str, content: str) -> Post:
        """Sanitize, validate and persist a new post.

        Args:
            title: Raw title from the client.
            content: Raw content from the client.

        Returns:
            Post: The stored post, including its assigned id.

        Raises:
            ValidationAppError: If title or content is empty after sanitizing.
            StorageAppError: If the store rejects the insert.
        """
        post = Post(
            id=self._id_factory(),
            title=sanitize(title),
            content=sanitize(content),
        )

        if not post.title or not post.content:
            logger.info(
                "post.create_rejected",
                extra={
                    "reason": "empty_field",
                    "title_chars": len(post.title),
                    "content_chars": len(post.content),
                },
            )
            raise ValidationAppError(
                code="post_fields_required",
                message=EMPTY_FIELDS_MESSAGE,
                details={"hint": "Provide non-empty title and content"},
            )

        self._store.create(post)

        logger.info(
            "post.created",
            extra={
                "post_id": post.id,
                "title_chars": len(post.title),
                "content_chars": len(post.content),
                "backend": self._store.backend,
            },
        )
        return post
