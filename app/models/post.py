"""Domain model for a bulletin board post."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Post:
    """A single bulletin board entry.

    ``id`` is assigned by the server when the post is created. ``title`` and
    ``content`` are stored already HTML-escaped. Posts are never modified.
    """

    id: str
    title: str
    content: str

