from __future__ import annotations

from app.models.post import Post

__all__ = ["Post"]
