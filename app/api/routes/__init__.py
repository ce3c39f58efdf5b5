from __future__ import annotations

from app.api.routes.health import router as health_router
from app.api.routes.posts import router as posts_router
from app.api.routes.root import router as root_router

__all__ = ["health_router", "posts_router", "root_router"]
