"""Application factory for the FastAPI app.

Centralizes app construction (store, limiter, middleware, handlers, routers)
so tests can build isolated apps from explicit settings.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.adapters.storage.base import AbstractPostStore
from app.adapters.storage.factory import create_post_store
from app.api.routes import health_router, posts_router, root_router
from app.core.config import Settings, settings as default_settings
from app.core.errors import AppError
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import cors_headers_middleware, request_id_middleware
from app.core.openapi import apply_openapi_customizations
from app.core.rate_limit import create_rate_limiter
from app.services.post_service import PostService

logger = logging.getLogger(__name__)


def init_post_store(app_settings: Settings) -> AbstractPostStore:
    """Build the configured store and prepare its schema.

    Failure here is fatal: it is logged and the process exits with status 1
    before any connection is accepted.
    """
    try:
        store = create_post_store(app_settings.storage)
        store.initialize()
    except AppError as exc:
        logger.critical(
            "storage.init_failed",
            extra={
                "error_code": exc.code,
                "error_message": exc.message,
                "backend": app_settings.storage.backend,
            },
        )
        sys.exit(1)
    return store


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Settings to build from; defaults to the global settings.

    Returns:
        Configured app owning its post service and rate limiter.
    """
    cfg = app_settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log, debug=cfg.app.debug)

    store = init_post_store(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("app.startup", extra={"backend": store.backend, "app_env": cfg.app_env})
        yield
        store.close()
        logger.info("app.shutdown", extra={"backend": store.backend})

    app = FastAPI(
        title="Bulletin Board API",
        description=(
            "Minimal bulletin board: list posts and create posts. Titles and "
            "contents are HTML-escaped before storage; post creation is rate "
            "limited with a token bucket."
        ),
        version="0.1.0",
        debug=cfg.app.debug,
        lifespan=lifespan,
    )

    app.state.settings = cfg
    app.state.post_store = store
    app.state.post_service = PostService(store)
    app.state.rate_limiter = create_rate_limiter(cfg.app)

    # Middleware (last registered runs first)
    app.middleware("http")(cors_headers_middleware)
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers (root last: it catches every unmatched path)
    app.include_router(posts_router)
    app.include_router(health_router)
    app.include_router(root_router)

    apply_openapi_customizations(app)

    return app
