"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
Environment variables are set before the app is imported so the module-level
settings never point at the working directory's database.
"""

import os
import tempfile
from pathlib import Path
from typing import Callable, Iterator

import pytest

# CRITICAL: Set this before any imports that might load settings
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault(
    "STORAGE_DATABASE_PATH",
    str(Path(tempfile.mkdtemp(prefix="bbs-tests-")) / "bulletinboard.db"),
)

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.app_factory import create_app  # noqa: E402
from app.core.config import AppSettings, LogSettings, Settings, StorageSettings  # noqa: E402


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    """Build isolated settings backed by a fresh SQLite file per test."""

    def _make(
        *,
        backend: str = "sqlite",
        database_path: str | None = None,
        log: LogSettings | None = None,
        **app_overrides,
    ) -> Settings:
        app_kwargs = {
            "rate_limit_capacity": 100,
            "rate_limit_refill_per_second": 100.0,
        }
        app_kwargs.update(app_overrides)
        return Settings(
            app_env="testing",
            app=AppSettings(**app_kwargs),
            storage=StorageSettings(
                backend=backend,
                database_path=database_path or str(tmp_path / "posts.db"),
            ),
            log=log or LogSettings(level="WARNING"),
        )

    return _make


@pytest.fixture
def app(make_settings: Callable[..., Settings]) -> FastAPI:
    return create_app(make_settings())


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Create FastAPI test client with lifespan events."""
    with TestClient(app) as test_client:
        yield test_client
