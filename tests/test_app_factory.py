"""Tests for application construction and startup failure handling."""

from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from app.adapters.rate_limit.token_bucket import TokenBucketRateLimiter
from app.adapters.storage.in_memory import InMemoryPostStore
from app.adapters.storage.sqlite import SQLitePostStore
from app.core.app_factory import create_app
from app.core.config import AppSettings, Settings


def test_app_owns_store_service_and_limiter(make_settings: Callable[..., Settings]) -> None:
    app = create_app(make_settings())

    assert isinstance(app.state.post_store, SQLitePostStore)
    assert app.state.post_service is not None
    limiter = app.state.rate_limiter
    assert isinstance(limiter, TokenBucketRateLimiter)
    assert limiter.capacity == 100


def test_schema_created_at_startup(make_settings: Callable[..., Settings], tmp_path: Path) -> None:
    db_path = tmp_path / "startup.db"

    create_app(make_settings(database_path=str(db_path)))

    assert db_path.is_file()


def test_existing_database_is_reused(make_settings: Callable[..., Settings], tmp_path: Path) -> None:
    db_path = str(tmp_path / "reuse.db")
    with TestClient(create_app(make_settings(database_path=db_path))) as client:
        client.post("/posts", json={"title": "T", "content": "C"})

    with TestClient(create_app(make_settings(database_path=db_path))) as client:
        posts = client.get("/posts").json()

    assert [p["title"] for p in posts] == ["T"]


def test_memory_backend(make_settings: Callable[..., Settings]) -> None:
    app = create_app(make_settings(backend="memory"))

    assert isinstance(app.state.post_store, InMemoryPostStore)


def test_disabled_rate_limit_has_no_limiter(make_settings: Callable[..., Settings]) -> None:
    app = create_app(make_settings(rate_limit_enabled=False))

    assert app.state.rate_limiter is None


def test_schema_failure_exits_process(make_settings: Callable[..., Settings], tmp_path: Path) -> None:
    bad_path = str(tmp_path / "does-not-exist" / "posts.db")

    with pytest.raises(SystemExit) as exc_info:
        create_app(make_settings(database_path=bad_path))

    assert exc_info.value.code == 1


def test_unknown_backend_exits_process(make_settings: Callable[..., Settings]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        create_app(make_settings(backend="postgres"))

    assert exc_info.value.code == 1


def test_default_rate_limit_settings() -> None:
    cfg = AppSettings()

    assert cfg.rate_limit_capacity == 2
    assert cfg.rate_limit_refill_per_second == 2.0
    assert cfg.rate_limit_enabled is True


def test_openapi_lists_posts_routes(make_settings: Callable[..., Settings]) -> None:
    with TestClient(create_app(make_settings())) as client:
        schema = client.get("/openapi.json").json()

    assert {"get", "post", "options"} <= set(schema["paths"]["/posts"])
    assert "Retry-After" in schema["paths"]["/posts"]["post"]["responses"]["429"]["headers"]
    assert "Posts" in {tag["name"] for tag in schema["tags"]}


def test_openapi_documents_post_body_and_hides_catch_all(
    make_settings: Callable[..., Settings],
) -> None:
    with TestClient(create_app(make_settings())) as client:
        schema = client.get("/openapi.json").json()

    body_schema = schema["paths"]["/posts"]["post"]["requestBody"]["content"]["application/json"]["schema"]
    assert set(body_schema["required"]) == {"title", "content"}
    assert "/{path}" not in schema["paths"]
    assert "/" in schema["paths"]
