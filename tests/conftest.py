from __future__ import annotations

import os
import time
from collections.abc import Callable, Iterator
from typing import Any

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from filmsync.core.catalog_client import get_catalog_client
from filmsync.core.config import get_settings
from filmsync.core.identity import get_identity_provider
from filmsync.database import get_session
from filmsync.main import app
from filmsync.models.document import Document  # noqa: F401
from tests.helpers import CatalogStub, FakeIdentity


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def catalog() -> CatalogStub:
    return CatalogStub()


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def make_token() -> Callable[..., str]:
    settings = get_settings()

    def factory(role: str | None, sub: str = "caller-1") -> str:
        claims: dict[str, Any] = {
            "sub": sub,
            "role": "authenticated",
            "exp": int(time.time()) + 600,
        }
        if role is not None:
            claims["app_metadata"] = {"role": role}
        return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm=settings.SUPABASE_JWT_ALG)

    return factory


@pytest.fixture
def auth_header(make_token: Callable[..., str]) -> Callable[[str | None], dict[str, str]]:
    def factory(role: str | None) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(role)}"}

    return factory


@pytest.fixture
def client(engine: Engine, catalog: CatalogStub, identity: FakeIdentity) -> Iterator[TestClient]:
    def session_override() -> Iterator[Session]:
        with Session(engine) as session:
            yield session

    catalog_client = catalog.client()
    app.dependency_overrides[get_session] = session_override
    app.dependency_overrides[get_catalog_client] = lambda: catalog_client
    app.dependency_overrides[get_identity_provider] = lambda: identity
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
