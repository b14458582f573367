"""Pytest configuration and shared fixtures.

This module provides centralized test fixtures for:
- HTTP client for API testing
- Test database engine and sessions
- A small seeded catalog hierarchy
- Registry attributes (custom and default fields)
"""

import os
from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from formschema.auth import verify_api_key
from formschema.database import Base, get_db
from formschema.main import app
from formschema.models import (
    AttributeDefinition,
    Category,
    LevelConfig,
    LevelKind,
    ServiceType,
    Subcategory,
)
from formschema.schemas.level_config import LevelRef
from formschema.schemas.resolution import ResolutionContext
from formschema.scripts.seed_registry import seed_default_fields

TEST_API_KEY = "test-api-key"


async def stub_verify_api_key() -> str:
    """Stub auth dependency that accepts every request."""
    return TEST_API_KEY


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine with automatic schema management.

    Creates all tables before tests, drops them after.
    Uses DATABASE_TEST_URL env var if set, otherwise an in-memory SQLite
    database shared through a single connection.
    """
    db_url = os.environ.get("DATABASE_TEST_URL")
    if db_url:
        engine = create_async_engine(db_url, echo=False)
    else:
        engine = create_async_engine(
            "sqlite+aiosqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncSession:
    """Test database session.

    Seed fixtures commit their rows so that API requests (which use their
    own sessions) can see them.
    """
    async with session_maker() as session:
        yield session
        await session.rollback()


# =============================================================================
# HTTP Client Fixtures
# =============================================================================


def _override_get_db(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return override_get_db


@pytest_asyncio.fixture
async def client(session_maker):
    """Async test client for the FastAPI app with the test database.

    Overrides get_db and the API key check.
    """
    app.dependency_overrides[get_db] = _override_get_db(session_maker)
    app.dependency_overrides[verify_api_key] = stub_verify_api_key

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(verify_api_key, None)


@pytest_asyncio.fixture
async def unauthenticated_client(session_maker):
    """Test client that keeps the real API key check."""
    app.dependency_overrides[get_db] = _override_get_db(session_maker)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.pop(get_db, None)


# =============================================================================
# Catalog Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def hierarchy(db_session) -> SimpleNamespace:
    """Two service types, each with a category; the first category has a subcategory.

    Grocery -> Produce -> Fruit
    Handyman -> Plumbing
    """
    grocery = ServiceType(name="Grocery", sort_order=0)
    handyman = ServiceType(name="Handyman", sort_order=1)
    db_session.add_all([grocery, handyman])
    await db_session.flush()

    produce = Category(service_type_id=grocery.id, name="Produce")
    plumbing = Category(service_type_id=handyman.id, name="Plumbing")
    db_session.add_all([produce, plumbing])
    await db_session.flush()

    fruit = Subcategory(category_id=produce.id, name="Fruit")
    db_session.add(fruit)
    await db_session.commit()

    return SimpleNamespace(
        service_id=grocery.id,
        category_id=produce.id,
        subcategory_id=fruit.id,
        other_service_id=handyman.id,
        other_category_id=plumbing.id,
        service=LevelRef(kind=LevelKind.SERVICE, id=grocery.id),
        category=LevelRef(kind=LevelKind.CATEGORY, id=produce.id),
        subcategory=LevelRef(kind=LevelKind.SUBCATEGORY, id=fruit.id),
        other_category=LevelRef(kind=LevelKind.CATEGORY, id=plumbing.id),
        service_context=ResolutionContext(service_id=grocery.id),
        category_context=ResolutionContext(service_id=grocery.id, category_id=produce.id),
        subcategory_context=ResolutionContext(
            service_id=grocery.id,
            category_id=produce.id,
            subcategory_id=fruit.id,
        ),
    )


@pytest_asyncio.fixture
async def default_fields(db_session) -> dict:
    """Seed the built-in default fields and return their ids by name."""
    await seed_default_fields(db_session)
    await db_session.commit()
    result = await db_session.execute(
        select(AttributeDefinition).where(AttributeDefinition.is_default_field.is_(True))
    )
    return {a.name: a.id for a in result.scalars().all()}


@pytest.fixture
def make_attribute(db_session):
    """Factory that commits a registry attribute and returns its id."""

    async def _make(name: str, **kwargs):
        attribute = AttributeDefinition(
            name=name,
            label=kwargs.pop("label", name.replace("_", " ").title()),
            data_type=kwargs.pop("data_type", "text"),
            input_type=kwargs.pop("input_type", "text"),
            **kwargs,
        )
        db_session.add(attribute)
        await db_session.commit()
        return attribute.id

    return _make


@pytest.fixture
def bind(db_session):
    """Factory that commits a LevelConfig binding and returns its id."""

    async def _bind(level: LevelRef, attribute_id, **kwargs):
        config = LevelConfig(
            level_kind=level.kind,
            level_id=level.id,
            attribute_id=attribute_id,
            **kwargs,
        )
        db_session.add(config)
        await db_session.commit()
        return config.id

    return _bind
