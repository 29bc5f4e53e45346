"""Shared fixtures for product service tests.

Uses an in-memory SQLite database so list queries run against a real
relational store.
"""

import os

# Ensure settings can be initialized without a PostgreSQL driver
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from product_svc.catalog.models import Product
from product_svc.infrastructure.database import Base, get_session
from product_svc.main import app


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Database session for direct repository and service tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the request session bound to the test database."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


def make_product(name: str, price: float, stock: int = 10, **kwargs) -> Product:
    """Build a valid product."""
    return Product(
        name=name,
        description=kwargs.pop("description", f"{name} description"),
        price=price,
        stock=stock,
        **kwargs,
    )


@pytest.fixture
async def price_products(session: AsyncSession) -> list[Product]:
    """Products A..D priced 5, 10, 15, 20, inserted in that order."""
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    products = [
        make_product(name, price, stock=stock, created_at=base + timedelta(minutes=i))
        for i, (name, price, stock) in enumerate(
            [("A", 5.0, 1), ("B", 10.0, 2), ("C", 15.0, 3), ("D", 20.0, 4)]
        )
    ]
    for product in products:
        session.add(product)
        await session.flush()
    await session.commit()
    return products
