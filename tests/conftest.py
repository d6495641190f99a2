# ==============================================================================
# Shared fixtures: an isolated SQLite database per test, a session on it and an
# HTTP client whose get_db dependency is bound to the same database.
# ==============================================================================

from __future__ import annotations

import os
from decimal import Decimal
from types import SimpleNamespace
from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

# Set test environment before importing the app
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from cafe_service.db import build_engine, build_sessionmaker, create_all  # noqa: E402
from cafe_service.db_depends import get_db  # noqa: E402
from cafe_service.main import app  # noqa: E402
from cafe_service.service.commands import execute  # noqa: E402


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'cafe_test.db'}")
    await create_all(engine)
    yield build_sessionmaker(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def menu(db) -> dict:
    """Espresso, Croissant and Latte, keyed by name.

    Plain snapshots, so they stay readable after a rolled back command
    expires the session.
    """
    products = {}
    for name, price, category in (
        ("Espresso", "2.50", "Coffee"),
        ("Croissant", "3.25", "Pastry"),
        ("Latte", "4.00", "Coffee"),
    ):
        product = await execute(
            db,
            "create_product",
            name=name,
            price=Decimal(price),
            category=category,
            description=f"Fresh {name.lower()}",
        )
        products[name] = SimpleNamespace(id=product.id, name=product.name, price=product.price)
    return products

