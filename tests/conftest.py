"""
Pytest configuration and fixtures.

Environment is set before any shortlink module is imported: settings, the
application engine and the rate limiter are all built at import time.
"""

import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="shortlink-tests-")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'api.db')}"
os.environ["BASE_URL"] = "https://sho.rt/"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession  # noqa: E402

from shortlink.db import models  # noqa: E402,F401

from helpers import InMemoryRecordStore, make_config  # noqa: E402


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def config():
    return make_config()


@pytest_asyncio.fixture
async def sql_engine(tmp_path):
    """Fresh SQLite database per test."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'store.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(sql_engine):
    return async_sessionmaker(
        sql_engine,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def sql_session(session_maker):
    async with session_maker() as session:
        yield session
