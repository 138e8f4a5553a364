import os
import sys
import tempfile
from pathlib import Path

import anyio
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.pool import NullPool

ROOT = Path(__file__).resolve().parent

# must be set before partflow.core.config is imported
_DB_DIR = tempfile.mkdtemp(prefix="partflow-test-")
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/partflow.db"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["ENABLE_SCHEDULER"] = "false"
sys.path.append(str(ROOT))

from partflow.core.db import Base, build_engine, get_db  # noqa: E402

ADMIN_KEY = "test-admin-key"


@pytest.fixture(scope="function")
def session_factory(tmp_path):
    engine = build_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'partflow.db'}",
        poolclass=NullPool,
    )

    async def _create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    anyio.run(_create_tables)
    factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    try:
        yield factory
    finally:
        anyio.run(engine.dispose)


@pytest.fixture
def run_db(session_factory):
    """Run ``fn(db, *args, **kwargs)`` in a fresh session and return its result."""

    def _run(fn, *args, **kwargs):
        async def _main():
            async with session_factory() as db:
                return await fn(db, *args, **kwargs)

        return anyio.run(_main)

    return _run


@pytest.fixture
def client(session_factory):
    from fastapi.testclient import TestClient

    from main import app

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    # no context manager: lifespan (table creation, scheduler) stays off
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": ADMIN_KEY}
