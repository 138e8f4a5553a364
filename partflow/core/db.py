# partflow/core/db.py

from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from partflow.core.config import (
    APP_ENV,
    DATABASE_URL,
    DB_BUSY_TIMEOUT_MS,
    DB_ECHO,
)

# =====================================================
# BASE
# =====================================================
Base = declarative_base()


# =====================================================
# ENGINE
# =====================================================
def _ensure_database_dir(url: str) -> None:
    database = make_url(url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Async SQLite engine with real transaction boundaries.

    pysqlite only opens a transaction in front of DML, so reads issued
    before the first write would run outside it. Emitting BEGIN ourselves
    makes the whole unit of work (reads included) one transaction.
    """
    _ensure_database_dir(url)

    engine = create_async_engine(
        url,
        echo=DB_ECHO,
        future=True,
        connect_args={"check_same_thread": False},
        **kwargs,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _configure_sqlite(dbapi_connection, _):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA busy_timeout={DB_BUSY_TIMEOUT_MS}")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


engine = build_engine(DATABASE_URL)

# =====================================================
# SESSION
# =====================================================
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


# =====================================================
# DEPENDENCY
# =====================================================
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


# =====================================================
# MODEL IMPORT
# =====================================================
import partflow.models  # noqa


# =====================================================
# DEV / TEST ONLY: AUTO CREATE TABLES
# =====================================================
async def init_models():
    if APP_ENV == "production":
        raise RuntimeError("init_models() is forbidden in production")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
