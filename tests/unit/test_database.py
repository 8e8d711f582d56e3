"""Unit tests for portfolio_ledger/infrastructure/database.py.

Tests cover Settings defaults, env var override, and object types.
No database connection is required.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from portfolio_ledger.infrastructure.database import AsyncSessionLocal, Base, Settings, engine


def test_settings_default_url_uses_asyncpg():
    assert Settings().database_url.startswith("postgresql+asyncpg://")


def test_settings_default_database_name():
    assert Settings().database_url.endswith("/portfolio_ledger")


def test_settings_reads_database_url_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@ledger-db/ledger")
    assert Settings().database_url == "postgresql+asyncpg://u:p@ledger-db/ledger"


def test_base_is_declarative_base():
    assert issubclass(Base, DeclarativeBase)


def test_engine_is_async():
    assert isinstance(engine, AsyncEngine)


def test_session_factory_keeps_objects_after_commit():
    assert isinstance(AsyncSessionLocal, async_sessionmaker)
    assert AsyncSessionLocal.class_ is AsyncSession
    assert AsyncSessionLocal.kw["expire_on_commit"] is False
