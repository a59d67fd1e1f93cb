from __future__ import annotations

from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Engine


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    # SQLite ships with FK enforcement off; turn it on for every pooled connection.
    @sa.event.listens_for(engine, "connect")
    def _fk_pragma(dbapi_connection: Any, _record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine(database_url: str, **kwargs: Any) -> Engine:
    engine = sa.create_engine(database_url, future=True, **kwargs)
    if engine.dialect.name == "sqlite":
        enable_sqlite_foreign_keys(engine)
    return engine


def sync_database_url(url: str) -> str:
    """Map runtime (async) URLs onto the sync drivers used by migrations and the generator."""
    url = url.replace("postgresql+asyncpg://", "postgresql+psycopg://")
    # Some libraries (and some testcontainers versions) emit psycopg2 URLs.
    url = url.replace("postgresql+psycopg2://", "postgresql+psycopg://")
    url = url.replace("sqlite+aiosqlite://", "sqlite://")
    # If no driver is specified, SQLAlchemy defaults to psycopg2; force psycopg3.
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url
