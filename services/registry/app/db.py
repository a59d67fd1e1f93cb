from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from db.engine import enable_sqlite_foreign_keys
from services.registry.app.settings import SETTINGS


def create_engine() -> AsyncEngine:
    # NullPool avoids cross-event-loop pooled connections during tests and keeps behavior simple.
    engine = create_async_engine(SETTINGS.database_url, pool_pre_ping=True, poolclass=NullPool)
    if engine.dialect.name == "sqlite":
        enable_sqlite_foreign_keys(engine.sync_engine)
    return engine


ENGINE = create_engine()
