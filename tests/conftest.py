from __future__ import annotations

import os
import random
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config

from db.engine import create_engine, sync_database_url


REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_INI = REPO_ROOT / "db" / "migrations" / "alembic.ini"


def alembic_upgrade(database_url: str, revision: str = "head") -> None:
    previous = os.environ.get("DATABASE_URL")
    os.environ["DATABASE_URL"] = database_url
    try:
        command.upgrade(Config(str(ALEMBIC_INI)), revision)
    finally:
        if previous is None:
            os.environ.pop("DATABASE_URL", None)
        else:
            os.environ["DATABASE_URL"] = previous


@pytest.fixture(scope="session")
def postgres_url() -> str:
    postgres = pytest.importorskip("testcontainers.postgres")
    try:
        pg = postgres.PostgresContainer("postgres:16")
        pg.start()
    except Exception as e:  # no docker daemon on this host
        pytest.skip(f"postgres container unavailable: {e}")
    try:
        # testcontainers may emit postgresql:// or postgresql+psycopg2://; normalize to psycopg3.
        yield sync_database_url(pg.get_connection_url())
    finally:
        pg.stop()


@pytest.fixture(scope="session")
def migrated_seeded_db(postgres_url: str) -> str:
    alembic_upgrade(postgres_url)

    from db.seed import seed

    engine = create_engine(postgres_url)
    try:
        seed(engine, random.Random(1337))
    finally:
        engine.dispose()
    return postgres_url
