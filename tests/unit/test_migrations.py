from __future__ import annotations

from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic import command
from alembic.config import Config
from sqlalchemy.exc import IntegrityError

from db.engine import create_engine
from db.writes import insert_faculty, insert_student


ALEMBIC_INI = Path(__file__).resolve().parents[2] / "db" / "migrations" / "alembic.ini"


def _upgrade(monkeypatch, url: str) -> None:
    monkeypatch.setenv("DATABASE_URL", url)
    command.upgrade(Config(str(ALEMBIC_INI)), "head")


def test_alembic_upgrade_builds_schema_on_sqlite(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    _upgrade(monkeypatch, url)

    engine = create_engine(url)
    insp = sa.inspect(engine)
    assert {"faculties", "students", "courses", "grades"} <= set(insp.get_table_names())

    index_names = {ix["name"] for t in ("students", "grades") for ix in insp.get_indexes(t)}
    assert {
        "idx_students_faculty",
        "idx_students_name",
        "idx_grades_student",
        "idx_grades_course",
        "idx_grades_date",
    } <= index_names

    # Constraints from the migration are live.
    with pytest.raises(IntegrityError):
        with engine.begin() as conn:
            insert_student(conn, "Ada", "Lovelace", 1, 2021)
    with engine.begin() as conn:
        faculty_id = insert_faculty(conn, "Physics", "Landau L.D.")
    with pytest.raises(IntegrityError):
        with engine.begin() as conn:
            insert_student(conn, "Ada", "Lovelace", faculty_id, 1999)
    engine.dispose()


def test_alembic_downgrade_drops_schema(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    _upgrade(monkeypatch, url)
    command.downgrade(Config(str(ALEMBIC_INI)), "base")

    engine = create_engine(url)
    tables = set(sa.inspect(engine).get_table_names())
    engine.dispose()
    assert not {"faculties", "students", "courses", "grades"} & tables
