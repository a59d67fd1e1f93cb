from __future__ import annotations

import random
import sys
from pathlib import Path

import pytest


# Ensure the monorepo root is importable (so `import db.*` works in tests).
REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT))

from db.engine import create_engine  # noqa: E402
from db.schema import metadata  # noqa: E402
from db.seed import seed  # noqa: E402
from db.writes import insert_course, insert_faculty  # noqa: E402


@pytest.fixture()
def engine(tmp_path: Path):
    engine = create_engine(f"sqlite:///{tmp_path / 'registry.db'}")
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def seeded_engine(engine):
    seed(engine, random.Random(1337))
    return engine


@pytest.fixture()
def faculty_id(engine) -> int:
    with engine.begin() as conn:
        return insert_faculty(conn, "Faculty of Physics", "Landau L.D.")


@pytest.fixture()
def course_id(engine) -> int:
    with engine.begin() as conn:
        return insert_course(conn, "Mechanics", 4, description="Classical mechanics")
