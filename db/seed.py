from __future__ import annotations

import argparse
import json
import os
import random
from dataclasses import dataclass
from datetime import date, timedelta

import sqlalchemy as sa
from sqlalchemy.engine import Connection, Engine

from db.engine import create_engine, sync_database_url
from db.logging import configure_logging, logger, operation
from db.schema import GRADE_MAX, GRADE_MIN, TABLES_CHILD_FIRST, courses, faculties, grades, students
from db.settings import SETTINGS
from db.validation import validate_student_email


@dataclass(frozen=True)
class FacultySpec:
    name: str
    dean: str


@dataclass(frozen=True)
class CourseSpec:
    name: str
    description: str
    credits: int


FACULTY_SPECS: list[FacultySpec] = [
    FacultySpec(name="Faculty of Computer Science", dean="Ivanov A.S."),
    FacultySpec(name="Faculty of Economics", dean="Petrova M.I."),
    FacultySpec(name="Faculty of Linguistics", dean="Sidorova O.P."),
    FacultySpec(name="Faculty of Mathematics", dean="Kozlov D.V."),
]

COURSE_SPECS: list[CourseSpec] = [
    CourseSpec(name="Databases", description="Database design and usage fundamentals", credits=5),
    CourseSpec(name="Web Programming", description="Building web applications", credits=4),
    CourseSpec(name="Economics", description="Economic theory", credits=3),
    CourseSpec(name="Foreign Language", description="English for IT specialists", credits=2),
    CourseSpec(name="Calculus", description="Differential and integral calculus", credits=6),
    CourseSpec(name="Probability Theory", description="Probabilistic models and statistics", credits=4),
    CourseSpec(name="Operating Systems", description="OS architecture and principles", credits=5),
]

STUDENTS_N = 50
GRADES_N = 200

# Only the first N faculties take in students; the rest stay empty.
ENROLLING_FACULTIES = 3
ENROLLMENT_YEARS = (2020, 2024)

EXAM_WINDOW_START = date(2024, 1, 1)
EXAM_WINDOW_DAYS = 300


def _clear(conn: Connection) -> None:
    if conn.dialect.name == "postgresql":
        names = ", ".join(t.name for t in TABLES_CHILD_FIRST)
        conn.execute(sa.text(f"TRUNCATE TABLE {names} RESTART IDENTITY CASCADE"))
        return
    # SQLite restarts rowids at 1 once a table is empty.
    for table in TABLES_CHILD_FIRST:
        conn.execute(table.delete())


def _ids(conn: Connection, column: sa.Column) -> list[int]:
    return list(conn.execute(sa.select(column).order_by(column)).scalars())


def seed(engine: Engine, rng: random.Random | None = None) -> dict[str, int]:
    """
    Wipe the registry and fill it with a demonstration dataset.

    Runs in a single transaction: if anything fails, the previous rows survive.
    Random references are drawn from the ids actually inserted, so resizing the
    fixed lists never produces dangling foreign keys. Not safe to run concurrently
    against the same database.
    """
    rng = rng or random.Random()

    with operation("seed"):
        with engine.begin() as conn:
            _clear(conn)
            logger.info("seed.cleared", tables=[t.name for t in TABLES_CHILD_FIRST])

            conn.execute(faculties.insert(), [{"faculty_name": f.name, "dean_name": f.dean} for f in FACULTY_SPECS])
            conn.execute(
                courses.insert(),
                [{"course_name": c.name, "description": c.description, "credits": c.credits} for c in COURSE_SPECS],
            )
            faculty_ids = _ids(conn, faculties.c.faculty_id)
            course_ids = _ids(conn, courses.c.course_id)
            enrolling_ids = faculty_ids[:ENROLLING_FACULTIES]

            student_rows: list[dict] = []
            for i in range(1, STUDENTS_N + 1):
                student_rows.append(
                    dict(
                        first_name=f"Student{i}",
                        last_name=f"Surname{i}",
                        email=validate_student_email(f"student{i}@edu.ru"),
                        faculty_id=rng.choice(enrolling_ids),
                        enrollment_year=rng.randint(*ENROLLMENT_YEARS),
                    )
                )
            conn.execute(students.insert(), student_rows)
            student_ids = _ids(conn, students.c.student_id)

            grade_rows: list[dict] = []
            for _ in range(GRADES_N):
                grade_rows.append(
                    dict(
                        student_id=rng.choice(student_ids),
                        course_id=rng.choice(course_ids),
                        grade=rng.randint(GRADE_MIN, GRADE_MAX),
                        exam_date=EXAM_WINDOW_START + timedelta(days=rng.randrange(EXAM_WINDOW_DAYS)),
                    )
                )
            conn.execute(grades.insert(), grade_rows)

            counts = {}
            for table in TABLES_CHILD_FIRST[::-1]:
                counts[table.name] = conn.execute(sa.select(sa.func.count()).select_from(table)).scalar_one()

        logger.info("seed.completed", counts=counts)
    return counts


def main() -> None:
    parser = argparse.ArgumentParser(description="Wipe and repopulate the registry with sample data.")
    parser.add_argument("--database-url", default=os.getenv("DATABASE_URL") or SETTINGS.database_url)
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible content.")
    args = parser.parse_args()

    configure_logging(SETTINGS.log_level, "seed", stream="stderr")
    # DATABASE_URL may carry the service's async driver.
    engine = create_engine(sync_database_url(args.database_url))
    counts = seed(engine, random.Random(args.seed))
    print(json.dumps({"seed": args.seed, "counts": counts}, indent=2))


if __name__ == "__main__":
    main()
