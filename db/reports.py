from __future__ import annotations

import argparse
import json
import os
from collections.abc import Callable
from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Connection
from sqlalchemy.sql import Select

from db.engine import create_engine, sync_database_url
from db.logging import configure_logging
from db.schema import courses, faculties, grades, students
from db.settings import SETTINGS


TOP_STUDENT_THRESHOLD = 4.0


def _avg_grade() -> Any:
    return sa.func.round(sa.func.avg(grades.c.grade), 2)


def _as_float(v: Any) -> float | None:
    # PostgreSQL returns Decimal for ROUND(numeric), SQLite returns float.
    return None if v is None else float(v)


def faculty_averages_query() -> Select:
    average_grade = _avg_grade().label("average_grade")
    return (
        sa.select(
            faculties.c.faculty_name,
            average_grade,
            sa.func.count(sa.distinct(students.c.student_id)).label("student_count"),
        )
        .select_from(
            faculties.join(students, faculties.c.faculty_id == students.c.faculty_id).join(
                grades, students.c.student_id == grades.c.student_id
            )
        )
        .group_by(faculties.c.faculty_id, faculties.c.faculty_name)
        .order_by(average_grade.desc(), faculties.c.faculty_id.asc())
    )


def top_students_query(threshold: float = TOP_STUDENT_THRESHOLD) -> Select:
    average_grade = _avg_grade().label("average_grade")
    return (
        sa.select(
            students.c.first_name,
            students.c.last_name,
            faculties.c.faculty_name,
            average_grade,
            sa.func.count(grades.c.grade_id).label("exams_count"),
        )
        .select_from(
            students.join(faculties, students.c.faculty_id == faculties.c.faculty_id).join(
                grades, students.c.student_id == grades.c.student_id
            )
        )
        .group_by(students.c.student_id, students.c.first_name, students.c.last_name, faculties.c.faculty_name)
        .having(sa.func.avg(grades.c.grade) > threshold)
        .order_by(average_grade.desc(), students.c.student_id.asc())
    )


def course_popularity_query() -> Select:
    grades_count = sa.func.count(grades.c.grade_id).label("grades_count")
    return (
        sa.select(courses.c.course_name, grades_count, _avg_grade().label("average_grade"))
        .select_from(courses.outerjoin(grades, courses.c.course_id == grades.c.course_id))
        .group_by(courses.c.course_id, courses.c.course_name)
        .order_by(grades_count.desc(), courses.c.course_id.asc())
    )


def excellent_grades_query(limit: int = 100) -> Select:
    return (
        sa.select(students.c.first_name, students.c.last_name, courses.c.course_name, grades.c.grade)
        .select_from(
            grades.join(students, grades.c.student_id == students.c.student_id).join(
                courses, grades.c.course_id == courses.c.course_id
            )
        )
        .where(grades.c.grade == 5)
        .order_by(grades.c.exam_date.desc(), grades.c.grade_id.asc())
        .limit(limit)
    )


def _rows(conn: Connection, stmt: Select) -> list[dict[str, Any]]:
    out = []
    for row in conn.execute(stmt).mappings():
        d = dict(row)
        if "average_grade" in d:
            d["average_grade"] = _as_float(d["average_grade"])
        out.append(d)
    return out


def faculty_averages(conn: Connection) -> list[dict[str, Any]]:
    """Average grade per faculty, best first. Faculties without grades are left out."""
    return _rows(conn, faculty_averages_query())


def top_students(conn: Connection, threshold: float = TOP_STUDENT_THRESHOLD) -> list[dict[str, Any]]:
    """Students whose average grade is strictly above `threshold`."""
    return _rows(conn, top_students_query(threshold))


def course_popularity(conn: Connection) -> list[dict[str, Any]]:
    """Grade counts per course, most examined first. Courses with no grades report a null average."""
    return _rows(conn, course_popularity_query())


def excellent_grades(conn: Connection, limit: int = 100) -> list[dict[str, Any]]:
    return _rows(conn, excellent_grades_query(limit))


def explain(conn: Connection, stmt: Select) -> list[str]:
    compiled = str(stmt.compile(dialect=conn.dialect, compile_kwargs={"literal_binds": True}))
    if conn.dialect.name == "postgresql":
        return [str(r[0]) for r in conn.execute(sa.text(f"EXPLAIN ANALYZE {compiled}"))]
    if conn.dialect.name == "sqlite":
        # (id, parent, notused, detail)
        return [str(r[-1]) for r in conn.execute(sa.text(f"EXPLAIN QUERY PLAN {compiled}"))]
    raise ValueError(f"explain is not supported on {conn.dialect.name}")


REPORTS: dict[str, tuple[Callable[..., list[dict[str, Any]]], Callable[..., Select]]] = {
    "faculty-averages": (faculty_averages, faculty_averages_query),
    "top-students": (top_students, top_students_query),
    "course-popularity": (course_popularity, course_popularity_query),
    "excellent-grades": (excellent_grades, excellent_grades_query),
}


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a registry report.")
    parser.add_argument("report", choices=sorted(REPORTS))
    parser.add_argument("--database-url", default=os.getenv("DATABASE_URL") or SETTINGS.database_url)
    parser.add_argument("--explain", action="store_true", help="Print the query plan instead of rows.")
    args = parser.parse_args()

    configure_logging(SETTINGS.log_level, "reports", stream="stderr")
    run, build = REPORTS[args.report]
    engine = create_engine(sync_database_url(args.database_url))
    with engine.connect() as conn:
        if args.explain:
            print("\n".join(explain(conn, build())))
        else:
            print(json.dumps(run(conn), indent=2, default=str))


if __name__ == "__main__":
    main()
