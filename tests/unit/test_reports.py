from __future__ import annotations

from datetime import date

import pytest

from db import reports
from db.writes import insert_course, insert_faculty, insert_grade, insert_student


@pytest.fixture()
def small_registry(engine):
    """
    Three faculties:
    - Physics: one student graded [5, 5, 4]
    - Chemistry: one student graded [4, 4]
    - History: one student, no grades
    """
    with engine.begin() as conn:
        physics = insert_faculty(conn, "Physics", "Landau L.D.")
        chemistry = insert_faculty(conn, "Chemistry", "Mendeleev D.I.")
        history = insert_faculty(conn, "History", "Klyuchevsky V.O.")

        mechanics = insert_course(conn, "Mechanics", 5)
        organic = insert_course(conn, "Organic Chemistry", 4)
        insert_course(conn, "Archival Studies", 2)

        ada = insert_student(conn, "Ada", "Lovelace", physics, 2021, email="ada@example.com")
        marie = insert_student(conn, "Marie", "Curie", chemistry, 2022)
        insert_student(conn, "Nestor", "Chronicler", history, 2023)

        insert_grade(conn, ada, mechanics, 5, date(2024, 1, 10))
        insert_grade(conn, ada, mechanics, 5, date(2024, 2, 10))
        insert_grade(conn, ada, organic, 4, date(2024, 3, 10))
        insert_grade(conn, marie, organic, 4, date(2024, 3, 11))
        insert_grade(conn, marie, organic, 4, date(2024, 3, 12))
    return engine


def test_faculty_averages(small_registry) -> None:
    with small_registry.connect() as conn:
        rows = reports.faculty_averages(conn)
    assert rows == [
        {"faculty_name": "Physics", "average_grade": 4.67, "student_count": 1},
        {"faculty_name": "Chemistry", "average_grade": 4.0, "student_count": 1},
    ]


def test_faculty_averages_breaks_ties_by_faculty_id(engine) -> None:
    with engine.begin() as conn:
        course = insert_course(conn, "Logic", 3)
        for name in ("Zeta", "Alpha"):
            faculty = insert_faculty(conn, name, "Dean")
            student = insert_student(conn, name, "Student", faculty, 2020)
            insert_grade(conn, student, course, 3, date(2024, 5, 1))
    with engine.connect() as conn:
        rows = reports.faculty_averages(conn)
    assert [r["faculty_name"] for r in rows] == ["Zeta", "Alpha"]


def test_top_students_is_strictly_above_threshold(small_registry) -> None:
    with small_registry.connect() as conn:
        rows = reports.top_students(conn)
    assert rows == [
        {
            "first_name": "Ada",
            "last_name": "Lovelace",
            "faculty_name": "Physics",
            "average_grade": 4.67,
            "exams_count": 3,
        }
    ]


def test_top_students_custom_threshold(small_registry) -> None:
    with small_registry.connect() as conn:
        rows = reports.top_students(conn, threshold=3.5)
    assert [r["first_name"] for r in rows] == ["Ada", "Marie"]


def test_top_students_breaks_ties_by_student_id(engine, faculty_id: int, course_id: int) -> None:
    with engine.begin() as conn:
        for name in ("Zed", "Amy"):
            student = insert_student(conn, name, "Student", faculty_id, 2020)
            insert_grade(conn, student, course_id, 5, date(2024, 5, 1))
    with engine.connect() as conn:
        rows = reports.top_students(conn)
    assert [r["first_name"] for r in rows] == ["Zed", "Amy"]


def test_course_popularity_includes_courses_without_grades(small_registry) -> None:
    with small_registry.connect() as conn:
        rows = reports.course_popularity(conn)
    assert rows == [
        {"course_name": "Organic Chemistry", "grades_count": 3, "average_grade": 4.0},
        {"course_name": "Mechanics", "grades_count": 2, "average_grade": 5.0},
        {"course_name": "Archival Studies", "grades_count": 0, "average_grade": None},
    ]


def test_course_popularity_breaks_ties_by_course_id(engine, faculty_id: int) -> None:
    with engine.begin() as conn:
        student = insert_student(conn, "Ada", "Lovelace", faculty_id, 2021)
        for name in ("Zoology", "Anatomy"):
            course = insert_course(conn, name, 3)
            insert_grade(conn, student, course, 4, date(2024, 5, 1))
    with engine.connect() as conn:
        rows = reports.course_popularity(conn)
    assert [r["course_name"] for r in rows] == ["Zoology", "Anatomy"]


def test_excellent_grades_newest_first(small_registry) -> None:
    with small_registry.connect() as conn:
        rows = reports.excellent_grades(conn)
        limited = reports.excellent_grades(conn, limit=1)
    assert [r["grade"] for r in rows] == [5, 5]
    assert all(r["course_name"] == "Mechanics" for r in rows)
    assert len(limited) == 1


def test_excellent_grades_same_day_ordered_by_grade_id(engine, faculty_id: int, course_id: int) -> None:
    with engine.begin() as conn:
        for name in ("Zed", "Amy", "Bob"):
            student = insert_student(conn, name, "Student", faculty_id, 2020)
            insert_grade(conn, student, course_id, 5, date(2024, 6, 1))
    with engine.connect() as conn:
        rows = reports.excellent_grades(conn)
    assert [r["first_name"] for r in rows] == ["Zed", "Amy", "Bob"]


def test_reports_on_seeded_dataset(seeded_engine) -> None:
    with seeded_engine.connect() as conn:
        popularity = reports.course_popularity(conn)
        averages = reports.faculty_averages(conn)
        top = reports.top_students(conn)

    assert len(popularity) == 7
    assert sum(r["grades_count"] for r in popularity) == 200
    counts = [r["grades_count"] for r in popularity]
    assert counts == sorted(counts, reverse=True)

    # Only the enrolling faculties have students.
    assert 1 <= len(averages) <= 3
    avgs = [r["average_grade"] for r in averages]
    assert avgs == sorted(avgs, reverse=True)
    assert all(1.0 <= a <= 5.0 for a in avgs)

    assert all(r["average_grade"] > 4.0 for r in top)


def test_explain_returns_plan_lines(seeded_engine) -> None:
    with seeded_engine.connect() as conn:
        plan = reports.explain(conn, reports.excellent_grades_query())
    assert plan
    assert all(isinstance(line, str) for line in plan)


def test_explain_rejects_unsupported_dialect(seeded_engine, monkeypatch) -> None:
    with seeded_engine.connect() as conn:
        monkeypatch.setattr(conn.dialect, "name", "oracle")
        with pytest.raises(ValueError, match="not supported on oracle"):
            reports.explain(conn, reports.course_popularity_query())
