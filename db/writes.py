from __future__ import annotations

from datetime import date
from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Connection

from db.schema import courses, faculties, grades, students
from db.validation import validate_student_email


# Columns a caller may change on an existing student.
STUDENT_MUTABLE_COLUMNS = frozenset({"first_name", "last_name", "email", "faculty_id", "enrollment_year"})


class NotFoundError(LookupError):
    """The row a write targets does not exist."""


def insert_faculty(conn: Connection, faculty_name: str, dean_name: str) -> int:
    res = conn.execute(faculties.insert().values(faculty_name=faculty_name, dean_name=dean_name))
    return res.inserted_primary_key[0]


def insert_course(conn: Connection, course_name: str, credits: int, description: str | None = None) -> int:
    res = conn.execute(
        courses.insert().values(course_name=course_name, description=description, credits=credits)
    )
    return res.inserted_primary_key[0]


def insert_student(
    conn: Connection,
    first_name: str,
    last_name: str,
    faculty_id: int,
    enrollment_year: int,
    email: str | None = None,
) -> int:
    validate_student_email(email)
    res = conn.execute(
        students.insert().values(
            first_name=first_name,
            last_name=last_name,
            email=email,
            faculty_id=faculty_id,
            enrollment_year=enrollment_year,
        )
    )
    return res.inserted_primary_key[0]


def update_student(conn: Connection, student_id: int, **changes: Any) -> None:
    unknown = set(changes) - STUDENT_MUTABLE_COLUMNS
    if unknown:
        raise ValueError(f"unknown student columns: {sorted(unknown)}")
    if "email" in changes:
        validate_student_email(changes["email"])
    if not changes:
        exists = conn.execute(
            sa.select(students.c.student_id).where(students.c.student_id == student_id)
        ).first()
        if exists is None:
            raise NotFoundError(f"student {student_id} not found")
        return

    res = conn.execute(students.update().where(students.c.student_id == student_id).values(**changes))
    if res.rowcount == 0:
        raise NotFoundError(f"student {student_id} not found")


def insert_grade(conn: Connection, student_id: int, course_id: int, grade: int, exam_date: date) -> int:
    res = conn.execute(
        grades.insert().values(student_id=student_id, course_id=course_id, grade=grade, exam_date=exam_date)
    )
    return res.inserted_primary_key[0]


def delete_faculty(conn: Connection, faculty_id: int) -> None:
    """Delete a faculty. Raises IntegrityError while any student still references it."""
    res = conn.execute(faculties.delete().where(faculties.c.faculty_id == faculty_id))
    if res.rowcount == 0:
        raise NotFoundError(f"faculty {faculty_id} not found")
