from __future__ import annotations

import sqlalchemy as sa


ENROLLMENT_YEAR_MIN = 2000
ENROLLMENT_YEAR_MAX = 2024
CREDITS_MIN = 1
CREDITS_MAX = 10
GRADE_MIN = 1
GRADE_MAX = 5


metadata = sa.MetaData()

faculties = sa.Table(
    "faculties",
    metadata,
    sa.Column("faculty_id", sa.Integer(), primary_key=True),
    sa.Column("faculty_name", sa.String(100), nullable=False, unique=True),
    sa.Column("dean_name", sa.String(100), nullable=False),
    sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
)

students = sa.Table(
    "students",
    metadata,
    sa.Column("student_id", sa.Integer(), primary_key=True),
    sa.Column("first_name", sa.String(50), nullable=False),
    sa.Column("last_name", sa.String(50), nullable=False),
    sa.Column("email", sa.String(100), nullable=True, unique=True),
    sa.Column("faculty_id", sa.Integer(), sa.ForeignKey("faculties.faculty_id"), nullable=False),
    sa.Column("enrollment_year", sa.Integer(), nullable=False),
    sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    sa.CheckConstraint(
        f"enrollment_year >= {ENROLLMENT_YEAR_MIN} AND enrollment_year <= {ENROLLMENT_YEAR_MAX}",
        name="ck_students_enrollment_year",
    ),
)

courses = sa.Table(
    "courses",
    metadata,
    sa.Column("course_id", sa.Integer(), primary_key=True),
    sa.Column("course_name", sa.String(100), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column("credits", sa.Integer(), nullable=False),
    sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    sa.CheckConstraint(f"credits BETWEEN {CREDITS_MIN} AND {CREDITS_MAX}", name="ck_courses_credits"),
)

grades = sa.Table(
    "grades",
    metadata,
    sa.Column("grade_id", sa.Integer(), primary_key=True),
    sa.Column("student_id", sa.Integer(), sa.ForeignKey("students.student_id"), nullable=False),
    sa.Column("course_id", sa.Integer(), sa.ForeignKey("courses.course_id"), nullable=False),
    sa.Column("grade", sa.Integer(), nullable=False),
    sa.Column("exam_date", sa.Date(), nullable=False),
    sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    sa.CheckConstraint(f"grade >= {GRADE_MIN} AND grade <= {GRADE_MAX}", name="ck_grades_grade"),
)

sa.Index("idx_students_faculty", students.c.faculty_id)
sa.Index("idx_grades_student", grades.c.student_id)
sa.Index("idx_grades_course", grades.c.course_id)
sa.Index("idx_grades_date", grades.c.exam_date)
sa.Index("idx_students_name", students.c.last_name, students.c.first_name)

# Child tables first: the order rows must be cleared in.
TABLES_CHILD_FIRST = (grades, students, courses, faculties)
