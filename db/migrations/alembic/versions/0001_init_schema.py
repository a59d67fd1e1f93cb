"""init schema

Revision ID: 0001_init_schema
Revises: None
Create Date: 2026-10-17
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001_init_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "faculties",
        sa.Column("faculty_id", sa.Integer(), primary_key=True),
        sa.Column("faculty_name", sa.String(100), nullable=False),
        sa.Column("dean_name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint("faculty_name", name="uq_faculties_faculty_name"),
    )

    op.create_table(
        "students",
        sa.Column("student_id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(100), nullable=True),
        sa.Column("faculty_id", sa.Integer(), sa.ForeignKey("faculties.faculty_id"), nullable=False),
        sa.Column("enrollment_year", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint("email", name="uq_students_email"),
        sa.CheckConstraint(
            "enrollment_year >= 2000 AND enrollment_year <= 2024", name="ck_students_enrollment_year"
        ),
    )

    op.create_table(
        "courses",
        sa.Column("course_id", sa.Integer(), primary_key=True),
        sa.Column("course_name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("credits", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.CheckConstraint("credits BETWEEN 1 AND 10", name="ck_courses_credits"),
    )

    op.create_table(
        "grades",
        sa.Column("grade_id", sa.Integer(), primary_key=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("students.student_id"), nullable=False),
        sa.Column("course_id", sa.Integer(), sa.ForeignKey("courses.course_id"), nullable=False),
        sa.Column("grade", sa.Integer(), nullable=False),
        sa.Column("exam_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.CheckConstraint("grade >= 1 AND grade <= 5", name="ck_grades_grade"),
    )

    op.create_index("idx_students_faculty", "students", ["faculty_id"])
    op.create_index("idx_grades_student", "grades", ["student_id"])
    op.create_index("idx_grades_course", "grades", ["course_id"])
    op.create_index("idx_grades_date", "grades", ["exam_date"])
    op.create_index("idx_students_name", "students", ["last_name", "first_name"])


def downgrade() -> None:
    op.drop_index("idx_students_name", table_name="students")
    op.drop_index("idx_grades_date", table_name="grades")
    op.drop_index("idx_grades_course", table_name="grades")
    op.drop_index("idx_grades_student", table_name="grades")
    op.drop_index("idx_students_faculty", table_name="students")

    op.drop_table("grades")
    op.drop_table("courses")
    op.drop_table("students")
    op.drop_table("faculties")
