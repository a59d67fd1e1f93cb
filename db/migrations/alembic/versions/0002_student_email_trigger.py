"""student email trigger

Revision ID: 0002_student_email_trigger
Revises: 0001_init_schema
Create Date: 2026-10-17
"""

from __future__ import annotations

from alembic import op


revision = "0002_student_email_trigger"
down_revision = "0001_init_schema"
branch_labels = None
depends_on = None


# Mirrors db.validation.EMAIL_PATTERN for writers that bypass the application.
CREATE_FUNCTION = r"""
CREATE OR REPLACE FUNCTION validate_student_email()
RETURNS TRIGGER AS $$
BEGIN
    IF NEW.email IS NOT NULL AND NEW.email !~ '^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$' THEN
        RAISE EXCEPTION 'Invalid email format';
    END IF;
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;
"""

CREATE_TRIGGER = """
CREATE TRIGGER trigger_validate_email
    BEFORE INSERT OR UPDATE ON students
    FOR EACH ROW EXECUTE FUNCTION validate_student_email();
"""


def upgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    op.execute(CREATE_FUNCTION)
    op.execute(CREATE_TRIGGER)


def downgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    op.execute("DROP TRIGGER IF EXISTS trigger_validate_email ON students")
    op.execute("DROP FUNCTION IF EXISTS validate_student_email()")
