"""
University registry database package.

- SQLAlchemy Core schema and Alembic migrations
- Student email validation and the validated write path
- Sample data generator
- Analytical reports
"""
