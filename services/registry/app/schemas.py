from __future__ import annotations

from datetime import date
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from db.schema import (
    CREDITS_MAX,
    CREDITS_MIN,
    ENROLLMENT_YEAR_MAX,
    ENROLLMENT_YEAR_MIN,
    GRADE_MAX,
    GRADE_MIN,
)


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


Name50 = Annotated[str, Field(min_length=1, max_length=50)]
Name100 = Annotated[str, Field(min_length=1, max_length=100)]
EnrollmentYear = Annotated[int, Field(ge=ENROLLMENT_YEAR_MIN, le=ENROLLMENT_YEAR_MAX)]


class FacultyCreate(StrictModel):
    faculty_name: Name100
    dean_name: Name100


class CourseCreate(StrictModel):
    course_name: Name100
    description: str | None = None
    credits: Annotated[int, Field(ge=CREDITS_MIN, le=CREDITS_MAX)]


class StudentCreate(StrictModel):
    first_name: Name50
    last_name: Name50
    # Format is checked by the write path so the API and the generator share one rule.
    email: Annotated[str, Field(max_length=100)] | None = None
    faculty_id: int
    enrollment_year: EnrollmentYear


class StudentUpdate(StrictModel):
    first_name: Name50 | None = None
    last_name: Name50 | None = None
    email: Annotated[str, Field(max_length=100)] | None = None
    faculty_id: int | None = None
    enrollment_year: EnrollmentYear | None = None

    # Omitting a column leaves it unchanged; only email may be cleared with null.
    @field_validator("first_name", "last_name", "faculty_id", "enrollment_year")
    @classmethod
    def _not_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class GradeCreate(StrictModel):
    student_id: int
    course_id: int
    grade: Annotated[int, Field(ge=GRADE_MIN, le=GRADE_MAX)]
    exam_date: date


class Created(StrictModel):
    id: int


class FacultyAverage(StrictModel):
    faculty_name: str
    average_grade: float
    student_count: int


class TopStudent(StrictModel):
    first_name: str
    last_name: str
    faculty_name: str
    average_grade: float
    exams_count: int


class CoursePopularity(StrictModel):
    course_name: str
    grades_count: int
    average_grade: float | None = None


class ExcellentGrade(StrictModel):
    first_name: str
    last_name: str
    course_name: str
    grade: int


class FacultyAveragesResponse(StrictModel):
    rows: list[FacultyAverage]


class TopStudentsResponse(StrictModel):
    rows: list[TopStudent]


class CoursePopularityResponse(StrictModel):
    rows: list[CoursePopularity]


class ExcellentGradesResponse(StrictModel):
    rows: list[ExcellentGrade]


class AdminSeedRequest(StrictModel):
    seed: int | None = None


class AdminSeedResponse(StrictModel):
    ok: bool
    counts: dict[str, int]
