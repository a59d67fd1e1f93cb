from __future__ import annotations

import random
from collections.abc import Callable
from typing import Any

import sqlalchemy as sa
from fastapi import FastAPI, Header, HTTPException, Query
from sqlalchemy.exc import IntegrityError

from db import reports, writes
from db.engine import create_engine as create_sync_engine
from db.engine import sync_database_url
from db.logging import configure_logging, logger, operation
from db.seed import seed as seed_db
from db.validation import InvalidEmailError
from db.writes import NotFoundError
from services.registry.app import observability
from services.registry.app.db import ENGINE
from services.registry.app.schemas import (
    AdminSeedRequest,
    AdminSeedResponse,
    CourseCreate,
    CoursePopularityResponse,
    Created,
    ExcellentGradesResponse,
    FacultyAveragesResponse,
    FacultyCreate,
    GradeCreate,
    StudentCreate,
    StudentUpdate,
    TopStudentsResponse,
)
from services.registry.app.settings import SETTINGS


app = FastAPI(title="University Registry API", version="0.1.0")
configure_logging(SETTINGS.log_level, "registry")
observability.add_metrics_middleware(app, service_name="registry")
if SETTINGS.tracing_enabled:
    observability.setup_tracing(app, ENGINE, service_name="registry")


def _reject(reason: str, status_code: int, detail: str, **kw: Any) -> HTTPException:
    observability.WRITE_REJECTED_TOTAL.labels(reason).inc()
    logger.info("write.rejected", reason=reason, status_code=status_code, **kw)
    return HTTPException(status_code=status_code, detail=detail)


async def _write(op: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """
    Run a sync write-path function in its own transaction and map storage errors to HTTP.

    Constraint violations mean bad input, so they are reported and never retried.
    """
    try:
        with operation(op):
            async with ENGINE.begin() as conn:
                return await conn.run_sync(fn, *args, **kwargs)
    except InvalidEmailError as e:
        raise _reject("invalid_email", 422, str(e), op=op)
    except IntegrityError as e:
        raise _reject("constraint_violation", 409, "constraint violation", op=op, error=str(e.orig))
    except NotFoundError as e:
        raise _reject("not_found", 404, str(e), op=op)


async def _read(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    async with ENGINE.connect() as conn:
        return await conn.run_sync(fn, *args, **kwargs)


def _require_admin(x_admin_token: str | None) -> None:
    if not x_admin_token or x_admin_token != SETTINGS.admin_token:
        raise HTTPException(status_code=403, detail="forbidden")


@app.get("/healthz")
async def healthz() -> dict:
    async with ENGINE.connect() as conn:
        await conn.execute(sa.text("SELECT 1"))
    return {"ok": True}


@app.post("/faculties", response_model=Created, status_code=201)
async def create_faculty(req: FacultyCreate) -> Created:
    faculty_id = await _write("create_faculty", writes.insert_faculty, req.faculty_name, req.dean_name)
    return Created(id=faculty_id)


@app.delete("/faculties/{faculty_id}", status_code=204)
async def delete_faculty(faculty_id: int) -> None:
    await _write("delete_faculty", writes.delete_faculty, faculty_id)


@app.post("/courses", response_model=Created, status_code=201)
async def create_course(req: CourseCreate) -> Created:
    course_id = await _write(
        "create_course", writes.insert_course, req.course_name, req.credits, description=req.description
    )
    return Created(id=course_id)


@app.post("/students", response_model=Created, status_code=201)
async def create_student(req: StudentCreate) -> Created:
    student_id = await _write(
        "create_student",
        writes.insert_student,
        req.first_name,
        req.last_name,
        req.faculty_id,
        req.enrollment_year,
        email=req.email,
    )
    return Created(id=student_id)


@app.patch("/students/{student_id}", status_code=204)
async def update_student(student_id: int, req: StudentUpdate) -> None:
    # Only fields the client sent; an explicit null email clears it.
    changes = req.model_dump(exclude_unset=True)
    await _write("update_student", writes.update_student, student_id, **changes)


@app.post("/grades", response_model=Created, status_code=201)
async def create_grade(req: GradeCreate) -> Created:
    grade_id = await _write(
        "create_grade", writes.insert_grade, req.student_id, req.course_id, req.grade, req.exam_date
    )
    return Created(id=grade_id)


@app.get("/reports/faculty-averages", response_model=FacultyAveragesResponse)
async def report_faculty_averages() -> FacultyAveragesResponse:
    return FacultyAveragesResponse(rows=await _read(reports.faculty_averages))


@app.get("/reports/top-students", response_model=TopStudentsResponse)
async def report_top_students(
    threshold: float = Query(default=reports.TOP_STUDENT_THRESHOLD, ge=1, le=5),
) -> TopStudentsResponse:
    return TopStudentsResponse(rows=await _read(reports.top_students, threshold))


@app.get("/reports/course-popularity", response_model=CoursePopularityResponse)
async def report_course_popularity() -> CoursePopularityResponse:
    return CoursePopularityResponse(rows=await _read(reports.course_popularity))


@app.get("/reports/excellent-grades", response_model=ExcellentGradesResponse)
async def report_excellent_grades(limit: int = Query(default=100, ge=1)) -> ExcellentGradesResponse:
    limit = min(limit, SETTINGS.max_report_rows)
    return ExcellentGradesResponse(rows=await _read(reports.excellent_grades, limit))


@app.post("/admin/seed", response_model=AdminSeedResponse)
async def admin_seed(
    req: AdminSeedRequest,
    x_admin_token: str | None = Header(default=None),
) -> AdminSeedResponse:
    _require_admin(x_admin_token)
    if not SETTINGS.allow_seed:
        raise HTTPException(status_code=403, detail="seeding disabled")
    # Use sync generator; run inside request (dev only).
    engine = create_sync_engine(sync_database_url(SETTINGS.database_url))
    try:
        counts = seed_db(engine, random.Random(req.seed))
    finally:
        engine.dispose()
    observability.SEED_RUNS_TOTAL.inc()
    return AdminSeedResponse(ok=True, counts=counts)
