# lms_attendance/api/routes/students.py
from datetime import date as date_type
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lms_attendance.api.dependencies.clock import get_today
from lms_attendance.db.session import get_db
from lms_attendance.models.student import Student
from lms_attendance.schemas.attendance import AttendanceSummary, WeeklyAttendance
from lms_attendance.schemas.student import StudentCreate, StudentRead, StudentUpdate
from lms_attendance.services.attendance_export import build_attendance_csv, export_filename
from lms_attendance.services.attendance_reports import (
    compute_student_summary,
    compute_student_weekly,
)
from lms_attendance.services.attendance_store import get_student

router = APIRouter(prefix="/students", tags=["Students"])


def _student_ref():
    return Path(
        ...,
        description="Primary id or student code of the student.",
        examples=["CI2025001"],
    )


def _course_filter():
    return Query(
        default=None,
        description="Restrict to one course. If omitted, attendance of every course counts.",
        examples=["python-101"],
    )


async def _student_or_404(db: AsyncSession, student_ref: str) -> Student:
    student = await get_student(db, student_ref)
    if student is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Student '{student_ref}' not found.",
        )
    return student


async def _ensure_code_free(db: AsyncSession, student_code: str) -> None:
    existing = await db.execute(select(Student).where(Student.student_code == student_code))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail=f"Student with code '{student_code}' already exists.",
        )


@router.post(
    "",
    response_model=StudentRead,
    status_code=HTTPStatus.CREATED,
    summary="Register a student",
    description=(
        "Create a student record. A primary id is generated; the `student_code` "
        "must be unique and is what the student's QR badge encodes."
    ),
    responses={
        400: {"description": "A student with the same student_code already exists."},
    },
)
async def create_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
) -> StudentRead:
    await _ensure_code_free(db, payload.student_code)

    student = Student(
        student_code=payload.student_code,
        name=payload.name,
        email=payload.email,
        is_active=payload.is_active,
    )
    db.add(student)
    await db.commit()
    await db.refresh(student)

    return StudentRead.model_validate(student)


@router.get(
    "",
    response_model=list[StudentRead],
    summary="List students",
)
async def list_students(
    only_active: bool | None = Query(
        default=None,
        description=(
            "If true, only active students; if false, only inactive ones. "
            "If omitted, all students."
        ),
    ),
    db: AsyncSession = Depends(get_db),
) -> list[StudentRead]:
    stmt = select(Student)
    if only_active is True:
        stmt = stmt.where(Student.is_active.is_(True))
    elif only_active is False:
        stmt = stmt.where(Student.is_active.is_(False))

    result = await db.execute(stmt.order_by(Student.student_code.asc()))
    return [StudentRead.model_validate(s) for s in result.scalars().all()]


@router.get(
    "/{student_ref}",
    response_model=StudentRead,
    summary="Get a student by id or code",
    responses={404: {"description": "No student has this id or code."}},
)
async def get_student_detail(
    student_ref: str = _student_ref(),
    db: AsyncSession = Depends(get_db),
) -> StudentRead:
    student = await _student_or_404(db, student_ref)
    return StudentRead.model_validate(student)


@router.patch(
    "/{student_ref}",
    response_model=StudentRead,
    summary="Partially update a student",
    responses={
        400: {"description": "Attempted to change `student_code` to a value already in use."},
        404: {"description": "No student has this id or code."},
    },
)
async def update_student(
    student_ref: str = _student_ref(),
    payload: StudentUpdate | None = None,
    db: AsyncSession = Depends(get_db),
) -> StudentRead:
    student = await _student_or_404(db, student_ref)

    if payload is None:
        return StudentRead.model_validate(student)

    update_data = payload.model_dump(exclude_unset=True)

    new_code = update_data.get("student_code")
    if new_code and new_code != student.student_code:
        await _ensure_code_free(db, new_code)

    for field, value in update_data.items():
        setattr(student, field, value)

    await db.commit()
    await db.refresh(student)

    return StudentRead.model_validate(student)


@router.get(
    "/{student_ref}/attendance/summary",
    response_model=AttendanceSummary,
    summary="Monthly attendance summary",
    description=(
        "Attendance of the student for the current month, up to and including "
        "today. Non-working weekdays and future dates are excluded from every "
        "count. When no attendance has been recorded in the month at all, an "
        "all-zero summary with no daily records is returned."
    ),
    responses={404: {"description": "No student has this id or code."}},
)
async def get_attendance_summary(
    student_ref: str = _student_ref(),
    course_id: str | None = _course_filter(),
    today: date_type = Depends(get_today),
    db: AsyncSession = Depends(get_db),
) -> AttendanceSummary:
    try:
        return await compute_student_summary(db, student_ref, today, course_id=course_id)
    except LookupError:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Student '{student_ref}' not found.",
        )


@router.get(
    "/{student_ref}/attendance/weekly",
    response_model=WeeklyAttendance,
    summary="Weekly attendance strip",
    description=(
        "Monday-to-Sunday view of the current week. Non-working weekdays are "
        "reported as `holiday`, days after today as `upcoming`."
    ),
    responses={404: {"description": "No student has this id or code."}},
)
async def get_weekly_attendance(
    student_ref: str = _student_ref(),
    course_id: str | None = _course_filter(),
    today: date_type = Depends(get_today),
    db: AsyncSession = Depends(get_db),
) -> WeeklyAttendance:
    try:
        return await compute_student_weekly(db, student_ref, today, course_id=course_id)
    except LookupError:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Student '{student_ref}' not found.",
        )


@router.get(
    "/{student_ref}/attendance/export",
    summary="Download the monthly attendance as CSV",
    response_class=Response,
    responses={
        200: {"content": {"text/csv": {}}},
        404: {"description": "No student has this id or code."},
    },
)
async def export_attendance(
    student_ref: str = _student_ref(),
    course_id: str | None = _course_filter(),
    today: date_type = Depends(get_today),
    db: AsyncSession = Depends(get_db),
) -> Response:
    student = await _student_or_404(db, student_ref)
    summary = await compute_student_summary(db, student.id, today, course_id=course_id)

    filename = export_filename(student.student_code, today)
    return Response(
        content=build_attendance_csv(summary),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
