# lms_attendance/api/routes/attendance.py
from datetime import date as date_type, datetime
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lms_attendance.api.dependencies.clock import get_now
from lms_attendance.db.session import get_db
from lms_attendance.schemas.attendance import AttendanceDateRead
from lms_attendance.schemas.marking import (
    MarkAttendanceRequest,
    MarkAttendanceResult,
    ScanRequest,
    ScanResult,
)
from lms_attendance.services.attendance_marking import mark_attendance, record_scan
from lms_attendance.services.attendance_store import fetch_attendance_rows
from lms_attendance.services.attendance_summary import month_bounds

router = APIRouter(prefix="/attendance", tags=["Attendance"])


@router.post(
    "/mark",
    response_model=MarkAttendanceResult,
    status_code=HTTPStatus.OK,
    summary="Mark attendance for a course and date",
    description=(
        "Stores the complete list of present students for `(course_id, date)`. "
        "Calling it again for the same pair replaces the list instead of creating "
        "a second document. Students may be referenced by primary id or student "
        "code; both are stored as the primary id."
    ),
    responses={
        400: {"description": "At least one identifier does not belong to a registered student."},
    },
)
async def mark(
    payload: MarkAttendanceRequest,
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_db),
) -> MarkAttendanceResult:
    try:
        return await mark_attendance(db, payload, now=now)
    except ValueError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))


@router.post(
    "/scan",
    response_model=ScanResult,
    status_code=HTTPStatus.OK,
    summary="Mark one student present from a QR scan",
    description=(
        "Accepts the raw QR payload (`<student_code>` or `<student_code>-YYYY-MM-DD`). "
        "Without a date part the scan counts for today. Scanning the same student "
        "twice for one date is reported with `already_marked=true`."
    ),
    responses={
        400: {"description": "The payload is not a valid attendance QR code."},
        404: {"description": "No student has the scanned code."},
    },
)
async def scan(
    payload: ScanRequest,
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_db),
) -> ScanResult:
    try:
        return await record_scan(
            db,
            payload.payload,
            today=now.date(),
            now=now,
            course_id=payload.course_id,
            scanned_by=payload.scanned_by,
        )
    except ValueError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))


@router.get(
    "/dates",
    response_model=list[AttendanceDateRead],
    summary="List attendance documents in a date range",
    description=(
        "Returns the raw per-date attendance documents ordered by date. When "
        "`from_date` or `to_date` is omitted the corresponding bound of the current "
        "month is used."
    ),
    responses={400: {"description": "`to_date` is before `from_date`."}},
)
async def list_attendance_dates(
    course_id: str | None = Query(
        default=None,
        description="Restrict to one course. If omitted, documents of every course are returned.",
        examples=["python-101"],
    ),
    from_date: date_type | None = Query(
        default=None,
        description="Inclusive start date.",
        examples=["2025-11-01"],
    ),
    to_date: date_type | None = Query(
        default=None,
        description="Inclusive end date.",
        examples=["2025-11-30"],
    ),
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_db),
) -> list[AttendanceDateRead]:
    month_start, month_end = month_bounds(now.date())
    start = from_date or month_start
    end = to_date or month_end

    try:
        rows = await fetch_attendance_rows(db, start, end, course_id=course_id)
    except ValueError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))

    return [AttendanceDateRead.model_validate(row) for row in rows]
