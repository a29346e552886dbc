# lms_attendance/services/attendance_marking.py
from __future__ import annotations

import logging
import re
from datetime import date as date_type, datetime, timezone
from typing import Dict, List, Tuple

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lms_attendance.models.attendance_date import AttendanceDate
from lms_attendance.models.student import Student
from lms_attendance.schemas.marking import (
    MarkAttendanceRequest,
    MarkAttendanceResult,
    ScanResult,
)
from lms_attendance.services.attendance_store import resolve_student, to_business_time

logger = logging.getLogger(__name__)

_QR_PATTERN = re.compile(r"^([A-Za-z0-9]+)(?:-(\d{4}-\d{2}-\d{2}))?$")


def parse_qr_payload(payload: str, today: date_type) -> Tuple[str, date_type]:
    """
    Parse a scanned QR payload into (student_code, date).

    Accepted formats are `<code>` and `<code>-YYYY-MM-DD`; without an explicit
    date the scan counts for `today`.

    Raises
    ------
    ValueError
        If the payload does not match either format or names an impossible date.
    """
    match = _QR_PATTERN.match((payload or "").strip())
    if not match:
        raise ValueError(
            "Invalid QR code format: expected <student_code> or <student_code>-YYYY-MM-DD"
        )

    code, raw_date = match.groups()
    if raw_date is None:
        return code, today

    try:
        return code, date_type.fromisoformat(raw_date)
    except ValueError:
        raise ValueError(f"Invalid date in QR code: {raw_date}") from None


async def _canonical_ids(db: AsyncSession, refs: List[str]) -> List[str]:
    """
    Map every primary id or student code in `refs` to the primary id,
    de-duplicated, preserving first-seen order.
    """
    if not refs:
        return []

    stmt = select(Student).where(
        or_(Student.id.in_(refs), Student.student_code.in_(refs))
    )
    result = await db.execute(stmt)

    alias_map: Dict[str, str] = {}
    for student in result.scalars().all():
        alias_map[student.id] = student.id
        alias_map[student.student_code] = student.id

    unknown = sorted({ref for ref in refs if ref not in alias_map})
    if unknown:
        raise ValueError(f"Unknown student identifiers: {', '.join(unknown)}")

    canonical: List[str] = []
    for ref in refs:
        student_id = alias_map[ref]
        if student_id not in canonical:
            canonical.append(student_id)
    return canonical


async def _get_or_create_date_row(
    db: AsyncSession,
    course_id: str,
    attendance_date: date_type,
) -> Tuple[AttendanceDate, bool]:
    stmt = select(AttendanceDate).where(
        AttendanceDate.course_id == course_id,
        AttendanceDate.attendance_date == attendance_date,
    )
    result = await db.execute(stmt)
    row = result.scalar_one_or_none()
    if row is not None:
        return row, False

    row = AttendanceDate(
        course_id=course_id,
        attendance_date=attendance_date,
        present_students=[],
    )
    db.add(row)
    try:
        await db.flush()
    except IntegrityError:
        # A concurrent writer inserted the same (course, date) first.
        await db.rollback()
        logger.info(
            "Attendance document created concurrently course=%r date=%s, reusing it",
            course_id,
            attendance_date.isoformat(),
        )
        result = await db.execute(stmt)
        return result.scalar_one(), False
    return row, True


async def mark_attendance(
    db: AsyncSession,
    request: MarkAttendanceRequest,
    now: datetime | None = None,
) -> MarkAttendanceResult:
    """
    Store the full list of present students for one course and date.

    Idempotent: a second call for the same (course_id, date) updates the
    existing document in place instead of creating a duplicate. Every
    identifier is stored as the student's canonical primary id.

    Raises
    ------
    ValueError
        If any identifier does not belong to a registered student.
    """
    now = to_business_time(now or datetime.now(tz=timezone.utc))
    present_ids = await _canonical_ids(db, [ref.strip() for ref in request.present_students])

    row, created = await _get_or_create_date_row(db, request.course_id, request.date)

    # Assign a new list so the JSON column change is tracked.
    row.present_students = list(present_ids)
    row.hours_spent = request.hours_spent
    row.updated_by = request.marked_by
    row.last_updated = now

    await db.commit()

    logger.info(
        "Marked attendance course=%r date=%s present=%d created=%s by=%s",
        request.course_id,
        request.date.isoformat(),
        len(present_ids),
        created,
        request.marked_by,
    )

    return MarkAttendanceResult(
        course_id=request.course_id,
        date=request.date,
        present_count=len(present_ids),
        present_students=present_ids,
        created=created,
    )


async def record_scan(
    db: AsyncSession,
    payload: str,
    today: date_type,
    now: datetime | None = None,
    course_id: str = "",
    scanned_by: str = "scanner",
) -> ScanResult:
    """
    Mark a single student present from a scanned QR payload.

    The student is added to the date document, leaving everybody already
    recorded in place. Scanning a student twice for the same date writes
    nothing the second time.

    Raises
    ------
    ValueError
        Malformed payload.
    LookupError
        No student with the scanned code.
    """
    code, attendance_date = parse_qr_payload(payload, today)
    identity = await resolve_student(db, code)

    row, _ = await _get_or_create_date_row(db, course_id, attendance_date)
    recorded = set(row.present_students or [])

    if not identity.identifiers.isdisjoint(recorded):
        logger.info(
            "Attendance already marked student=%s date=%s",
            identity.student_code,
            attendance_date.isoformat(),
        )
        return ScanResult(
            student_id=identity.student_id,
            student_code=identity.student_code,
            student_name=identity.name,
            date=attendance_date,
            already_marked=True,
            message=f"Attendance already marked for {identity.name} on {attendance_date.isoformat()}.",
        )

    row.present_students = list(row.present_students or []) + [identity.student_id]
    row.updated_by = scanned_by
    row.last_updated = to_business_time(now or datetime.now(tz=timezone.utc))
    await db.commit()

    logger.info(
        "Scanned attendance student=%s date=%s course=%r",
        identity.student_code,
        attendance_date.isoformat(),
        course_id,
    )

    return ScanResult(
        student_id=identity.student_id,
        student_code=identity.student_code,
        student_name=identity.name,
        date=attendance_date,
        already_marked=False,
        message=f"Attendance marked for {identity.name} on {attendance_date.isoformat()}.",
    )
