# lms_attendance/services/attendance_store.py
from __future__ import annotations

from datetime import date as date_type, datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from lms_attendance.core.config import get_settings
from lms_attendance.models.attendance_date import AttendanceDate
from lms_attendance.models.student import Student
from lms_attendance.schemas.attendance import AttendanceDateRecord
from lms_attendance.schemas.student import StudentIdentity


async def get_student(db: AsyncSession, student_ref: str) -> Optional[Student]:
    """
    Look up a student by primary id or by student code.
    """
    stmt = select(Student).where(
        or_(Student.id == student_ref, Student.student_code == student_ref)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


def to_identity(student: Student) -> StudentIdentity:
    return StudentIdentity(
        student_id=student.id,
        student_code=student.student_code,
        name=student.name,
        email=student.email,
    )


async def resolve_student(db: AsyncSession, student_ref: str) -> StudentIdentity:
    """
    Resolve any known alias of a student to their canonical identity.

    Raises
    ------
    LookupError
        If no student has `student_ref` as primary id or student code.
    """
    student = await get_student(db, student_ref)
    if student is None:
        raise LookupError(f"Student '{student_ref}' not found")
    return to_identity(student)


def to_business_time(value: datetime | None) -> datetime | None:
    """
    Express a stored timestamp in APP_TIMEZONE.

    Backends differ: SQLite hands back the naive wall time it was given
    (written in APP_TIMEZONE), PostgreSQL an aware value in UTC.
    """
    if value is None:
        return None
    tz = ZoneInfo(get_settings().APP_TIMEZONE)
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def to_record(row: AttendanceDate) -> AttendanceDateRecord:
    return AttendanceDateRecord(
        date=row.attendance_date,
        present_students=frozenset(row.present_students or []),
        last_updated=to_business_time(row.last_updated),
        course_id=row.course_id,
        hours_spent=row.hours_spent,
    )


async def fetch_attendance_rows(
    db: AsyncSession,
    start_date: date_type,
    end_date: date_type,
    course_id: str | None = None,
) -> List[AttendanceDate]:
    """
    Fetch stored attendance documents in [start_date, end_date], date-ascending.

    `course_id=None` returns documents of every course.
    """
    if end_date < start_date:
        raise ValueError("end_date must be greater than or equal to start_date")

    conditions = [
        AttendanceDate.attendance_date >= start_date,
        AttendanceDate.attendance_date <= end_date,
    ]
    if course_id is not None:
        conditions.append(AttendanceDate.course_id == course_id)

    stmt = (
        select(AttendanceDate)
        .where(and_(*conditions))
        .order_by(AttendanceDate.attendance_date.asc(), AttendanceDate.course_id.asc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def fetch_attendance_records(
    db: AsyncSession,
    start_date: date_type,
    end_date: date_type,
    course_id: str | None = None,
) -> List[AttendanceDateRecord]:
    """
    Same as `fetch_attendance_rows`, normalized into AttendanceDateRecord snapshots.
    """
    rows = await fetch_attendance_rows(db, start_date, end_date, course_id=course_id)
    return [to_record(row) for row in rows]
