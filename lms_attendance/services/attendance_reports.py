# lms_attendance/services/attendance_reports.py
from __future__ import annotations

import logging
from datetime import date as date_type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lms_attendance.models.student import Student
from lms_attendance.schemas.attendance import AttendanceSummary, WeeklyAttendance
from lms_attendance.schemas.report import MonthlyReportRun, StudentMonthlyReport
from lms_attendance.services.attendance_store import (
    fetch_attendance_records,
    resolve_student,
    to_identity,
)
from lms_attendance.services.attendance_summary import (
    AttendanceSummaryComputer,
    get_summary_computer,
    month_bounds,
    week_bounds,
)
from lms_attendance.services.email_notifier import send_attendance_summary_email

logger = logging.getLogger(__name__)


async def compute_student_summary(
    db: AsyncSession,
    student_ref: str,
    today: date_type,
    course_id: str | None = None,
    computer: AttendanceSummaryComputer | None = None,
) -> AttendanceSummary:
    """
    Compute the monthly summary of one student for `today`'s month.

    Raises LookupError if the student does not exist.
    """
    identity = await resolve_student(db, student_ref)
    start, end = month_bounds(today)
    records = await fetch_attendance_records(db, start, end, course_id=course_id)

    computer = computer or get_summary_computer()
    return computer.compute_monthly(identity.identifiers, records, today)


async def compute_student_weekly(
    db: AsyncSession,
    student_ref: str,
    today: date_type,
    course_id: str | None = None,
    computer: AttendanceSummaryComputer | None = None,
) -> WeeklyAttendance:
    """
    Compute the Monday-to-Sunday strip of one student for `today`'s week.

    Raises LookupError if the student does not exist.
    """
    identity = await resolve_student(db, student_ref)
    start, end = week_bounds(today)
    records = await fetch_attendance_records(db, start, end, course_id=course_id)

    computer = computer or get_summary_computer()
    return computer.compute_weekly(identity.identifiers, records, today)


async def run_monthly_attendance_report(
    db: AsyncSession,
    today: date_type,
    send_emails: bool = True,
) -> MonthlyReportRun:
    """
    Compute the monthly summary of every active student and optionally email it.

    Steps
    -----
    1) Fetch every attendance document of `today`'s month once.
    2) For each active student, project the documents onto that student.
    3) If `send_emails`, deliver each summary; delivery failures are
       reported per student and never abort the run.
    """
    stmt = select(Student).where(Student.is_active.is_(True)).order_by(Student.student_code)
    result = await db.execute(stmt)
    students = list(result.scalars().all())

    start, end = month_bounds(today)
    records = await fetch_attendance_records(db, start, end)
    computer = get_summary_computer()

    entries: list[StudentMonthlyReport] = []
    emails_sent = 0

    for student in students:
        identity = to_identity(student)
        summary = computer.compute_monthly(identity.identifiers, records, today)

        email_sent = False
        if send_emails:
            email_sent = await send_attendance_summary_email(identity, summary)
            if email_sent:
                emails_sent += 1

        entries.append(
            StudentMonthlyReport(
                student_id=identity.student_id,
                student_code=identity.student_code,
                student_name=identity.name,
                email_sent=email_sent,
                summary=summary,
            )
        )

    logger.info(
        "Monthly attendance report date=%s students=%d emails_sent=%d",
        today.isoformat(),
        len(students),
        emails_sent,
    )

    return MonthlyReportRun(
        report_date=today,
        students_evaluated=len(students),
        emails_sent=emails_sent,
        entries=entries,
    )
