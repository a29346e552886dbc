# tests/test_monthly_report_service.py
from datetime import date

import pytest

from lms_attendance.db.session import AsyncSessionLocal, init_db
from lms_attendance.models.attendance_date import AttendanceDate
from lms_attendance.models.student import Student
from lms_attendance.services import attendance_reports as reports_module
from lms_attendance.services.attendance_reports import (
    compute_student_summary,
    compute_student_weekly,
    run_monthly_attendance_report,
)

TODAY = date(2025, 11, 4)  # working days so far: Nov 1, 3, 4


async def _seed(session) -> tuple[Student, Student]:
    asha = Student(student_code="RPT001", name="Asha Verma", email="asha@example.com")
    ravi = Student(student_code="RPT002", name="Ravi Kumar")
    retired = Student(student_code="RPT003", name="Former Student", is_active=False)
    session.add_all([asha, ravi, retired])
    await session.commit()
    for student in (asha, ravi):
        await session.refresh(student)

    session.add_all(
        [
            # Legacy document recorded by code, newer ones by primary id.
            AttendanceDate(course_id="", attendance_date=date(2025, 11, 1), present_students=["RPT001"]),
            AttendanceDate(course_id="", attendance_date=date(2025, 11, 3), present_students=[asha.id, ravi.id]),
            AttendanceDate(course_id="sql-201", attendance_date=date(2025, 11, 4), present_students=[ravi.id]),
        ]
    )
    await session.commit()
    return asha, ravi


@pytest.mark.asyncio
async def test_compute_student_summary_matches_all_aliases():
    await init_db()

    async with AsyncSessionLocal() as session:
        asha, ravi = await _seed(session)

        summary = await compute_student_summary(session, "RPT001", TODAY)
        assert summary.total_days == 3
        assert summary.present_days == 2
        assert summary.percentage == 67

        ravi_all = await compute_student_summary(session, ravi.id, TODAY)
        assert ravi_all.present_days == 2

        ravi_general = await compute_student_summary(session, ravi.id, TODAY, course_id="")
        assert ravi_general.present_days == 1


@pytest.mark.asyncio
async def test_compute_student_weekly_for_unknown_student_raises():
    await init_db()

    async with AsyncSessionLocal() as session:
        with pytest.raises(LookupError):
            await compute_student_weekly(session, "NOBODY", TODAY)


@pytest.mark.asyncio
async def test_run_monthly_report_without_emails():
    """
    Only active students are evaluated, ordered by code, and nothing is sent.
    """
    await init_db()

    async with AsyncSessionLocal() as session:
        await _seed(session)

        run = await run_monthly_attendance_report(session, TODAY, send_emails=False)

    assert run.report_date == TODAY
    assert run.students_evaluated == 2
    assert run.emails_sent == 0
    assert [e.student_code for e in run.entries] == ["RPT001", "RPT002"]
    assert all(e.email_sent is False for e in run.entries)
    assert run.entries[0].summary.present_days == 2


@pytest.mark.asyncio
async def test_run_monthly_report_counts_delivered_emails(monkeypatch):
    """
    Each student's summary is handed to the notifier; only accepted
    deliveries are counted.
    """
    await init_db()

    delivered = []

    async def _fake_send(student, summary, subject=None):
        delivered.append((student.student_code, summary.present_days))
        return student.email is not None

    monkeypatch.setattr(reports_module, "send_attendance_summary_email", _fake_send)

    async with AsyncSessionLocal() as session:
        await _seed(session)

        run = await run_monthly_attendance_report(session, TODAY)

    assert delivered == [("RPT001", 2), ("RPT002", 2)]
    assert run.emails_sent == 1
    assert [e.email_sent for e in run.entries] == [True, False]
