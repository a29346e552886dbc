# tests/test_attendance_store.py
from datetime import date, datetime, timezone

import pytest

from lms_attendance.db.session import AsyncSessionLocal, init_db
from lms_attendance.models.attendance_date import AttendanceDate
from lms_attendance.models.student import Student
from lms_attendance.services import attendance_store as store_module
from lms_attendance.services.attendance_store import (
    fetch_attendance_records,
    resolve_student,
    to_record,
)


@pytest.mark.asyncio
async def test_resolve_student_by_id_or_code():
    """
    Both the primary id and the student code resolve to the same identity,
    whose identifiers cover both aliases.
    """
    await init_db()

    async with AsyncSessionLocal() as session:
        student = Student(student_code="STORE001", name="Asha Verma", email="asha@example.com")
        session.add(student)
        await session.commit()
        await session.refresh(student)

        by_code = await resolve_student(session, "STORE001")
        by_id = await resolve_student(session, student.id)

        assert by_code == by_id
        assert by_code.identifiers == frozenset({student.id, "STORE001"})
        assert by_code.email == "asha@example.com"


@pytest.mark.asyncio
async def test_resolve_student_unknown_raises_lookup_error():
    await init_db()

    async with AsyncSessionLocal() as session:
        with pytest.raises(LookupError):
            await resolve_student(session, "MISSING")


@pytest.mark.asyncio
async def test_fetch_attendance_records_filters_range_and_course():
    """
    Only documents within the inclusive range are returned, date-ascending;
    course_id=None returns every course.
    """
    await init_db()

    async with AsyncSessionLocal() as session:
        session.add_all(
            [
                AttendanceDate(course_id="sql-201", attendance_date=date(2025, 11, 3), present_students=["b"]),
                AttendanceDate(course_id="python-101", attendance_date=date(2025, 11, 3), present_students=["a"]),
                AttendanceDate(course_id="python-101", attendance_date=date(2025, 11, 1), present_students=["a", "b"]),
                AttendanceDate(course_id="python-101", attendance_date=date(2025, 10, 31), present_students=["a"]),
                AttendanceDate(course_id="python-101", attendance_date=date(2025, 12, 1), present_students=["a"]),
            ]
        )
        await session.commit()

        records = await fetch_attendance_records(session, date(2025, 11, 1), date(2025, 11, 30))
        assert [(r.date, r.course_id) for r in records] == [
            (date(2025, 11, 1), "python-101"),
            (date(2025, 11, 3), "python-101"),
            (date(2025, 11, 3), "sql-201"),
        ]
        assert records[0].present_students == frozenset({"a", "b"})

        python_only = await fetch_attendance_records(
            session, date(2025, 11, 1), date(2025, 11, 30), course_id="python-101"
        )
        assert len(python_only) == 2


@pytest.mark.asyncio
async def test_fetch_attendance_records_rejects_inverted_range():
    await init_db()

    async with AsyncSessionLocal() as session:
        with pytest.raises(ValueError):
            await fetch_attendance_records(session, date(2025, 11, 30), date(2025, 11, 1))


class DummySettingsKolkata:
    APP_TIMEZONE = "Asia/Kolkata"


def test_to_record_expresses_timestamps_in_business_timezone(monkeypatch):
    """
    An aware UTC timestamp (PostgreSQL) and the naive wall time SQLite
    returns both end up in APP_TIMEZONE, so the daily `time` does not
    depend on the backend.
    """
    monkeypatch.setattr(store_module, "get_settings", lambda: DummySettingsKolkata())

    from_postgres = to_record(
        AttendanceDate(
            course_id="",
            attendance_date=date(2025, 11, 3),
            present_students=["a"],
            last_updated=datetime(2025, 11, 3, 4, 0, tzinfo=timezone.utc),
        )
    )
    from_sqlite = to_record(
        AttendanceDate(
            course_id="",
            attendance_date=date(2025, 11, 3),
            present_students=["a"],
            last_updated=datetime(2025, 11, 3, 9, 30),
        )
    )

    assert from_postgres.last_updated.strftime("%H:%M") == "09:30"
    assert from_sqlite.last_updated.strftime("%H:%M") == "09:30"
    assert from_postgres.last_updated == from_sqlite.last_updated

    no_timestamp = to_record(
        AttendanceDate(course_id="", attendance_date=date(2025, 11, 3), present_students=[])
    )
    assert no_timestamp.last_updated is None
