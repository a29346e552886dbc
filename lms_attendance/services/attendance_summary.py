# lms_attendance/services/attendance_summary.py
from __future__ import annotations

import calendar
import math
from collections.abc import Collection, Iterable, Sequence
from datetime import date as date_type, datetime, timedelta
from typing import Dict

from lms_attendance.core.config import get_settings
from lms_attendance.schemas.attendance import (
    AttendanceDateRecord,
    AttendanceSummary,
    DailyAttendanceRecord,
    DailyAttendanceStatus,
    WeeklyAttendance,
)

DEFAULT_HOURS_PER_PRESENT_DAY = 7.0
DEFAULT_NON_WORKING_WEEKDAYS = frozenset({calendar.SUNDAY})

_WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def month_bounds(today: date_type) -> tuple[date_type, date_type]:
    """
    Return the first and last calendar date of `today`'s month.
    """
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def week_bounds(today: date_type) -> tuple[date_type, date_type]:
    """
    Return the Monday and Sunday of the week containing `today`.
    """
    start = today - timedelta(days=today.weekday())
    return start, start + timedelta(days=6)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class _DayMatch:
    __slots__ = ("last_updated", "hours_spent")

    def __init__(self) -> None:
        self.last_updated: datetime | None = None
        self.hours_spent: float | None = None


class AttendanceSummaryComputer:
    """
    Projects date-keyed attendance documents onto one student's attendance.

    The computer is a pure function of its inputs: it performs no I/O, keeps no
    state between calls, and never reads the clock. "Today" is always passed in.

    Rules
    -----
    1) Only working days up to and including today count. Non-working weekdays
       (Sunday by default) are neither present nor absent.
    2) A day is PRESENT if any of the student's identifiers appears in the
       `present_students` of any document for that date; otherwise ABSENT.
       Several documents for the same date are unioned, so a day is counted once.
    3) A present day is credited `hours_per_present_day`, unless the document
       carries its own `hours_spent` override.
    """

    def __init__(
        self,
        hours_per_present_day: float = DEFAULT_HOURS_PER_PRESENT_DAY,
        non_working_weekdays: Collection[int] = DEFAULT_NON_WORKING_WEEKDAYS,
    ) -> None:
        if hours_per_present_day < 0:
            raise ValueError("hours_per_present_day must not be negative")
        self.hours_per_present_day = float(hours_per_present_day)
        self.non_working_weekdays = frozenset(non_working_weekdays)

    def is_working_day(self, day: date_type) -> bool:
        return day.weekday() not in self.non_working_weekdays

    def _match_days(
        self,
        identifiers: frozenset[str],
        date_records: Iterable[AttendanceDateRecord],
    ) -> Dict[date_type, _DayMatch]:
        """
        Collect the dates on which the student appears in any document.
        """
        matches: Dict[date_type, _DayMatch] = {}
        for record in date_records:
            if identifiers.isdisjoint(record.present_students):
                continue

            match = matches.setdefault(record.date, _DayMatch())
            if record.last_updated is not None and (
                match.last_updated is None or record.last_updated > match.last_updated
            ):
                match.last_updated = record.last_updated
            if record.hours_spent is not None:
                match.hours_spent = max(match.hours_spent or 0.0, record.hours_spent)
        return matches

    def _build_record(
        self,
        day: date_type,
        match: _DayMatch | None,
    ) -> DailyAttendanceRecord:
        if match is None:
            return DailyAttendanceRecord(
                date=day.isoformat(),
                status=DailyAttendanceStatus.ABSENT,
                time=None,
                hours_spent=0.0,
            )

        hours = match.hours_spent if match.hours_spent is not None else self.hours_per_present_day
        return DailyAttendanceRecord(
            date=day.isoformat(),
            status=DailyAttendanceStatus.PRESENT,
            time=match.last_updated.strftime("%H:%M") if match.last_updated else None,
            hours_spent=hours,
        )

    def compute_monthly(
        self,
        student_identifiers: Iterable[str],
        date_records: Sequence[AttendanceDateRecord],
        today: date_type,
    ) -> AttendanceSummary:
        """
        Compute the summary for `today`'s month.

        Parameters
        ----------
        student_identifiers:
            Every identifier the student may have been recorded under
            (primary id and/or student code).
        date_records:
            Attendance documents; documents outside the month, after today, or
            on non-working days are ignored.
        today:
            Current business date. Bounds the month and excludes future days.

        Returns
        -------
        AttendanceSummary
            All-zero summary with no daily records when `date_records` is empty.
        """
        current_month = today.strftime("%B %Y")

        if not date_records:
            return AttendanceSummary(
                current_month=current_month,
                total_days=0,
                present_days=0,
                absent_days=0,
                percentage=0,
                total_hours=0.0,
                average_hours_per_day=0.0,
                daily_records=[],
            )

        identifiers = frozenset(i for i in student_identifiers if i)
        matches = self._match_days(identifiers, date_records)

        daily_records: list[DailyAttendanceRecord] = []
        day = today.replace(day=1)
        while day <= today:
            if self.is_working_day(day):
                daily_records.append(self._build_record(day, matches.get(day)))
            day += timedelta(days=1)

        present_days = sum(
            1 for r in daily_records if r.status == DailyAttendanceStatus.PRESENT
        )
        absent_days = sum(
            1 for r in daily_records if r.status == DailyAttendanceStatus.ABSENT
        )
        total_days = present_days + absent_days
        total_hours = float(sum(r.hours_spent for r in daily_records))

        if total_days > 0:
            percentage = _round_half_up(present_days / total_days * 100)
        else:
            percentage = 0

        average_hours = total_hours / present_days if present_days > 0 else 0.0

        return AttendanceSummary(
            current_month=current_month,
            total_days=total_days,
            present_days=present_days,
            absent_days=absent_days,
            percentage=percentage,
            total_hours=total_hours,
            average_hours_per_day=average_hours,
            daily_records=daily_records,
        )

    def compute_weekly(
        self,
        student_identifiers: Iterable[str],
        date_records: Sequence[AttendanceDateRecord],
        today: date_type,
    ) -> WeeklyAttendance:
        """
        Compute the Monday-to-Sunday strip for the week containing `today`.

        Non-working weekdays are HOLIDAY and days after today are UPCOMING,
        whatever the documents say.
        """
        identifiers = frozenset(i for i in student_identifiers if i)
        matches = self._match_days(identifiers, date_records)
        week_start, week_end = week_bounds(today)

        days: list[DailyAttendanceRecord] = []
        for offset in range(7):
            day = week_start + timedelta(days=offset)
            if not self.is_working_day(day):
                record = DailyAttendanceRecord(
                    date=day.isoformat(), status=DailyAttendanceStatus.HOLIDAY
                )
            elif day > today:
                record = DailyAttendanceRecord(
                    date=day.isoformat(), status=DailyAttendanceStatus.UPCOMING
                )
            else:
                record = self._build_record(day, matches.get(day))

            days.append(
                record.model_copy(
                    update={"day_name": _WEEKDAY_NAMES[offset], "day_number": day.day}
                )
            )

        return WeeklyAttendance(
            week_start=week_start,
            week_end=week_end,
            present_days=sum(1 for d in days if d.status == DailyAttendanceStatus.PRESENT),
            days=days,
        )


def get_summary_computer() -> AttendanceSummaryComputer:
    """
    Build a computer configured from application settings.
    """
    settings = get_settings()
    return AttendanceSummaryComputer(
        hours_per_present_day=settings.HOURS_PER_PRESENT_DAY,
        non_working_weekdays=settings.NON_WORKING_WEEKDAYS,
    )
