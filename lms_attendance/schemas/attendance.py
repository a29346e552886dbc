# lms_attendance/schemas/attendance.py
from datetime import date as date_type, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AttendanceDateRecord(BaseModel):
    """
    Normalized view of one date-keyed attendance document.

    This is the only input shape the summary computer understands, so the
    persistence layer can change without touching the aggregation logic.
    """

    model_config = ConfigDict(frozen=True)

    date: date_type = Field(
        ...,
        description="Calendar date the document refers to.",
        examples=["2025-11-14"],
    )
    present_students: frozenset[str] = Field(
        default_factory=frozenset,
        description="Identifiers (primary ids and/or student codes) recorded present.",
        examples=[["4f0c1e6a9d0b4c0e8f7a1b2c3d4e5f60", "CI-2025-001"]],
    )
    last_updated: datetime | None = Field(
        None,
        description="When the document was last written.",
    )
    course_id: str | None = Field(
        None,
        description="Course the document belongs to; empty for general attendance.",
    )
    hours_spent: float | None = Field(
        None,
        ge=0,
        description=(
            "Optional per-date override of the hours credited to present students. "
            "When absent the configured constant is used."
        ),
    )


class DailyAttendanceStatus(str, Enum):
    """
    Status of a single day for a single student.

    PRESENT and ABSENT are the only values used in monthly records. HOLIDAY
    (non-working weekday) and UPCOMING (after today) only appear in the
    weekly strip.
    """

    PRESENT = "present"
    ABSENT = "absent"
    HOLIDAY = "holiday"
    UPCOMING = "upcoming"


class DailyAttendanceRecord(BaseModel):
    """
    Per-day attendance row, ready for rendering.
    """

    date: str = Field(..., description="ISO date (YYYY-MM-DD).", examples=["2025-11-14"])
    status: DailyAttendanceStatus = Field(..., examples=["present"])
    time: str | None = Field(
        None,
        description="Clock time (HH:MM) the attendance document was last updated.",
        examples=["10:05"],
    )
    hours_spent: float = Field(
        0.0,
        description="Hours credited for the day; 0 unless present.",
        examples=[7.0],
    )
    day_name: str | None = Field(None, description="Short weekday name (weekly strip only).")
    day_number: int | None = Field(None, description="Day of month (weekly strip only).")


class AttendanceSummary(BaseModel):
    """
    Monthly attendance summary for one student.
    """

    current_month: str = Field(
        ...,
        description="Human-readable label of the summarized month.",
        examples=["November 2025"],
    )
    total_days: int = Field(
        ...,
        description="Working days up to today in the month (present + absent).",
        examples=[20],
    )
    present_days: int = Field(..., examples=[15])
    absent_days: int = Field(..., examples=[5])
    percentage: int = Field(
        ...,
        ge=0,
        le=100,
        description="round(present_days / total_days * 100), or 0 when total_days is 0.",
        examples=[75],
    )
    total_hours: float = Field(..., examples=[105.0])
    average_hours_per_day: float = Field(
        ...,
        description="total_hours / present_days, or 0 when there are no present days.",
        examples=[7.0],
    )
    daily_records: list[DailyAttendanceRecord] = Field(
        default_factory=list,
        description="Chronological per-day records.",
    )


class WeeklyAttendance(BaseModel):
    """
    Monday-to-Sunday attendance strip for the week containing today.
    """

    week_start: date_type = Field(..., description="Monday of the week.")
    week_end: date_type = Field(..., description="Sunday of the week.")
    present_days: int = Field(..., description="Number of present days in the strip.")
    days: list[DailyAttendanceRecord] = Field(..., description="Seven entries, Monday first.")


class AttendanceDateRead(BaseModel):
    """
    Public representation of a stored attendance document.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., examples=[1])
    course_id: str = Field(..., examples=["python-101"])
    attendance_date: date_type = Field(..., examples=["2025-11-14"])
    present_students: list[str] = Field(..., examples=[["4f0c1e6a9d0b4c0e8f7a1b2c3d4e5f60"]])
    hours_spent: float | None = Field(None)
    updated_by: str | None = Field(None, examples=["teacher-42"])
    last_updated: datetime | None = Field(None)
