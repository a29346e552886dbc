# lms_attendance/schemas/marking.py
from datetime import date as date_type

from pydantic import BaseModel, Field


class MarkAttendanceRequest(BaseModel):
    """
    Full attendance list for one course and date, as submitted by an instructor.

    Submitting again for the same course and date replaces the stored list.
    """

    course_id: str = Field(
        "",
        max_length=64,
        description="Course identifier; empty string for general attendance.",
        examples=["python-101"],
    )
    date: date_type = Field(..., description="Attendance date.", examples=["2025-11-14"])
    present_students: list[str] = Field(
        ...,
        description="Primary ids or student codes of every present student.",
        examples=[["CI2025001", "4f0c1e6a9d0b4c0e8f7a1b2c3d4e5f60"]],
    )
    marked_by: str = Field(
        ...,
        min_length=1,
        description="Identifier of the instructor or admin marking attendance.",
        examples=["teacher-42"],
    )
    hours_spent: float | None = Field(
        None,
        ge=0,
        le=24,
        description="Optional override of the hours credited for this date.",
    )


class MarkAttendanceResult(BaseModel):
    """
    Outcome of a full-list marking request.
    """

    course_id: str
    date: date_type
    present_count: int = Field(..., examples=[12])
    present_students: list[str] = Field(
        ...,
        description="Canonical primary ids stored for the date.",
    )
    created: bool = Field(
        ...,
        description="True if the date document was created, False if it was updated.",
    )


class ScanRequest(BaseModel):
    """
    Raw QR payload read by the attendance scanner.
    """

    payload: str = Field(
        ...,
        description="`<student_code>` or `<student_code>-YYYY-MM-DD`.",
        examples=["CI2025001-2025-11-14"],
    )
    course_id: str = Field("", max_length=64)
    scanned_by: str = Field("scanner", min_length=1)


class ScanResult(BaseModel):
    """
    Outcome of a QR scan.
    """

    student_id: str
    student_code: str
    student_name: str
    date: date_type
    already_marked: bool = Field(
        ...,
        description="True if the student was already recorded present; nothing was written.",
    )
    message: str = Field(..., examples=["Attendance marked for Asha Verma on 2025-11-14."])
