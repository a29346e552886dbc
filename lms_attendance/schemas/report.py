# lms_attendance/schemas/report.py
from datetime import date as date_type

from pydantic import BaseModel, Field

from lms_attendance.schemas.attendance import AttendanceSummary


class StudentMonthlyReport(BaseModel):
    """
    One student's entry in a monthly report run.
    """

    student_id: str = Field(..., examples=["4f0c1e6a9d0b4c0e8f7a1b2c3d4e5f60"])
    student_code: str = Field(..., examples=["CI2025001"])
    student_name: str = Field(..., examples=["Asha Verma"])
    email_sent: bool = Field(
        ...,
        description="True only if an email was attempted and accepted by the provider.",
    )
    summary: AttendanceSummary


class MonthlyReportRun(BaseModel):
    """
    Summary payload returned by the /internal/run-monthly-report endpoint.
    """

    report_date: date_type = Field(
        ...,
        description="The business date the summaries were computed for.",
        examples=["2025-11-19"],
    )
    students_evaluated: int = Field(..., examples=[42])
    emails_sent: int = Field(..., examples=[40])
    entries: list[StudentMonthlyReport] = Field(default_factory=list)
