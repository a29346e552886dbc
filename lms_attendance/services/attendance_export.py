# lms_attendance/services/attendance_export.py
from __future__ import annotations

import csv
import io
from datetime import date as date_type

from lms_attendance.schemas.attendance import AttendanceSummary

CSV_FIELDNAMES = ["date", "status", "time", "hours_spent"]


def build_attendance_csv(summary: AttendanceSummary) -> bytes:
    """
    Render the daily records of a summary as CSV.

    Encoded as UTF-8 with BOM so spreadsheet tools detect the encoding.
    """
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=CSV_FIELDNAMES)
    writer.writeheader()
    for record in summary.daily_records:
        writer.writerow(
            {
                "date": record.date,
                "status": record.status.value,
                "time": record.time or "",
                "hours_spent": f"{record.hours_spent:g}",
            }
        )
    return out.getvalue().encode("utf-8-sig")


def export_filename(student_code: str, today: date_type) -> str:
    return f"{student_code}_attendance_{today.isoformat()}.csv"
