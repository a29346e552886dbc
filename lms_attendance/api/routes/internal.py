# lms_attendance/api/routes/internal.py
from datetime import date as date_type
from http import HTTPStatus

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lms_attendance.api.dependencies.clock import get_today
from lms_attendance.api.dependencies.internal_auth import verify_internal_api_key
from lms_attendance.db.session import get_db
from lms_attendance.schemas.report import MonthlyReportRun
from lms_attendance.services.attendance_reports import run_monthly_attendance_report

router = APIRouter(
    prefix="/internal",
    tags=["Internal"],
    dependencies=[Depends(verify_internal_api_key)],
)


@router.post(
    "/run-monthly-report",
    response_model=MonthlyReportRun,
    status_code=HTTPStatus.OK,
    summary="Compute and email the monthly attendance summary of every active student",
    description=(
        "Internal-only endpoint intended for scheduled/cron usage.\n\n"
        "**Logic:**\n"
        "- The month is the month of `report_date` (defaults to today).\n"
        "- Only days up to and including `report_date` are counted, and never days "
        "after today: a future `report_date` is capped at today.\n"
        "- With `send_emails=true`, each student with an email address receives "
        "their summary. Delivery failures are reported per student as "
        "`email_sent=false` and never fail the run."
    ),
    responses={
        200: {"description": "Report computed. Per-student summaries are returned."},
        401: {"description": "Missing or invalid internal API key (if configured)."},
    },
)
async def run_monthly_report(
    report_date: date_type | None = Query(
        default=None,
        description=(
            "Business date the report is computed for. "
            "If omitted, the server's current date is used."
        ),
        examples=["2025-11-30"],
    ),
    send_emails: bool = Query(
        default=True,
        description="If false, summaries are computed and returned without emailing anyone.",
    ),
    today: date_type = Depends(get_today),
    db: AsyncSession = Depends(get_db),
) -> MonthlyReportRun:
    """
    Run the monthly attendance report.

    In production this endpoint should be invoked by a scheduler at the end
    of each month (e.g. via cron + curl).
    """
    return await run_monthly_attendance_report(
        db=db,
        today=min(report_date, today) if report_date else today,
        send_emails=send_emails,
    )
