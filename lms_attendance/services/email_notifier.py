# lms_attendance/services/email_notifier.py
from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from lms_attendance.core.config import get_settings
from lms_attendance.schemas.attendance import AttendanceSummary, DailyAttendanceStatus
from lms_attendance.schemas.student import StudentIdentity
from lms_attendance.services.resend_client import EmailProviderError, get_resend_client

logger = logging.getLogger(__name__)


def build_attendance_summary_email_body(
    student: StudentIdentity,
    summary: AttendanceSummary,
) -> str:
    """
    Build a plain-text body for the monthly attendance email.
    """
    lines: list[str] = []

    lines.append(f"Hello {student.name},")
    lines.append("")
    lines.append(f"Here is your attendance summary for {summary.current_month}.")
    lines.append("")

    if summary.total_days == 0:
        lines.append("No attendance has been recorded for this month yet.")
    else:
        lines.append(f"Days present:      {summary.present_days}")
        lines.append(f"Days absent:       {summary.absent_days}")
        lines.append(f"Attendance:        {summary.percentage}%")
        lines.append(f"Total hours:       {summary.total_hours:g}")
        lines.append(f"Average hours/day: {summary.average_hours_per_day:.1f}")

        absent = [
            r.date for r in summary.daily_records if r.status == DailyAttendanceStatus.ABSENT
        ]
        if absent:
            lines.append("")
            lines.append("Absent on: " + ", ".join(absent))

    lines.append("")
    lines.append("Regards,")
    lines.append(get_settings().APP_NAME)

    return "\n".join(lines)


def _send_via_smtp(msg: EmailMessage) -> None:
    settings = get_settings()
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as smtp:
        if settings.SMTP_USE_TLS:
            smtp.starttls()
        if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
            smtp.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        smtp.send_message(msg)


async def send_attendance_summary_email(
    student: StudentIdentity,
    summary: AttendanceSummary,
    subject: str | None = None,
) -> bool:
    """
    Email a monthly summary to the student.

    Resend is used when RESEND_API_KEY is configured, otherwise SMTP.

    Returns
    -------
    bool
        True if the provider accepted the message.
        False if the student has no email, delivery is not configured, or
        sending failed.
    """
    settings = get_settings()

    if not student.email:
        return False

    if not settings.EMAIL_FROM_ADDRESS:
        return False

    if subject is None:
        subject = f"[{settings.APP_NAME}] Attendance Summary {summary.current_month}"

    body = build_attendance_summary_email_body(student, summary)

    if settings.RESEND_API_KEY:
        try:
            message_id = await get_resend_client().send_email(
                from_address=settings.EMAIL_FROM_ADDRESS,
                to=[student.email],
                subject=subject,
                text=body,
            )
        except EmailProviderError:
            logger.exception("Resend delivery failed for student=%s", student.student_code)
            return False
        logger.info(
            "Sent attendance summary via Resend student=%s message_id=%s",
            student.student_code,
            message_id,
        )
        return True

    if not settings.SMTP_HOST:
        # Email system not configured
        return False

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = settings.EMAIL_FROM_ADDRESS
    msg["To"] = student.email
    msg.set_content(body)

    try:
        await asyncio.to_thread(_send_via_smtp, msg)
    except (smtplib.SMTPException, OSError):
        # The report run still returns its JSON summary if email fails.
        logger.exception("SMTP delivery failed for student=%s", student.student_code)
        return False

    logger.info("Sent attendance summary via SMTP student=%s", student.student_code)
    return True
