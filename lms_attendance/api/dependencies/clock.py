# lms_attendance/api/dependencies/clock.py
from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi import Depends

from lms_attendance.core.config import get_settings


def get_now() -> datetime:
    """
    Current timestamp in the configured business timezone.

    Routers depend on this instead of reading the clock, so tests can pin
    time with `app.dependency_overrides[get_now]`.
    """
    return datetime.now(tz=ZoneInfo(get_settings().APP_TIMEZONE))


def get_today(now: datetime = Depends(get_now)) -> date:
    return now.date()
