# lms_attendance/models/attendance_date.py
from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    UniqueConstraint,
)

from lms_attendance.db.base import Base


class AttendanceDate(Base):
    """
    Attendance document for a single calendar date, optionally scoped to a course.

    `present_students` lists the identifiers of every student recorded present
    on that date. General (non-course) attendance uses an empty `course_id`.
    """

    __tablename__ = "attendance_dates"

    id = Column(Integer, primary_key=True, index=True)

    course_id = Column(String(64), nullable=False, default="", index=True)
    attendance_date = Column(Date, nullable=False, index=True)

    present_students = Column(JSON, nullable=False, default=list)

    hours_spent = Column(
        Float,
        nullable=True,
    )

    updated_by = Column(String(255), nullable=True)
    last_updated = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "course_id",
            "attendance_date",
            name="uq_attendance_dates_course_date",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<AttendanceDate id={self.id} course_id={self.course_id!r} "
            f"date={self.attendance_date} present={len(self.present_students or [])}>"
        )
