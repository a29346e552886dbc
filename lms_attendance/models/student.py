# lms_attendance/models/student.py
import uuid

from sqlalchemy import Boolean, Column, DateTime, String, func

from lms_attendance.db.base import Base


def _generate_student_id() -> str:
    return uuid.uuid4().hex


class Student(Base):
    """
    A registered student.

    Students are referenced both by the generated primary `id` and by the
    human-readable `student_code` printed on their QR badge. Attendance
    documents written by older flows may contain either one.
    """

    __tablename__ = "students"

    id = Column(String(32), primary_key=True, default=_generate_student_id)

    student_code = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Student id={self.id} code={self.student_code} active={self.is_active}>"
