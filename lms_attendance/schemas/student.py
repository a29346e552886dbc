# lms_attendance/schemas/student.py

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


# --------------------------------------------------------------------------
# Base schema shared by create/read
# --------------------------------------------------------------------------

class StudentBase(BaseModel):
    """
    Shared fields used by StudentCreate and StudentRead.
    """
    student_code: str = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=r"^[A-Za-z0-9]+$",
        description="Human-readable student code, printed on the QR badge.",
        examples=["CI2025001"],
    )

    name: str = Field(
        ...,
        min_length=1,
        description="Full name of the student.",
        examples=["Asha Verma"],
    )

    email: EmailStr | None = Field(
        default=None,
        description="Address used for attendance summary emails.",
        examples=["asha@example.com"],
    )

    is_active: bool = Field(
        default=True,
        description="Inactive students are skipped by the monthly report run.",
    )


class StudentCreate(StudentBase):
    """
    Schema for registering a new student.
    """
    pass


class StudentUpdate(BaseModel):
    """
    Schema for updating a student.
    All fields are optional; only provided fields are updated. `email` may be
    set to null to clear it, the other fields may not.
    """
    student_code: str | None = Field(
        default=None,
        min_length=1,
        max_length=64,
        pattern=r"^[A-Za-z0-9]+$",
    )
    name: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = Field(default=None)
    is_active: bool | None = Field(default=None)

    @field_validator("student_code", "name", "is_active")
    @classmethod
    def _reject_explicit_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value


class StudentRead(StudentBase):
    """
    Response schema for reading a student, including generated fields.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(
        ...,
        description="Generated primary identifier.",
        examples=["4f0c1e6a9d0b4c0e8f7a1b2c3d4e5f60"],
    )

    # Stored values are not re-validated as emails on the way out.
    email: str | None = Field(default=None)

    created_at: datetime | None = Field(None)
    updated_at: datetime | None = Field(None)


class StudentIdentity(BaseModel):
    """
    Canonical identity of a student together with every alias upstream
    systems may have recorded for them.
    """

    model_config = ConfigDict(frozen=True)

    student_id: str
    student_code: str
    name: str
    email: str | None = None

    @property
    def identifiers(self) -> frozenset[str]:
        return frozenset({self.student_id, self.student_code})
