# lms_attendance/core/config.py
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables (and an optional `.env` file)
    at runtime.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "LMS Attendance"
    APP_ENV: str = Field("local", description="Environment name: local/test/dev/stage/prod")
    APP_TIMEZONE: str = Field(
        "UTC",
        description="IANA timezone used to determine the current business date.",
    )

    LOG_LEVEL: str = Field("INFO", description="Root level for the package logger.")
    LOG_FORMAT: str = Field("text", description="Log output format: text or json.")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./lms_attendance.db",
        description="SQLAlchemy-compatible async database URL",
    )

    INTERNAL_API_KEY: str | None = Field(
        default=None,
        description="API key required for hitting /internal endpoints",
    )

    # --- Attendance rules ---
    HOURS_PER_PRESENT_DAY: float = Field(
        default=7.0,
        ge=0,
        description=(
            "Hours credited to a student for each present day. There is no "
            "clock-in/clock-out capture, so this is a flat business constant."
        ),
    )
    NON_WORKING_WEEKDAYS: list[int] = Field(
        default=[6],
        description=(
            "Weekdays (Monday=0 ... Sunday=6) that never count as attendance days. "
            "Provided as a JSON list in the environment, e.g. [5, 6]."
        ),
    )

    # --- Email delivery ---
    EMAIL_FROM_ADDRESS: str | None = Field(
        default=None,
        description="From address used in attendance summary emails.",
    )
    RESEND_API_KEY: str | None = Field(
        default=None,
        description="Resend API key. When set, Resend is preferred over SMTP.",
    )
    RESEND_BASE_URL: str = Field(
        default="https://api.resend.com",
        description="Base URL of the Resend HTTP API.",
    )
    SMTP_HOST: str | None = Field(
        default=None,
        description="SMTP server hostname for sending emails.",
    )
    SMTP_PORT: int = Field(
        default=587,
        description="SMTP server port (usually 587 for TLS).",
    )
    SMTP_USERNAME: str | None = Field(default=None)
    SMTP_PASSWORD: str | None = Field(default=None)
    SMTP_USE_TLS: bool = Field(
        default=True,
        description="Whether to use STARTTLS when connecting to SMTP.",
    )

    @field_validator("NON_WORKING_WEEKDAYS")
    @classmethod
    def _check_weekdays(cls, value: list[int]) -> list[int]:
        invalid = [day for day in value if day < 0 or day > 6]
        if invalid:
            raise ValueError(f"weekday numbers must be within 0..6, got {invalid}")
        return sorted(set(value))


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Settings are read and validated only once per process.
    """
    return Settings()
