# lms_attendance/main.py
from fastapi import FastAPI

from lms_attendance.api.routes import attendance, health, internal, students
from lms_attendance.core.config import get_settings
from lms_attendance.core.logging import configure_logging
from lms_attendance.db.session import init_db_for_startup


def create_app() -> FastAPI:
    """
    Application factory for the LMS attendance service.
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend service recording daily class attendance per student,\n"
            "computing monthly and weekly attendance summaries, exporting them as CSV\n"
            "and emailing the monthly summary to every active student."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(students.router)
    app.include_router(attendance.router)
    app.include_router(internal.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        await init_db_for_startup()

    return app


app = create_app()
