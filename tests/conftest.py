# tests/conftest.py
import os
import tempfile
from datetime import datetime, timezone

# Settings are cached on first access, so the test database and environment
# must be in place before anything from lms_attendance is imported.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="lms_attendance_tests_")
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"
os.environ["APP_ENV"] = "test"
os.environ.pop("INTERNAL_API_KEY", None)
os.environ.pop("RESEND_API_KEY", None)
os.environ.pop("SMTP_HOST", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from lms_attendance.api.dependencies.clock import get_now  # noqa: E402
from lms_attendance.main import create_app  # noqa: E402

# Wednesday; November 2025 starts on a Saturday.
FIXED_NOW = datetime(2025, 11, 19, 10, 0, tzinfo=timezone.utc)
FIXED_TODAY = FIXED_NOW.date()


@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    Shared TestClient fixture for all API tests.

    The clock is pinned to FIXED_NOW so summaries are deterministic. Tables
    are created by the application's startup hook.
    """
    app = create_app()
    app.dependency_overrides[get_now] = lambda: FIXED_NOW
    with TestClient(app) as test_client:
        yield test_client
