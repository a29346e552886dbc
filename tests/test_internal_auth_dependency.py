# tests/test_internal_auth_dependency.py
from http import HTTPStatus

from lms_attendance.api.dependencies import internal_auth as auth_module

REPORT_URL = "/internal/run-monthly-report?send_emails=false"


class DummySettingsProd:
    APP_ENV = "prod"
    INTERNAL_API_KEY = "supersecret"


class DummySettingsProdUnconfigured:
    APP_ENV = "prod"
    INTERNAL_API_KEY = None


def test_internal_endpoint_open_in_test_env_without_key(client):
    resp = client.post(REPORT_URL)
    assert resp.status_code == HTTPStatus.OK


def test_internal_endpoint_401_when_key_missing_in_prod(monkeypatch, client):
    """
    In a non-local environment with INTERNAL_API_KEY set, calling an
    /internal endpoint without the X-Internal-Api-Key header returns 401.
    """
    monkeypatch.setattr(auth_module, "get_settings", lambda: DummySettingsProd())

    resp = client.post(REPORT_URL)
    assert resp.status_code == HTTPStatus.UNAUTHORIZED
    assert "invalid or missing" in resp.json()["detail"].lower()


def test_internal_endpoint_401_when_key_wrong_in_prod(monkeypatch, client):
    monkeypatch.setattr(auth_module, "get_settings", lambda: DummySettingsProd())

    resp = client.post(REPORT_URL, headers={"X-Internal-Api-Key": "wrong-key"})
    assert resp.status_code == HTTPStatus.UNAUTHORIZED


def test_internal_endpoint_200_when_key_correct_in_prod(monkeypatch, client):
    monkeypatch.setattr(auth_module, "get_settings", lambda: DummySettingsProd())

    resp = client.post(REPORT_URL, headers={"X-Internal-Api-Key": "supersecret"})
    assert resp.status_code == HTTPStatus.OK
    assert resp.json()["report_date"] == "2025-11-19"


def test_internal_endpoint_500_when_key_not_configured_in_prod(monkeypatch, client):
    monkeypatch.setattr(auth_module, "get_settings", lambda: DummySettingsProdUnconfigured())

    resp = client.post(REPORT_URL)
    assert resp.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
