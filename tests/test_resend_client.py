# tests/test_resend_client.py
from http import HTTPStatus
from typing import Any, Dict

import httpx
import pytest

from lms_attendance.services import resend_client as resend_module
from lms_attendance.services.resend_client import EmailProviderError, ResendClient


class _FakeResponse:
    def __init__(self, status_code: int, json_data: Dict[str, Any]):
        self.status_code = status_code
        self._json_data = json_data
        self.text = str(json_data)

    def json(self) -> Dict[str, Any]:
        return self._json_data


class _FakeAsyncClient:
    """
    Minimal stand-in for httpx.AsyncClient that records the last request
    and answers with a preconfigured response.
    """

    last_request: Dict[str, Any] = {}
    response: _FakeResponse = _FakeResponse(HTTPStatus.OK, {"id": "msg_123"})

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    async def __aenter__(self) -> "_FakeAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def request(self, method: str, url: str, headers=None, json=None) -> _FakeResponse:
        _FakeAsyncClient.last_request = {
            "method": method,
            "url": url,
            "headers": headers,
            "json": json,
        }
        return _FakeAsyncClient.response


class _UnreachableAsyncClient(_FakeAsyncClient):
    async def request(self, method: str, url: str, headers=None, json=None) -> _FakeResponse:
        raise httpx.ConnectError("connection refused")


@pytest.mark.asyncio
async def test_send_email_posts_to_emails_endpoint(monkeypatch):
    monkeypatch.setattr(resend_module.httpx, "AsyncClient", _FakeAsyncClient)
    _FakeAsyncClient.response = _FakeResponse(HTTPStatus.OK, {"id": "msg_123"})

    client = ResendClient(api_key="re_test", base_url="https://api.resend.test/")
    message_id = await client.send_email(
        from_address="attendance@example.com",
        to=["asha@example.com"],
        subject="Attendance",
        text="Hello",
    )

    assert message_id == "msg_123"
    request = _FakeAsyncClient.last_request
    assert request["method"] == "POST"
    assert request["url"] == "https://api.resend.test/emails"
    assert request["headers"]["Authorization"] == "Bearer re_test"
    assert request["json"] == {
        "from": "attendance@example.com",
        "to": ["asha@example.com"],
        "subject": "Attendance",
        "text": "Hello",
    }


@pytest.mark.asyncio
async def test_send_email_raises_on_error_status(monkeypatch):
    monkeypatch.setattr(resend_module.httpx, "AsyncClient", _FakeAsyncClient)
    _FakeAsyncClient.response = _FakeResponse(
        HTTPStatus.UNPROCESSABLE_ENTITY, {"message": "Invalid `to` field"}
    )

    client = ResendClient(api_key="re_test")
    with pytest.raises(EmailProviderError, match="status=422"):
        await client.send_email(
            from_address="attendance@example.com",
            to=["not-an-email"],
            subject="Attendance",
            text="Hello",
        )


@pytest.mark.asyncio
async def test_transport_errors_become_provider_errors(monkeypatch):
    monkeypatch.setattr(resend_module.httpx, "AsyncClient", _UnreachableAsyncClient)

    client = ResendClient(api_key="re_test")
    with pytest.raises(EmailProviderError, match="connection refused"):
        await client.send_email(
            from_address="attendance@example.com",
            to=["asha@example.com"],
            subject="Attendance",
            text="Hello",
        )


def test_client_requires_api_key():
    with pytest.raises(ValueError):
        ResendClient(api_key="")
