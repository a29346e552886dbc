# lms_attendance/services/resend_client.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from lms_attendance.core.config import get_settings


class EmailProviderError(RuntimeError):
    """
    Raised when the email provider rejects a request or cannot be reached.
    """


class ResendClient:
    """
    Minimal async client for the Resend email API.

    Responsibilities
    ----------------
    - Authenticate every call with the configured API key.
    - Provide a single `send_email` convenience method.
    - Avoid leaking HTTP client details into the rest of the codebase.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.resend.com",
        timeout_seconds: float = 10.0,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required")

        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
    ) -> httpx.Response:
        """
        Issue an authenticated request relative to the configured base URL.

        Transport failures are converted to EmailProviderError; HTTP error
        statuses are returned for the caller to inspect.
        """
        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                return await client.request(
                    method=method.upper(),
                    url=url,
                    headers=headers,
                    json=json,
                )
        except httpx.HTTPError as exc:
            raise EmailProviderError(f"Resend request failed: {exc}") from exc

    async def send_email(
        self,
        *,
        from_address: str,
        to: List[str],
        subject: str,
        text: str,
        html: Optional[str] = None,
    ) -> str:
        """
        Send one email and return the provider's message id.

        Raises EmailProviderError on non-2xx responses.
        """
        body: Dict[str, Any] = {
            "from": from_address,
            "to": to,
            "subject": subject,
            "text": text,
        }
        if html is not None:
            body["html"] = html

        resp = await self._request("POST", "/emails", json=body)
        if resp.status_code // 100 != 2:
            raise EmailProviderError(
                f"Resend send failed (status={resp.status_code}): {resp.text}"
            )
        return str(resp.json().get("id", ""))


_resend_client_instance: Optional[ResendClient] = None


def get_resend_client() -> ResendClient:
    """
    Lazily construct a ResendClient from application settings.
    """
    global _resend_client_instance
    if _resend_client_instance is None:
        settings = get_settings()
        if not settings.RESEND_API_KEY:
            raise EmailProviderError("RESEND_API_KEY must be configured to use Resend.")
        _resend_client_instance = ResendClient(
            api_key=settings.RESEND_API_KEY,
            base_url=settings.RESEND_BASE_URL,
        )
    return _resend_client_instance
