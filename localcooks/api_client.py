"""Local Cooks REST API client for the application wizard.

Contract:
- All methods are async (httpx.AsyncClient) and take the caller's auth headers
- Submissions return the raw response; the orchestrator maps status codes
- Uploads raise UploadError, lookups raise ApplicationLookupError
- Transport failures on submissions propagate as httpx.HTTPError
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from . import config
from .documents import RemoteUrl, UploadedFile, normalize_mime_type
from .errors import ApplicationLookupError, UploadError

logger = logging.getLogger(__name__)


def auth_headers(token: str, user_id: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "X-User-ID": user_id,
    }


def error_message(response: httpx.Response) -> str:
    """Server-supplied message from `{error}` or `{message}`, else the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return response.reason_phrase or f"Request failed with status {response.status_code}"


class ApplicationApiClient:
    """HTTP client for the application endpoints."""

    def __init__(
        self,
        base_url: str = config.API_BASE_URL,
        timeout: float = config.REQUEST_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> ApplicationApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # -----------------------------------------------------------------
    # Submission
    # -----------------------------------------------------------------

    async def submit_application_json(
        self, body: dict[str, Any], headers: dict[str, str]
    ) -> httpx.Response:
        """POST /api/applications with a JSON body."""
        return await self.client.post(config.APPLICATIONS_PATH, json=body, headers=headers)

    async def submit_application_multipart(
        self,
        fields: dict[str, str],
        files: dict[str, tuple[str, bytes, str]],
        headers: dict[str, str],
    ) -> httpx.Response:
        """POST /api/applications as multipart/form-data; httpx sets the boundary."""
        return await self.client.post(
            config.APPLICATIONS_PATH, data=fields, files=files, headers=headers
        )

    # -----------------------------------------------------------------
    # Documents
    # -----------------------------------------------------------------

    async def upload_file(self, upload: UploadedFile, headers: dict[str, str]) -> RemoteUrl:
        """POST /api/upload - stores one document and returns its URL."""
        files = {"file": (upload.filename, upload.content, normalize_mime_type(upload.mime_type))}
        try:
            response = await self.client.post(config.UPLOAD_PATH, files=files, headers=headers)
        except httpx.HTTPError as e:
            raise UploadError(upload.filename, f"network error ({e.__class__.__name__})") from e

        if not response.is_success:
            raise UploadError(upload.filename, error_message(response), response.status_code)
        try:
            url = response.json().get("url")
        except (ValueError, AttributeError) as e:
            raise UploadError(upload.filename, "unreadable upload response", response.status_code) from e
        if not url:
            raise UploadError(upload.filename, "upload response did not include a URL", response.status_code)
        logger.info(f"Uploaded '{upload.filename}' ({upload.size_bytes} bytes).")
        return RemoteUrl(url=url)

    # -----------------------------------------------------------------
    # Existing applications
    # -----------------------------------------------------------------

    async def list_my_applications(self, headers: dict[str, str]) -> list[dict[str, Any]]:
        """GET /api/applications/my-applications"""
        try:
            response = await self.client.get(config.MY_APPLICATIONS_PATH, headers=headers)
        except httpx.HTTPError as e:
            raise ApplicationLookupError(f"Could not load your applications: {e}") from e
        if not response.is_success:
            raise ApplicationLookupError(error_message(response))
        try:
            data = response.json()
        except ValueError as e:
            raise ApplicationLookupError("Unreadable applications response") from e
        if not isinstance(data, list):
            raise ApplicationLookupError("Unexpected applications response")
        return data
