from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx
import orjson

from ..config.settings import BackendSettings

logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """Base class for failures talking to the PlotLine backend."""


class BackendNotConfiguredError(BackendError):
    """Raised when no backend URL is configured."""


class BackendTransportError(BackendError):
    """Raised when the request never produced an HTTP response."""


class BackendStatusError(BackendError):
    """Raised for non-2xx responses."""

    def __init__(self, status_code: int, message: str = "") -> None:
        super().__init__(message or f"Backend responded with HTTP {status_code}.")
        self.status_code = status_code


class BackendResponseError(BackendError):
    """Raised when the backend reports ``success: false`` or omits the payload."""


class BackendDecodeError(BackendError):
    """Raised when a response body cannot be decoded."""


@dataclass
class BackendGateway:
    """Thin wrapper around a shared ``httpx.AsyncClient`` for the backend."""

    settings: BackendSettings
    http_client: Optional[httpx.AsyncClient] = None

    def ensure_client(self) -> httpx.AsyncClient:
        if self.http_client is not None:
            return self.http_client
        if not self.settings.is_configured:
            raise BackendNotConfiguredError("Backend settings are missing a base URL.")
        self.http_client = httpx.AsyncClient(
            base_url=self.settings.base_url or "",
            timeout=httpx.Timeout(self.settings.timeout_seconds),
        )
        return self.http_client

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        payload: Optional[Any] = None,
    ) -> bytes:
        client = self.ensure_client()
        headers = {"Accept": "application/json"}
        content: Optional[bytes] = None
        if payload is not None:
            headers["Content-Type"] = "application/json"
            content = orjson.dumps(payload)
        try:
            response = await client.request(method, path, params=params, content=content, headers=headers)
        except httpx.HTTPError as exc:
            raise BackendTransportError(f"{method} {path} failed: {exc}") from exc
        if not response.is_success:
            logger.debug("%s %s returned HTTP %s", method, path, response.status_code)
            raise BackendStatusError(response.status_code)
        return response.content

    async def aclose(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()
            self.http_client = None
