"""
REST HTTP client for the chat backend.

Classifies every response before returning it:
- 401 raises UnauthorizedError
- other >= 400, network failures and non-JSON bodies raise TransportError
- a JSON body with ``success: false`` raises ApplicationError
"""

import logging
from typing import Any, Optional

import httpx

from quickchat.errors import ApplicationError, TransportError, UnauthorizedError

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT_S = 30.0

logger = logging.getLogger(__name__)


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "quickchat-sdk/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def _auth_headers(token: Optional[str]) -> dict[str, str]:
        headers: dict[str, str] = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def _server_message(resp: httpx.Response) -> Optional[str]:
        try:
            body = resp.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            message = body.get("message") or body.get("messages")
            if isinstance(message, str) and message:
                return message
        return None

    @staticmethod
    def _unwrap(json_data: Any) -> dict[str, Any]:
        """Check the standard envelope: { "success": bool, "message": str, ... }"""
        if not isinstance(json_data, dict):
            raise TransportError("Malformed response: expected a JSON object")
        if json_data.get("success") is False:
            raise ApplicationError(json_data.get("message") or "", details=json_data)
        return json_data

    async def request(self, method: str, path: str, token: Optional[str] = None) -> dict[str, Any]:
        try:
            resp = await self._client.request(method, path, headers=self._auth_headers(token))
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportError(f"{method} {path} failed: {e}") from e

        if resp.status_code == 401:
            raise UnauthorizedError(self._server_message(resp) or "Not authorized")
        if resp.status_code >= 400:
            raise TransportError(
                f"HTTP {resp.status_code}: {resp.text[:200]}",
                server_message=self._server_message(resp),
                status_code=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise TransportError(f"Malformed response from {path}: {resp.text[:200]}") from e
        return self._unwrap(data)

    async def get(self, path: str, token: Optional[str] = None) -> dict[str, Any]:
        return await self.request("GET", path, token=token)

    async def close(self) -> None:
        await self._client.aclose()
