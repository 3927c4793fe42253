"""
HTTP client for the platform REST backend.

Every backend call goes through BackendClient so failures are logged and
surfaced the same way: transport errors and non-2xx responses become
ExternalServiceError, except a 404 on lookups that treat "missing" as a
normal answer.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import Request

from plastic_audit.core.config import config
from plastic_audit.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

SERVICE_NAME = "Platform API"


class BackendClient:
    """
    Thin async wrapper around httpx.AsyncClient.

    The transport is injectable so tests can plug in httpx.MockTransport.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or config.backend_url,
            timeout=timeout if timeout is not None else config.backend_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        json: Any = None,
        allow_not_found: bool = False,
    ) -> Optional[httpx.Response]:
        """
        Send a request to the backend.

        Args:
            method: HTTP method
            url: Path relative to the backend base URL
            json: Optional JSON body
            allow_not_found: Return None instead of raising on 404

        Returns:
            The response, or None for an allowed 404

        Raises:
            ExternalServiceError: On transport failure or error status
        """
        try:
            response = await self._client.request(method, url, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise ExternalServiceError(SERVICE_NAME, "request failed") from e

        if allow_not_found and response.status_code == 404:
            return None

        if response.is_error:
            logger.error(f"{method} {url} returned {response.status_code}: {response.text[:200]}")
            raise ExternalServiceError(SERVICE_NAME, f"HTTP {response.status_code}")

        return response

    async def get_json(self, url: str, allow_not_found: bool = False) -> Any:
        response = await self.request("GET", url, allow_not_found=allow_not_found)
        if response is None:
            return None
        return json_or_none(response)

    async def post_json(self, url: str, body: Optional[Dict[str, Any]] = None) -> Any:
        response = await self.request("POST", url, json=body)
        return json_or_none(response)

    async def get_bytes(self, url: str) -> bytes:
        response = await self.request("GET", url)
        return response.content

    async def put_to_signed_url(self, upload_url: str, content: bytes, content_type: str) -> bool:
        """
        PUT raw bytes to a pre-signed storage URL.

        The signed URL is absolute and points at object storage, not at the
        backend, so a bare request is sent through the same connection pool.

        Returns:
            bool: True when storage accepted the object
        """
        try:
            response = await self._client.put(
                upload_url,
                content=content,
                headers={"Content-Type": content_type},
            )
        except httpx.HTTPError as e:
            logger.error(f"Storage PUT failed: {e}")
            return False

        if response.is_error:
            logger.error(f"Storage PUT returned {response.status_code}")
            return False
        return True


def json_or_none(response: httpx.Response) -> Any:
    """Parsed JSON body, or None when the body is empty or not JSON"""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def get_backend_client(request: Request) -> BackendClient:
    """FastAPI dependency: the client opened at application startup."""
    return request.app.state.backend_client
