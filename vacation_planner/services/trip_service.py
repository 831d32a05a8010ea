"""
HTTP transport for the remote trip planning service.

Translates request/response calls into parsed bodies and maps every failure
onto the client error taxonomy. Requests are throttled client-side and never
retried automatically.
"""

import asyncio
import json
from typing import Any

import aiohttp
from aiolimiter import AsyncLimiter

from vacation_planner.config import ServiceConfig, config
from vacation_planner.utils.error_handling import (
    NetworkError,
    ResourceNotFoundError,
    ServiceFailure,
    ValidationError,
)
from vacation_planner.utils.logging import ServiceLogger

# HTTP Status Codes
HTTP_STATUS_OK = 200
HTTP_STATUS_REDIRECT = 300
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_NOT_FOUND = 404
HTTP_STATUS_UNPROCESSABLE = 422

SERVICE_NAME = "trip-service"


class TripServiceClient:
    """
    Client for the trip planning service.

    Owns an aiohttp session unless one is injected. Use as an async context
    manager, or call close() when done.
    """

    def __init__(
        self,
        service_config: ServiceConfig | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        """
        Initialize the client.

        Args:
            service_config: Endpoint and limits (defaults to the global config)
            session: Existing aiohttp session to reuse (optional)
        """
        self.config = service_config or config.service
        self.base_url = self.config.base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self.limiter = AsyncLimiter(self.config.requests_per_minute, 60)
        self.log = ServiceLogger(SERVICE_NAME)

    async def __aenter__(self) -> "TripServiceClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            )
        return self._session

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    async def request_json(
        self,
        method: str,
        path: str,
        json_data: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a request and return its parsed body.

        Args:
            method: HTTP method (GET, POST, DELETE)
            path: Service path, e.g. /api/trips
            json_data: JSON request body (optional)

        Returns:
            Parsed JSON for JSON responses, the text for other responses,
            or None for an empty body

        Raises:
            ResourceNotFoundError: On 404
            ValidationError: On 400 or 422
            ServiceFailure: On any other non-2xx status
            NetworkError: When no response was received
        """
        body, content_type = await self._send(method, path, json_data)
        text = body.decode("utf-8", errors="replace").strip()
        if not text:
            return None
        if content_type == "application/json":
            try:
                return json.loads(text)
            except json.JSONDecodeError as e:
                raise ServiceFailure(
                    "Malformed response from trip service", original_error=e
                ) from e
        return text

    async def request_bytes(self, method: str, path: str) -> bytes:
        """
        Make a request and return the raw body, for binary downloads.

        Raises:
            Same as request_json
        """
        body, _ = await self._send(method, path, None)
        return body

    async def _send(
        self, method: str, path: str, json_data: dict[str, Any] | None
    ) -> tuple[bytes, str]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        self.log.log_api_request(method, path, json_data)

        try:
            async with self.limiter:
                session = self._get_session()
                async with session.request(
                    method, url, json=json_data, headers=self._headers()
                ) as response:
                    status_code = response.status
                    body = await response.read()
                    content_type = response.content_type
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.log.error(f"{method} {path} failed without a response: {e!s}")
            raise NetworkError(
                "Could not reach the trip service", original_error=e
            ) from e

        self.log.log_api_response(method, path, status_code)

        if HTTP_STATUS_OK <= status_code < HTTP_STATUS_REDIRECT:
            return body, content_type

        detail = body.decode("utf-8", errors="replace").strip()
        self.log.warning(f"{method} {path} returned {status_code}: {detail}")

        if status_code == HTTP_STATUS_NOT_FOUND:
            raise ResourceNotFoundError(
                f"Not found: {path}", status_code=status_code
            )
        if status_code in (HTTP_STATUS_BAD_REQUEST, HTTP_STATUS_UNPROCESSABLE):
            raise ValidationError(
                detail or "The trip service rejected the request",
                status_code=status_code,
            )
        raise ServiceFailure(
            detail or f"Trip service error (status: {status_code})",
            status_code=status_code,
        )
