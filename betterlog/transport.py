"""
HTTP transport for betterlog.

A transport performs exactly one POST per call and turns every failure into
a DeliveryError. Retrying is the caller's job (see delivery.push_with_retry).

Any object with a matching ``post_json`` coroutine satisfies the Transport
protocol; HttpxTransport is the production implementation.
"""

import json
import logging
from typing import Any, Protocol

import httpx

from .errors import HttpError, NetworkError, SerializationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0  # HTTP request timeout in seconds

# Characters of response text kept in HttpError messages
_MAX_ERROR_BODY = 200


class Transport(Protocol):
    """Sends a JSON body to a URL and returns the decoded JSON response."""

    async def post_json(
        self, url: str, body: Any, headers: dict[str, str]
    ) -> Any | None:
        """
        POST ``body`` as JSON.

        Returns:
            Decoded response body, or None when the response body is empty.

        Raises:
            HttpError: Non-2xx response
            NetworkError: Connection-level failure
            SerializationError: Body not encodable or response not decodable
        """
        ...


def with_json_accept(headers: dict[str, str]) -> dict[str, str]:
    """Copy ``headers`` with Accept forced to application/json."""
    merged = {key: value for key, value in headers.items() if key.lower() != "accept"}
    merged["Accept"] = "application/json"
    return merged


class HttpxTransport:
    """
    Transport backed by a pooled httpx.AsyncClient.

    The client is created on first use and reused across calls, so one
    instance can be shared by concurrent tasks. A client passed in by the
    caller is used as-is and left open by aclose().

    Example:
        async with HttpxTransport(timeout=5.0) as transport:
            await transport.post_json(url, {"message": "hi"}, headers)
    """

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def post_json(
        self, url: str, body: Any, headers: dict[str, str]
    ) -> Any | None:
        try:
            content = json.dumps(body)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"could not encode request body: {e}") from e

        try:
            response = await self._get_client().post(
                url, content=content.encode("utf-8"), headers=with_json_accept(headers)
            )
        except httpx.DecodingError as e:
            raise SerializationError(f"could not decode response body: {e}") from e
        except httpx.RequestError as e:
            raise NetworkError(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            message = f"HTTP request failed with status {response.status_code}"
            detail = response.text.strip()
            if detail:
                message = f"{message}: {detail[:_MAX_ERROR_BODY]}"
            raise HttpError(response.status_code, message)

        if not response.content.strip():
            return None

        try:
            return response.json()
        except ValueError as e:
            raise SerializationError(
                f"could not decode {response.status_code} response body: {e}"
            ) from e

    async def aclose(self):
        """Close the underlying client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
