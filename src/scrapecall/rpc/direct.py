"""Direct transport: plain HTTP request/response against the endpoint (httpx)."""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx

from scrapecall.core.config import DIRECT_MODES
from scrapecall.errors import CallTimeoutError, ConfigurationError, TransportError
from scrapecall.rpc.request import CallRequest
from scrapecall.rpc.result import raise_for_application_error

logger = logging.getLogger(__name__)


class HttpDirectTransport:
    """
    mode="body": POST {"function": name, "data": payload}.
    mode="query": GET endpoint?function=name&<payload>&_t=<nonce>.
    Without an injected http_client a fresh httpx.AsyncClient is opened per call.
    """

    def __init__(self, mode: str = "body", http_client: httpx.AsyncClient | None = None) -> None:
        if mode not in DIRECT_MODES:
            raise ConfigurationError(f"unknown direct mode {mode!r}, expected one of {DIRECT_MODES}")
        self.mode = mode
        self._http_client = http_client

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient() as client:
            yield client

    async def call(self, endpoint: str, request: CallRequest, *, timeout: float) -> dict[str, Any]:
        try:
            response = await asyncio.wait_for(self._send(endpoint, request, timeout), timeout)
        except asyncio.TimeoutError as e:
            raise CallTimeoutError() from e
        except httpx.TimeoutException as e:
            raise CallTimeoutError() from e
        except httpx.HTTPError as e:
            raise TransportError(f"request failed: {e.__class__.__name__}: {e}") from e

        if not response.is_success:
            raise TransportError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            body = response.json()
        except ValueError as e:
            raise TransportError("malformed response body: not JSON") from e
        if not isinstance(body, dict):
            raise TransportError("malformed response body: expected a JSON object")
        return raise_for_application_error(body)

    async def _send(self, endpoint: str, request: CallRequest, timeout: float) -> httpx.Response:
        async with self._client() as client:
            if self.mode == "body":
                logger.debug("POST %s function=%s", endpoint, request.function_name)
                return await client.post(
                    endpoint,
                    json=request.to_body(),
                    timeout=timeout,
                    follow_redirects=True,
                )
            url = request.query_url(endpoint)
            logger.debug("GET %s", url)
            return await client.get(url, timeout=timeout, follow_redirects=True)
