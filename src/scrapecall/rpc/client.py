"""
RemoteCallClient: invoke(function_name, payload) -> Result.
Direct transport first; transport-level failures fall back once to the callback transport.
Errors never escape invoke(): every outcome is normalized into Success or Failure.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

from scrapecall.core.config import ClientConfig
from scrapecall.errors import RemoteCallError, TransientCallError
from scrapecall.rpc.callback import CallbackRegistry, CallbackTransport
from scrapecall.rpc.direct import HttpDirectTransport
from scrapecall.rpc.protocol import CallTransport
from scrapecall.rpc.request import CallRequest, validate_endpoint
from scrapecall.rpc.result import Failure, Result, Success

logger = logging.getLogger(__name__)


class RemoteCallClient:
    """
    Facade over the two transports. direct / callback may be replaced by any CallTransport;
    callback=None together with config.fallback=False gives a direct-only client.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        direct: CallTransport | None = None,
        callback: CallTransport | None = None,
    ) -> None:
        self.config = config if config is not None else ClientConfig()
        self.direct = direct if direct is not None else HttpDirectTransport(self.config.direct_mode)
        if callback is None and self.config.fallback:
            callback = CallbackTransport(registry=CallbackRegistry(self.config.callback_prefix))
        self.callback = callback

    def set_endpoint(self, url: str) -> None:
        self.config.endpoint = (url or "").strip()

    def get_endpoint(self) -> str:
        return self.config.endpoint

    async def invoke(self, function_name: str, payload: Mapping[str, Any] | None = None) -> Result:
        """Call function_name on the endpoint. Always returns a Result."""
        request = CallRequest(function_name, dict(payload or {}))
        try:
            response = await self._call(request)
        except RemoteCallError as e:
            logger.warning("Remote call %s failed (%s): %s", function_name, e.code, e.message)
            return Failure.from_error(e)
        except Exception as e:
            logger.exception("Unexpected error during remote call %s", function_name)
            return Failure(error_message=str(e) or e.__class__.__name__, kind="internal")
        return Success.from_response(response)

    async def _call(self, request: CallRequest) -> dict[str, Any]:
        endpoint = validate_endpoint(self.config.endpoint)
        logger.info("Calling remote function %s", request.function_name)
        try:
            return await self.direct.call(endpoint, request, timeout=self.config.timeout)
        except TransientCallError as e:
            if not self.config.fallback or self.callback is None:
                raise
            logger.info("Direct call failed (%s), trying callback transport: %s", e.code, e.message)
        return await self.callback.call(endpoint, request, timeout=self.config.timeout)
