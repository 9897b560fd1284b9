"""Default ScriptInjector: fetch the callback script over HTTP in a background task."""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

import httpx

logger = logging.getLogger(__name__)


class HttpInjectedScript:
    """The injected artifact: a loading task, attached to its injector until removed."""

    def __init__(self, injector: HttpScriptInjector, url: str) -> None:
        self.url = url
        self._injector = injector
        self.task: asyncio.Task[None] | None = None

    @property
    def attached(self) -> bool:
        return self in self._injector.active

    def remove(self) -> None:
        if self.task is not None and not self.task.done():
            self.task.cancel()
        self._injector.detach(self)


class HttpScriptInjector:
    """
    inject() starts loading url and returns immediately. 2xx -> on_load(body text);
    any failure to load, or an exception from on_load, -> on_error(exc).
    Nothing is called after remove().
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self._http_client = http_client
        self._active: list[HttpInjectedScript] = []

    @property
    def active(self) -> list[HttpInjectedScript]:
        return list(self._active)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient() as client:
            yield client

    def inject(
        self,
        url: str,
        on_load: Callable[[str], None],
        on_error: Callable[[BaseException], None],
    ) -> HttpInjectedScript:
        script = HttpInjectedScript(self, url)
        self._active.append(script)
        script.task = asyncio.get_running_loop().create_task(self._load(script, on_load, on_error))
        return script

    def detach(self, script: HttpInjectedScript) -> None:
        if script in self._active:
            self._active.remove(script)
            logger.debug("Removed callback script %s", script.url)

    async def _load(
        self,
        script: HttpInjectedScript,
        on_load: Callable[[str], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        try:
            async with self._client() as client:
                response = await client.get(script.url, follow_redirects=True)
                response.raise_for_status()
        except Exception as e:
            if not isinstance(e, httpx.HTTPError):
                logger.warning("Loading callback script %s failed: %r", script.url, e)
            if script.attached:
                on_error(e)
            return
        if not script.attached:
            return
        try:
            on_load(response.text)
        except Exception as e:
            logger.warning("Callback script %s raised while executing: %r", script.url, e)
            on_error(e)
