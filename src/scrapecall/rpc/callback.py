"""
Callback transport: the response is delivered out of band by invoking a uniquely named handler.

The request carries callback=<id>; the remote side answers with a script <id>(<json>).
Executing that script dispatches the payload through the CallbackRegistry to the PendingCall
registered under <id>. Each attempt owns its PendingCall; a late or duplicate delivery finds
no handler and is dropped.
"""
from __future__ import annotations

import asyncio
import itertools
import json
import logging
import re
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from scrapecall.core.config import DEFAULT_CALLBACK_PREFIX
from scrapecall.errors import CallTimeoutError, RemoteCallError, TransportLoadError
from scrapecall.rpc.injector import HttpScriptInjector
from scrapecall.rpc.protocol import InjectedScript, ScriptInjector
from scrapecall.rpc.request import CallRequest
from scrapecall.rpc.result import raise_for_application_error

logger = logging.getLogger(__name__)

_SCRIPT_RE = re.compile(
    r"^\s*(?:/\*\*/)?\s*(?:typeof\s+[\w$.]+\s*===?\s*['\"]function['\"]\s*&&\s*)?"
    r"([A-Za-z_$][\w$.]*)\s*\((.*)\)\s*;?\s*$",
    re.DOTALL,
)


def parse_callback_script(script: str) -> tuple[str, Any]:
    """Split '<name>(<json>);' into (name, payload). Raises ValueError if it is not that shape."""
    match = _SCRIPT_RE.match(script)
    if match is None:
        raise ValueError("not a callback invocation")
    name, argument = match.group(1), match.group(2).strip()
    return name, json.loads(argument) if argument else None


class CallbackRegistry:
    """Id -> handler map owned by one transport. Ids come from a monotonic counter."""

    def __init__(self, prefix: str = DEFAULT_CALLBACK_PREFIX) -> None:
        self.prefix = prefix
        self._counter = itertools.count()
        self._handlers: dict[str, Callable[[Any], Any]] = {}

    def next_id(self) -> str:
        return f"{self.prefix}{next(self._counter)}"

    def register(self, callback_id: str, handler: Callable[[Any], Any]) -> None:
        if callback_id in self._handlers:
            raise KeyError(f"callback {callback_id!r} already registered")
        self._handlers[callback_id] = handler

    def unregister(self, callback_id: str) -> None:
        self._handlers.pop(callback_id, None)

    def dispatch(self, callback_id: str, payload: Any) -> bool:
        """Invoke the handler for callback_id. False if nothing is registered under it."""
        handler = self._handlers.get(callback_id)
        if handler is None:
            logger.debug("Dropped delivery for unknown callback %s", callback_id)
            return False
        handler(payload)
        return True

    def __contains__(self, callback_id: object) -> bool:
        return callback_id in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def ids(self) -> list[str]:
        return list(self._handlers)


class PendingCall:
    """One in-flight callback attempt. The first of resolve/reject wins; the rest are ignored."""

    def __init__(self, callback_id: str, future: asyncio.Future[Any]) -> None:
        self.id = callback_id
        self.future = future
        self._timer: asyncio.TimerHandle | None = None

    @property
    def settled(self) -> bool:
        return self.future.done()

    def resolve(self, payload: Any) -> bool:
        if self.future.done():
            logger.debug("Late response for settled callback %s ignored", self.id)
            return False
        self.future.set_result(payload)
        return True

    def reject(self, error: BaseException) -> bool:
        if self.future.done():
            logger.debug("Late %s for settled callback %s ignored", error.__class__.__name__, self.id)
            return False
        self.future.set_exception(error)
        return True

    def arm(self, timeout: float) -> None:
        loop = self.future.get_loop()
        self._timer = loop.call_later(timeout, self.reject, CallTimeoutError())

    def disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @property
    def armed(self) -> bool:
        return self._timer is not None


class CallbackTransport:
    """
    Fallback transport. injector performs the delivery (HttpScriptInjector by default).
    Timer, registry entry and injected artifact are released on every exit path.
    """

    def __init__(
        self,
        injector: ScriptInjector | None = None,
        registry: CallbackRegistry | None = None,
    ) -> None:
        self.injector = injector if injector is not None else HttpScriptInjector()
        self.registry = registry if registry is not None else CallbackRegistry()

    @contextmanager
    def _pending(self, timeout: float) -> Iterator[PendingCall]:
        pending = PendingCall(self.registry.next_id(), asyncio.get_running_loop().create_future())
        self.registry.register(pending.id, pending.resolve)
        pending.arm(timeout)
        try:
            yield pending
        finally:
            pending.disarm()
            self.registry.unregister(pending.id)
            if not pending.settled:
                pending.future.cancel()

    async def call(self, endpoint: str, request: CallRequest, *, timeout: float) -> dict[str, Any]:
        with self._pending(timeout) as pending:
            url = request.query_url(endpoint, callback=pending.id)
            logger.debug("Injecting callback script %s", url)
            script: InjectedScript | None = None
            try:
                script = self.injector.inject(
                    url,
                    on_load=lambda text: self._execute(text, pending),
                    on_error=lambda exc: pending.reject(_load_error(exc)),
                )
                response = await pending.future
            finally:
                if script is not None:
                    script.remove()

        if not isinstance(response, dict):
            raise TransportLoadError("malformed callback payload: expected a JSON object")
        return raise_for_application_error(response)

    def _execute(self, script: str, pending: PendingCall) -> None:
        try:
            name, payload = parse_callback_script(script)
        except (ValueError, RecursionError) as e:
            pending.reject(TransportLoadError(f"callback script could not be executed: {e}"))
            return
        self.registry.dispatch(name, payload)
        if not pending.settled:
            # script called some other function; nothing will ever resolve this call
            pending.reject(TransportLoadError(f"callback script invoked {name!r}, expected {pending.id!r}"))


def _load_error(exc: BaseException) -> RemoteCallError:
    if isinstance(exc, RemoteCallError):
        return exc
    return TransportLoadError(f"callback script failed to load: {exc}")
