"""Transport protocols: how a call is delivered is pluggable; the client only needs these."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from scrapecall.rpc.request import CallRequest


@runtime_checkable
class CallTransport(Protocol):
    """Deliver one CallRequest to endpoint and return the decoded response mapping."""

    async def call(self, endpoint: str, request: CallRequest, *, timeout: float) -> dict[str, Any]:
        ...


@runtime_checkable
class InjectedScript(Protocol):
    """Transient artifact created by a ScriptInjector; remove() detaches it."""

    url: str

    def remove(self) -> None:
        ...


@runtime_checkable
class ScriptInjector(Protocol):
    """
    Out-of-band delivery: load executable content from url.
    Exactly one of on_load(script_text) / on_error(exc) is called, unless the artifact is removed first.
    """

    def inject(
        self,
        url: str,
        on_load: Callable[[str], None],
        on_error: Callable[[BaseException], None],
    ) -> InjectedScript:
        ...
