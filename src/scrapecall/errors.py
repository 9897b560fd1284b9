"""
Error classes for remote calls.

Classification decides whether the fallback transport is tried:
- TransientCallError: environment or connectivity failure, the other transport may still get through
- PermanentCallError: deterministic failure, retrying over another transport cannot change it

None of these escape RemoteCallClient.invoke(); they are normalized into Failure(kind=code).
"""
from __future__ import annotations


class RemoteCallError(Exception):
    """Base error. code is a short machine-readable kind, message is caller-facing."""

    code = "error"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(message)


class TransientCallError(RemoteCallError):
    """Safe to try the fallback transport."""


class PermanentCallError(RemoteCallError):
    """Returned to the caller as-is."""


class ConfigurationError(PermanentCallError):
    """Endpoint missing or malformed, or invalid client settings. No transport is attempted."""

    code = "configuration"


class ApplicationError(PermanentCallError):
    """The endpoint answered and explicitly reported failure."""

    code = "application"


class TransportError(TransientCallError):
    """Connection refused, non-2xx status or a body that is not a JSON object."""

    code = "transport"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportLoadError(TransportError):
    """The callback delivery itself could not be loaded (DNS, HTTP error, unparsable script)."""

    code = "load"


class CallTimeoutError(TransientCallError, TimeoutError):
    """No settlement within the timeout budget."""

    code = "timeout"

    def __init__(self, message: str = "timeout") -> None:
        super().__init__(message)
