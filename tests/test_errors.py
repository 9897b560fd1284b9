"""Tests for the remote call error taxonomy.

Tests cover:
- Transient vs permanent classification (decides fallback)
- Error codes used as Failure.kind
- CallTimeoutError is also a builtin TimeoutError
"""

import pytest
from scrapecall.errors import (
    ApplicationError,
    CallTimeoutError,
    ConfigurationError,
    PermanentCallError,
    RemoteCallError,
    TransientCallError,
    TransportError,
    TransportLoadError,
)


class TestClassification:
    """Which errors allow the fallback transport."""

    @pytest.mark.parametrize("cls", [TransportError, TransportLoadError, CallTimeoutError])
    def test_transient(self, cls):
        assert issubclass(cls, TransientCallError)
        assert not issubclass(cls, PermanentCallError)

    @pytest.mark.parametrize("cls", [ConfigurationError, ApplicationError])
    def test_permanent(self, cls):
        assert issubclass(cls, PermanentCallError)
        assert not issubclass(cls, TransientCallError)

    def test_all_are_remote_call_errors(self):
        for cls in (TransportError, TransportLoadError, CallTimeoutError, ConfigurationError, ApplicationError):
            assert issubclass(cls, RemoteCallError)


class TestCodes:
    def test_codes(self):
        assert ConfigurationError("x").code == "configuration"
        assert ApplicationError("x").code == "application"
        assert TransportError("x").code == "transport"
        assert TransportLoadError("x").code == "load"
        assert CallTimeoutError().code == "timeout"

    def test_code_override(self):
        error = RemoteCallError("boom", code="custom")
        assert error.code == "custom"
        assert error.message == "boom"
        assert str(error) == "boom"

    def test_transport_error_keeps_status(self):
        error = TransportError("HTTP error! status: 502", status_code=502)
        assert error.status_code == 502
        assert TransportError("refused").status_code is None


class TestTimeout:
    def test_default_message(self):
        assert CallTimeoutError().message == "timeout"
        assert str(CallTimeoutError()) == "timeout"

    def test_caught_as_builtin_timeout(self):
        with pytest.raises(TimeoutError):
            raise CallTimeoutError()
