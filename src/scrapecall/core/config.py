"""Single client config object: pass it to RemoteCallClient(config=...) or load it from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any

from scrapecall.errors import ConfigurationError

DEFAULT_TIMEOUT = 30.0
DEFAULT_CALLBACK_PREFIX = "scrapecall_cb_"
DIRECT_MODES = ("body", "query")


def _convert_env_value(value: str, default: Any) -> Any:
    """Convert an env string to the type of the field's default."""
    if isinstance(default, bool):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ConfigurationError(f"expected a boolean, got {value!r}")
    if isinstance(default, float):
        try:
            return float(value)
        except ValueError as e:
            raise ConfigurationError(f"expected a number, got {value!r}") from e
    return value.strip()


@dataclass
class ClientConfig:
    """
    endpoint: remote function URL (may be set later via client.set_endpoint).
    timeout: seconds per transport attempt; the fallback gets a fresh budget.
    fallback: retry transport-level failures through the callback transport.
    direct_mode: "body" (JSON POST) or "query" (GET with query parameters).
    """

    endpoint: str = ""
    timeout: float = DEFAULT_TIMEOUT
    fallback: bool = True
    direct_mode: str = "body"
    callback_prefix: str = DEFAULT_CALLBACK_PREFIX

    def __post_init__(self) -> None:
        if self.direct_mode not in DIRECT_MODES:
            raise ConfigurationError(
                f"unknown direct mode {self.direct_mode!r}, expected one of {DIRECT_MODES}"
            )
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout!r}")

    @classmethod
    def load_from_env(cls, prefix: str = "SCRAPECALL_", **overrides: Any) -> ClientConfig:
        """
        Build from os.environ: SCRAPECALL_ENDPOINT, SCRAPECALL_TIMEOUT, SCRAPECALL_FALLBACK,
        SCRAPECALL_DIRECT_MODE, SCRAPECALL_CALLBACK_PREFIX. Keyword overrides win over env.
        """
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = os.environ.get(prefix + f.name.upper())
            if raw is not None:
                values[f.name] = _convert_env_value(raw, f.default)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
