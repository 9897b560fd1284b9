"""CallRequest and its two wire encodings: query parameters and JSON body."""
from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from scrapecall.errors import ConfigurationError


def encode_value(value: Any) -> str:
    """Wire form of one payload value: structured values as compact JSON, scalars as strings."""
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, (bool, dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def cache_buster() -> str:
    return str(int(time.time() * 1000))


RESERVED_PARAMS = ("function", "callback", "_t")


@dataclass
class CallRequest:
    """One remote function invocation: name + payload mapping."""

    function_name: str
    payload: dict[str, Any] = field(default_factory=dict)

    def to_query_params(self, *, callback: str | None = None, nonce: str | None = None) -> dict[str, str]:
        """function=<name>, one parameter per payload key, optional callback, _t nonce."""
        reserved = sorted(set(self.payload).intersection(RESERVED_PARAMS))
        if reserved:
            raise ConfigurationError(f"payload keys clash with request parameters: {', '.join(reserved)}")
        params = {"function": self.function_name}
        for key, value in self.payload.items():
            params[key] = encode_value(value)
        if callback is not None:
            params["callback"] = callback
        params["_t"] = nonce if nonce is not None else cache_buster()
        return params

    def to_body(self) -> dict[str, Any]:
        return {"function": self.function_name, "data": self.payload}

    def query_url(self, endpoint: str, *, callback: str | None = None, nonce: str | None = None) -> str:
        """Endpoint with request parameters merged in; existing same-named parameters are replaced."""
        try:
            url = httpx.URL(endpoint)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"invalid endpoint URL: {endpoint!r}") from e
        return str(url.copy_merge_params(self.to_query_params(callback=callback, nonce=nonce)))


def is_http_url(value: str) -> bool:
    """Absolute http(s) URL with a host."""
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL:
        return False
    return url.scheme in ("http", "https") and bool(url.host)


def validate_endpoint(endpoint: str | None) -> str:
    """Return the stripped endpoint or raise ConfigurationError."""
    endpoint = (endpoint or "").strip()
    if not endpoint:
        raise ConfigurationError("endpoint not configured")
    if not is_http_url(endpoint):
        raise ConfigurationError(f"invalid endpoint URL: {endpoint!r}")
    return endpoint
