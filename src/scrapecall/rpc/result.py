"""
Result of a remote call: Success or Failure, never an exception.
Also the typed view of a scrape response and the error-indicator check shared by both transports.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Union

from scrapecall.errors import ApplicationError, RemoteCallError


# Error envelope: {"error": "..."} or {"error": {"code": "...", "message": "..."}} or {"success": false}
def raise_for_application_error(response: dict[str, Any]) -> dict[str, Any]:
    """Return response unchanged unless it carries an explicit error indicator."""
    err = response.get("error")
    if err:
        if isinstance(err, dict):
            raise ApplicationError(str(err.get("message", err)))
        raise ApplicationError(str(err))
    if response.get("success") is False:
        raise ApplicationError("remote call failed")
    return response


@dataclass(frozen=True)
class Success:
    data: dict[str, Any]
    timestamp: Any = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    ok = True

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> Success:
        data = response.get("data")
        return cls(
            data=data if isinstance(data, dict) else {},
            timestamp=response.get("timestamp"),
            raw=dict(response),
        )

    def processed_at(self) -> datetime | None:
        """timestamp as a datetime: epoch milliseconds or ISO 8601 string."""
        ts = self.timestamp
        if isinstance(ts, bool) or ts is None:
            return None
        if isinstance(ts, (int, float)):
            return datetime.fromtimestamp(ts / 1000, tz=timezone.utc)
        if isinstance(ts, str):
            try:
                return datetime.fromisoformat(ts.replace("Z", "+00:00"))
            except ValueError:
                return None
        return None


@dataclass(frozen=True)
class Failure:
    error_message: str
    kind: str = "error"

    ok = False

    @classmethod
    def from_error(cls, error: RemoteCallError) -> Failure:
        return cls(error_message=error.message, kind=error.code)


Result = Union[Success, Failure]


@dataclass(frozen=True)
class Link:
    text: str
    url: str


@dataclass(frozen=True)
class ScrapeData:
    """Fields of a scrapeAndSave response's data."""

    url: str
    status_code: int | None
    text_preview: str = ""
    title: str | None = None
    meta_description: str | None = None
    links: list[Link] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScrapeData:
        links = [
            Link(text=str(item.get("text") or ""), url=str(item.get("url") or ""))
            for item in data.get("links") or []
            if isinstance(item, dict)
        ]
        return cls(
            url=str(data.get("url", "")),
            status_code=data.get("statusCode"),
            text_preview=str(data.get("textPreview") or ""),
            title=data.get("title") or None,
            meta_description=data.get("metaDescription") or None,
            links=links,
        )
