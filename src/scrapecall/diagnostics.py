"""Troubleshooting hints for a Failure, classified from its kind and message. Presentation only."""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from scrapecall.rpc.result import Failure

_STATUS_RE = re.compile(r"status:?\s*(\d{3})", re.IGNORECASE)
_TIMEOUT_RE = re.compile(r"time(d)?\s*out", re.IGNORECASE)
_CONNECTIVITY_RE = re.compile(
    r"connect|network|refused|unreachable|dns|resolve|failed to load|name or service",
    re.IGNORECASE,
)

GENERAL_GUIDANCE = [
    "Make sure the endpoint URL is correct.",
    'Deploy the remote script as a web app with access set to "Anyone".',
    "Check that the spreadsheet ID in the remote script is set.",
]

GUIDANCE: dict[str, list[str]] = {
    "configuration": [
        "Set the endpoint first: scrapecall set-endpoint <URL>.",
        "The endpoint must be an absolute http:// or https:// URL.",
    ],
    "timeout": [
        "The endpoint did not answer in time; the target site may be slow.",
        "Retry later or raise the timeout with --timeout.",
    ],
    "http_status": GENERAL_GUIDANCE,
    "connectivity": [
        "Check your network connection and that the endpoint host resolves.",
        *GENERAL_GUIDANCE,
    ],
    "application": [
        "The endpoint rejected the request; check the input (for example the URL to scrape).",
    ],
    "validation": [
        "URLs must start with http:// or https://.",
    ],
    "unknown": GENERAL_GUIDANCE,
}


@dataclass(frozen=True)
class Diagnosis:
    category: str
    guidance: list[str] = field(default_factory=list)
    status_code: int | None = None


def classify(failure: Failure) -> tuple[str, int | None]:
    """(category, http status) for a failure. Explicit kinds win over message patterns."""
    if failure.kind in ("configuration", "application", "validation"):
        return failure.kind, None
    message = failure.error_message
    status = _STATUS_RE.search(message)
    if status:
        return "http_status", int(status.group(1))
    if failure.kind == "timeout" or _TIMEOUT_RE.search(message):
        return "timeout", None
    if failure.kind == "load" or _CONNECTIVITY_RE.search(message):
        return "connectivity", None
    return "unknown", None


def diagnose(failure: Failure) -> Diagnosis:
    category, status_code = classify(failure)
    return Diagnosis(category=category, guidance=list(GUIDANCE[category]), status_code=status_code)
