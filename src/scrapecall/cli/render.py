"""Plain-text rendering of a Result for the terminal."""
from __future__ import annotations

from scrapecall.diagnostics import diagnose
from scrapecall.rpc.result import Failure, ScrapeData, Success

LINK_PREVIEW = 3


def render_scrape(result: Success) -> list[str]:
    data = ScrapeData.from_dict(result.data)
    lines = [
        "Scraping succeeded!",
        f"URL: {data.url}",
        f"HTTP status: {data.status_code}",
        f"Title: {data.title or 'not found'}",
    ]
    if data.meta_description:
        lines.append(f"Meta description: {data.meta_description}")
    lines.append(f"Text preview: {data.text_preview}")
    if data.links:
        lines.append(f"Links found: {len(data.links)}")
        for link in data.links[:LINK_PREVIEW]:
            lines.append(f"  - {link.text or 'No text'} -> {link.url}")
        if len(data.links) > LINK_PREVIEW:
            lines.append(f"  ... and {len(data.links) - LINK_PREVIEW} more links")
    processed = result.processed_at()
    if processed is not None:
        lines.append(f"Processed at: {processed.astimezone().strftime('%Y-%m-%d %H:%M:%S')}")
    return lines


def render_failure(failure: Failure) -> list[str]:
    diagnosis = diagnose(failure)
    category = diagnosis.category
    if diagnosis.status_code is not None:
        category = f"{category} ({diagnosis.status_code})"
    lines = [
        "Error",
        f"Detail: {failure.error_message}",
        f"Category: {category}",
        "Troubleshooting:",
    ]
    lines.extend(f"  - {hint}" for hint in diagnosis.guidance)
    return lines
