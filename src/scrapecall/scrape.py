"""
ScrapeService: the two remote functions the scraper endpoint exposes.
scrape() -> scrapeAndSave, test_connection() -> testConnection. Both go through RemoteCallClient.invoke().
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from scrapecall.rpc.client import RemoteCallClient
from scrapecall.rpc.request import is_http_url
from scrapecall.rpc.result import Failure, Result

logger = logging.getLogger(__name__)

SCRAPE_FUNCTION = "scrapeAndSave"
TEST_CONNECTION_FUNCTION = "testConnection"


@dataclass
class ScrapeOptions:
    extract_title: bool = True
    extract_meta: bool = True
    extract_links: bool = True

    def to_payload(self) -> dict[str, bool]:
        return {
            "extractTitle": self.extract_title,
            "extractMeta": self.extract_meta,
            "extractLinks": self.extract_links,
        }


class ScrapeService:
    def __init__(self, client: RemoteCallClient) -> None:
        self.client = client

    async def scrape(self, url: str, options: ScrapeOptions | None = None) -> Result:
        """Validate url locally, then ask the endpoint to scrape and store it."""
        url = (url or "").strip()
        if not url:
            return Failure("enter the URL of the website to scrape", kind="validation")
        if not is_http_url(url):
            return Failure(
                "invalid URL format: it must start with http:// or https://",
                kind="validation",
            )
        payload: dict[str, Any] = {"url": url, "options": (options or ScrapeOptions()).to_payload()}
        return await self.client.invoke(SCRAPE_FUNCTION, payload)

    async def test_connection(self) -> Result:
        result = await self.client.invoke(TEST_CONNECTION_FUNCTION, {})
        if result.ok:
            logger.info("Connection to %s OK", self.client.get_endpoint())
        return result
