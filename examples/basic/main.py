"""
Minimal usage: scrape one URL, print the result or the troubleshooting hints.
Endpoint from SCRAPECALL_ENDPOINT (or pass ClientConfig(endpoint=...)).
"""
import asyncio
import logging
import sys

from scrapecall import ClientConfig, RemoteCallClient, ScrapeOptions, ScrapeService
from scrapecall.diagnostics import diagnose
from scrapecall.rpc.result import ScrapeData


async def main(url: str) -> int:
    client = RemoteCallClient(ClientConfig.load_from_env())
    service = ScrapeService(client)

    result = await service.scrape(url, ScrapeOptions(extract_links=False))
    if result.ok:
        data = ScrapeData.from_dict(result.data)
        print(f"{data.url} [{data.status_code}] {data.title or '-'}")
        print(data.text_preview)
        return 0

    print(f"failed: {result.error_message}")
    for hint in diagnose(result).guidance:
        print(f"  - {hint}")
    return 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "https://example.com")))
