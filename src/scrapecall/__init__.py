"""
scrapecall: resilient client for a remote scraping function.
RemoteCallClient.invoke() tries a direct request, falls back to a callback (JSONP-style) delivery
on transport failure, and always returns a Result.
"""
from scrapecall.core import ClientConfig
from scrapecall.errors import (
    ApplicationError,
    CallTimeoutError,
    ConfigurationError,
    RemoteCallError,
    TransportError,
    TransportLoadError,
)
from scrapecall.rpc import Failure, RemoteCallClient, Result, Success
from scrapecall.scrape import ScrapeOptions, ScrapeService

__all__ = [
    "ApplicationError",
    "CallTimeoutError",
    "ClientConfig",
    "ConfigurationError",
    "Failure",
    "RemoteCallClient",
    "RemoteCallError",
    "Result",
    "ScrapeOptions",
    "ScrapeService",
    "Success",
    "TransportError",
    "TransportLoadError",
]
