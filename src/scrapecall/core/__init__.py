from scrapecall.core.config import ClientConfig

__all__ = [
    "ClientConfig",
]
