"""Persisted CLI settings (the endpoint) in a JSON file under the user's app dir."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import typer

logger = logging.getLogger(__name__)

APP_NAME = "scrapecall"
CONFIG_DIR_ENV = "SCRAPECALL_CONFIG_DIR"


def config_path() -> Path:
    """$SCRAPECALL_CONFIG_DIR/config.json, else config.json in typer's app dir."""
    directory = os.environ.get(CONFIG_DIR_ENV) or typer.get_app_dir(APP_NAME)
    return Path(directory) / "config.json"


class EndpointStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or config_path()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Ignoring unreadable config file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> str:
        return str(self._read().get("endpoint") or "")

    def save(self, endpoint: str) -> None:
        data = self._read()
        data["endpoint"] = endpoint.strip()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
