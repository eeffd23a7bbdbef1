"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from loguru import logger

DEFAULT_SETTINGS: dict[str, Any] = {
    "title": "Photo Gallery",
    "description": "A modern photo gallery",
    "darkMode": True,
    "primaryColor": "#ffffff",
    "secondaryColor": "#888888",
    "backgroundColor": "#0d0d0d",
    "enableSwipe": True,
    "enableClickNavigation": True,
    "photoQuality": "auto",
    "thumbnailSize": "medium",
    "photos_root": "photos",
    "base_url": "/photo-gallery/",
    "log_level": "INFO",
}


class JsonSettings:
    """JSON settings overlaid on `DEFAULT_SETTINGS`, with dotted-key access.

    A missing or unreadable settings file is not an error: the defaults apply.
    """

    def __init__(self, settings_path: str | Path | None = None) -> None:
        self._path = Path(settings_path) if settings_path is not None else None
        self._data: dict[str, Any] = copy.deepcopy(DEFAULT_SETTINGS)
        custom = self._load_custom()
        # Shallow overlay: custom top-level keys replace defaults wholesale.
        self._data.update(custom)

    def _load_custom(self) -> dict[str, Any]:
        if self._path is None:
            return {}
        if not self._path.exists():
            logger.info("Config file not found, using defaults: {}", self._path)
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as ex:
            logger.warning("Error loading config, using defaults: {}", ex)
            return {}
        if not isinstance(data, dict):
            logger.warning("Config root is not an object, using defaults: {}", self._path)
            return {}
        return data

    @property
    def path(self) -> Path | None:
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key, default)
        return value if isinstance(value, bool) else default

    def as_dict(self) -> dict[str, Any]:
        """Copy of the merged settings."""
        return copy.deepcopy(self._data)
