"""
App Cache: Persist the last scanned application list as JSON.

The cache is advisory. A missing or unreadable file is a cache miss and is
reported as CacheError so callers rescan instead of showing an empty list.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from xdg.BaseDirectory import xdg_data_home

from slayfi.models import Application

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = Path(xdg_data_home) / "slayfi" / "apps_cache.json"


class CacheError(Exception):
    """Raised when the cache cannot be read or decoded."""


class AppCache:
    """JSON file holding the application list of the last full scan."""

    def __init__(self, path=DEFAULT_CACHE_PATH):
        self.path = Path(path)

    def save(self, apps: List[Application]) -> None:
        """
        Write ``apps`` to the cache file, replacing any previous content.

        The list is written to a temporary file next to the cache and moved
        into place, so readers see either the old or the new list.

        Raises:
            OSError: when the directory or file cannot be written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps([app.to_dict() for app in apps])

        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def load(self) -> List[Application]:
        """
        Read the cached application list.

        Raises:
            CacheError: when the file is missing, unreadable or malformed
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as exc:
            raise CacheError(f"No cache file at {self.path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise CacheError(f"Cannot read cache file {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise CacheError(f"Deserialization error: {exc}") from exc

        if not isinstance(data, list):
            raise CacheError("Deserialization error: expected a JSON array")

        apps = []
        for index, record in enumerate(data):
            if not isinstance(record, dict):
                raise CacheError(f"Deserialization error: record {index} is not an object")
            try:
                apps.append(Application.from_dict(record))
            except (KeyError, TypeError) as exc:
                raise CacheError(f"Deserialization error: record {index}: {exc}") from exc
        return apps


def try_get_cached_applications(cache: AppCache) -> Optional[List[Application]]:
    """Return the cached list, or None on a cache miss (callers then rescan)."""
    try:
        apps = cache.load()
    except CacheError as exc:
        logger.error("Error while reading cached apps: %s", exc)
        return None
    logger.info("Successfully read %d cached applications", len(apps))
    return apps
