"""
File-backed TTL cache.

One JSON file per key under a cache directory, each holding
``{"data": ..., "expiresAt": <epoch ms>}``. Expired entries are removed
lazily on the next read; there is no background sweep.

The cache is an optimization only. Every operation swallows storage errors
and degrades to a miss or a no-op so a broken cache never aborts a render.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any

from hud import timeutil

DEFAULT_CACHE_DIR = Path("/tmp/claude-statusline-cache")

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_-]")

logger = logging.getLogger(__name__)


def sanitize_key(key: str) -> str:
    """Map a cache key onto a safe file stem (no separators, no dots)."""
    return _UNSAFE_KEY_CHARS.sub("-", str(key))


class TTLCache:
    """Expiring key/value store persisted as small JSON files."""

    def __init__(self, cache_dir: Path | str | None = None):
        self._cache_dir = Path(cache_dir) if cache_dir is not None else DEFAULT_CACHE_DIR
        self._usable = True

    @property
    def directory(self) -> Path:
        return self._cache_dir

    def initialize(self) -> None:
        """Create the cache directory. Safe to call repeatedly."""
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            self._usable = True
        except OSError as e:
            logger.debug("Cache directory %s unusable: %s", self._cache_dir, e)
            self._usable = False

    def path_for(self, key: str) -> Path:
        return self._cache_dir / f"{sanitize_key(key)}.json"

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing, corrupt or expired."""
        if not self._usable:
            return None

        path = self.path_for(key)
        try:
            entry = json.loads(path.read_text())
        except (OSError, ValueError):
            return None

        if not isinstance(entry, dict):
            return None
        expires_at = entry.get("expiresAt")
        if not isinstance(expires_at, (int, float)) or timeutil.now_ms() >= expires_at:
            self.delete(key)
            return None

        return entry.get("data")

    def set(self, key: str, data: Any, ttl_seconds: float) -> None:
        """Store a value that expires ``ttl_seconds`` from now."""
        if not self._usable:
            return

        entry = {
            "data": data,
            "expiresAt": timeutil.now_ms() + int(ttl_seconds * 1000),
        }
        path = self.path_for(key)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", dir=self._cache_dir, prefix=f".{path.stem}.", suffix=".tmp", delete=False
            ) as f:
                tmp_name = f.name
                json.dump(entry, f)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            logger.debug("Cache write failed for %s: %s", key, e)
            if tmp_name:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink()
        except OSError:
            pass

    def clear(self) -> None:
        """Remove every entry in the cache directory."""
        try:
            entries = list(self._cache_dir.glob("*.json"))
        except OSError:
            return
        for path in entries:
            try:
                path.unlink()
            except OSError:
                pass
