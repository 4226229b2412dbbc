"""Directory cache for installed build trees.

Entries are keyed ``<tool>-<project>-<fingerprint>`` and hold a copy of the
project's install prefix. A hit lets the driver skip fetching and building
the project entirely.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
import time
from dataclasses import asdict, dataclass, field
from typing import Optional

from constants import Constants

logger = logging.getLogger(__name__)

_META_FILE = "cache-entry.json"
_PAYLOAD_DIR = "payload"


def make_cache_key(project: str, state_hash: str) -> str:
    """Cache key for ``project`` built with fingerprint ``state_hash``."""
    return f"{Constants.TOOL_NAME}-{project}-{state_hash}"


@dataclass
class CacheEntry:
    """Metadata stored alongside a cached install tree."""

    key: str
    source: str
    created_at: float = field(default_factory=time.time)


class BuildCache:
    """Cache of install trees below ``cache_dir``.

    Saves go through a temporary directory and a rename so an interrupted
    save never leaves a half-written entry behind.
    """

    def __init__(self, cache_dir: str):
        """Initialize the build cache.

        Args:
            cache_dir: Directory holding one sub-directory per key.
        """
        self.cache_dir = cache_dir

    def _entry_dir(self, key: str) -> str:
        return os.path.join(self.cache_dir, key)

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the entry metadata for ``key``, or None if absent."""
        meta_path = os.path.join(self._entry_dir(key), _META_FILE)
        if not os.path.isfile(meta_path):
            return None
        try:
            with open(meta_path, encoding="utf-8") as fh:
                return CacheEntry(**json.load(fh))
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Ignoring unreadable cache entry %s: %s", key, exc)
            return None

    def restore(self, key: str, destination: str) -> bool:
        """Copy the cached tree for ``key`` into ``destination``.

        Returns:
            True on a cache hit, False when nothing is cached under ``key``.
        """
        if self.get(key) is None:
            logger.info("No match found in cache for %s.", key)
            return False
        if os.path.isdir(destination):
            shutil.rmtree(destination)
        shutil.copytree(os.path.join(self._entry_dir(key), _PAYLOAD_DIR), destination)
        logger.info("Restored %s from cache.", key)
        return True

    def save(self, key: str, source: str) -> CacheEntry:
        """Store a copy of ``source`` under ``key``, replacing any previous entry."""
        os.makedirs(self.cache_dir, exist_ok=True)
        staging = tempfile.mkdtemp(prefix=f".{key}-", dir=self.cache_dir)
        entry = CacheEntry(key=key, source=source)
        try:
            shutil.copytree(source, os.path.join(staging, _PAYLOAD_DIR))
            with open(os.path.join(staging, _META_FILE), "w", encoding="utf-8") as fh:
                json.dump(asdict(entry), fh)
            self.invalidate(key)
            os.replace(staging, self._entry_dir(key))
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise
        logger.info("Saved %s to cache.", key)
        return entry

    def invalidate(self, key: str) -> None:
        """Remove the entry for ``key`` if present."""
        shutil.rmtree(self._entry_dir(key), ignore_errors=True)
