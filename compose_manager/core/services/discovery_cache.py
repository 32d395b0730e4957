"""
Discovery cache — TTL-bounded, single-flight cache in front of the scanner.

Scanning the compose root walks the filesystem and parses YAML, so the
result is kept in memory for ``cache_ttl_seconds``.

Thread safety (double-checked locking):
    - Cache hits read the entry without taking any lock.
    - On a miss, one lock serializes scans. After acquiring it the
      entry is checked again: a caller that waited while another
      thread scanned gets that thread's result instead of scanning.
    - ``invalidate`` drops the entry without touching the lock.

Every invalidation (explicit or via ``bypass_cache``) bumps a
generation number. A scan only stores its result if the generation
it started under is still current, so an invalidation that lands
mid-scan is never overwritten by pre-invalidation data.

One instance per process, constructor-injected where needed; tests
build their own.
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from typing import Callable, NamedTuple

from compose_manager.adapters.base import ComposeScanner
from compose_manager.core.models.discovery import DiscoveredFile

logger = logging.getLogger(__name__)


class _Entry(NamedTuple):
    files: list[DiscoveredFile]
    expires_at: float


class DiscoveryCache:
    """Single-entry cache of the last compose scan.

    Args:
        scanner: The scanner to call on a miss.
        ttl_seconds: How long a scan result stays valid.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        scanner: ComposeScanner,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._scanner = scanner
        self._ttl = ttl_seconds
        self._clock = clock
        self._entry: _Entry | None = None
        self._scan_lock = threading.Lock()
        # next() on itertools.count is atomic, no lock needed
        self._generations = itertools.count(1)
        self._generation = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get_or_scan(self, bypass_cache: bool = False) -> list[DiscoveredFile]:
        """Return cached files, scanning the filesystem on a miss.

        Args:
            bypass_cache: Evict the entry first, forcing a fresh scan.

        Raises:
            Whatever the scanner raises. The cache stays empty so the
            next call retries.
        """
        if bypass_cache:
            self._drop_entry()
            logger.debug("Discovery cache bypassed, forcing refresh")

        cached = self._valid_entry()
        if cached is not None:
            logger.debug("Discovery cache HIT (%d files)", len(cached))
            return cached

        logger.debug("Discovery cache MISS, acquiring scan lock")
        with self._scan_lock:
            cached = self._valid_entry()
            if cached is not None:
                logger.debug("Discovery cache HIT after lock (filled by another caller)")
                return cached

            generation = self._generation
            logger.info("Starting compose file discovery scan")
            try:
                files = self._scanner.scan_compose_files()
            except Exception:
                logger.exception("Compose file discovery scan failed")
                raise

            # Store, then re-check: catches an invalidate racing with the store
            self._entry = _Entry(files, self._clock() + self._ttl)
            if generation != self._generation:
                self._entry = None
                logger.info(
                    "Discovery cache invalidated during scan; result not cached (%d files)",
                    len(files),
                )
                return files

            logger.info(
                "Discovery cache populated with %d files, TTL %ss", len(files), self._ttl
            )
            return files

    def invalidate(self) -> None:
        """Drop the cached scan. The next ``get_or_scan`` rescans under lock."""
        self._drop_entry()
        logger.info("Discovery cache invalidated")

    def _drop_entry(self) -> None:
        self._generation = next(self._generations)
        self._entry = None

    def _valid_entry(self) -> list[DiscoveredFile] | None:
        entry = self._entry  # single read; another thread may swap it
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            return None
        return entry.files
