"""
Mock adapters — in-memory test doubles for the scanner and the provider.

Both return whatever they were configured with, record every call,
and can be told to fail. Used by the test suite and for wiring the
engine without Docker or a compose root.
"""

from __future__ import annotations

import threading
import time

from compose_manager.adapters.base import (
    ComposeScanner,
    LiveProjectProvider,
    QueryError,
    ScanError,
)
from compose_manager.core.models.discovery import DiscoveredFile
from compose_manager.core.models.project import LiveProject


class MockScanner(ComposeScanner):
    """Scanner returning a fixed list of files.

    Args:
        files: Files to return from every scan.
        delay: Seconds to sleep inside each scan (for concurrency tests).
    """

    def __init__(
        self,
        files: list[DiscoveredFile] | None = None,
        delay: float = 0.0,
    ):
        self._files = list(files or [])
        self._delay = delay
        self._error: Exception | None = None
        self._lock = threading.Lock()
        self._call_count = 0

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_count(self) -> int:
        """Number of times scan_compose_files has been called."""
        return self._call_count

    def set_files(self, files: list[DiscoveredFile]) -> None:
        self._files = list(files)

    def set_failure(self, error: Exception | None = None) -> None:
        """Make the next scans raise (``None`` restores normal behavior)."""
        self._error = error

    def scan_compose_files(self) -> list[DiscoveredFile]:
        # Snapshot before the delay, like a walk that reads early and parses late
        files = list(self._files)
        error = self._error
        with self._lock:
            self._call_count += 1
        if self._delay:
            time.sleep(self._delay)
        if error is not None:
            raise error
        return files

    def fail_with_scan_error(self, message: str = "Mock scan failure") -> None:
        self.set_failure(ScanError(message))


class MockProjectProvider(LiveProjectProvider):
    """Provider returning a fixed list of live projects."""

    def __init__(
        self,
        projects: list[LiveProject] | None = None,
        available: bool = True,
    ):
        self._projects = list(projects or [])
        self._available = available
        self._error: Exception | None = None
        self._call_count = 0

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_count(self) -> int:
        return self._call_count

    def is_available(self) -> bool:
        return self._available

    def set_projects(self, projects: list[LiveProject]) -> None:
        self._projects = list(projects)

    def set_failure(self, message: str = "Mock query failure") -> None:
        """Make the next queries raise QueryError."""
        self._error = QueryError(message)

    def query_live_projects(self) -> list[LiveProject]:
        self._call_count += 1
        if self._error is not None:
            raise self._error
        return list(self._projects)
