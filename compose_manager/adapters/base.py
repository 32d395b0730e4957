"""
Adapter base — the contracts between the discovery engine and the outside world.

The engine never shells out or walks the filesystem itself. It talks
to two collaborators through these interfaces:

    ComposeScanner        → compose files declared on disk
    LiveProjectProvider   → projects the container engine knows about

Unlike execution adapters, these DO raise: an infrastructure failure
(ScanError / QueryError) must reach the caller, which decides whether
to serve stale data or fail the request.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from compose_manager.core.models.discovery import DiscoveredFile
from compose_manager.core.models.project import LiveProject


class ScanError(Exception):
    """Raised when the compose root cannot be scanned."""


class QueryError(Exception):
    """Raised when the container engine cannot be queried."""


class ComposeScanner(ABC):
    """Source of compose files found on disk."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The scanner identifier (e.g., 'filesystem', 'mock')."""

    @abstractmethod
    def scan_compose_files(self) -> list[DiscoveredFile]:
        """Return every compose file under the configured root.

        Raises:
            ScanError: If the root itself is unusable.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class LiveProjectProvider(ABC):
    """Source of live projects (``docker compose ls -a`` + ``ps``)."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The provider identifier (e.g., 'docker', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tool is available. Fast, never raises."""

    @abstractmethod
    def query_live_projects(self) -> list[LiveProject]:
        """Return the projects currently known to the container engine.

        Raises:
            QueryError: If the engine cannot be reached.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
