"""
Discovery engine — the public face of project discovery.

Wires the pieces together for one request:

    provider.is_available()                   fail fast when the CLI is missing
    provider.query_live_projects()            live containers (Docker)
    cache.get_or_scan()                       compose files (filesystem, cached)
      → resolver.resolve()                    one file per project name
      → matcher.reconcile()                   UnifiedProject[]

Upstream failures (QueryError / ScanError) are not caught here: the
caller decides whether to retry, serve stale data or fail.
"""

from __future__ import annotations

import logging

from compose_manager.adapters.base import ComposeScanner, LiveProjectProvider, QueryError
from compose_manager.core.config.loader import DiscoveryConfig
from compose_manager.core.models.discovery import ConflictError, DiscoveredFile
from compose_manager.core.models.project import UnifiedProject
from compose_manager.core.services.conflict_resolver import ConflictResolver
from compose_manager.core.services.discovery_cache import DiscoveryCache
from compose_manager.core.services.path_translator import PathTranslator
from compose_manager.core.services.project_matcher import ProjectMatcher

logger = logging.getLogger(__name__)


class DiscoveryEngine:
    """Unified compose project view over Docker and the compose root.

    All collaborators are injected; ``build_engine`` wires the real ones.
    """

    def __init__(
        self,
        provider: LiveProjectProvider,
        cache: DiscoveryCache,
        resolver: ConflictResolver,
        matcher: ProjectMatcher,
    ):
        self._provider = provider
        self._cache = cache
        self._resolver = resolver
        self._matcher = matcher

    def get_unified_projects(self, bypass_cache: bool = False) -> list[UnifiedProject]:
        """Reconciled project list.

        Args:
            bypass_cache: Rescan the compose root instead of using the cache.

        Raises:
            QueryError: Docker is not available or could not be queried.
            ScanError: The compose root could not be scanned.
        """
        if not self._provider.is_available():
            raise QueryError(
                f"Live project provider '{self._provider.name}' is not available "
                "(is the CLI installed?)"
            )
        live = self._provider.query_live_projects()
        files = self.get_discovered_files(bypass_cache=bypass_cache)
        projects = self._matcher.reconcile(live, files)
        logger.info(
            "Discovered %d project(s): %d live, %d compose file(s), %d conflict(s)",
            len(projects), len(live), len(files), len(self._resolver.conflict_errors()),
        )
        return projects

    def get_discovered_files(self, bypass_cache: bool = False) -> list[DiscoveredFile]:
        """Scan (or reuse the cache) and resolve name conflicts. No Docker access."""
        return self._resolver.resolve(self._cache.get_or_scan(bypass_cache=bypass_cache))

    def get_conflict_errors(self) -> list[ConflictError]:
        """Conflicts found by the latest resolution pass."""
        return self._resolver.conflict_errors()

    def invalidate_discovery_cache(self) -> None:
        self._cache.invalidate()


def build_engine(
    config: DiscoveryConfig,
    *,
    scanner: ComposeScanner | None = None,
    provider: LiveProjectProvider | None = None,
) -> DiscoveryEngine:
    """Wire an engine from config, defaulting to the filesystem and docker adapters."""
    if scanner is None:
        from compose_manager.adapters.files.compose_scanner import FilesystemComposeScanner

        scanner = FilesystemComposeScanner(config)
    if provider is None:
        from compose_manager.adapters.containers.docker import DockerProjectProvider

        provider = DockerProjectProvider(config)

    translator = PathTranslator(config)
    return DiscoveryEngine(
        provider=provider,
        cache=DiscoveryCache(scanner, ttl_seconds=config.cache_ttl_seconds),
        resolver=ConflictResolver(),
        matcher=ProjectMatcher(translator),
    )
