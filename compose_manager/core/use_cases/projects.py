"""
Project use cases — load config, run discovery, package the result.

Each function returns a result dataclass with ``to_dict()``; errors
are reported in ``result.error`` instead of raised, so the CLI can
render them (or emit them as JSON) uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from compose_manager.adapters.base import QueryError, ScanError
from compose_manager.core.config.loader import ConfigError, DiscoveryConfig, load_config
from compose_manager.core.engine.discovery import DiscoveryEngine, build_engine
from compose_manager.core.models.discovery import ConflictError
from compose_manager.core.models.project import UnifiedProject


@dataclass
class ProjectsResult:
    """Unified project list plus the conflicts seen while building it."""

    projects: list[UnifiedProject] = field(default_factory=list)
    conflicts: list[ConflictError] = field(default_factory=list)
    error: str | None = None

    @property
    def running_count(self) -> int:
        return sum(1 for p in self.projects if p.state.is_running_like)

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "projects": [p.to_dict() for p in self.projects],
            "conflicts": [c.model_dump(mode="json") for c in self.conflicts],
        }


@dataclass
class ConflictsResult:
    conflicts: list[ConflictError] = field(default_factory=list)
    files_resolved: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "files_resolved": self.files_resolved,
            "conflicts": [c.model_dump(mode="json") for c in self.conflicts],
        }


def list_projects(
    config_path: Path | None = None,
    *,
    refresh: bool = False,
    engine: DiscoveryEngine | None = None,
) -> ProjectsResult:
    """Run a full discovery pass (Docker + compose root)."""
    result = ProjectsResult()
    try:
        engine = engine or build_engine(load_config(config_path))
        result.projects = engine.get_unified_projects(bypass_cache=refresh)
        result.conflicts = engine.get_conflict_errors()
    except (ConfigError, QueryError, ScanError) as e:
        result.error = str(e)
    return result


def check_conflicts(
    config_path: Path | None = None,
    *,
    refresh: bool = False,
    engine: DiscoveryEngine | None = None,
) -> ConflictsResult:
    """Scan the compose root and report duplicate project names. No Docker access."""
    result = ConflictsResult()
    try:
        engine = engine or build_engine(load_config(config_path))
        result.files_resolved = len(engine.get_discovered_files(bypass_cache=refresh))
        result.conflicts = engine.get_conflict_errors()
    except (ConfigError, ScanError) as e:
        result.error = str(e)
    return result


def show_config(config_path: Path | None = None) -> tuple[DiscoveryConfig | None, str | None]:
    """Effective configuration (file + env), or the loading error."""
    try:
        return load_config(config_path), None
    except ConfigError as e:
        return None, str(e)
