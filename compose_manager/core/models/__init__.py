"""
Domain models — Pydantic types for compose project discovery.

All models are re-exported here for convenient access:

    from compose_manager.core.models import DiscoveredFile, LiveProject, UnifiedProject
"""

from compose_manager.core.models.discovery import ConflictError, DiscoveredFile
from compose_manager.core.models.project import LiveProject, Service, UnifiedProject
from compose_manager.core.models.state import (
    EntityState,
    determine_state_from_services,
    map_compose_status,
)

__all__ = [
    # discovery.py
    "ConflictError",
    "DiscoveredFile",
    # state.py
    "EntityState",
    # project.py
    "LiveProject",
    "Service",
    "UnifiedProject",
    "determine_state_from_services",
    "map_compose_status",
]
