"""
Project models — live projects from Docker and the reconciled view.

``LiveProject`` is what the container engine reports.
``UnifiedProject`` is the contract the reconciliation engine exists
to produce: one record per project name, with file availability,
warnings and the legal-operations map attached.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from compose_manager.core.models.state import EntityState


class Service(BaseModel):
    """A container (or a declared-but-absent service) of a project."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    image: str | None = None
    state: EntityState = EntityState.UNKNOWN
    status: str = ""
    ports: list[str] = Field(default_factory=list)
    health: str | None = None


class LiveProject(BaseModel):
    """One project as reported by the container engine.

    ``config_file_paths`` are host-side paths and may need translation
    before they can be read locally.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    state: str = ""
    path: str = ""
    config_file_paths: list[str] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)
    last_updated: datetime | None = None


class UnifiedProject(BaseModel):
    """The reconciled record for one project name."""

    name: str
    path: str = ""
    state: EntityState = EntityState.UNKNOWN
    services: list[Service] = Field(default_factory=list)
    compose_files: list[str] = Field(default_factory=list)
    compose_file_path: str | None = None
    has_compose_file: bool = False
    warning: str | None = None
    available_actions: dict[str, bool] = Field(default_factory=dict)
    last_updated: datetime | None = None

    def to_dict(self) -> dict:
        """JSON-serializable dictionary."""
        return self.model_dump(mode="json")
