"""
Discovery models — compose files found on disk and naming conflicts.

Both are recreated on every scan / resolution pass and never mutated.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DiscoveredFile(BaseModel):
    """One compose file found by the filesystem scanner."""

    model_config = ConfigDict(frozen=True)

    project_name: str
    file_path: str
    directory_path: str
    services: tuple[str, ...] = ()
    is_disabled: bool = False


class ConflictError(BaseModel):
    """Two or more active files claim the same project name.

    Not an exception: a recorded, user-visible data condition.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str
    conflicting_file_paths: list[str] = Field(default_factory=list)
    message: str = ""
    resolution_steps: list[str] = Field(default_factory=list)
