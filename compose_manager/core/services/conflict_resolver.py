"""
Conflict resolver — at most one authoritative compose file per project name.

Files are grouped by ``project_name`` (exact, case-sensitive) and each
group is sorted by path, then:

    1 file                → kept, whatever its x-disabled flag
    N files, 1 active     → the active one is kept, disabled siblings dropped
    N files, 0 active     → nothing kept; project unavailable (logged only)
    N files, 2+ active    → nothing kept; ConflictError recorded

Errors are recomputed on every ``resolve`` call and read back through
``conflict_errors()``.
"""

from __future__ import annotations

import logging
from itertools import groupby

from compose_manager.core.models.discovery import ConflictError, DiscoveredFile

logger = logging.getLogger(__name__)


class ConflictResolver:
    """Collapse duplicate project names into one file (or none)."""

    def __init__(self) -> None:
        self._errors: list[ConflictError] = []

    def resolve(self, files: list[DiscoveredFile]) -> list[DiscoveredFile]:
        """Return the authoritative files; record conflicts for later retrieval."""
        resolved: list[DiscoveredFile] = []
        errors: list[ConflictError] = []

        ordered = sorted(files, key=lambda f: (f.project_name, f.file_path))
        for project_name, group_iter in groupby(ordered, key=lambda f: f.project_name):
            group = list(group_iter)

            if len(group) == 1:
                resolved.append(group[0])
                continue

            active = [f for f in group if not f.is_disabled]

            if len(active) == 1:
                logger.debug(
                    "Project '%s' has %d files (%d disabled), using %s",
                    project_name, len(group), len(group) - 1, active[0].file_path,
                )
                resolved.append(active[0])
            elif not active:
                logger.warning(
                    "Project '%s' has %d files but all are disabled; it will not be available",
                    project_name, len(group),
                )
            else:
                paths = [f.file_path for f in active]
                logger.error(
                    "Project '%s' has %d active files. Add 'x-disabled: true' to the ones to ignore: %s",
                    project_name, len(active), ", ".join(paths),
                )
                errors.append(_conflict(project_name, paths))

        # Swap in one assignment; readers never see a half-built list
        self._errors = errors
        return resolved

    def conflict_errors(self) -> list[ConflictError]:
        """Conflicts found by the most recent ``resolve`` call."""
        return list(self._errors)


def _conflict(project_name: str, paths: list[str]) -> ConflictError:
    return ConflictError(
        project_name=project_name,
        conflicting_file_paths=paths,
        message=(
            f"Multiple active compose files found for project '{project_name}'. "
            "Mark unused files with 'x-disabled: true'."
        ),
        resolution_steps=[
            "Open each conflicting compose file",
            "Add 'x-disabled: true' at the root level of files you want to ignore",
            f"Keep only one file active for project '{project_name}'",
            "Wait for the discovery cache to expire or refresh it",
        ],
    )
