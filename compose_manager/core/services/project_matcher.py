"""
Project matcher — reconcile live Docker projects with compose files on disk.

Produces one ``UnifiedProject`` per project name:

    - every live project, enriched with its compose file when one is found
    - every remaining discovered file, synthesized as ``NotStarted``

A live project is paired with a file by the first strategy that hits:

    1. by_name           project name == file's project name (case-insensitive)
    2. by_translated_path  a reported config path, run through the
                           PathTranslator, is a discovered file path
    3. by_file_and_dir   same file name and same parent directory name
                           as the first reported config path

The strategies are plain functions tried in order; the order is a
contract (a name match always beats a path match).

The matcher is a pure snapshot reducer: it holds no state between
calls and the same inputs give the same output (``last_updated``
comes from the inputs, not the clock).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Callable

from compose_manager.core.models.discovery import DiscoveredFile
from compose_manager.core.models.project import LiveProject, Service, UnifiedProject
from compose_manager.core.models.state import EntityState
from compose_manager.core.services.action_classifier import compute_actions
from compose_manager.core.services.path_translator import PathTranslator, normalize_path

logger = logging.getLogger(__name__)

NO_FILE_WARNING = "No compose file found for this project"
DISABLED_WARNING = "Project is disabled (x-disabled: true)"


# ═══════════════════════════════════════════════════════════════════
#  Index
# ═══════════════════════════════════════════════════════════════════


def _path_key(path: str) -> str:
    return normalize_path(path).lower()


def _base_name(path: str) -> str:
    return normalize_path(path).rpartition("/")[2]


def _parent_dir_name(path: str) -> str | None:
    """Name of the directory holding ``path`` (either separator style)."""
    normalized = normalize_path(path)
    head, sep, _ = normalized.rpartition("/")
    if not sep or not head:
        return None
    return head.rpartition("/")[2] or None


@dataclass
class FileIndex:
    """Lookups over the resolved discovered files for one reconcile pass."""

    files: list[DiscoveredFile]
    translate: Callable[[str], str | None]
    by_name: dict[str, DiscoveredFile] = field(default_factory=dict)
    by_path: dict[str, DiscoveredFile] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        files: list[DiscoveredFile],
        translate: Callable[[str], str | None],
    ) -> FileIndex:
        index = cls(files=list(files), translate=translate)
        for f in index.files:
            # First file wins on a case-insensitive name clash
            index.by_name.setdefault(f.project_name.lower(), f)
            index.by_path.setdefault(_path_key(f.file_path), f)
        return index


# ═══════════════════════════════════════════════════════════════════
#  Strategies
# ═══════════════════════════════════════════════════════════════════


def match_by_name(live: LiveProject, index: FileIndex) -> DiscoveredFile | None:
    return index.by_name.get(live.name.lower())


def match_by_translated_path(live: LiveProject, index: FileIndex) -> DiscoveredFile | None:
    for host_path in live.config_file_paths:
        local = index.translate(host_path)
        if local is None:
            continue
        found = index.by_path.get(_path_key(local))
        if found is not None:
            return found
    return None


def match_by_file_and_dir(live: LiveProject, index: FileIndex) -> DiscoveredFile | None:
    if not live.config_file_paths:
        return None
    first = live.config_file_paths[0]
    file_name = _base_name(first).lower()
    dir_name = (_parent_dir_name(first) or "").lower()
    if not file_name or not dir_name:
        return None

    for candidate in index.files:
        if (
            _base_name(candidate.file_path).lower() == file_name
            and _base_name(candidate.directory_path).lower() == dir_name
        ):
            return candidate
    return None


Strategy = Callable[[LiveProject, FileIndex], DiscoveredFile | None]

STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("name", match_by_name),
    ("translated path", match_by_translated_path),
    ("file+directory", match_by_file_and_dir),
)


# ═══════════════════════════════════════════════════════════════════
#  Matcher
# ═══════════════════════════════════════════════════════════════════


class ProjectMatcher:
    """Combine live projects and resolved discovered files.

    Args:
        translator: Host → local path translation.
        file_exists: Existence check for the last-resort recovery.
    """

    def __init__(
        self,
        translator: PathTranslator,
        file_exists: Callable[[str], bool] = os.path.isfile,
    ):
        self._translator = translator
        self._file_exists = file_exists

    def reconcile(
        self,
        live_projects: list[LiveProject],
        discovered_files: list[DiscoveredFile],
    ) -> list[UnifiedProject]:
        """Build the unified project list. Live order is preserved."""
        index = FileIndex.build(discovered_files, self._translator.translate)
        unmatched: dict[str, DiscoveredFile] = {_path_key(f.file_path): f for f in index.files}

        result: list[UnifiedProject] = []
        seen: set[str] = set()

        for live in live_projects:
            if live.name.lower() in seen:
                logger.warning("Duplicate live project '%s' ignored", live.name)
                continue
            seen.add(live.name.lower())

            matched = self._find_match(live, index)
            if matched is not None:
                unmatched.pop(_path_key(matched.file_path), None)
                result.append(_enrich(live, matched))
            else:
                result.append(self._without_match(live))

        not_started = 0
        for f in unmatched.values():
            if f.project_name.lower() in seen:
                logger.warning(
                    "Compose file %s hidden: project name '%s' differs only in case "
                    "from a project already listed",
                    f.file_path, f.project_name,
                )
                continue
            seen.add(f.project_name.lower())
            result.append(_not_started(f))
            not_started += 1

        logger.debug(
            "Unified project list: %d projects (%d live, %d not started)",
            len(result), len(result) - not_started, not_started,
        )
        return result

    def _find_match(self, live: LiveProject, index: FileIndex) -> DiscoveredFile | None:
        for label, strategy in STRATEGIES:
            try:
                found = strategy(live, index)
            except (OSError, ValueError) as e:
                logger.warning(
                    "Matching '%s' by %s failed: %s", live.name, label, e
                )
                continue
            if found is not None:
                logger.debug(
                    "Matched '%s' by %s: %s", live.name, label, found.file_path
                )
                return found
        return None

    def _without_match(self, live: LiveProject) -> UnifiedProject:
        """Last resort: the first reported path may still be readable here."""
        compose_file_path: str | None = None
        if live.config_file_paths:
            try:
                local = self._translator.translate(live.config_file_paths[0])
                if local is not None and self._file_exists(local):
                    compose_file_path = local
            except (OSError, ValueError) as e:
                logger.warning("Cannot recover compose path for '%s': %s", live.name, e)

        has_file = compose_file_path is not None
        if has_file:
            logger.debug("Using translated Docker path for '%s': %s", live.name, compose_file_path)
        else:
            logger.warning(
                "No compose file found for project '%s'. Docker paths: [%s]",
                live.name, ", ".join(live.config_file_paths),
            )

        state = EntityState.parse(live.state)
        return UnifiedProject(
            name=live.name,
            path=live.path,
            state=state,
            services=list(live.services),
            compose_files=list(live.config_file_paths),
            compose_file_path=compose_file_path,
            has_compose_file=has_file,
            warning=None if has_file else NO_FILE_WARNING,
            available_actions=compute_actions(has_file, state),
            last_updated=live.last_updated,
        )


def _enrich(live: LiveProject, matched: DiscoveredFile) -> UnifiedProject:
    # Docker's services carry real container ids; placeholders only when empty
    services = list(live.services) or [
        Service(id=f"{live.name}_{name}", name=name, state=EntityState.UNKNOWN)
        for name in matched.services
    ]
    state = EntityState.parse(live.state)
    return UnifiedProject(
        name=live.name,
        path=live.path or matched.directory_path,
        state=state,
        services=services,
        compose_files=list(live.config_file_paths),
        compose_file_path=matched.file_path,
        has_compose_file=True,
        warning=None,
        available_actions=compute_actions(True, state),
        last_updated=live.last_updated,
    )


def _not_started(f: DiscoveredFile) -> UnifiedProject:
    return UnifiedProject(
        name=f.project_name,
        path=f.directory_path,
        state=EntityState.NOT_STARTED,
        services=[
            Service(id=f"{f.project_name}_{name}", name=name, state=EntityState.NOT_STARTED)
            for name in f.services
        ],
        compose_files=[f.file_path],
        compose_file_path=f.file_path,
        has_compose_file=True,
        warning=DISABLED_WARNING if f.is_disabled else None,
        available_actions=compute_actions(True, EntityState.NOT_STARTED),
        last_updated=None,
    )
