"""
Filesystem compose scanner — finds compose files under the compose root.

Walks ``root_path`` recursively (bounded by ``scan_depth_limit``),
parses every ``.yml`` / ``.yaml`` file with PyYAML and keeps the ones
that look like compose files: a mapping with a non-empty ``services``
mapping. Unresolved ``${VARS}`` are left for Docker Compose to expand.

Project name derivation, in order:
    1. top-level ``name:``
    2. the parent directory name
    3. ``<dir>-<stem>`` when the file has a non-standard stem that
       differs from the directory name (``web/staging.yml`` → ``web-staging``)
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

import yaml

from compose_manager.adapters.base import ComposeScanner, ScanError
from compose_manager.core.config.loader import DiscoveryConfig
from compose_manager.core.models.discovery import DiscoveredFile

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yml", ".yaml"}

# Stems that take their project name from the directory
_STANDARD_STEMS = {"docker-compose", "compose"}

# Dependency / build folders that never hold managed projects
_EXCLUDED_DIRS = {
    "node_modules", ".git", ".svn", ".hg", "vendor", "__pycache__",
    ".venv", "venv", "bin", "obj", ".vs", ".idea", "packages",
    "target", "dist", "build", ".next", ".nuxt", "coverage", ".cache",
}


class FilesystemComposeScanner(ComposeScanner):
    """Recursive compose file scanner over the configured root."""

    def __init__(self, config: DiscoveryConfig):
        self._root = Path(config.root_path)
        self._max_depth = config.scan_depth_limit
        self._max_bytes = config.max_file_size_kb * 1024

    @property
    def name(self) -> str:
        return "filesystem"

    def scan_compose_files(self) -> list[DiscoveredFile]:
        if not self._root.is_dir():
            raise ScanError(f"Compose root is not a directory: {self._root}")

        t0 = time.monotonic()
        logger.info("Scanning compose files under %s", self._root)

        try:
            # Probe readability up front so an unusable root is an error,
            # not an empty result
            with os.scandir(self._root) as it:
                next(it, None)
        except OSError as e:
            raise ScanError(f"Cannot read compose root {self._root}: {e}") from e

        found: list[DiscoveredFile] = []
        self._scan_dir(self._root, 0, found)
        found.sort(key=lambda f: f.file_path)

        logger.info(
            "Compose scan finished in %.0fms: %d file(s)",
            (time.monotonic() - t0) * 1000,
            len(found),
        )
        return found

    def parse_compose_file(self, path: Path) -> DiscoveredFile | None:
        """Validate and parse one file; None if it is not a usable compose file."""
        try:
            size = path.stat().st_size
        except OSError as e:
            logger.warning("Cannot stat %s: %s", path, e)
            return None

        if size > self._max_bytes:
            logger.warning(
                "Compose file exceeds size limit: %s (%d KB > %d KB)",
                path, size // 1024, self._max_bytes // 1024,
            )
            return None

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            logger.debug("Not valid YAML: %s (%s)", path, e)
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", path, e)
            return None
        except Exception as e:
            # Constructor errors (bad timestamps, deep nesting) are not YAMLError
            logger.warning("Failed to parse %s: %s", path, e)
            return None

        if not isinstance(data, dict):
            return None

        services = data.get("services")
        if not isinstance(services, dict) or not services:
            logger.debug("No services in %s, skipping", path)
            return None

        return DiscoveredFile(
            project_name=_project_name(data, path),
            file_path=str(path),
            directory_path=str(path.parent),
            services=tuple(str(k) for k in services),
            is_disabled=_is_disabled(data),
        )

    # ── Walk ────────────────────────────────────────────────────

    def _scan_dir(self, directory: Path, depth: int, found: list[DiscoveredFile]) -> None:
        if depth > self._max_depth:
            logger.debug("Depth limit %d reached at %s", self._max_depth, directory)
            return

        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except PermissionError:
            logger.warning("Access denied to directory: %s", directory)
            return
        except OSError as e:
            logger.error("Error scanning directory %s: %s", directory, e)
            return

        subdirs: list[Path] = []
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    if entry.name.lower() in _EXCLUDED_DIRS:
                        logger.debug("Skipping excluded directory: %s", entry.path)
                        continue
                    subdirs.append(Path(entry.path))
                elif entry.is_file() and Path(entry.name).suffix.lower() in _YAML_SUFFIXES:
                    parsed = self.parse_compose_file(Path(entry.path))
                    if parsed is not None:
                        found.append(parsed)
            except OSError as e:
                logger.warning("Skipping %s: %s", entry.path, e)

        for sub in subdirs:
            self._scan_dir(sub, depth + 1, found)


# ── Field extraction ────────────────────────────────────────────


def _project_name(data: dict, path: Path) -> str:
    declared = data.get("name")
    if declared is not None and str(declared).strip():
        return str(declared).strip()
    return default_project_name(path)


def default_project_name(path: Path) -> str:
    """Project name Docker Compose would derive from the file location."""
    stem = path.stem
    dir_name = path.parent.name
    if not dir_name:
        return stem
    if stem.lower() not in _STANDARD_STEMS and stem.lower() != dir_name.lower():
        return f"{dir_name}-{stem}"
    return dir_name


def _is_disabled(data: dict) -> bool:
    value = data.get("x-disabled")
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False
