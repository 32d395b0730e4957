"""
Path translator — host paths reported by Docker → paths readable here.

Docker reports compose file paths as the *host* sees them. This
process may see the same files under another mount point (typically
``/app/compose-files``), and the host may be Windows.

Translation, first success wins:

    1. Already under the local root        → returned unchanged
    2. Under the configured host mapping   → prefix swapped for the root
    3. Suffix probe: strip leading segments one at a time and test
       ``root/<suffix>`` on disk. This is a linear scan, O(path depth)
       filesystem checks per call.
    4. Nothing matched                     → None (treat as fileless)

Comparisons normalize separators to ``/`` and ignore case, since
Windows hosts report ``C:\\Users\\...``.
"""

from __future__ import annotations

import logging
import os
from typing import Callable

from compose_manager.core.config.loader import DiscoveryConfig

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Forward slashes, no trailing slash."""
    if not path:
        return ""
    normalized = path.replace("\\", "/")
    return normalized.rstrip("/") or normalized[:1]


def join_path(base: str, relative: str) -> str:
    base = normalize_path(base)
    relative = relative.replace("\\", "/").lstrip("/")
    if not relative:
        return base
    return f"{base.rstrip('/')}/{relative}"


def is_under(path: str, root: str) -> bool:
    """Case-insensitive prefix test on whole path segments."""
    path_key = normalize_path(path).lower()
    root_key = normalize_path(root).lower()
    if not root_key:
        return False
    if root_key == "/":
        return path_key.startswith("/")
    return path_key == root_key or path_key.startswith(root_key + "/")


class PathTranslator:
    """Translate host-side compose paths into local paths.

    Args:
        config: Supplies ``root_path`` and ``host_path_mapping``.
        file_exists: Existence check used by the suffix probe.
    """

    def __init__(
        self,
        config: DiscoveryConfig,
        file_exists: Callable[[str], bool] = os.path.isfile,
    ):
        self._root = config.root_path
        self._mapping = config.host_path_mapping or None
        self._file_exists = file_exists

    @property
    def root_path(self) -> str:
        return self._root

    @property
    def host_path_mapping(self) -> str | None:
        return self._mapping

    def translate(self, host_path: str) -> str | None:
        """Return the local path for ``host_path``, or None if unknown."""
        if not host_path or not host_path.strip():
            return None

        if is_under(host_path, self._root):
            return host_path

        if self._mapping and is_under(host_path, self._mapping):
            relative = normalize_path(host_path)[len(normalize_path(self._mapping)):]
            local = join_path(self._root, relative)
            logger.debug("Translated host path %s -> %s", host_path, local)
            return local

        local = self._probe_suffixes(host_path)
        if local is not None:
            logger.debug("Auto-detected path mapping %s -> %s", host_path, local)
            return local

        logger.debug(
            "Could not translate host path %s; consider setting host_path_mapping",
            host_path,
        )
        return None

    def _probe_suffixes(self, host_path: str) -> str | None:
        parts = [p for p in normalize_path(host_path).split("/") if p]
        for start in range(1, len(parts)):
            candidate = join_path(self._root, "/".join(parts[start:]))
            if self._file_exists(candidate):
                return candidate
        return None
