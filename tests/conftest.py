"""
Shared test fixtures and configuration.
"""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from compose_manager.core.config.loader import DiscoveryConfig
from compose_manager.core.models.discovery import DiscoveredFile
from compose_manager.core.models.project import LiveProject

ROOT = "/app/compose-files"
STAMP = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def make_file(
    name: str,
    path: str | None = None,
    *,
    services: tuple[str, ...] = ("app",),
    disabled: bool = False,
) -> DiscoveredFile:
    """A DiscoveredFile under the default root (``<root>/<name>/docker-compose.yml``)."""
    file_path = path or f"{ROOT}/{name}/docker-compose.yml"
    return DiscoveredFile(
        project_name=name,
        file_path=file_path,
        directory_path=file_path.rpartition("/")[0],
        services=services,
        is_disabled=disabled,
    )


def make_live(
    name: str,
    state: str = "Running",
    config_files: list[str] | None = None,
    **kwargs,
) -> LiveProject:
    return LiveProject(
        name=name,
        state=state,
        config_file_paths=config_files or [],
        last_updated=STAMP,
        **kwargs,
    )


@pytest.fixture
def config() -> DiscoveryConfig:
    """Default discovery config."""
    return DiscoveryConfig()


@pytest.fixture
def compose_root(tmp_path: Path) -> Path:
    """An empty compose root directory."""
    root = tmp_path / "compose-files"
    root.mkdir()
    return root
