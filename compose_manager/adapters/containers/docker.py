"""
Docker adapter — live compose projects from the docker CLI.

Uses the docker CLI — never the Docker API directly:

    docker compose ls --all --format json
        → one entry per project: Name, Status ("running(2)"), ConfigFiles
    docker ps -a --filter label=com.docker.compose.project=<name> --format '{{json .}}'
        → one JSON line per container of that project

A failure of ``compose ls`` is a QueryError. A failure listing the
containers of one project only degrades that project (no services).
"""

from __future__ import annotations

import json
import logging
import ntpath
import posixpath
import re
import shutil
import subprocess
from datetime import UTC, datetime

from compose_manager.adapters.base import LiveProjectProvider, QueryError
from compose_manager.core.config.loader import DiscoveryConfig
from compose_manager.core.models.project import LiveProject, Service
from compose_manager.core.models.state import (
    EntityState,
    determine_state_from_services,
    map_compose_status,
)

logger = logging.getLogger(__name__)

PROJECT_LABEL = "com.docker.compose.project"

# "0.0.0.0:8080->80/tcp" / ":::8080->80/tcp"
_PORT_RE = re.compile(r":(\d+)->(\d+)/")


class DockerProjectProvider(LiveProjectProvider):
    """Live projects as reported by ``docker compose ls -a`` and ``docker ps``."""

    def __init__(self, config: DiscoveryConfig):
        self._self_project = (config.self_project_name or "").lower()
        self._timeout = config.docker_timeout_seconds

    @property
    def name(self) -> str:
        return "docker"

    def is_available(self) -> bool:
        return shutil.which("docker") is not None

    def query_live_projects(self) -> list[LiveProject]:
        result = self._docker("compose", "ls", "--all", "--format", "json")
        if result.returncode != 0:
            raise QueryError(
                result.stderr.strip() or f"docker compose ls failed (exit {result.returncode})"
            )

        output = result.stdout.strip()
        if not output:
            logger.debug("No compose projects reported by Docker")
            return []

        try:
            entries = json.loads(output)
        except json.JSONDecodeError as e:
            raise QueryError(f"Unparseable docker compose ls output: {e}") from e
        if not isinstance(entries, list):
            raise QueryError("Unexpected docker compose ls output: expected a JSON array")

        projects: list[LiveProject] = []
        for entry in entries:
            project = self._build_project(entry)
            if project is None:
                continue
            if self._self_project and project.name.lower() == self._self_project:
                logger.debug("Filtering out own project '%s'", project.name)
                continue
            projects.append(project)

        logger.debug("Docker reported %d compose project(s)", len(projects))
        return projects

    # ── Per project ─────────────────────────────────────────────

    def _build_project(self, entry: object) -> LiveProject | None:
        if not isinstance(entry, dict) or not entry.get("Name"):
            logger.warning("Skipping malformed compose ls entry: %r", entry)
            return None

        name = str(entry["Name"])
        raw_status = str(entry.get("Status") or "")
        config_files = parse_config_files(str(entry.get("ConfigFiles") or ""))

        services = self._project_services(name)
        state = (
            determine_state_from_services(services)
            if services
            else map_compose_status(raw_status)
        )

        return LiveProject(
            name=name,
            state=state.value,
            path=_directory_of(config_files[0]) if config_files else "",
            config_file_paths=config_files,
            services=services,
            last_updated=datetime.now(UTC),
        )

    def _project_services(self, project_name: str) -> list[Service]:
        try:
            result = self._docker(
                "ps", "-a",
                "--filter", f"label={PROJECT_LABEL}={project_name}",
                "--format", "{{json .}}",
            )
        except QueryError as e:
            logger.warning("Cannot list containers for %s: %s", project_name, e)
            return []

        if result.returncode != 0:
            logger.warning(
                "docker ps failed for %s: %s", project_name, result.stderr.strip()
            )
            return []

        services: list[Service] = []
        for line in result.stdout.strip().splitlines():
            if not line.strip():
                continue
            try:
                info = json.loads(line)
            except json.JSONDecodeError:
                continue
            status = info.get("Status", "") or ""
            services.append(Service(
                id=info.get("ID", ""),
                name=_first_name(info.get("Names", "")),
                image=info.get("Image") or None,
                state=EntityState.parse(info.get("State")),
                status=status,
                ports=parse_ports(info.get("Ports", "")),
                health=parse_health(status),
            ))
        return services

    # ── Helpers ─────────────────────────────────────────────────

    def _docker(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run a docker command; missing binary or timeout is a QueryError."""
        try:
            return subprocess.run(
                ["docker", *args],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as e:
            raise QueryError("Docker CLI not installed") from e
        except subprocess.TimeoutExpired as e:
            raise QueryError(f"docker {args[0]} timed out after {self._timeout}s") from e


def parse_config_files(raw: str) -> list[str]:
    """Split the ConfigFiles column (comma or semicolon separated)."""
    return [p.strip() for p in re.split(r"[,;]", raw) if p.strip()]


def parse_ports(raw: str) -> list[str]:
    """Published ports as ``"public:private"``, deduplicated (IPv4/IPv6 repeat)."""
    ports: list[str] = []
    for public, private in _PORT_RE.findall(raw or ""):
        mapping = f"{public}:{private}"
        if mapping not in ports:
            ports.append(mapping)
    return ports


def parse_health(status: str) -> str | None:
    if "(healthy)" in status:
        return "healthy"
    if "(unhealthy)" in status:
        return "unhealthy"
    if "(health:" in status:
        return "starting"
    return None


def _first_name(names: str) -> str:
    return names.split(",")[0].strip().lstrip("/")


def _directory_of(path: str) -> str:
    # Host paths may be Windows paths
    if "\\" in path:
        return ntpath.dirname(path)
    return posixpath.dirname(path)
