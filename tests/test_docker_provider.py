"""
Tests for the docker CLI provider — subprocess is patched out.
"""

import json
import subprocess
from unittest.mock import patch

import pytest

from compose_manager.adapters.base import QueryError
from compose_manager.adapters.containers.docker import (
    DockerProjectProvider,
    parse_config_files,
    parse_health,
    parse_ports,
)
from compose_manager.core.config.loader import DiscoveryConfig
from compose_manager.core.models.state import EntityState

RUN = "compose_manager.adapters.containers.docker.subprocess.run"
WHICH = "compose_manager.adapters.containers.docker.shutil.which"


def _proc(stdout: str = "", returncode: int = 0, stderr: str = ""):
    return subprocess.CompletedProcess(
        args=["docker"], returncode=returncode, stdout=stdout, stderr=stderr
    )


def _ls(*entries: dict) -> subprocess.CompletedProcess:
    return _proc(json.dumps(list(entries)))


def _ps(*containers: dict) -> subprocess.CompletedProcess:
    return _proc("\n".join(json.dumps(c) for c in containers))


def _container(name: str, state: str = "running", status: str = "Up 2 hours", ports: str = ""):
    return {
        "ID": f"id-{name}",
        "Names": name,
        "Image": "nginx:latest",
        "State": state,
        "Status": status,
        "Ports": ports,
    }


@pytest.fixture
def provider() -> DockerProjectProvider:
    return DockerProjectProvider(DiscoveryConfig(self_project_name="compose-manager"))


class TestQueryLiveProjects:
    def test_running_project(self, provider):
        responses = [
            _ls({"Name": "web", "Status": "running(2)",
                 "ConfigFiles": "/srv/web/docker-compose.yml"}),
            _ps(
                _container("web-app-1", ports="0.0.0.0:8080->80/tcp, :::8080->80/tcp"),
                _container("web-db-1", status="Up 2 hours (healthy)"),
            ),
        ]
        with patch(RUN, side_effect=responses) as run:
            projects = provider.query_live_projects()

        assert len(projects) == 1
        p = projects[0]
        assert p.name == "web"
        assert p.state == "Running"
        assert p.path == "/srv/web"
        assert p.config_file_paths == ["/srv/web/docker-compose.yml"]
        assert [s.name for s in p.services] == ["web-app-1", "web-db-1"]
        assert p.services[0].ports == ["8080:80"]
        assert p.services[1].health == "healthy"
        assert p.last_updated is not None

        ps_args = run.call_args_list[1].args[0]
        assert "label=com.docker.compose.project=web" in ps_args

    def test_degraded_from_services(self, provider):
        responses = [
            _ls({"Name": "web", "Status": "running(1), exited(1)", "ConfigFiles": ""}),
            _ps(_container("a"), _container("b", state="exited", status="Exited (1)")),
        ]
        with patch(RUN, side_effect=responses):
            assert provider.query_live_projects()[0].state == EntityState.DEGRADED.value

    def test_status_fallback_when_no_containers(self, provider):
        responses = [
            _ls({"Name": "web", "Status": "exited(2)", "ConfigFiles": ""}),
            _proc(""),
        ]
        with patch(RUN, side_effect=responses):
            p = provider.query_live_projects()[0]
        assert p.state == "Stopped"
        assert p.services == []
        assert p.path == ""

    def test_ps_failure_degrades_project_only(self, provider):
        responses = [
            _ls({"Name": "web", "Status": "running(1)", "ConfigFiles": ""}),
            _proc(returncode=1, stderr="boom"),
        ]
        with patch(RUN, side_effect=responses):
            p = provider.query_live_projects()[0]
        assert p.services == []
        assert p.state == "Running"

    def test_windows_config_files(self, provider):
        responses = [
            _ls({"Name": "web", "Status": "running(1)",
                 "ConfigFiles": "C:\\stacks\\web\\compose.yml,C:\\stacks\\web\\override.yml"}),
            _proc(""),
        ]
        with patch(RUN, side_effect=responses):
            p = provider.query_live_projects()[0]
        assert p.path == "C:\\stacks\\web"
        assert len(p.config_file_paths) == 2

    def test_self_project_filtered(self, provider):
        responses = [
            _ls({"Name": "Compose-Manager", "Status": "running(1)", "ConfigFiles": ""},
                {"Name": "web", "Status": "running(1)", "ConfigFiles": ""}),
            _proc(""),
            _proc(""),
        ]
        with patch(RUN, side_effect=responses):
            names = [p.name for p in provider.query_live_projects()]
        assert names == ["web"]

    def test_malformed_entries_skipped(self, provider):
        responses = [_proc(json.dumps([{"Status": "running(1)"}, "junk"]))]
        with patch(RUN, side_effect=responses):
            assert provider.query_live_projects() == []

    def test_empty_output(self, provider):
        with patch(RUN, return_value=_proc("")):
            assert provider.query_live_projects() == []


class TestQueryErrors:
    def test_nonzero_exit(self, provider):
        with patch(RUN, return_value=_proc(returncode=1, stderr="daemon not running")):
            with pytest.raises(QueryError, match="daemon not running"):
                provider.query_live_projects()

    def test_bad_json(self, provider):
        with patch(RUN, return_value=_proc("not json")):
            with pytest.raises(QueryError, match="Unparseable"):
                provider.query_live_projects()

    def test_not_a_list(self, provider):
        with patch(RUN, return_value=_proc('{"Name": "web"}')):
            with pytest.raises(QueryError):
                provider.query_live_projects()

    def test_docker_missing(self, provider):
        with patch(RUN, side_effect=FileNotFoundError()):
            with pytest.raises(QueryError, match="not installed"):
                provider.query_live_projects()

    def test_timeout(self, provider):
        with patch(RUN, side_effect=subprocess.TimeoutExpired(cmd="docker", timeout=30)):
            with pytest.raises(QueryError, match="timed out"):
                provider.query_live_projects()


class TestAvailability:
    def test_available_when_cli_on_path(self, provider):
        with patch(WHICH, return_value="/usr/bin/docker"):
            assert provider.is_available()

    def test_unavailable_without_cli(self, provider):
        with patch(WHICH, return_value=None) as which:
            assert not provider.is_available()
        which.assert_called_once_with("docker")


class TestParsers:
    def test_config_files(self):
        assert parse_config_files("/a.yml, /b.yml;/c.yml") == ["/a.yml", "/b.yml", "/c.yml"]
        assert parse_config_files("") == []

    def test_ports(self):
        raw = "0.0.0.0:8080->80/tcp, :::8080->80/tcp, 0.0.0.0:5432->5432/tcp, 9000/tcp"
        assert parse_ports(raw) == ["8080:80", "5432:5432"]
        assert parse_ports("") == []

    @pytest.mark.parametrize(
        "status, expected",
        [
            ("Up 1 hour (healthy)", "healthy"),
            ("Up 1 hour (unhealthy)", "unhealthy"),
            ("Up 5 seconds (health: starting)", "starting"),
            ("Up 1 hour", None),
        ],
    )
    def test_health(self, status, expected):
        assert parse_health(status) == expected
