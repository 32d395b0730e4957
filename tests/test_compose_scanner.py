"""
Tests for the filesystem compose scanner.
"""

import textwrap
from pathlib import Path

import pytest

from compose_manager.adapters.base import ScanError
from compose_manager.adapters.files.compose_scanner import (
    FilesystemComposeScanner,
    default_project_name,
)
from compose_manager.core.config.loader import DiscoveryConfig

WEB = textwrap.dedent("""\
    services:
      app:
        image: nginx
      db:
        image: postgres
""")


def _write(root: Path, rel: str, content: str = WEB) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def _scanner(root: Path, **kwargs) -> FilesystemComposeScanner:
    return FilesystemComposeScanner(DiscoveryConfig(root_path=str(root), **kwargs))


class TestScan:
    def test_finds_compose_files(self, compose_root: Path):
        path = _write(compose_root, "web/docker-compose.yml")
        files = _scanner(compose_root).scan_compose_files()
        assert len(files) == 1
        f = files[0]
        assert f.project_name == "web"
        assert f.file_path == str(path)
        assert f.directory_path == str(path.parent)
        assert f.services == ("app", "db")
        assert f.is_disabled is False

    def test_sorted_by_path(self, compose_root: Path):
        _write(compose_root, "zeta/compose.yaml")
        _write(compose_root, "alpha/docker-compose.yml")
        names = [f.project_name for f in _scanner(compose_root).scan_compose_files()]
        assert names == ["alpha", "zeta"]

    def test_declared_name_wins(self, compose_root: Path):
        _write(compose_root, "web/docker-compose.yml", "name: shop\n" + WEB)
        assert _scanner(compose_root).scan_compose_files()[0].project_name == "shop"

    def test_x_disabled(self, compose_root: Path):
        _write(compose_root, "a/docker-compose.yml", "x-disabled: true\n" + WEB)
        _write(compose_root, "b/docker-compose.yml", "x-disabled: 'True'\n" + WEB)
        _write(compose_root, "c/docker-compose.yml", "x-disabled: false\n" + WEB)
        flags = [f.is_disabled for f in _scanner(compose_root).scan_compose_files()]
        assert flags == [True, True, False]

    def test_skips_non_compose_yaml(self, compose_root: Path):
        _write(compose_root, "ci/.gitlab-ci.yml", "stages: [build]\n")
        _write(compose_root, "empty/docker-compose.yml", "services: {}\n")
        _write(compose_root, "list/docker-compose.yml", "- a\n")
        _write(compose_root, "broken/docker-compose.yml", "services: [unclosed\n")
        _write(compose_root, "web/notes.txt", WEB)
        assert _scanner(compose_root).scan_compose_files() == []

    def test_unconstructible_yaml_skipped(self, compose_root: Path):
        # Timestamp-shaped scalar that PyYAML fails to build (ValueError)
        _write(compose_root, "notes/release.yml", "released: 2024-13-01\n")
        _write(compose_root, "web/docker-compose.yml")
        files = _scanner(compose_root).scan_compose_files()
        assert [f.project_name for f in files] == ["web"]

    def test_excluded_directories(self, compose_root: Path):
        _write(compose_root, "node_modules/pkg/docker-compose.yml")
        _write(compose_root, "web/.git/docker-compose.yml")
        _write(compose_root, "Vendor/x/docker-compose.yml")
        _write(compose_root, "web/docker-compose.yml")
        files = _scanner(compose_root).scan_compose_files()
        assert [f.project_name for f in files] == ["web"]

    def test_depth_limit(self, compose_root: Path):
        _write(compose_root, "a/docker-compose.yml")
        _write(compose_root, "a/b/c/docker-compose.yml")
        files = _scanner(compose_root, scan_depth_limit=1).scan_compose_files()
        assert [f.project_name for f in files] == ["a"]

    def test_depth_zero_scans_root_only(self, compose_root: Path):
        _write(compose_root, "compose.yml")
        _write(compose_root, "web/docker-compose.yml")
        files = _scanner(compose_root, scan_depth_limit=0).scan_compose_files()
        assert len(files) == 1
        assert files[0].file_path == str(compose_root / "compose.yml")

    def test_size_limit(self, compose_root: Path):
        big = WEB + "x-padding: '" + "a" * 2048 + "'\n"
        _write(compose_root, "big/docker-compose.yml", big)
        _write(compose_root, "small/docker-compose.yml")
        files = _scanner(compose_root, max_file_size_kb=1).scan_compose_files()
        assert [f.project_name for f in files] == ["small"]

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(ScanError, match="not a directory"):
            _scanner(tmp_path / "missing").scan_compose_files()

    def test_root_is_file(self, tmp_path: Path):
        f = tmp_path / "file.yml"
        f.write_text("x: 1\n")
        with pytest.raises(ScanError):
            _scanner(f).scan_compose_files()

    def test_empty_root(self, compose_root: Path):
        assert _scanner(compose_root).scan_compose_files() == []

    def test_name(self, compose_root: Path):
        assert _scanner(compose_root).name == "filesystem"


class TestDefaultProjectName:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/root/web/docker-compose.yml", "web"),
            ("/root/web/compose.yaml", "web"),
            ("/root/web/web.yml", "web"),
            ("/root/web/staging.yml", "web-staging"),
        ],
    )
    def test_derivation(self, path, expected):
        assert default_project_name(Path(path)) == expected
