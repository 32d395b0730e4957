"""
Tests for host → local path translation.
"""

import pytest

from compose_manager.core.config.loader import DiscoveryConfig
from compose_manager.core.services.path_translator import (
    PathTranslator,
    is_under,
    join_path,
    normalize_path,
)

ROOT = "/app/compose-files"


def _translator(mapping=None, existing=()):
    existing = set(existing)
    return PathTranslator(
        DiscoveryConfig(root_path=ROOT, host_path_mapping=mapping),
        file_exists=lambda p: p in existing,
    )


class TestHelpers:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("C:\\Users\\me\\", "C:/Users/me"),
            ("/a/b/", "/a/b"),
            ("/", "/"),
            ("", ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_path(raw) == expected

    def test_join(self):
        assert join_path("/app/compose-files/", "/web\\c.yml") == "/app/compose-files/web/c.yml"
        assert join_path("/root", "") == "/root"

    def test_is_under_segment_boundary(self):
        assert is_under("/app/compose-files/web/c.yml", ROOT)
        assert is_under("/APP/Compose-Files/web/c.yml", ROOT)
        assert is_under(ROOT, ROOT)
        assert not is_under("/app/compose-files-old/web/c.yml", ROOT)
        assert not is_under("/x", "")


class TestTranslate:
    def test_already_local_unchanged(self):
        path = f"{ROOT}/web/docker-compose.yml"
        assert _translator().translate(path) == path

    def test_windows_mapping(self):
        t = _translator(mapping="C:\\Users\\me\\compose")
        assert t.translate("C:\\Users\\me\\compose\\web\\docker-compose.yml") == (
            f"{ROOT}/web/docker-compose.yml"
        )

    def test_mapping_case_insensitive(self):
        t = _translator(mapping="C:\\Users\\me\\compose")
        assert t.translate("c:/users/ME/compose/web/c.yml") == f"{ROOT}/web/c.yml"

    def test_unix_mapping(self):
        t = _translator(mapping="/home/me/compose")
        assert t.translate("/home/me/compose/a/b/compose.yaml") == f"{ROOT}/a/b/compose.yaml"

    def test_mapping_respects_segment_boundary(self):
        t = _translator(mapping="/home/me/compose")
        assert t.translate("/home/me/compose2/web/c.yml") is None

    def test_suffix_probe(self):
        local = f"{ROOT}/web/docker-compose.yml"
        t = _translator(existing=[local])
        assert t.translate("/home/other/stacks/web/docker-compose.yml") == local

    def test_suffix_probe_prefers_longest_suffix(self):
        longer = f"{ROOT}/stacks/web/docker-compose.yml"
        shorter = f"{ROOT}/web/docker-compose.yml"
        t = _translator(existing=[longer, shorter])
        assert t.translate("/home/stacks/web/docker-compose.yml") == longer

    def test_suffix_probe_windows(self):
        local = f"{ROOT}/web/docker-compose.yml"
        t = _translator(existing=[local])
        assert t.translate("D:\\stacks\\web\\docker-compose.yml") == local

    def test_untranslatable(self):
        assert _translator().translate("/elsewhere/web/docker-compose.yml") is None

    @pytest.mark.parametrize("raw", ["", "   "])
    def test_empty(self, raw):
        assert _translator().translate(raw) is None

    def test_properties(self):
        t = _translator(mapping="/home/me")
        assert t.root_path == ROOT
        assert t.host_path_mapping == "/home/me"
