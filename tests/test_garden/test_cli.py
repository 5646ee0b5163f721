"""Unit tests for the garden command line."""

import json
from pathlib import Path

import pytest

from garden.cache import MetadataCache
from garden.cli import main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("GARDEN_VAULT_DIR", "GARDEN_CACHE_FILE", "GARDEN_SLUGIFY"):
        monkeypatch.delenv(var, raising=False)


class TestValidateCommand:
    def test_broken_links_exit_nonzero(self, vault_dir: Path, capsys):
        assert main(["validate", str(vault_dir)]) == 1
        err = capsys.readouterr().err
        assert "guides/setup:" in err
        assert "[[readme]] (not found)" in err

    def test_valid_vault_exits_zero(self, tmp_path: Path, write_note, capsys):
        write_note(tmp_path, "a", "[[b]]")
        write_note(tmp_path, "folder/b", "[[a]]")
        assert main(["validate", str(tmp_path)]) == 0
        assert "All links are valid" in capsys.readouterr().out

    def test_json_payload(self, vault_dir: Path, capsys):
        assert main(["validate", str(vault_dir), "--json"]) == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["isValid"] is False
        assert payload["brokenLinks"] == [{"sourceFile": "guides/setup", "targetSlug": "readme"}]

    def test_vault_from_environment(self, vault_dir: Path, monkeypatch):
        monkeypatch.setenv("GARDEN_VAULT_DIR", str(vault_dir))
        assert main(["validate"]) == 1

    def test_missing_vault(self, tmp_path: Path):
        assert main(["validate", str(tmp_path / "nope")]) == 2


class TestScanCommand:
    def test_json_counts_and_digests(self, vault_dir: Path, write_note, capsys):
        write_note(vault_dir, "bad", "---\ntitle: [x\n---\n")
        assert main(["scan", str(vault_dir), "--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["loaded"] == 5
        assert payload["skipped"] == 1
        assert len(payload["documents"]["index"]) == 64


class TestLinksCommand:
    def test_lists_domains(self, tmp_path: Path, write_note, capsys):
        write_note(tmp_path, "a", "[One](https://one.example/a) https://two.example/b")
        assert main(["links", str(tmp_path)]) == 0
        out = capsys.readouterr().out
        assert "one.example (1)" in out
        assert "  https://two.example/b" in out

    def test_fetch_uses_cache(self, tmp_path: Path, write_note, capsys):
        vault = tmp_path / "vault"
        write_note(vault, "a", "https://one.example/a")
        cache_file = tmp_path / "cache.json"
        MetadataCache(cache_file).set_cached_metadata(
            "https://one.example/a", {"title": "Cached One"}
        )
        assert main(["links", str(vault), "--cache", str(cache_file), "--fetch"]) == 0
        assert "https://one.example/a  - Cached One" in capsys.readouterr().out
