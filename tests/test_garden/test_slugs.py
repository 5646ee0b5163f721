"""Unit tests for garden.slugs."""

from pathlib import Path

from garden.scanner import scan_vault
from garden.slugs import SlugIndex, bare_name, build_slug_index, resolve_wikilink

# ---------------------------------------------------------------------------
# build_slug_index
# ---------------------------------------------------------------------------


class TestBuildSlugIndex:
    def test_distinct_names_each_mapped_once(self):
        index = build_slug_index(["index", "systems/networking", "guides/setup"])
        assert index.mapping == {
            "index": "index",
            "networking": "systems/networking",
            "setup": "guides/setup",
        }
        assert index.ambiguous == set()

    def test_duplicate_name_removed_and_flagged(self):
        index = build_slug_index(["a/x", "b/x"])
        assert "x" not in index.mapping
        assert index.ambiguous == {"x"}

    def test_third_duplicate_stays_ambiguous(self):
        index = build_slug_index(["a/x", "b/x", "c/x", "y"])
        assert index.ambiguous == {"x"}
        assert index.mapping == {"y": "y"}

    def test_mapping_and_ambiguous_are_disjoint(self):
        index = build_slug_index(["a/x", "b/x", "a/y", "z", "q/z"])
        assert not set(index.mapping) & index.ambiguous

    def test_first_occurrence_recorded(self):
        index = build_slug_index(["b/x", "a/x"])
        assert index.first_seen["x"] == "b/x"

    def test_root_and_nested_duplicate(self):
        index = build_slug_index(["readme", "docs/readme"])
        assert index.ambiguous == {"readme"}
        assert "readme" not in index.mapping

    def test_repeated_identity_is_not_a_duplicate(self):
        index = build_slug_index(["a/x", "a/x"])
        assert index.mapping == {"x": "a/x"}
        assert index.ambiguous == set()

    def test_warns_once_per_ambiguous_name(self, caplog):
        with caplog.at_level("WARNING", logger="garden.slugs"):
            build_slug_index(["a/x", "b/x", "c/x", "d/x"])
        warnings = [r for r in caplog.records if r.levelname == "WARNING"]
        assert len(warnings) == 1
        assert '"x"' in warnings[0].getMessage()
        assert "a/x" in warnings[0].getMessage()

    def test_each_build_starts_fresh(self):
        build_slug_index(["a/x", "b/x"])
        index = build_slug_index(["a/x"])
        assert index.mapping == {"x": "a/x"}
        assert index.ambiguous == set()

    def test_accepts_documents(self, vault_dir: Path):
        index = build_slug_index(scan_vault(vault_dir).documents)
        assert index.mapping["networking"] == "systems/networking"
        assert index.ambiguous == {"readme"}

    def test_empty_input(self):
        index = build_slug_index([])
        assert len(index) == 0
        assert index.ambiguous == set()

    def test_bare_name(self):
        assert bare_name("a/b/c") == "c"
        assert bare_name("c") == "c"


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------


class TestResolve:
    def test_qualified_path_returned_verbatim(self):
        index = build_slug_index(["other/name"])
        assert index.resolve("folder/name") == "folder/name"

    def test_qualified_path_with_empty_index(self):
        assert SlugIndex().resolve("folder/name") == "folder/name"

    def test_bare_name_resolves_to_full_identity(self):
        index = build_slug_index(["systems/networking"])
        assert index.resolve("networking") == "systems/networking"

    def test_unknown_bare_name_returned_verbatim(self):
        index = build_slug_index(["systems/networking"])
        assert index.resolve("missing") == "missing"

    def test_ambiguous_bare_name_returned_verbatim(self):
        index = build_slug_index(["a/x", "b/x"])
        assert index.resolve("x") == "x"
        assert index.is_ambiguous("x")
        assert not index.is_ambiguous("a/x")

    def test_root_level_note_resolves_to_itself(self):
        index = build_slug_index(["index"])
        assert index.resolve("index") == "index"

    def test_module_level_shorthand(self):
        index = build_slug_index(["systems/networking"])
        assert resolve_wikilink("networking", index) == "systems/networking"
