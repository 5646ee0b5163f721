"""Unit tests for garden.tags."""

from garden.tags import expand_tags, normalize_tag


class TestExpandTags:
    def test_two_levels(self):
        assert expand_tags(["systems/networking"]) == {"systems/networking", "systems"}

    def test_flat_tag(self):
        assert expand_tags(["a"]) == {"a"}

    def test_three_levels(self):
        assert expand_tags(["a/b/c"]) == {"a/b/c", "a/b", "a"}

    def test_shared_ancestors_deduplicated(self):
        assert expand_tags(["a/b", "a/c", "a"]) == {"a/b", "a/c", "a"}

    def test_non_strings_ignored(self):
        assert expand_tags(["x", 3, None, {"k": "v"}]) == {"x"}

    def test_none_and_empty(self):
        assert expand_tags(None) == set()
        assert expand_tags([]) == set()

    def test_empty_segments_skipped(self):
        assert expand_tags(["/a"]) == {"/a"}
        assert expand_tags(["a//b"]) == {"a//b", "a"}
        assert expand_tags([""]) == set()


class TestNormalizeTag:
    def test_strips_hash_and_whitespace(self):
        assert normalize_tag("  #python ") == "python"

    def test_nested_tag_untouched(self):
        assert normalize_tag("tools/marimo") == "tools/marimo"
