"""Tests for the sticky pattern registry."""

import json

import pytest

from i3_scratchpad.errors import InvalidPatternError, RegistryError
from i3_scratchpad.services.registry import StickyRegistry


class TestStickyRegistry:
    """Test registry persistence and mutation."""

    def test_missing_file_is_empty(self, registry_path):
        registry = StickyRegistry.open(registry_path)
        assert registry.is_empty()
        assert registry.patterns == []

    def test_add_persists_with_indentation(self, registry_path):
        registry = StickyRegistry.open(registry_path)
        assert registry.add("^Spotify$") is True

        text = registry_path.read_text()
        assert json.loads(text) == {"sticky_patterns": ["^Spotify$"]}
        assert '\n  "sticky_patterns"' in text

    def test_add_duplicate_is_noop(self, registry_path):
        registry = StickyRegistry.open(registry_path)
        registry.add("kitty")
        assert registry.add("kitty") is False
        assert registry.patterns == ["kitty"]

    def test_add_invalid_regex(self, registry_path):
        registry = StickyRegistry.open(registry_path)
        with pytest.raises(InvalidPatternError):
            registry.add("(kitty")
        assert not registry_path.exists()

    def test_remove(self, registry_path):
        registry = StickyRegistry.open(registry_path)
        registry.add("kitty")
        registry.add("mpv")
        registry.remove("kitty")

        reloaded = StickyRegistry.open(registry_path)
        assert reloaded.patterns == ["mpv"]
        assert reloaded.has("mpv")
        assert not reloaded.has("kitty")

    def test_remove_unknown(self, registry_path):
        with pytest.raises(RegistryError, match="not registered"):
            StickyRegistry.open(registry_path).remove("kitty")

    def test_load_keeps_order_and_drops_duplicates(self, registry_path):
        registry_path.parent.mkdir(parents=True)
        registry_path.write_text(json.dumps({"sticky_patterns": ["b", "a", "b"]}))
        assert StickyRegistry.open(registry_path).patterns == ["b", "a"]

    def test_malformed_file(self, registry_path):
        registry_path.parent.mkdir(parents=True)
        registry_path.write_text("{not json")
        with pytest.raises(RegistryError, match="Failed to load"):
            StickyRegistry.open(registry_path)

    def test_wrong_schema(self, registry_path):
        registry_path.parent.mkdir(parents=True)
        registry_path.write_text(json.dumps({"sticky_patterns": "kitty"}))
        with pytest.raises(RegistryError):
            StickyRegistry.open(registry_path)
