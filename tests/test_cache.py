"""Tests for hud/cache.py - file-backed TTL cache."""

import json
import sys
from pathlib import Path

import pytest

# Add scripts to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from hud import timeutil
from hud.cache import TTLCache, sanitize_key


@pytest.fixture
def cache(tmp_path: Path) -> TTLCache:
    """Initialized cache in a scratch directory."""
    c = TTLCache(tmp_path / "cache")
    c.initialize()
    return c


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> list[int]:
    """Controllable clock; mutate clock[0] to move time."""
    now = [1_700_000_000_000]
    monkeypatch.setattr(timeutil, "now_ms", lambda: now[0])
    return now


class TestSanitizeKey:
    """Tests for sanitize_key function."""

    def test_safe_characters_kept(self) -> None:
        """Test that letters, digits, dash and underscore pass through."""
        assert sanitize_key("usage-limits_2") == "usage-limits_2"

    def test_unsafe_characters_replaced(self) -> None:
        """Test that separators and dots are replaced with dashes."""
        assert sanitize_key("git-status-abc-/home/me/proj.x") == "git-status-abc--home-me-proj-x"

    def test_deterministic(self) -> None:
        """Test that the same key always maps to the same stem."""
        assert sanitize_key("a/b c") == sanitize_key("a/b c")


class TestTTLCache:
    """Tests for TTLCache get/set/expiry."""

    def test_set_then_get(self, cache: TTLCache, clock: list[int]) -> None:
        """Test that a freshly set value is returned."""
        cache.set("key", {"n": 1}, 10)

        assert cache.get("key") == {"n": 1}

    def test_get_missing_returns_none(self, cache: TTLCache) -> None:
        """Test that an unset key is a miss without error."""
        assert cache.get("never-set") is None

    def test_entry_format(self, cache: TTLCache, clock: list[int]) -> None:
        """Test the on-disk entry layout."""
        cache.set("key", [1, 2], 5)

        entry = json.loads(cache.path_for("key").read_text())

        assert entry == {"data": [1, 2], "expiresAt": clock[0] + 5000}

    def test_expired_entry_removed(self, cache: TTLCache, clock: list[int]) -> None:
        """Test that an expired entry reads as absent and is deleted."""
        cache.set("key", "value", 2)
        clock[0] += 2000

        assert cache.get("key") is None
        assert not cache.path_for("key").exists()

    def test_entry_valid_before_expiry(self, cache: TTLCache, clock: list[int]) -> None:
        """Test that an entry is still served just before it expires."""
        cache.set("key", "value", 2)
        clock[0] += 1999

        assert cache.get("key") == "value"

    def test_corrupt_entry_is_miss(self, cache: TTLCache) -> None:
        """Test that an unparseable entry file is treated as a miss."""
        cache.path_for("key").write_text("{not json")

        assert cache.get("key") is None

    def test_entry_without_expiry_removed(self, cache: TTLCache) -> None:
        """Test that an entry missing expiresAt is dropped."""
        cache.path_for("key").write_text(json.dumps({"data": 1}))

        assert cache.get("key") is None
        assert not cache.path_for("key").exists()

    def test_no_temp_files_left(self, cache: TTLCache, clock: list[int]) -> None:
        """Test that writes leave only the final entry file."""
        cache.set("a", 1, 10)
        cache.set("a", 2, 10)

        assert [p.name for p in cache.directory.iterdir()] == ["a.json"]
        assert cache.get("a") == 2

    def test_unserializable_value_ignored(self, cache: TTLCache) -> None:
        """Test that a value JSON cannot encode is silently not cached."""
        cache.set("bad", object(), 10)

        assert cache.get("bad") is None
        assert list(cache.directory.iterdir()) == []

    def test_delete(self, cache: TTLCache, clock: list[int]) -> None:
        """Test deleting an entry, and deleting a missing one."""
        cache.set("key", 1, 10)
        cache.delete("key")
        cache.delete("key")

        assert cache.get("key") is None

    def test_clear(self, cache: TTLCache, clock: list[int]) -> None:
        """Test that clear removes every entry."""
        cache.set("a", 1, 10)
        cache.set("b", 2, 10)

        cache.clear()

        assert cache.get("a") is None
        assert cache.get("b") is None
        assert list(cache.directory.glob("*.json")) == []

    def test_initialize_idempotent(self, tmp_path: Path) -> None:
        """Test that initialize can run repeatedly and creates parents."""
        c = TTLCache(tmp_path / "deep" / "cache")
        c.initialize()
        c.initialize()

        assert c.directory.is_dir()

    def test_unusable_directory_is_noop(self, tmp_path: Path) -> None:
        """Test that a cache whose directory cannot be created never raises."""
        blocker = tmp_path / "file"
        blocker.write_text("")
        c = TTLCache(blocker / "cache")
        c.initialize()

        c.set("key", 1, 10)
        assert c.get("key") is None
        c.clear()
