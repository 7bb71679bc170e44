"""
Tests for poster_cache module.

Run with: pytest tests/test_poster_cache.py -v
"""

import pytest

from poster_cache import _cache_path, cache_get, cache_set
from poster_errors import CacheError


class TestCache:

    def test_round_trip(self, tmp_path):
        cache_set("coords_rome_italy", [41.89, 12.48, "Roma, Lazio, Italia"], tmp_path)
        assert cache_get("coords_rome_italy", tmp_path) == [41.89, 12.48, "Roma, Lazio, Italia"]

    def test_miss(self, tmp_path):
        assert cache_get("never_stored", tmp_path) is None

    def test_creates_directory(self, tmp_path):
        cache_dir = tmp_path / "nested" / "cache"
        cache_set("key", {"a": 1}, cache_dir)
        assert cache_dir.is_dir()

    def test_keys_are_hashed(self, tmp_path):
        path = _cache_path("coords_São Paulo/Brazil", tmp_path)
        assert path.parent == tmp_path
        assert path.suffix == ".json"
        assert len(path.stem) == 32

    def test_corrupt_entry_is_removed(self, tmp_path):
        path = _cache_path("broken", tmp_path)
        path.write_text("{truncated", encoding="utf-8")
        assert cache_get("broken", tmp_path) is None
        assert not path.exists()

    def test_unserializable_value(self, tmp_path):
        with pytest.raises(CacheError, match="write failed"):
            cache_set("key", object(), tmp_path)

    def test_write_failure(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(CacheError):
            cache_set("key", [1], blocker)

    def test_read_failure(self, tmp_path):
        _cache_path("key", tmp_path).mkdir()
        with pytest.raises(CacheError, match="read failed"):
            cache_get("key", tmp_path)
