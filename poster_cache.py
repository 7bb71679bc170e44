"""
On-disk JSON cache

Small key/value store used to remember geocoding results between runs.
Keys are hashed into file names under the cache directory.
"""

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Union

from poster_errors import CacheError

CACHE_DIR = Path(os.environ.get("CACHE_DIR", "cache"))


def _cache_path(key: str, cache_dir: Path) -> Path:
    """Generate a safe cache file path from a cache key using a hash."""
    safe = hashlib.sha256(key.encode()).hexdigest()[:32]
    return cache_dir / f"{safe}.json"


def cache_get(key: str, cache_dir: Union[str, Path] = CACHE_DIR) -> Any:
    """
    Retrieve a cached object by key.

    Returns:
        Cached object if found, None otherwise

    Raises:
        CacheError: If cache read operation fails
    """
    path = _cache_path(key, Path(cache_dir))
    try:
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError):
        # Corrupt entry, treat as a miss
        path.unlink(missing_ok=True)
        return None
    except OSError as e:
        raise CacheError(f"Cache read failed: {e}") from e


def cache_set(key: str, value: Any, cache_dir: Union[str, Path] = CACHE_DIR) -> None:
    """
    Store a JSON-serializable object in the cache.

    Raises:
        CacheError: If cache write operation fails
    """
    cache_dir = Path(cache_dir)
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
        with open(_cache_path(key, cache_dir), "w", encoding="utf-8") as f:
            json.dump(value, f)
    except (OSError, TypeError, ValueError) as e:
        raise CacheError(f"Cache write failed: {e}") from e
