"""On-disk JSON cache for on-chain reads pinned to a block."""

import hashlib
import json
import os
import shutil
import sys
from pathlib import Path
from typing import Any

from seedfund_ledger.constants import CACHE_DIR_NAME, CACHE_VERSION


def get_cache_dir() -> Path:
    """Cache directory under XDG_CACHE_HOME, falling back to ~/.cache."""
    base = Path(os.getenv("XDG_CACHE_HOME") or Path.home() / ".cache")
    cache_dir = base / CACHE_DIR_NAME
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir


def clear_cache() -> None:
    cache_dir = get_cache_dir()
    if cache_dir.exists():
        shutil.rmtree(cache_dir)
        print("✅ Cache cleared.", file=sys.stderr)
    else:
        print("ℹ️  Nothing to clear.", file=sys.stderr)


def cache_key(prefix: str, *parts: Any) -> str:
    """Deterministic key from a prefix, the cache version and arbitrary parts."""
    raw = ":".join([prefix, CACHE_VERSION, *(str(p) for p in parts)])
    return hashlib.sha256(raw.encode()).hexdigest()


def get_cached(key: str) -> Any | None:
    """Cached value for `key`, or None when missing or unreadable."""
    path = get_cache_dir() / f"{key}.json"
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None


def set_cached(key: str, data: Any) -> None:
    """Store `data` under `key`. A failed write only costs a refetch."""
    path = get_cache_dir() / f"{key}.json"
    try:
        path.write_text(json.dumps(data, separators=(",", ":")), encoding="utf-8")
    except OSError as ex:
        print(f"⚠️  cache write failed for {path.name}: {ex}", file=sys.stderr)
