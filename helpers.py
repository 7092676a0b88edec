import time
from typing import Any, Optional, Dict, Tuple

# ---------------------------
# In-memory TTL cache for read-heavy aggregates (dashboard)
# ---------------------------
CacheStore = Dict[str, Tuple[float, Any]]  # key -> (expires_at_epoch, data)

DASHBOARD_PREFIX = "dashboard:"


def cache_get(store: CacheStore, key: str) -> Optional[Any]:
    """Cached value, or None when missing / expired (expired keys are dropped)."""
    hit = store.get(key) if store else None
    if hit is None:
        return None

    expires_at, data = hit
    if time.time() >= expires_at:
        store.pop(key, None)
        return None
    return data


def cache_set(store: CacheStore, key: str, value: Any, ttl_seconds: int) -> None:
    # ttl <= 0 disables caching for the key
    if ttl_seconds <= 0:
        store.pop(key, None)
        return
    store[key] = (time.time() + ttl_seconds, value)


def cache_clear_prefix(store: CacheStore, prefix: str) -> int:
    """Drop every key under prefix; returns how many were removed."""
    if not store:
        return 0
    stale = [k for k in store if k.startswith(prefix)]
    for k in stale:
        del store[k]
    return len(stale)


def invalidate_dashboard(app_state: Any) -> int:
    """Called after any write that changes invoices, payments or credit notes."""
    store = getattr(app_state, "ttl_cache", None)
    if store is None:
        return 0
    return cache_clear_prefix(store, DASHBOARD_PREFIX)
