"""Star count cache with a manifest for expiry and eviction bookkeeping."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from time import time

from starcounter.config import StarConfig
from starcounter.services.settings_store import ConfigHolder, get_config_holder
from starcounter.services.store import KeyValueStore, get_store

logger = logging.getLogger(__name__)

CACHE_PREFIX = "gh_star_"
CACHE_MANIFEST_KEY = "gh_star_cache_manifest"


@dataclass(frozen=True)
class CacheEntry:
    """A cached star count and the time it was written."""

    value: int
    written_at: float


@dataclass(frozen=True)
class PruneResult:
    """Number of entries removed by each prune phase."""

    expired: int = 0
    evicted: int = 0

    @property
    def removed(self) -> int:
        return self.expired + self.evicted


class StarCache:
    """Cache of star counts keyed by ``owner/name``.

    Values live under their own store keys while a single manifest maps
    each key to its write time, so pruning never has to load the values.
    Values are written before the manifest and deleted before the manifest
    is saved; a crash in between leaves a value without a manifest entry,
    which reads as absent and is overwritten on the next set.
    """

    def __init__(
        self,
        store: KeyValueStore,
        config: ConfigHolder,
        clock: Callable[[], float] = time,
    ):
        self.store = store
        self.config = config
        self.clock = clock

    def _value_key(self, repo: str) -> str:
        return CACHE_PREFIX + repo

    def _manifest(self) -> dict[str, dict]:
        return self.store.get(CACHE_MANIFEST_KEY, {})

    def _is_valid(self, written_at: float, now: float, cfg: StarConfig) -> bool:
        return now - written_at < cfg.cache_duration_seconds

    def get(self, repo: str) -> CacheEntry | None:
        """Get a fresh cache entry, or None when missing, expired or disabled."""
        cfg = self.config.current
        if not cfg.cache_enabled:
            return None
        meta = self._manifest().get(repo)
        if not meta or not self._is_valid(meta["written_at"], self.clock(), cfg):
            return None
        value = self.store.get(self._value_key(repo))
        if value is None:
            return None
        return CacheEntry(value=value, written_at=meta["written_at"])

    def set(self, repo: str, value: int) -> None:
        """Store a star count stamped with the current time."""
        if not self.config.current.cache_enabled:
            return
        now = self.clock()
        self.store.set(self._value_key(repo), value)
        manifest = self._manifest()
        # Re-insert so manifest order follows write order
        manifest.pop(repo, None)
        manifest[repo] = {"written_at": now}
        self.store.set(CACHE_MANIFEST_KEY, manifest)
        logger.debug(f"Cached {repo}: {value}")

    def prune(self) -> PruneResult:
        """Drop expired entries, then evict the oldest ones over capacity."""
        cfg = self.config.current
        now = self.clock()
        manifest = self._manifest()

        expired = [
            repo
            for repo, meta in manifest.items()
            if not self._is_valid(meta["written_at"], now, cfg)
        ]
        for repo in expired:
            self.store.delete(self._value_key(repo))
            del manifest[repo]
        if expired:
            self.store.set(CACHE_MANIFEST_KEY, manifest)

        overflow = len(manifest) - cfg.max_cache_entries
        evicted: list[str] = []
        if overflow > 0:
            # sorted() is stable, so equal timestamps keep insertion order
            oldest_first = sorted(manifest.items(), key=lambda item: item[1]["written_at"])
            evicted = [repo for repo, _ in oldest_first[:overflow]]
            for repo in evicted:
                self.store.delete(self._value_key(repo))
                del manifest[repo]
            self.store.set(CACHE_MANIFEST_KEY, manifest)

        result = PruneResult(expired=len(expired), evicted=len(evicted))
        if result.removed:
            logger.info(
                f"Cache pruned: {result.expired} expired, {result.evicted} evicted, "
                f"{len(manifest)} remaining"
            )
        return result

    def stats(self) -> dict:
        """Summarize the manifest without reading any values."""
        cfg = self.config.current
        now = self.clock()
        ages = [now - meta["written_at"] for meta in self._manifest().values()]
        return {
            "enabled": cfg.cache_enabled,
            "entries": len(ages),
            "max_entries": cfg.max_cache_entries,
            "duration_seconds": cfg.cache_duration_seconds,
            "oldest_age_seconds": round(max(ages), 1) if ages else None,
            "newest_age_seconds": round(min(ages), 1) if ages else None,
        }

    def clear(self) -> int:
        """Remove every cached entry and return how many were removed."""
        manifest = self._manifest()
        for repo in manifest:
            self.store.delete(self._value_key(repo))
        self.store.delete(CACHE_MANIFEST_KEY)
        logger.info(f"Cache cleared ({len(manifest)} entries)")
        return len(manifest)


# Global cache instance
_cache: StarCache | None = None


def get_cache() -> StarCache:
    """Get the global cache instance."""
    global _cache
    if _cache is None:
        _cache = StarCache(get_store(), get_config_holder())
    return _cache
