"""Cache maintenance endpoints."""

from fastapi import APIRouter

from starcounter.models.stars import CacheStats, PruneSummary
from starcounter.services.cache import get_cache

router = APIRouter(prefix="/api/cache", tags=["cache"])


@router.get("", response_model=CacheStats)
async def get_cache_stats():
    """Get cache statistics."""
    return CacheStats(**get_cache().stats())


@router.post("/prune", response_model=PruneSummary)
async def prune_cache():
    """Remove expired entries and evict the oldest ones over capacity."""
    cache = get_cache()
    result = cache.prune()
    return PruneSummary(
        expired=result.expired,
        evicted=result.evicted,
        remaining=cache.stats()["entries"],
    )


@router.delete("")
async def clear_cache():
    """Remove every cached star count."""
    return {"removed": get_cache().clear()}
