"""Runtime settings endpoints."""

from fastapi import APIRouter, HTTPException

from starcounter.config import StarConfig
from starcounter.models.stars import StarSettings, StarSettingsUpdate
from starcounter.services.settings_store import get_config_holder

router = APIRouter(prefix="/api/settings", tags=["settings"])


def _to_response(cfg: StarConfig) -> StarSettings:
    return StarSettings(
        has_token=bool(cfg.github_token),
        cache_enabled=cfg.cache_enabled,
        cache_duration_seconds=cfg.cache_duration_seconds,
        max_cache_entries=cfg.max_cache_entries,
        max_retry=cfg.max_retry,
    )


@router.get("", response_model=StarSettings)
async def get_settings():
    """Get the current settings."""
    return _to_response(get_config_holder().current)


@router.put("", response_model=StarSettings)
async def update_settings(update: StarSettingsUpdate):
    """Update settings. Takes effect for the next lookup without a restart."""
    changes = update.model_dump(exclude_none=True)
    if "github_token" in changes:
        # An empty token switches back to anonymous access
        changes["github_token"] = changes["github_token"].strip() or None
    try:
        cfg = get_config_holder().update(**changes)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _to_response(cfg)
