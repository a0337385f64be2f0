"""API routers for the star counter service."""

from starcounter.routers.annotate import router as annotate_router
from starcounter.routers.cache import router as cache_router
from starcounter.routers.settings import router as settings_router
from starcounter.routers.stars import router as stars_router

__all__ = ["annotate_router", "cache_router", "settings_router", "stars_router"]
