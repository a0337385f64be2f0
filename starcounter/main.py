"""FastAPI application for the GitHub star counter."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from starcounter.config import settings
from starcounter.routers import annotate_router, cache_router, settings_router, stars_router
from starcounter.services.cache import get_cache

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Star counter starting, pruning cache")
    get_cache().prune()
    yield
    logger.info("Star counter shutting down")


app = FastAPI(
    title="GitHub Star Counter API",
    description="Annotate GitHub repository links with their star counts",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(annotate_router)
app.include_router(stars_router)
app.include_router(settings_router)
app.include_router(cache_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "GitHub Star Counter API",
        "version": "0.1.0",
        "description": "Annotate GitHub repository links with their star counts",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
