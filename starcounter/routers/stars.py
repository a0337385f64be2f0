"""Star count lookup endpoint."""

from fastapi import APIRouter, HTTPException

from starcounter.models.stars import RepoStars
from starcounter.services.badge import format_stars
from starcounter.services.link_scanner import extract_repo
from starcounter.services.star_fetcher import get_star_fetcher

router = APIRouter(prefix="/api/stars", tags=["stars"])


@router.get("/{owner}/{name}", response_model=RepoStars)
async def get_stars(owner: str, name: str):
    """Get the star count of a repository (served from cache when fresh)."""
    repo = extract_repo(f"https://github.com/{owner}/{name}")
    if repo is None:
        raise HTTPException(status_code=400, detail=f"Invalid repository {owner}/{name}")

    stars = await get_star_fetcher().fetch_stars(repo)
    if stars is None:
        raise HTTPException(status_code=502, detail=f"Could not fetch stars for {repo}")
    return RepoStars(repo=repo, stars=stars, formatted=format_stars(stars))
