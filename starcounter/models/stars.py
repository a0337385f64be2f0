"""API data models."""

from pydantic import BaseModel, Field


class HtmlDocument(BaseModel):
    """An HTML document or fragment to annotate."""

    html: str


class LinkResult(BaseModel):
    """Processing state of one link."""

    href: str | None = None
    state: str


class AnnotatedDocument(BaseModel):
    """An annotated document and the state of each examined link."""

    html: str
    links: list[LinkResult] = []
    stars: dict[str, int | None] = {}


class PageInfo(AnnotatedDocument):
    """A live page session."""

    id: str
    rescan_pending: bool = False


class RepoStars(BaseModel):
    """Star count for a single repository."""

    repo: str
    stars: int
    formatted: str


class StarSettings(BaseModel):
    """Current runtime settings. The token itself is never returned."""

    has_token: bool
    cache_enabled: bool
    cache_duration_seconds: int
    max_cache_entries: int
    max_retry: int


class StarSettingsUpdate(BaseModel):
    """Partial settings update; omitted fields keep their current value."""

    github_token: str | None = None
    cache_enabled: bool | None = None
    cache_duration_seconds: int | None = Field(None, gt=0)
    max_cache_entries: int | None = Field(None, gt=0)
    max_retry: int | None = Field(None, ge=0)


class CacheStats(BaseModel):
    """Cache summary built from the manifest."""

    enabled: bool
    entries: int
    max_entries: int
    duration_seconds: int
    oldest_age_seconds: float | None = None
    newest_age_seconds: float | None = None


class PruneSummary(BaseModel):
    """Outcome of a prune pass."""

    expired: int
    evicted: int
    remaining: int
