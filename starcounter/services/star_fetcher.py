"""Fetch repository star counts from GitHub with caching and retries."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

import httpx

from starcounter.config import StarConfig, settings
from starcounter.services.cache import StarCache, get_cache
from starcounter.services.settings_store import ConfigHolder, get_config_holder

logger = logging.getLogger(__name__)


class StarFetchError(Exception):
    """A single attempt to read a star count failed."""


class StarSink(Protocol):
    """Receives the outcome for each link that asked for a repository."""

    def show_stars(self, observer: Any, repo: str, stars: int) -> None: ...

    def mark_failed(self, observer: Any, repo: str) -> None: ...


class StarFetcher:
    """Resolve star counts for batches of repositories.

    Each batch maps a repository to every link that refers to it. A
    repository is looked up once per batch: cache first, then the API with
    up to ``max_retry`` retries spaced ``base_delay * (attempt + 1)``
    seconds apart. Retry sleeps only suspend the task for that repository.
    """

    def __init__(
        self,
        cache: StarCache | None = None,
        config: ConfigHolder | None = None,
        api_url: str | None = None,
        base_delay: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cache = cache or get_cache()
        self.config = config or get_config_holder()
        self.api_url = (api_url or settings.github_api_url).rstrip("/")
        self.base_delay = (
            settings.retry_base_delay_seconds if base_delay is None else base_delay
        )
        self._transport = transport

    def _get_headers(self, cfg: StarConfig) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {"Accept": "application/vnd.github.v3+json"}
        if cfg.github_token:
            headers["Authorization"] = f"token {cfg.github_token}"
        return headers

    async def _fetch_stars(self, client: httpx.AsyncClient, repo: str, cfg: StarConfig) -> int:
        """Fetch the star count of one repository (single attempt)."""
        url = f"{self.api_url}/repos/{repo}"
        try:
            response = await client.get(url, headers=self._get_headers(cfg))
        except httpx.HTTPError as e:
            raise StarFetchError(f"network error: {e}") from e

        if response.status_code != 200:
            raise StarFetchError(f"status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise StarFetchError("response is not JSON") from e

        stars = data.get("stargazers_count") if isinstance(data, dict) else None
        if not isinstance(stars, int) or isinstance(stars, bool):
            raise StarFetchError("stargazers_count missing or not an integer")
        return stars

    async def _resolve(
        self,
        client: httpx.AsyncClient,
        repo: str,
        observers: Sequence[Any],
        sink: StarSink | None,
    ) -> int | None:
        """Drive one repository to a resolved count or a terminal failure."""
        cached = self.cache.get(repo)
        if cached is not None:
            logger.debug(f"Cache hit: {repo}")
            self._deliver(repo, observers, sink, cached.value)
            return cached.value

        attempt = 0
        while True:
            cfg = self.config.current
            logger.info(f"Fetching {repo} from API (attempt {attempt + 1})")
            try:
                stars = await self._fetch_stars(client, repo, cfg)
            except StarFetchError as e:
                if attempt < cfg.max_retry:
                    delay = self.base_delay * (attempt + 1)
                    logger.warning(f"Failed to fetch {repo} ({e}), retrying in {delay:.1f}s")
                    await asyncio.sleep(delay)
                    attempt += 1
                    continue
                logger.error(f"Failed to fetch {repo} after {attempt + 1} attempts: {e}")
                self._fail(repo, observers, sink)
                return None

            self._deliver(repo, observers, sink, stars)
            try:
                self.cache.set(repo, stars)
            except OSError as e:
                logger.warning(f"Could not cache {repo}: {e}")
            return stars

    def _deliver(
        self, repo: str, observers: Sequence[Any], sink: StarSink | None, stars: int
    ) -> None:
        if sink is None:
            return
        for observer in observers:
            try:
                sink.show_stars(observer, repo, stars)
            except Exception as e:
                # Only this link is affected; the others keep their badge
                logger.error(f"Failed to render stars for {repo}: {e}")
                sink.mark_failed(observer, repo)

    def _fail(self, repo: str, observers: Sequence[Any], sink: StarSink | None) -> None:
        if sink is None:
            return
        for observer in observers:
            sink.mark_failed(observer, repo)

    async def fetch_groups(
        self,
        groups: Mapping[str, Sequence[Any]],
        sink: StarSink | None = None,
    ) -> dict[str, int | None]:
        """Resolve every repository in a batch concurrently.

        Returns the star count per repository, None for terminal failures.
        Errors never propagate to the caller; they end up as failure marks.
        """
        if not groups:
            return {}

        repos = list(groups)
        async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
            results = await asyncio.gather(
                *[self._resolve(client, repo, list(groups[repo]), sink) for repo in repos],
                return_exceptions=True,
            )

        outcome: dict[str, int | None] = {}
        for repo, result in zip(repos, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, Exception):
                logger.error(f"Unexpected error resolving {repo}: {result}")
                self._fail(repo, groups[repo], sink)
                outcome[repo] = None
            else:
                outcome[repo] = result
        return outcome

    async def fetch_stars(self, repo: str) -> int | None:
        """Resolve a single repository without any observers."""
        results = await self.fetch_groups({repo: []})
        return results[repo]


# Singleton instance
_fetcher: StarFetcher | None = None


def get_star_fetcher() -> StarFetcher:
    """Get the star fetcher singleton."""
    global _fetcher
    if _fetcher is None:
        _fetcher = StarFetcher()
    return _fetcher
