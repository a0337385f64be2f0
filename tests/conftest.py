"""Shared fixtures for star counter tests."""

import httpx
import pytest

from starcounter.config import StarConfig
from starcounter.services.cache import StarCache
from starcounter.services.settings_store import ConfigHolder
from starcounter.services.star_fetcher import StarFetcher
from starcounter.services.store import MemoryStore


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSink:
    """StarSink that records what each observer received."""

    def __init__(self):
        self.resolved: list[tuple[object, str, int]] = []
        self.failed: list[tuple[object, str]] = []

    def show_stars(self, observer, repo, stars):
        self.resolved.append((observer, repo, stars))

    def mark_failed(self, observer, repo):
        self.failed.append((observer, repo))


class FakeGitHub:
    """Mock GitHub API serving scripted responses per repository.

    ``responses[repo]`` is a list consumed one item per request; an item is
    either an ``httpx.Response``, an int star count (200 response) or an
    exception instance to raise. The last item repeats once exhausted.
    """

    def __init__(self, responses: dict | None = None):
        self.responses = responses or {}
        self.requests: list[httpx.Request] = []

    def calls_for(self, repo: str) -> int:
        return sum(1 for r in self.requests if r.url.path == f"/repos/{repo}")

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        repo = request.url.path.removeprefix("/repos/")
        script = self.responses.get(repo)
        if not script:
            return httpx.Response(404, json={"message": "Not Found"})
        item = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            # Fresh copy so a repeated item is never a consumed response
            return httpx.Response(item.status_code, headers=item.headers, content=item.content)
        return httpx.Response(200, json={"full_name": repo, "stargazers_count": item})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def config_holder(store):
    return ConfigHolder(store, StarConfig(max_retry=2, cache_duration_seconds=3600))


@pytest.fixture
def cache(store, config_holder, clock):
    return StarCache(store, config_holder, clock=clock)


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def fetcher(cache, config_holder, github):
    return StarFetcher(
        cache=cache,
        config=config_holder,
        api_url="https://api.github.test",
        base_delay=0,
        transport=github.transport,
    )


@pytest.fixture
def sink():
    return RecordingSink()
