"""A live document whose repository links are annotated as it changes."""

import logging

from bs4 import BeautifulSoup

from starcounter.config import settings
from starcounter.services.badge import BadgeRenderer
from starcounter.services.debounce import Debouncer
from starcounter.services.link_scanner import PROCESSED_ATTR, LinkScanner
from starcounter.services.star_fetcher import StarFetcher, get_star_fetcher

logger = logging.getLogger(__name__)


class PageSession:
    """Owns one parsed document and keeps its links annotated.

    ``process_links`` runs one discovery pass. ``mutate`` appends markup and
    schedules a debounced pass, so a burst of mutations results in a single
    re-scan.
    """

    def __init__(
        self,
        html: str,
        fetcher: StarFetcher | None = None,
        scanner: LinkScanner | None = None,
        debounce_seconds: float | None = None,
    ):
        self.soup = BeautifulSoup(html, "html.parser")
        self.fetcher = fetcher or get_star_fetcher()
        self.scanner = scanner or LinkScanner()
        self.renderer = BadgeRenderer(self.soup)
        delay = settings.debounce_seconds if debounce_seconds is None else debounce_seconds
        self.debouncer = Debouncer(delay, self.process_links)

    async def process_links(self) -> dict[str, int | None]:
        """Run one discovery pass and wait for its batch to resolve."""
        groups = self.scanner.scan(self.soup)
        if not groups:
            return {}
        logger.info(f"Resolving {len(groups)} repositories")
        return await self.fetcher.fetch_groups(groups, self.renderer)

    def mutate(self, fragment: str) -> None:
        """Append markup to the document and schedule a re-scan."""
        parsed = BeautifulSoup(fragment, "html.parser")
        target = self.soup.body or self.soup
        for node in list(parsed.contents):
            target.append(node.extract())
        self.debouncer.trigger()

    def link_states(self) -> list[dict]:
        """Report each examined link with its processing state."""
        return [
            {"href": link.get("href"), "state": link[PROCESSED_ATTR]}
            for link in self.soup.find_all("a", attrs={PROCESSED_ATTR: True})
        ]

    def render(self) -> str:
        return str(self.soup)

    def close(self) -> None:
        self.debouncer.cancel()
