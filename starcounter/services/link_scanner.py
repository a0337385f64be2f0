"""Find GitHub repository links in an HTML document."""

import logging
import re

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

PROCESSED_ATTR = "data-gh-stars-processed"

STATE_PROCESSING = "processing"
STATE_DONE = "done"
STATE_FAILED = "failed"
STATE_IGNORED = "ignored"

BADGE_CLASS = "gh-star-count-badge"

REPO_PATTERN = re.compile(r"^https?://github\.com/([A-Za-z0-9-]+/[A-Za-z0-9._-]+)/?$")

_CANDIDATE_SELECTOR = f'a[href*="github.com/"]:not([{PROCESSED_ATTR}]):not(.{BADGE_CLASS})'


def extract_repo(href: str) -> str | None:
    """Return ``owner/name`` for a repository home page URL, else None."""
    match = REPO_PATTERN.match(href.strip())
    return match.group(1) if match else None


class LinkScanner:
    """Group unprocessed repository links by the repository they point to."""

    def scan(self, soup: BeautifulSoup) -> dict[str, list[Tag]]:
        """Mark every new candidate link and group the matching ones.

        Links already carrying a processed marker are skipped, so running
        the scan again after a mutation only picks up new links.
        """
        groups: dict[str, list[Tag]] = {}
        ignored = 0
        for link in soup.select(_CANDIDATE_SELECTOR):
            link[PROCESSED_ATTR] = STATE_PROCESSING
            repo = extract_repo(link.get("href", ""))
            if repo is None:
                link[PROCESSED_ATTR] = STATE_IGNORED
                ignored += 1
                continue
            groups.setdefault(repo, []).append(link)

        if groups or ignored:
            logger.debug(f"Scan found {len(groups)} repositories, ignored {ignored} links")
        return groups
