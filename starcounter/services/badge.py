"""Render star count badges next to repository links."""

from bs4 import BeautifulSoup, Tag

from starcounter.services.link_scanner import (
    BADGE_CLASS,
    PROCESSED_ATTR,
    STATE_DONE,
    STATE_FAILED,
)


def format_stars(num: int) -> str:
    """Format a star count, e.g. 950 -> "950", 1234 -> "1.2k", 2000 -> "2k"."""
    if num >= 1000:
        text = f"{num / 1000:.1f}"
        if text.endswith(".0"):
            text = text[:-2]
        return text + "k"
    return str(num)


def _has_badge(link: Tag) -> bool:
    sibling = link.find_next_sibling()
    return sibling is not None and BADGE_CLASS in (sibling.get("class") or [])


class BadgeRenderer:
    """StarSink that edits a parsed document in place."""

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup

    def show_stars(self, observer: Tag, repo: str, stars: int) -> None:
        if not _has_badge(observer):
            badge = self.soup.new_tag(
                "a",
                href=f"https://github.com/{repo}/stargazers",
                target="_blank",
                rel="noopener noreferrer",
                title=f"{stars:,} stars",
            )
            badge["class"] = BADGE_CLASS
            icon = self.soup.new_tag("span")
            icon["class"] = "star-icon"
            icon.string = "⭐"
            badge.append(icon)
            badge.append(format_stars(stars))
            observer.insert_after(badge)
        observer[PROCESSED_ATTR] = STATE_DONE

    def mark_failed(self, observer: Tag, repo: str) -> None:
        observer[PROCESSED_ATTR] = STATE_FAILED
