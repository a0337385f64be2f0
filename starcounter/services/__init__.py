"""Services for the star counter."""

from starcounter.services.cache import StarCache
from starcounter.services.link_scanner import LinkScanner
from starcounter.services.page_session import PageSession
from starcounter.services.star_fetcher import StarFetcher

__all__ = ["StarCache", "StarFetcher", "LinkScanner", "PageSession"]
