"""
Show lookup by title, URL or pattern
"""

import logging
import re

from .base_client import CatalogClient
from .config import Config
from .errors import FetchError, NoMatchError
from .models import Show

logger = logging.getLogger(__name__)


def _query_pattern(query: str) -> re.Pattern:
    try:
        return re.compile(query, re.IGNORECASE)
    except re.error:
        return re.compile(re.escape(query), re.IGNORECASE)


def find_show(query: str, config: Config, catalog: CatalogClient) -> tuple[Show, bool]:
    """
    Resolve a query to a single show

    Tracked shows are searched first (exact title or URL), then the
    catalog's show list (exact title, URL, or case-insensitive pattern
    on the title).

    Returns:
        Tuple of (show, tracked) where tracked tells whether the show
        came from the configuration

    Raises:
        NoMatchError: zero or several shows match
        FetchError: the catalog could not be read
    """
    tracked = config.find_tracked(query)
    if len(tracked) > 1:
        raise NoMatchError(f"multiple matches for show {query!r} ({len(tracked)})")
    if tracked:
        return catalog.get_show(tracked[0].url), True

    pattern = _query_pattern(query)
    matches = [
        s
        for s in catalog.list_shows()
        if query in (s.title, s.url) or pattern.search(s.title)
    ]
    if not matches:
        raise NoMatchError(f"no such show with title or url {query!r}")
    if len(matches) > 1:
        exact = [s for s in matches if query in (s.title, s.url)]
        if len(exact) != 1:
            raise NoMatchError(
                f"multiple matches for show {query!r} ({len(matches)}): "
                + ", ".join(s.title for s in matches[:10])
            )
        matches = exact

    try:
        return catalog.get_show(matches[0].url), False
    except FetchError as e:
        logger.error(f"error while getting show {matches[0].url}: {e}")
        raise
