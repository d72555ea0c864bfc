"""Paginated place (POI) search through the mapping provider."""

import logging
import time
from typing import Callable, Optional

from .config import SEARCH_PAGE_DELAY
from .models import Place, ViewBounds
from .provider import MappingProvider

logger = logging.getLogger(__name__)


def name_matches(place: Place, query: str) -> bool:
    """True if the place name contains every word of the query (case-insensitive)."""
    tokens = query.lower().split()
    name = (place.name or "").lower()
    return all(t in name for t in tokens)


def search_places(
    provider: MappingProvider,
    query: str,
    bounds: Optional[ViewBounds],
    page_delay: float = SEARCH_PAGE_DELAY,
    sleep: Callable[[float], None] = time.sleep,
    is_current: Callable[[], bool] = lambda: True,
) -> Optional[list[Place]]:
    """Fetch every page of a text search and keep results whose name matches the query.

    Pages are requested one after another with a short pause in between.
    ProviderError from any page propagates to the caller.

    Returns:
        Matching places in provider order, or None if is_current() turned
        False while paging (the caller no longer wants the result)
    """
    query = query.strip()
    if not query:
        return []

    found: list[Place] = []
    token: Optional[str] = None
    page = 0
    while True:
        results, token = provider.text_search(query, bounds, token)
        page += 1
        if not is_current():
            logger.info("Search %r discarded after page %d", query, page)
            return None
        found.extend(p for p in results if name_matches(p, query))
        if not token:
            break
        sleep(page_delay)

    logger.debug("Search %r: %d matching places over %d pages", query, len(found), page)
    return found
