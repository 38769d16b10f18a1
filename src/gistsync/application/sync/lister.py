"""
Source Lister - enumerates the source account's gists and applies filters.

Filters run in a fixed order:
1. ID allow-list (exclusive: when set, nothing else is applied)
2. visibility
3. since date
4. include patterns
5. exclude patterns
"""

import logging
import re
import time
from typing import Callable

from ...core.domain.entities import SourceItem
from ...core.domain.enums import VisibilityFilter
from ...core.exceptions import GistSyncError, SourceListingError
from ...core.ports.config_provider import SourceFilters
from ...core.ports.gist_source import GistSourcePort


logger = logging.getLogger("SourceLister")

DEFAULT_PAGE_SIZE = 100


# -------------------------------------------------------------------------
# Filter stages
# -------------------------------------------------------------------------


def filter_by_ids(items: list[SourceItem], gist_ids: list[str]) -> list[SourceItem]:
    wanted = set(gist_ids)
    return [item for item in items if item.id in wanted]


def filter_by_visibility(
    items: list[SourceItem], visibility: VisibilityFilter
) -> list[SourceItem]:
    if visibility is VisibilityFilter.PUBLIC:
        return [item for item in items if item.is_public]
    if visibility is VisibilityFilter.PRIVATE:
        return [item for item in items if not item.is_public]
    return list(items)


def filter_since(items: list[SourceItem], since: str) -> list[SourceItem]:
    """Keep items updated at or after `since` (ISO-8601 string comparison)."""
    return [item for item in items if item.updated_at >= since]


def _compile_patterns(patterns: list[str], stage: str) -> re.Pattern[str] | None:
    joined = "|".join(p for p in patterns if p)
    if not joined:
        return None
    try:
        return re.compile(joined, re.IGNORECASE)
    except re.error as e:
        logger.warning(f"Ignoring {stage} filter, invalid pattern '{joined}': {e}")
        return None


def filter_include(items: list[SourceItem], patterns: list[str]) -> list[SourceItem]:
    """Keep items whose description matches any pattern (case-insensitive)."""
    regex = _compile_patterns(patterns, "include")
    if regex is None:
        return list(items)
    return [item for item in items if item.description and regex.search(item.description)]


def filter_exclude(items: list[SourceItem], patterns: list[str]) -> list[SourceItem]:
    """Drop items whose description matches any pattern (case-insensitive)."""
    regex = _compile_patterns(patterns, "exclude")
    if regex is None:
        return list(items)
    return [item for item in items if not regex.search(item.description or "")]


def apply_filters(items: list[SourceItem], filters: SourceFilters) -> list[SourceItem]:
    """
    Run the filter chain over a full listing.

    Args:
        items: Every gist of the account, in listing order.
        filters: Configured filters.

    Returns:
        The items to sync, in listing order.
    """
    if filters.gist_ids:
        filtered = filter_by_ids(items, filters.gist_ids)
        logger.debug(f"Filter by IDs: {len(filtered)} gists")
        return filtered

    filtered = filter_by_visibility(items, filters.visibility)
    logger.debug(f"Visibility filter ({filters.visibility.value}): {len(filtered)} gists")

    if filters.since:
        filtered = filter_since(filtered, filters.since)
        logger.debug(f"Since filter: {len(filtered)} gists")

    if filters.include_patterns:
        filtered = filter_include(filtered, filters.include_patterns)
        logger.debug(f"Include filter: {len(filtered)} gists")

    if filters.exclude_patterns:
        filtered = filter_exclude(filtered, filters.exclude_patterns)
        logger.debug(f"Exclude filter: {len(filtered)} gists")

    return filtered


# -------------------------------------------------------------------------
# Lister
# -------------------------------------------------------------------------


class SourceLister:
    """
    Pages through the source account's gists and filters them.

    Pages are requested until one comes back short or empty. The
    configured delay is slept between consecutive page requests.
    """

    def __init__(
        self,
        source: GistSourcePort,
        filters: SourceFilters | None = None,
        page_delay: float = 1.0,
        per_page: int = DEFAULT_PAGE_SIZE,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.source = source
        self.filters = filters or SourceFilters()
        self.page_delay = page_delay
        self.per_page = per_page
        self._sleep = sleep

    def fetch_all(self) -> list[SourceItem]:
        """
        Fetch every page of the listing, unfiltered.

        Raises:
            SourceListingError: If any page request fails.
        """
        items: list[SourceItem] = []
        page = 1

        while True:
            if page > 1 and self.page_delay > 0:
                self._sleep(self.page_delay)

            try:
                batch = self.source.list_page(page, self.per_page)
            except GistSyncError as e:
                raise SourceListingError(
                    f"Failed to list gists from {self.source.name} (page {page})", cause=e
                ) from e

            logger.debug(f"Page {page}: {len(batch)} gists")
            if not batch:
                break
            items.extend(batch)
            if len(batch) < self.per_page:
                break
            page += 1

        return items

    def list(self) -> list[SourceItem]:
        """
        List the gists to sync.

        Returns:
            Filtered items in listing order.

        Raises:
            SourceListingError: If the listing could not be completed.
        """
        items = self.fetch_all()
        logger.info(f"Found {len(items)} gists on {self.source.name}")
        filtered = apply_filters(items, self.filters)
        logger.info(f"Total gists after filters: {len(filtered)}")
        return filtered
