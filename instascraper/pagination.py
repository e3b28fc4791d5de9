"""
Generic cursor pagination.

A PageSource knows how to fetch one page of one endpoint and how to read an
item's id. The Paginator drives it, either to a target count or for a
single resumable page. Items are raw JSON records and are never interpreted
here beyond their id.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass
class Page:
    """One fetched page: edges in order plus the cursor for the next one."""
    edges: list[dict] = field(default_factory=list)
    cursor: str = ""
    has_next_page: bool = False
    total: Optional[int] = None  # Collection size, when the endpoint reports it


@dataclass
class PageResult:
    """Items of a single page and the cursor to resume from."""
    items: list[dict]
    cursor: str
    has_next_page: bool
    total: Optional[int] = None


class PageSource(Protocol):
    async def fetch_page(self, cursor: str, size: int) -> Page:
        """Fetch the page starting at `cursor`. `size` is a hint some endpoints ignore."""
        ...

    def item_id(self, edge: dict) -> Any:
        ...


class Paginator:
    """
    Walks a PageSource.

    Args:
        batch_size: Upper bound on the size hint passed per round, for
            endpoints that cap items per request
        clamp_to_total: Lower the target to the total the endpoint reports
    """

    def __init__(self, batch_size: Optional[int] = None, clamp_to_total: bool = False):
        self.batch_size = batch_size
        self.clamp_to_total = clamp_to_total

    def _size_hint(self, remaining: int) -> int:
        if self.batch_size:
            return min(remaining, self.batch_size)
        return remaining

    def _take(self, source: PageSource, edges: list[dict], items: list[dict], seen: set, target: Optional[int]) -> bool:
        """
        Append `edges` to `items` in order.

        Returns True when the walk must end: the target was met before the
        page ran out, or an id showed up twice.
        """
        for edge in edges:
            if target is not None and len(items) >= target:
                return True

            item_id = source.item_id(edge)
            if item_id in seen:
                logger.warning(f"Duplicate item {item_id} - stopping pagination")
                return True

            seen.add(item_id)
            items.append(edge)
        return False

    async def accumulate(self, source: PageSource, count: int, cursor: str = "") -> list[dict]:
        """
        Collect up to `count` items starting at `cursor`.

        Stops once the count is met (mid-page included), on an empty page,
        when the cursor is terminal, or at the first id seen twice.
        """
        items: list[dict] = []
        seen: set = set()
        target = max(count, 0)
        has_next_page = True

        while len(items) < target and has_next_page:
            page = await source.fetch_page(cursor, self._size_hint(target - len(items)))
            logger.debug(f"Fetched page at cursor {cursor[:20]!r}: {len(page.edges)} edges")

            if self._take(source, page.edges, items, seen, target):
                return items

            if not page.edges:
                return items

            cursor, has_next_page = page.cursor, page.has_next_page

            if self.clamp_to_total and page.total is not None and page.total < target:
                target = page.total

        logger.debug(f"Pagination finished with {len(items)} items")
        return items

    async def paginate(self, source: PageSource, cursor: str = "", size: Optional[int] = None) -> PageResult:
        """
        Fetch one page and return it with the cursor to continue from.

        An empty page is terminal and leaves the cursor where it was.
        """
        page = await source.fetch_page(cursor, size or self.batch_size or 0)

        if not page.edges:
            return PageResult(items=[], cursor=cursor, has_next_page=False, total=page.total)

        items: list[dict] = []
        self._take(source, page.edges, items, set(), None)

        return PageResult(
            items=items,
            cursor=page.cursor,
            has_next_page=page.has_next_page,
            total=page.total,
        )


class CommentBatchFetcher(Paginator):
    """
    Backward walk over a comment endpoint capped at `max_per_request` items.

    Each round asks for min(remaining, cap), the target shrinks to the
    reported comment total, and the cursor is the last comment id seen.
    """

    def __init__(self, max_per_request: int = 300):
        super().__init__(batch_size=max_per_request, clamp_to_total=True)

    async def fetch(self, source: PageSource, count: int, max_id: Optional[str] = None) -> list[dict]:
        return await self.accumulate(source, count, max_id or "")
