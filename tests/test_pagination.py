"""Tests for the generic pagination engine and the comment batch fetcher."""

from __future__ import annotations

import pytest

from instascraper.exceptions import GenericUpstreamError
from instascraper.pagination import CommentBatchFetcher, Page, Paginator


class ListSource:
    """
    Serves `pages` (lists of ids) in order; page i is reached with cursor "c<i>".

    Records every (cursor, size) it was asked for.
    """

    def __init__(self, pages: list[list[int]], total: int | None = None):
        self.pages = pages
        self.total = total
        self.requests: list[tuple[str, int]] = []

    async def fetch_page(self, cursor: str, size: int) -> Page:
        self.requests.append((cursor, size))
        index = int(cursor[1:]) if cursor else 0
        ids = self.pages[index] if index < len(self.pages) else []
        return Page(
            edges=[{"id": str(i)} for i in ids],
            cursor=f"c{index + 1}",
            has_next_page=index + 1 < len(self.pages),
            total=self.total,
        )

    def item_id(self, edge: dict) -> str:
        return edge["id"]


class CommentFeed:
    """Backward comment walk over ids `available-1 .. 0`, honoring the size hint."""

    def __init__(self, available: int, total: int | None = None):
        self.ids = list(range(available - 1, -1, -1))
        self.total = available if total is None else total
        self.sizes: list[int] = []

    async def fetch_page(self, cursor: str, size: int) -> Page:
        self.sizes.append(size)
        start = self.ids.index(int(cursor)) + 1 if cursor else 0
        chunk = self.ids[start:start + size]
        nodes = [{"id": str(i)} for i in chunk]
        return Page(
            edges=nodes,
            cursor=nodes[-1]["id"] if nodes else cursor,
            has_next_page=start + size < len(self.ids),
            total=self.total,
        )

    def item_id(self, edge: dict) -> str:
        return edge["id"]


def ids(items: list[dict]) -> list[str]:
    return [item["id"] for item in items]


PAGES = [[1, 2, 3], [4, 5, 6], [7, 8]]


@pytest.mark.asyncio
class TestAccumulate:
    @pytest.mark.parametrize("count", [0, 1, 2, 3, 4, 6, 7, 8, 9, 50])
    async def test_never_exceeds_count(self, count: int) -> None:
        items = await Paginator().accumulate(ListSource(PAGES), count)

        assert len(items) == min(count, 8)
        assert ids(items) == [str(i) for i in range(1, min(count, 8) + 1)]

    async def test_zero_count_fetches_nothing(self) -> None:
        source = ListSource(PAGES)
        assert await Paginator().accumulate(source, 0) == []
        assert source.requests == []

    async def test_stops_requesting_once_count_met(self) -> None:
        source = ListSource(PAGES)
        await Paginator().accumulate(source, 3)
        assert [cursor for cursor, _ in source.requests] == [""]

    async def test_stops_mid_page(self) -> None:
        source = ListSource(PAGES)
        items = await Paginator().accumulate(source, 5)
        assert ids(items) == ["1", "2", "3", "4", "5"]
        assert len(source.requests) == 2

    async def test_terminal_cursor_ends_walk(self) -> None:
        source = ListSource(PAGES)
        items = await Paginator().accumulate(source, 100)
        assert len(items) == 8
        assert len(source.requests) == 3

    async def test_empty_page_ends_walk(self) -> None:
        source = ListSource([[1, 2], [], [3, 4]])
        items = await Paginator().accumulate(source, 10)
        assert ids(items) == ["1", "2"]
        assert len(source.requests) == 2

    async def test_starting_cursor(self) -> None:
        items = await Paginator().accumulate(ListSource(PAGES), 10, cursor="c1")
        assert ids(items) == ["4", "5", "6", "7", "8"]

    async def test_duplicate_id_stops_walk(self) -> None:
        source = ListSource([[1, 2, 3], [3, 4, 5], [6]])
        items = await Paginator().accumulate(source, 10)
        assert ids(items) == ["1", "2", "3"]
        assert len(source.requests) == 2

    async def test_idempotent(self) -> None:
        first = await Paginator().accumulate(ListSource(PAGES), 7, cursor="")
        second = await Paginator().accumulate(ListSource(PAGES), 7, cursor="")
        assert first == second

    async def test_errors_propagate(self) -> None:
        class Broken(ListSource):
            async def fetch_page(self, cursor: str, size: int) -> Page:
                if cursor:
                    raise GenericUpstreamError("Response code is 500", status_code=500)
                return await super().fetch_page(cursor, size)

        with pytest.raises(GenericUpstreamError):
            await Paginator().accumulate(Broken(PAGES), 10)


@pytest.mark.asyncio
class TestPaginate:
    async def test_single_page_with_cursor(self) -> None:
        result = await Paginator().paginate(ListSource(PAGES))
        assert ids(result.items) == ["1", "2", "3"]
        assert result.cursor == "c1"
        assert result.has_next_page is True

    async def test_last_page_is_terminal(self) -> None:
        result = await Paginator().paginate(ListSource(PAGES), "c2")
        assert ids(result.items) == ["7", "8"]
        assert result.has_next_page is False

    async def test_empty_page_keeps_cursor(self) -> None:
        result = await Paginator().paginate(ListSource([[1], []]), "c1")
        assert result.items == []
        assert result.cursor == "c1"
        assert result.has_next_page is False

    async def test_resumption_matches_accumulate(self) -> None:
        paginator = Paginator()
        first = await paginator.paginate(ListSource(PAGES), "")
        second = await paginator.paginate(ListSource(PAGES), first.cursor)

        walked = first.items + second.items
        accumulated = await paginator.accumulate(ListSource(PAGES), len(walked), "")

        assert walked == accumulated


@pytest.mark.asyncio
class TestCommentBatchFetcher:
    async def test_500_comments_take_two_rounds(self) -> None:
        feed = CommentFeed(available=800)
        comments = await CommentBatchFetcher(max_per_request=300).fetch(feed, 500)

        assert len(comments) == 500
        assert feed.sizes == [300, 200]

    async def test_walks_backward_from_last_id(self) -> None:
        feed = CommentFeed(available=10)
        comments = await CommentBatchFetcher(max_per_request=4).fetch(feed, 10)

        assert ids(comments) == [str(i) for i in range(9, -1, -1)]
        assert feed.sizes == [4, 4, 2]

    async def test_starts_at_max_id(self) -> None:
        feed = CommentFeed(available=10)
        comments = await CommentBatchFetcher(max_per_request=300).fetch(feed, 3, max_id="7")
        assert ids(comments) == ["6", "5", "4"]

    async def test_count_clamped_to_reported_total(self) -> None:
        feed = CommentFeed(available=1000, total=350)
        comments = await CommentBatchFetcher(max_per_request=300).fetch(feed, 900)

        assert len(comments) == 350
        assert feed.sizes == [300, 50]

    async def test_stops_when_no_previous_comments(self) -> None:
        feed = CommentFeed(available=120)
        comments = await CommentBatchFetcher(max_per_request=300).fetch(feed, 500)

        assert len(comments) == 120
        assert feed.sizes == [300]

    async def test_empty_round_returns_what_was_collected(self) -> None:
        class Dwindling(CommentFeed):
            async def fetch_page(self, cursor: str, size: int) -> Page:
                page = await super().fetch_page(cursor, size)
                if cursor:
                    return Page(edges=[], cursor=cursor, has_next_page=True, total=self.total)
                return page

        feed = Dwindling(available=1000)
        comments = await CommentBatchFetcher(max_per_request=300).fetch(feed, 500)

        assert len(comments) == 300
        assert feed.sizes == [300, 200]

    async def test_duplicate_in_second_round_keeps_first_round(self) -> None:
        class Stale(CommentFeed):
            async def fetch_page(self, cursor: str, size: int) -> Page:
                if cursor:
                    return Page(edges=[{"id": "9"}, {"id": "100"}], cursor="100", has_next_page=True, total=self.total)
                return await super().fetch_page(cursor, size)

        comments = await CommentBatchFetcher(max_per_request=3).fetch(Stale(available=10), 6)
        assert ids(comments) == ["9", "8", "7"]
