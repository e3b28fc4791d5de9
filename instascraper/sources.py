"""
Page sources for each paginated endpoint.

Every source turns one JSON response into a Page. Graphql edges are unwrapped
so that items are always the bare node records.
"""

from typing import Awaitable, Callable

from . import endpoints
from .exceptions import GenericUpstreamError
from .pagination import Page
from .responses import dig

FetchJson = Callable[[str], Awaitable[dict]]


def _node_id(node: dict) -> str:
    node_id = node.get("id") if isinstance(node, dict) else None
    if node_id is None:
        raise GenericUpstreamError("Paginated item has no id")
    return str(node_id)


def _unwrap(edges: list) -> list[dict]:
    return [edge["node"] if isinstance(edge, dict) and "node" in edge else edge for edge in edges]


class _NodeSource:
    item_id = staticmethod(_node_id)

    def __init__(self, fetch_json: FetchJson):
        self.fetch_json = fetch_json


class TimelineSource(_NodeSource):
    """Graphql timeline of one account, walked by end_cursor."""

    def __init__(self, fetch_json: FetchJson, account_id: str, page_size: int = 12):
        super().__init__(fetch_json)
        self.account_id = account_id
        self.page_size = page_size

    async def fetch_page(self, cursor: str, size: int) -> Page:
        first = min(size, self.page_size) if size > 0 else self.page_size
        data = await self.fetch_json(endpoints.account_medias_url(self.account_id, first, cursor))
        media = dig(data, "data", "user", "edge_owner_to_timeline_media")
        page_info = media.get("page_info") or {}
        return Page(
            edges=_unwrap(media.get("edges") or []),
            cursor=page_info.get("end_cursor") or "",
            has_next_page=bool(page_info.get("has_next_page")),
            total=media.get("count"),
        )


class _ExploreSource(_NodeSource):
    """Tag and location explore pages share the `<root>.media` shape."""

    root = ""

    def __init__(self, fetch_json: FetchJson, key: str):
        super().__init__(fetch_json)
        self.key = key

    def url(self, cursor: str) -> str:
        raise NotImplementedError

    async def fetch_page(self, cursor: str, size: int) -> Page:
        data = await self.fetch_json(self.url(cursor))
        media = dig(data, self.root, "media")
        page_info = media.get("page_info") or {}
        total = media.get("count")
        edges = media.get("nodes") or []
        if total == 0:
            edges = []
        return Page(
            edges=_unwrap(edges),
            cursor=page_info.get("end_cursor") or "",
            has_next_page=bool(page_info.get("has_next_page")),
            total=total,
        )


class TagSource(_ExploreSource):
    root = "tag"

    def url(self, cursor: str) -> str:
        return endpoints.medias_by_tag_url(self.key, cursor)


class LocationSource(_ExploreSource):
    root = "location"

    def url(self, cursor: str) -> str:
        return endpoints.medias_by_location_url(self.key, cursor)


class CommentSource(_NodeSource):
    """
    Comments of one post, walked backward.

    The cursor is the id of the last comment of the previous round, and
    `size` is sent as the number of comments to return.
    """

    def __init__(self, fetch_json: FetchJson, code: str):
        super().__init__(fetch_json)
        self.code = code

    async def fetch_page(self, cursor: str, size: int) -> Page:
        data = await self.fetch_json(endpoints.comments_before_comment_id_url(self.code, size, cursor))
        comments = dig(data, "data", "shortcode_media", "edge_media_to_comment")
        nodes = _unwrap(comments.get("edges") or [])
        page_info = comments.get("page_info") or {}
        return Page(
            edges=nodes,
            cursor=_node_id(nodes[-1]) if nodes else cursor,
            has_next_page=bool(page_info.get("has_next_page")),
            total=comments.get("count"),
        )


class SearchSource:
    """
    Top search results of one kind (`users` or `hashtags`).

    The endpoint has a single page, so the cursor is always terminal.
    """

    def __init__(self, fetch_json: FetchJson, query: str, kind: str):
        if kind not in ("users", "hashtags"):
            raise ValueError(f"Unknown search kind: {kind}")
        self.fetch_json = fetch_json
        self.query = query
        self.kind = kind

    def item_id(self, entry: dict):
        # Every entry of the single page is returned, repeats included
        return id(entry)

    async def fetch_page(self, cursor: str, size: int) -> Page:
        data = await self.fetch_json(endpoints.general_search_url(self.query))
        if data.get("status") != "ok":
            raise GenericUpstreamError(f"Search status is {data.get('status')!r}")

        entity = "user" if self.kind == "users" else "hashtag"
        entries = [entry[entity] for entry in data.get(self.kind) or [] if isinstance(entry, dict) and entry.get(entity)]
        return Page(edges=entries, cursor="", has_next_page=False)
