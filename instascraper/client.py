"""
Instagram web API client.

Every request goes through the retry wrapper, carries the active session's
headers, and hands its response back to the session manager so a rotated
csrftoken is picked up.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from . import endpoints
from .cache import CacheStore, FileCacheStore, MemoryCacheStore
from .config import ScraperConfig
from .exceptions import GenericUpstreamError, InvalidArgumentError, NotFoundError
from .models import Account, Comment, Credentials, Location, Media, PaginatedMedia, Tag
from .pagination import CommentBatchFetcher, Paginator
from .parsers import AccountParser, CommentParser, LocationParser, MediaParser, TagParser
from .responses import decode_json, dig, raise_for_outcome
from .session import CookieJar, SessionManager
from .sources import CommentSource, LocationSource, SearchSource, TagSource, TimelineSource
from .transport import HttpOutcome, Transport
from .utils.retry import execute
from .utils.shortcode import code_from_id

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = (301, 302, 303, 307, 308)

# First path segments that are site pages, never usernames
RESERVED_PATHS = {"accounts", "challenge", "explore", "web", "p", "direct", "stories"}


class InstagramClient:
    """
    Instagram client with optional authenticated session.

    Without `login()` requests go out anonymously. With credentials the
    session is cached in `cache` under the username and reused while it
    passes the liveness probe.
    """

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        credentials: Optional[Credentials] = None,
        cache: Optional[CacheStore] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration (uses defaults if not provided)
            credentials: Username/password used by `login`
            cache: Session store (in-memory if not provided)
            transport: HTTP transport (built from `config` if not provided)
        """
        self.config = config or ScraperConfig()
        self.transport = transport or Transport(self.config)
        self.sessions = SessionManager(
            self.transport,
            cache if cache is not None else MemoryCacheStore(),
            credentials,
            max_attempts=self.config.max_attempts,
        )
        self.paginator = Paginator()
        self.comment_fetcher = CommentBatchFetcher(self.config.max_comments_per_request)

    @classmethod
    def with_credentials(
        cls,
        username: str,
        password: str,
        session_dir: Optional[str] = None,
        cache: Optional[CacheStore] = None,
        config: Optional[ScraperConfig] = None,
    ) -> "InstagramClient":
        """Client whose sessions persist to `cache`, or to files under `session_dir`."""
        config = config or ScraperConfig()
        if cache is None:
            cache = FileCacheStore(session_dir or config.session_dir)
        credentials = Credentials(username=username, password=password) if username and password else None
        return cls(config, credentials, cache)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self.transport.close()

    # -- session -------------------------------------------------------------

    async def login(self, force: bool = False):
        await self.sessions.login(force)

    async def is_logged_in(self, session: Optional[CookieJar | dict] = None) -> bool:
        """Probe `session`, or the active session when none is given."""
        return await self.sessions.is_logged_in(self.sessions.session if session is None else session)

    def save_session(self):
        self.sessions.save_session()

    # -- plumbing ------------------------------------------------------------

    async def _send(self, url: str) -> HttpOutcome:
        headers = self.sessions.request_headers()
        outcome = await execute(
            lambda: self.transport.send("GET", url, headers=headers),
            self.config.max_attempts,
        )
        self.sessions.refresh_from_response(outcome)
        return outcome

    async def _fetch_json(self, url: str, not_found: str = "Resource not found") -> dict:
        outcome = await self._send(url)
        raise_for_outcome(outcome, not_found)
        return decode_json(outcome)

    # -- accounts ------------------------------------------------------------

    async def get_account(self, username: str) -> Account:
        """
        Get account information by username.

        Raises:
            NotFoundError: If the account does not exist
        """
        message = "Account with given username does not exist."
        data = await self._fetch_json(endpoints.account_json_url(username), message)
        user = dig(data, "user", error=NotFoundError, message=message)
        return AccountParser.from_account_page(user)

    async def get_account_by_id(self, account_id) -> Account:
        """
        Get an account by numeric id.

        The follow endpoint redirects to the profile page, whose path is
        the username. Any other answer (no redirect, or a redirect to the
        login wall or a challenge) is an upstream error.
        """
        if not str(account_id).isdigit():
            raise InvalidArgumentError("User id must be integer or integer wrapped in string")

        message = "Account with given id does not exist."
        outcome = await self._send(endpoints.follow_url(str(account_id)))
        if outcome.status_code not in REDIRECT_STATUSES:
            raise_for_outcome(outcome, message)
            raise GenericUpstreamError(
                "Follow endpoint did not redirect to a profile",
                status_code=outcome.status_code,
                body=outcome.body,
            )

        location = outcome.headers.get("location", "")
        segments = [part for part in urlparse(location).path.split("/") if part]
        if len(segments) != 1 or segments[0] in RESERVED_PATHS:
            raise GenericUpstreamError(
                f"Follow endpoint redirected to {location!r} instead of a profile",
                status_code=outcome.status_code,
                body=outcome.body,
            )

        return await self.get_account(segments[0])

    async def search_accounts_by_username(self, username: str) -> list[Account]:
        source = SearchSource(self._fetch_json, username, "users")
        result = await self.paginator.paginate(source)
        return [AccountParser.from_search_page(user) for user in result.items]

    # -- media ---------------------------------------------------------------

    async def get_media_by_url(self, media_url: str) -> Media:
        """
        Get a single media by its page URL.

        Raises:
            InvalidArgumentError: If the URL is malformed
            NotFoundError: If the media does not exist or the account is private
        """
        parsed = urlparse(media_url) if isinstance(media_url, str) else None
        if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidArgumentError("Malformed media url")

        message = "Media with given code does not exist or account is private."
        data = await self._fetch_json(endpoints.media_json_url(media_url), message)
        node = dig(data, "graphql", "shortcode_media", error=NotFoundError, message=message)
        return MediaParser.parse(node)

    async def get_media_by_code(self, code: str) -> Media:
        return await self.get_media_by_url(endpoints.media_page_url(code))

    async def get_media_by_id(self, media_id) -> Media:
        return await self.get_media_by_code(code_from_id(media_id))

    async def _timeline(self, username: str) -> TimelineSource:
        account = await self.get_account(username)
        return TimelineSource(self._fetch_json, account.id, self.config.posts_per_page)

    async def get_timeline_medias(self, username: str, count: int = 20) -> list[Media]:
        """Up to `count` of the most recent posts, as the timeline lists them."""
        source = await self._timeline(username)
        nodes = await self.paginator.accumulate(source, count)
        logger.info(f"Fetched {len(nodes)} posts for {username}")
        return [MediaParser.parse(node) for node in nodes]

    async def get_medias(self, username: str, count: int = 20) -> list[Media]:
        """
        Up to `count` of the most recent posts, each loaded from its own page.

        Costs one extra request per post; use `get_timeline_medias` when
        the timeline fields are enough.
        """
        medias = []
        for node in await self.get_timeline_medias(username, count):
            medias.append(await self.get_media_by_code(node.shortcode))
        return medias

    async def get_paginate_medias(self, username: str, max_id: str = "") -> PaginatedMedia:
        """One timeline page of an account, resumable from the returned max_id."""
        source = await self._timeline(username)
        result = await self.paginator.paginate(source, max_id)
        return PaginatedMedia(
            medias=[MediaParser.parse(node) for node in result.items],
            max_id=result.cursor,
            has_next_page=result.has_next_page,
            count=result.total,
        )

    async def get_media_with_tag(self, username: str, tag: str, count: int = 20) -> Optional[Media]:
        """
        Find a recent post of `username` whose caption contains `tag`.

        Scans up to `count` posts. When several match, the oldest of them
        wins. Returns None if none match.
        """
        source = await self._timeline(username)
        match = None
        for node in await self.paginator.accumulate(source, count):
            caption = MediaParser.parse(node).caption
            if caption and tag in caption:
                match = node

        if match is None:
            return None
        return await self.get_media_by_code(MediaParser.parse(match).shortcode)

    # -- tags ----------------------------------------------------------------

    async def get_medias_by_tag(self, tag: str, count: int = 12, max_id: str = "") -> list[Media]:
        nodes = await self.paginator.accumulate(TagSource(self._fetch_json, tag), count, max_id)
        logger.info(f"Fetched {len(nodes)} posts for #{tag}")
        return [MediaParser.parse(node) for node in nodes]

    async def get_paginate_medias_by_tag(self, tag: str, max_id: str = "") -> PaginatedMedia:
        result = await self.paginator.paginate(TagSource(self._fetch_json, tag), max_id)
        return PaginatedMedia(
            medias=[MediaParser.parse(node) for node in result.items],
            max_id=result.cursor,
            has_next_page=result.has_next_page,
            count=result.total,
        )

    async def get_top_medias_by_tag_name(self, tag: str) -> list[Media]:
        data = await self._fetch_json(endpoints.medias_by_tag_url(tag), "Tag with given name does not exist.")
        nodes = dig(data, "tag", "top_posts").get("nodes") or []
        return [MediaParser.parse(node) for node in nodes]

    async def search_tags_by_tag_name(self, tag: str) -> list[Tag]:
        source = SearchSource(self._fetch_json, tag, "hashtags")
        result = await self.paginator.paginate(source)
        return [TagParser.from_search_page(hashtag) for hashtag in result.items]

    # -- locations -----------------------------------------------------------

    async def get_location_medias_by_id(self, location_id, count: int = 12, max_id: str = "") -> list[Media]:
        source = LocationSource(self._fetch_json, str(location_id))
        nodes = await self.paginator.accumulate(source, count, max_id)
        return [MediaParser.parse(node) for node in nodes]

    async def get_location_top_medias_by_id(self, location_id) -> list[Media]:
        data = await self._fetch_json(
            endpoints.medias_by_location_url(str(location_id)),
            "Location with this id doesn't exist",
        )
        nodes = dig(data, "location", "top_posts").get("nodes") or []
        return [MediaParser.parse(node) for node in nodes]

    async def get_location_by_id(self, location_id) -> Location:
        message = "Location with this id doesn't exist"
        data = await self._fetch_json(endpoints.medias_by_location_url(str(location_id)), message)
        return LocationParser.parse(dig(data, "location", error=NotFoundError, message=message))

    # -- comments ------------------------------------------------------------

    async def get_media_comments_by_code(self, code: str, count: int = 10, max_id: Optional[str] = None) -> list[Comment]:
        """
        Get up to `count` comments of a post, newest first.

        Large counts are split into requests of at most
        `config.max_comments_per_request` comments each.
        """
        nodes = await self.comment_fetcher.fetch(CommentSource(self._fetch_json, code), count, max_id)
        logger.info(f"Fetched {len(nodes)} comments for {code}")
        return [CommentParser.parse(node) for node in nodes]

    async def get_media_comments_by_id(self, media_id, count: int = 10, max_id: Optional[str] = None) -> list[Comment]:
        return await self.get_media_comments_by_code(code_from_id(media_id), count, max_id)
