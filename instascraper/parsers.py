"""
Parsers mapping raw Instagram JSON records onto the models.

Instagram serves the same objects in several shapes (account page, search
page, graphql edges, legacy tag/location nodes), so most parsers try the
graphql key first and fall back to the older one.
"""

from typing import Any, Optional

from .exceptions import ParserError
from .models import Account, Comment, Location, Media, Tag


def _require(data: dict, key: str, kind: str) -> Any:
    value = data.get(key) if isinstance(data, dict) else None
    if value is None or value == "":
        raise ParserError(f"{kind} record is missing '{key}'")
    return value


def _count(data: dict, *keys: str) -> int:
    """First `{"count": n}` object (or bare int) found under `keys`."""
    for key in keys:
        value = data.get(key)
        if isinstance(value, dict) and "count" in value:
            return int(value["count"] or 0)
        if isinstance(value, int):
            return value
    return 0


class AccountParser:
    """Parses account records."""

    @staticmethod
    def from_account_page(user: dict) -> Account:
        """Parse the `user` object of an account page."""
        return Account(
            id=str(_require(user, "id", "Account")),
            username=_require(user, "username", "Account"),
            full_name=user.get("full_name") or "",
            biography=user.get("biography") or "",
            profile_pic_url=user.get("profile_pic_url_hd") or user.get("profile_pic_url") or "",
            external_url=user.get("external_url"),
            follower_count=_count(user, "edge_followed_by", "followed_by"),
            following_count=_count(user, "edge_follow", "follows"),
            media_count=_count(user, "edge_owner_to_timeline_media", "media"),
            is_private=bool(user.get("is_private", False)),
            is_verified=bool(user.get("is_verified", False)),
        )

    @staticmethod
    def from_search_page(user: dict) -> Account:
        """Parse a `users[].user` entry of the top search endpoint."""
        return Account(
            id=str(user.get("pk") or _require(user, "id", "Account")),
            username=_require(user, "username", "Account"),
            full_name=user.get("full_name") or "",
            profile_pic_url=user.get("profile_pic_url") or "",
            follower_count=int(user.get("follower_count") or 0),
            is_private=bool(user.get("is_private", False)),
            is_verified=bool(user.get("is_verified", False)),
        )


class LocationParser:
    """Parses location records."""

    @staticmethod
    def parse(data: dict) -> Location:
        lat = data.get("lat")
        lng = data.get("lng")
        return Location(
            id=str(data.get("pk") or _require(data, "id", "Location")),
            name=data.get("name") or "",
            slug=data.get("slug"),
            lat=float(lat) if lat is not None else None,
            lng=float(lng) if lng is not None else None,
            has_public_page=bool(data.get("has_public_page", False)),
        )


class MediaParser:
    """Parses media records from media pages, timeline edges and tag/location pages."""

    @staticmethod
    def _caption(node: dict) -> Optional[str]:
        edges = (node.get("edge_media_to_caption") or {}).get("edges") or []
        if edges:
            return edges[0].get("node", {}).get("text")
        caption = node.get("caption")
        if isinstance(caption, dict):
            return caption.get("text")
        return caption

    @staticmethod
    def _media_type(node: dict) -> str:
        typename = node.get("__typename", "")
        if typename == "GraphSidecar":
            return "carousel"
        if node.get("is_video") or typename == "GraphVideo":
            return "video"
        return "image"

    @classmethod
    def parse(cls, node: dict) -> Media:
        """
        Parse any media node.

        Handles graphql nodes (`shortcode`, `display_url`,
        `taken_at_timestamp`) and legacy tag page nodes (`code`,
        `display_src`, `date`).
        """
        shortcode = node.get("shortcode") or node.get("code")
        if not shortcode:
            raise ParserError("Media record is missing 'shortcode'")

        owner = node.get("owner") or {}
        location = None
        loc_data = node.get("location")
        if isinstance(loc_data, dict) and (loc_data.get("id") or loc_data.get("pk")):
            location = LocationParser.parse(loc_data)

        created = node.get("taken_at_timestamp") or node.get("date")

        return Media(
            id=str(_require(node, "id", "Media")),
            shortcode=shortcode,
            media_type=cls._media_type(node),
            caption=cls._caption(node),
            like_count=_count(node, "edge_media_preview_like", "edge_liked_by", "likes"),
            comment_count=_count(node, "edge_media_to_comment", "edge_media_to_parent_comment", "comments"),
            created_time=int(created) if created else None,
            display_url=node.get("display_url") or node.get("display_src") or "",
            video_url=node.get("video_url"),
            is_video=bool(node.get("is_video", False)),
            owner_id=str(owner.get("id", "")),
            owner_username=owner.get("username", ""),
            location=location,
        )


class CommentParser:
    """Parses comment nodes of the comment graphql endpoint."""

    @staticmethod
    def parse(node: dict) -> Comment:
        owner = node.get("owner") or {}
        return Comment(
            id=str(_require(node, "id", "Comment")),
            text=node.get("text") or "",
            created_at=node.get("created_at"),
            owner_id=str(owner.get("id", "")),
            owner_username=owner.get("username", ""),
            owner_profile_pic_url=owner.get("profile_pic_url", ""),
        )


class TagParser:
    """Parses `hashtags[].hashtag` entries of the top search endpoint."""

    @staticmethod
    def from_search_page(hashtag: dict) -> Tag:
        tag_id = hashtag.get("id")
        return Tag(
            name=_require(hashtag, "name", "Tag"),
            id=str(tag_id) if tag_id is not None else None,
            media_count=int(hashtag.get("media_count") or 0),
        )
