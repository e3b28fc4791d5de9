"""
Data models for the Instagram client using Pydantic for validation.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Username/password pair, fixed for the lifetime of a client."""
    model_config = ConfigDict(frozen=True)

    username: str
    password: str = Field(repr=False)


class Location(BaseModel):
    """Location page or location attached to a post."""
    id: str
    name: str = ""
    slug: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    has_public_page: bool = False


class Account(BaseModel):
    """Instagram account data."""
    id: str
    username: str
    full_name: str = ""
    biography: str = ""
    profile_pic_url: str = ""
    external_url: Optional[str] = None
    follower_count: int = 0
    following_count: int = 0
    media_count: int = 0
    is_private: bool = False
    is_verified: bool = False


class Media(BaseModel):
    """Instagram post data."""
    id: str = Field(..., description="Media ID (numeric)")
    shortcode: str = Field(..., description="Media shortcode for URL")
    media_type: str = "image"
    caption: Optional[str] = None
    like_count: int = 0
    comment_count: int = 0
    created_time: Optional[int] = Field(default=None, description="Unix timestamp")
    display_url: str = ""
    video_url: Optional[str] = None
    is_video: bool = False
    owner_id: str = ""
    owner_username: str = ""
    location: Optional[Location] = None

    @property
    def link(self) -> str:
        return f"https://www.instagram.com/p/{self.shortcode}/"

    @property
    def created_at(self) -> Optional[datetime]:
        if self.created_time is None:
            return None
        return datetime.fromtimestamp(self.created_time, tz=timezone.utc)


class Comment(BaseModel):
    """Comment on a post."""
    id: str
    text: str = ""
    created_at: Optional[int] = None
    owner_id: str = ""
    owner_username: str = ""
    owner_profile_pic_url: str = ""


class Tag(BaseModel):
    """Hashtag from the search endpoint."""
    name: str
    id: Optional[str] = None
    media_count: int = 0


class PaginatedMedia(BaseModel):
    """One page of media plus the cursor to resume from."""
    medias: list[Media] = Field(default_factory=list)
    max_id: str = ""
    has_next_page: bool = False
    count: Optional[int] = None
