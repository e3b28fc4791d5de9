"""
instascraper - async client for the Instagram web API.

This client:
- Logs in with username/password and caches the session per username
- Retries transport failures (never HTTP error statuses)
- Walks cursor pagination for timelines, tags, locations and search
- Fetches comments in capped backward batches
"""

from .cache import FileCacheStore, MemoryCacheStore
from .client import InstagramClient
from .config import ScraperConfig
from .exceptions import (
    AuthConfigError,
    AuthFailureError,
    GenericUpstreamError,
    InstagramError,
    InvalidArgumentError,
    NotFoundError,
    ParserError,
    TransportError,
)
from .models import Account, Comment, Credentials, Location, Media, PaginatedMedia, Tag

__version__ = "1.0.0"
__all__ = [
    "InstagramClient",
    "ScraperConfig",
    "FileCacheStore",
    "MemoryCacheStore",
    "Account",
    "Comment",
    "Credentials",
    "Location",
    "Media",
    "PaginatedMedia",
    "Tag",
    "InstagramError",
    "InvalidArgumentError",
    "NotFoundError",
    "AuthConfigError",
    "AuthFailureError",
    "GenericUpstreamError",
    "ParserError",
    "TransportError",
]
