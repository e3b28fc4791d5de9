"""
Configuration settings for the Instagram client.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ScraperConfig:
    """Main configuration for the client."""

    # Request settings
    request_timeout: float = 30.0

    # Retry settings - transport failures only, no backoff
    max_attempts: int = 4

    # Pagination settings
    posts_per_page: int = 12  # Timeline page size requested per round
    max_comments_per_request: int = 300  # Comment endpoint hard cap

    # Proxy settings
    proxy_url: Optional[str] = None

    # Session persistence
    session_dir: str = "sessions"

    # User agent profile (None = random)
    ua_profile: Optional[str] = None


# Cookie names the session logic depends on
CSRF_COOKIE = "csrftoken"
MID_COOKIE = "mid"
SESSION_COOKIE = "sessionid"
USER_ID_COOKIE = "ds_user_id"  # Only set for a signed-in user

# Alphabet used by media shortcodes (URL-safe base64 digits)
SHORTCODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
