"""
Browser header generation.
Keeps the User-Agent consistent with its client-hint headers.
"""

import random
from typing import Optional

# Public web app id sent by instagram.com itself
WEB_APP_ID = "936619743392459"

UA_PROFILES = {
    "chrome_windows": {
        "user_agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        ),
        "sec_ch_ua": '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"',
        "sec_ch_ua_platform": '"Windows"',
        "accept_language": "en-US,en;q=0.9",
    },
    "chrome_mac": {
        "user_agent": (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        ),
        "sec_ch_ua": '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"',
        "sec_ch_ua_platform": '"macOS"',
        "accept_language": "en-US,en;q=0.9",
    },
    "firefox_windows": {
        "user_agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) "
            "Gecko/20100101 Firefox/121.0"
        ),
        "sec_ch_ua": None,  # Firefox doesn't send client hints
        "sec_ch_ua_platform": None,
        "accept_language": "en-US,en;q=0.5",
    },
}


class HeaderGenerator:
    """
    Produces request headers for one browser profile.
    The profile is picked once and kept for the lifetime of the generator.
    """

    def __init__(self, profile_name: Optional[str] = None):
        if profile_name and profile_name in UA_PROFILES:
            self.profile_name = profile_name
        else:
            self.profile_name = random.choice(list(UA_PROFILES.keys()))

        self.profile = UA_PROFILES[self.profile_name]

    def get_ajax_headers(self) -> dict[str, str]:
        """Headers for XHR-style JSON requests. Session headers go on top."""
        headers = {
            "User-Agent": self.profile["user_agent"],
            "Accept": "*/*",
            "Accept-Language": self.profile["accept_language"],
            "X-Requested-With": "XMLHttpRequest",
            "X-IG-App-ID": WEB_APP_ID,
        }

        if self.profile.get("sec_ch_ua"):
            headers["Sec-CH-UA"] = self.profile["sec_ch_ua"]
            headers["Sec-CH-UA-Mobile"] = "?0"
            headers["Sec-CH-UA-Platform"] = self.profile["sec_ch_ua_platform"]

        return headers
