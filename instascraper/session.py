"""
Session state and its lifecycle: cookie jar, login, liveness probe and
persistence.
"""

import asyncio
import logging
from typing import Iterable, Mapping, Optional, Union

from .cache import CacheStore
from .config import CSRF_COOKIE, MID_COOKIE, SESSION_COOKIE, USER_ID_COOKIE
from .endpoints import BASE_URL, LOGIN_URL
from .exceptions import AuthConfigError, AuthFailureError
from .models import Credentials
from .responses import BODY_PREVIEW, raise_for_outcome
from .transport import HttpOutcome, Transport
from .utils.retry import DEFAULT_MAX_ATTEMPTS, execute

logger = logging.getLogger(__name__)


def parse_set_cookies(raw: Union[str, Iterable[str], None]) -> dict[str, str]:
    """
    Parse one or many Set-Cookie values into a name -> value mapping.

    Attributes after the first `;` are dropped. Entries without a value are
    ignored.
    """
    if raw is None:
        return {}
    if isinstance(raw, str):
        raw = [raw]

    cookies = {}
    for header in raw:
        pair = header.split(";", 1)[0]
        name, sep, value = pair.partition("=")
        name = name.strip()
        if sep and name and value:
            cookies[name] = value.strip()
    return cookies


def _headers_for(cookies: Mapping[str, str]) -> dict[str, str]:
    cookie = "; ".join(f"{key}={value}" for key, value in cookies.items())
    return {
        "cookie": cookie + ";",
        "referer": BASE_URL + "/",
        "x-csrftoken": cookies.get(CSRF_COOKIE, ""),
    }


class CookieJar:
    """Cookie name -> value mapping that makes up a session."""

    def __init__(self, cookies: Optional[Mapping[str, str]] = None):
        self.cookies: dict[str, str] = dict(cookies or {})

    def __bool__(self) -> bool:
        return bool(self.cookies)

    @property
    def csrf_token(self) -> Optional[str]:
        return self.cookies.get(CSRF_COOKIE)

    @property
    def mid(self) -> Optional[str]:
        return self.cookies.get(MID_COOKIE)

    @property
    def session_id(self) -> Optional[str]:
        return self.cookies.get(SESSION_COOKIE)

    def update(self, set_cookie_headers: Union[str, Iterable[str], None], only: Optional[Iterable[str]] = None) -> dict[str, str]:
        """
        Upsert cookies found in the given Set-Cookie values.

        With `only`, cookies with other names are ignored. Returns the
        cookies whose value changed.
        """
        parsed = parse_set_cookies(set_cookie_headers)
        if only is not None:
            wanted = set(only)
            parsed = {name: value for name, value in parsed.items() if name in wanted}

        changed = {name: value for name, value in parsed.items() if self.cookies.get(name) != value}
        self.cookies.update(changed)
        return changed

    def as_request_headers(self) -> dict[str, str]:
        """cookie/referer/x-csrftoken headers, or nothing for an empty jar."""
        if not self.cookies:
            return {}
        return _headers_for(self.cookies)

    def to_dict(self) -> dict[str, str]:
        return dict(self.cookies)


class SessionManager:
    """
    Owns the active session of one client.

    States go NoSession -> ProbingLiveness -> LoggingIn -> Authenticated.
    Nothing outside this class writes to the cookie jar; request code hands
    each response to `refresh_from_response` instead.
    """

    def __init__(
        self,
        transport: Transport,
        cache: CacheStore,
        credentials: Optional[Credentials] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.transport = transport
        self.cache = cache
        self.credentials = credentials
        self.max_attempts = max_attempts
        self.session = CookieJar()
        self._login_lock = asyncio.Lock()

    @property
    def is_authenticated(self) -> bool:
        return self.session.session_id is not None

    async def _send(self, method: str, url: str, headers: Optional[dict] = None, data: Optional[dict] = None) -> HttpOutcome:
        return await execute(
            lambda: self.transport.send(method, url, headers=headers, data=data),
            self.max_attempts,
        )

    def request_headers(self) -> dict[str, str]:
        return self.session.as_request_headers()

    def refresh_from_response(self, outcome: HttpOutcome):
        """
        Adopt a rotated csrftoken from a response.

        Anonymous sessions keep the token too; they stay unauthenticated
        because that keys on `sessionid`.
        """
        if self.session.update(outcome.set_cookies, only=(CSRF_COOKIE,)):
            logger.debug("csrftoken refreshed from response")

    async def login(self, force: bool = False):
        """
        Make an authenticated session active.

        Reuses the cached session for the username unless `force` is set or
        the cached session fails the liveness probe.

        Raises:
            AuthConfigError: If no credentials were provided
            AuthFailureError: If the login POST is rejected
        """
        if not self.credentials or not self.credentials.username or not self.credentials.password:
            raise AuthConfigError("User credentials not provided")

        username = self.credentials.username

        async with self._login_lock:
            cached = self.cache.get(username)

            if force or not await self.is_logged_in(cached):
                cookies = await self._fresh_login()
                self.session = CookieJar(cookies)
                self.save_session()
                logger.info(f"Logged in as {username}")
            else:
                self.session = CookieJar(cached)
                logger.info(f"Reusing cached session for {username}")

    async def _fresh_login(self) -> dict[str, str]:
        """Anonymous GET for mid/csrftoken, then the credentials POST."""
        outcome = await self._send("GET", BASE_URL + "/")
        raise_for_outcome(outcome)

        cookies = parse_set_cookies(outcome.set_cookies)
        mid = cookies.get(MID_COOKIE)
        csrf_token = cookies.get(CSRF_COOKIE, "")

        headers = _headers_for({CSRF_COOKIE: csrf_token, MID_COOKIE: mid or ""})
        outcome = await self._send(
            "POST",
            LOGIN_URL,
            headers=headers,
            data={
                "username": self.credentials.username,
                "password": self.credentials.password,
            },
        )

        if outcome.status_code != 200:
            raise AuthFailureError(
                f"Response code is {outcome.status_code}. Body: {outcome.body[:BODY_PREVIEW]}",
                status_code=outcome.status_code,
                body=outcome.body,
            )

        session = parse_set_cookies(outcome.set_cookies)
        if mid:
            session[MID_COOKIE] = mid
        return session

    async def is_logged_in(self, session: Union[CookieJar, Mapping[str, str], None]) -> bool:
        """
        Probe whether `session` is still accepted upstream.

        Works on the candidate only; the active session is left untouched.
        """
        if session is None:
            return False

        cookies = session.to_dict() if isinstance(session, CookieJar) else dict(session)
        session_id = cookies.get(SESSION_COOKIE)
        if not session_id:
            return False

        headers = _headers_for({
            CSRF_COOKIE: cookies.get(CSRF_COOKIE, ""),
            SESSION_COOKIE: session_id,
        })
        outcome = await self._send("GET", BASE_URL + "/", headers=headers)
        if outcome.status_code != 200:
            logger.debug(f"Liveness probe answered {outcome.status_code}")
            return False

        return USER_ID_COOKIE in parse_set_cookies(outcome.set_cookies)

    def save_session(self):
        """Write the whole active session under the username, replacing any prior entry."""
        if not self.credentials:
            raise AuthConfigError("User credentials not provided")

        self.cache.set(self.credentials.username, self.session.to_dict())
        self.cache.save()
        logger.info(f"Session saved for {self.credentials.username}")
