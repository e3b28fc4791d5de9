"""
Thin async HTTP transport.

Sends one request and reports what came back. Status codes are never
interpreted here and nothing is retried.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from .config import ScraperConfig
from .exceptions import TransportError
from .utils.headers import HeaderGenerator

logger = logging.getLogger(__name__)


@dataclass
class HttpOutcome:
    """Status, body and headers of a single HTTP exchange."""
    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)
    set_cookies: list[str] = field(default_factory=list)
    url: str = ""

    @classmethod
    def from_response(cls, response: httpx.Response) -> "HttpOutcome":
        return cls(
            status_code=response.status_code,
            body=response.text,
            headers={k.lower(): v for k, v in response.headers.items()},
            set_cookies=response.headers.get_list("set-cookie"),
            url=str(response.url),
        )


class Transport:
    """
    Wraps an httpx.AsyncClient.

    Cookies belong to the session manager, so the client's own cookie jar is
    emptied after every exchange.
    """

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or ScraperConfig()
        self.header_gen = HeaderGenerator(self.config.ua_profile)
        self._client = client
        self._owns_client = client is None

    async def _ensure_client(self):
        """Ensure HTTP client is created."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.request_timeout),
                http2=False,
                proxy=self.config.proxy_url,
            )

    async def close(self):
        """Close the HTTP client if we created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        data: Optional[dict] = None,
        follow_redirects: bool = False,
    ) -> HttpOutcome:
        """
        Send a request and return its outcome.

        Raises:
            TransportError: On connection failures, timeouts and other
                network-level errors
        """
        await self._ensure_client()

        request_headers = self.header_gen.get_ajax_headers()
        if headers:
            request_headers.update(headers)

        logger.debug(f"{method} {url}")

        try:
            response = await self._client.request(
                method,
                url,
                headers=request_headers,
                data=data,
                follow_redirects=follow_redirects,
            )
        except httpx.TransportError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
        finally:
            self._client.cookies.clear()

        return HttpOutcome.from_response(response)
