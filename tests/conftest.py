"""Shared pytest fixtures and response builders.

Fixture summary
---------------
config      — ScraperConfig with a fixed browser profile.
cache       — Empty MemoryCacheStore.
client      — InstagramClient (anonymous) closed after the test.
auth_client — InstagramClient with user/pass credentials and the ``cache``.

HTTP traffic is mocked with respx inside each test.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx
import pytest
import pytest_asyncio

from instascraper.cache import MemoryCacheStore
from instascraper.client import InstagramClient
from instascraper.config import ScraperConfig
from instascraper.models import Credentials


def json_response(
    data: Any,
    status_code: int = 200,
    cookies: Optional[dict[str, str]] = None,
) -> httpx.Response:
    """httpx.Response with a JSON body and one Set-Cookie header per cookie."""
    headers = [("set-cookie", f"{name}={value}; Path=/; Secure") for name, value in (cookies or {}).items()]
    return httpx.Response(status_code, content=json.dumps(data).encode(), headers=headers)


def graphql_variables(request: httpx.Request) -> dict:
    return json.loads(request.url.params["variables"])


@pytest.fixture
def config() -> ScraperConfig:
    return ScraperConfig(ua_profile="chrome_windows")


@pytest.fixture
def cache() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest_asyncio.fixture
async def client(config):
    async with InstagramClient(config) as instagram:
        yield instagram


@pytest_asyncio.fixture
async def auth_client(config, cache):
    credentials = Credentials(username="user", password="pass")
    async with InstagramClient(config, credentials=credentials, cache=cache) as instagram:
        yield instagram
