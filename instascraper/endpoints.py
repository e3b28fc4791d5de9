"""
Endpoint URL builders.

Every endpoint is fetched with GET except LOGIN_URL, which takes a POST.
"""

import json
from urllib.parse import quote, urlencode

BASE_URL = "https://www.instagram.com"
LOGIN_URL = f"{BASE_URL}/accounts/login/ajax/"
GRAPHQL_URL = f"{BASE_URL}/graphql/query/"

# Persisted graphql query ids
TIMELINE_QUERY_ID = "17888483320059182"
COMMENTS_QUERY_ID = "17852405266163336"


def _graphql(query_id: str, variables: dict) -> str:
    params = {
        "query_id": query_id,
        "variables": json.dumps(variables, separators=(",", ":")),
    }
    return f"{GRAPHQL_URL}?{urlencode(params)}"


def account_json_url(username: str) -> str:
    return f"{BASE_URL}/{quote(username)}/?__a=1"


def account_medias_url(account_id: str, count: int, after: str = "") -> str:
    """Graphql timeline page for an account, `after` being the end cursor."""
    variables = {"id": str(account_id), "first": count}
    if after:
        variables["after"] = after
    return _graphql(TIMELINE_QUERY_ID, variables)


def media_page_url(code: str) -> str:
    return f"{BASE_URL}/p/{code}/"


def media_json_url(media_url: str) -> str:
    return media_url.rstrip("/") + "/?__a=1"


def medias_by_tag_url(tag: str, max_id: str = "") -> str:
    url = f"{BASE_URL}/explore/tags/{quote(tag)}/?__a=1"
    if max_id:
        url += f"&max_id={quote(max_id)}"
    return url


def medias_by_location_url(location_id: str, max_id: str = "") -> str:
    url = f"{BASE_URL}/explore/locations/{quote(str(location_id))}/?__a=1"
    if max_id:
        url += f"&max_id={quote(max_id)}"
    return url


def comments_before_comment_id_url(code: str, count: int, comment_id: str = "") -> str:
    """Graphql comment page walking backward from `comment_id`."""
    variables = {"shortcode": code, "first": count}
    if comment_id:
        variables["after"] = comment_id
    return _graphql(COMMENTS_QUERY_ID, variables)


def general_search_url(query: str) -> str:
    return f"{BASE_URL}/web/search/topsearch/?{urlencode({'query': query})}"


def follow_url(account_id: str) -> str:
    """Redirects to the profile page of the account with `account_id`."""
    return f"{BASE_URL}/web/friendships/{account_id}/follow/"
