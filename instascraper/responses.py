"""
Classification of transport outcomes into the error taxonomy.
"""

import json
from typing import Any, Type

from .exceptions import GenericUpstreamError, InstagramError, NotFoundError
from .transport import HttpOutcome

# Bodies quoted in error messages are cut to this many characters
BODY_PREVIEW = 500


def raise_for_outcome(outcome: HttpOutcome, not_found_message: str = "Resource not found"):
    """
    Raise for anything but HTTP 200.

    Raises:
        NotFoundError: On 404
        GenericUpstreamError: On any other non-200 status
    """
    if outcome.status_code == 404:
        raise NotFoundError(not_found_message, status_code=404, body=outcome.body)

    if outcome.status_code != 200:
        raise GenericUpstreamError(
            f"Response code is {outcome.status_code}. Body: {outcome.body[:BODY_PREVIEW]}",
            status_code=outcome.status_code,
            body=outcome.body,
        )


def decode_json(outcome: HttpOutcome) -> dict:
    """Decode a JSON object body, raising GenericUpstreamError if it isn't one."""
    try:
        data = json.loads(outcome.body)
    except json.JSONDecodeError as e:
        raise GenericUpstreamError(
            f"Response decoding failed: {e}",
            status_code=outcome.status_code,
            body=outcome.body,
        ) from e

    if not isinstance(data, dict):
        raise GenericUpstreamError(
            "Response decoding failed: expected a JSON object",
            status_code=outcome.status_code,
            body=outcome.body,
        )
    return data


def dig(
    data: dict,
    *path: str,
    error: Type[InstagramError] = GenericUpstreamError,
    message: str = "",
) -> Any:
    """
    Follow `path` through nested dicts.

    A missing key or a non-dict along the way raises `error`. Lookups pass
    NotFoundError when the path leads to the object that was asked for and
    keep GenericUpstreamError for structural fields.
    """
    node = data
    for key in path:
        if not isinstance(node, dict) or node.get(key) is None:
            raise error(message or f"Response is missing '{'.'.join(path)}'")
        node = node[key]
    return node
