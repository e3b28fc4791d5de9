"""
Fixed-attempt retry for transport calls.

Only TransportError triggers another attempt. HTTP error statuses come back
as ordinary outcomes for the caller to classify, and attempts follow each
other immediately.
"""

import logging
from typing import Awaitable, Callable, TypeVar

from ..exceptions import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 4


async def execute(
    request_fn: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> T:
    """
    Call `request_fn` until it returns without a TransportError.

    Args:
        request_fn: Zero-argument coroutine function performing one attempt
        max_attempts: Upper bound on calls to `request_fn`

    Returns:
        The first successful result

    Raises:
        TransportError: The last transport failure once attempts run out
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        try:
            return await request_fn()
        except TransportError as e:
            if attempt == max_attempts:
                logger.error(f"Giving up after {max_attempts} attempts: {e}")
                raise
            logger.warning(f"Transport error: {e}, retrying (attempt {attempt}/{max_attempts})")
