"""
Exception taxonomy for the Instagram client.
"""

from typing import Optional


class InstagramError(Exception):
    """Base error carrying the upstream status and body when there is one."""

    def __init__(
        self,
        message: str = "",
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class InvalidArgumentError(InstagramError, ValueError):
    """Malformed input, detected before any network call."""
    pass


class NotFoundError(InstagramError):
    """Upstream 404, or a 200 response missing the requested object."""
    pass


class AuthConfigError(InstagramError):
    """Login invoked without credentials."""
    pass


class AuthFailureError(InstagramError):
    """Login POST answered with a non-200 status."""
    pass


class GenericUpstreamError(InstagramError):
    """Unexpected status code or undecodable body."""

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (status {self.status_code})"


class ParserError(GenericUpstreamError):
    """Raised when a raw record lacks a field the models require."""
    pass


class TransportError(InstagramError):
    """Network-level failure (connection, timeout). The only retryable error."""
    pass
