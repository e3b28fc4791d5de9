"""Utility modules for the Instagram client."""

from .headers import HeaderGenerator
from .retry import execute
from .shortcode import code_from_id, id_from_code

__all__ = ["HeaderGenerator", "execute", "code_from_id", "id_from_code"]
