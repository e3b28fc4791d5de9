"""
Conversion between numeric media ids and URL shortcodes.
"""

from ..config import SHORTCODE_ALPHABET
from ..exceptions import InvalidArgumentError


def code_from_id(media_id) -> str:
    """Encode a numeric media id (int or digit string) as a shortcode."""
    media_id = str(media_id).split("_")[0]
    if not media_id.isdigit():
        raise InvalidArgumentError("Media id must be integer or integer wrapped in string")

    value = int(media_id)
    code = ""
    while value > 0:
        value, remainder = divmod(value, 64)
        code = SHORTCODE_ALPHABET[remainder] + code
    return code or SHORTCODE_ALPHABET[0]


def id_from_code(code: str) -> str:
    """Decode a shortcode back into its numeric media id."""
    if not code or any(ch not in SHORTCODE_ALPHABET for ch in code):
        raise InvalidArgumentError(f"Malformed media code: {code!r}")

    value = 0
    for ch in code:
        value = value * 64 + SHORTCODE_ALPHABET.index(ch)
    return str(value)
