import base64
import binascii
import re
from typing import Tuple

_DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>[A-Za-z0-9+/=]*)$")


def to_data_uri(data: bytes, mime_type: str) -> str:
    """
    Encode binary content as a base64 data URI that a browser can use as an image source.

    Args:
        data (bytes): The raw content.
        mime_type (str): MIME type of the content, e.g. ``image/png``.

    Returns:
        str: ``data:<mime_type>;base64,<payload>``
    """
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """Split a base64 data URI back into its MIME type and raw bytes."""
    match = _DATA_URI_PATTERN.match(uri)
    if not match:
        raise ValueError("not a base64 data URI")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 payload: {exc}") from exc
    return match.group("mime"), data
