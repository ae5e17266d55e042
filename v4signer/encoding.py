"""
Percent-encoding and hex helpers used to build canonical requests.

AWS wants every byte outside the unreserved set (ASCII letters, digits and
``-._~``) escaped as ``%XX`` with uppercase hex digits. That rules out the
``+`` for space produced by form encoders, and any encoder that leaves ``~``
or sub-delimiters alone. ``urllib.parse.quote`` treats exactly the AWS
unreserved set as always safe, so the only knob is whether ``/`` is kept.

Nothing in here ever decodes: a ``%`` already present in the input is itself
escaped to ``%25``.
"""

from urllib.parse import quote

from .exceptions import EncodingError

PATH_SAFE_CHARACTERS = "/"
QUERY_COMPONENT_SAFE_CHARACTERS = ""


def _encode(value: str, safe: str) -> str:
    try:
        return quote(value, safe=safe, encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise EncodingError(f"'{value!r}' cannot be encoded as UTF-8") from e


def encode_path(path: str) -> str:
    """Encode a URI path, keeping ``/`` as the segment separator."""
    return _encode(path, PATH_SAFE_CHARACTERS)


def encode_query_component(component: str) -> str:
    """Encode a query parameter name or value; ``/`` is escaped too."""
    return _encode(component, QUERY_COMPONENT_SAFE_CHARACTERS)


def to_utf8(value: str) -> bytes:
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"'{value!r}' cannot be encoded as UTF-8") from e


def base16_encode(data: bytes) -> str:
    """Uppercase hex encoding of ``data``."""
    return data.hex().upper()
