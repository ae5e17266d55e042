"""SHA-256 and HMAC-SHA256 wrappers that report failures as signing errors."""

import hashlib
import hmac
from typing import Union

from .encoding import base16_encode, to_utf8
from .exceptions import CryptoPrimitiveError

HASH_ALGORITHM = "sha256"


def sha256_hex(value: Union[str, bytes]) -> str:
    """Lowercase hex SHA-256 digest; strings are hashed as UTF-8."""
    data = to_utf8(value) if isinstance(value, str) else value
    try:
        digest = hashlib.new(HASH_ALGORITHM, data).digest()
    except (ValueError, TypeError) as e:
        raise CryptoPrimitiveError(f"Error hashing with {HASH_ALGORITHM}") from e
    return base16_encode(digest).lower()


def hmac_sha256(key: bytes, value: str) -> bytes:
    data = to_utf8(value)
    try:
        return hmac.new(key, data, HASH_ALGORITHM).digest()
    except (ValueError, TypeError) as e:
        raise CryptoPrimitiveError("Error signing request") from e
