"""Exceptions raised while signing a request."""


class SigningError(Exception):
    """Base exception class for signing errors."""


class MissingRequiredHeaderError(SigningError):
    """Exception raised when a header needed for signing is absent."""

    def __init__(self, header: str) -> None:
        super().__init__(f"headers missing '{header}' header")
        self.header = header


class InvalidArgumentError(SigningError, ValueError):
    """Exception raised when a caller supplies an unusable argument."""


class EncodingError(SigningError):
    """Exception raised when a string cannot be encoded as UTF-8."""


class CryptoPrimitiveError(SigningError):
    """Exception raised when the SHA-256 or HMAC primitive rejects its input."""


class NoCredentialsError(SigningError):
    """Exception raised when no credential provider yields a key pair."""


class MalformedPathEncodingError(SigningError):
    """Exception raised when an encoded path is not a valid URI path."""
