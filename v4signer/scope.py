"""Credential scope and the AWS4 signing key derived from it."""

from dataclasses import dataclass

from .encoding import to_utf8
from .hashing import hmac_sha256

AUTH_TAG = "AWS4"
TERMINATION = "aws4_request"
DATE_STAMP_LENGTH = 8


@dataclass(frozen=True)
class CredentialScope:
    date_stamp: str
    region: str
    service: str

    @classmethod
    def from_timestamp(cls, timestamp: str, region: str, service: str) -> "CredentialScope":
        """Build a scope from an ISO 8601 basic timestamp (``YYYYMMDDTHHMMSSZ``)."""
        return cls(timestamp[:DATE_STAMP_LENGTH], region, service)

    def get(self) -> str:
        return f"{self.date_stamp}/{self.region}/{self.service}/{TERMINATION}"

    def __str__(self) -> str:
        return self.get()


def derive_signing_key(secret_key: str, scope: CredentialScope) -> bytes:
    """
    Run the AWS4 key derivation chain.

    Each step keys HMAC-SHA256 with the previous step's output:
    secret -> date -> region -> service -> ``aws4_request``.
    """
    k_secret = to_utf8(AUTH_TAG + secret_key)
    k_date = hmac_sha256(k_secret, scope.date_stamp)
    k_region = hmac_sha256(k_date, scope.region)
    k_service = hmac_sha256(k_region, scope.service)
    return hmac_sha256(k_service, TERMINATION)
