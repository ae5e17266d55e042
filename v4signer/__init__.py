"""
AWS Signature Version 4 - Standalone Implementation

This package computes AWS Signature Version 4 authorization values, as an
``Authorization`` header or as presigned URL query parameters, without
depending on botocore for signing operations.
"""

from .credentials import AwsCredentials, AwsCredentialsProviderChain
from .exceptions import (
    CryptoPrimitiveError,
    EncodingError,
    InvalidArgumentError,
    MalformedPathEncodingError,
    MissingRequiredHeaderError,
    NoCredentialsError,
    SigningError,
)
from .headers import CanonicalHeaders, Header
from .request import HttpRequest
from .sigv4 import (
    EMPTY_SHA256,
    STREAMING_PAYLOAD,
    UNSIGNED_PAYLOAD,
    Headers,
    Service,
    Signer,
    SignerBuilder,
    SigV4Signer,
)

__version__ = "0.1.0"
__all__ = [
    "SigV4Signer",
    "Signer",
    "SignerBuilder",
    "HttpRequest",
    "Header",
    "CanonicalHeaders",
    "AwsCredentials",
    "AwsCredentialsProviderChain",
    "UNSIGNED_PAYLOAD",
    "STREAMING_PAYLOAD",
    "EMPTY_SHA256",
    "Service",
    "Headers",
    "SigningError",
    "MissingRequiredHeaderError",
    "InvalidArgumentError",
    "EncodingError",
    "CryptoPrimitiveError",
    "NoCredentialsError",
    "MalformedPathEncodingError",
]
