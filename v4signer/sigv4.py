"""
AWS Signature Version 4 signer.

``Signer`` works on a request that is already split into method, raw path,
raw query and headers; ``SigV4Signer`` takes a full URL, fills in the
``Host`` and ``X-Amz-Date`` headers itself and returns ready-to-send headers
or a presigned URL.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import urlsplit

from .credentials import AwsCredentials, AwsCredentialsProviderChain
from .encoding import base16_encode, encode_query_component
from .exceptions import InvalidArgumentError, MissingRequiredHeaderError, SigningError
from .hashing import hmac_sha256, sha256_hex
from .headers import CanonicalHeaders, Header
from .request import CanonicalRequest, HttpRequest
from .scope import AUTH_TAG, CredentialScope, derive_signing_key

logger = logging.getLogger(__name__)

Headers = Dict[str, Any]

ALGORITHM = AUTH_TAG + "-HMAC-SHA256"
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
STREAMING_PAYLOAD = "STREAMING-AWS4-HMAC-SHA256-PAYLOAD"
EMPTY_SHA256 = sha256_hex(b"")

X_AMZ_DATE = "X-Amz-Date"
X_AMZ_ALGORITHM = "X-Amz-Algorithm"
X_AMZ_CREDENTIAL = "X-Amz-Credential"
X_AMZ_EXPIRES = "X-Amz-Expires"
X_AMZ_SIGNED_HEADERS = "X-Amz-SignedHeaders"
X_AMZ_SIGNATURE = "X-Amz-Signature"
X_AMZ_SECURITY_TOKEN = "X-Amz-Security-Token"
X_AMZ_CONTENT_SHA256 = "X-Amz-Content-SHA256"
HOST = "Host"
AUTHORIZATION = "Authorization"

TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"

MIN_EXPIRES = 1
MAX_EXPIRES = 7 * 24 * 60 * 60

# Headers that proxies and clients rewrite in flight
UNSIGNED_HEADERS = frozenset(["expect", "transfer-encoding", "user-agent", "x-amzn-trace-id"])

_DEFAULT_PORTS = {"http": 80, "https": 443}


class Service(str, Enum):
    S3 = "s3"
    GLACIER = "glacier"
    API_GATEWAY = "execute-api"
    DYNAMODB = "dynamodb"
    LAMBDA = "lambda"
    IAM = "iam"
    STS = "sts"
    EC2 = "ec2"
    SQS = "sqs"


def _service_name(service: Union[str, Service]) -> str:
    return service.value if isinstance(service, Service) else service


class Signer:
    """Signature for one request, one credential, one timestamp and one scope.

    Built through ``Signer.builder()``. Nothing changes after construction, so
    an instance can be shared between threads.
    """

    def __init__(
            self,
            request: CanonicalRequest,
            credentials: AwsCredentials,
            date: str,
            scope: CredentialScope,
            expires: Optional[int] = None
    ) -> None:
        self._request = request
        self._credentials = credentials
        self._date = date
        self._scope = scope
        self._expires = expires

    @staticmethod
    def builder() -> "SignerBuilder":
        return SignerBuilder()

    @property
    def scope(self) -> CredentialScope:
        return self._scope

    @property
    def date(self) -> str:
        return self._date

    def get_canonical_request(self) -> str:
        return self._request.get()

    def get_string_to_sign(self) -> str:
        canonical_request = self.get_canonical_request()
        logger.debug("Hashing canonical request '%s' with SHA-256", canonical_request)

        hashed_canonical_request = sha256_hex(canonical_request)
        logger.debug("Hashed canonical request = '%s'", hashed_canonical_request)

        string_to_sign = build_string_to_sign(self._date, self._scope.get(), hashed_canonical_request)
        logger.debug("String to sign is '%s'", string_to_sign)
        return string_to_sign

    def get_signature_hex(self) -> str:
        """The bare 64 character signature."""
        signing_key = derive_signing_key(self._credentials.secret_key, self._scope)
        return base16_encode(hmac_sha256(signing_key, self.get_string_to_sign())).lower()

    def get_signature(self) -> str:
        """
        The value for an ``Authorization`` header.

        This is more than the signature itself: it also names the credential
        scope and the signed headers.
        """
        signature = self.get_signature_hex()
        logger.debug("Signature is '%s'", signature)

        auth_header = build_auth_header(
            self._credentials.access_key,
            self._scope.get(),
            self._request.headers.names,
            signature,
        )
        logger.debug("Authorization header is '%s'", auth_header)
        return auth_header

    def get_presigned_query(self) -> str:
        """The ``X-Amz-*`` query parameters of a presigned URL, signature last."""
        if self._expires is None:
            raise SigningError("signer was not built for a presigned URL; use build_presigned()")
        parameters = presigned_parameters(
            self._credentials.access_key,
            self._scope,
            self._date,
            self._expires,
            self._request.headers.names,
        )
        parameters.append((X_AMZ_SIGNATURE, self.get_signature_hex()))
        return "&".join(
            f"{encode_query_component(name)}={encode_query_component(value)}" for name, value in parameters
        )


def build_string_to_sign(date: str, credential_scope: str, hashed_canonical_request: str) -> str:
    return f"{ALGORITHM}\n{date}\n{credential_scope}\n{hashed_canonical_request}"


def build_auth_header(access_key: str, credential_scope: str, signed_headers: str, signature: str) -> str:
    return (
        f"{ALGORITHM} "
        f"Credential={access_key}/{credential_scope}, "
        f"SignedHeaders={signed_headers}, "
        f"Signature={signature}"
    )


def presigned_parameters(
        access_key: str,
        scope: CredentialScope,
        date: str,
        expires: int,
        signed_headers: str
) -> List[Tuple[str, str]]:
    return [
        (X_AMZ_ALGORITHM, ALGORITHM),
        (X_AMZ_CREDENTIAL, f"{access_key}/{scope.get()}"),
        (X_AMZ_DATE, date),
        (X_AMZ_EXPIRES, str(expires)),
        (X_AMZ_SIGNED_HEADERS, signed_headers),
    ]


class SignerBuilder:

    DEFAULT_REGION = "us-east-1"

    def __init__(self) -> None:
        self._credentials: Optional[AwsCredentials] = None
        self._region = self.DEFAULT_REGION
        self._headers: List[Header] = []
        self._query_parameters: List[Tuple[str, str]] = []

    def aws_credentials(self, credentials: AwsCredentials) -> "SignerBuilder":
        self._credentials = credentials
        return self

    def region(self, region: str) -> "SignerBuilder":
        self._region = region
        return self

    def header(self, name: Union[str, Header], value: Optional[str] = None) -> "SignerBuilder":
        if isinstance(name, Header):
            self._headers.append(name)
        else:
            self._headers.append(Header(name, value))
        return self

    def headers(self, *headers: Header) -> "SignerBuilder":
        self._headers.extend(headers)
        return self

    def query_parameter(self, name: str, value: str) -> "SignerBuilder":
        """Sign an extra, unencoded query parameter that is not part of the request's raw query."""
        self._query_parameters.append((name, value))
        return self

    def build(self, request: HttpRequest, service: Union[str, Service], content_sha256: str) -> Signer:
        service = _service_name(service)
        canonical_headers = self._canonical_headers()
        date = self._required_date(canonical_headers)
        credentials = self._get_aws_credentials()
        canonical_request = CanonicalRequest(
            service, request, canonical_headers, content_sha256, self._query_parameters
        )
        scope = CredentialScope.from_timestamp(date, self._region, service)
        return Signer(canonical_request, credentials, date, scope)

    def build_s3(self, request: HttpRequest, content_sha256: str) -> Signer:
        return self.build(request, Service.S3, content_sha256)

    def build_glacier(self, request: HttpRequest, content_sha256: str) -> Signer:
        return self.build(request, Service.GLACIER, content_sha256)

    def build_api_gateway(self, request: HttpRequest, content_sha256: str) -> Signer:
        return self.build(request, Service.API_GATEWAY, content_sha256)

    def build_presigned(
            self,
            request: HttpRequest,
            service: Union[str, Service],
            expires: int,
            content_sha256: str = UNSIGNED_PAYLOAD
    ) -> Signer:
        """
        Build a signer for a presigned URL.

        The ``X-Amz-Date`` header supplies the timestamp but travels in the
        query string, so it is left out of the signed headers.
        """
        if isinstance(expires, bool) or not isinstance(expires, int) or not MIN_EXPIRES <= expires <= MAX_EXPIRES:
            raise InvalidArgumentError(
                f"expires must be between {MIN_EXPIRES} and {MAX_EXPIRES} seconds, got {expires!r}"
            )
        service = _service_name(service)
        date = self._required_date(self._canonical_headers())
        canonical_headers = self._canonical_headers(exclude=X_AMZ_DATE)
        credentials = self._get_aws_credentials()
        scope = CredentialScope.from_timestamp(date, self._region, service)
        parameters = presigned_parameters(credentials.access_key, scope, date, expires, canonical_headers.names)
        canonical_request = CanonicalRequest(
            service, request, canonical_headers, content_sha256, self._query_parameters + parameters
        )
        return Signer(canonical_request, credentials, date, scope, expires)

    def build_s3_presigned(self, request: HttpRequest, expires: int, content_sha256: str = UNSIGNED_PAYLOAD) -> Signer:
        return self.build_presigned(request, Service.S3, expires, content_sha256)

    def _canonical_headers(self, exclude: Optional[str] = None) -> CanonicalHeaders:
        builder = CanonicalHeaders.builder()
        for name, value in self._headers:
            if exclude is not None and name is not None and name.lower() == exclude.lower():
                continue
            builder.add(name, value)
        return builder.build()

    @staticmethod
    def _required_date(headers: CanonicalHeaders) -> str:
        date = headers.get_first_value(X_AMZ_DATE)
        if date is None:
            raise MissingRequiredHeaderError(X_AMZ_DATE)
        return date

    def _get_aws_credentials(self) -> AwsCredentials:
        if self._credentials is not None:
            return self._credentials
        return AwsCredentialsProviderChain().get_credentials()


def _host_from_url(url: str) -> str:
    parts = urlsplit(url)
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    if parts.port is not None and parts.port != _DEFAULT_PORTS.get(parts.scheme):
        host = f"{host}:{parts.port}"
    return host


def _has_header(headers: Headers, name: str) -> bool:
    return _header_value(headers, name) is not None


def _header_value(headers: Headers, name: str) -> Optional[str]:
    for key, value in headers.items():
        if key.lower() == name.lower():
            return str(value)
    return None


def hash_payload(body: Optional[Union[str, bytes]]) -> str:
    if not body:
        return EMPTY_SHA256
    return sha256_hex(body)


class SigV4Signer:
    """Sign requests described by a URL, stamping them with the current time."""

    def __init__(
            self,
            access_key: str,
            secret_key: str,
            region: str = SignerBuilder.DEFAULT_REGION,
            service: Union[str, Service] = Service.S3,
            token: Optional[str] = None
    ) -> None:
        self.credentials = AwsCredentials(access_key, secret_key)
        self.region = region
        self.service = _service_name(service)
        self.token = token

    @staticmethod
    def _timestamp() -> str:
        return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)

    def _builder(self) -> SignerBuilder:
        return Signer.builder().aws_credentials(self.credentials).region(self.region)

    def create_headers(
            self,
            method: str,
            url: str,
            headers: Optional[Headers] = None,
            body: Optional[Union[str, bytes]] = None
    ) -> Headers:
        """Return a copy of ``headers`` with everything needed to authenticate the request."""
        signed: Headers = {
            name: value for name, value in (headers or {}).items()
            if name.lower() not in (AUTHORIZATION.lower(), X_AMZ_DATE.lower())
        }
        # A caller-supplied payload hash (UNSIGNED-PAYLOAD, streaming) is what gets signed
        payload_hash = _header_value(signed, X_AMZ_CONTENT_SHA256)
        if payload_hash is None:
            payload_hash = hash_payload(body)
            if self.service == Service.S3.value:
                signed[X_AMZ_CONTENT_SHA256] = payload_hash

        if not _has_header(signed, HOST):
            signed[HOST] = _host_from_url(url)
        signed[X_AMZ_DATE] = self._timestamp()
        if self.token:
            signed[X_AMZ_SECURITY_TOKEN] = self.token

        builder = self._builder()
        for name, value in signed.items():
            if name.lower() not in UNSIGNED_HEADERS:
                builder.header(name, str(value))
        signer = builder.build(HttpRequest.from_uri(method, url), self.service, payload_hash)

        signed[AUTHORIZATION] = signer.get_signature()
        return signed

    def create_presigned_url(
            self,
            method: str,
            url: str,
            expires: int = 3600,
            headers: Optional[Headers] = None
    ) -> str:
        """Return ``url`` with the presigned ``X-Amz-*`` query parameters appended."""
        builder = self._builder()
        if not _has_header(headers or {}, HOST):
            builder.header(HOST, _host_from_url(url))
        for name, value in (headers or {}).items():
            if name.lower() not in UNSIGNED_HEADERS and name.lower() != X_AMZ_DATE.lower():
                builder.header(name, str(value))
        builder.header(X_AMZ_DATE, self._timestamp())

        query = ""
        if self.token:
            builder.query_parameter(X_AMZ_SECURITY_TOKEN, self.token)
            query = f"&{X_AMZ_SECURITY_TOKEN}={encode_query_component(self.token)}"

        signer = builder.build_presigned(HttpRequest.from_uri(method, url), self.service, expires)
        separator = "&" if urlsplit(url).query else "?"
        return f"{url}{separator}{signer.get_presigned_query()}{query}"
