"""HTTP request descriptor and the canonical request built from it."""

import re
from functools import cached_property
from typing import Iterable, List, NamedTuple, Optional, Tuple
from urllib.parse import urlsplit

from .encoding import encode_path, encode_query_component
from .exceptions import MalformedPathEncodingError
from .headers import CanonicalHeaders

S3_SERVICE = "s3"

QUERY_PARAMETER_SEPARATOR = "&"
QUERY_PARAMETER_VALUE_SEPARATOR = "="

_ENCODED_PATH = re.compile(r"(?:[A-Za-z0-9\-._~/]|%[0-9A-F]{2})*")


class HttpRequest:
    """Method plus raw, undecoded path and query of the request to sign."""

    __slots__ = ("_method", "_path", "_query")

    def __init__(self, method: str, path: str, query: Optional[str] = None) -> None:
        self._method = method
        self._path = path
        self._query = query

    @classmethod
    def from_uri(cls, method: str, uri: str) -> "HttpRequest":
        parts = urlsplit(uri)
        return cls(method, parts.path, parts.query or None)

    @classmethod
    def from_path_and_query(cls, method: str, path_and_query: str) -> "HttpRequest":
        path, separator, query = path_and_query.partition("?")
        return cls(method, path, query if separator else None)

    @property
    def method(self) -> str:
        return self._method

    @property
    def path(self) -> str:
        return self._path

    @property
    def query(self) -> Optional[str]:
        return self._query

    def __repr__(self) -> str:
        return f"HttpRequest({self._method!r}, {self._path!r}, {self._query!r})"


class Parameter(NamedTuple):
    name: str
    value: Optional[str]


def extract_query_parameters(raw_query: str) -> List[Parameter]:
    """Split a raw query into parameters without decoding anything.

    The scan looks for the next ``=`` first and only then for the ``&`` that
    ends the value. That is not how RFC 3986 queries split, but it is how AWS
    reads them: the ``post-vanilla-query-nonunreserved`` suite case expects
    ``foo&bar=qux`` to be one parameter named ``foo&bar`` with value ``qux``.
    """
    parameters = []
    end = len(raw_query)
    index = 0
    while index < end:
        separator = raw_query.find(QUERY_PARAMETER_VALUE_SEPARATOR, index)
        if separator < 0:
            parameters.append(Parameter(raw_query[index:], None))
            break
        parameter_end = raw_query.find(QUERY_PARAMETER_SEPARATOR, separator)
        if parameter_end < 0:
            parameter_end = end
        parameters.append(Parameter(raw_query[index:separator], raw_query[separator + 1:parameter_end]))
        index = parameter_end + 1
    return parameters


def normalize_query(raw_query: Optional[str], extra_parameters: Iterable[Tuple[str, str]] = ()) -> str:
    parameters = extract_query_parameters(raw_query) if raw_query else []
    parameters.extend(Parameter(name, value) for name, value in extra_parameters)
    if not parameters:
        return ""

    # Stable sort on the raw name, as AWS compares code points
    parameters.sort(key=lambda parameter: parameter.name)

    return QUERY_PARAMETER_SEPARATOR.join(
        f"{encode_query_component(name)}{QUERY_PARAMETER_VALUE_SEPARATOR}{encode_query_component(value or '')}"
        for name, value in parameters
    )


def remove_dot_segments(path: str) -> str:
    """Resolve ``.`` and ``..`` segments and collapse consecutive slashes.

    A path ending in ``/``, ``/.`` or ``/..`` keeps its trailing slash.
    ``..`` at the root is dropped.
    """
    segments = path.split("/")
    output: List[str] = []
    for segment in segments:
        if segment == "..":
            if output:
                output.pop()
        elif segment and segment != ".":
            output.append(segment)

    normalized = "/" + "/".join(output)
    if output and segments[-1] in ("", ".", ".."):
        normalized += "/"
    return normalized


def normalize_path(path: Optional[str], service: str) -> str:
    if not path:
        return "/"
    encoded = encode_path(path)
    if _ENCODED_PATH.fullmatch(encoded) is None:
        raise MalformedPathEncodingError(
            f"The encoded path '{path}' was deemed syntactically incorrect;"
            " there is probably an internal issue with the encoding algorithm"
        )
    if service == S3_SERVICE:
        # S3 keys are taken literally: "//" and "." segments are significant.
        # See https://docs.aws.amazon.com/AmazonS3/latest/API/sig-v4-header-based-auth.html
        return encoded
    return remove_dot_segments(encoded)


class CanonicalRequest:

    def __init__(
            self,
            service: str,
            request: HttpRequest,
            headers: CanonicalHeaders,
            content_sha256: str,
            extra_parameters: Iterable[Tuple[str, str]] = ()
    ) -> None:
        self._service = service
        self._request = request
        self._headers = headers
        self._content_sha256 = content_sha256
        self._extra_parameters = tuple(extra_parameters)

    @property
    def headers(self) -> CanonicalHeaders:
        return self._headers

    @cached_property
    def _canonical(self) -> str:
        return "\n".join([
            self._request.method,
            normalize_path(self._request.path, self._service),
            normalize_query(self._request.query, self._extra_parameters),
            self._headers.get(),
            self._headers.names,
            self._content_sha256,
        ])

    def get(self) -> str:
        return self._canonical

    def __str__(self) -> str:
        return self.get()
