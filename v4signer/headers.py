"""
Canonical headers.

See https://docs.aws.amazon.com/general/latest/gr/sigv4-create-canonical-request.html
"""

import re
from typing import Dict, List, NamedTuple, Optional, Tuple

from .exceptions import InvalidArgumentError

_SPACE_RUN = re.compile(" +")


class Header(NamedTuple):
    name: str
    value: str


def normalize_value(value: str) -> str:
    """Trim and squash spaces, treating embedded newlines as value separators.

    AWS joins the lines of a multi-line header value with commas when it
    builds the canonical request. This is not in the public documentation but
    the reference test suite (``get-header-value-multiline``) depends on it.
    """
    return ",".join(_SPACE_RUN.sub(" ", line.strip(" ")) for line in value.split("\n"))


class CanonicalHeaders:
    """Sorted, lower-cased header names mapped to their values in insertion order."""

    def __init__(self, names: str, canonicalized: str, values: Dict[str, Tuple[str, ...]]) -> None:
        self._names = names
        self._canonicalized = canonicalized
        self._values = values

    @property
    def names(self) -> str:
        """The ``;``-joined signed header names."""
        return self._names

    def get(self) -> str:
        return self._canonicalized

    def get_first_value(self, name: str) -> Optional[str]:
        values = self._values.get(name.lower())
        return values[0] if values else None

    def __repr__(self) -> str:
        return f"CanonicalHeaders({self._names!r})"

    @staticmethod
    def builder() -> "CanonicalHeadersBuilder":
        return CanonicalHeadersBuilder()


class CanonicalHeadersBuilder:

    def __init__(self) -> None:
        self._values: Dict[str, List[str]] = {}

    def add(self, name: Optional[str], value: Optional[str]) -> "CanonicalHeadersBuilder":
        if name is None:
            raise InvalidArgumentError("name is null")
        if value is None:
            raise InvalidArgumentError("value is null")
        self._values.setdefault(name.lower(), []).append(value)
        return self

    def build(self) -> CanonicalHeaders:
        ordered = {name: tuple(self._values[name]) for name in sorted(self._values)}
        names = ";".join(ordered)
        canonicalized = "".join(
            f"{name}:{','.join(normalize_value(value) for value in values)}\n"
            for name, values in ordered.items()
        )
        return CanonicalHeaders(names, canonicalized, ordered)
