"""
AWS credentials and the chain of providers that can supply them.

Providers are plain callables returning ``AwsCredentials`` or ``None``. The
default chain consults, in order:

1. the ``AWS_ACCESS_KEY`` / ``AWS_SECRET_KEY`` environment variables;
2. the ``aws.accessKeyId`` / ``aws.secretKey`` properties of a dotenv-format
   properties file, ``.env`` in the working directory (or its parents) unless
   another path is given.

The first provider returning a complete pair wins.
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Optional

from dotenv import dotenv_values, find_dotenv

from .exceptions import NoCredentialsError

logger = logging.getLogger(__name__)

ACCESS_KEY_ENV_VAR = "AWS_ACCESS_KEY"
SECRET_KEY_ENV_VAR = "AWS_SECRET_KEY"
ACCESS_KEY_PROPERTY = "aws.accessKeyId"
SECRET_KEY_PROPERTY = "aws.secretKey"


@dataclass(frozen=True)
class AwsCredentials:
    access_key: str
    secret_key: str

    def __repr__(self) -> str:
        return f"AwsCredentials(access_key={self.access_key!r})"


AwsCredentialsProvider = Callable[[], Optional[AwsCredentials]]


def _credentials_from(access_key: Optional[str], secret_key: Optional[str]) -> Optional[AwsCredentials]:
    if access_key and secret_key:
        return AwsCredentials(access_key, secret_key)
    return None


def environment_provider(environ: Optional[Mapping[str, str]] = None) -> AwsCredentialsProvider:
    def provide() -> Optional[AwsCredentials]:
        env = os.environ if environ is None else environ
        return _credentials_from(env.get(ACCESS_KEY_ENV_VAR), env.get(SECRET_KEY_ENV_VAR))

    return provide


def properties_provider(path: Optional[str] = None) -> AwsCredentialsProvider:
    """Read credentials from the properties file at ``path``.

    Without a path the nearest ``.env`` is looked up from the working directory
    each time the provider is called. A missing file yields no credentials.
    """
    def provide() -> Optional[AwsCredentials]:
        properties_path = path if path is not None else find_dotenv(usecwd=True)
        if not properties_path or not os.path.isfile(properties_path):
            return None
        properties = dotenv_values(properties_path)
        return _credentials_from(properties.get(ACCESS_KEY_PROPERTY), properties.get(SECRET_KEY_PROPERTY))

    return provide


class AwsCredentialsProviderChain:

    def __init__(self, providers: Optional[Iterable[AwsCredentialsProvider]] = None) -> None:
        if providers is None:
            providers = [environment_provider(), properties_provider()]
        self.providers: List[AwsCredentialsProvider] = list(providers)

    def get_credentials(self) -> AwsCredentials:
        for provider in self.providers:
            credentials = provider()
            if credentials is not None:
                logger.debug("Using AWS credentials from %s", getattr(provider, "__qualname__", provider))
                return credentials
        raise NoCredentialsError("no AWS credentials were provided")
