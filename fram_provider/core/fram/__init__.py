"""FRAM REST client library.

Architecture:
- client.py: HTTP client with AM session login and auto-refresh
- baseurl.py: Base URL Source realm service
- serviceaccount.py: service account lifecycle (IDM managed objects)
- exceptions.py: Typed exceptions for error handling

Usage:
    from fram_provider.core.fram import FramClient, BaseURLSourceService

    client = FramClient("https://am.example.com/am", "amadmin", "secret", "/alpha")
    client.authenticate()

    settings = BaseURLSourceService(client).get()
"""
from .client import (
    FramClient,
    create_client,
    derive_idm_host,
    parse_json,
    REQUEST_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_USERNAME,
    DEFAULT_PASSWORD,
    DEFAULT_REALM,
)
from .exceptions import (
    FramError,
    FramAPIError,
    AuthenticationError,
    NotFoundError,
    AlreadyExistsError,
    FramConnectionError,
    InvalidResponseError,
)
from .baseurl import BaseURLSourceService, normalize_realm, realm_path
from .serviceaccount import ServiceAccountService

__all__ = [
    # Client
    "FramClient",
    "create_client",
    "derive_idm_host",
    "parse_json",
    "REQUEST_TIMEOUT",
    "DEFAULT_HOST",
    "DEFAULT_USERNAME",
    "DEFAULT_PASSWORD",
    "DEFAULT_REALM",

    # Exceptions
    "FramError",
    "FramAPIError",
    "AuthenticationError",
    "NotFoundError",
    "AlreadyExistsError",
    "FramConnectionError",
    "InvalidResponseError",

    # Services
    "BaseURLSourceService",
    "ServiceAccountService",
    "normalize_realm",
    "realm_path",
]
