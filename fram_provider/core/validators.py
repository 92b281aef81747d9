"""Input validation helpers for attribute values.

Each validator takes a value and raises ValueError with a user-facing
message when the value is not acceptable.
"""
from __future__ import annotations
import json
from typing import Callable, Iterable, List

from authlib.jose import JsonWebKey
from authlib.jose.errors import JoseError

BASE_URL_SOURCES = (
    "EXTENSION_CLASS",
    "FIXED_VALUE",
    "FORWARDED_HEADER",
    "REQUEST_VALUES",
    "X_FORWARDED_HEADERS",
)

ACCOUNT_STATUSES = ("Active", "Inactive")


def one_of(*allowed: str) -> Callable[[str], str]:
    """Build a validator accepting only the given strings."""
    choices = tuple(allowed)

    def _validate(value: str) -> str:
        if value not in choices:
            raise ValueError(f"Value must be one of: {', '.join(choices)}; got '{value}'")
        return value

    _validate.description = f"one of {', '.join(choices)}"
    return _validate


def validate_scopes(scopes: Iterable[str]) -> List[str]:
    """Validate a service account scope list.

    Args:
        scopes: Scope strings such as ``fr:idm:*``

    Returns:
        Scopes with their order kept

    Raises:
        ValueError: If a scope is blank or repeated
    """
    seen = set()
    result = []
    for scope in scopes:
        if not isinstance(scope, str) or not scope.strip():
            raise ValueError("Scopes must be non-empty strings")
        if scope in seen:
            raise ValueError(f"Duplicate scope '{scope}'")
        seen.add(scope)
        result.append(scope)
    return result


def validate_jwks(document: str) -> str:
    """Validate a JWKS document held as a JSON string.

    The document must be a JSON object with a ``keys`` array, and every key
    must be importable as a JSON Web Key.

    Raises:
        ValueError: If the document is not a usable key set
    """
    try:
        parsed = json.loads(document)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ValueError(f"JWKS must be valid JSON: {exc}") from exc

    if not isinstance(parsed, dict) or not isinstance(parsed.get("keys"), list):
        raise ValueError("JWKS must be an object with a 'keys' array")

    try:
        JsonWebKey.import_key_set(parsed)
    except (JoseError, KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"JWKS contains an invalid key: {exc}") from exc

    return document
