import json

import pytest

from fram_provider.core.validators import (
    ACCOUNT_STATUSES,
    BASE_URL_SOURCES,
    one_of,
    validate_jwks,
    validate_scopes,
)


def test_one_of_accepts_listed_values():
    check = one_of(*BASE_URL_SOURCES)
    for source in BASE_URL_SOURCES:
        assert check(source) == source


def test_one_of_rejects_other_values():
    check = one_of(*ACCOUNT_STATUSES)
    with pytest.raises(ValueError, match="Active, Inactive"):
        check("active")


def test_validate_scopes_keeps_order():
    assert validate_scopes(["fr:idm:*", "fr:am:*"]) == ["fr:idm:*", "fr:am:*"]
    assert validate_scopes([]) == []


@pytest.mark.parametrize("scopes", [[""], ["  "], ["fr:idm:*", None]])
def test_validate_scopes_rejects_blank(scopes):
    with pytest.raises(ValueError, match="non-empty"):
        validate_scopes(scopes)


def test_validate_scopes_rejects_duplicates():
    with pytest.raises(ValueError, match="Duplicate scope 'fr:idm:\\*'"):
        validate_scopes(["fr:idm:*", "fr:idm:*"])


def test_validate_jwks_accepts_rsa_key_set(jwks_document):
    assert validate_jwks(jwks_document) == jwks_document


def test_validate_jwks_accepts_empty_key_set():
    assert validate_jwks('{"keys": []}') == '{"keys": []}'


@pytest.mark.parametrize("document", ["not json", "[]", '{"keys": {}}', '{"kid": "x"}'])
def test_validate_jwks_rejects_malformed_documents(document):
    with pytest.raises(ValueError, match="JWKS"):
        validate_jwks(document)


def test_validate_jwks_rejects_unknown_key_type():
    with pytest.raises(ValueError, match="invalid key"):
        validate_jwks(json.dumps({"keys": [{"kty": "XYZ", "kid": "a"}]}))


def test_validate_jwks_rejects_incomplete_rsa_key():
    with pytest.raises(ValueError, match="invalid key"):
        validate_jwks(json.dumps({"keys": [{"kty": "RSA", "kid": "a"}]}))
