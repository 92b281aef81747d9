"""Pytest shared fixtures."""
import json
import pathlib
import sys
from datetime import datetime
from unittest.mock import MagicMock

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests
from authlib.jose import JsonWebKey
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from fram_provider.config import ProviderConfig
from fram_provider.core.fram import FramClient


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    """
    Prevent unit tests from hitting a live AM/IDM.

    Tests that exercise the HTTP client install their own fakes on top of
    these stubs with monkeypatch.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _refuse(*args, **kwargs):
        raise RuntimeError(f"Unexpected network access in unit test: {args} {kwargs.get('url', '')}")

    monkeypatch.setattr(requests, "request", _refuse)
    monkeypatch.setattr(requests, "get", _refuse)
    monkeypatch.setattr(requests, "post", _refuse)
    monkeypatch.setattr(requests, "put", _refuse)
    monkeypatch.setattr(requests, "delete", _refuse)


@pytest.fixture(autouse=True)
def _clean_fram_env(monkeypatch):
    """Keep developer FRAM_* variables out of the tests."""
    for var in ("FRAM_BASEURL", "FRAM_USERNAME", "FRAM_PASSWORD", "FRAM_REALM",
                "FRAM_IDM_HOST", "FRAM_ACCESS_TOKEN", "FRAM_LOG_LEVEL",
                "FRAM_PLUGIN_HOST", "FRAM_PLUGIN_PORT"):
        monkeypatch.delenv(var, raising=False)


# ─────────────────────────────────────────────────────────────────────────────
# HTTP fakes
# ─────────────────────────────────────────────────────────────────────────────
class FakeResponse:
    """Just enough of requests.Response for the client and services."""

    def __init__(self, payload=None, status_code: int = 200, url: str = "http://fake", text: str = None):
        self._payload = payload
        self.status_code = status_code
        self.url = url
        if text is None:
            text = "" if payload is None else json.dumps(payload)
        self.text = text
        self.content = self.text.encode()

    def json(self):
        # A raw body (e.g. an HTML error page) is decoded like requests does
        if self._payload is None and self.text:
            return json.loads(self.text)
        return self._payload


@pytest.fixture()
def fake_response():
    return FakeResponse


@pytest.fixture()
def settings():
    return ProviderConfig(
        host="https://am.example.com/am",
        username="amadmin",
        password="secret",
        realm="/alpha",
    )


@pytest.fixture()
def unreachable_client(monkeypatch):
    """Real FramClient with a live session whose every request is refused."""
    def _refused(method, url, **kwargs):
        raise requests.ConnectionError(f"Connection refused: {url}")

    monkeypatch.setattr(requests, "request", _refused)
    client = FramClient("https://am.example.com/am", "amadmin", "secret", "/alpha")
    client._token = "session-token"
    client._authenticated_at = datetime.now()
    return client


@pytest.fixture()
def fram_client():
    """MagicMock standing in for an authenticated FramClient."""
    client = MagicMock(spec=FramClient)
    client.realm = "/alpha"
    client.host = "https://am.example.com/am"
    return client


# ─────────────────────────────────────────────────────────────────────────────
# JWKS for service account tests
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(scope="session")
def rsa_public_pem():
    """Generate an RSA public key for JWKS documents."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


@pytest.fixture(scope="session")
def jwks_document(rsa_public_pem):
    """A valid JWKS string holding one RSA signing key."""
    jwk = JsonWebKey.import_key(rsa_public_pem, {"kty": "RSA"}).as_dict()
    jwk["kid"] = "svcacct-key"
    jwk["use"] = "sig"
    jwk["alg"] = "RS256"
    return json.dumps({"keys": [jwk]})
