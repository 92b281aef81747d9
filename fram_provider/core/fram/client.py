"""Low-level HTTP client for the AM and IDM REST APIs.

Handles authentication, session management, and HTTP operations.
"""
from __future__ import annotations
import re
from typing import Optional, Dict, Any
from datetime import datetime, timedelta

import requests

from .exceptions import FramAPIError, AuthenticationError, FramConnectionError, InvalidResponseError

REQUEST_TIMEOUT = 10

DEFAULT_HOST = "http://localhost:8080/openam"
DEFAULT_USERNAME = "amadmin"
DEFAULT_PASSWORD = "p4ssw0rd"
DEFAULT_REALM = "/"

SESSION_COOKIE = "iPlanetDirectoryPro"
AUTH_API_VERSION = "resource=2.0, protocol=1.0"
CONFIG_API_VERSION = "protocol=1.0, resource=1.0"

# AM sessions default to a 30 minute idle timeout; refresh well before that
SESSION_REFRESH = timedelta(minutes=5)


def derive_idm_host(host: str) -> str:
    """Map an AM URL onto the IDM URL of the same platform deployment.

    >>> derive_idm_host("https://tenant.example.com/am")
    'https://tenant.example.com/openidm'
    """
    host = host.rstrip("/")
    replaced, count = re.subn(r"/(open)?am$", "/openidm", host)
    return replaced if count else f"{host}/openidm"


def parse_json(resp: requests.Response) -> Dict[str, Any]:
    """Decode a successful response body holding a JSON object.

    Raises:
        InvalidResponseError: If the body is not a JSON object (e.g. a proxy error page)
    """
    try:
        payload = resp.json()
    except ValueError as exc:
        raise InvalidResponseError(resp.status_code, resp.text, resp.url) from exc
    if not isinstance(payload, dict):
        raise InvalidResponseError(resp.status_code, resp.text, resp.url)
    return payload


class FramClient:
    """HTTP client for the FRAM platform with automatic session management.

    Features:
    - AM session login via the authenticate endpoint
    - Transparent re-authentication when the session is stale
    - Centralized error handling
    - Optional bearer token for IDM calls

    Usage:
        client = FramClient("https://am.example.com/am", "amadmin", "secret", "/alpha")
        client.authenticate()
        response = client.get("/json/realms/root/realms/alpha/realm-config/services/baseurl")
    """

    def __init__(
        self,
        host: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        realm: Optional[str] = None,
        idm_host: Optional[str] = None,
        access_token: Optional[str] = None,
    ):
        """Initialize FRAM client.

        Args:
            host: AM base URL including its context path
            username: AM administrator username
            password: AM administrator password
            realm: Realm holding the managed configuration
            idm_host: IDM base URL (derived from host when omitted)
            access_token: Bearer token for IDM (AM session used when omitted)
        """
        self.host = (host or DEFAULT_HOST).rstrip("/")
        self.username = username or DEFAULT_USERNAME
        self.password = password or DEFAULT_PASSWORD
        self.realm = realm or DEFAULT_REALM
        self.idm_host = (idm_host or derive_idm_host(self.host)).rstrip("/")
        self.access_token = access_token
        self._token: Optional[str] = None
        self._authenticated_at: Optional[datetime] = None

    def authenticate(self) -> str:
        """Log in to AM and store the session token.

        Returns:
            Session token id

        Raises:
            AuthenticationError: If AM rejects the credentials
        """
        url = f"{self.host}/json/realms/root/authenticate"
        headers = {
            "X-OpenAM-Username": self.username,
            "X-OpenAM-Password": self.password,
            "Accept-API-Version": AUTH_API_VERSION,
            "Content-Type": "application/json",
        }
        try:
            resp = requests.post(url, headers=headers, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as exc:
            raise AuthenticationError(f"Unable to reach {url}: {exc}") from exc
        if resp.status_code != 200:
            raise AuthenticationError(f"status: {resp.status_code}, body: {resp.text}")
        try:
            payload = parse_json(resp)
        except InvalidResponseError as exc:
            raise AuthenticationError(f"Authentication response was not JSON; check the host context path: {exc}") from exc
        token = payload.get("tokenId")
        if not token:
            raise AuthenticationError("Authentication response did not contain a tokenId")
        self._token = token
        self._authenticated_at = datetime.now()
        return token

    def _ensure_authenticated(self) -> None:
        """Ensure we have a fresh session, logging in again if necessary."""
        if not self._token or not self._authenticated_at:
            self.authenticate()
        elif datetime.now() - self._authenticated_at >= SESSION_REFRESH:
            self.authenticate()

    def _am_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "Accept-API-Version": CONFIG_API_VERSION,
            "Content-Type": "application/json",
            "Cookie": f"{SESSION_COOKIE}={self._token}",
        }
        headers.update(extra or {})
        return headers

    def _idm_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        else:
            headers["Cookie"] = f"{SESSION_COOKIE}={self._token}"
        headers.update(extra or {})
        return headers

    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        """Execute an authenticated request against AM.

        Args:
            method: HTTP method
            path: API endpoint path (e.g., "/json/realms/root/realm-config/services/baseurl")
            **kwargs: Additional arguments for requests.request

        Returns:
            Response object

        Raises:
            FramAPIError: On HTTP error
            FramConnectionError: If AM cannot be reached
        """
        self._ensure_authenticated()
        url = f"{self.host}{path}"
        headers = self._am_headers(kwargs.pop("headers", None))
        return self._send(method, url, headers, **kwargs)

    def idm_request(self, method: str, path: str, **kwargs) -> requests.Response:
        """Execute an authenticated request against IDM.

        Raises:
            FramAPIError: On HTTP error
            FramConnectionError: If IDM cannot be reached
        """
        if not self.access_token:
            self._ensure_authenticated()
        url = f"{self.idm_host}{path}"
        headers = self._idm_headers(kwargs.pop("headers", None))
        return self._send(method, url, headers, **kwargs)

    def _send(self, method: str, url: str, headers: Dict[str, str], **kwargs) -> requests.Response:
        try:
            resp = requests.request(method, url, headers=headers, timeout=REQUEST_TIMEOUT, **kwargs)
        except requests.RequestException as exc:
            raise FramConnectionError(f"{method} {url} failed: {exc}") from exc
        self._handle_error(resp)
        return resp

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Optional[Dict[str, Any]] = None, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        return self.request("POST", path, json=json, params=params, **kwargs)

    def put(self, path: str, json: Optional[Dict[str, Any]] = None, **kwargs) -> requests.Response:
        return self.request("PUT", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs) -> requests.Response:
        return self.request("DELETE", path, **kwargs)

    def idm_get(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        return self.idm_request("GET", path, params=params, **kwargs)

    def idm_post(self, path: str, json: Optional[Dict[str, Any]] = None, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        return self.idm_request("POST", path, json=json, params=params, **kwargs)

    def idm_put(self, path: str, json: Optional[Dict[str, Any]] = None, **kwargs) -> requests.Response:
        return self.idm_request("PUT", path, json=json, **kwargs)

    def idm_delete(self, path: str, **kwargs) -> requests.Response:
        return self.idm_request("DELETE", path, **kwargs)

    def _handle_error(self, resp: requests.Response) -> None:
        """Centralized error handling for HTTP responses.

        Args:
            resp: Response object to check

        Raises:
            FramAPIError: If response status indicates error
        """
        if resp.status_code >= 400:
            raise FramAPIError(resp.status_code, resp.text, resp.url)


def create_client(
    host: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    realm: Optional[str] = None,
    idm_host: Optional[str] = None,
    access_token: Optional[str] = None,
) -> FramClient:
    """Create a FramClient and log in immediately.

    Raises:
        AuthenticationError: If AM rejects the credentials
    """
    client = FramClient(host, username, password, realm, idm_host=idm_host, access_token=access_token)
    client.authenticate()
    return client
