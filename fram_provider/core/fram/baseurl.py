"""AM Base URL Source service operations."""
from __future__ import annotations
import sys
from typing import Optional

from .client import FramClient, parse_json
from .exceptions import FramAPIError, NotFoundError
from ..transformer import BaseURLSource


def _realm_parts(realm: Optional[str]) -> list:
    parts = [part for part in (realm or "/").strip().split("/") if part]
    if parts and parts[0] == "root":
        parts = parts[1:]
    return parts


def normalize_realm(realm: Optional[str]) -> str:
    """Canonical realm name, e.g. ``alpha/`` -> ``/alpha`` and ``root`` -> ``/``."""
    return "/" + "/".join(_realm_parts(realm))


def realm_path(realm: Optional[str]) -> str:
    """Return the AM JSON path prefix for a realm.

    >>> realm_path("/")
    '/json/realms/root'
    >>> realm_path("/alpha/child")
    '/json/realms/root/realms/alpha/realms/child'
    """
    return "/json/realms/root" + "".join(f"/realms/{part}" for part in _realm_parts(realm))


class BaseURLSourceService:
    """Service for the singleton Base URL Source realm service."""

    def __init__(self, client: FramClient):
        """Initialize Base URL Source service.

        Args:
            client: FRAM client bound to the target realm
        """
        self.client = client

    @property
    def path(self) -> str:
        return f"{realm_path(self.client.realm)}/realm-config/services/baseurl"

    def resource_id(self) -> str:
        """Identifier of the singleton: one Base URL Source exists per realm."""
        return normalize_realm(self.client.realm)

    def get(self) -> BaseURLSource:
        """Fetch the current Base URL Source settings.

        Raises:
            NotFoundError: If the service is not configured in the realm
            FramAPIError: On any other HTTP error
        """
        try:
            resp = self.client.get(self.path)
        except FramAPIError as exc:
            if exc.is_not_found:
                raise NotFoundError(f"Base URL Source not configured in realm '{self.client.realm}'") from exc
            raise
        return BaseURLSource.from_api(parse_json(resp))

    def create(self, bus: BaseURLSource) -> Optional[BaseURLSource]:
        """Create the Base URL Source service in the realm.

        Returns:
            Settings echoed by AM, or None if the response carried no body
        """
        resp = self.client.post(self.path, json=bus.to_api(), params={"_action": "create"})
        print(f"[baseurl] Base URL Source created in realm '{self.client.realm}'", file=sys.stderr)
        return _settings_from(resp)

    def update(self, bus: BaseURLSource) -> Optional[BaseURLSource]:
        """Replace the Base URL Source settings."""
        resp = self.client.put(self.path, json=bus.to_api())
        print(f"[baseurl] Base URL Source updated in realm '{self.client.realm}'", file=sys.stderr)
        return _settings_from(resp)

    def delete(self) -> bool:
        """Remove the Base URL Source service.

        Returns:
            False if the service was already absent
        """
        try:
            self.client.delete(self.path)
        except FramAPIError as exc:
            if exc.is_not_found:
                print(f"[baseurl] Base URL Source not found in realm '{self.client.realm}'", file=sys.stderr)
                return False
            raise
        print(f"[baseurl] Base URL Source deleted from realm '{self.client.realm}'", file=sys.stderr)
        return True


def _settings_from(resp) -> Optional[BaseURLSource]:
    if not resp.content:
        return None
    return BaseURLSource.from_api(parse_json(resp))
