"""PingOne Advanced Identity Cloud service account operations (IDM managed objects)."""
from __future__ import annotations
import sys
from urllib.parse import quote

from .client import FramClient, parse_json
from .exceptions import AlreadyExistsError, FramAPIError, NotFoundError
from ..transformer import ServiceAccount

MANAGED_PATH = "/managed/svcacct"


class ServiceAccountService:
    """Service for managing service accounts."""

    def __init__(self, client: FramClient):
        """Initialize service account service.

        Args:
            client: FRAM client with IDM access
        """
        self.client = client

    def _object_path(self, account_id: str) -> str:
        return f"{MANAGED_PATH}/{quote(account_id, safe='')}"

    def read(self, account_id: str) -> ServiceAccount:
        """Fetch a service account by id.

        Raises:
            NotFoundError: If no account has this id
        """
        try:
            resp = self.client.idm_get(self._object_path(account_id))
        except FramAPIError as exc:
            if exc.is_not_found:
                raise NotFoundError(f"Service account '{account_id}' not found") from exc
            raise
        return ServiceAccount.from_api(parse_json(resp))

    def create(self, account: ServiceAccount) -> ServiceAccount:
        """Create a service account; IDM assigns the id.

        Raises:
            AlreadyExistsError: If IDM reports a conflicting object
        """
        try:
            resp = self.client.idm_post(MANAGED_PATH, json=account.to_api(), params={"_action": "create"})
        except FramAPIError as exc:
            if exc.is_already_exists:
                raise AlreadyExistsError(f"Service account '{account.name}' already exists") from exc
            raise
        created = ServiceAccount.from_api(parse_json(resp))
        print(f"[svcacct] Service account '{created.name}' created ({created.id})", file=sys.stderr)
        return created

    def update(self, account_id: str, account: ServiceAccount) -> ServiceAccount:
        """Replace a service account's fields.

        Raises:
            NotFoundError: If no account has this id
        """
        try:
            resp = self.client.idm_put(self._object_path(account_id), json=account.to_api())
        except FramAPIError as exc:
            if exc.is_not_found:
                raise NotFoundError(f"Service account '{account_id}' not found") from exc
            raise
        updated = ServiceAccount.from_api(parse_json(resp))
        print(f"[svcacct] Service account '{account_id}' updated", file=sys.stderr)
        return updated

    def delete(self, account_id: str) -> bool:
        """Delete a service account.

        Returns:
            False if the account was already gone
        """
        try:
            self.client.idm_delete(self._object_path(account_id))
        except FramAPIError as exc:
            if exc.is_not_found:
                print(f"[svcacct] Service account '{account_id}' not found", file=sys.stderr)
                return False
            raise
        print(f"[svcacct] Service account '{account_id}' deleted", file=sys.stderr)
        return True
