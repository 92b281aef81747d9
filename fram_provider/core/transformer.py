"""Attribute model <-> FRAM REST API data transformations.

Resources and data sources work with flat attribute dicts keyed by
snake_case attribute names. The AM and IDM APIs speak camelCase JSON with
``_id``/``_rev`` metadata. The dataclasses here sit between the two.

Usage:
    # API -> attributes
    bus = BaseURLSource.from_api(resp.json())
    state = bus.to_attributes()

    # attributes -> API
    payload = ServiceAccount.from_attributes(plan).to_api()
"""
from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass
class BaseURLSource:
    """AM Base URL Source realm service settings."""
    source: str = ""
    context_path: str = ""
    fixed_value: str = ""
    extension_class_name: str = ""

    @classmethod
    def from_api(cls, payload: Optional[Dict[str, Any]]) -> "BaseURLSource":
        payload = payload or {}
        return cls(
            source=_text(payload.get("source")),
            context_path=_text(payload.get("contextPath")),
            fixed_value=_text(payload.get("fixedValue")),
            extension_class_name=_text(payload.get("extensionClassName")),
        )

    def to_api(self) -> Dict[str, str]:
        # AM stores unset fields as empty strings rather than omitting them
        return {
            "source": _text(self.source),
            "contextPath": _text(self.context_path),
            "fixedValue": _text(self.fixed_value),
            "extensionClassName": _text(self.extension_class_name),
        }

    @classmethod
    def from_attributes(cls, attrs: Dict[str, Any]) -> "BaseURLSource":
        return cls(
            source=_text(attrs.get("source")),
            context_path=_text(attrs.get("context_path")),
            fixed_value=_text(attrs.get("fixed_value")),
            extension_class_name=_text(attrs.get("extension_class_name")),
        )

    def to_attributes(self) -> Dict[str, str]:
        return {
            "source": self.source,
            "context_path": self.context_path,
            "fixed_value": self.fixed_value,
            "extension_class_name": self.extension_class_name,
        }


@dataclass
class ServiceAccount:
    """PingOne Advanced Identity Cloud service account (IDM ``svcacct``)."""
    id: str = ""
    name: str = ""
    description: str = ""
    scopes: List[str] = field(default_factory=list)
    account_status: str = ""
    jwks: str = ""

    @classmethod
    def from_api(cls, payload: Optional[Dict[str, Any]]) -> "ServiceAccount":
        """Convert an IDM managed object to a ServiceAccount.

        Example:
            >>> sa = ServiceAccount.from_api({
            ...     "_id": "8c1f",
            ...     "name": "ci",
            ...     "scopes": ["fr:idm:*"],
            ...     "accountStatus": "Active",
            ...     "jwks": {"keys": []},
            ... })
            >>> sa.jwks
            '{"keys":[]}'
        """
        payload = payload or {}
        jwks = payload.get("jwks")
        if isinstance(jwks, (dict, list)):
            jwks = json.dumps(jwks, separators=(",", ":"))
        return cls(
            id=_text(payload.get("_id")),
            name=_text(payload.get("name")),
            description=_text(payload.get("description")),
            scopes=[_text(scope) for scope in payload.get("scopes") or []],
            account_status=_text(payload.get("accountStatus")),
            jwks=_text(jwks),
        )

    def to_api(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "scopes": list(self.scopes),
            "accountStatus": self.account_status,
            "jwks": self.jwks,
        }
        if self.id:
            payload["_id"] = self.id
        return payload

    @classmethod
    def from_attributes(cls, attrs: Dict[str, Any]) -> "ServiceAccount":
        return cls(
            id=_text(attrs.get("id")),
            name=_text(attrs.get("name")),
            description=_text(attrs.get("description")),
            scopes=[_text(scope) for scope in attrs.get("scopes") or []],
            account_status=_text(attrs.get("account_status")),
            jwks=_text(attrs.get("jwks")),
        )

    def to_attributes(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "scopes": list(self.scopes),
            "account_status": self.account_status,
            "jwks": self.jwks,
        }
