"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import os
import sys
from dataclasses import dataclass, replace, asdict
from pathlib import Path
from typing import Any, Dict, Optional

from fram_provider.core.fram.client import (
    DEFAULT_HOST,
    DEFAULT_PASSWORD,
    DEFAULT_REALM,
    DEFAULT_USERNAME,
)

SECRETS_DIR = "/run/secrets"

# provider attribute -> environment variable
ENV_VARS = {
    "host": "FRAM_BASEURL",
    "username": "FRAM_USERNAME",
    "password": "FRAM_PASSWORD",
    "realm": "FRAM_REALM",
    "idm_host": "FRAM_IDM_HOST",
    "access_token": "FRAM_ACCESS_TOKEN",
}

SENSITIVE = ("password", "access_token")


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path(SECRETS_DIR) / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                print(f"[settings] Loaded {secret_name} from {SECRETS_DIR}", file=sys.stderr)
                return secret_value
        except OSError as e:
            print(f"[settings] Failed to read {SECRETS_DIR}/{secret_name}: {e}", file=sys.stderr)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


@dataclass
class ProviderConfig:
    """Provider configuration container."""
    host: str = DEFAULT_HOST
    username: str = DEFAULT_USERNAME
    password: str = DEFAULT_PASSWORD
    realm: str = DEFAULT_REALM
    idm_host: str = ""
    access_token: str = ""

    # Plugin server
    listen_host: str = "127.0.0.1"
    listen_port: int = 8765

    log_level: str = "WARNING"

    def merge(self, overrides: Optional[Dict[str, Any]]) -> "ProviderConfig":
        """Return a copy with explicitly configured values applied.

        Null and empty values leave the current value in place. Username and
        password only replace the defaults as a pair.
        """
        values = {key: value for key, value in (overrides or {}).items()
                  if key in ENV_VARS and value not in (None, "")}
        if not (values.get("username") and values.get("password")):
            values.pop("username", None)
            values.pop("password", None)
        return replace(self, **values)

    def redacted(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in SENSITIVE:
            if data.get(key):
                data[key] = "***"
        return data


def load_settings() -> ProviderConfig:
    """Load provider settings from environment and /run/secrets."""
    host = os.environ.get(ENV_VARS["host"]) or DEFAULT_HOST
    realm = os.environ.get(ENV_VARS["realm"]) or DEFAULT_REALM
    idm_host = os.environ.get(ENV_VARS["idm_host"], "")

    username = os.environ.get(ENV_VARS["username"])
    password = _load_secret_from_file("fram_password", ENV_VARS["password"])
    if not (username and password):
        # Credentials are only honoured as a pair
        if username or password:
            print("[settings] FRAM_USERNAME and FRAM_PASSWORD must both be set; using defaults", file=sys.stderr)
        username, password = DEFAULT_USERNAME, DEFAULT_PASSWORD

    access_token = _load_secret_from_file("fram_access_token", ENV_VARS["access_token"]) or ""

    try:
        listen_port = int(os.environ.get("FRAM_PLUGIN_PORT", "8765"))
    except ValueError:
        raise RuntimeError("FRAM_PLUGIN_PORT must be an integer")

    config = ProviderConfig(
        host=host,
        username=username,
        password=password,
        realm=realm,
        idm_host=idm_host,
        access_token=access_token,
        listen_host=os.environ.get("FRAM_PLUGIN_HOST", "127.0.0.1"),
        listen_port=listen_port,
        log_level=os.environ.get("FRAM_LOG_LEVEL", "WARNING").upper(),
    )
    return config
