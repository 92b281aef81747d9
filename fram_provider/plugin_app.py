"""Flask application factory for the plugin server.

The server holds one FramProvider instance. A host tool configures it once
through ``POST /v1/configure`` and then drives resources and data sources
through the lifecycle endpoints.
"""
from __future__ import annotations
import logging
from typing import Optional

from flask import Flask

from fram_provider import __version__
from fram_provider.config import ProviderConfig, load_settings
from fram_provider.provider import FramProvider


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(provider: Optional[FramProvider] = None, settings: Optional[ProviderConfig] = None) -> Flask:
    """Create and configure the plugin server."""
    cfg = settings or load_settings()

    app = Flask(__name__)
    app.config["PROVIDER_SETTINGS"] = cfg
    app.config["FRAM_PROVIDER"] = provider or FramProvider(version=__version__, settings=cfg)
    app.json.sort_keys = False

    app.logger.setLevel(getattr(logging, cfg.log_level, logging.WARNING))

    # Register blueprints
    from fram_provider.api import errors, health, plugin

    app.register_blueprint(health.bp)
    app.register_blueprint(plugin.bp, url_prefix="/v1")

    # Register error handlers
    errors.register_error_handlers(app)

    provider_meta = app.config["FRAM_PROVIDER"].metadata()
    app.logger.info(
        "[plugin_app] provider=%s version=%s host=%s realm=%s",
        provider_meta["type_name"], provider_meta["version"], cfg.host, cfg.realm,
    )
    return app
