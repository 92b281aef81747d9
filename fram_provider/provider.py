"""FRAM provider: schema, configuration and the resource registry."""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Tuple

from fram_provider.config import ProviderConfig, load_settings
from fram_provider.core.fram import FramClient, FramError
from fram_provider.framework import DataSource, Diagnostics, Resource, Schema, StringAttribute
from fram_provider.resources import DATA_SOURCES, RESOURCES

logger = logging.getLogger(__name__)

TYPE_NAME = "fram"


class FramProvider:
    """Provider implementation.

    ``version`` is the provider version on release, "dev" when the provider
    is built and run locally, and "test" when running the test suite.
    """

    def __init__(self, version: str = "dev", settings: Optional[ProviderConfig] = None):
        self.version = version
        self.settings = settings
        self.client: Optional[FramClient] = None
        self._resources: Dict[str, Resource] = {}
        self._data_sources: Dict[str, DataSource] = {}
        for factory in RESOURCES:
            resource = factory()
            self._resources[resource.metadata(TYPE_NAME)] = resource
        for factory in DATA_SOURCES:
            data_source = factory()
            self._data_sources[data_source.metadata(TYPE_NAME)] = data_source

    def metadata(self) -> Dict[str, str]:
        return {"type_name": TYPE_NAME, "version": self.version}

    def schema(self) -> Schema:
        return Schema(attributes={
            "host": StringAttribute(
                optional=True,
                description="FRAM Host to connect as, must include the application context i.e "
                            "`https://internal.example.com/openam`.<BR>The default is `http://localhost:8080/openam`",
            ),
            "username": StringAttribute(
                optional=True,
                description="FRAM username to connect as.<BR>The default is `amadmin`",
            ),
            "password": StringAttribute(
                optional=True,
                sensitive=True,
                description="FRAM Password of username to connect as.<BR>The default is `p4ssw0rd`",
            ),
            "realm": StringAttribute(
                optional=True,
                description="FRAM realm to use i.e `/alpha`.<BR>The default is `/`",
            ),
            "idm_host": StringAttribute(
                optional=True,
                description="IDM base URL used for service accounts. Derived from `host` when unset, "
                            "i.e. `https://tenant.example.com/am` becomes `https://tenant.example.com/openidm`.",
            ),
            "access_token": StringAttribute(
                optional=True,
                sensitive=True,
                description="Bearer token for IDM calls. The AM session is used when unset.",
            ),
        })

    def configure(self, config: Optional[Dict[str, Any]] = None) -> Diagnostics:
        """Build the shared client and hand it to every resource and data source.

        Explicit configuration wins over FRAM_* environment variables, which
        win over the built-in defaults.
        """
        diags = self.schema().validate_config(config)
        if diags.has_error():
            return diags

        settings = (self.settings or load_settings()).merge(config)
        client = FramClient(
            settings.host,
            settings.username,
            settings.password,
            settings.realm,
            idm_host=settings.idm_host or None,
            access_token=settings.access_token or None,
        )
        try:
            client.authenticate()
        except FramError as exc:
            diags.add_error(
                "Unable to Create FRAM Client",
                f"An unexpected error occurred when authenticating against {settings.host}: {exc}",
            )
            return diags

        logger.info("configured provider for %s realm=%s", settings.host, settings.realm)
        self.client = client
        for item in list(self._resources.values()) + list(self._data_sources.values()):
            diags.append(item.configure(client))
        return diags

    def resource_types(self) -> List[str]:
        return sorted(self._resources)

    def data_source_types(self) -> List[str]:
        return sorted(self._data_sources)

    def resource(self, type_name: str) -> Tuple[Optional[Resource], Diagnostics]:
        diags = Diagnostics()
        resource = self._resources.get(type_name)
        if resource is None:
            diags.add_error("Unknown Resource Type", f"The provider does not support resource type '{type_name}'.")
        return resource, diags

    def data_source(self, type_name: str) -> Tuple[Optional[DataSource], Diagnostics]:
        diags = Diagnostics()
        data_source = self._data_sources.get(type_name)
        if data_source is None:
            diags.add_error("Unknown Data Source Type",
                            f"The provider does not support data source type '{type_name}'.")
        return data_source, diags

    def schemas(self) -> Dict[str, Any]:
        """Describe the provider, resource and data source schemas."""
        return {
            "provider": self.schema().to_dict(),
            "resource_schemas": {name: res.schema().to_dict() for name, res in sorted(self._resources.items())},
            "data_source_schemas": {name: ds.schema().to_dict() for name, ds in sorted(self._data_sources.items())},
        }


def new(version: str = "dev"):
    """Return a factory creating providers for the given version."""
    def _factory() -> FramProvider:
        return FramProvider(version=version)
    return _factory
