"""PingAM Base URL Source resource and data source.

The Base URL Source is a singleton realm service: there is exactly one per
realm, so create behaves as an upsert and the resource id is the realm.
"""
from __future__ import annotations
import logging
from typing import Optional

from fram_provider.core.fram import (
    BaseURLSourceService,
    FramAPIError,
    FramClient,
    FramError,
    NotFoundError,
    normalize_realm,
)
from fram_provider.core.transformer import BaseURLSource
from fram_provider.core.validators import BASE_URL_SOURCES, one_of
from fram_provider.framework import (
    CreateRequest,
    DataSource,
    DataSourceReadRequest,
    DeleteRequest,
    ImportStateRequest,
    ReadRequest,
    Resource,
    Response,
    Schema,
    StringAttribute,
    UpdateRequest,
    import_state_passthrough_id,
    values_equal,
)

logger = logging.getLogger(__name__)

TYPE_SUFFIX = "_am_baseurlsource"

SETTING_ATTRIBUTES = ("source", "context_path", "fixed_value", "extension_class_name")

SOURCE_DESCRIPTION = (
    "Specifies the source of the base URL. Choose from the following:\n\n"
    "\t- Extension class. `EXTENSION_CLASS`\n\n"
    "\t\tSpecifies that the extension class returns a base URL from a provided `HttpServletRequest`. "
    "In the Extension class name field, enter org.forgerock.openam.services.baseurl.BaseURLProvider.\n"
    "\t- Fixed value. `FIXED_VALUE`\n\n"
    "\t\tSpecifies that the base URL is retrieved from a specific base URL value. "
    "In the Fixed value base URL field, enter the base URL value.\n"
    "\t- Forwarded header. `FORWARDED_HEADER`\n\n"
    "\t\tSpecifies that the base URL is retrieved from a forwarded header field in the HTTP request. "
    "The Forwarded HTTP header field is standardized and specified in "
    "[RFC7239](https://tools.ietf.org/html/rfc7239).\n"
    "\t- Host/protocol from incoming request. `REQUEST_VALUES`\n\n"
    "\t\tSpecifies that the hostname, server name, and port are retrieved from the incoming HTTP request.\n"
    "\t- X-Forwarded-* headers. `X_FORWARDED_HEADERS`\n\n"
    "\t\tSpecifies that the base URL is retrieved from non-standard header fields, such as "
    "`X-Forwarded-For`, `X-Forwarded-By`, and `X-Forwarded-Proto`.\n"
)


def _state(bus: BaseURLSource, service: BaseURLSourceService) -> dict:
    state = bus.to_attributes()
    state["id"] = service.resource_id()
    return state


class BaseURLSourceResource(Resource):
    """Manages the realm's Base URL Source service."""

    type_suffix = TYPE_SUFFIX
    client_type = FramClient

    def schema(self) -> Schema:
        return Schema(
            description="PingAM Base URL Source",
            attributes={
                "id": StringAttribute(
                    computed=True,
                    description="Realm the Base URL Source belongs to.",
                ),
                "source": StringAttribute(
                    required=True,
                    description=SOURCE_DESCRIPTION,
                    validators=[one_of(*BASE_URL_SOURCES)],
                ),
                "context_path": StringAttribute(
                    required=True,
                    description="Specifies the context path for the base URL. If provided, the base URL includes "
                                "the deployment context path appended to the calculated URL. For example, `/openam`.",
                ),
                "fixed_value": StringAttribute(
                    required=True,
                    description="If Fixed value is selected as the Base URL source, enter the base URL in the "
                                "Fixed value base URL field.",
                ),
                "extension_class_name": StringAttribute(
                    optional=True,
                    description="If Extension class is selected as the Base URL source, enter "
                                "`org.forgerock.openam.services.baseurl.BaseURLProvider` in the Extension class "
                                "name field.",
                ),
            },
        )

    def create(self, req: CreateRequest) -> Response:
        resp = Response()
        if not self._require_client(resp.diagnostics):
            return resp

        service = BaseURLSourceService(self.client)
        bus = BaseURLSource.from_attributes(req.plan)
        try:
            result = self._upsert(service, bus)
        except FramError as exc:
            resp.diagnostics.add_error("Client Error", f"Unable to create Base URL service, got error: {exc}")
            return resp

        resp.state = _state(result or bus, service)
        logger.debug("created a resource")
        return resp

    def _upsert(self, service: BaseURLSourceService, bus: BaseURLSource) -> Optional[BaseURLSource]:
        try:
            return service.create(bus)
        except FramAPIError as exc:
            if not exc.is_already_exists:
                raise
        logger.info("Base URL Source already exists in realm %s; updating it instead", self.client.realm)
        return service.update(bus)

    def read(self, req: ReadRequest) -> Response:
        resp = Response()
        if not self._require_client(resp.diagnostics):
            return resp

        service = BaseURLSourceService(self.client)
        try:
            bus = service.get()
        except NotFoundError:
            logger.info("Base URL Source missing in realm %s; removing from state", self.client.realm)
            resp.remove_resource()
            return resp
        except FramError as exc:
            resp.diagnostics.add_error("Client Error", f"Unable to read Base URL service, got error: {exc}")
            return resp

        resp.state = _state(bus, service)
        return resp

    def update(self, req: UpdateRequest) -> Response:
        resp = Response()
        if not self._require_client(resp.diagnostics):
            return resp

        changed = []
        for name in SETTING_ATTRIBUTES:
            if not values_equal(req.plan.get(name), req.prior_state.get(name)):
                logger.info("changes detected: %s", name)
                changed.append(name)

        service = BaseURLSourceService(self.client)
        bus = BaseURLSource.from_attributes(req.plan)
        if not changed:
            resp.state = _state(bus, service)
            return resp

        try:
            result = service.update(bus)
        except FramError as exc:
            resp.diagnostics.add_error("Client Error", f"Unable to update Base URL service, got error: {exc}")
            return resp

        resp.state = _state(result or bus, service)
        return resp

    def delete(self, req: DeleteRequest) -> Response:
        resp = Response()
        if not self._require_client(resp.diagnostics):
            return resp

        try:
            BaseURLSourceService(self.client).delete()
        except FramError as exc:
            resp.diagnostics.add_error("Client Error", f"Unable to delete Base URL service, got error: {exc}")
        return resp

    def import_state(self, req: ImportStateRequest) -> Response:
        resp = import_state_passthrough_id(self.schema(), req)
        if resp.diagnostics.has_error() or not self._require_client(resp.diagnostics):
            return resp

        expected = BaseURLSourceService(self.client).resource_id()
        if normalize_realm(req.id) != expected:
            resp.diagnostics.add_error(
                "Import ID Mismatch",
                f"The provider is configured for realm '{expected}' but the import id is '{req.id}'.",
                "id",
            )
            resp.state = None
        return resp


class BaseURLSourceDataSource(DataSource):
    """Reads the realm's Base URL Source settings."""

    type_suffix = TYPE_SUFFIX
    client_type = FramClient

    def schema(self) -> Schema:
        return Schema(
            description="Returns details about the [Base URL Source Service]"
                        "(https://backstage.forgerock.com/docs/am/6.5/oidc1-guide/index.html#configure-base-url-source)",
            attributes={
                "id": StringAttribute(computed=True, description="Realm the Base URL Source belongs to."),
                "source": StringAttribute(computed=True, description=SOURCE_DESCRIPTION),
                "context_path": StringAttribute(
                    computed=True,
                    description="Specifies the context path for the base URL.",
                ),
                "fixed_value": StringAttribute(
                    computed=True,
                    description="If Fixed value is selected as the Base URL source, the base URL in the "
                                "Fixed value base URL field.",
                ),
                "extension_class_name": StringAttribute(
                    computed=True,
                    description="If Extension class is selected as the Base URL source, the Extension class "
                                "name field.",
                ),
            },
        )

    def read(self, req: DataSourceReadRequest) -> Response:
        resp = Response()
        if not self._require_client(resp.diagnostics):
            return resp

        service = BaseURLSourceService(self.client)
        try:
            bus = service.get()
        except NotFoundError:
            resp.diagnostics.add_warning(
                "Base URL Source Not Configured",
                f"No Base URL Source service exists in realm '{self.client.realm}'.",
            )
            bus = BaseURLSource()
        except FramError as exc:
            resp.diagnostics.add_error("Client Error", f"Unable to read Base URL service, got error: {exc}")
            return resp

        resp.state = _state(bus, service)
        logger.debug("read a data source")
        return resp
