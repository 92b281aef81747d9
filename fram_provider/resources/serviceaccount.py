"""PingOne Advanced Identity Cloud service account resource and data source."""
from __future__ import annotations
import json
import logging
from typing import Any, Dict, Optional

from fram_provider.core.fram import (
    AlreadyExistsError,
    FramClient,
    FramError,
    NotFoundError,
    ServiceAccountService,
)
from fram_provider.core.transformer import ServiceAccount
from fram_provider.core.validators import ACCOUNT_STATUSES, one_of, validate_jwks, validate_scopes
from fram_provider.framework import (
    CreateRequest,
    DataSource,
    DataSourceReadRequest,
    DeleteRequest,
    ImportStateRequest,
    ListAttribute,
    ReadRequest,
    Resource,
    Response,
    Schema,
    StringAttribute,
    UpdateRequest,
    import_state_passthrough_id,
)

logger = logging.getLogger(__name__)

TYPE_SUFFIX = "_p1aic_serviceaccount"
DESCRIPTION = "PingOne Advanced Identity Cloud Service Account"


def _same_document(left: Optional[str], right: Optional[str]) -> bool:
    try:
        return json.loads(left) == json.loads(right)
    except (TypeError, ValueError):
        return False


def _state(account: ServiceAccount, prior: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build state from the remote object.

    IDM re-serialises the JWKS; when it still holds the same keys the
    configured text is kept so the next plan shows no change.
    """
    state = account.to_attributes()
    prior_jwks = (prior or {}).get("jwks")
    if prior_jwks and _same_document(prior_jwks, state["jwks"]):
        state["jwks"] = prior_jwks
    return state


class ServiceAccountResource(Resource):
    """Manages a service account."""

    type_suffix = TYPE_SUFFIX
    client_type = FramClient

    def schema(self) -> Schema:
        return Schema(
            description=DESCRIPTION,
            attributes={
                "id": StringAttribute(computed=True, description="Id"),
                "name": StringAttribute(required=True, description="Name"),
                "description": StringAttribute(required=True, description="Description"),
                "scopes": ListAttribute(
                    element_type=str,
                    required=True,
                    description="Scopes granted to the service account, e.g. `fr:idm:*`.",
                    validators=[validate_scopes],
                ),
                "account_status": StringAttribute(
                    required=True,
                    description="Account Status, `Active` or `Inactive`.",
                    validators=[one_of(*ACCOUNT_STATUSES)],
                ),
                "jwks": StringAttribute(
                    required=True,
                    description="JSON Web Key Set holding the account's public keys.",
                    validators=[validate_jwks],
                ),
            },
        )

    def create(self, req: CreateRequest) -> Response:
        resp = Response()
        if not self._require_client(resp.diagnostics):
            return resp

        account = ServiceAccount.from_attributes(req.plan)
        account.id = ""
        try:
            created = ServiceAccountService(self.client).create(account)
        except AlreadyExistsError as exc:
            resp.diagnostics.add_error("Service Account Already Exists", str(exc))
            return resp
        except FramError as exc:
            resp.diagnostics.add_error("Client Error", f"Unable to create service account, got error: {exc}")
            return resp

        if not created.id:
            resp.diagnostics.add_error("Client Error", "Service account was created but no id was returned")
            return resp

        resp.state = _state(created, req.plan)
        logger.debug("created a resource")
        return resp

    def read(self, req: ReadRequest) -> Response:
        resp = Response()
        if not self._require_client(resp.diagnostics):
            return resp

        account_id = req.state.get("id")
        if not account_id:
            resp.diagnostics.add_error("Missing Identifier", "Service account state has no id.", "id")
            return resp

        try:
            account = ServiceAccountService(self.client).read(account_id)
        except NotFoundError:
            logger.info("service account %s no longer exists; removing from state", account_id)
            resp.remove_resource()
            return resp
        except FramError as exc:
            resp.diagnostics.add_error("Client Error", f"Unable to read service account, got error: {exc}")
            return resp

        resp.state = _state(account, req.state)
        return resp

    def update(self, req: UpdateRequest) -> Response:
        resp = Response()
        if not self._require_client(resp.diagnostics):
            return resp

        account_id = req.prior_state.get("id")
        if not account_id:
            resp.diagnostics.add_error("Missing Identifier", "Service account state has no id.", "id")
            return resp

        account = ServiceAccount.from_attributes(req.plan)
        account.id = account_id
        try:
            updated = ServiceAccountService(self.client).update(account_id, account)
        except FramError as exc:
            resp.diagnostics.add_error("Client Error", f"Unable to update service account, got error: {exc}")
            return resp

        if not updated.id:
            updated.id = account_id
        resp.state = _state(updated, req.plan)
        return resp

    def delete(self, req: DeleteRequest) -> Response:
        resp = Response()
        if not self._require_client(resp.diagnostics):
            return resp

        account_id = req.state.get("id")
        if not account_id:
            return resp
        try:
            ServiceAccountService(self.client).delete(account_id)
        except FramError as exc:
            resp.diagnostics.add_error("Client Error", f"Unable to delete service account, got error: {exc}")
        return resp

    def import_state(self, req: ImportStateRequest) -> Response:
        return import_state_passthrough_id(self.schema(), req)


class ServiceAccountDataSource(DataSource):
    """Looks up a service account by id."""

    type_suffix = TYPE_SUFFIX
    client_type = FramClient

    def schema(self) -> Schema:
        return Schema(
            description=DESCRIPTION,
            attributes={
                "id": StringAttribute(required=True, description="Id"),
                "name": StringAttribute(computed=True, description="Name"),
                "description": StringAttribute(computed=True, description="Description"),
                "scopes": ListAttribute(element_type=str, computed=True, description="Scopes"),
                "account_status": StringAttribute(computed=True, description="Account Status"),
                "jwks": StringAttribute(computed=True, description="JWKS"),
            },
        )

    def read(self, req: DataSourceReadRequest) -> Response:
        resp = Response()
        if not self._require_client(resp.diagnostics):
            return resp

        account_id = req.config["id"]
        try:
            account = ServiceAccountService(self.client).read(account_id)
        except NotFoundError as exc:
            resp.diagnostics.add_error("Service Account Not Found", str(exc), "id")
            return resp
        except FramError as exc:
            resp.diagnostics.add_error("Client Error", f"Unable to read service account, got error: {exc}")
            return resp

        state = account.to_attributes()
        state["id"] = account.id or account_id
        resp.state = state
        logger.debug("read a data source")
        return resp
