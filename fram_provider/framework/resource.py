"""Resource and data source contracts.

A resource implements create/read/update/delete/import_state; a data source
implements read. Every lifecycle method receives a request dataclass and
returns a response carrying the resulting state and diagnostics.
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .diagnostics import Diagnostics
from .schema import Schema

logger = logging.getLogger(__name__)

State = Dict[str, Any]


@dataclass
class CreateRequest:
    plan: State


@dataclass
class ReadRequest:
    state: State


@dataclass
class UpdateRequest:
    plan: State
    prior_state: State


@dataclass
class DeleteRequest:
    state: State


@dataclass
class ImportStateRequest:
    id: str


@dataclass
class DataSourceReadRequest:
    config: State


@dataclass
class Response:
    state: Optional[State] = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    removed: bool = False

    def remove_resource(self) -> None:
        """Drop the object from state; the next plan will recreate it."""
        self.state = None
        self.removed = True


class _Configurable(ABC):
    """Shared metadata and client wiring for resources and data sources."""

    #: Appended to the provider type name, e.g. ``_am_baseurlsource``
    type_suffix: str = ""

    #: Client class this object expects from the provider
    client_type: Optional[type] = None

    def __init__(self) -> None:
        self.client: Any = None

    def metadata(self, provider_type_name: str) -> str:
        return provider_type_name + self.type_suffix

    @abstractmethod
    def schema(self) -> Schema:
        ...

    def configure(self, provider_data: Any) -> Diagnostics:
        diags = Diagnostics()
        # Provider not configured yet; lifecycle calls will report it
        if provider_data is None:
            return diags
        if self.client_type is not None and not isinstance(provider_data, self.client_type):
            diags.add_error(
                "Unexpected Configure Type",
                f"Expected {self.client_type.__name__}, got: {type(provider_data).__name__}. "
                "Please report this issue to the provider developers.",
            )
            return diags
        self.client = provider_data
        return diags

    def _require_client(self, diags: Diagnostics) -> bool:
        if self.client is None:
            diags.add_error(
                "Unconfigured Provider",
                "The provider has not been configured; call configure before using "
                f"'{type(self).__name__}'.",
            )
            return False
        return True


class Resource(_Configurable):
    """Managed object with a full lifecycle."""

    @abstractmethod
    def create(self, req: CreateRequest) -> Response:
        ...

    @abstractmethod
    def read(self, req: ReadRequest) -> Response:
        ...

    @abstractmethod
    def update(self, req: UpdateRequest) -> Response:
        ...

    @abstractmethod
    def delete(self, req: DeleteRequest) -> Response:
        ...

    def import_state(self, req: ImportStateRequest) -> Response:
        resp = Response()
        resp.diagnostics.add_error(
            "Resource Import Not Implemented",
            f"'{type(self).__name__}' does not support import.",
        )
        return resp


class DataSource(_Configurable):
    """Read-only object refreshed on every plan."""

    @abstractmethod
    def read(self, req: DataSourceReadRequest) -> Response:
        ...


def import_state_passthrough_id(schema: Schema, req: ImportStateRequest, attribute: str = "id") -> Response:
    """Seed state with the import identifier; a following read fills the rest."""
    resp = Response()
    if not req.id:
        resp.diagnostics.add_error("Missing Import Identifier", "An import identifier is required.", attribute)
        return resp
    state = schema.null_state()
    state[attribute] = req.id
    resp.state = state
    logger.debug("import passthrough %s=%s", attribute, req.id)
    return resp
