"""Plan / apply / read / import orchestration over the resource contracts.

These functions are what the plugin server and the CLI call. They never
raise for expected failures; everything is reported through diagnostics.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .diagnostics import Diagnostic, Diagnostics
from .resource import (
    CreateRequest,
    DataSource,
    DataSourceReadRequest,
    DeleteRequest,
    ImportStateRequest,
    ReadRequest,
    Resource,
    Response,
    State,
    UpdateRequest,
)

logger = logging.getLogger(__name__)

CREATE = "create"
UPDATE = "update"
DELETE = "delete"
NOOP = "noop"
ACTIONS = (CREATE, UPDATE, DELETE, NOOP)


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == ()


def values_equal(left: Any, right: Any) -> bool:
    # An unset optional attribute matches the empty value AM reports back
    if _is_empty(left) and _is_empty(right):
        return True
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return list(left) == list(right)
    return left == right


@dataclass
class Plan:
    """Proposed change for one resource instance."""
    action: str
    prior_state: Optional[State] = None
    planned_state: Optional[State] = None
    changed: List[str] = field(default_factory=list)
    unknown: List[str] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "prior_state": self.prior_state,
            "planned_state": self.planned_state,
            "changed": list(self.changed),
            "unknown": list(self.unknown),
            "diagnostics": self.diagnostics.to_list(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Plan":
        """Rebuild a plan received over the wire.

        Raises:
            ValueError: If the action is missing or unknown
        """
        action = data.get("action")
        if action not in ACTIONS:
            raise ValueError(f"Unknown plan action: {action!r}")
        diagnostics = Diagnostics(
            Diagnostic(
                item.get("severity", "error"),
                item.get("summary", ""),
                item.get("detail", ""),
                item.get("attribute"),
            )
            for item in data.get("diagnostics") or []
        )
        return cls(
            action=action,
            prior_state=data.get("prior_state"),
            planned_state=data.get("planned_state"),
            changed=list(data.get("changed") or []),
            unknown=list(data.get("unknown") or []),
            diagnostics=diagnostics,
        )


def plan(resource: Resource, prior_state: Optional[State], config: Optional[State]) -> Plan:
    """Compute the change needed to move prior_state towards config.

    A missing config means the resource was removed from configuration and
    should be destroyed; a missing prior state means it should be created.
    """
    schema = resource.schema()

    if config is None:
        if prior_state is None:
            return Plan(action=NOOP)
        return Plan(action=DELETE, prior_state=prior_state)

    diags = schema.validate_config(config)
    if diags.has_error():
        return Plan(action=NOOP, prior_state=prior_state, diagnostics=diags)

    planned = schema.null_state()
    unknown = []
    for name, attr in schema.attributes.items():
        value = config.get(name)
        if isinstance(value, tuple):
            value = list(value)
        if value is None and attr.computed:
            if prior_state is not None and prior_state.get(name) is not None:
                value = prior_state.get(name)
            else:
                unknown.append(name)
        planned[name] = value

    if prior_state is None:
        changed = [name for name, attr in schema.attributes.items()
                   if attr.configurable and planned[name] is not None]
        return Plan(action=CREATE, planned_state=planned, changed=changed, unknown=unknown, diagnostics=diags)

    changed = [name for name, attr in schema.attributes.items()
               if attr.configurable and not values_equal(planned[name], prior_state.get(name))]
    action = UPDATE if changed else NOOP
    if action == NOOP:
        planned = dict(prior_state)
    logger.debug("planned %s for %s: changed=%s", action, type(resource).__name__, changed)
    return Plan(action=action, prior_state=prior_state, planned_state=planned,
                changed=changed, unknown=unknown, diagnostics=diags)


def _validate_planned_state(resource: Resource, planned_state: Optional[State]) -> Diagnostics:
    schema = resource.schema()
    config = {name: value for name, value in (planned_state or {}).items()
              if name not in schema.attributes or schema.attributes[name].configurable}
    return schema.validate_config(config)


def apply(resource: Resource, proposed: Plan) -> Response:
    """Carry out a plan and return the resulting state."""
    if proposed.diagnostics.has_error():
        resp = Response(state=proposed.prior_state)
        resp.diagnostics.append(proposed.diagnostics)
        return resp

    if proposed.action in (CREATE, UPDATE):
        # Plans may come back over the wire; check them like a fresh config
        diags = _validate_planned_state(resource, proposed.planned_state)
        if diags.has_error():
            return Response(state=proposed.prior_state, diagnostics=diags)

    if proposed.action == CREATE:
        resp = resource.create(CreateRequest(plan=dict(proposed.planned_state or {})))
    elif proposed.action == UPDATE:
        resp = resource.update(UpdateRequest(plan=dict(proposed.planned_state or {}),
                                             prior_state=dict(proposed.prior_state or {})))
    elif proposed.action == DELETE:
        resp = resource.delete(DeleteRequest(state=dict(proposed.prior_state or {})))
        if not resp.diagnostics.has_error():
            resp.state = None
    else:
        resp = Response(state=proposed.prior_state)

    logger.info("applied %s for %s", proposed.action, type(resource).__name__)
    return resp


def read_resource(resource: Resource, state: State) -> Response:
    """Refresh a resource's state from the remote API."""
    return resource.read(ReadRequest(state=dict(state)))


def import_resource(resource: Resource, import_id: str) -> Response:
    """Adopt an existing remote object into state."""
    imported = resource.import_state(ImportStateRequest(id=import_id))
    if imported.diagnostics.has_error() or imported.state is None:
        return imported

    resp = resource.read(ReadRequest(state=imported.state))
    diags = Diagnostics()
    diags.append(imported.diagnostics, resp.diagnostics)
    resp.diagnostics = diags
    if resp.removed:
        resp.diagnostics.add_error(
            "Cannot Import Non-Existent Remote Object",
            f"No remote object was found for import id '{import_id}'.",
        )
    return resp


def read_data_source(data_source: DataSource, config: Optional[State]) -> Response:
    """Validate data source arguments and read the object."""
    diags = data_source.schema().validate_config(config)
    if diags.has_error():
        return Response(diagnostics=diags)
    resp = data_source.read(DataSourceReadRequest(config=dict(config or {})))
    merged = Diagnostics()
    merged.append(diags, resp.diagnostics)
    resp.diagnostics = merged
    return resp
