"""Plugin protocol endpoints.

Every lifecycle call is a JSON POST; responses always carry a
``diagnostics`` list. A request that produced error diagnostics answers 422.
"""
from __future__ import annotations
import logging

from flask import Blueprint, abort, current_app, jsonify, request

from fram_provider.framework import Diagnostics, Plan, apply, import_resource, plan, read_data_source, read_resource

logger = logging.getLogger(__name__)

bp = Blueprint("plugin", __name__)


def _provider():
    return current_app.config["FRAM_PROVIDER"]


def _body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description="Request body must be a JSON object")
    return data


def _optional_object(data: dict, key: str, required: bool = False):
    if required and key not in data:
        abort(400, description=f"Missing '{key}'")
    value = data.get(key)
    if value is not None and not isinstance(value, dict):
        abort(400, description=f"'{key}' must be an object or null")
    return value


def _respond(payload: dict, diags: Diagnostics):
    payload["diagnostics"] = diags.to_list()
    return jsonify(payload), (422 if diags.has_error() else 200)


def _resource_or_404(type_name: str):
    resource, diags = _provider().resource(type_name)
    if resource is None:
        return None, (jsonify({"diagnostics": diags.to_list()}), 404)
    return resource, None


@bp.route("/schema", methods=["GET"])
def get_schema():
    provider = _provider()
    payload = provider.schemas()
    payload.update(provider.metadata())
    return jsonify(payload)


@bp.route("/configure", methods=["POST"])
def configure():
    config = _optional_object(_body(), "config")
    diags = _provider().configure(config)
    return _respond({}, diags)


@bp.route("/resources/<type_name>/plan", methods=["POST"])
def plan_resource(type_name: str):
    resource, error = _resource_or_404(type_name)
    if error:
        return error
    data = _body()
    prior_state = _optional_object(data, "prior_state")
    config = _optional_object(data, "config", required=True)
    proposed = plan(resource, prior_state, config)
    return _respond({"plan": proposed.to_dict()}, proposed.diagnostics)


@bp.route("/resources/<type_name>/apply", methods=["POST"])
def apply_resource(type_name: str):
    resource, error = _resource_or_404(type_name)
    if error:
        return error
    raw_plan = _optional_object(_body(), "plan", required=True)
    if raw_plan is None:
        abort(400, description="'plan' must be an object")
    try:
        proposed = Plan.from_dict(raw_plan)
    except ValueError as exc:
        abort(400, description=str(exc))
    resp = apply(resource, proposed)
    return _respond({"state": resp.state}, resp.diagnostics)


@bp.route("/resources/<type_name>/read", methods=["POST"])
def read_resource_state(type_name: str):
    resource, error = _resource_or_404(type_name)
    if error:
        return error
    state = _optional_object(_body(), "state", required=True)
    if state is None:
        abort(400, description="'state' must be an object")
    resp = read_resource(resource, state)
    return _respond({"state": resp.state, "removed": resp.removed}, resp.diagnostics)


@bp.route("/resources/<type_name>/import", methods=["POST"])
def import_resource_state(type_name: str):
    resource, error = _resource_or_404(type_name)
    if error:
        return error
    import_id = _body().get("id")
    if not isinstance(import_id, str) or not import_id:
        abort(400, description="'id' must be a non-empty string")
    resp = import_resource(resource, import_id)
    return _respond({"state": resp.state}, resp.diagnostics)


@bp.route("/data-sources/<type_name>/read", methods=["POST"])
def read_data(type_name: str):
    data_source, diags = _provider().data_source(type_name)
    if data_source is None:
        return jsonify({"diagnostics": diags.to_list()}), 404
    config = _optional_object(_body(), "config")
    resp = read_data_source(data_source, config)
    return _respond({"state": resp.state}, resp.diagnostics)
