"""Minimal declarative-provider framework.

- schema.py: typed attributes and config validation
- diagnostics.py: error/warning reporting
- resource.py: Resource / DataSource contracts
- lifecycle.py: plan, apply, read and import orchestration
"""
from .diagnostics import Diagnostic, Diagnostics, ERROR, WARNING
from .schema import Attribute, ListAttribute, Schema, StringAttribute
from .resource import (
    CreateRequest,
    DataSource,
    DataSourceReadRequest,
    DeleteRequest,
    ImportStateRequest,
    ReadRequest,
    Resource,
    Response,
    UpdateRequest,
    import_state_passthrough_id,
)
from .lifecycle import (
    Plan,
    apply,
    import_resource,
    plan,
    read_data_source,
    read_resource,
    values_equal,
)

__all__ = [
    "Diagnostic",
    "Diagnostics",
    "ERROR",
    "WARNING",
    "Attribute",
    "ListAttribute",
    "Schema",
    "StringAttribute",
    "CreateRequest",
    "DataSource",
    "DataSourceReadRequest",
    "DeleteRequest",
    "ImportStateRequest",
    "ReadRequest",
    "Resource",
    "Response",
    "UpdateRequest",
    "import_state_passthrough_id",
    "Plan",
    "apply",
    "import_resource",
    "plan",
    "read_data_source",
    "read_resource",
    "values_equal",
]
