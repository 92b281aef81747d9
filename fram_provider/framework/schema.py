"""Typed attribute schemas for the provider, resources and data sources."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .diagnostics import Diagnostics

Validator = Callable[[Any], Any]


@dataclass
class Attribute:
    """Base attribute definition.

    Exactly one of required/optional/computed is normally set; ``optional``
    together with ``computed`` means the value may come from config or the
    remote API.
    """
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    validators: List[Validator] = field(default_factory=list)

    type_name = "any"

    def __post_init__(self) -> None:
        if self.required and (self.optional or self.computed):
            raise ValueError("A required attribute cannot also be optional or computed")
        if not (self.required or self.optional or self.computed):
            raise ValueError("Attribute must be required, optional or computed")

    @property
    def configurable(self) -> bool:
        return self.required or self.optional

    def check_type(self, value: Any) -> Optional[str]:
        """Return a type error message, or None. The base attribute accepts any value."""
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type_name,
            "description": self.description,
            "required": self.required,
            "optional": self.optional,
            "computed": self.computed,
            "sensitive": self.sensitive,
        }


@dataclass
class StringAttribute(Attribute):
    type_name = "string"

    def check_type(self, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return f"expected a string, got {type(value).__name__}"
        return None


@dataclass
class ListAttribute(Attribute):
    element_type: type = str

    type_name = "list"

    def check_type(self, value: Any) -> Optional[str]:
        if not isinstance(value, (list, tuple)):
            return f"expected a list, got {type(value).__name__}"
        for index, element in enumerate(value):
            if not isinstance(element, self.element_type):
                return f"element {index}: expected {self.element_type.__name__}, got {type(element).__name__}"
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["element_type"] = self.element_type.__name__
        return data


@dataclass
class Schema:
    attributes: Dict[str, Attribute]
    description: str = ""

    def validate_config(self, config: Optional[Dict[str, Any]]) -> Diagnostics:
        """Check a configuration document against the schema.

        Null values count as unset. Returns error diagnostics for unknown
        attributes, missing required attributes, values assigned to
        computed-only attributes, type mismatches and validator failures.
        """
        diags = Diagnostics()
        config = config or {}

        for name in config:
            if name not in self.attributes:
                diags.add_error("Unsupported Attribute", f"An attribute named '{name}' is not expected here.", name)

        for name, attr in self.attributes.items():
            value = config.get(name)
            if value is None:
                if attr.required:
                    diags.add_error("Missing Required Attribute", f"The attribute '{name}' is required.", name)
                continue
            if not attr.configurable:
                diags.add_error("Invalid Configuration for Read-Only Attribute",
                                f"'{name}' is computed and cannot be set in configuration.", name)
                continue
            type_error = attr.check_type(value)
            if type_error:
                diags.add_error("Incorrect Attribute Value Type", type_error, name)
                continue
            for validator in attr.validators:
                try:
                    validator(value)
                except ValueError as exc:
                    diags.add_error("Invalid Attribute Value", str(exc), name)

        return diags

    def null_state(self) -> Dict[str, Any]:
        return {name: None for name in self.attributes}

    def computed_names(self) -> List[str]:
        return [name for name, attr in self.attributes.items() if attr.computed]

    def sensitive_names(self) -> List[str]:
        return [name for name, attr in self.attributes.items() if attr.sensitive]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "attributes": {name: attr.to_dict() for name, attr in self.attributes.items()},
        }
