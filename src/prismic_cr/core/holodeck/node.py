"""Projected nodes.

A Node is an ordered property bag: property name -> TypedValue. Insertion
order is preserved so that serialized nodes are deterministic.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from prismic_cr.core.holodeck.property_types import PropertyType

PRIMARY_TYPE = "jcr:primaryType"
MIXIN_TYPES = "jcr:mixinTypes"
UUID = "jcr:uuid"
MIX_REFERENCEABLE = "mix:referenceable"
NT_UNSTRUCTURED = "nt:unstructured"


@dataclass(frozen=True, slots=True)
class TypedValue:
    """A property value with its type code.

    Attributes:
        value: The value; a list when ``multiple`` is True.
        type: Property type code.
        multiple: Whether the property is multi-valued.
    """

    value: Any
    type: PropertyType
    multiple: bool = False


@dataclass(slots=True)
class Node:
    """A typed node: ordered properties plus ordered child nodes."""

    properties: dict[str, TypedValue] = field(default_factory=dict)
    children: dict[str, "Node"] = field(default_factory=dict)

    def set_property(
        self,
        name: str,
        value: Any,
        type: PropertyType,
        *,
        multiple: bool = False,
    ) -> None:
        """Set a property, keeping the position of an existing one."""
        if multiple:
            value = list(value)
        self.properties[name] = TypedValue(value, type, multiple)

    def get_property(self, name: str) -> TypedValue | None:
        return self.properties.get(name)

    def value(self, name: str, default: Any = None) -> Any:
        """Return the raw value of a property, or default when unset."""
        prop = self.properties.get(name)
        return default if prop is None else prop.value

    def type_of(self, name: str) -> PropertyType | None:
        prop = self.properties.get(name)
        return None if prop is None else prop.type

    @property
    def primary_type(self) -> str | None:
        return self.value(PRIMARY_TYPE)

    @property
    def identifier(self) -> str | None:
        return self.value(UUID)

    def add_child(self, name: str, child: "Node | None" = None) -> "Node":
        """Attach a child node (an empty one by default) and return it."""
        child = child if child is not None else Node()
        self.children[name] = child
        return child

    def to_dict(self) -> dict[str, Any]:
        """Render the flat form: ``{name: value, ":name": type code}`` plus children."""
        result: dict[str, Any] = {}
        for name, prop in self.properties.items():
            result[name] = prop.value
            result[f":{name}"] = int(prop.type)
        for name, child in self.children.items():
            result[name] = child.to_dict()
        return result

    def __contains__(self, name: object) -> bool:
        return name in self.properties

    def __getitem__(self, name: str) -> TypedValue:
        return self.properties[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.properties)


__all__ = [
    "Node",
    "TypedValue",
    "PRIMARY_TYPE",
    "MIXIN_TYPES",
    "UUID",
    "MIX_REFERENCEABLE",
    "NT_UNSTRUCTURED",
]
