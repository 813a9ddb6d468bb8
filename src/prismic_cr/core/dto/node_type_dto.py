"""DTOs for node-type definitions.

A node-type definition describes the structure a node of that type may have:
its supertypes, declared properties and child-node rules. Definitions are
read-only descriptions; ``to_dict()`` renders them with the camelCase keys a
content-repository node-type manager expects.
"""

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field


class OnParentVersion(IntEnum):
    """Behaviour of a child item when its parent is versioned."""

    COPY = 1
    VERSION = 2
    INITIALIZE = 3
    COMPUTE = 4
    IGNORE = 5
    ABORT = 6


class PropertyDefinition(BaseModel):
    """A property declared by a node type.

    Attributes:
        declaring_node_type: Name of the node type that declares the property.
        name: Property name, ``*`` for residual definitions.
        required_type: Property type code.
        multiple: Whether the property is multi-valued.
    """

    declaring_node_type: str = Field(description="Declaring node type name")
    name: str = Field(description="Property name or '*'")
    is_auto_created: bool = Field(default=False)
    is_mandatory: bool = Field(default=False)
    is_protected: bool = Field(default=False)
    on_parent_version: OnParentVersion = Field(default=OnParentVersion.COPY)
    required_type: int = Field(default=1, description="Property type code")
    multiple: bool = Field(default=False)
    is_full_text_searchable: bool = Field(default=True)
    is_query_orderable: bool = Field(default=True)

    model_config = {"extra": "forbid", "frozen": True}

    def to_dict(self) -> dict[str, Any]:
        return {
            "declaringNodeType": self.declaring_node_type,
            "name": self.name,
            "isAutoCreated": self.is_auto_created,
            "isMandatory": self.is_mandatory,
            "isProtected": self.is_protected,
            "onParentVersion": int(self.on_parent_version),
            "requiredType": self.required_type,
            "multiple": self.multiple,
            "isFullTextSearchable": self.is_full_text_searchable,
            "isQueryOrderable": self.is_query_orderable,
        }


class ChildNodeDefinition(BaseModel):
    """A child-node rule declared by a node type.

    Attributes:
        declaring_node_type: Name of the node type that declares the rule.
        name: Child name, ``*`` for residual rules.
        default_primary_type_name: Type given to children created without one.
        required_primary_type_names: Types a child must have.
    """

    declaring_node_type: str = Field(description="Declaring node type name")
    name: str = Field(description="Child node name or '*'")
    is_auto_created: bool = Field(default=False)
    is_mandatory: bool = Field(default=False)
    is_protected: bool = Field(default=False)
    on_parent_version: OnParentVersion = Field(default=OnParentVersion.COPY)
    allows_same_name_siblings: bool = Field(default=False)
    default_primary_type_name: str | None = Field(default=None)
    required_primary_type_names: list[str] = Field(default_factory=list)

    model_config = {"extra": "forbid", "frozen": True}

    def to_dict(self) -> dict[str, Any]:
        return {
            "declaringNodeType": self.declaring_node_type,
            "name": self.name,
            "isAutoCreated": self.is_auto_created,
            "isMandatory": self.is_mandatory,
            "isProtected": self.is_protected,
            "onParentVersion": int(self.on_parent_version),
            "allowsSameNameSiblings": self.allows_same_name_siblings,
            "defaultPrimaryTypeName": self.default_primary_type_name,
            "requiredPrimaryTypeNames": list(self.required_primary_type_names),
        }


class NodeTypeDefinition(BaseModel):
    """A node-type definition.

    Attributes:
        name: Qualified node type name (e.g. ``prismic:page``).
        is_abstract: Whether nodes may not have this type as primary type.
        is_mixin: Whether the type is a mixin.
        is_queryable: Whether the type may appear in query selectors.
        has_orderable_child_nodes: Whether child order is significant.
        primary_item_name: Name of the primary item, if any.
        declared_supertype_names: Direct supertypes.
        declared_property_definitions: Properties declared by this type.
        declared_node_definitions: Child-node rules declared by this type.
    """

    name: str = Field(description="Qualified node type name")
    is_abstract: bool = Field(default=False)
    is_mixin: bool = Field(default=False)
    is_queryable: bool = Field(default=True)
    has_orderable_child_nodes: bool = Field(default=False)
    primary_item_name: str | None = Field(default=None)
    declared_supertype_names: list[str] = Field(default_factory=list)
    declared_property_definitions: list[PropertyDefinition] = Field(default_factory=list)
    declared_node_definitions: list[ChildNodeDefinition] = Field(default_factory=list)

    model_config = {"extra": "forbid", "frozen": True}

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys."""
        return {
            "name": self.name,
            "isAbstract": self.is_abstract,
            "isMixin": self.is_mixin,
            "isQueryable": self.is_queryable,
            "hasOrderableChildNodes": self.has_orderable_child_nodes,
            "primaryItemName": self.primary_item_name,
            "declaredSuperTypeNames": list(self.declared_supertype_names),
            "declaredPropertyDefinitions": [p.to_dict() for p in self.declared_property_definitions],
            "declaredNodeDefinitions": [n.to_dict() for n in self.declared_node_definitions],
        }


__all__ = [
    "OnParentVersion",
    "PropertyDefinition",
    "ChildNodeDefinition",
    "NodeTypeDefinition",
]
