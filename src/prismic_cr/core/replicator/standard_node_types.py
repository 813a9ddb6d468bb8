"""Built-in node types every repository exposes.

Only the subset of the standard catalog that projected content and generic
clients rely on is declared here.
"""

from prismic_cr.core.dto.node_type_dto import (
    ChildNodeDefinition,
    NodeTypeDefinition,
    OnParentVersion,
    PropertyDefinition,
)
from prismic_cr.core.holodeck.property_types import PropertyType


def _prop(
    declaring: str,
    name: str,
    required_type: PropertyType,
    *,
    multiple: bool = False,
    auto_created: bool = False,
    mandatory: bool = False,
    protected: bool = False,
    on_parent_version: OnParentVersion = OnParentVersion.COPY,
) -> PropertyDefinition:
    return PropertyDefinition(
        declaring_node_type=declaring,
        name=name,
        required_type=int(required_type),
        multiple=multiple,
        is_auto_created=auto_created,
        is_mandatory=mandatory,
        is_protected=protected,
        on_parent_version=on_parent_version,
    )


def _standard_node_types() -> list[NodeTypeDefinition]:
    return [
        NodeTypeDefinition(
            name="nt:base",
            is_abstract=True,
            declared_property_definitions=[
                _prop(
                    "nt:base",
                    "jcr:primaryType",
                    PropertyType.NAME,
                    auto_created=True,
                    mandatory=True,
                    protected=True,
                    on_parent_version=OnParentVersion.COMPUTE,
                ),
                _prop(
                    "nt:base",
                    "jcr:mixinTypes",
                    PropertyType.NAME,
                    multiple=True,
                    protected=True,
                    on_parent_version=OnParentVersion.COMPUTE,
                ),
            ],
        ),
        NodeTypeDefinition(
            name="nt:unstructured",
            has_orderable_child_nodes=True,
            declared_supertype_names=["nt:base"],
            declared_property_definitions=[
                _prop("nt:unstructured", "*", PropertyType.UNDEFINED),
                _prop("nt:unstructured", "*", PropertyType.UNDEFINED, multiple=True),
            ],
            declared_node_definitions=[
                ChildNodeDefinition(
                    declaring_node_type="nt:unstructured",
                    name="*",
                    on_parent_version=OnParentVersion.VERSION,
                    allows_same_name_siblings=True,
                    default_primary_type_name="nt:unstructured",
                    required_primary_type_names=["nt:base"],
                )
            ],
        ),
        NodeTypeDefinition(
            name="nt:hierarchyNode",
            is_abstract=True,
            declared_supertype_names=["nt:base", "mix:created"],
        ),
        NodeTypeDefinition(
            name="nt:folder",
            declared_supertype_names=["nt:hierarchyNode"],
            declared_node_definitions=[
                ChildNodeDefinition(
                    declaring_node_type="nt:folder",
                    name="*",
                    on_parent_version=OnParentVersion.VERSION,
                    required_primary_type_names=["nt:hierarchyNode"],
                )
            ],
        ),
        NodeTypeDefinition(
            name="nt:file",
            primary_item_name="jcr:content",
            declared_supertype_names=["nt:hierarchyNode"],
            declared_node_definitions=[
                ChildNodeDefinition(
                    declaring_node_type="nt:file",
                    name="jcr:content",
                    is_mandatory=True,
                    required_primary_type_names=["nt:base"],
                )
            ],
        ),
        NodeTypeDefinition(
            name="nt:resource",
            primary_item_name="jcr:data",
            declared_supertype_names=["nt:base", "mix:mimeType", "mix:lastModified"],
            declared_property_definitions=[
                _prop("nt:resource", "jcr:data", PropertyType.BINARY, mandatory=True),
            ],
        ),
        NodeTypeDefinition(
            name="mix:referenceable",
            is_mixin=True,
            declared_property_definitions=[
                _prop(
                    "mix:referenceable",
                    "jcr:uuid",
                    PropertyType.STRING,
                    auto_created=True,
                    mandatory=True,
                    protected=True,
                    on_parent_version=OnParentVersion.INITIALIZE,
                ),
            ],
        ),
        NodeTypeDefinition(
            name="mix:created",
            is_mixin=True,
            declared_property_definitions=[
                _prop("mix:created", "jcr:created", PropertyType.DATE, auto_created=True, protected=True),
                _prop("mix:created", "jcr:createdBy", PropertyType.STRING, auto_created=True, protected=True),
            ],
        ),
        NodeTypeDefinition(
            name="mix:lastModified",
            is_mixin=True,
            declared_property_definitions=[
                _prop("mix:lastModified", "jcr:lastModified", PropertyType.DATE, auto_created=True),
                _prop("mix:lastModified", "jcr:lastModifiedBy", PropertyType.STRING, auto_created=True),
            ],
        ),
        NodeTypeDefinition(
            name="mix:title",
            is_mixin=True,
            declared_property_definitions=[
                _prop("mix:title", "jcr:title", PropertyType.STRING),
                _prop("mix:title", "jcr:description", PropertyType.STRING),
            ],
        ),
        NodeTypeDefinition(
            name="mix:mimeType",
            is_mixin=True,
            declared_property_definitions=[
                _prop("mix:mimeType", "jcr:mimeType", PropertyType.STRING),
                _prop("mix:mimeType", "jcr:encoding", PropertyType.STRING),
            ],
        ),
    ]


#: Standard node types, keyed by name, in declaration order.
STANDARD_NODE_TYPES: dict[str, NodeTypeDefinition] = {nt.name: nt for nt in _standard_node_types()}


__all__ = ["STANDARD_NODE_TYPES"]
