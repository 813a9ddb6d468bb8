"""Document projection into typed nodes."""

from prismic_cr.core.holodeck.holodeck import (
    PRISMIC_NAMESPACE,
    DocumentProjector,
    Holodeck,
    fragment_property,
    project,
)
from prismic_cr.core.holodeck.node import (
    MIX_REFERENCEABLE,
    MIXIN_TYPES,
    NT_UNSTRUCTURED,
    PRIMARY_TYPE,
    UUID,
    Node,
    TypedValue,
)
from prismic_cr.core.holodeck.property_types import PropertyType

__all__ = [
    "Holodeck",
    "DocumentProjector",
    "PRISMIC_NAMESPACE",
    "fragment_property",
    "project",
    "Node",
    "TypedValue",
    "PropertyType",
    "PRIMARY_TYPE",
    "MIXIN_TYPES",
    "UUID",
    "MIX_REFERENCEABLE",
    "NT_UNSTRUCTURED",
]
