"""Replicator - Node Type Synthesizer.

Derives one node-type definition per Prismic document type and merges the
result with the standard node-type catalog.

"Tea. Earl Grey. Hot."
"""

import logging
from collections.abc import Iterable

from prismic_cr.core.dto.node_type_dto import (
    ChildNodeDefinition,
    NodeTypeDefinition,
    OnParentVersion,
)
from prismic_cr.core.holodeck.holodeck import PRISMIC_NAMESPACE
from prismic_cr.core.holodeck.node import NT_UNSTRUCTURED
from prismic_cr.core.replicator.standard_node_types import STANDARD_NODE_TYPES

logger = logging.getLogger(__name__)


class Replicator:
    """Node type synthesizer.

    Famous quote from Star Trek: The Next Generation:
    "The replicator is making everything taste like chicken."
    """

    def __init__(
        self,
        namespace: str = PRISMIC_NAMESPACE,
        standard_types: dict[str, NodeTypeDefinition] | None = None,
    ):
        self.namespace = namespace
        self._standard = dict(STANDARD_NODE_TYPES if standard_types is None else standard_types)

    @property
    def standard_types(self) -> dict[str, NodeTypeDefinition]:
        return dict(self._standard)

    def synthesize(self, document_type: str) -> NodeTypeDefinition:
        """Build the node-type definition for one document type.

        The definition declares no properties and a single residual child
        rule whose default and required type is the type itself, so nested
        children of the same type are always allowed.
        """
        name = f"{self.namespace}:{document_type}"
        return NodeTypeDefinition(
            name=name,
            is_abstract=False,
            is_mixin=False,
            is_queryable=True,
            has_orderable_child_nodes=True,
            primary_item_name=None,
            declared_supertype_names=[NT_UNSTRUCTURED],
            declared_property_definitions=[],
            declared_node_definitions=[
                ChildNodeDefinition(
                    declaring_node_type=name,
                    name="*",
                    is_auto_created=False,
                    is_mandatory=False,
                    is_protected=False,
                    on_parent_version=OnParentVersion.IGNORE,
                    allows_same_name_siblings=False,
                    default_primary_type_name=name,
                    required_primary_type_names=[name],
                )
            ],
        )

    def catalog(
        self,
        store_types: Iterable[str],
        requested_names: Iterable[str] | None = None,
    ) -> list[NodeTypeDefinition]:
        """Return the standard catalog followed by the synthesized definitions.

        Args:
            store_types: Document type tags known to the store.
            requested_names: When given (and non-empty), only definitions with
                these names are returned; unknown names are dropped.

        Returns:
            Standard definitions first, then synthesized ones, each in their
            own order. A synthesized definition replaces a standard one of
            the same name.
        """
        synthesized: dict[str, NodeTypeDefinition] = {}
        for document_type in store_types:
            definition = self.synthesize(document_type)
            synthesized[definition.name] = definition

        standard = {name: nt for name, nt in self._standard.items() if name not in synthesized}

        requested = set(requested_names or ())
        if requested:
            standard = {name: nt for name, nt in standard.items() if name in requested}
            synthesized = {name: nt for name, nt in synthesized.items() if name in requested}
            dropped = requested - standard.keys() - synthesized.keys()
            if dropped:
                logger.debug("Ignoring unknown node types: %s", sorted(dropped))

        return [*standard.values(), *synthesized.values()]


NodeTypeSynthesizer = Replicator


__all__ = ["Replicator", "NodeTypeSynthesizer"]
