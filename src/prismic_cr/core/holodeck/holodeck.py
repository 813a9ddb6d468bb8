"""Holodeck - Document Projector.

Projects a flat Prismic document into a typed node. The projection is a pure
function of the document; nothing is cached.

Property layout of a projected node, in order:
- ``jcr:primaryType`` (``prismic:<type>``), ``jcr:mixinTypes``
  (``mix:referenceable``), ``jcr:uuid`` (the document id).
- ``slug``, ``slugs``, ``tags``.
- One property per fragment, typed by the fragment kind:
  Date -> DATE, Number -> LONG, Image -> BINARY, ImageView -> URI (the
  rendered URL), anything else -> STRING (text rendering). A fragment named
  like one of the properties above is skipped.

Composite fragments (structured text, embeds, groups) are flattened to their
text rendering rather than modelled as child nodes.

"Computer, end program."
"""

import logging

from prismic_cr.core.holodeck.node import (
    MIX_REFERENCEABLE,
    MIXIN_TYPES,
    NT_UNSTRUCTURED,
    PRIMARY_TYPE,
    UUID,
    Node,
)
from prismic_cr.core.holodeck.property_types import PropertyType
from prismic_cr.core.prismic.document import Document
from prismic_cr.core.prismic.fragments import (
    DateFragment,
    Fragment,
    ImageFragment,
    ImageViewFragment,
    NumberFragment,
)

logger = logging.getLogger(__name__)

#: Namespace prefix of node types synthesized from document types.
PRISMIC_NAMESPACE = "prismic"


def fragment_property(fragment: Fragment) -> tuple[str, PropertyType]:
    """Return the (value, type code) pair a fragment projects to."""
    match fragment:
        case DateFragment():
            return fragment.as_text(), PropertyType.DATE
        case NumberFragment():
            return fragment.as_text(), PropertyType.LONG
        case ImageFragment():
            return fragment.as_text(), PropertyType.BINARY
        case ImageViewFragment(url=url):
            return url, PropertyType.URI
        case _:
            return fragment.as_text(), PropertyType.STRING


class Holodeck:
    """Document projector.

    Famous quote from Star Trek: The Next Generation:
    "Computer, arch."
    """

    def __init__(self, namespace: str = PRISMIC_NAMESPACE):
        """Create a projector.

        Args:
            namespace: Prefix of the primary node type of projected documents.
        """
        self.namespace = namespace

    def primary_type_for(self, document_type: str) -> str:
        return f"{self.namespace}:{document_type}"

    def project(self, document: Document) -> Node:
        """Project one document into a node."""
        node = Node()
        node.set_property(PRIMARY_TYPE, self.primary_type_for(document.type), PropertyType.NAME)
        node.set_property(MIXIN_TYPES, [MIX_REFERENCEABLE], PropertyType.NAME, multiple=True)
        node.set_property(UUID, document.id, PropertyType.STRING)

        node.set_property("slug", document.slug, PropertyType.STRING)
        node.set_property("slugs", document.slugs, PropertyType.STRING, multiple=True)
        node.set_property("tags", document.tags, PropertyType.STRING, multiple=True)

        reserved = set(node.properties)
        for name, fragment in document.fragments.items():
            if name in reserved:
                logger.warning(
                    "Fragment '%s' of document '%s' shadows a document property; skipped",
                    name,
                    document.id,
                )
                continue
            try:
                value, type_code = fragment_property(fragment)
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning(
                    "Fragment '%s' of document '%s' degraded to an empty string: %s",
                    name,
                    document.id,
                    e,
                )
                value, type_code = "", PropertyType.STRING
            node.set_property(name, value, type_code)

        return node

    def project_root(self, child_names: list[str]) -> Node:
        """Build the synthetic root node with one empty child per name."""
        root = Node()
        root.set_property(PRIMARY_TYPE, NT_UNSTRUCTURED, PropertyType.NAME)
        for name in child_names:
            root.add_child(name)
        return root


DocumentProjector = Holodeck


def project(document: Document, namespace: str = PRISMIC_NAMESPACE) -> Node:
    """Project a document with a default projector."""
    return Holodeck(namespace).project(document)


__all__ = [
    "Holodeck",
    "DocumentProjector",
    "PRISMIC_NAMESPACE",
    "fragment_property",
    "project",
]
