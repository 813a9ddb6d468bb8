"""XFiles - Repository descriptors and namespace table.

Static tables reported by the transport. Feature flags are derived from the
transport capabilities so the two can never disagree.
"""

from typing import Any

from prismic_cr.core.babel_fish.model import JCR_JQOM, JCR_SQL2
from prismic_cr.core.holodeck.holodeck import PRISMIC_NAMESPACE
from prismic_cr.core.xfiles.capabilities import Capabilities

REPOSITORY_NAME = "prismic_cr"
REPOSITORY_VERSION = "0.1.0"

SUPPORTED_QUERY_LANGUAGES: tuple[str, ...] = (JCR_SQL2, JCR_JQOM)

# =============================================================================
# DESCRIPTOR KEYS
# =============================================================================

IDENTIFIER_STABILITY = "identifier.stability"
IDENTIFIER_STABILITY_INDEFINITE_DURATION = "identifier.stability.indefinite.duration"
REP_NAME_DESC = "jcr.repository.name"
REP_VENDOR_DESC = "jcr.repository.vendor"
REP_VERSION_DESC = "jcr.repository.version"
SPEC_NAME_DESC = "jcr.specification.name"
SPEC_VERSION_DESC = "jcr.specification.version"
NODE_TYPE_MANAGEMENT_INHERITANCE = "node.type.management.inheritance"
NODE_TYPE_MANAGEMENT_INHERITANCE_SINGLE = "node.type.management.inheritance.single"
NODE_TYPE_MANAGEMENT_MULTIVALUED_PROPERTIES_SUPPORTED = "node.type.management.multivalued.properties.supported"
NODE_TYPE_MANAGEMENT_ORDERABLE_CHILD_NODES_SUPPORTED = "node.type.management.orderable.child.nodes.supported"
NODE_TYPE_MANAGEMENT_PRIMARY_ITEM_NAME_SUPPORTED = "node.type.management.primary.item.name.supported"
NODE_TYPE_MANAGEMENT_RESIDUAL_DEFINITIONS_SUPPORTED = "node.type.management.residual.definitions.supported"
NODE_TYPE_MANAGEMENT_SAME_NAME_SIBLINGS_SUPPORTED = "node.type.management.same.name.siblings.supported"
OPTION_LOCKING_SUPPORTED = "option.locking.supported"
OPTION_NODE_TYPE_MANAGEMENT_SUPPORTED = "option.node.type.management.supported"
OPTION_OBSERVATION_SUPPORTED = "option.observation.supported"
OPTION_SIMPLE_VERSIONING_SUPPORTED = "option.simple.versioning.supported"
OPTION_TRANSACTIONS_SUPPORTED = "option.transactions.supported"
OPTION_VERSIONING_SUPPORTED = "option.versioning.supported"
OPTION_WORKSPACE_MANAGEMENT_SUPPORTED = "option.workspace.management.supported"
QUERY_FULL_TEXT_SEARCH_SUPPORTED = "query.full.text.search.supported"
QUERY_JOINS = "query.joins"
QUERY_JOINS_NONE = "query.joins.none"
QUERY_JOINS_INNER_OUTER = "query.joins.inner.outer"
QUERY_LANGUAGES = "query.languages"
QUERY_STORED_QUERIES_SUPPORTED = "query.stored.queries.supported"
WRITE_SUPPORTED = "write.supported"

# =============================================================================
# NAMESPACES
# =============================================================================

#: Namespace prefix to URI table.
NAMESPACES: dict[str, str] = {
    "": "",
    "jcr": "http://www.jcp.org/jcr/1.0",
    "nt": "http://www.jcp.org/jcr/nt/1.0",
    "mix": "http://www.jcp.org/jcr/mix/1.0",
    "xml": "http://www.w3.org/XML/1998/namespace",
    "sv": "http://www.jcp.org/jcr/sv/1.0",
    PRISMIC_NAMESPACE: PRISMIC_NAMESPACE,
}


def repository_descriptors(caps: Capabilities) -> dict[str, Any]:
    """Build the repository descriptor table for a set of capabilities."""
    return {
        IDENTIFIER_STABILITY: IDENTIFIER_STABILITY_INDEFINITE_DURATION,
        REP_NAME_DESC: REPOSITORY_NAME,
        REP_VENDOR_DESC: "prismic-cr",
        REP_VERSION_DESC: REPOSITORY_VERSION,
        SPEC_NAME_DESC: "Content Repository API",
        SPEC_VERSION_DESC: "2.1",
        NODE_TYPE_MANAGEMENT_INHERITANCE: NODE_TYPE_MANAGEMENT_INHERITANCE_SINGLE,
        NODE_TYPE_MANAGEMENT_MULTIVALUED_PROPERTIES_SUPPORTED: True,
        NODE_TYPE_MANAGEMENT_ORDERABLE_CHILD_NODES_SUPPORTED: False,
        NODE_TYPE_MANAGEMENT_PRIMARY_ITEM_NAME_SUPPORTED: True,
        NODE_TYPE_MANAGEMENT_RESIDUAL_DEFINITIONS_SUPPORTED: True,
        NODE_TYPE_MANAGEMENT_SAME_NAME_SIBLINGS_SUPPORTED: False,
        OPTION_NODE_TYPE_MANAGEMENT_SUPPORTED: False,
        OPTION_OBSERVATION_SUPPORTED: False,
        OPTION_WORKSPACE_MANAGEMENT_SUPPORTED: False,
        OPTION_LOCKING_SUPPORTED: caps.locking,
        OPTION_SIMPLE_VERSIONING_SUPPORTED: caps.versioning,
        OPTION_VERSIONING_SUPPORTED: caps.versioning,
        OPTION_TRANSACTIONS_SUPPORTED: caps.transactions,
        QUERY_FULL_TEXT_SEARCH_SUPPORTED: caps.full_text.supported,
        QUERY_JOINS: QUERY_JOINS_INNER_OUTER if caps.joins.supported else QUERY_JOINS_NONE,
        QUERY_LANGUAGES: list(SUPPORTED_QUERY_LANGUAGES),
        QUERY_STORED_QUERIES_SUPPORTED: False,
        WRITE_SUPPORTED: caps.write,
    }


__all__ = [
    "NAMESPACES",
    "REPOSITORY_NAME",
    "REPOSITORY_VERSION",
    "SUPPORTED_QUERY_LANGUAGES",
    "repository_descriptors",
    "IDENTIFIER_STABILITY",
    "QUERY_FULL_TEXT_SEARCH_SUPPORTED",
    "QUERY_JOINS",
    "QUERY_JOINS_NONE",
    "QUERY_LANGUAGES",
    "OPTION_LOCKING_SUPPORTED",
    "OPTION_TRANSACTIONS_SUPPORTED",
    "OPTION_VERSIONING_SUPPORTED",
    "WRITE_SUPPORTED",
]
