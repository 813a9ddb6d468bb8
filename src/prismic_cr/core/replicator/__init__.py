"""Node type synthesis."""

from prismic_cr.core.replicator.replicator import NodeTypeSynthesizer, Replicator
from prismic_cr.core.replicator.standard_node_types import STANDARD_NODE_TYPES

__all__ = ["Replicator", "NodeTypeSynthesizer", "STANDARD_NODE_TYPES"]
