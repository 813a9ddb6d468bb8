"""DTO package for prismic-cr core.

Provides the BaseResult pattern and node-type definition models.
"""

from .node_type_dto import (
    ChildNodeDefinition,
    NodeTypeDefinition,
    OnParentVersion,
    PropertyDefinition,
)
from .result_dto import BaseResult, StatusCode, StatusDetail
from .transport_dto import TransportResult

__all__ = [
    "BaseResult",
    "StatusDetail",
    "StatusCode",
    "TransportResult",
    "NodeTypeDefinition",
    "PropertyDefinition",
    "ChildNodeDefinition",
    "OnParentVersion",
]
