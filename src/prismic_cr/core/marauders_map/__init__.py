"""Path/identifier resolution."""

from prismic_cr.core.marauders_map.marauders_map import (
    ROOT_IDENTIFIER,
    IdentifierResolver,
    MaraudersMap,
)
from prismic_cr.core.marauders_map.path_helper import (
    ROOT_PATH,
    assert_valid_absolute_path,
    get_node_name,
    get_parent_path,
    is_valid_absolute_path,
)

__all__ = [
    "MaraudersMap",
    "IdentifierResolver",
    "ROOT_IDENTIFIER",
    "ROOT_PATH",
    "assert_valid_absolute_path",
    "is_valid_absolute_path",
    "get_parent_path",
    "get_node_name",
]
