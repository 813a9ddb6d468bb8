"""MaraudersMap - Identifier/Path Resolver.

Maps hierarchical paths to flat Prismic document identifiers and back, using
the repository bookmarks as an alias table and the identifier itself as the
fallback path segment:

- ``/about`` with bookmark ``about -> UlfoxUnM08QWYXdl`` resolves to the
  bookmarked identifier, and that identifier resolves back to ``/about``.
- ``/UlfoxUnM0wkXYXbX`` without a bookmark resolves to ``UlfoxUnM0wkXYXbX``.

The table is built once per login and never refreshed.

"I solemnly swear that I am up to no good."
"""

import logging
from collections.abc import Mapping

from prismic_cr.core.exceptions import NotFound
from prismic_cr.core.marauders_map.path_helper import ROOT_PATH, assert_valid_absolute_path

logger = logging.getLogger(__name__)

#: Identifier standing for the synthetic root node.
ROOT_IDENTIFIER = "root"


class MaraudersMap:
    """Two-way path/identifier resolver backed by the bookmark table.

    Famous quote from the Marauder's Map:
    "Mischief managed."
    """

    def __init__(self, bookmarks: Mapping[str, str] | None = None):
        """Create a resolver.

        Args:
            bookmarks: Bookmark name to document identifier table.
        """
        self._by_name: dict[str, str] = dict(bookmarks or {})
        # Later bookmarks win when several names point at the same document.
        self._by_identifier: dict[str, str] = {
            identifier: f"/{name}" if name else "" for name, identifier in self._by_name.items()
        }
        logger.debug("MaraudersMap created with %d bookmarks.", len(self._by_name))

    @property
    def bookmarks(self) -> dict[str, str]:
        """Copy of the bookmark table."""
        return dict(self._by_name)

    def resolve_identifier(self, path: str) -> str:
        """Resolve an absolute path to a document identifier.

        Args:
            path: Absolute path.

        Returns:
            ``ROOT_IDENTIFIER`` for ``/``, the bookmarked identifier when the
            path names a bookmark, otherwise the path without its leading
            ``/`` taken as a literal identifier.

        Raises:
            InvalidPath: If the path is malformed.
        """
        assert_valid_absolute_path(path)
        if path == ROOT_PATH:
            return ROOT_IDENTIFIER

        relative = path[1:]
        identifier = self._by_name.get(relative)
        if identifier is None:
            return relative
        return identifier

    def resolve_path(self, identifier: str) -> str:
        """Resolve a document identifier to its absolute path.

        Raises:
            NotFound: If the bookmark table records an empty path for it.
        """
        if identifier == ROOT_IDENTIFIER:
            return ROOT_PATH

        path = self._by_identifier.get(identifier, f"/{identifier}")
        if not path:
            raise NotFound(identifier)
        return path


IdentifierResolver = MaraudersMap


__all__ = ["MaraudersMap", "IdentifierResolver", "ROOT_IDENTIFIER"]
