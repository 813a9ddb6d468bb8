"""XFiles - Transport Protocols (Contracts).

Defines the contracts a content-repository transport fulfils:
- BaseTransport: session, node reads, node types, static tables, native handles.
- QueryTransport: adds query() over JCR-SQL2 statements and query models.

Also provides TransportNativeMixin, the capability-checked implementation of
native() and as_native() shared by the Prismic transport and its logging
wrapper.
"""

from abc import abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Protocol, TypeVar, runtime_checkable

from prismic_cr.core.babel_fish.model import Query, QueryObjectModel
from prismic_cr.core.dto.node_type_dto import NodeTypeDefinition
from prismic_cr.core.exceptions import NotSupported
from prismic_cr.core.holodeck.node import Node
from prismic_cr.core.xfiles.capabilities import Capabilities

# Type variable for native handle types
T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Credentials:
    """Login credentials.

    Attributes:
        access_token: Prismic access token; overrides the configured one.
        user_id: Optional user name (reported only).
    """

    access_token: str | None = None
    user_id: str | None = None


@dataclass(frozen=True, slots=True)
class QueryRow:
    """One query result.

    Attributes:
        path: Path of the matching node.
        node: The projected node.
        selector_name: Name of the selector the node matched.
        values: Column name to value, following the requested columns.
    """

    path: str
    node: Node
    selector_name: str
    values: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# BASE TRANSPORT PROTOCOL
# =============================================================================


@runtime_checkable
class BaseTransport(Protocol):
    """Base protocol for read-only content-repository transports."""

    @abstractmethod
    def capabilities(self) -> Capabilities:
        """Declare the capabilities supported by this transport."""
        ...

    # =========================================================================
    # SESSION
    # =========================================================================

    @abstractmethod
    def login(self, credentials: Credentials | None = None, workspace_name: str | None = None) -> str:
        """Open a session on a workspace.

        Returns:
            The workspace name actually used.

        Raises:
            NoSuchWorkspace: If the workspace does not exist.
            ConnectionFailure: If the store cannot be reached.
        """
        ...

    @abstractmethod
    def logout(self) -> None: ...

    # =========================================================================
    # NODES
    # =========================================================================

    @abstractmethod
    def get_node(self, path: str) -> Node:
        """Return the node at an absolute path.

        Raises:
            InvalidPath: If the path is malformed.
            NotFound: If no document backs the path.
            NotLoggedIn: If no session can be established.
        """
        ...

    @abstractmethod
    def get_nodes(self, paths: Iterable[str]) -> dict[str, Node]:
        """Return the nodes found at the given paths, keyed by path; misses are omitted."""
        ...

    @abstractmethod
    def get_node_by_identifier(self, identifier: str) -> Node: ...

    @abstractmethod
    def get_nodes_by_identifier(self, identifiers: Iterable[str]) -> dict[str, Node]: ...

    @abstractmethod
    def get_node_path_for_identifier(self, identifier: str, workspace: str | None = None) -> str: ...

    @abstractmethod
    def get_node_identifier_for_path(self, path: str, workspace: str | None = None) -> str: ...

    @abstractmethod
    def get_node_types(self, names: Iterable[str] | None = None) -> list[NodeTypeDefinition]: ...

    @abstractmethod
    def get_binary_stream(self, path: str) -> BinaryIO:
        """Open the binary value of a BINARY or URI property, given its path."""
        ...

    @abstractmethod
    def get_property(self, path: str) -> Any: ...

    @abstractmethod
    def get_references(self, path: str, name: str | None = None) -> list[str]: ...

    @abstractmethod
    def get_weak_references(self, path: str, name: str | None = None) -> list[str]: ...

    # =========================================================================
    # STATIC TABLES
    # =========================================================================

    @abstractmethod
    def get_namespaces(self) -> dict[str, str]: ...

    @abstractmethod
    def get_accessible_workspace_names(self) -> list[str]: ...

    @abstractmethod
    def get_repository_descriptors(self) -> dict[str, Any]: ...

    @abstractmethod
    def get_supported_query_languages(self) -> list[str]: ...

    # =========================================================================
    # NATIVE ESCAPE HATCHES
    # =========================================================================

    @abstractmethod
    def _get_native_handle(self, kind: str) -> object:
        """Return the native handle of a kind declared in capabilities().native.kinds."""
        ...


# =============================================================================
# QUERY TRANSPORT PROTOCOL
# =============================================================================


@runtime_checkable
class QueryTransport(BaseTransport, Protocol):
    """Transport that answers JCR-SQL2 statements and query models."""

    @abstractmethod
    def query(self, query: Query | QueryObjectModel) -> list[QueryRow]:
        """Run a query.

        Raises:
            InvalidQuery: If the statement does not parse or the model is malformed.
            UnsupportedQuery: If the query uses a construct the store cannot answer.
            BackendError: If the store request fails.

        Example:
            >>> rows = transport.query(Query("SELECT * FROM [prismic:article]"))
            >>> [row.path for row in rows]
            ['/UlfoxUnM0wkXYXbX', '/about']
        """
        ...


# =============================================================================
# NATIVE HELPERS (MIXIN)
# =============================================================================


class TransportNativeMixin:
    """Default native() and as_native() on top of capabilities() and _get_native_handle()."""

    def native(self, kind: str = "api") -> object:
        """Get a native handle for direct store access.

        Args:
            kind: ``"api"`` (the Prismic API entry point), ``"ref"`` (the
                master ref token) or ``"http"`` (the httpx client).

        Raises:
            NotSupported: If native access or the requested kind is not available.
        """
        caps = self.capabilities()  # type: ignore
        if not caps.native.supported:
            raise NotSupported("native", details="Native access is not supported by this transport")
        if kind not in caps.native.kinds:
            available = ", ".join(caps.native.kinds) or "none"
            raise NotSupported(
                f"native:{kind}",
                details=f"Kind '{kind}' not available. Available kinds: {available}",
            )
        return self._get_native_handle(kind)  # type: ignore

    def as_native(
        self,
        type_or_protocol: type[T] | Callable[[object], bool],
        kind: str = "api",
    ) -> T:
        """Get a native handle, checked against a type, Protocol or predicate.

        Raises:
            NotSupported: If the handle is unavailable or incompatible.
        """
        handle = self.native(kind)

        if isinstance(type_or_protocol, type):
            try:
                compatible = isinstance(handle, type_or_protocol)
            except TypeError as e:
                raise NotSupported(
                    f"native:{kind}",
                    details=(
                        f"Cannot verify compatibility with '{type_or_protocol.__name__}'. "
                        "If using a Protocol, add the @runtime_checkable decorator."
                    ),
                ) from e
            if not compatible:
                raise NotSupported(
                    f"native:{kind}",
                    details=(
                        f"Native handle type '{type(handle).__name__}' is not compatible "
                        f"with expected type '{type_or_protocol.__name__}'"
                    ),
                )
        elif not type_or_protocol(handle):
            raise NotSupported(
                f"native:{kind}",
                details=f"Native handle failed compatibility check with {type_or_protocol}",
            )

        return handle  # type: ignore


__all__ = [
    "BaseTransport",
    "QueryTransport",
    "TransportNativeMixin",
    "Credentials",
    "QueryRow",
]
