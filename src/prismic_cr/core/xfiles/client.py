"""XFiles - Prismic transport.

Serves a read-only content repository from a Prismic repository:
- paths resolve to document identifiers through the bookmark table;
- documents are fetched with the ``everything`` search form at the master ref
  and projected into typed nodes;
- JCR-SQL2 statements and query models are translated into native predicate
  queries.

The root node is synthetic; every document is a direct child of it.

Named after The X-Files: "The truth is out there." Here it is in Prismic.
"""

import io
import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any, BinaryIO

import httpx

from prismic_cr.core.babel_fish.model import JCR_SQL2, Query, QueryObjectModel
from prismic_cr.core.babel_fish.native import NativeQuery
from prismic_cr.core.babel_fish.sql2 import Sql2Parser
from prismic_cr.core.babel_fish.validation import validate_query
from prismic_cr.core.babel_fish.walker import BabelFish
from prismic_cr.core.dto.node_type_dto import NodeTypeDefinition
from prismic_cr.core.exceptions import (
    BackendError,
    ConnectionFailure,
    InvalidQuery,
    NoSuchWorkspace,
    NotFound,
    NotImplementedOperation,
    NotLoggedIn,
    NotSupported,
    RepositoryError,
    ValidationError,
)
from prismic_cr.core.holodeck.holodeck import Holodeck
from prismic_cr.core.holodeck.node import Node
from prismic_cr.core.holodeck.property_types import PropertyType
from prismic_cr.core.marauders_map.marauders_map import ROOT_IDENTIFIER, MaraudersMap
from prismic_cr.core.marauders_map.path_helper import (
    ROOT_PATH,
    assert_valid_absolute_path,
    get_node_name,
    get_parent_path,
)
from prismic_cr.core.prismic import predicates as p
from prismic_cr.core.prismic.api import DEFAULT_TIMEOUT, MAX_PAGE_SIZE, PrismicApi, SearchForm
from prismic_cr.core.prismic.document import Document
from prismic_cr.core.prismic.exceptions import ApiRequestError, PrismicApiError
from prismic_cr.core.replicator.replicator import Replicator
from prismic_cr.core.xfiles.capabilities import Capabilities, prismic_capabilities
from prismic_cr.core.xfiles.descriptors import (
    NAMESPACES,
    SUPPORTED_QUERY_LANGUAGES,
    repository_descriptors,
)
from prismic_cr.core.xfiles.protocols import Credentials, QueryRow, TransportNativeMixin
from prismic_cr.core.xfiles.session import DEFAULT_WORKSPACE, SessionState

logger = logging.getLogger(__name__)

#: Name of the search form every read goes through.
EVERYTHING_FORM = "everything"


class PrismicTransport(TransportNativeMixin):
    """Read-only content-repository transport over the Prismic API.

    Famous quote from The X-Files:
    "Trust no one."

    Example:
        >>> transport = PrismicTransport("https://%s.cdn.prismic.io/api")
        >>> transport.login(workspace_name="lesbonneschoses")
        'lesbonneschoses'
        >>> node = transport.get_node("/about")
        >>> node.value("jcr:primaryType")
        'prismic:article'
    """

    def __init__(
        self,
        uri: str,
        *,
        access_token: str | None = None,
        default_workspace: str = DEFAULT_WORKSPACE,
        check_login_on_server: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
    ):
        """Create a transport.

        Args:
            uri: Endpoint URI; a ``%s`` placeholder is replaced by the workspace name.
            access_token: Token used when the credentials carry none.
            default_workspace: Workspace the ``default`` workspace maps to.
            check_login_on_server: When False, login() only records the
                workspace and the connection is made on first use.
            timeout: HTTP timeout in seconds.
            http_client: Optional httpx client; the transport never closes a
                client it did not create.
        """
        self.uri = uri
        self.access_token = access_token
        self.default_workspace = default_workspace
        self.check_login_on_server = check_login_on_server
        self.timeout = timeout
        self._http_client = http_client

        self._projector = Holodeck()
        self._synthesizer = Replicator(self._projector.namespace)
        self._parser = Sql2Parser()
        self._capabilities = prismic_capabilities()

        self._lock = threading.RLock()
        self._state = SessionState.UNAUTHENTICATED
        self._credentials: Credentials | None = None
        self._workspace_name: str | None = None
        self._login_deferred = False
        self._api: PrismicApi | None = None
        self._ref: str | None = None
        self._resolver: MaraudersMap | None = None

        logger.debug("PrismicTransport created for %s", uri)

    # =========================================================================
    # SESSION
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def workspace_name(self) -> str | None:
        return self._workspace_name

    def endpoint_for(self, workspace_name: str) -> str:
        """Return the API endpoint of a workspace."""
        if workspace_name == DEFAULT_WORKSPACE:
            workspace_name = self.default_workspace
        return self.uri.replace("%s", workspace_name)

    def login(self, credentials: Credentials | None = None, workspace_name: str | None = None) -> str:
        """Open a session, or record it for a deferred login.

        Returns:
            The workspace name (``default`` when none is given).

        Raises:
            NoSuchWorkspace: If the endpoint answers with an HTTP error.
            ConnectionFailure: If the endpoint cannot be reached or its
                entry document is unusable.
        """
        self._credentials = credentials
        self._workspace_name = workspace_name or DEFAULT_WORKSPACE

        if not self.check_login_on_server:
            self._login_deferred = True
            logger.debug("Login to workspace '%s' deferred until first use", self._workspace_name)
            return self._workspace_name

        self._connect()
        return self._workspace_name

    def _connect(self) -> None:
        workspace_name = self._workspace_name or DEFAULT_WORKSPACE
        endpoint = self.endpoint_for(workspace_name)
        credentials = self._credentials
        access_token = (
            credentials.access_token if credentials and credentials.access_token else self.access_token
        )

        # A new login replaces the previous session.
        self._release_session()

        api: PrismicApi | None = None
        try:
            api = PrismicApi.get(
                endpoint,
                access_token,
                http_client=self._http_client,
                timeout=self.timeout,
            )
            master = api.master()
        except ApiRequestError as e:
            self._state = SessionState.FAILED
            logger.error("Workspace '%s' not found at %s: %s", workspace_name, endpoint, e)
            raise NoSuchWorkspace(workspace_name, details=str(e)) from e
        except PrismicApiError as e:
            if api is not None:
                self._close_api(api)
            self._state = SessionState.FAILED
            logger.error("Could not connect to %s: %s", endpoint, e)
            raise ConnectionFailure(endpoint, cause=e) from e

        self._api = api
        self._ref = master.ref
        self._resolver = MaraudersMap(api.bookmarks())
        self._state = SessionState.AUTHENTICATED
        logger.debug("Logged in to workspace '%s' at ref %s", workspace_name, master.ref)

    def _close_api(self, api: PrismicApi) -> None:
        # Injected clients belong to the caller.
        if self._http_client is None:
            api.close()

    def _release_session(self) -> None:
        if self._api is not None:
            self._close_api(self._api)
        self._api = None
        self._ref = None
        self._resolver = None
        self._state = SessionState.UNAUTHENTICATED

    def logout(self) -> None:
        """Close the session."""
        self._release_session()
        self._login_deferred = False
        logger.debug("Logged out")

    def _assert_logged_in(self) -> None:
        """Ensure a session, performing a deferred login once.

        Raises:
            NotLoggedIn: If there is no session and none can be established.
        """
        if self._state is SessionState.AUTHENTICATED:
            return
        with self._lock:
            if self._state is SessionState.AUTHENTICATED:
                return
            if self._login_deferred and self._workspace_name:
                self._login_deferred = False
                try:
                    self._connect()
                except RepositoryError as e:
                    raise NotLoggedIn(f"Deferred login to workspace '{self._workspace_name}' failed: {e}") from e
                return
            raise NotLoggedIn()

    @property
    def _session(self) -> tuple[PrismicApi, str, MaraudersMap]:
        self._assert_logged_in()
        assert self._api is not None and self._ref is not None and self._resolver is not None
        return self._api, self._ref, self._resolver

    # =========================================================================
    # STORE ACCESS
    # =========================================================================

    @contextmanager
    def _backend_call(self, operation: str) -> Iterator[None]:
        try:
            yield
        except PrismicApiError as e:
            logger.error("Prismic request failed during %s: %s", operation, e)
            raise BackendError(f"{operation} failed", cause=e) from e

    def _everything(self) -> SearchForm:
        api, ref, _ = self._session
        return api.form(EVERYTHING_FORM).ref(ref)

    def _search_one(self, identifier: str) -> Document | None:
        with self._backend_call("get_node_by_identifier"):
            form = self._everything().query(p.render_query([p.at(p.DOCUMENT_ID, identifier)]))
            results = form.submit().results
        return results[0] if results else None

    def _path_for(self, identifier: str) -> str | None:
        _, _, resolver = self._session
        try:
            return resolver.resolve_path(identifier)
        except NotFound:
            logger.warning("Document '%s' has no usable path; skipped", identifier)
            return None

    def _root_node(self) -> Node:
        with self._backend_call("get_node"):
            documents = self._everything().submit_all()
        names = []
        for document in documents:
            path = self._path_for(document.id)
            if path is not None:
                names.append(path[1:])
        return self._projector.project_root(names)

    # =========================================================================
    # NODES
    # =========================================================================

    def get_node(self, path: str) -> Node:
        """Return the node at ``path``; ``/`` is the synthetic root.

        Raises:
            InvalidPath: If the path is malformed.
            NotFound: If no document backs the path.
        """
        assert_valid_absolute_path(path)
        _, _, resolver = self._session
        if path == ROOT_PATH:
            return self._root_node()

        identifier = resolver.resolve_identifier(path)
        try:
            return self.get_node_by_identifier(identifier)
        except NotFound as e:
            raise NotFound(path, self._workspace_name) from e

    def get_nodes(self, paths: Iterable[str]) -> dict[str, Node]:
        """Return the nodes at ``paths``, keyed by path; paths without a document are omitted."""
        paths = list(paths)
        for path in paths:
            assert_valid_absolute_path(path)
        _, _, resolver = self._session
        if not paths:
            return {}
        identifiers = [resolver.resolve_identifier(path) for path in paths]
        return self.get_nodes_by_identifier(identifiers)

    def get_node_by_identifier(self, identifier: str) -> Node:
        """Return the node of a document identifier.

        Raises:
            NotFound: If the store has no such document.
        """
        self._assert_logged_in()
        if identifier == ROOT_IDENTIFIER:
            return self._root_node()
        document = self._search_one(identifier)
        if document is None:
            raise NotFound(identifier, self._workspace_name)
        return self._projector.project(document)

    def get_nodes_by_identifier(self, identifiers: Iterable[str]) -> dict[str, Node]:
        """Return the nodes of several identifiers in one request, keyed by path.

        Identifiers without a document are omitted.
        """
        self._assert_logged_in()
        identifiers = list(dict.fromkeys(identifiers))
        nodes: dict[str, Node] = {}
        if ROOT_IDENTIFIER in identifiers:
            identifiers.remove(ROOT_IDENTIFIER)
            nodes[ROOT_PATH] = self._root_node()
        if not identifiers:
            return nodes

        with self._backend_call("get_nodes_by_identifier"):
            form = self._everything().query(p.render_query([p.any_(p.DOCUMENT_ID, identifiers)]))
            documents = form.submit_all()

        for document in documents:
            path = self._path_for(document.id)
            if path is not None:
                nodes[path] = self._projector.project(document)
        logger.debug("Fetched %d of %d requested documents", len(documents), len(identifiers))
        return nodes

    def _assert_current_workspace(self, workspace: str | None) -> None:
        if workspace is not None and workspace != self._workspace_name:
            raise NotImplementedOperation(
                "cross-workspace resolution",
                f"cannot resolve in workspace '{workspace}' from '{self._workspace_name}'",
            )

    def get_node_path_for_identifier(self, identifier: str, workspace: str | None = None) -> str:
        """Return the path of a document identifier (no request is made).

        Raises:
            NotImplementedOperation: If ``workspace`` names another workspace.
        """
        self._assert_current_workspace(workspace)
        _, _, resolver = self._session
        return resolver.resolve_path(identifier)

    def get_node_identifier_for_path(self, path: str, workspace: str | None = None) -> str:
        """Return the document identifier of a path (no request is made).

        Raises:
            InvalidPath: If the path is malformed.
            NotImplementedOperation: If ``workspace`` names another workspace.
        """
        assert_valid_absolute_path(path)
        self._assert_current_workspace(workspace)
        _, _, resolver = self._session
        return resolver.resolve_identifier(path)

    def get_node_types(self, names: Iterable[str] | None = None) -> list[NodeTypeDefinition]:
        """Return the standard node types followed by one type per document type.

        Args:
            names: Optional filter; unknown names are ignored.
        """
        api, _, _ = self._session
        return self._synthesizer.catalog(api.types().keys(), names)

    def get_binary_stream(self, path: str) -> BinaryIO:
        """Download the image behind a BINARY or URI property.

        Args:
            path: Property path, e.g. ``/about/illustration``.

        Raises:
            NotFound: If the node or the property does not exist.
            ValidationError: If the property does not hold an image address.
        """
        assert_valid_absolute_path(path)
        api, _, _ = self._session
        node = self.get_node(get_parent_path(path))
        name = get_node_name(path)
        prop = node.get_property(name)
        if prop is None:
            raise NotFound(path, self._workspace_name)
        if prop.type not in (PropertyType.BINARY, PropertyType.URI) or not prop.value:
            raise ValidationError("Property has no binary value", field=name, value=prop.type.name)
        with self._backend_call("get_binary_stream"):
            data = api.get_bytes(prop.value)
        return io.BytesIO(data)

    def get_property(self, path: str) -> Any:
        raise NotImplementedOperation("get_property", "getting properties by path is not implemented")

    def get_references(self, path: str, name: str | None = None) -> list[str]:
        # Documents cannot reference each other through typed properties.
        return []

    def get_weak_references(self, path: str, name: str | None = None) -> list[str]:
        return []

    # =========================================================================
    # QUERY
    # =========================================================================

    def query(self, query: Query | QueryObjectModel) -> list[QueryRow]:
        """Run a JCR-SQL2 statement or a query model.

        Rows come back in store order, each with its path, node, selector
        name and column values.

        Raises:
            InvalidQuery: If the statement does not parse or the model is malformed.
            UnsupportedQuery: If the query has no native equivalent.
            BackendError: If the search request fails.
        """
        qom = validate_query(self._to_model(query), self._capabilities)
        api, _, _ = self._session

        known_types = {definition.name for definition in self._synthesizer.catalog(api.types().keys())}
        walker = BabelFish(self._projector.namespace, known_types=known_types)
        selectors, _, native = walker.walk_qom_query(qom)
        selector_name = selectors[0].name

        rows = []
        for document in self._execute(native):
            path = self._path_for(document.id)
            if path is None:
                continue
            node = self._projector.project(document)
            rows.append(QueryRow(path, node, selector_name, self._row_values(node, native)))
        logger.debug("Query %s returned %d rows", native.statement, len(rows))
        return rows

    def _to_model(self, query: Query | QueryObjectModel) -> QueryObjectModel:
        if isinstance(query, QueryObjectModel):
            return query
        if query.language != JCR_SQL2:
            raise InvalidQuery(
                f"Statements in {query.language} cannot be parsed",
                field="language",
                value=query.language,
            )
        try:
            qom = self._parser.parse(query.statement, query.bind_values)
        except InvalidQuery as e:
            raise InvalidQuery(
                f"Invalid query: {e.details}",
                field="statement",
                value=query.statement,
            ) from e
        return qom.with_paging(query.limit, query.offset)

    def _execute(self, native: NativeQuery) -> list[Document]:
        if native.limit == 0:
            return []

        form = self._everything()
        if native.predicates:
            form = form.query(native.statement)
        if native.orderings:
            form = form.orderings(native.orderings)

        limit, offset = native.limit, native.offset
        with self._backend_call("query"):
            if limit is not None and limit <= MAX_PAGE_SIZE and offset % limit == 0:
                return form.page_size(limit).page(offset // limit + 1).submit().results
            documents = form.submit_all()
        end = None if limit is None else offset + limit
        return documents[offset:end]

    @staticmethod
    def _row_values(node: Node, native: NativeQuery) -> dict[str, Any]:
        if not native.columns:
            return {name: node.value(name) for name in node}
        values: dict[str, Any] = {}
        for col in native.columns:
            if col.property_name is None:
                values.update({name: node.value(name) for name in node})
            else:
                values[col.name or col.property_name] = node.value(col.property_name)
        return values

    # =========================================================================
    # STATIC TABLES
    # =========================================================================

    def capabilities(self) -> Capabilities:
        return self._capabilities

    def get_namespaces(self) -> dict[str, str]:
        return dict(NAMESPACES)

    def get_accessible_workspace_names(self) -> list[str]:
        return [DEFAULT_WORKSPACE]

    def get_repository_descriptors(self) -> dict[str, Any]:
        return repository_descriptors(self._capabilities)

    def get_supported_query_languages(self) -> list[str]:
        return list(SUPPORTED_QUERY_LANGUAGES)

    # =========================================================================
    # NATIVE ESCAPE HATCHES
    # =========================================================================

    def _get_native_handle(self, kind: str) -> object:
        api, ref, _ = self._session
        match kind:
            case "api":
                return api
            case "ref":
                return ref
            case "http":
                return api.http
        raise NotSupported(f"native:{kind}")


__all__ = ["PrismicTransport", "EVERYTHING_FORM"]
