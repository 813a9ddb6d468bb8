"""XFiles - Logging transport wrapper.

Wraps a transport and reports every forwarded call to a ``CallLogger``:
``start_call(method, params, env)`` before the call, ``stop_call()`` after it
(also when it raises).

Two call loggers are provided:
- DebugStack keeps the calls in memory with their start time and duration,
  for tests and profiling.
- LoggingCallLogger writes them to the standard ``logging`` module at debug level.
"""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Protocol, TypeVar, runtime_checkable

from prismic_cr.core.babel_fish.model import Query, QueryObjectModel
from prismic_cr.core.dto.node_type_dto import NodeTypeDefinition
from prismic_cr.core.holodeck.node import Node
from prismic_cr.core.xfiles.capabilities import Capabilities
from prismic_cr.core.xfiles.client import PrismicTransport
from prismic_cr.core.xfiles.protocols import Credentials, QueryRow, TransportNativeMixin
from prismic_cr.core.xfiles.session import SessionState

logger = logging.getLogger(__name__)

R = TypeVar("R")


# =============================================================================
# CALL LOGGERS
# =============================================================================


@runtime_checkable
class CallLogger(Protocol):
    """Receives the start and end of every transport call."""

    def start_call(self, method: str, params: dict[str, Any], env: dict[str, Any] | None = None) -> None: ...

    def stop_call(self) -> None: ...


@dataclass(slots=True)
class CallRecord:
    """One logged call.

    Attributes:
        method: Transport method name.
        params: Call arguments by name.
        env: Transport environment (endpoint, workspace) at call time.
        started_at: Wall-clock start time (epoch seconds).
        duration: Elapsed seconds, None while the call is running.
    """

    method: str
    params: dict[str, Any]
    env: dict[str, Any] = field(default_factory=dict)
    started_at: float = 0.0
    duration: float | None = None
    _start: float = field(default=0.0, repr=False)


class DebugStack:
    """Call logger keeping every call in memory.

    Example:
        >>> stack = DebugStack()
        >>> transport = LoggingTransport(PrismicTransport(uri), stack)
        >>> transport.get_node("/about")
        >>> stack.calls[-1].method
        'get_node'
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.calls: list[CallRecord] = []
        self._open: list[CallRecord] = []

    def start_call(self, method: str, params: dict[str, Any], env: dict[str, Any] | None = None) -> None:
        if not self.enabled:
            return
        record = CallRecord(method, dict(params), dict(env or {}), time.time(), None, time.perf_counter())
        self.calls.append(record)
        self._open.append(record)

    def stop_call(self) -> None:
        if not self.enabled or not self._open:
            return
        record = self._open.pop()
        record.duration = time.perf_counter() - record._start

    @property
    def current_query(self) -> int:
        """Number of calls recorded so far."""
        return len(self.calls)


class LoggingCallLogger:
    """Call logger writing to ``logging`` at debug level."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger
        self._started: list[tuple[str, float]] = []

    def start_call(self, method: str, params: dict[str, Any], env: dict[str, Any] | None = None) -> None:
        self._started.append((method, time.perf_counter()))
        self._log.debug("Transport call %s params=%s env=%s", method, params, env or {})

    def stop_call(self) -> None:
        if not self._started:
            return
        method, start = self._started.pop()
        self._log.debug("Transport call %s took %.3f ms", method, (time.perf_counter() - start) * 1000)


# =============================================================================
# LOGGING TRANSPORT
# =============================================================================


class LoggingTransport(TransportNativeMixin):
    """Transport wrapper reporting every call to a CallLogger."""

    def __init__(self, transport: PrismicTransport, call_logger: CallLogger):
        """Wrap a transport.

        Args:
            transport: The transport doing the work.
            call_logger: Receives start_call/stop_call for each forwarded call.
        """
        self._transport = transport
        self._call_logger = call_logger
        logger.debug("LoggingTransport wrapping %s", type(transport).__name__)

    @property
    def transport(self) -> PrismicTransport:
        """The wrapped transport."""
        return self._transport

    @property
    def call_logger(self) -> CallLogger:
        return self._call_logger

    @property
    def state(self) -> SessionState:
        return self._transport.state

    @property
    def workspace_name(self) -> str | None:
        return self._transport.workspace_name

    def _env(self) -> dict[str, Any]:
        return {"uri": self._transport.uri, "workspace": self._transport.workspace_name}

    def _call(self, method: str, params: dict[str, Any], fn: Callable[[], R]) -> R:
        self._call_logger.start_call(method, params, self._env())
        try:
            return fn()
        finally:
            self._call_logger.stop_call()

    # =========================================================================
    # SESSION
    # =========================================================================

    def login(self, credentials: Credentials | None = None, workspace_name: str | None = None) -> str:
        params = {"user_id": credentials.user_id if credentials else None, "workspace_name": workspace_name}
        return self._call("login", params, lambda: self._transport.login(credentials, workspace_name))

    def logout(self) -> None:
        self._call("logout", {}, self._transport.logout)

    # =========================================================================
    # NODES
    # =========================================================================

    def get_node(self, path: str) -> Node:
        return self._call("get_node", {"path": path}, lambda: self._transport.get_node(path))

    def get_nodes(self, paths: Iterable[str]) -> dict[str, Node]:
        paths = list(paths)
        return self._call("get_nodes", {"paths": paths}, lambda: self._transport.get_nodes(paths))

    def get_node_by_identifier(self, identifier: str) -> Node:
        return self._call(
            "get_node_by_identifier",
            {"identifier": identifier},
            lambda: self._transport.get_node_by_identifier(identifier),
        )

    def get_nodes_by_identifier(self, identifiers: Iterable[str]) -> dict[str, Node]:
        identifiers = list(identifiers)
        return self._call(
            "get_nodes_by_identifier",
            {"identifiers": identifiers},
            lambda: self._transport.get_nodes_by_identifier(identifiers),
        )

    def get_node_path_for_identifier(self, identifier: str, workspace: str | None = None) -> str:
        return self._call(
            "get_node_path_for_identifier",
            {"identifier": identifier, "workspace": workspace},
            lambda: self._transport.get_node_path_for_identifier(identifier, workspace),
        )

    def get_node_identifier_for_path(self, path: str, workspace: str | None = None) -> str:
        return self._call(
            "get_node_identifier_for_path",
            {"path": path, "workspace": workspace},
            lambda: self._transport.get_node_identifier_for_path(path, workspace),
        )

    def get_node_types(self, names: Iterable[str] | None = None) -> list[NodeTypeDefinition]:
        names = list(names) if names is not None else None
        return self._call("get_node_types", {"names": names}, lambda: self._transport.get_node_types(names))

    def get_binary_stream(self, path: str) -> BinaryIO:
        return self._call("get_binary_stream", {"path": path}, lambda: self._transport.get_binary_stream(path))

    def get_property(self, path: str) -> Any:
        return self._call("get_property", {"path": path}, lambda: self._transport.get_property(path))

    def get_references(self, path: str, name: str | None = None) -> list[str]:
        return self._call(
            "get_references",
            {"path": path, "name": name},
            lambda: self._transport.get_references(path, name),
        )

    def get_weak_references(self, path: str, name: str | None = None) -> list[str]:
        return self._call(
            "get_weak_references",
            {"path": path, "name": name},
            lambda: self._transport.get_weak_references(path, name),
        )

    # =========================================================================
    # QUERY
    # =========================================================================

    def query(self, query: Query | QueryObjectModel) -> list[QueryRow]:
        params = {"statement": query.statement} if isinstance(query, Query) else {"qom": repr(query)}
        return self._call("query", params, lambda: self._transport.query(query))

    # =========================================================================
    # STATIC TABLES
    # =========================================================================

    def capabilities(self) -> Capabilities:
        return self._transport.capabilities()

    def get_namespaces(self) -> dict[str, str]:
        return self._call("get_namespaces", {}, self._transport.get_namespaces)

    def get_accessible_workspace_names(self) -> list[str]:
        return self._call("get_accessible_workspace_names", {}, self._transport.get_accessible_workspace_names)

    def get_repository_descriptors(self) -> dict[str, Any]:
        return self._call("get_repository_descriptors", {}, self._transport.get_repository_descriptors)

    def get_supported_query_languages(self) -> list[str]:
        return self._call("get_supported_query_languages", {}, self._transport.get_supported_query_languages)

    def _get_native_handle(self, kind: str) -> object:
        return self._transport._get_native_handle(kind)


__all__ = [
    "CallLogger",
    "CallRecord",
    "DebugStack",
    "LoggingCallLogger",
    "LoggingTransport",
]
