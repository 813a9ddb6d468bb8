"""XFiles - Prismic content-repository transport.

Public API:
- PrismicTransport: the read-only transport over the Prismic API.
- LoggingTransport, DebugStack, LoggingCallLogger: call logging.
- TransportFactory: builds transports from parameters or configuration.
- Capabilities and descriptors reported by transports.

Example:
    >>> from prismic_cr.core.xfiles import TransportFactory
    >>> result = TransportFactory().execute_create({"prismic_cr.uri": "https://%s.cdn.prismic.io/api"})
    >>> transport = result.transport
    >>> transport.login(workspace_name="lesbonneschoses")
    >>> transport.get_node("/about").value("jcr:primaryType")
    'prismic:article'
"""

from prismic_cr.core.xfiles.capabilities import (
    PRISMIC_FILTER_OPS,
    Capabilities,
    FeatureSupport,
    FilterCapability,
    FullTextCapability,
    NativeCapability,
    PaginationCapability,
    PaginationMode,
    prismic_capabilities,
)
from prismic_cr.core.xfiles.client import EVERYTHING_FORM, PrismicTransport
from prismic_cr.core.xfiles.descriptors import (
    NAMESPACES,
    SUPPORTED_QUERY_LANGUAGES,
    repository_descriptors,
)
from prismic_cr.core.xfiles.factory import TransportFactory
from prismic_cr.core.xfiles.logging_client import (
    CallLogger,
    CallRecord,
    DebugStack,
    LoggingCallLogger,
    LoggingTransport,
)
from prismic_cr.core.xfiles.protocols import (
    BaseTransport,
    Credentials,
    QueryRow,
    QueryTransport,
    TransportNativeMixin,
)
from prismic_cr.core.xfiles.session import DEFAULT_WORKSPACE, SessionState

__all__ = [
    # Transport
    "PrismicTransport",
    "EVERYTHING_FORM",
    "SessionState",
    "DEFAULT_WORKSPACE",
    "Credentials",
    "QueryRow",
    # Protocols
    "BaseTransport",
    "QueryTransport",
    "TransportNativeMixin",
    # Logging
    "CallLogger",
    "CallRecord",
    "DebugStack",
    "LoggingCallLogger",
    "LoggingTransport",
    # Factory
    "TransportFactory",
    # Capabilities
    "Capabilities",
    "FeatureSupport",
    "FilterCapability",
    "FullTextCapability",
    "NativeCapability",
    "PaginationCapability",
    "PaginationMode",
    "PRISMIC_FILTER_OPS",
    "prismic_capabilities",
    # Static tables
    "NAMESPACES",
    "SUPPORTED_QUERY_LANGUAGES",
    "repository_descriptors",
]
