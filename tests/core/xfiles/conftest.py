"""Shared fixtures for XFiles transport tests."""

import pytest

from prismic_cr.core.xfiles import DebugStack, LoggingTransport, PrismicTransport
from tests.utils import URI_TEMPLATE


@pytest.fixture
def deferred_transport(http_client) -> PrismicTransport:
    """Transport whose login is deferred until first use."""
    instance = PrismicTransport(URI_TEMPLATE, check_login_on_server=False, http_client=http_client)
    instance.login(workspace_name="test")
    return instance


@pytest.fixture
def debug_stack() -> DebugStack:
    return DebugStack()


@pytest.fixture
def logging_transport(http_client, debug_stack: DebugStack) -> LoggingTransport:
    """Logged-in transport wrapped in a LoggingTransport recording into debug_stack."""
    inner = PrismicTransport(URI_TEMPLATE, http_client=http_client)
    wrapped = LoggingTransport(inner, debug_stack)
    wrapped.login(workspace_name="test")
    return wrapped
