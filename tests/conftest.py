"""Pytest fixtures.

This file adjusts sys.path for src-layout imports.
"""

# ruff: noqa: E402

import os
import sys

# Ensure `src` is on sys.path so imports like `from prismic_cr.core...` resolve during tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if os.path.isdir(SRC):
    sys.path.insert(0, SRC)
sys.path.insert(0, ROOT)

import pytest
from rich.traceback import install

from prismic_cr.core.xfiles.client import PrismicTransport
from tests.utils import URI_TEMPLATE, FakePrismic

# Enable readable tracebacks in development / test environments.
# Can be disabled with PYTEST_RICH=0
if os.getenv("PYTEST_RICH", "1") == "1":
    install(
        show_locals=True,  # show local variables for each frame
        width=None,  # use terminal width
        word_wrap=True,  # wrap long lines
        extra_lines=1,  # some context around lines
        suppress=["/usr/lib/python3", "site-packages"],  # hide "noisy" third-party frames
    )


@pytest.fixture
def fake_prismic():
    """Provide a fresh in-memory Prismic repository."""
    return FakePrismic()


@pytest.fixture
def http_client(fake_prismic):
    """Provide an httpx client answering from the fake repository."""
    client = fake_prismic.client()
    yield client
    client.close()


@pytest.fixture
def transport(http_client):
    """Return a transport logged in to the fake repository."""
    instance = PrismicTransport(URI_TEMPLATE, http_client=http_client)
    instance.login(workspace_name="test")
    return instance
