"""Shared fixtures for BabelFish query tests."""

import pytest

from prismic_cr.core.babel_fish import BabelFish
from prismic_cr.core.xfiles import (
    Capabilities,
    FeatureSupport,
    FilterCapability,
    PaginationCapability,
    prismic_capabilities,
)


@pytest.fixture
def prismic_caps() -> Capabilities:
    """Capabilities of the Prismic transport."""
    return prismic_capabilities()


@pytest.fixture
def minimal_caps() -> Capabilities:
    """Minimal capabilities (selection only, no constraints or paging)."""
    return Capabilities(
        query=FeatureSupport(supported=True),
        projection=FeatureSupport(supported=False),
        filter=FilterCapability(supported=False),
        order_by=FeatureSupport(supported=False),
        pagination=PaginationCapability(supported=False),
    )


@pytest.fixture
def limited_ops_caps() -> Capabilities:
    """Capabilities with limited filter operators (only eq, and)."""
    return Capabilities(
        query=FeatureSupport(supported=True),
        projection=FeatureSupport(supported=True),
        filter=FilterCapability(supported=True, pushdown=True, ops=("eq", "and")),
        order_by=FeatureSupport(supported=True),
        pagination=PaginationCapability(supported=True, max_limit=100),
    )


@pytest.fixture
def babel_fish() -> BabelFish:
    """Translator knowing the standard types plus page and article."""
    return BabelFish(
        "prismic",
        known_types={"nt:base", "nt:unstructured", "mix:referenceable", "nt:folder", "prismic:page", "prismic:article"},
    )
