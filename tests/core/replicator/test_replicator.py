"""Tests for Replicator, the node type synthesizer."""

import logging

import pytest

from prismic_cr.core.dto.node_type_dto import NodeTypeDefinition, OnParentVersion
from prismic_cr.core.replicator import STANDARD_NODE_TYPES, NodeTypeSynthesizer, Replicator

STANDARD_NAMES = [
    "nt:base",
    "nt:unstructured",
    "nt:hierarchyNode",
    "nt:folder",
    "nt:file",
    "nt:resource",
    "mix:referenceable",
    "mix:created",
    "mix:lastModified",
    "mix:title",
    "mix:mimeType",
]


@pytest.fixture
def replicator() -> Replicator:
    return Replicator()


class TestStandardCatalog:
    """The built-in catalog."""

    def test_names_and_order(self):
        assert list(STANDARD_NODE_TYPES) == STANDARD_NAMES

    def test_base_is_abstract(self):
        base = STANDARD_NODE_TYPES["nt:base"]
        assert base.is_abstract is True
        assert [p.name for p in base.declared_property_definitions] == ["jcr:primaryType", "jcr:mixinTypes"]

    def test_referenceable_declares_uuid(self):
        referenceable = STANDARD_NODE_TYPES["mix:referenceable"]
        assert referenceable.is_mixin is True
        assert [p.name for p in referenceable.declared_property_definitions] == ["jcr:uuid"]

    def test_standard_types_property_is_a_copy(self, replicator: Replicator):
        replicator.standard_types.pop("nt:base")
        assert "nt:base" in replicator.standard_types


class TestSynthesize:
    """One definition per document type."""

    def test_definition(self, replicator: Replicator):
        definition = replicator.synthesize("page")

        assert definition.name == "prismic:page"
        assert definition.is_abstract is False
        assert definition.is_mixin is False
        assert definition.is_queryable is True
        assert definition.has_orderable_child_nodes is True
        assert definition.primary_item_name is None
        assert definition.declared_supertype_names == ["nt:unstructured"]
        assert definition.declared_property_definitions == []

    def test_child_rule(self, replicator: Replicator):
        (rule,) = replicator.synthesize("page").declared_node_definitions

        assert rule.declaring_node_type == "prismic:page"
        assert rule.name == "*"
        assert rule.on_parent_version == OnParentVersion.IGNORE
        assert rule.allows_same_name_siblings is False
        assert rule.default_primary_type_name == "prismic:page"
        assert rule.required_primary_type_names == ["prismic:page"]

    def test_custom_namespace(self):
        assert Replicator("cms").synthesize("page").name == "cms:page"


class TestCatalog:
    """Standard definitions merged with synthesized ones."""

    def test_standard_first_then_synthesized(self, replicator: Replicator):
        names = [d.name for d in replicator.catalog(["page", "article"])]
        assert names == [*STANDARD_NAMES, "prismic:page", "prismic:article"]

    def test_empty_store(self, replicator: Replicator):
        assert [d.name for d in replicator.catalog([])] == STANDARD_NAMES

    def test_filter(self, replicator: Replicator):
        catalog = replicator.catalog(["page", "article"], ["prismic:article", "nt:base"])
        assert [d.name for d in catalog] == ["nt:base", "prismic:article"]

    def test_filter_drops_unknown_names(self, replicator: Replicator, caplog):
        with caplog.at_level(logging.DEBUG, logger="prismic_cr.core.replicator.replicator"):
            catalog = replicator.catalog(["page"], ["prismic:page", "bogus:type"])
        assert [d.name for d in catalog] == ["prismic:page"]
        assert "bogus:type" in caplog.text

    def test_empty_filter_returns_everything(self, replicator: Replicator):
        assert len(replicator.catalog(["page"], [])) == len(STANDARD_NAMES) + 1

    def test_synthesized_replaces_standard_of_same_name(self):
        replicator = Replicator("nt")
        names = [d.name for d in replicator.catalog(["folder"])]
        assert names.count("nt:folder") == 1
        assert names[-1] == "nt:folder"
        assert replicator.catalog(["folder"])[-1].declared_supertype_names == ["nt:unstructured"]

    def test_custom_standard_types(self):
        only_base = {"nt:base": STANDARD_NODE_TYPES["nt:base"]}
        catalog = Replicator(standard_types=only_base).catalog(["page"])
        assert [d.name for d in catalog] == ["nt:base", "prismic:page"]
        assert all(isinstance(d, NodeTypeDefinition) for d in catalog)

    def test_alias(self):
        assert NodeTypeSynthesizer is Replicator
