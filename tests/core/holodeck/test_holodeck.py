"""Tests for Holodeck, the document projector."""

from unittest.mock import patch

import pytest

from prismic_cr.core.holodeck import (
    DocumentProjector,
    Holodeck,
    Node,
    PropertyType,
    fragment_property,
    project,
)
from prismic_cr.core.prismic.document import Document
from prismic_cr.core.prismic.fragments import (
    DateFragment,
    ImageFragment,
    ImageViewFragment,
    NumberFragment,
    TextFragment,
)
from tests.utils import HELLO, IMAGE_URL, WELCOME, make_document


@pytest.fixture
def welcome() -> Document:
    return Document.from_dict(WELCOME)


class TestFragmentProperty:
    """Fragment kind to property type."""

    def test_date(self):
        assert fragment_property(DateFragment("2024-03-01")) == ("2024-03-01", PropertyType.DATE)

    def test_number(self):
        assert fragment_property(NumberFragment(3)) == ("3", PropertyType.LONG)

    def test_image(self):
        image = ImageFragment(ImageViewFragment("https://x/main.png"))
        assert fragment_property(image) == ("https://x/main.png", PropertyType.BINARY)

    def test_image_view(self):
        assert fragment_property(ImageViewFragment("https://x/icon.png")) == ("https://x/icon.png", PropertyType.URI)

    def test_text(self):
        assert fragment_property(TextFragment("StructuredText", "Hi")) == ("Hi", PropertyType.STRING)


class TestProject:
    """Document to node projection."""

    def test_property_order(self, welcome: Document):
        node = Holodeck().project(welcome)
        assert list(node) == [
            "jcr:primaryType",
            "jcr:mixinTypes",
            "jcr:uuid",
            "slug",
            "slugs",
            "tags",
            "title",
            "published",
            "rank",
            "illustration",
        ]

    def test_synthetic_properties(self, welcome: Document):
        node = Holodeck().project(welcome)
        assert node.primary_type == "prismic:page"
        assert node.type_of("jcr:primaryType") == PropertyType.NAME
        assert node.value("jcr:mixinTypes") == ["mix:referenceable"]
        assert node["jcr:mixinTypes"].multiple is True
        assert node.identifier == "a1"
        assert node.type_of("jcr:uuid") == PropertyType.STRING

    def test_slugs_and_tags(self, welcome: Document):
        node = Holodeck().project(welcome)
        assert node.value("slug") == "welcome"
        assert node.value("slugs") == ["welcome", "home-page"]
        assert node.value("tags") == ["featured"]
        assert node["tags"].multiple is True

    def test_fragment_properties(self, welcome: Document):
        node = Holodeck().project(welcome)
        assert node.value("title") == "Welcome"
        assert node.type_of("title") == PropertyType.STRING
        assert node.type_of("published") == PropertyType.DATE
        assert node.value("rank") == "3"
        assert node.type_of("rank") == PropertyType.LONG
        assert node.value("illustration") == IMAGE_URL
        assert node.type_of("illustration") == PropertyType.BINARY

    def test_flat_form(self):
        node = project(Document.from_dict(HELLO))
        assert node.to_dict() == {
            "jcr:primaryType": "prismic:article",
            ":jcr:primaryType": 7,
            "jcr:mixinTypes": ["mix:referenceable"],
            ":jcr:mixinTypes": 7,
            "jcr:uuid": "a2",
            ":jcr:uuid": 1,
            "slug": "hello-world",
            ":slug": 1,
            "slugs": ["hello-world"],
            ":slugs": 1,
            "tags": [],
            ":tags": 1,
            "body": "Hello world",
            ":body": 1,
        }

    def test_document_without_slugs(self):
        node = project(Document(id="x", type="page"))
        assert node.value("slug") == "-"
        assert node.value("slugs") == []

    def test_custom_namespace(self, welcome: Document):
        assert Holodeck("cms").project(welcome).primary_type == "cms:page"

    def test_projection_is_pure(self, welcome: Document):
        projector = Holodeck()
        assert projector.project(welcome).to_dict() == projector.project(welcome).to_dict()

    def test_failing_fragment_degrades_to_empty_string(self, welcome: Document):
        with patch(
            "prismic_cr.core.holodeck.holodeck.fragment_property",
            side_effect=ValueError("boom"),
        ):
            node = Holodeck().project(welcome)
        assert node.value("title") == ""
        assert node.type_of("title") == PropertyType.STRING

    def test_fragment_cannot_shadow_document_properties(self, caplog):
        document = Document.from_dict(
            make_document(
                "a9",
                title={"type": "Text", "value": "Kept"},
                tags={"type": "Text", "value": "not a tag list"},
                **{"jcr:uuid": {"type": "Text", "value": "forged"}},
            )
        )

        node = Holodeck().project(document)

        assert node.identifier == "a9"
        assert node.value("tags") == []
        assert node.value("title") == "Kept"
        assert "shadows a document property" in caplog.text

    def test_alias(self):
        assert DocumentProjector is Holodeck


class TestProjectRoot:
    """Synthetic root node."""

    def test_root(self):
        root = Holodeck().project_root(["home", "a2"])
        assert root.primary_type == "nt:unstructured"
        assert list(root.children) == ["home", "a2"]
        assert all(isinstance(child, Node) and not child.properties for child in root.children.values())
        assert root.to_dict() == {"jcr:primaryType": "nt:unstructured", ":jcr:primaryType": 7, "home": {}, "a2": {}}


class TestNode:
    """Node property bag behaviour."""

    def test_set_property_keeps_position(self):
        node = Node()
        node.set_property("a", "1", PropertyType.STRING)
        node.set_property("b", "2", PropertyType.STRING)
        node.set_property("a", "3", PropertyType.STRING)
        assert list(node) == ["a", "b"]
        assert node.value("a") == "3"

    def test_missing_property(self):
        node = Node()
        assert node.get_property("x") is None
        assert node.value("x", "default") == "default"
        assert node.type_of("x") is None
        assert "x" not in node
        assert node.primary_type is None

    def test_empty_node_is_truthy(self):
        assert Node()
