"""Prismic document fragments.

A fragment is one named field of a Prismic document. The set of kinds the
projection cares about is closed:

- DateFragment: ``Date`` and ``Timestamp`` fields.
- NumberFragment: ``Number`` fields.
- ImageFragment: ``Image`` fields (main view plus named views).
- ImageViewFragment: a single rendered image view.
- TextFragment: every other kind, carried as its text rendering.

Parsing never fails: a fragment whose JSON does not have the expected shape
degrades to a TextFragment.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DateFragment:
    """A date or timestamp field, kept in its ISO-8601 wire form."""

    value: str

    def as_text(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class NumberFragment:
    """A numeric field."""

    value: int | float

    def as_text(self) -> str:
        if isinstance(self.value, float) and self.value.is_integer():
            return str(int(self.value))
        return str(self.value)


@dataclass(frozen=True, slots=True)
class ImageViewFragment:
    """One rendered view of an image.

    Attributes:
        url: Address of the rendered image.
        alt: Alternative text, if any.
        width: Width in pixels, if known.
        height: Height in pixels, if known.
    """

    url: str
    alt: str | None = None
    width: int | None = None
    height: int | None = None

    def as_text(self) -> str:
        return self.url


@dataclass(frozen=True, slots=True)
class ImageFragment:
    """An image field: the main view and any additional named views."""

    main: ImageViewFragment
    views: dict[str, ImageViewFragment] = field(default_factory=dict)

    def get_view(self, name: str) -> ImageViewFragment | None:
        """Return the named view; ``"main"`` is always available."""
        if name == "main":
            return self.main
        return self.views.get(name)

    def as_text(self) -> str:
        return self.main.url


@dataclass(frozen=True, slots=True)
class TextFragment:
    """Any other fragment kind, flattened to its text rendering.

    Attributes:
        kind: The Prismic type name (``"StructuredText"``, ``"Link.web"``...).
        text: Generic text rendering of the value.
    """

    kind: str
    text: str

    def as_text(self) -> str:
        return self.text


#: Closed union of the fragment kinds handled by the projection.
type Fragment = DateFragment | NumberFragment | ImageFragment | ImageViewFragment | TextFragment


# =============================================================================
# PARSING
# =============================================================================


def _parse_view(value: dict[str, Any]) -> ImageViewFragment:
    dimensions = value.get("dimensions") or {}
    return ImageViewFragment(
        url=value["url"],
        alt=value.get("alt"),
        width=dimensions.get("width"),
        height=dimensions.get("height"),
    )


def _structured_text(blocks: list[dict[str, Any]]) -> str:
    lines = []
    for block in blocks:
        if "text" in block:
            lines.append(block["text"])
        elif block.get("type") == "image":
            lines.append(block["url"])
        elif block.get("type") == "embed":
            lines.append(block["oembed"]["embed_url"])
    return "\n".join(lines)


def _group_text(items: list[dict[str, Any]]) -> str:
    lines = []
    for item in items:
        for name, raw in item.items():
            text = parse_fragment(raw.get("type", ""), raw.get("value")).as_text()
            if text:
                lines.append(text)
            else:
                logger.debug("Empty text rendering for group field '%s'", name)
    return "\n".join(lines)


def _fallback_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (str, int, float, bool)):
        return str(value)
    return json.dumps(value, sort_keys=True, ensure_ascii=False)


def _text_rendering(kind: str, value: Any) -> str:
    match kind:
        case "StructuredText":
            return _structured_text(value)
        case "Text" | "Select" | "Color":
            return str(value)
        case "Link.web" | "Link.image" | "Link.file":
            return value["url"]
        case "Link.document":
            return value["document"]["id"]
        case "Embed":
            return value["oembed"]["embed_url"]
        case "GeoPoint":
            return f"{value['latitude']},{value['longitude']}"
        case "Group":
            return _group_text(value)
        case _:
            return _fallback_text(value)


def parse_fragment(kind: str, value: Any) -> Fragment:
    """Build a Fragment from the ``{"type", "value"}`` pair of the JSON API.

    Args:
        kind: Prismic fragment type name.
        value: Raw JSON value.

    Returns:
        The parsed fragment. Malformed values degrade to TextFragment.
    """
    try:
        match kind:
            case "Date" | "Timestamp":
                if not isinstance(value, str):
                    raise TypeError(f"{kind} value must be a string")
                return DateFragment(value)
            case "Number":
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise TypeError("Number value must be numeric")
                return NumberFragment(value)
            case "Image" if isinstance(value, dict) and "main" in value:
                views = {name: _parse_view(view) for name, view in (value.get("views") or {}).items()}
                return ImageFragment(main=_parse_view(value["main"]), views=views)
            case "Image" | "ImageView":
                return _parse_view(value)
            case _:
                return TextFragment(kind, _text_rendering(kind, value))
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Malformed %s fragment degraded to text: %s", kind or "untyped", e)
        return TextFragment(kind, _fallback_text(value))


__all__ = [
    "DateFragment",
    "NumberFragment",
    "ImageFragment",
    "ImageViewFragment",
    "TextFragment",
    "Fragment",
    "parse_fragment",
]
