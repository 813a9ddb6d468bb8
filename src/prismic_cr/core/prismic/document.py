"""Prismic documents as returned by the search API."""

from dataclasses import dataclass, field
from typing import Any

from prismic_cr.core.prismic.exceptions import ApiResponseError
from prismic_cr.core.prismic.fragments import Fragment, parse_fragment


@dataclass(frozen=True, slots=True)
class Document:
    """A read-only Prismic document.

    Attributes:
        id: Globally unique, stable identifier.
        type: Document type tag (e.g. ``"page"``).
        slugs: Ordered slugs; the first one is the current slug.
        tags: Document tags.
        fragments: Ordered mapping from fragment name to fragment.
        href: API URL of the document, if given.
    """

    id: str
    type: str
    slugs: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    fragments: dict[str, Fragment] = field(default_factory=dict)
    href: str | None = None

    @property
    def slug(self) -> str:
        """The primary slug, ``"-"`` when the document has none."""
        return self.slugs[0] if self.slugs else "-"

    def get(self, name: str) -> Fragment | None:
        """Return a fragment by name, with or without the ``<type>.`` prefix."""
        prefix = f"{self.type}."
        if name.startswith(prefix):
            name = name[len(prefix) :]
        return self.fragments.get(name)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Document":
        """Create a Document from one entry of a search response.

        Raises:
            ApiResponseError: If id or type is missing.
        """
        try:
            doc_id = data["id"]
            doc_type = data["type"]
        except (KeyError, TypeError) as e:
            raise ApiResponseError(f"Document without id/type: {data!r}") from e

        raw_fragments = (data.get("data") or {}).get(doc_type) or {}
        fragments: dict[str, Fragment] = {}
        for name, raw in raw_fragments.items():
            if isinstance(raw, list):
                # Repeated fields come as a list; only the first value is kept.
                raw = raw[0] if raw else {}
            if not isinstance(raw, dict):
                raw = {"type": "", "value": raw}
            fragments[name] = parse_fragment(raw.get("type", ""), raw.get("value"))

        return cls(
            id=doc_id,
            type=doc_type,
            slugs=tuple(data.get("slugs") or ()),
            tags=tuple(data.get("tags") or ()),
            fragments=fragments,
            href=data.get("href"),
        )


__all__ = ["Document"]
