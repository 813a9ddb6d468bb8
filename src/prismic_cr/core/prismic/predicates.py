"""Builders for the Prismic predicate query language.

Every helper returns one clause in its wire form, e.g.::

    >>> at("document.type", "page")
    '[:d = at(document.type, "page")]'
    >>> render_query([at("document.type", "page"), has("my.page.title")])
    '[[:d = at(document.type, "page")][:d = has(my.page.title)]]'

Consecutive clauses are implicitly AND-ed by the store. ``group`` builds the
explicit ``(and ...)``, ``(or ...)`` and ``(not ...)`` clause forms.
"""

import json
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any, Literal

#: Document-level fields addressable by predicates.
DOCUMENT_ID = "document.id"
DOCUMENT_TYPE = "document.type"
DOCUMENT_TAGS = "document.tags"
DOCUMENT = "document"

type GroupOp = Literal["and", "or", "not"]


def format_literal(value: Any) -> str:
    """Render a Python value as a predicate argument.

    Raises:
        TypeError: If the value has no predicate representation.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    if isinstance(value, datetime):
        return json.dumps(value.isoformat())
    if isinstance(value, date):
        return json.dumps(value.isoformat())
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_literal(v) for v in value) + "]"
    raise TypeError(f"Cannot render {type(value).__name__} as a predicate literal")


def predicate(name: str, field: str, *args: Any) -> str:
    """Build a ``[:d = name(field, args...)]`` clause."""
    rendered = [field, *(format_literal(arg) for arg in args)]
    return f"[:d = {name}({', '.join(rendered)})]"


def at(field: str, value: Any) -> str:
    """Equality predicate."""
    return predicate("at", field, value)


def not_(field: str, value: Any) -> str:
    """Inequality predicate."""
    return predicate("not", field, value)


def any_(field: str, values: Sequence[Any]) -> str:
    """Field equals any of values."""
    return predicate("any", field, list(values))


def has(field: str) -> str:
    """Field is set."""
    return predicate("has", field)


def missing(field: str) -> str:
    """Field is not set."""
    return predicate("missing", field)


def fulltext(field: str, text: str) -> str:
    """Full-text search on a field or on the whole document."""
    return predicate("fulltext", field, text)


def number_lt(field: str, value: int | float) -> str:
    return predicate("number.lt", field, value)


def number_gt(field: str, value: int | float) -> str:
    return predicate("number.gt", field, value)


def date_before(field: str, value: date) -> str:
    return predicate("date.before", field, value)


def date_after(field: str, value: date) -> str:
    return predicate("date.after", field, value)


def group(op: GroupOp, clauses: Iterable[str]) -> str:
    """Combine clauses into an explicit ``(op C1 C2 ...)`` group."""
    return f"({op} {' '.join(clauses)})"


def render_query(clauses: Iterable[str]) -> str:
    """Wrap top-level clauses into a query string."""
    return "[" + "".join(clauses) + "]"


def render_orderings(orderings: Iterable[str]) -> str:
    """Wrap ``field [desc]`` items into the ``orderings`` parameter form."""
    return "[" + ",".join(orderings) + "]"


__all__ = [
    "DOCUMENT",
    "DOCUMENT_ID",
    "DOCUMENT_TAGS",
    "DOCUMENT_TYPE",
    "format_literal",
    "predicate",
    "at",
    "not_",
    "any_",
    "has",
    "missing",
    "fulltext",
    "number_lt",
    "number_gt",
    "date_before",
    "date_after",
    "group",
    "render_query",
    "render_orderings",
]
