"""Native Prismic query produced by the translator."""

from dataclasses import dataclass

from prismic_cr.core.babel_fish.model import Column


@dataclass(frozen=True, slots=True)
class NativeQuery:
    """A query in the store's own predicate language.

    Attributes:
        statement: Full predicate string, e.g. ``[[:d = at(document.type, "page")]]``.
        predicates: Top-level clauses of the statement, in order.
        orderings: Sort clause, e.g. ``[my.page.date desc]``, or None.
        columns: Columns requested by the query.
        limit: Maximum number of rows, None for no limit.
        offset: Number of rows to skip.
    """

    statement: str
    predicates: tuple[str, ...] = ()
    orderings: str | None = None
    columns: tuple[Column, ...] = ()
    limit: int | None = None
    offset: int = 0

    def __str__(self) -> str:
        return self.statement


__all__ = ["NativeQuery"]
