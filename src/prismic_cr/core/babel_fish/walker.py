"""BabelFish - Query Translator.

Lowers a Query Object Model into a native Prismic predicate query.

Mapping rules:
- A ``prismic:<type>`` selector scopes the query with
  ``[:d = at(document.type, "<type>")]``; the generic ``nt:base``,
  ``nt:unstructured`` and ``mix:referenceable`` selectors add no scope.
- ``jcr:uuid`` maps to ``document.id``, ``jcr:primaryType`` to
  ``document.type``, ``tags`` to ``document.tags``; every other property to
  ``my.<type>.<property>`` of the selector's type.
- Top-level conjunctions become consecutive clauses, which the store ANDs
  implicitly. Nested ``and``/``or``/``not`` become explicit groups.

Joins and path constraints have no native equivalent and are rejected with
UnsupportedQuery. The translation is pure: the same model always gives the
same native query.

"The Babel fish is small, yellow, leech-like, and probably the oddest thing
in the universe."
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from prismic_cr.core.babel_fish.model import (
    And,
    BindVariableValue,
    ChildNode,
    Comparison,
    Constraint,
    DescendantNode,
    DynamicOperand,
    FullTextSearch,
    Join,
    Literal,
    Not,
    Operator,
    Or,
    Order,
    PropertyExistence,
    PropertyValue,
    QueryObjectModel,
    SameNode,
    Selector,
    StaticOperand,
)
from prismic_cr.core.babel_fish.native import NativeQuery
from prismic_cr.core.exceptions import InvalidQuery, UnsupportedQuery
from prismic_cr.core.holodeck.holodeck import PRISMIC_NAMESPACE
from prismic_cr.core.holodeck.node import MIX_REFERENCEABLE, NT_UNSTRUCTURED, PRIMARY_TYPE, UUID
from prismic_cr.core.prismic import predicates as p

logger = logging.getLogger(__name__)

#: Node types that select every document without a type scope.
UNSCOPED_NODE_TYPES: frozenset[str] = frozenset({"nt:base", NT_UNSTRUCTURED, MIX_REFERENCEABLE})

_WILDCARDS = re.compile(r"[%_]+")


@dataclass(slots=True)
class _Scope:
    """Per-query translation state."""

    aliases: dict[str, str]
    selector_name: str
    document_type: str | None
    bind_values: dict[str, Any] = field(default_factory=dict)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_date(value: Any) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    if isinstance(value, str):
        try:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return False
        return True
    return False


class BabelFish:
    """Query Object Model to Prismic predicate translator.

    Famous quote from The Hitchhiker's Guide to the Galaxy:
    "If you stick a Babel fish in your ear you can instantly understand
    anything said to you in any form of language."
    """

    def __init__(
        self,
        namespace: str = PRISMIC_NAMESPACE,
        known_types: Iterable[str] | None = None,
    ):
        """Create a translator.

        Args:
            namespace: Prefix of node types synthesized from document types.
            known_types: When given, selectors naming any other node type are
                rejected with InvalidQuery.
        """
        self.namespace = namespace
        self.known_types = frozenset(known_types) if known_types is not None else None

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    def walk_qom_query(self, qom: QueryObjectModel) -> tuple[list[Selector], dict[str, str], NativeQuery]:
        """Translate a query model.

        Returns:
            The selectors of the query, the selector alias table
            (selector name to node type name) and the native query.

        Raises:
            UnsupportedQuery: For joins, path constraints, non-property
                operands and unmappable selectors or comparisons.
            InvalidQuery: For unknown node types or selector names and
                unbound variables.
        """
        selected = self._extract_selector(qom)
        document_type = self._document_type(selected)
        scope = _Scope(
            aliases={selected.name: selected.node_type_name},
            selector_name=selected.name,
            document_type=document_type,
            bind_values=dict(qom.bind_values),
        )

        clauses: list[str] = []
        if document_type is not None:
            clauses.append(p.at(p.DOCUMENT_TYPE, document_type))
        if qom.constraint is not None:
            for conjunct in self._conjuncts(qom.constraint):
                clauses.append(self._constraint(conjunct, scope))

        orderings = None
        if qom.orderings:
            items = []
            for ordering in qom.orderings:
                name = self._field(ordering.operand, scope)
                items.append(f"{name} desc" if ordering.order == Order.DESC else name)
            orderings = p.render_orderings(items)

        for col in qom.columns:
            if col.selector_name is not None and col.selector_name not in scope.aliases:
                raise InvalidQuery(
                    f"Column refers to unknown selector '{col.selector_name}'",
                    field="columns",
                    value=col.selector_name,
                )

        native = NativeQuery(
            statement=p.render_query(clauses),
            predicates=tuple(clauses),
            orderings=orderings,
            columns=tuple(qom.columns),
            limit=qom.limit,
            offset=qom.offset,
        )
        logger.debug("Translated query into %s (orderings=%s)", native.statement, orderings)
        return [selected], dict(scope.aliases), native

    # =========================================================================
    # SELECTORS
    # =========================================================================

    def _extract_selector(self, qom: QueryObjectModel) -> Selector:
        if isinstance(qom.source, Join):
            raise UnsupportedQuery("join", "queries may select a single node type")
        selected = qom.source
        if self.known_types is not None and selected.node_type_name not in self.known_types:
            raise InvalidQuery(
                f"Unknown node type '{selected.node_type_name}'",
                field="source",
                value=selected.node_type_name,
            )
        return selected

    def _document_type(self, selected: Selector) -> str | None:
        name = selected.node_type_name
        prefix = f"{self.namespace}:"
        if name.startswith(prefix) and len(name) > len(prefix):
            return name[len(prefix) :]
        if name in UNSCOPED_NODE_TYPES:
            return None
        raise UnsupportedQuery(f"selector:{name}", "only document types and generic node types can be selected")

    # =========================================================================
    # OPERANDS
    # =========================================================================

    def _field(self, operand: DynamicOperand, scope: _Scope) -> str:
        if not isinstance(operand, PropertyValue):
            raise UnsupportedQuery(f"operand:{type(operand).__name__}")
        return self._property_field(operand.property_name, operand.selector_name, scope)

    def _property_field(self, name: str, selector_name: str | None, scope: _Scope) -> str:
        if selector_name is not None and selector_name not in scope.aliases:
            raise InvalidQuery(
                f"Unknown selector '{selector_name}'",
                field="selector_name",
                value=selector_name,
            )
        if name == UUID:
            return p.DOCUMENT_ID
        if name == PRIMARY_TYPE:
            return p.DOCUMENT_TYPE
        if name == "tags":
            return p.DOCUMENT_TAGS
        if scope.document_type is None:
            raise UnsupportedQuery(
                f"untyped property '{name}'",
                "custom properties need a selector of a document type",
            )
        return f"my.{scope.document_type}.{name}"

    def _value(self, operand: StaticOperand, scope: _Scope) -> Any:
        if isinstance(operand, BindVariableValue):
            if operand.name not in scope.bind_values:
                raise InvalidQuery(
                    f"Variable '{operand.name}' is not bound",
                    field="bind_values",
                    value=operand.name,
                )
            return scope.bind_values[operand.name]
        if isinstance(operand, Literal):
            return operand.value
        return operand

    def _field_value(self, field_name: str, value: Any) -> Any:
        if field_name == p.DOCUMENT_TYPE and isinstance(value, str):
            return value.removeprefix(f"{self.namespace}:")
        return value

    # =========================================================================
    # CONSTRAINTS
    # =========================================================================

    @staticmethod
    def _conjuncts(constraint: Constraint) -> list[Constraint]:
        if isinstance(constraint, And):
            return [*BabelFish._conjuncts(constraint.constraint1), *BabelFish._conjuncts(constraint.constraint2)]
        return [constraint]

    @staticmethod
    def _disjuncts(constraint: Constraint) -> list[Constraint]:
        if isinstance(constraint, Or):
            return [*BabelFish._disjuncts(constraint.constraint1), *BabelFish._disjuncts(constraint.constraint2)]
        return [constraint]

    def _constraint(self, constraint: Constraint, scope: _Scope) -> str:
        match constraint:
            case Comparison():
                return self._comparison(constraint, scope)
            case PropertyExistence(property_name=name, selector_name=selector_name):
                return p.has(self._property_field(name, selector_name, scope))
            case FullTextSearch():
                return self._full_text(constraint, scope)
            case And():
                return p.group("and", [self._constraint(c, scope) for c in self._conjuncts(constraint)])
            case Or():
                return self._or(constraint, scope)
            case Not():
                return self._not(constraint, scope)
            case SameNode() | ChildNode() | DescendantNode():
                raise UnsupportedQuery(
                    f"constraint:{type(constraint).__name__}",
                    "documents have no hierarchy to constrain",
                )
            case _:
                raise UnsupportedQuery(f"constraint:{type(constraint).__name__}")

    def _comparison(self, comparison: Comparison, scope: _Scope) -> str:
        field_name = self._field(comparison.operand1, scope)
        value = self._field_value(field_name, self._value(comparison.operand2, scope))

        match comparison.operator:
            case Operator.EQ:
                return p.at(field_name, value)
            case Operator.NE:
                return p.not_(field_name, value)
            case Operator.LT | Operator.GT:
                return self._range(field_name, comparison.operator, value)
            case Operator.LE:
                return p.group("or", [self._range(field_name, Operator.LT, value), p.at(field_name, value)])
            case Operator.GE:
                return p.group("or", [self._range(field_name, Operator.GT, value), p.at(field_name, value)])
            case Operator.LIKE:
                return self._like(field_name, value)
        raise UnsupportedQuery(f"operator:{comparison.operator}")

    def _range(self, field_name: str, operator: Operator, value: Any) -> str:
        if _is_number(value):
            return p.number_lt(field_name, value) if operator == Operator.LT else p.number_gt(field_name, value)
        if _is_date(value):
            return p.date_before(field_name, value) if operator == Operator.LT else p.date_after(field_name, value)
        raise UnsupportedQuery(
            f"range comparison on {type(value).__name__}",
            "only numbers and dates can be compared with <, >, <= and >=",
        )

    def _like(self, field_name: str, pattern: Any) -> str:
        if not isinstance(pattern, str):
            raise InvalidQuery("LIKE pattern must be a string", field="operand2", value=pattern)
        if not _WILDCARDS.search(pattern):
            return p.at(field_name, pattern)
        words = [w for w in _WILDCARDS.split(pattern) if w.strip()]
        if not words:
            return p.has(field_name)
        return p.fulltext(field_name, " ".join(w.strip() for w in words))

    def _full_text(self, search: FullTextSearch, scope: _Scope) -> str:
        expression = self._value(search.full_text_search_expression, scope)
        if not isinstance(expression, str):
            raise InvalidQuery(
                "Full-text expression must be a string",
                field="full_text_search_expression",
                value=expression,
            )
        if search.property_name is None:
            if search.selector_name is not None and search.selector_name not in scope.aliases:
                raise InvalidQuery(
                    f"Unknown selector '{search.selector_name}'",
                    field="selector_name",
                    value=search.selector_name,
                )
            return p.fulltext(p.DOCUMENT, expression)
        return p.fulltext(self._property_field(search.property_name, search.selector_name, scope), expression)

    def _or(self, constraint: Or, scope: _Scope) -> str:
        disjuncts = self._disjuncts(constraint)

        # A chain of equalities on one field is a single ``any``.
        fields = set()
        values = []
        for d in disjuncts:
            if not (isinstance(d, Comparison) and d.operator == Operator.EQ and isinstance(d.operand1, PropertyValue)):
                break
            field_name = self._field(d.operand1, scope)
            fields.add(field_name)
            values.append(self._field_value(field_name, self._value(d.operand2, scope)))
        else:
            if len(fields) == 1:
                return p.any_(fields.pop(), values)

        return p.group("or", [self._constraint(d, scope) for d in disjuncts])

    def _not(self, constraint: Not, scope: _Scope) -> str:
        inner = constraint.constraint
        if isinstance(inner, Comparison) and inner.operator == Operator.EQ:
            field_name = self._field(inner.operand1, scope)
            return p.not_(field_name, self._field_value(field_name, self._value(inner.operand2, scope)))
        if isinstance(inner, PropertyExistence):
            return p.missing(self._property_field(inner.property_name, inner.selector_name, scope))
        return p.group("not", [self._constraint(inner, scope)])


QOMWalker = BabelFish


__all__ = ["BabelFish", "QOMWalker", "UNSCOPED_NODE_TYPES"]
