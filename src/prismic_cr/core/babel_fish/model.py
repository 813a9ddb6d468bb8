"""BabelFish - Query Object Model.

Frozen dataclasses describing a structured content-repository query:
sources (selectors and joins), dynamic and static operands, constraints,
orderings and columns. Statements in JCR-SQL2 are parsed into this model by
``babel_fish.sql2``; the translator lowers it into a native Prismic query.

Builder helpers keep hand-written queries short::

    qom = QueryObjectModel(
        source=selector("prismic:article", "a"),
        constraint=and_(eq("category", "news", "a"), gt("rank", 3, "a")),
        orderings=(desc("published", "a"),),
        limit=10,
    )
"""

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

# =============================================================================
# ENUMERATIONS
# =============================================================================


class Operator(StrEnum):
    """Comparison operators, spelled as in JCR-SQL2."""

    EQ = "="
    NE = "<>"
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    LIKE = "LIKE"


class Order(StrEnum):
    ASC = "ASC"
    DESC = "DESC"


class JoinType(StrEnum):
    INNER = "INNER"
    LEFT_OUTER = "LEFT OUTER"
    RIGHT_OUTER = "RIGHT OUTER"


# =============================================================================
# SOURCES
# =============================================================================


@dataclass(frozen=True, slots=True)
class Selector:
    """Selects the nodes of one node type.

    Attributes:
        node_type_name: Node type of the selected nodes.
        selector_name: Optional alias; the node type name is used when absent.
    """

    node_type_name: str
    selector_name: str | None = None

    @property
    def name(self) -> str:
        return self.selector_name or self.node_type_name


@dataclass(frozen=True, slots=True)
class EquiJoinCondition:
    selector1_name: str
    property1_name: str
    selector2_name: str
    property2_name: str


@dataclass(frozen=True, slots=True)
class SameNodeJoinCondition:
    selector1_name: str
    selector2_name: str
    selector2_path: str | None = None


@dataclass(frozen=True, slots=True)
class ChildNodeJoinCondition:
    child_selector_name: str
    parent_selector_name: str


@dataclass(frozen=True, slots=True)
class DescendantNodeJoinCondition:
    descendant_selector_name: str
    ancestor_selector_name: str


type JoinCondition = (
    EquiJoinCondition | SameNodeJoinCondition | ChildNodeJoinCondition | DescendantNodeJoinCondition
)


@dataclass(frozen=True, slots=True)
class Join:
    """Joins two sources on a condition."""

    left: "Source"
    right: "Source"
    join_type: JoinType
    condition: JoinCondition


type Source = Selector | Join


def source_selectors(source: Source) -> list[Selector]:
    """Return the selectors of a source, left to right."""
    if isinstance(source, Join):
        return [*source_selectors(source.left), *source_selectors(source.right)]
    return [source]


# =============================================================================
# OPERANDS
# =============================================================================


@dataclass(frozen=True, slots=True)
class PropertyValue:
    """Value of a property of the selected node."""

    property_name: str
    selector_name: str | None = None


@dataclass(frozen=True, slots=True)
class Length:
    property_value: PropertyValue


@dataclass(frozen=True, slots=True)
class NodeName:
    selector_name: str | None = None


@dataclass(frozen=True, slots=True)
class NodeLocalName:
    selector_name: str | None = None


@dataclass(frozen=True, slots=True)
class FullTextSearchScore:
    selector_name: str | None = None


@dataclass(frozen=True, slots=True)
class LowerCase:
    operand: "DynamicOperand"


@dataclass(frozen=True, slots=True)
class UpperCase:
    operand: "DynamicOperand"


type DynamicOperand = (
    PropertyValue | Length | NodeName | NodeLocalName | FullTextSearchScore | LowerCase | UpperCase
)


@dataclass(frozen=True, slots=True)
class Literal:
    """A literal value (str, int, float, bool, date or datetime)."""

    value: Any


@dataclass(frozen=True, slots=True)
class BindVariableValue:
    """A named placeholder resolved from the query's bind values."""

    name: str


type StaticOperand = Literal | BindVariableValue


# =============================================================================
# CONSTRAINTS
# =============================================================================


@dataclass(frozen=True, slots=True)
class Comparison:
    operand1: DynamicOperand
    operator: Operator
    operand2: StaticOperand


@dataclass(frozen=True, slots=True)
class PropertyExistence:
    property_name: str
    selector_name: str | None = None


@dataclass(frozen=True, slots=True)
class FullTextSearch:
    """Full-text match on one property, or on the whole node when property_name is None."""

    full_text_search_expression: StaticOperand
    property_name: str | None = None
    selector_name: str | None = None


@dataclass(frozen=True, slots=True)
class And:
    constraint1: "Constraint"
    constraint2: "Constraint"


@dataclass(frozen=True, slots=True)
class Or:
    constraint1: "Constraint"
    constraint2: "Constraint"


@dataclass(frozen=True, slots=True)
class Not:
    constraint: "Constraint"


@dataclass(frozen=True, slots=True)
class SameNode:
    path: str
    selector_name: str | None = None


@dataclass(frozen=True, slots=True)
class ChildNode:
    parent_path: str
    selector_name: str | None = None


@dataclass(frozen=True, slots=True)
class DescendantNode:
    ancestor_path: str
    selector_name: str | None = None


type Constraint = (
    Comparison
    | PropertyExistence
    | FullTextSearch
    | And
    | Or
    | Not
    | SameNode
    | ChildNode
    | DescendantNode
)


# =============================================================================
# ORDERINGS, COLUMNS, QUERIES
# =============================================================================


@dataclass(frozen=True, slots=True)
class Ordering:
    operand: DynamicOperand
    order: Order = Order.ASC


@dataclass(frozen=True, slots=True)
class Column:
    """A result column.

    Attributes:
        property_name: Property to return; None selects every property.
        column_name: Name of the column in the result; defaults to the property name.
        selector_name: Selector the property belongs to.
    """

    property_name: str | None = None
    column_name: str | None = None
    selector_name: str | None = None

    @property
    def name(self) -> str | None:
        return self.column_name or self.property_name


@dataclass(frozen=True)
class QueryObjectModel:
    """A parsed, structured query.

    Attributes:
        source: Selector or join tree.
        constraint: Optional constraint tree.
        orderings: Orderings, most significant first.
        columns: Requested columns; empty means every property.
        limit: Maximum number of rows, None for no limit.
        offset: Number of rows to skip.
        bind_values: Values for bind variables, by name.
    """

    source: Source
    constraint: Constraint | None = None
    orderings: tuple[Ordering, ...] = ()
    columns: tuple[Column, ...] = ()
    limit: int | None = None
    offset: int = 0
    bind_values: dict[str, Any] = field(default_factory=dict)

    @property
    def selectors(self) -> list[Selector]:
        return source_selectors(self.source)

    def with_paging(self, limit: int | None, offset: int = 0) -> "QueryObjectModel":
        """Return a copy with the given limit and offset."""
        return replace(self, limit=limit, offset=offset)

    def with_bind_values(self, **values: Any) -> "QueryObjectModel":
        return replace(self, bind_values={**self.bind_values, **values})


#: Query languages understood by ``Query``.
JCR_SQL2 = "JCR-SQL2"
JCR_JQOM = "JCR-JQOM"


@dataclass(frozen=True)
class Query:
    """An unparsed query statement."""

    statement: str
    language: str = JCR_SQL2
    limit: int | None = None
    offset: int = 0
    bind_values: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# BUILDERS
# =============================================================================


def _static(value: Any) -> StaticOperand:
    if isinstance(value, (Literal, BindVariableValue)):
        return value
    return Literal(value)


def selector(node_type_name: str, selector_name: str | None = None) -> Selector:
    return Selector(node_type_name, selector_name)


def bind(name: str) -> BindVariableValue:
    return BindVariableValue(name)


def _compare(op: Operator, prop: str, value: Any, selector_name: str | None) -> Comparison:
    return Comparison(PropertyValue(prop, selector_name), op, _static(value))


def eq(prop: str, value: Any, selector_name: str | None = None) -> Comparison:
    """Create an equality constraint: prop = value."""
    return _compare(Operator.EQ, prop, value, selector_name)


def ne(prop: str, value: Any, selector_name: str | None = None) -> Comparison:
    return _compare(Operator.NE, prop, value, selector_name)


def lt(prop: str, value: Any, selector_name: str | None = None) -> Comparison:
    return _compare(Operator.LT, prop, value, selector_name)


def le(prop: str, value: Any, selector_name: str | None = None) -> Comparison:
    return _compare(Operator.LE, prop, value, selector_name)


def gt(prop: str, value: Any, selector_name: str | None = None) -> Comparison:
    return _compare(Operator.GT, prop, value, selector_name)


def ge(prop: str, value: Any, selector_name: str | None = None) -> Comparison:
    return _compare(Operator.GE, prop, value, selector_name)


def like(prop: str, pattern: Any, selector_name: str | None = None) -> Comparison:
    """Create a LIKE constraint; ``%`` and ``_`` are wildcards."""
    return _compare(Operator.LIKE, prop, pattern, selector_name)


def exists(prop: str, selector_name: str | None = None) -> PropertyExistence:
    return PropertyExistence(prop, selector_name)


def contains(
    expression: Any,
    prop: str | None = None,
    selector_name: str | None = None,
) -> FullTextSearch:
    """Create a full-text constraint on a property, or on the whole node."""
    return FullTextSearch(_static(expression), prop, selector_name)


def and_(*constraints: Constraint) -> Constraint:
    """Combine constraints with AND (left-deep).

    Raises:
        ValueError: If no constraint is given.
    """
    if not constraints:
        raise ValueError("and_() needs at least one constraint")
    result = constraints[0]
    for constraint in constraints[1:]:
        result = And(result, constraint)
    return result


def or_(*constraints: Constraint) -> Constraint:
    """Combine constraints with OR (left-deep).

    Raises:
        ValueError: If no constraint is given.
    """
    if not constraints:
        raise ValueError("or_() needs at least one constraint")
    result = constraints[0]
    for constraint in constraints[1:]:
        result = Or(result, constraint)
    return result


def not_(constraint: Constraint) -> Not:
    return Not(constraint)


def asc(prop: str, selector_name: str | None = None) -> Ordering:
    return Ordering(PropertyValue(prop, selector_name), Order.ASC)


def desc(prop: str, selector_name: str | None = None) -> Ordering:
    return Ordering(PropertyValue(prop, selector_name), Order.DESC)


def column(
    prop: str | None,
    column_name: str | None = None,
    selector_name: str | None = None,
) -> Column:
    return Column(prop, column_name, selector_name)


__all__ = [
    # Enumerations
    "Operator",
    "Order",
    "JoinType",
    # Sources
    "Selector",
    "Join",
    "Source",
    "JoinCondition",
    "EquiJoinCondition",
    "SameNodeJoinCondition",
    "ChildNodeJoinCondition",
    "DescendantNodeJoinCondition",
    "source_selectors",
    # Operands
    "DynamicOperand",
    "StaticOperand",
    "PropertyValue",
    "Length",
    "NodeName",
    "NodeLocalName",
    "FullTextSearchScore",
    "LowerCase",
    "UpperCase",
    "Literal",
    "BindVariableValue",
    # Constraints
    "Constraint",
    "Comparison",
    "PropertyExistence",
    "FullTextSearch",
    "And",
    "Or",
    "Not",
    "SameNode",
    "ChildNode",
    "DescendantNode",
    # Queries
    "Ordering",
    "Column",
    "QueryObjectModel",
    "Query",
    "JCR_SQL2",
    "JCR_JQOM",
    # Builders
    "selector",
    "bind",
    "eq",
    "ne",
    "lt",
    "le",
    "gt",
    "ge",
    "like",
    "exists",
    "contains",
    "and_",
    "or_",
    "not_",
    "asc",
    "desc",
    "column",
]
