"""BabelFish - Query validation.

Checks a ``QueryObjectModel`` against repository capabilities before any
request is made:
- joins against ``caps.joins``
- constraint operators against ``caps.filter.ops``
- orderings, columns and pagination against their capabilities
- bind variables are all bound
- limit and offset are non-negative integers; limit is clamped to
  ``caps.pagination.max_limit`` when one is declared
"""

from typing import TYPE_CHECKING

from prismic_cr.core.babel_fish.model import (
    And,
    BindVariableValue,
    ChildNode,
    Comparison,
    Constraint,
    DescendantNode,
    FullTextSearch,
    Join,
    Not,
    Operator,
    Or,
    PropertyExistence,
    QueryObjectModel,
    SameNode,
)
from prismic_cr.core.exceptions import InvalidQuery, UnsupportedQuery

if TYPE_CHECKING:
    from prismic_cr.core.xfiles.capabilities import Capabilities

# =============================================================================
# OPERATOR NAMES
# =============================================================================

#: Capability operator name of each comparison operator.
COMPARISON_OPS: dict[Operator, str] = {
    Operator.EQ: "eq",
    Operator.NE: "ne",
    Operator.LT: "lt",
    Operator.LE: "lte",
    Operator.GT: "gt",
    Operator.GE: "gte",
    Operator.LIKE: "like",
}


def constraint_op(constraint: Constraint) -> str:
    """Return the capability operator name of a constraint node."""
    match constraint:
        case Comparison(operator=operator):
            return COMPARISON_OPS[operator]
        case PropertyExistence():
            return "exists"
        case FullTextSearch():
            return "fulltext"
        case And():
            return "and"
        case Or():
            return "or"
        case Not():
            return "not"
        case SameNode():
            return "same_node"
        case ChildNode():
            return "child_node"
        case DescendantNode():
            return "descendant_node"
    raise InvalidQuery(
        f"Unknown constraint type {type(constraint).__name__}",
        field="constraint",
        value=constraint,
    )


# =============================================================================
# CONSTRAINT VALIDATION
# =============================================================================


def _validate_constraint(
    constraint: Constraint,
    caps: "Capabilities",
    qom: QueryObjectModel,
    path: str = "constraint",
) -> None:
    op = constraint_op(constraint)
    if not caps.supports_operator(op):
        raise UnsupportedQuery(
            feature=f"filter operator '{op}'",
            details=f"Supported operators: {', '.join(caps.filter.ops)}",
        )

    match constraint:
        case Comparison(operand2=BindVariableValue(name=name)):
            if name not in qom.bind_values:
                raise InvalidQuery(f"Variable '{name}' is not bound", field=path, value=name)
        case FullTextSearch(full_text_search_expression=BindVariableValue(name=name)):
            if name not in qom.bind_values:
                raise InvalidQuery(f"Variable '{name}' is not bound", field=path, value=name)
        case And(constraint1=left, constraint2=right) | Or(constraint1=left, constraint2=right):
            _validate_constraint(left, caps, qom, f"{path}.{op}.left")
            _validate_constraint(right, caps, qom, f"{path}.{op}.right")
        case Not(constraint=inner):
            _validate_constraint(inner, caps, qom, f"{path}.not")


# =============================================================================
# MAIN VALIDATION FUNCTION
# =============================================================================


def validate_query(qom: QueryObjectModel, caps: "Capabilities") -> QueryObjectModel:
    """Validate a query model against repository capabilities.

    Args:
        qom: Query to validate.
        caps: Repository capabilities to validate against.

    Returns:
        The query, possibly with its limit clamped to ``caps.pagination.max_limit``.

    Raises:
        UnsupportedQuery: If the query uses a feature the repository lacks.
        InvalidQuery: If the query is malformed (unbound variables, bad paging).
    """
    if isinstance(qom.source, Join) and not caps.joins.supported:
        raise UnsupportedQuery(feature="join", details="Repository does not support joins")

    # ---------------------------------------------------------------------------
    # Constraint
    # ---------------------------------------------------------------------------
    if qom.constraint is not None:
        if not caps.filter.supported:
            raise UnsupportedQuery(
                feature="filtering",
                details="Repository does not support constraints",
            )
        _validate_constraint(qom.constraint, caps, qom)

    # ---------------------------------------------------------------------------
    # Orderings and columns
    # ---------------------------------------------------------------------------
    if qom.orderings and not caps.order_by.supported:
        raise UnsupportedQuery(feature="ordering", details="Repository does not support ordering")

    if qom.columns and not caps.projection.supported:
        raise UnsupportedQuery(feature="projection", details="Repository does not support columns")

    # ---------------------------------------------------------------------------
    # Pagination
    # ---------------------------------------------------------------------------
    if (qom.limit is not None or qom.offset != 0) and not caps.pagination.supported:
        raise UnsupportedQuery(feature="pagination", details="Repository does not support pagination")

    result_limit = qom.limit
    if qom.limit is not None:
        if not isinstance(qom.limit, int) or isinstance(qom.limit, bool):
            raise InvalidQuery(
                f"Limit must be an integer, got {type(qom.limit).__name__}",
                field="limit",
                value=qom.limit,
            )
        if qom.limit < 0:
            raise InvalidQuery("Limit must be non-negative", field="limit", value=qom.limit)
        if caps.pagination.max_limit is not None:
            result_limit = min(qom.limit, caps.pagination.max_limit)

    if not isinstance(qom.offset, int) or isinstance(qom.offset, bool):
        raise InvalidQuery(
            f"Offset must be an integer, got {type(qom.offset).__name__}",
            field="offset",
            value=qom.offset,
        )
    if qom.offset < 0:
        raise InvalidQuery("Offset must be non-negative", field="offset", value=qom.offset)

    if result_limit != qom.limit:
        return qom.with_paging(result_limit, qom.offset)
    return qom


__all__ = ["validate_query", "constraint_op", "COMPARISON_OPS"]
