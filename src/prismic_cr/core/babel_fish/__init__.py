"""Query model, JCR-SQL2 parser and translation to Prismic predicates."""

from prismic_cr.core.babel_fish.model import (
    JCR_JQOM,
    JCR_SQL2,
    And,
    BindVariableValue,
    ChildNode,
    ChildNodeJoinCondition,
    Column,
    Comparison,
    Constraint,
    DescendantNode,
    DescendantNodeJoinCondition,
    DynamicOperand,
    EquiJoinCondition,
    FullTextSearch,
    FullTextSearchScore,
    Join,
    JoinCondition,
    JoinType,
    Length,
    Literal,
    LowerCase,
    NodeLocalName,
    NodeName,
    Not,
    Operator,
    Or,
    Order,
    Ordering,
    PropertyExistence,
    PropertyValue,
    Query,
    QueryObjectModel,
    SameNode,
    SameNodeJoinCondition,
    Selector,
    Source,
    StaticOperand,
    UpperCase,
    and_,
    asc,
    bind,
    column,
    contains,
    desc,
    eq,
    exists,
    ge,
    gt,
    le,
    like,
    lt,
    ne,
    not_,
    or_,
    selector,
)
from prismic_cr.core.babel_fish.native import NativeQuery
from prismic_cr.core.babel_fish.sql2 import Sql2Parser, parse_sql2
from prismic_cr.core.babel_fish.validation import validate_query
from prismic_cr.core.babel_fish.walker import BabelFish, QOMWalker

__all__ = [
    # Translator
    "BabelFish",
    "QOMWalker",
    "NativeQuery",
    "Sql2Parser",
    "parse_sql2",
    "validate_query",
    # Model
    "JCR_SQL2",
    "JCR_JQOM",
    "Operator",
    "Order",
    "JoinType",
    "Selector",
    "Join",
    "Source",
    "JoinCondition",
    "EquiJoinCondition",
    "SameNodeJoinCondition",
    "ChildNodeJoinCondition",
    "DescendantNodeJoinCondition",
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
    "Ordering",
    "Column",
    "QueryObjectModel",
    "Query",
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
