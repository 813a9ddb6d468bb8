"""BabelFish - JCR-SQL2 parser.

Parses the JCR-SQL2 subset the translator understands into a
``QueryObjectModel``::

    SELECT * FROM [prismic:article] AS a
    WHERE a.[category] = 'news' AND a.[rank] > 3
    ORDER BY a.[published] DESC

Supported: column lists with ``AS``, selectors and joins (``INNER``,
``LEFT OUTER``, ``RIGHT OUTER`` with equi-join, ``ISSAMENODE``,
``ISCHILDNODE`` and ``ISDESCENDANTNODE`` conditions), ``AND``/``OR``/``NOT``
and parentheses, comparisons, ``LIKE``, ``IS [NOT] NULL``, ``CONTAINS``,
path constraints, ``LOWER``/``UPPER``/``LENGTH``/``NAME``/``LOCALNAME``/
``SCORE`` operands, string/number/boolean literals, ``CAST(... AS <type>)``,
``$variables`` and ``ORDER BY``. Keywords are case-insensitive.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from prismic_cr.core.babel_fish.model import (
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
    Order,
    Ordering,
    PropertyExistence,
    PropertyValue,
    QueryObjectModel,
    SameNode,
    SameNodeJoinCondition,
    Selector,
    Source,
    StaticOperand,
    UpperCase,
    and_,
    or_,
)
from prismic_cr.core.exceptions import InvalidQuery

logger = logging.getLogger(__name__)

# =============================================================================
# TOKENIZER
# =============================================================================

_TOKEN = re.compile(
    r"""
    (?P<string>'(?:[^']|'')*'|"(?:[^"]|"")*")
    |(?P<bracket>\[[^\]]*\])
    |(?P<number>-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
    |(?P<bind>\$[A-Za-z_]\w*)
    |(?P<op><>|<=|>=|[=<>(),.*])
    |(?P<name>[A-Za-z_][\w:\-]*)
    """,
    re.VERBOSE,
)

_COMPARISON_OPS = {
    "=": Operator.EQ,
    "<>": Operator.NE,
    "<": Operator.LT,
    "<=": Operator.LE,
    ">": Operator.GT,
    ">=": Operator.GE,
}

_CAST_TYPES = frozenset(
    {
        "STRING",
        "BINARY",
        "LONG",
        "DOUBLE",
        "DECIMAL",
        "DATE",
        "BOOLEAN",
        "NAME",
        "PATH",
        "REFERENCE",
        "WEAKREFERENCE",
        "URI",
    }
)


@dataclass(frozen=True, slots=True)
class Token:
    kind: str
    value: str
    pos: int

    def is_keyword(self, *words: str) -> bool:
        return self.kind == "name" and self.value.upper() in words


def tokenize(statement: str) -> list[Token]:
    """Split a statement into tokens.

    Raises:
        InvalidQuery: On a character that starts no token.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(statement)
    while pos < length:
        if statement[pos].isspace():
            pos += 1
            continue
        m = _TOKEN.match(statement, pos)
        if m is None or m.lastgroup is None:
            raise InvalidQuery(
                f"Unexpected character {statement[pos]!r} at position {pos}",
                field="statement",
                value=statement,
            )
        tokens.append(Token(m.lastgroup, m.group(), pos))
        pos = m.end()
    return tokens


class _Cursor:
    """Token stream with one token of lookahead."""

    def __init__(self, statement: str):
        self.statement = statement
        self.tokens = tokenize(statement)
        self.index = 0

    def peek(self, offset: int = 0) -> Token | None:
        i = self.index + offset
        return self.tokens[i] if i < len(self.tokens) else None

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise self.error("Unexpected end of statement")
        self.index += 1
        return token

    def at_end(self) -> bool:
        return self.index >= len(self.tokens)

    def error(self, message: str, token: Token | None = None) -> InvalidQuery:
        token = token or self.peek()
        pos = token.pos if token is not None else len(self.statement)
        return InvalidQuery(f"{message} at position {pos}", field="statement", value=self.statement)

    def accept_keyword(self, *words: str) -> bool:
        token = self.peek()
        if token is not None and token.is_keyword(*words):
            self.index += 1
            return True
        return False

    def expect_keyword(self, word: str) -> None:
        token = self.peek()
        if token is None or not token.is_keyword(word):
            raise self.error(f"Expected {word}")
        self.index += 1

    def accept_op(self, op: str) -> bool:
        token = self.peek()
        if token is not None and token.kind == "op" and token.value == op:
            self.index += 1
            return True
        return False

    def expect_op(self, op: str) -> None:
        if not self.accept_op(op):
            raise self.error(f"Expected '{op}'")


# =============================================================================
# PARSER
# =============================================================================

#: Keywords that end a selector or column list and cannot be bare aliases.
_RESERVED = frozenset(
    {
        "SELECT",
        "FROM",
        "WHERE",
        "ORDER",
        "BY",
        "AS",
        "ON",
        "JOIN",
        "INNER",
        "LEFT",
        "RIGHT",
        "OUTER",
        "AND",
        "OR",
        "NOT",
        "ASC",
        "DESC",
    }
)


class Sql2Parser:
    """Recursive-descent parser for the supported JCR-SQL2 subset."""

    def parse(self, statement: str, bind_values: dict[str, Any] | None = None) -> QueryObjectModel:
        """Parse a statement into a query model.

        Raises:
            InvalidQuery: On a syntax error; the message names the position.
        """
        t = _Cursor(statement)
        t.expect_keyword("SELECT")
        columns = self._columns(t)
        t.expect_keyword("FROM")
        source = self._source(t)

        constraint = None
        if t.accept_keyword("WHERE"):
            constraint = self._or(t)

        orderings: tuple[Ordering, ...] = ()
        if t.accept_keyword("ORDER"):
            t.expect_keyword("BY")
            orderings = self._orderings(t)

        if not t.at_end():
            raise t.error("Unexpected token")

        logger.debug("Parsed JCR-SQL2 statement: %s", statement)
        return QueryObjectModel(
            source=source,
            constraint=constraint,
            orderings=orderings,
            columns=columns,
            bind_values=dict(bind_values or {}),
        )

    # -------------------------------------------------------------------------
    # Names
    # -------------------------------------------------------------------------

    def _name(self, t: _Cursor) -> str:
        token = t.next()
        if token.kind == "bracket":
            return token.value[1:-1]
        if token.kind == "name" and token.value.upper() not in _RESERVED:
            return token.value
        raise t.error("Expected a name", token)

    def _is_name(self, token: Token | None) -> bool:
        if token is None:
            return False
        return token.kind == "bracket" or (token.kind == "name" and token.value.upper() not in _RESERVED)

    def _alias(self, t: _Cursor) -> str | None:
        if t.accept_keyword("AS"):
            return self._name(t)
        return None

    # -------------------------------------------------------------------------
    # Columns
    # -------------------------------------------------------------------------

    def _columns(self, t: _Cursor) -> tuple[Column, ...]:
        if t.accept_op("*"):
            return ()
        columns = [self._column(t)]
        while t.accept_op(","):
            columns.append(self._column(t))
        return tuple(columns)

    def _column(self, t: _Cursor) -> Column:
        first = self._name(t)
        if t.accept_op("."):
            if t.accept_op("*"):
                return Column(None, None, first)
            prop = self._name(t)
            return Column(prop, self._alias(t), first)
        return Column(first, self._alias(t), None)

    # -------------------------------------------------------------------------
    # Sources
    # -------------------------------------------------------------------------

    def _selector(self, t: _Cursor) -> Selector:
        node_type = self._name(t)
        return Selector(node_type, self._alias(t))

    def _join_type(self, t: _Cursor) -> JoinType | None:
        if t.accept_keyword("JOIN"):
            return JoinType.INNER
        if t.accept_keyword("INNER"):
            t.expect_keyword("JOIN")
            return JoinType.INNER
        if t.accept_keyword("LEFT"):
            t.expect_keyword("OUTER")
            t.expect_keyword("JOIN")
            return JoinType.LEFT_OUTER
        if t.accept_keyword("RIGHT"):
            t.expect_keyword("OUTER")
            t.expect_keyword("JOIN")
            return JoinType.RIGHT_OUTER
        return None

    def _source(self, t: _Cursor) -> Source:
        source: Source = self._selector(t)
        while (join_type := self._join_type(t)) is not None:
            right = self._selector(t)
            t.expect_keyword("ON")
            source = Join(source, right, join_type, self._join_condition(t))
        return source

    def _join_condition(self, t: _Cursor) -> JoinCondition:
        if t.accept_keyword("ISSAMENODE"):
            t.expect_op("(")
            first = self._name(t)
            t.expect_op(",")
            second = self._name(t)
            path = None
            if t.accept_op(","):
                path = self._path(t)
            t.expect_op(")")
            return SameNodeJoinCondition(first, second, path)
        if t.accept_keyword("ISCHILDNODE"):
            t.expect_op("(")
            child = self._name(t)
            t.expect_op(",")
            parent = self._name(t)
            t.expect_op(")")
            return ChildNodeJoinCondition(child, parent)
        if t.accept_keyword("ISDESCENDANTNODE"):
            t.expect_op("(")
            descendant = self._name(t)
            t.expect_op(",")
            ancestor = self._name(t)
            t.expect_op(")")
            return DescendantNodeJoinCondition(descendant, ancestor)

        selector1 = self._name(t)
        t.expect_op(".")
        property1 = self._name(t)
        t.expect_op("=")
        selector2 = self._name(t)
        t.expect_op(".")
        property2 = self._name(t)
        return EquiJoinCondition(selector1, property1, selector2, property2)

    # -------------------------------------------------------------------------
    # Constraints
    # -------------------------------------------------------------------------

    def _or(self, t: _Cursor) -> Constraint:
        constraints = [self._and(t)]
        while t.accept_keyword("OR"):
            constraints.append(self._and(t))
        return or_(*constraints)

    def _and(self, t: _Cursor) -> Constraint:
        constraints = [self._not(t)]
        while t.accept_keyword("AND"):
            constraints.append(self._not(t))
        return and_(*constraints)

    def _not(self, t: _Cursor) -> Constraint:
        if t.accept_keyword("NOT"):
            return Not(self._not(t))
        return self._primary(t)

    def _primary(self, t: _Cursor) -> Constraint:
        if t.accept_op("("):
            constraint = self._or(t)
            t.expect_op(")")
            return constraint
        if t.accept_keyword("CONTAINS"):
            return self._contains(t)
        if t.accept_keyword("ISSAMENODE"):
            selector_name, path = self._path_constraint_args(t)
            return SameNode(path, selector_name)
        if t.accept_keyword("ISCHILDNODE"):
            selector_name, path = self._path_constraint_args(t)
            return ChildNode(path, selector_name)
        if t.accept_keyword("ISDESCENDANTNODE"):
            selector_name, path = self._path_constraint_args(t)
            return DescendantNode(path, selector_name)

        start = t.peek()
        operand = self._dynamic_operand(t)

        if t.accept_keyword("IS"):
            negated = t.accept_keyword("NOT")
            t.expect_keyword("NULL")
            if not isinstance(operand, PropertyValue):
                raise t.error("IS NULL needs a property", start)
            existence = PropertyExistence(operand.property_name, operand.selector_name)
            return existence if negated else Not(existence)

        if t.accept_keyword("LIKE"):
            return Comparison(operand, Operator.LIKE, self._static_operand(t))

        token = t.peek()
        if token is not None and token.kind == "op" and token.value in _COMPARISON_OPS:
            t.next()
            return Comparison(operand, _COMPARISON_OPS[token.value], self._static_operand(t))
        raise t.error("Expected a comparison operator")

    def _contains(self, t: _Cursor) -> FullTextSearch:
        t.expect_op("(")
        selector_name = None
        prop = None
        if t.accept_op("*"):
            pass
        else:
            first = self._name(t)
            if t.accept_op("."):
                selector_name = first
                if not t.accept_op("*"):
                    prop = self._name(t)
            else:
                prop = first
        t.expect_op(",")
        expression = self._static_operand(t)
        t.expect_op(")")
        return FullTextSearch(expression, prop, selector_name)

    def _path_constraint_args(self, t: _Cursor) -> tuple[str | None, str]:
        t.expect_op("(")
        selector_name = None
        if self._is_name(t.peek()) and t.peek(1) is not None and t.peek(1).value == ",":
            selector_name = self._name(t)
            t.expect_op(",")
        path = self._path(t)
        t.expect_op(")")
        return selector_name, path

    def _path(self, t: _Cursor) -> str:
        token = t.next()
        if token.kind == "bracket":
            return token.value[1:-1]
        if token.kind == "string":
            return _unquote(token.value)
        raise t.error("Expected a path", token)

    # -------------------------------------------------------------------------
    # Operands
    # -------------------------------------------------------------------------

    def _optional_selector_arg(self, t: _Cursor) -> str | None:
        t.expect_op("(")
        selector_name = None if t.accept_op(")") else self._name(t)
        if selector_name is not None:
            t.expect_op(")")
        return selector_name

    def _dynamic_operand(self, t: _Cursor) -> DynamicOperand:
        token = t.peek()
        if token is not None and token.kind == "name" and (nxt := t.peek(1)) is not None and nxt.value == "(":
            keyword = token.value.upper()
            if keyword in ("LOWER", "UPPER"):
                t.next()
                t.expect_op("(")
                inner = self._dynamic_operand(t)
                t.expect_op(")")
                return LowerCase(inner) if keyword == "LOWER" else UpperCase(inner)
            if keyword == "LENGTH":
                t.next()
                t.expect_op("(")
                prop = self._property_value(t)
                t.expect_op(")")
                return Length(prop)
            if keyword == "NAME":
                t.next()
                return NodeName(self._optional_selector_arg(t))
            if keyword == "LOCALNAME":
                t.next()
                return NodeLocalName(self._optional_selector_arg(t))
            if keyword == "SCORE":
                t.next()
                return FullTextSearchScore(self._optional_selector_arg(t))
        return self._property_value(t)

    def _property_value(self, t: _Cursor) -> PropertyValue:
        first = self._name(t)
        if t.accept_op("."):
            return PropertyValue(self._name(t), first)
        return PropertyValue(first)

    def _static_operand(self, t: _Cursor) -> StaticOperand:
        token = t.peek()
        if token is not None and token.kind == "bind":
            t.next()
            return BindVariableValue(token.value[1:])
        if t.accept_keyword("CAST"):
            t.expect_op("(")
            value = self._literal_value(t)
            t.expect_keyword("AS")
            type_token = t.next()
            type_name = type_token.value.upper()
            if type_token.kind != "name" or type_name not in _CAST_TYPES:
                raise t.error(f"Unknown property type {type_token.value!r}", type_token)
            t.expect_op(")")
            return Literal(self._cast(t, type_token, value, type_name))
        return Literal(self._literal_value(t))

    def _literal_value(self, t: _Cursor) -> Any:
        token = t.next()
        if token.kind == "string":
            return _unquote(token.value)
        if token.kind == "number":
            text = token.value
            if any(c in text for c in ".eE"):
                return float(text)
            return int(text)
        if token.is_keyword("TRUE"):
            return True
        if token.is_keyword("FALSE"):
            return False
        raise t.error("Expected a literal", token)

    def _cast(self, t: _Cursor, token: Token, value: Any, type_name: str) -> Any:
        try:
            match type_name:
                case "LONG":
                    return int(value)
                case "DOUBLE" | "DECIMAL":
                    return float(value)
                case "BOOLEAN":
                    return value if isinstance(value, bool) else str(value).lower() == "true"
                case "DATE":
                    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
                case _:
                    return str(value)
        except ValueError as e:
            raise t.error(f"Cannot cast {value!r} to {type_name}", token) from e

    # -------------------------------------------------------------------------
    # Orderings
    # -------------------------------------------------------------------------

    def _orderings(self, t: _Cursor) -> tuple[Ordering, ...]:
        orderings = [self._ordering(t)]
        while t.accept_op(","):
            orderings.append(self._ordering(t))
        return tuple(orderings)

    def _ordering(self, t: _Cursor) -> Ordering:
        operand = self._dynamic_operand(t)
        if t.accept_keyword("DESC"):
            return Ordering(operand, Order.DESC)
        t.accept_keyword("ASC")
        return Ordering(operand, Order.ASC)


def _unquote(text: str) -> str:
    quote = text[0]
    return text[1:-1].replace(quote * 2, quote)


def parse_sql2(statement: str, bind_values: dict[str, Any] | None = None) -> QueryObjectModel:
    """Parse a JCR-SQL2 statement with a default parser."""
    return Sql2Parser().parse(statement, bind_values)


__all__ = ["Sql2Parser", "Token", "parse_sql2", "tokenize"]
