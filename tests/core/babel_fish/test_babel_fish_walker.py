"""Tests for BabelFish, the query model to predicate translator."""

from datetime import date

import pytest

from prismic_cr.core.babel_fish import (
    BabelFish,
    EquiJoinCondition,
    Join,
    JoinType,
    Length,
    PropertyValue,
    QOMWalker,
    QueryObjectModel,
    Selector,
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
    parse_sql2,
    selector,
)
from prismic_cr.core.babel_fish.model import ChildNode, Comparison, DescendantNode, Literal, Operator, SameNode
from prismic_cr.core.exceptions import InvalidQuery, UnsupportedQuery

PAGE_SCOPE = '[:d = at(document.type, "page")]'


def translate(walker: BabelFish, constraint=None, **kwargs):
    qom = QueryObjectModel(selector("prismic:page"), constraint=constraint, **kwargs)
    return walker.walk_qom_query(qom)[2]


class TestSelectors:
    """Test how selectors scope the native query."""

    def test_document_type_selector(self, babel_fish: BabelFish):
        selectors, aliases, native = babel_fish.walk_qom_query(QueryObjectModel(selector("prismic:page")))

        assert selectors == [Selector("prismic:page")]
        assert aliases == {"prismic:page": "prismic:page"}
        assert native.statement == f"[{PAGE_SCOPE}]"
        assert native.predicates == (PAGE_SCOPE,)
        assert native.orderings is None

    def test_selector_alias(self, babel_fish: BabelFish):
        qom = QueryObjectModel(selector("prismic:article", "a"), constraint=eq("body", "x", "a"))
        selectors, aliases, native = babel_fish.walk_qom_query(qom)

        assert selectors[0].name == "a"
        assert aliases == {"a": "prismic:article"}
        assert native.statement == '[[:d = at(document.type, "article")][:d = at(my.article.body, "x")]]'

    @pytest.mark.parametrize("node_type", ["nt:base", "nt:unstructured", "mix:referenceable"])
    def test_generic_selector_adds_no_scope(self, babel_fish: BabelFish, node_type: str):
        _, _, native = babel_fish.walk_qom_query(QueryObjectModel(selector(node_type)))
        assert native.statement == "[]"
        assert native.predicates == ()

    def test_generic_selector_with_document_field(self, babel_fish: BabelFish):
        qom = QueryObjectModel(selector("nt:base"), constraint=eq("jcr:uuid", "a1"))
        _, _, native = babel_fish.walk_qom_query(qom)
        assert native.statement == '[[:d = at(document.id, "a1")]]'

    def test_generic_selector_rejects_custom_property(self, babel_fish: BabelFish):
        qom = QueryObjectModel(selector("nt:base"), constraint=eq("title", "x"))
        with pytest.raises(UnsupportedQuery, match="untyped property 'title'"):
            babel_fish.walk_qom_query(qom)

    def test_unknown_node_type(self, babel_fish: BabelFish):
        with pytest.raises(InvalidQuery, match="Unknown node type 'prismic:bogus'"):
            babel_fish.walk_qom_query(QueryObjectModel(selector("prismic:bogus")))

    def test_standard_type_without_documents(self, babel_fish: BabelFish):
        with pytest.raises(UnsupportedQuery) as exc_info:
            babel_fish.walk_qom_query(QueryObjectModel(selector("nt:folder")))
        assert exc_info.value.feature == "selector:nt:folder"

    def test_any_type_accepted_without_known_types(self):
        walker = BabelFish()
        _, _, native = walker.walk_qom_query(QueryObjectModel(selector("prismic:anything")))
        assert native.statement == '[[:d = at(document.type, "anything")]]'

    def test_join_rejected(self, babel_fish: BabelFish):
        source = Join(
            Selector("prismic:page", "p"),
            Selector("prismic:article", "a"),
            JoinType.INNER,
            EquiJoinCondition("p", "author", "a", "jcr:uuid"),
        )
        with pytest.raises(UnsupportedQuery) as exc_info:
            babel_fish.walk_qom_query(QueryObjectModel(source))
        assert exc_info.value.feature == "join"

    def test_alias_name(self):
        assert QOMWalker is BabelFish


class TestFieldMapping:
    """Test property to predicate field mapping."""

    def test_special_properties(self, babel_fish: BabelFish):
        native = translate(
            babel_fish,
            and_(eq("jcr:uuid", "a1"), eq("tags", "featured"), eq("jcr:primaryType", "prismic:page")),
        )
        assert native.predicates == (
            PAGE_SCOPE,
            '[:d = at(document.id, "a1")]',
            '[:d = at(document.tags, "featured")]',
            '[:d = at(document.type, "page")]',
        )

    def test_custom_property(self, babel_fish: BabelFish):
        native = translate(babel_fish, eq("title", "Welcome"))
        assert native.predicates[1] == '[:d = at(my.page.title, "Welcome")]'

    def test_unknown_selector_name(self, babel_fish: BabelFish):
        with pytest.raises(InvalidQuery, match="Unknown selector 'x'"):
            translate(babel_fish, eq("title", "Welcome", "x"))

    def test_non_property_operand(self, babel_fish: BabelFish):
        constraint = Comparison(Length(PropertyValue("title")), Operator.GT, Literal(3))
        with pytest.raises(UnsupportedQuery) as exc_info:
            translate(babel_fish, constraint)
        assert exc_info.value.feature == "operand:Length"


class TestComparisons:
    """Test comparison operators."""

    def test_equality_and_inequality(self, babel_fish: BabelFish):
        native = translate(babel_fish, and_(eq("rank", 3), ne("category", "old")))
        assert native.predicates[1:] == (
            "[:d = at(my.page.rank, 3)]",
            '[:d = not(my.page.category, "old")]',
        )

    def test_number_ranges(self, babel_fish: BabelFish):
        native = translate(babel_fish, and_(lt("rank", 10), gt("rank", 2.5)))
        assert native.predicates[1:] == (
            "[:d = number.lt(my.page.rank, 10)]",
            "[:d = number.gt(my.page.rank, 2.5)]",
        )

    def test_date_ranges(self, babel_fish: BabelFish):
        native = translate(babel_fish, and_(lt("published", date(2024, 1, 1)), gt("published", "2023-06-01")))
        assert native.predicates[1:] == (
            '[:d = date.before(my.page.published, "2024-01-01")]',
            '[:d = date.after(my.page.published, "2023-06-01")]',
        )

    def test_inclusive_ranges(self, babel_fish: BabelFish):
        native = translate(babel_fish, and_(le("rank", 5), ge("rank", 1)))
        assert native.predicates[1:] == (
            "(or [:d = number.lt(my.page.rank, 5)] [:d = at(my.page.rank, 5)])",
            "(or [:d = number.gt(my.page.rank, 1)] [:d = at(my.page.rank, 1)])",
        )

    def test_range_on_text_rejected(self, babel_fish: BabelFish):
        with pytest.raises(UnsupportedQuery, match="range comparison on str"):
            translate(babel_fish, gt("title", "abc"))

    def test_like_without_wildcard(self, babel_fish: BabelFish):
        native = translate(babel_fish, like("title", "Welcome"))
        assert native.predicates[1] == '[:d = at(my.page.title, "Welcome")]'

    def test_like_with_words(self, babel_fish: BabelFish):
        native = translate(babel_fish, like("title", "%hello%world_"))
        assert native.predicates[1] == '[:d = fulltext(my.page.title, "hello world")]'

    def test_like_only_wildcards(self, babel_fish: BabelFish):
        native = translate(babel_fish, like("title", "%"))
        assert native.predicates[1] == "[:d = has(my.page.title)]"

    def test_like_needs_string(self, babel_fish: BabelFish):
        with pytest.raises(InvalidQuery, match="LIKE pattern must be a string"):
            translate(babel_fish, like("title", 3))

    def test_bind_variable(self, babel_fish: BabelFish):
        native = translate(babel_fish, eq("category", bind("cat")), bind_values={"cat": "news"})
        assert native.predicates[1] == '[:d = at(my.page.category, "news")]'

    def test_unbound_variable(self, babel_fish: BabelFish):
        with pytest.raises(InvalidQuery, match="'cat' is not bound"):
            translate(babel_fish, eq("category", bind("cat")))


class TestBooleanStructure:
    """Test and/or/not and full-text constraints."""

    def test_exists(self, babel_fish: BabelFish):
        native = translate(babel_fish, exists("title"))
        assert native.predicates[1] == "[:d = has(my.page.title)]"

    def test_not_exists(self, babel_fish: BabelFish):
        native = translate(babel_fish, not_(exists("title")))
        assert native.predicates[1] == "[:d = missing(my.page.title)]"

    def test_not_equal_via_not(self, babel_fish: BabelFish):
        native = translate(babel_fish, not_(eq("category", "old")))
        assert native.predicates[1] == '[:d = not(my.page.category, "old")]'

    def test_not_group(self, babel_fish: BabelFish):
        native = translate(babel_fish, not_(gt("rank", 3)))
        assert native.predicates[1] == "(not [:d = number.gt(my.page.rank, 3)])"

    def test_or_of_equalities_on_one_field(self, babel_fish: BabelFish):
        native = translate(babel_fish, or_(eq("jcr:uuid", "a1"), eq("jcr:uuid", "a2"), eq("jcr:uuid", "a3")))
        assert native.predicates[1] == '[:d = any(document.id, ["a1", "a2", "a3"])]'

    def test_or_group(self, babel_fish: BabelFish):
        native = translate(babel_fish, or_(eq("category", "news"), exists("draft")))
        assert native.predicates[1] == '(or [:d = at(my.page.category, "news")] [:d = has(my.page.draft)])'

    def test_nested_and_inside_or(self, babel_fish: BabelFish):
        native = translate(babel_fish, or_(and_(eq("a", 1), eq("b", 2)), eq("c", 3)))
        assert native.predicates[1] == (
            "(or (and [:d = at(my.page.a, 1)] [:d = at(my.page.b, 2)]) [:d = at(my.page.c, 3)])"
        )

    def test_full_text_on_document(self, babel_fish: BabelFish):
        native = translate(babel_fish, contains("hello"))
        assert native.predicates[1] == '[:d = fulltext(document, "hello")]'

    def test_full_text_on_property(self, babel_fish: BabelFish):
        native = translate(babel_fish, contains("hello", "title"))
        assert native.predicates[1] == '[:d = fulltext(my.page.title, "hello")]'

    @pytest.mark.parametrize(
        "constraint",
        [SameNode("/about"), ChildNode("/"), DescendantNode("/")],
        ids=["same_node", "child_node", "descendant_node"],
    )
    def test_path_constraints_rejected(self, babel_fish: BabelFish, constraint):
        with pytest.raises(UnsupportedQuery) as exc_info:
            translate(babel_fish, constraint)
        assert exc_info.value.feature == f"constraint:{type(constraint).__name__}"


class TestOrderingsColumnsPaging:
    """Test orderings, columns and paging pass-through."""

    def test_orderings(self, babel_fish: BabelFish):
        native = translate(babel_fish, orderings=(desc("published"), asc("jcr:uuid")))
        assert native.orderings == "[my.page.published desc,document.id]"

    def test_columns_and_paging(self, babel_fish: BabelFish):
        columns = (column("title", "heading"),)
        native = translate(babel_fish, columns=columns, limit=5, offset=10)
        assert native.columns == columns
        assert native.limit == 5
        assert native.offset == 10

    def test_column_with_unknown_selector(self, babel_fish: BabelFish):
        with pytest.raises(InvalidQuery, match="unknown selector 'x'"):
            translate(babel_fish, columns=(column("title", None, "x"),))


class TestDeterminism:
    """The same model always gives the same native query."""

    def test_repeated_translation_is_identical(self, babel_fish: BabelFish):
        qom = parse_sql2(
            "SELECT * FROM [prismic:page] AS p "
            "WHERE p.[category] = 'news' AND (p.[rank] > 3 OR p.[draft] IS NULL) "
            "ORDER BY p.[published] DESC"
        )
        first = babel_fish.walk_qom_query(qom)
        second = babel_fish.walk_qom_query(qom)
        assert first == second
        assert str(first[2]) == (
            '[[:d = at(document.type, "page")][:d = at(my.page.category, "news")]'
            "(or [:d = number.gt(my.page.rank, 3)] [:d = missing(my.page.draft)])]"
        )
