"""Unit tests for WHERE predicates and shorthand options."""

import pytest

from sqlcompose import (
    InvalidArgumentError,
    MetadataError,
    NotAColumnError,
    ParameterCollisionError,
    UnknownPropertyError,
    WhereQuery,
    sql,
)
from tests.unit.helpers import normalize
from tests.unit.models import CONTACT_COLUMNS, PERSON_COLUMNS, Contact, Note, Order, Person

SEARCH = {"firstName": "John", "age": 27, "city": "Austin"}


def test_callable_predicate_uses_positional_params() -> None:
    """Test values inside predicates become sequential positional params."""
    q = sql.from_(Order).where(lambda o: sql("{} = {} AND {} = {}", o.id, 2, o.freightId, 4))
    text, params = q.build()

    assert text.endswith('WHERE "id" = $_1 AND "freightId" = $_2')
    assert params == {"_1": 2, "_2": 4}


def test_single_predicate_layout() -> None:
    """Test the exact statement layout for a single predicate."""
    expected = f'SELECT {CONTACT_COLUMNS}\n  FROM "Contact"\n WHERE "id" = $_1'

    for q in (
        sql.from_(Contact).where(lambda c: sql("{} = {}", c.id, 1)),
        sql.from_(Contact).where('"id" = {}', 1),
        sql.from_(Contact).where(sql=sql('"id" = {}', 1)),
    ):
        text, params = q.build()
        assert text == expected
        assert params == {"_1": 1}


@pytest.mark.parametrize(
    ("option", "operator"),
    [("equals", "="), ("not_equals", "<>"), ("like", "LIKE"), ("not_like", "NOT LIKE"), ("!=", "!=")],
)
def test_comparison_shorthands(option: str, operator: str) -> None:
    """Test comparison shorthands bind each property as a named parameter."""
    text, params = sql.from_(Contact).where({option: SEARCH}).build()

    assert normalize(text).endswith(
        f'WHERE "firstName" {operator} $firstName AND "age" {operator} $age AND "city" {operator} $city'
    )
    assert params == SEARCH


@pytest.mark.parametrize(
    ("option", "expected"),
    [
        ("starts_with", {"firstName": "J%", "city": "A%"}),
        ("ends_with", {"firstName": "%n", "city": "%n"}),
        ("contains", {"firstName": "%J%", "city": "%A%"}),
    ],
)
def test_wildcard_shorthands(option: str, expected: dict) -> None:
    text, params = sql.from_(Contact).where({option: {"firstName": "J", "city": "A"}}).build()
    assert normalize(text).endswith('WHERE "firstName" LIKE $firstName AND "city" LIKE $city')
    assert params == expected


def test_keyword_shorthand_matches_mapping() -> None:
    assert sql.from_(Contact).where(equals=SEARCH).build() == sql.from_(Contact).where({"equals": SEARCH}).build()


@pytest.mark.parametrize(("option", "operator"), [("in", "IN"), ("in_", "IN"), ("not_in", "NOT IN")])
def test_membership_shorthands(option: str, operator: str) -> None:
    text, params = sql.from_(Contact).where({option: {"id": [10, 20, 30]}}).build()
    assert normalize(text).endswith(f'WHERE "id" {operator} ($_1,$_2,$_3)')
    assert params == {"_1": 10, "_2": 20, "_3": 30}


def test_membership_requires_values() -> None:
    with pytest.raises(InvalidArgumentError, match="at least one value"):
        sql.from_(Contact).where(in_={"id": []})


def test_null_shorthands() -> None:
    props = list(SEARCH)
    assert normalize(sql.from_(Contact).where(is_null=props)).endswith(
        'WHERE "firstName" IS NULL AND "age" IS NULL AND "city" IS NULL'
    )
    assert normalize(sql.from_(Contact).where(is_null=props[:1], not_null=props[1:])).endswith(
        'WHERE "firstName" IS NULL AND "age" IS NOT NULL AND "city" IS NOT NULL'
    )
    assert normalize(sql.from_(Contact).where(not_null="email")).endswith('WHERE "email" IS NOT NULL')


def test_combined_shorthands() -> None:
    q = sql.from_(Contact).where(equals={"firstName": "John"}, not_equals={"age": 27, "city": "Austin"})
    assert normalize(q).endswith('WHERE "firstName" = $firstName AND "age" <> $age AND "city" <> $city')


def test_or_shorthands() -> None:
    q = sql.from_(Contact).or_(equals=SEARCH)
    assert normalize(q).endswith('WHERE "firstName" = $firstName OR "age" = $age OR "city" = $city')


def test_op_shorthand() -> None:
    text, params = sql.from_(Contact).where(op=(">=", {"age": 21})).build()
    assert normalize(text).endswith('WHERE "age" >= $age')
    assert params == {"age": 21}


def test_op_shorthand_requires_pair() -> None:
    with pytest.raises(InvalidArgumentError, match="op expects"):
        sql.from_(Contact).where(op=">=")


def test_equivalent_predicate_forms() -> None:
    """Test shorthand, op, sql and raw_sql forms render the same statement."""
    expected = (f'SELECT {CONTACT_COLUMNS} FROM "Contact" WHERE "id" = $id AND "city" = $city', {"id": 1, "city": "A"})

    for q in (
        sql.from_(Contact).where(equals={"id": 1, "city": "A"}),
        sql.from_(Contact).where(op=("=", {"id": 1, "city": "A"})),
        sql.from_(Contact).where(sql=sql.fragment('"id" = $id AND "city" = $city', {"id": 1, "city": "A"})),
        sql.from_(Contact).where(
            sql=[sql.fragment('"id" = $id', {"id": 1}), sql.fragment('"city" = $city', {"city": "A"})]
        ),
        sql.from_(Contact).where(raw_sql=['"id" = $id', '"city" = $city'], params={"id": 1, "city": "A"}),
    ):
        text, params = q.build()
        assert (normalize(text), params) == expected


def test_raw_sql_string_with_params() -> None:
    q = sql.from_(Contact).where({"raw_sql": '"age" BETWEEN $lo AND $hi', "params": {"lo": 18, "hi": 30}})
    assert q.params == {"lo": 18, "hi": 30}
    assert normalize(q).endswith('WHERE "age" BETWEEN $lo AND $hi')


def test_params_without_raw_sql_raise() -> None:
    with pytest.raises(InvalidArgumentError, match="params given without raw_sql"):
        sql.from_(Contact).where(params={"a": 1})


def test_column_alias_shorthand() -> None:
    """Test shorthand properties resolve through column aliases."""
    text, params = sql.from_(Person).where(equals={"key": 1, "name": "John"}).build()
    assert normalize(text) == f'SELECT {PERSON_COLUMNS} FROM "Contact" WHERE "id" = $key AND "firstName" = $name'
    assert params == {"key": 1, "name": "John"}


def test_shorthand_qualifies_with_alias() -> None:
    assert normalize(sql.from_(Contact, "c").where(equals={"id": 1})).endswith('WHERE c."id" = $id')


def test_shorthand_name_collision_falls_back_to_positional() -> None:
    """Test a property bound twice with different values gets a positional key."""
    q = sql.from_(Contact).where(equals={"age": 20}).or_(equals={"age": 30})
    text, params = q.build()

    assert normalize(text).endswith('WHERE "age" = $age OR "age" = $_1')
    assert params == {"_1": 30, "age": 20}


def test_shorthand_keys_yield_to_caller_fragments() -> None:
    """Test shorthand predicates and caller fragments naming the same key compose in either order."""
    text, params = (
        sql.from_(Contact)
        .where(equals={"city": "Austin"})
        .and_(sql.fragment('"city" <> $city', {"city": "Boston"}))
        .build()
    )
    assert normalize(text).endswith('WHERE "city" = $city AND "city" <> $_1')
    assert params == {"_1": "Boston", "city": "Austin"}

    text, params = (
        sql.from_(Contact)
        .where(sql.fragment('"city" <> $city', {"city": "Boston"}))
        .and_(equals={"city": "Austin"})
        .build()
    )
    assert normalize(text).endswith('WHERE "city" <> $city AND "city" = $_1')
    assert params == {"_1": "Austin", "city": "Boston"}


def test_caller_fragment_does_not_share_shorthand_key() -> None:
    q = sql.from_(Contact).where(equals={"city": "Austin"}).and_(sql.fragment('"city" = $city', {"city": "Austin"}))
    assert normalize(q).endswith('WHERE "city" = $city AND "city" = $_1')
    assert q.params == {"city": "Austin", "_1": "Austin"}


def test_named_fragment_collision_raises() -> None:
    q = sql.from_(Contact).where(sql=sql.fragment('"city" = $city', {"city": "A"}))

    with pytest.raises(ParameterCollisionError, match=r"\$city"):
        q.and_(sql.fragment('"city" <> $city', {"city": "B"}))


def test_unknown_property_raises() -> None:
    with pytest.raises(UnknownPropertyError, match="'missing' does not exist on Contact"):
        sql.from_(Contact).where(equals={"missing": 1})


def test_not_a_column_raises() -> None:
    with pytest.raises(NotAColumnError, match=r"Contact\.notes is not a column"):
        sql.from_(Contact).where(is_null="notes")


def test_unknown_option_raises() -> None:
    with pytest.raises(InvalidArgumentError, match="Unsupported AND option 'between'"):
        sql.from_(Contact).where(between={"age": (1, 2)})


def test_non_mapping_comparison_raises() -> None:
    with pytest.raises(InvalidArgumentError, match="equals expects a mapping"):
        sql.from_(Contact).where(equals=["age"])


def test_template_values_without_condition_raise() -> None:
    with pytest.raises(InvalidArgumentError, match="without a condition"):
        sql.from_(Contact).where(None, 1)


def test_unsupported_condition_raises() -> None:
    with pytest.raises(InvalidArgumentError, match="got int"):
        sql.from_(Contact).where(42)


def test_connectors_and_layout() -> None:
    """Test AND/OR connectors are right aligned under WHERE."""
    q = (
        sql.from_(Contact)
        .where('"age" > {}', 18)
        .and_('"city" = {}', "Austin")
        .or_('"email" IS NULL')
    )
    assert q.build().sql.endswith('\n WHERE "age" > $_1\n   AND "city" = $_2\n    OR "email" IS NULL')
    assert [w.connector for w in q.wheres] == ["AND", "AND", "OR"]


def test_where_without_arguments_clears() -> None:
    """Test calling where() with no arguments removes every predicate."""
    q = sql.from_(Contact).where(equals={"id": 1}).or_('"age" > {}', 5)
    assert q.has_where

    q.where()
    assert not q.has_where
    assert "WHERE" not in q.build().sql


def test_id_equals() -> None:
    assert normalize(sql.from_(Person).id_equals(7)).endswith('WHERE "id" = $key')
    assert sql.from_(Contact).id_equals(7).params == {"id": 7}


def test_id_equals_without_primary_key() -> None:
    with pytest.raises(MetadataError, match="no primary key"):
        sql.from_(Note).id_equals(1)


def test_where_with_subquery_builder() -> None:
    """Test a builder inside a predicate is inlined with its parameters."""
    sub = sql.from_(Order).where(equals={"freightId": 3}).select('"contactId"')
    q = sql.from_(Contact, "c").where(lambda c: sql("{} > {} AND {} IN ({})", c.age, 18, c.id, sub))
    text, params = q.build()

    assert normalize(text).endswith(
        'WHERE c."age" > $_1 AND c."id" IN (SELECT "contactId" FROM "Order" WHERE "freightId" = $freightId)'
    )
    assert params == {"_1": 18, "freightId": 3}


def test_bare_where_query_renders_clauses_only() -> None:
    """Test a WhereQuery builds only its joins and predicates."""
    q = WhereQuery(sql, Contact).where(equals={"id": 1})
    assert q.build().sql == '\n WHERE "id" = $id'
