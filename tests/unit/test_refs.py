"""Unit tests for table and column references."""

import pytest

from sqlcompose import ColumnRef, SQLComposeError, SQLFactory, TableRef, UnknownColumnError, mysql, sql
from sqlcompose.config import ComposeConfig
from sqlcompose.dialects import SnakeCaseNamingStrategy
from tests.unit.models import Contact, Customer, OrderItem, Person


def test_default_alias_is_quoted_table_name() -> None:
    ref = sql.ref(Contact)

    assert ref.alias == '"Contact"'
    assert str(ref.firstName) == '"Contact"."firstName"'
    assert str(ref) == '"Contact"'


def test_explicit_and_empty_alias() -> None:
    assert str(sql.ref(Contact, "c").id) == 'c."id"'
    assert str(sql.ref(Contact, "").id) == '"id"'


def test_column_access_forms() -> None:
    """Test attribute, item and column() access render the same column."""
    c = sql.ref(Contact, "c")
    assert str(c.city) == str(c["city"]) == str(c.column("city")) == 'c."city"'
    assert isinstance(c.city, ColumnRef)


def test_column_alias_resolves_to_column_name() -> None:
    p = sql.ref(Person, "p")
    assert str(p.key) == 'p."id"'
    assert str(p.name) == 'p."firstName"'
    assert p.table == '"Contact"'


def test_unknown_column_raises() -> None:
    """Test properties without a column are rejected."""
    c = sql.ref(Contact, "c")

    with pytest.raises(UnknownColumnError, match="Contact has no column 'missing'"):
        _ = c.missing
    with pytest.raises(UnknownColumnError, match="notes"):
        _ = c["notes"]


def test_unknown_column_is_attribute_error() -> None:
    c = sql.ref(Contact, "c")
    assert not hasattr(c, "missing")
    assert issubclass(UnknownColumnError, SQLComposeError)
    assert issubclass(UnknownColumnError, AttributeError)


def test_nested_paths_render_literally() -> None:
    """Test structured columns walk into a literal path without lookup."""
    c = sql.ref(Customer, "c")

    assert str(c.address) == 'c."address"'
    assert str(c.address.city) == "c.address.city"
    assert str(c.history[0]) == "c.history[0]"
    assert str(c.address["zip code"]) == 'c.address["zip code"]'


def test_as_returns_new_ref() -> None:
    ref = sql.ref(OrderItem)
    aliased = ref.as_("i")

    assert isinstance(aliased, TableRef)
    assert ref.alias == '"OrderItem"'
    assert str(aliased.orderId) == 'i."orderId"'
    assert sql.ref(aliased) is aliased
    assert sql.ref(aliased, "x").alias == "x"


def test_refs_helper() -> None:
    c, i = sql.refs(Contact, OrderItem)
    assert (c.cls, i.cls) == (Contact, OrderItem)


def test_dialect_quoting() -> None:
    assert str(mysql.ref(Contact, "c").firstName) == "c.`firstName`"
    assert str(mysql.ref(Contact).id) == "`Contact`.`id`"


def test_naming_strategy_applies_to_refs() -> None:
    snake = SQLFactory("postgres", ComposeConfig(strategy=SnakeCaseNamingStrategy()))
    i = snake.ref(OrderItem, "i")

    assert str(i.orderId) == 'i."order_id"'
    assert i.table == '"order_item"'
    assert str(snake.ref(OrderItem).orderId) == '"order_item"."order_id"'
