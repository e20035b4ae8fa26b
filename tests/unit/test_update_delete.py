"""Unit tests for UPDATE and DELETE statements."""

import pytest

from sqlcompose import InvalidArgumentError, MissingWhereError, SQLFactory, UnknownPropertyError, mysql, sql
from tests.unit.helpers import normalize
from tests.unit.models import Contact, Order, Person


def test_update_keywords() -> None:
    text, params = sql.update(Contact).set(age=41, city="Austin").id_equals(1).build()

    assert text == 'UPDATE "Contact" SET "age" = $age, "city" = $city\n WHERE "id" = $id'
    assert params == {"age": 41, "city": "Austin", "id": 1}


def test_update_forms() -> None:
    """Test mapping, template and raw assignments can be combined."""
    q = (
        sql.update(Contact)
        .set({"firstName": "John"})
        .set(lambda c: sql("{} = {} + {}", c.age, c.age, 1))
        .set(raw_sql='"email" = lower($email)', params={"email": "JOHN@EXAMPLE.ORG"})
        .where(equals={"id": 7})
    )
    text, params = q.build()

    assert normalize(text) == (
        'UPDATE "Contact" SET "firstName" = $firstName, "age" = "age" + $_1, "email" = lower($email)'
        ' WHERE "id" = $id'
    )
    assert params == {"_1": 1, "email": "JOHN@EXAMPLE.ORG", "firstName": "John", "id": 7}
    assert q.has_set


def test_update_column_aliases() -> None:
    assert normalize(sql.update(Person).set(name="Jo").id_equals(3)) == (
        'UPDATE "Contact" SET "firstName" = $name WHERE "id" = $key'
    )


def test_update_bind_falls_back_to_positional() -> None:
    """Test a property used in SET and WHERE with different values gets two params."""
    text, params = sql.update(Contact).set(age=41).where(equals={"age": 40}).build()

    assert normalize(text) == 'UPDATE "Contact" SET "age" = $age WHERE "age" = $_1'
    assert params == {"_1": 40, "age": 41}


def test_set_keys_yield_to_caller_sql() -> None:
    q = sql.update(Contact).set(city="Austin").where(raw_sql='"city" = $city', params={"city": "Boston"})
    text, params = q.build()

    assert normalize(text) == 'UPDATE "Contact" SET "city" = $city WHERE "city" = $_1'
    assert params == {"_1": "Boston", "city": "Austin"}


def test_update_requires_where() -> None:
    q = sql.update(Contact).set(age=1)

    with pytest.raises(MissingWhereError, match="UPDATE without a WHERE clause"):
        q.build()
    assert q.build(force=True).sql == 'UPDATE "Contact" SET "age" = $age'


def test_update_requires_assignments() -> None:
    q = sql.update(Contact).set(age=1).id_equals(1)
    q.set()

    assert not q.has_set
    with pytest.raises(InvalidArgumentError, match="has no assignments"):
        q.build()


def test_update_rejects_joins() -> None:
    q = sql.update(Contact).set(age=1).id_equals(1).join(Order, lambda c, o: sql("{} = {}", c.id, o.contactId))

    with pytest.raises(InvalidArgumentError, match="UPDATE does not support joins"):
        q.build()


def test_update_argument_errors() -> None:
    with pytest.raises(InvalidArgumentError, match="without an assignment"):
        sql.update(Contact).set(None, 1)
    with pytest.raises(InvalidArgumentError, match="params given without raw_sql"):
        sql.update(Contact).set(params={"a": 1})
    with pytest.raises(UnknownPropertyError, match="'missing'"):
        sql.update(Contact).set(missing=1)


def test_update_dialect_quoting() -> None:
    text, params = mysql.update(Contact).set(age=41).id_equals(1).build().compile()

    assert normalize(text) == "UPDATE `Contact` SET `age` = %(age)s WHERE `id` = %(id)s"
    assert params == {"age": 41, "id": 1}


def test_delete(any_sql: SQLFactory) -> None:
    text, params = any_sql.delete_from(Contact).where(equals={"city": "Austin"}).build()
    table = any_sql.dialect.quote_table("Contact")
    column = any_sql.dialect.quote_column("city")

    assert text == f"DELETE FROM {table}\n WHERE {column} = $city"
    assert params == {"city": "Austin"}


def test_delete_requires_where() -> None:
    q = sql.delete_from(Contact)

    with pytest.raises(MissingWhereError, match="DELETE without a WHERE clause"):
        q.build()
    assert q.build(force=True).sql == 'DELETE FROM "Contact"'


def test_delete_rejects_joins() -> None:
    q = sql.delete_from(Contact).join(Order, lambda c, o: sql("{} = {}", c.id, o.contactId)).id_equals(1)

    with pytest.raises(InvalidArgumentError, match="DELETE does not support joins"):
        q.build()


def test_delete_with_subquery() -> None:
    """Test rows can be filtered by a subquery instead of a join."""
    orders = sql.from_(Order).where(lambda o: sql("{} > {}", o.total, 100)).select('"contactId"')
    q = sql.delete_from(Contact).where(lambda c: sql("{} IN ({})", c.id, orders))

    assert normalize(q) == 'DELETE FROM "Contact" WHERE "id" IN (SELECT "contactId" FROM "Order" WHERE "total" > $_1)'
    assert q.params == {"_1": 100}
