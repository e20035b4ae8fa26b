"""Unit tests for table metadata registration."""

from dataclasses import dataclass
from typing import Annotated, ClassVar, Optional

import pytest

from sqlcompose import MetaRegistry, SQLFactory, UnregisteredTableError, column, meta_of, table
from tests.unit.models import Contact, Note, Person


def test_columns_in_declaration_order() -> None:
    meta = meta_of(Contact)

    assert meta.name == "Contact"
    assert meta.table_name == "Contact"
    assert [c.name for c in meta.columns] == ["id", "firstName", "lastName", "age", "email", "city"]
    assert meta.props == ("id", "firstName", "lastName", "age", "email", "city", "notes")


def test_column_flags() -> None:
    meta = meta_of(Contact)
    pk = meta.primary_key

    assert pk is not None
    assert pk.name == "id"
    assert pk.primary_key
    assert pk.auto_increment
    assert meta.column("firstName").required  # type: ignore[union-attr]
    assert meta.column("notes") is None
    assert meta.has_prop("notes")
    assert not meta.has_prop("missing")


def test_table_and_column_aliases() -> None:
    meta = meta_of(Person)

    assert meta.table_name == "Contact"
    assert meta.column("key").column_name == "id"  # type: ignore[union-attr]
    assert meta.primary_key.name == "key"  # type: ignore[union-attr]


def test_table_without_primary_key() -> None:
    assert meta_of(Note).primary_key is None


def test_unregistered_class_raises() -> None:
    class Unmapped:
        id: int

    with pytest.raises(UnregisteredTableError, match="Unmapped is not a registered table"):
        meta_of(Unmapped)


def test_custom_registry_and_bare_decorator() -> None:
    """Test tables can be registered in a private registry."""
    registry = MetaRegistry()

    @table(registry=registry)
    @dataclass
    class Widget:
        id: Annotated[int, column("INTEGER", primary_key=True)] = 0
        label: Annotated[Optional[str], column("TEXT", alias="widget_label")] = None
        kind: ClassVar[str] = "widget"
        _cache: Optional[dict] = None

    assert Widget in registry
    assert len(registry) == 1
    assert registry.get(Widget).props == ("id", "label")
    with pytest.raises(UnregisteredTableError):
        meta_of(Widget)

    factory = SQLFactory(registry=registry)
    assert str(factory.ref(Widget, "w").label) == 'w."widget_label"'

    @table
    class Gadget:
        id: Annotated[int, column("INTEGER")]

    assert meta_of(Gadget).columns[0].type == "INTEGER"
