"""SELECT statement builder."""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Optional, TypeVar, Union

from typing_extensions import Self

from sqlcompose.builder._where import WhereQuery
from sqlcompose.builder.mixins import GroupByClauseMixin, LimitOffsetClauseMixin, OrderByClauseMixin
from sqlcompose.exceptions import InvalidArgumentError
from sqlcompose.fragment import Fragment, Statement

if TYPE_CHECKING:
    from sqlcompose._sql import SQLFactory
    from sqlcompose.refs import TableRef

__all__ = ("SelectQuery",)

SelectT = TypeVar("SelectT", bound="SelectQuery")


class SelectQuery(WhereQuery, GroupByClauseMixin, OrderByClauseMixin, LimitOffsetClauseMixin):
    """Builds ``SELECT`` statements.

    Example::

        q = (
            sql.from_(Contact, "c")
            .join(Order, lambda c, o: sql("{} = {}", c.id, o.contact_id), alias="o")
            .where(lambda c, o: sql("{} > {}", o.total, 100))
            .select(lambda c, o: sql("{}, SUM({}) AS total", c.id, o.total))
            .group_by(lambda c: sql("{}", c.id))
            .order_by("total DESC")
            .take(10)
        )
        sql_text, params = q.build()
    """

    def __init__(self, factory: "SQLFactory", table: "Union[type, TableRef]", alias: Optional[str] = None) -> None:
        super().__init__(factory, table, alias)
        self._selects: list[str] = []
        self._init_group_by()
        self._init_order_by()
        self._init_limit()

    def copy_into(self, other: SelectT) -> SelectT:  # type: ignore[override]
        super().copy_into(other)
        other._selects = list(self._selects)
        other._group_bys = list(self._group_bys)
        other._havings = list(self._havings)
        other._order_bys = list(self._order_bys)
        other._take = self._take
        other._skip = self._skip
        other._limit = self._limit
        other._limit_keys = self._limit_keys
        return other

    @property
    def has_select(self) -> bool:
        return bool(self._selects)

    def select(
        self,
        projection: Any = None,
        *values: Any,
        props: Optional[Sequence[str]] = None,
        columns: Optional[Sequence[str]] = None,
        sql: Optional[Union[Fragment, Sequence[Fragment]]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Self:
        """Add to the projection; no arguments restores the default projection.

        Args:
            projection: A template string with ``values``, SQL text with named
                ``params``, a Fragment, a builder, or a callable receiving every table
                ref of the query.
            *values: Template values.
            props: Property names of the primary table, rendered as its columns.
            columns: Column names of the primary table, rendered quoted.
            sql: Fragments appended as they are.
            params: Named parameters of a textual ``projection``.

        Raises:
            UnknownPropertyError: A name in ``props`` is not a property of the primary table.
            NotAColumnError: A name in ``props`` is not mapped to a column.

        Returns:
            The builder.
        """
        if projection is None and not values and props is None and columns is None and sql is None:
            self._selects.clear()
            return self
        if projection is not None:
            self._selects.append(self._params.merge(self._fragment_of(projection, values, params=params)))
        elif values or params is not None:
            msg = "Template values given without a projection"
            raise InvalidArgumentError(msg)
        for prop in props or ():
            self._selects.append(self._column_sql(prop))
        for name in columns or ():
            prefix = f"{self.ref.alias}." if self.ref.alias else ""
            self._selects.append(prefix + self.dialect.quote_column(name))
        if sql is not None:
            fragments = [sql] if isinstance(sql, Fragment) else list(sql)
            for fragment in fragments:
                self._selects.append(self._params.merge(fragment))
        return self

    def exists(self) -> Statement:
        """A statement selecting ``TRUE`` when at least one row matches."""
        q = self.clone()
        q._selects = ["TRUE"]
        q._params.remove(*q._limit_keys)
        q._limit = "LIMIT 1"
        q._limit_keys = ()
        return q.build().with_into(bool)

    def row_count(self) -> Statement:
        """A statement counting the rows this query returns."""
        built = self.build()
        return Statement(
            self.dialect.sql_row_count(built.sql),
            built.params,
            into=int,
            dialect=built.dialect,
            parameter_style=built.parameter_style,
        )

    def _build_select(self) -> str:
        if self._selects:
            return "SELECT " + ", ".join(self._selects)
        columns = [str(self.ref.column(col.name)) for col in self.meta.columns]
        return "SELECT " + (", ".join(columns) if columns else "*")

    def _build_from(self) -> str:
        return f"\n  FROM {self._table_sql(self.ref)}"

    def build(self) -> Statement:
        sql = (
            self._build_select()
            + self._build_from()
            + self._build_joins()
            + self._build_where()
            + self._build_group_by()
            + self._build_order_by()
            + self._build_limit()
        )
        return self._statement(sql, into=None if self._selects else self.table)
