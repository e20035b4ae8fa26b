"""Unified SQL factory for composing fragments and building statements.

This module provides a fluent interface over the fragment composer and the
statement builders. Every factory is bound to one dialect; the package exposes
ready-made ``sqlite``, ``postgres`` and ``mysql`` factories and ``sql``, the SQLite
one.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional, Union

from sqlglot import exp

from sqlcompose.builder import (
    DeleteQuery,
    FragmentComposer,
    GroupByBuilder,
    HavingBuilder,
    JoinBuilder,
    OrderByBuilder,
    SelectQuery,
    UpdateQuery,
)
from sqlcompose.config import ComposeConfig
from sqlcompose.dialects import get_dialect
from sqlcompose.exceptions import InvalidArgumentError
from sqlcompose.fragment import Fragment, Raw
from sqlcompose.meta import default_registry
from sqlcompose.refs import ColumnRef, TableRef

if TYPE_CHECKING:
    from sqlcompose.dialects import Dialect
    from sqlcompose.meta import MetaRegistry, TableMeta

__all__ = ("SQLFactory",)

ExpressionArg = Union[str, ColumnRef, exp.Expression]


class SQLFactory:
    """Composes SQL fragments and creates statement builders for one dialect.

    Example:
        ```python
        from sqlcompose import sql

        c = sql.ref(Contact, "c")
        fragment = sql("{} = {}", c.id, 1)  # c."id" = $_1 with {"_1": 1}

        q = sql.from_(Contact).where(equals={"city": "Austin"}).take(10)
        text, params = q.build()
        ```
    """

    def __init__(
        self,
        dialect: "Union[Dialect, str, None]" = None,
        config: Optional[ComposeConfig] = None,
        registry: "Optional[MetaRegistry]" = None,
    ) -> None:
        """Initialize the SQL factory.

        Args:
            dialect: Dialect instance or name, SQLite by default.
            config: Composition configuration. Its naming strategy is applied to the dialect.
            registry: Table metadata registry, the global one by default.
        """
        self.config = config or ComposeConfig()
        self.dialect = get_dialect(dialect, self.config.strategy)
        self.registry = registry if registry is not None else default_registry
        self.composer = FragmentComposer(self.dialect, self.config.indent)

    def __repr__(self) -> str:
        return f"SQLFactory(dialect={self.dialect.name!r})"

    # ===================
    # Fragments
    # ===================

    def __call__(self, template: str, *values: Any) -> Fragment:
        """Compose a fragment from a ``{}`` template."""
        return self.composer.compose(template, *values)

    def fragment(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Fragment:
        """Wrap SQL text using ``$name`` placeholders and its parameters."""
        return Fragment(sql, params or {})

    @staticmethod
    def raw(sql: str) -> Raw:
        """Literal SQL inlined into templates as-is."""
        return Raw(sql)

    def meta_of(self, table: type) -> "TableMeta":
        return self.registry.get(table)

    def ref(self, table: Union[type, TableRef], alias: Optional[str] = None) -> TableRef:
        """Reference ``table`` under ``alias``.

        Without an alias columns are qualified with the quoted table name; an empty
        alias leaves them unqualified.
        """
        if isinstance(table, TableRef):
            return table if alias is None else table.as_(alias)
        meta = self.registry.get(table)
        if alias is None:
            alias = self.dialect.quote_table(meta.table_name)
        return TableRef(meta, self.dialect, alias)

    def refs(self, *tables: Union[type, TableRef]) -> tuple[TableRef, ...]:
        return tuple(self.ref(table) for table in tables)

    # ===================
    # Statement Builders
    # ===================

    def from_(self, table: Union[type, TableRef], alias: Optional[str] = None) -> SelectQuery:
        """Create a SELECT builder over ``table``.

        Args:
            table: Registered table class or a table ref.
            alias: Alias of the table. Columns are unqualified without one.

        Returns:
            SelectQuery: A new builder.
        """
        return SelectQuery(self, table, alias)

    def update(self, table: Union[type, TableRef], alias: Optional[str] = None) -> UpdateQuery:
        return UpdateQuery(self, table, alias)

    def delete_from(self, table: Union[type, TableRef], alias: Optional[str] = None) -> DeleteQuery:
        return DeleteQuery(self, table, alias)

    # ===================
    # Clause Builders
    # ===================

    def join(self, *tables: type) -> JoinBuilder:
        return JoinBuilder(self.composer, *tables)

    def group_by(self, *tables: type) -> GroupByBuilder:
        return GroupByBuilder(self.composer, *tables)

    def having(self, *tables: type) -> HavingBuilder:
        return HavingBuilder(self.composer, *tables)

    def order_by(self, *tables: type) -> OrderByBuilder:
        return OrderByBuilder(self.composer, *tables)

    # ===================
    # Aggregate Functions
    # ===================

    def _expression(self, value: ExpressionArg) -> exp.Expression:
        if isinstance(value, exp.Expression):
            return value
        if value == "*":
            return exp.Star()
        return exp.maybe_parse(str(value), dialect=self.dialect.sqlglot_dialect)

    def count(self, column: ExpressionArg = "*", distinct: bool = False) -> exp.Expression:
        """Create a COUNT expression.

        Args:
            column: Column to count (default "*").
            distinct: Whether to use COUNT DISTINCT.

        Returns:
            COUNT expression.
        """
        this = self._expression(column)
        if distinct:
            this = exp.Distinct(expressions=[this])
        return exp.Count(this=this)

    def sum(self, column: ExpressionArg) -> exp.Expression:
        return exp.Sum(this=self._expression(column))

    def avg(self, column: ExpressionArg) -> exp.Expression:
        return exp.Avg(this=self._expression(column))

    def max(self, column: ExpressionArg) -> exp.Expression:
        return exp.Max(this=self._expression(column))

    def min(self, column: ExpressionArg) -> exp.Expression:
        return exp.Min(this=self._expression(column))

    def coalesce(self, *expressions: ExpressionArg) -> exp.Expression:
        """Create a COALESCE expression over columns or SQL literals.

        Raises:
            InvalidArgumentError: No expressions were given.
        """
        if not expressions:
            msg = "coalesce() needs at least one expression"
            raise InvalidArgumentError(msg)
        parsed = [self._expression(e) for e in expressions]
        return exp.Coalesce(this=parsed[0], expressions=parsed[1:])
