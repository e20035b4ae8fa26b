"""State and helpers shared by every statement builder."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, TypeVar, Union

from typing_extensions import Self

from sqlcompose.builder._clauses import ClauseBuilder
from sqlcompose.builder._compose import resolve_fragment
from sqlcompose.exceptions import InvalidArgumentError, NotAColumnError, UnknownPropertyError
from sqlcompose.fragment import Fragment, Statement
from sqlcompose.parameters import ParamBag
from sqlcompose.refs import TableRef
from sqlcompose.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from sqlcompose._sql import SQLFactory
    from sqlcompose.dialects import Dialect
    from sqlcompose.meta import TableMeta

__all__ = ("JoinDefinition", "QueryBuilder", "WhereCondition")

logger = get_logger("builder")

BuilderT = TypeVar("BuilderT", bound="QueryBuilder")


@dataclass(frozen=True)
class WhereCondition:
    connector: str
    sql: str


@dataclass(frozen=True)
class JoinDefinition:
    """One join of a query; ``joins[i]`` describes ``tables[i + 1]``."""

    type: str
    table: type
    ref: TableRef
    on: Optional[str] = None


class QueryBuilder:
    """Tables, refs, predicates, joins and parameters of a statement under construction.

    ``tables``, ``metas`` and ``refs`` are parallel lists whose first entry is the
    primary table. Every builder owns its own lists and parameter bag, so a
    :meth:`clone` can be extended without affecting its source.
    """

    def __init__(self, factory: "SQLFactory", table: Union[type, TableRef], alias: Optional[str] = None) -> None:
        if isinstance(table, TableRef):
            ref = table if alias is None else table.as_(alias)
        else:
            ref = factory.ref(table, alias or "")
        self._factory = factory
        self._tables: list[type] = [ref.cls]
        self._metas: list[TableMeta] = [ref.meta]
        self._refs: list[TableRef] = [ref]
        self._wheres: list[WhereCondition] = []
        self._joins: list[JoinDefinition] = []
        self._params = ParamBag()

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self._tables)
        return f"{type(self).__name__}({names})"

    def __str__(self) -> str:
        return self.build().sql

    @property
    def factory(self) -> "SQLFactory":
        return self._factory

    @property
    def dialect(self) -> "Dialect":
        return self._factory.dialect

    @property
    def table(self) -> type:
        """The primary table class."""
        return self._tables[0]

    @property
    def tables(self) -> tuple[type, ...]:
        return tuple(self._tables)

    @property
    def metas(self) -> "tuple[TableMeta, ...]":
        return tuple(self._metas)

    @property
    def meta(self) -> "TableMeta":
        return self._metas[0]

    @property
    def ref(self) -> TableRef:
        """Ref of the primary table."""
        return self._refs[0]

    @property
    def refs(self) -> tuple[TableRef, ...]:
        return tuple(self._refs)

    @property
    def joins(self) -> tuple[JoinDefinition, ...]:
        return tuple(self._joins)

    @property
    def wheres(self) -> tuple[WhereCondition, ...]:
        return tuple(self._wheres)

    @property
    def params(self) -> dict[str, Any]:
        return self._params.to_dict()

    @property
    def has_where(self) -> bool:
        return bool(self._wheres)

    def ref_of(self, table: type) -> Optional[TableRef]:
        """The first ref of ``table`` in this query, if it has one."""
        for ref in self._refs:
            if ref.cls is table:
                return ref
        return None

    def refs_of(self, *tables: type) -> tuple[Optional[TableRef], ...]:
        return tuple(self.ref_of(table) for table in tables)

    def as_(self, alias: Optional[str]) -> Self:
        """Re-alias the primary table."""
        self._refs[0] = self._refs[0].as_(alias)
        return self

    def copy_into(self, other: BuilderT) -> BuilderT:
        """Copy this builder's state into ``other`` and return it.

        Lists and the parameter bag are copied, immutable leaves are shared.
        """
        other._factory = self._factory
        other._tables = list(self._tables)
        other._metas = list(self._metas)
        other._refs = list(self._refs)
        other._wheres = list(self._wheres)
        other._joins = list(self._joins)
        other._params = self._params.copy()
        return other

    def clone(self) -> Self:
        """An independent copy of this builder."""
        return self.copy_into(object.__new__(type(self)))

    def build(self) -> Statement:
        raise NotImplementedError

    def into(self, into: Any) -> Statement:
        """Build, recording the type rows should map to."""
        return self.build().with_into(into)

    def _fragment_of(
        self,
        arg: Any,
        values: Sequence[Any] = (),
        refs: Optional[Sequence[TableRef]] = None,
        params: Optional[Any] = None,
    ) -> Fragment:
        if isinstance(arg, ClauseBuilder):
            if values or params is not None:
                msg = f"{type(arg).__name__} does not take template values"
                raise InvalidArgumentError(msg)
            return arg.build(self._clause_refs(arg.tables))
        return resolve_fragment(
            self._factory.composer, arg, values, self._refs if refs is None else refs, params
        )

    def _clause_refs(self, tables: Sequence[type]) -> list[TableRef]:
        return [self.ref_of(table) or self._factory.ref(table) for table in tables]

    def _column_sql(self, prop: str, qualified: bool = True) -> str:
        """Render the primary table's column for ``prop``.

        Raises:
            UnknownPropertyError: The class has no such property.
            NotAColumnError: The property is not mapped to a column.
        """
        meta = self._metas[0]
        if not meta.has_prop(prop):
            raise UnknownPropertyError(meta.name, prop)
        col = meta.column(prop)
        if col is None:
            raise NotAColumnError(meta.name, prop)
        if qualified:
            return str(self._refs[0].column(prop))
        return self.dialect.quote_column(col.column_name)

    def _table_sql(self, ref: TableRef) -> str:
        quoted = ref.table
        if ref.alias and ref.alias != quoted:
            return f"{quoted} {ref.alias}"
        return quoted

    def _statement(self, sql: str, into: Any = None) -> Statement:
        config = self._factory.config
        params = self._params.sorted() if config.sort_parameters else self._params.to_dict()
        if config.log_statements:
            log_with_context(
                logger,
                logging.DEBUG,
                "Built statement",
                statement=type(self).__name__,
                sql=sql,
                parameter_count=len(params),
            )
        return Statement(sql, params, into=into, dialect=self.dialect, parameter_style=config.parameter_style)
