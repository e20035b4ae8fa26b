from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional, TypeVar, Union, cast

from sqlcompose.builder._base import JoinDefinition
from sqlcompose.builder._clauses import JoinBuilder
from sqlcompose.exceptions import InvalidArgumentError
from sqlcompose.refs import TableRef

if TYPE_CHECKING:
    from sqlcompose.builder._base import QueryBuilder

__all__ = ("JoinClauseMixin",)

JoinT = TypeVar("JoinT", bound="JoinClauseMixin")

JoinTarget = Union[type, TableRef, JoinBuilder]


class JoinClauseMixin:
    """Mixin providing JOIN clauses.

    Every join method returns a **new** builder with the joined table appended; the
    builder it was called on is left untouched and stays independently usable.
    """

    def join(
        self: JoinT,
        table: JoinTarget,
        on: Any = None,
        *,
        alias: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> JoinT:
        """Add an inner join.

        Args:
            table: A table class, a table ref, or a :class:`JoinBuilder` chain whose
                first table is joined. The chain keeps its own join type here; the
                typed join methods only accept chains of their type or untyped ones.
            on: The ON condition: SQL text (with ``$name`` placeholders bound from
                ``params``), a Fragment, a builder, or a callable receiving the refs of
                the previously joined table, the new table and the primary table.
            alias: Alias of the joined table. Defaults to the quoted table name.
            params: Named parameters of a textual ``on``.

        Raises:
            InvalidArgumentError: The target is not joinable, or a chain is given
                together with ``on``, or a chain's type differs from a typed method's.

        Returns:
            A new builder including the join.
        """
        return self._add_join("JOIN", table, on, alias, params)

    def left_join(
        self: JoinT,
        table: JoinTarget,
        on: Any = None,
        *,
        alias: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> JoinT:
        return self._add_join("LEFT JOIN", table, on, alias, params)

    def right_join(
        self: JoinT,
        table: JoinTarget,
        on: Any = None,
        *,
        alias: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> JoinT:
        return self._add_join("RIGHT JOIN", table, on, alias, params)

    def full_join(
        self: JoinT,
        table: JoinTarget,
        on: Any = None,
        *,
        alias: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> JoinT:
        return self._add_join("FULL JOIN", table, on, alias, params)

    def cross_join(
        self: JoinT,
        table: JoinTarget,
        on: Any = None,
        *,
        alias: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> JoinT:
        return self._add_join("CROSS JOIN", table, on, alias, params)

    def _add_join(
        self: JoinT,
        join_type: str,
        table: JoinTarget,
        on: Any,
        alias: Optional[str],
        params: Optional[Mapping[str, Any]],
    ) -> JoinT:
        if isinstance(table, JoinBuilder):
            if on is not None or params is not None:
                msg = "A JoinBuilder carries its own ON conditions"
                raise InvalidArgumentError(msg)
            return self._splice_join(join_type, table, alias)

        source = cast("QueryBuilder", self)
        if isinstance(table, TableRef):
            ref = table if alias is None else table.as_(alias)
        elif isinstance(table, type):
            ref = source.factory.ref(table, alias)
        else:
            msg = f"Cannot join {type(table).__name__}, expected a table class, TableRef or JoinBuilder"
            raise InvalidArgumentError(msg)

        joined = cast("QueryBuilder", self._extend(ref))
        on_sql = None
        if on is not None:
            refs = [*joined._refs[-2:], joined._refs[0]]
            on_sql = joined._params.merge(joined._fragment_of(on, refs=refs, params=params))
        elif params is not None:
            msg = "params given without an ON condition"
            raise InvalidArgumentError(msg)
        joined._joins.append(JoinDefinition(join_type, ref.cls, ref, on_sql))
        return cast("JoinT", joined)

    def _splice_join(self: JoinT, join_type: str, chain: JoinBuilder, alias: Optional[str]) -> JoinT:
        """Join the first table of ``chain``.

        ``join()`` keeps the chain's own join type. The typed methods apply their type
        to a chain started with ``add()`` and reject a chain started with another type.
        """
        if chain.type is not None and join_type != "JOIN" and chain.type != join_type:
            msg = f"Cannot splice a {chain.type} chain with {join_type}"
            raise InvalidArgumentError(msg)
        source = cast("QueryBuilder", self)
        joined = cast("QueryBuilder", self._extend(source.factory.ref(chain.table)))
        built = chain.build_join(joined._clause_refs(chain.tables), alias)
        joined._refs[-1] = built.ref
        on_sql = joined._params.merge(built.fragment)
        joined._joins.append(JoinDefinition(chain.type or join_type, chain.table, built.ref, on_sql))
        return cast("JoinT", joined)

    def _extend(self: JoinT, ref: TableRef) -> JoinT:
        """Clone with ``ref`` appended, fully qualifying an unaliased primary table."""
        joined = cast("QueryBuilder", cast("QueryBuilder", self).clone())
        primary = joined._refs[0]
        if not primary.alias:
            joined._refs[0] = primary.as_(primary.table)
        joined._tables.append(ref.cls)
        joined._metas.append(ref.meta)
        joined._refs.append(ref)
        return cast("JoinT", joined)

    def _build_joins(self) -> str:
        builder = cast("QueryBuilder", self)
        sql = ""
        for join in builder._joins:
            spaces = "  " if len(join.type.split(" ")[0]) <= 4 else " "
            sql += f"\n{spaces}{join.type} {builder._table_sql(join.ref)}"
            if join.on:
                sql += f" ON {join.on}"
        return sql
