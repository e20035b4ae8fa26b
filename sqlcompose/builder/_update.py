"""UPDATE statement builder."""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Optional, TypeVar, Union

from typing_extensions import Self

from sqlcompose.builder._where import WhereQuery
from sqlcompose.exceptions import InvalidArgumentError, MissingWhereError
from sqlcompose.fragment import Statement

if TYPE_CHECKING:
    from sqlcompose._sql import SQLFactory
    from sqlcompose.refs import TableRef

__all__ = ("UpdateQuery",)

UpdateT = TypeVar("UpdateT", bound="UpdateQuery")


class UpdateQuery(WhereQuery):
    """Builds ``UPDATE`` statements.

    Assignments come from property mappings, keywords or templates::

        sql.update(Contact).set(age=41, city="Austin").id_equals(1)
        sql.update(Contact).set(lambda c: sql("{} = {} + 1", c.age, c.age)).where(...)

    ``build()`` refuses to produce an UPDATE without a WHERE clause unless forced.
    """

    def __init__(self, factory: "SQLFactory", table: "Union[type, TableRef]", alias: Optional[str] = None) -> None:
        super().__init__(factory, table, alias)
        self._sets: list[str] = []

    def copy_into(self, other: UpdateT) -> UpdateT:  # type: ignore[override]
        super().copy_into(other)
        other._sets = list(self._sets)
        return other

    @property
    def has_set(self) -> bool:
        return bool(self._sets)

    def set(
        self,
        assignment: Any = None,
        *values: Any,
        raw_sql: Optional[Union[str, Sequence[str]]] = None,
        params: Optional[Mapping[str, Any]] = None,
        **props: Any,
    ) -> Self:
        """Add assignments; no arguments removes every assignment.

        Args:
            assignment: A ``{property: value}`` mapping, a template string with
                ``values``, a Fragment, or a callable receiving every table ref.
            *values: Template values.
            raw_sql: Assignment SQL text using ``$name`` placeholders from ``params``.
            params: Named parameters of ``raw_sql``.
            **props: Property assignments, like a mapping.

        Raises:
            UnknownPropertyError: A property is not defined on the primary table.
            NotAColumnError: A property is not mapped to a column.

        Returns:
            The builder.
        """
        if assignment is None and not values and raw_sql is None and params is None and not props:
            self._sets.clear()
            return self
        if isinstance(assignment, Mapping):
            self._set_props(assignment)
        elif assignment is not None:
            self._sets.append(self._params.merge(self._fragment_of(assignment, values)))
        elif values:
            msg = "Template values given without an assignment"
            raise InvalidArgumentError(msg)
        if raw_sql is not None:
            texts = [raw_sql] if isinstance(raw_sql, str) else list(raw_sql)
            self._sets.extend(self._params.merge_params(texts, params or {}))
        elif params is not None:
            msg = "params given without raw_sql"
            raise InvalidArgumentError(msg)
        if props:
            self._set_props(props)
        return self

    def _set_props(self, assignments: Mapping[str, Any]) -> None:
        for prop, value in assignments.items():
            column = self._column_sql(prop, qualified=False)
            self._sets.append(f"{column} = ${self._params.bind(prop, value)}")

    def build(self, force: bool = False) -> Statement:  # type: ignore[override]
        """Render the statement.

        Args:
            force: Allow an UPDATE of every row.

        Raises:
            InvalidArgumentError: No assignments were made or the query has joins.
            MissingWhereError: There is no WHERE clause and ``force`` is false.

        Returns:
            The built statement.
        """
        if not self._sets:
            msg = f"UPDATE {self.meta.name} has no assignments, call set() first"
            raise InvalidArgumentError(msg)
        if self._joins:
            msg = "UPDATE does not support joins, filter with a subquery instead"
            raise InvalidArgumentError(msg)
        if not self._wheres and not force:
            raise MissingWhereError("UPDATE")
        sql = f"UPDATE {self._table_sql(self.ref)} SET {', '.join(self._sets)}{self._build_where()}"
        return self._statement(sql)
