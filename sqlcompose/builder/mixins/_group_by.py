from typing import TYPE_CHECKING, Any, cast

from typing_extensions import Self

from sqlcompose.utils.text import align_right

if TYPE_CHECKING:
    from sqlcompose.builder._base import QueryBuilder

__all__ = ("GroupByClauseMixin",)


class GroupByClauseMixin:
    """Mixin providing GROUP BY and HAVING clauses."""

    def _init_group_by(self) -> None:
        self._group_bys: list[str] = []
        self._havings: list[str] = []

    def group_by(self, expression: Any = None, *values: Any) -> Self:
        """Add a GROUP BY expression; no arguments clears the clause.

        Accepts a template string with values, a Fragment, a callable receiving every
        table ref of the query, or a :class:`GroupByBuilder`.
        """
        if expression is None and not values:
            self._group_bys.clear()
            return self
        builder = cast("QueryBuilder", self)
        self._group_bys.append(builder._params.merge(builder._fragment_of(expression, values)))
        return self

    def having(self, expression: Any = None, *values: Any) -> Self:
        """Add a HAVING condition joined with AND; no arguments clears the clause."""
        if expression is None and not values:
            self._havings.clear()
            return self
        builder = cast("QueryBuilder", self)
        self._havings.append(builder._params.merge(builder._fragment_of(expression, values)))
        return self

    def _build_group_by(self) -> str:
        sql = ""
        if self._group_bys:
            sql += f"\n GROUP BY {', '.join(self._group_bys)}"
        if self._havings:
            sql += "\n HAVING " + f"\n{align_right('AND')}".join(self._havings)
        return sql
