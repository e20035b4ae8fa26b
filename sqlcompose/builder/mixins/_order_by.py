from typing import TYPE_CHECKING, Any, cast

from typing_extensions import Self

if TYPE_CHECKING:
    from sqlcompose.builder._base import QueryBuilder

__all__ = ("OrderByClauseMixin",)


class OrderByClauseMixin:
    """Mixin providing ORDER BY clauses."""

    def _init_order_by(self) -> None:
        self._order_bys: list[str] = []

    def order_by(self, expression: Any = None, *values: Any) -> Self:
        """Add an ORDER BY expression; no arguments clears the clause.

        Example::

            sql.from_(Contact).order_by(lambda c: sql("{} DESC", c.id))
        """
        if expression is None and not values:
            self._order_bys.clear()
            return self
        builder = cast("QueryBuilder", self)
        self._order_bys.append(builder._params.merge(builder._fragment_of(expression, values)))
        return self

    def _build_order_by(self) -> str:
        if not self._order_bys:
            return ""
        return f"\n ORDER BY {', '.join(self._order_bys)}"
