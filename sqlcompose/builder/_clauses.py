"""Standalone clause builders spliced into queries.

A clause builder owns its own tuple of tables and a list of expressions. It is built
against the refs a query has for those tables, so one builder can be reused by
queries that alias the tables differently::

    order = sql.order_by(Contact).add(lambda c: sql("{} DESC", c.id))
    sql.from_(Contact, "c").order_by(order)
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, NamedTuple, Optional

from typing_extensions import Self

from sqlcompose.builder._compose import resolve_fragment
from sqlcompose.exceptions import InvalidArgumentError
from sqlcompose.fragment import Fragment
from sqlcompose.parameters import ParamBag
from sqlcompose.utils.text import align_right

if TYPE_CHECKING:
    from sqlcompose.builder._compose import FragmentComposer
    from sqlcompose.refs import TableRef

__all__ = (
    "BuiltJoin",
    "ClauseBuilder",
    "GroupByBuilder",
    "HavingBuilder",
    "JoinBuilder",
    "OrderByBuilder",
)


@dataclass(frozen=True)
class _ClauseExpression:
    expression: Any
    values: tuple[Any, ...] = ()
    join_type: Optional[str] = None


class BuiltJoin(NamedTuple):
    """A join chain rendered for a query."""

    type: str
    ref: "TableRef"
    fragment: Fragment


class ClauseBuilder:
    """Accumulates clause expressions over a fixed tuple of tables."""

    delimiter: ClassVar[str] = ", "

    def __init__(self, composer: "FragmentComposer", *tables: type) -> None:
        if not tables:
            msg = f"{type(self).__name__} needs at least one table"
            raise InvalidArgumentError(msg)
        self.composer = composer
        self.tables: tuple[type, ...] = tables
        self._expressions: list[_ClauseExpression] = []

    def __len__(self) -> int:
        return len(self._expressions)

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self.tables)
        return f"{type(self).__name__}({names})"

    @property
    def table(self) -> type:
        """The first table of the builder."""
        return self.tables[0]

    def add(self, expression: Any, *values: Any) -> Self:
        """Append an expression: a template string with values, a Fragment, or a callable taking refs."""
        self._expressions.append(_ClauseExpression(expression, values))
        return self

    def _check_refs(self, refs: "Sequence[TableRef]") -> None:
        if len(refs) < len(self.tables):
            msg = f"{type(self).__name__} needs {len(self.tables)} refs, got {len(refs)}"
            raise InvalidArgumentError(msg)

    def _render(self, expression: _ClauseExpression, refs: "Sequence[TableRef]", bag: ParamBag) -> str:
        fragment = resolve_fragment(self.composer, expression.expression, expression.values, refs)
        return bag.merge(fragment)

    def build(self, refs: "Sequence[TableRef]") -> Fragment:
        """Render every expression against ``refs`` and merge their parameters."""
        self._check_refs(refs)
        bag = ParamBag()
        sqls = [self._render(expression, refs, bag) for expression in self._expressions]
        return Fragment(self.delimiter.join(sqls), bag.to_dict())


class GroupByBuilder(ClauseBuilder):
    """GROUP BY expressions, joined with commas."""


class OrderByBuilder(ClauseBuilder):
    """ORDER BY expressions, joined with commas."""


class HavingBuilder(ClauseBuilder):
    """HAVING conditions, joined with AND."""

    delimiter = "\n" + align_right("AND")


class JoinBuilder(ClauseBuilder):
    """A chain of joins rooted at its first table.

    When spliced into a query only the first table becomes a new join of that
    query. Expressions are ON conditions: the first expression's join type is the
    type of that join, later expressions are appended after their own join keyword::

        sql.join(Freight, Order).left_join(lambda f, o: sql("{} = {}", o.freightId, f.id))
    """

    def __init__(self, composer: "FragmentComposer", *tables: type) -> None:
        super().__init__(composer, *tables)
        self.alias: Optional[str] = None

    @property
    def type(self) -> Optional[str]:
        """Join type of the first expression, ``None`` when it was added untyped with :meth:`add`."""
        return self._expressions[0].join_type if self._expressions else None

    def as_(self, alias: Optional[str]) -> Self:
        """Alias the first table when the chain is spliced into a query."""
        self.alias = alias
        return self

    def add(self, expression: Any, *values: Any) -> Self:
        return self._add_join(None, expression, values)

    def join(self, expression: Any, *values: Any) -> Self:
        return self._add_join("JOIN", expression, values)

    def left_join(self, expression: Any, *values: Any) -> Self:
        return self._add_join("LEFT JOIN", expression, values)

    def right_join(self, expression: Any, *values: Any) -> Self:
        return self._add_join("RIGHT JOIN", expression, values)

    def full_join(self, expression: Any, *values: Any) -> Self:
        return self._add_join("FULL JOIN", expression, values)

    def cross_join(self, expression: Any, *values: Any) -> Self:
        return self._add_join("CROSS JOIN", expression, values)

    def _add_join(self, join_type: Optional[str], expression: Any, values: tuple[Any, ...]) -> Self:
        self._expressions.append(_ClauseExpression(expression, values, join_type))
        return self

    def build_join(self, refs: "Sequence[TableRef]", alias: Optional[str] = None) -> BuiltJoin:
        """Render the chain for splicing.

        ``alias`` overrides the alias set with :meth:`as_`.

        Raises:
            InvalidArgumentError: The builder has no expressions or too few refs.

        Returns:
            The join type, the (possibly re-aliased) ref of the first table and the
            ON text with its parameters.
        """
        if not self._expressions:
            msg = "JoinBuilder has no join expressions"
            raise InvalidArgumentError(msg)
        self._check_refs(refs)
        refs = list(refs)
        alias = alias or self.alias
        if alias:
            refs[0] = refs[0].as_(alias)

        bag = ParamBag()
        sql = ""
        for i, expression in enumerate(self._expressions):
            rendered = self._render(expression, refs, bag)
            sql += rendered if i == 0 else f"\n{align_right(expression.join_type or 'JOIN')}{rendered}"
        return BuiltJoin(self._expressions[0].join_type or "JOIN", refs[0], Fragment(sql, bag.to_dict()))

    def build(self, refs: "Sequence[TableRef]") -> Fragment:
        return self.build_join(refs).fragment
