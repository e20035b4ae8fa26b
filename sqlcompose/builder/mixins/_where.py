from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Final, Optional, cast

from typing_extensions import Self

from sqlcompose.builder._base import WhereCondition
from sqlcompose.exceptions import InvalidArgumentError, MetadataError
from sqlcompose.utils.text import align_right
from sqlcompose.utils.type_guards import is_value_collection

if TYPE_CHECKING:
    from sqlcompose.builder._base import QueryBuilder

__all__ = ("WhereClauseMixin",)

COMPARISON_OPERATORS: Final = {
    "equals": "=",
    "=": "=",
    "not_equals": "<>",
    "!=": "!=",
    "like": "LIKE",
    "not_like": "NOT LIKE",
    "starts_with": "LIKE",
    "ends_with": "LIKE",
    "contains": "LIKE",
    "in": "IN",
    "not_in": "NOT IN",
}
NULL_OPERATORS: Final = {"is_null": "IS NULL", "not_null": "IS NOT NULL"}
WILDCARD_PATTERNS: Final = {"starts_with": "{}%", "ends_with": "%{}", "contains": "%{}%"}
SHORTHAND_ALIASES: Final = {"in_": "in"}
MEMBERSHIP_OPERATORS: Final = frozenset({"in", "not_in"})


class WhereClauseMixin:
    """Mixin providing WHERE predicates.

    ``where``/``and_`` add predicates joined with AND, ``or_`` with OR. Calling any of
    them without arguments removes every predicate added so far.

    A predicate is a template string with values, a Fragment, a builder, a callable
    receiving every table ref of the query, or shorthand::

        q.where(lambda c: sql("{} = {}", c.city, "Austin"))
        q.where('"age" > {}', 18)
        q.where(equals={"city": "Austin"}, starts_with={"last_name": "Mc"})
        q.or_({"in": {"id": [1, 2, 3]}})
    """

    def where(self, condition: Any = None, *values: Any, **shorthand: Any) -> Self:
        return self._add_condition("AND", condition, values, shorthand)

    def and_(self, condition: Any = None, *values: Any, **shorthand: Any) -> Self:
        return self._add_condition("AND", condition, values, shorthand)

    def or_(self, condition: Any = None, *values: Any, **shorthand: Any) -> Self:
        return self._add_condition("OR", condition, values, shorthand)

    def id_equals(self, value: Any) -> Self:
        """Filter on the primary key of the primary table."""
        builder = cast("QueryBuilder", self)
        primary_key = builder.meta.primary_key
        if primary_key is None:
            msg = f"{builder.meta.name} has no primary key column"
            raise MetadataError(msg)
        return self.where({"equals": {primary_key.name: value}})

    def _add_condition(
        self, connector: str, condition: Any, values: Sequence[Any], shorthand: Mapping[str, Any]
    ) -> Self:
        builder = cast("QueryBuilder", self)
        if not condition and not values and not shorthand:
            builder._wheres.clear()
            return self
        if isinstance(condition, Mapping):
            self._add_shorthand(connector, condition)
        elif condition is not None:
            fragment = builder._fragment_of(condition, values)
            builder._wheres.append(WhereCondition(connector, builder._params.merge(fragment)))
        elif values:
            msg = "Template values given without a condition"
            raise InvalidArgumentError(msg)
        if shorthand:
            self._add_shorthand(connector, shorthand)
        return self

    def _add_shorthand(self, connector: str, options: Mapping[str, Any]) -> None:
        builder = cast("QueryBuilder", self)
        raw_sql: Optional[Any] = None
        raw_params: Optional[Mapping[str, Any]] = None
        for key, value in options.items():
            op = SHORTHAND_ALIASES.get(key, key)
            if op in COMPARISON_OPERATORS:
                self._add_comparisons(connector, op, value)
            elif op in NULL_OPERATORS:
                props = [value] if isinstance(value, str) else list(value)
                for prop in props:
                    builder._wheres.append(
                        WhereCondition(connector, f"{builder._column_sql(prop)} {NULL_OPERATORS[op]}")
                    )
            elif op == "op":
                if not isinstance(value, Sequence) or isinstance(value, str) or len(value) != 2:
                    msg = "op expects a (sql_operator, {property: value}) pair"
                    raise InvalidArgumentError(msg)
                sql_op, comparisons = value
                self._add_comparisons(connector, None, comparisons, sql_op)
            elif op == "raw_sql":
                raw_sql = value
            elif op == "params":
                raw_params = value
            elif op == "sql":
                fragments = value if isinstance(value, (list, tuple)) else [value]
                for fragment in fragments:
                    merged = builder._params.merge(builder._fragment_of(fragment))
                    builder._wheres.append(WhereCondition(connector, merged))
            else:
                msg = f"Unsupported {connector} option {key!r}"
                raise InvalidArgumentError(msg)

        if raw_sql is not None:
            texts = [raw_sql] if isinstance(raw_sql, str) else list(raw_sql)
            for text in builder._params.merge_params(texts, raw_params or {}):
                builder._wheres.append(WhereCondition(connector, text))
        elif raw_params is not None:
            msg = "params given without raw_sql"
            raise InvalidArgumentError(msg)

    def _add_comparisons(
        self, connector: str, op: Optional[str], comparisons: Any, sql_op: Optional[str] = None
    ) -> None:
        builder = cast("QueryBuilder", self)
        if not isinstance(comparisons, Mapping):
            msg = f"{op or sql_op} expects a mapping of property names to values, got {type(comparisons).__name__}"
            raise InvalidArgumentError(msg)
        sql_op = sql_op or COMPARISON_OPERATORS[cast("str", op)]
        for prop, value in comparisons.items():
            column = builder._column_sql(prop)
            if op in MEMBERSHIP_OPERATORS or is_value_collection(value):
                items = list(value) if is_value_collection(value) else [value]
                if not items:
                    msg = f"{op or sql_op} on {prop!r} needs at least one value"
                    raise InvalidArgumentError(msg)
                placeholders = ",".join(f"${builder._params.add(item)}" for item in items)
                sql = f"{column} {sql_op} ({placeholders})"
            else:
                pattern = WILDCARD_PATTERNS.get(op or "")
                param = builder._params.bind(prop, pattern.format(value) if pattern else value)
                sql = f"{column} {sql_op} ${param}"
            builder._wheres.append(WhereCondition(connector, sql))

    def _build_where(self) -> str:
        builder = cast("QueryBuilder", self)
        if not builder._wheres:
            return ""
        sql = f"\n{align_right('WHERE')}"
        for i, condition in enumerate(builder._wheres):
            if i > 0:
                sql += f"\n{align_right(condition.connector)}"
            sql += condition.sql
        return sql
