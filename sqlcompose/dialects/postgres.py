from typing import Optional

from sqlcompose.dialects._base import Dialect
from sqlcompose.exceptions import InvalidArgumentError
from sqlcompose.fragment import Fragment
from sqlcompose.parameters import ParameterStyle

__all__ = ("PostgresDialect",)


class PostgresDialect(Dialect):
    """PostgreSQL. Compiles to ``$1`` numeric placeholders by default."""

    name = "postgres"
    sqlglot_dialect = "postgres"
    parameter_style = ParameterStyle.NUMERIC

    def sql_limit(self, offset: Optional[int] = None, limit: Optional[int] = None) -> Fragment:
        if offset is None and limit is None:
            msg = "Invalid argument sql_limit(None, None)"
            raise InvalidArgumentError(msg)
        if offset is None:
            return Fragment("LIMIT $limit", {"limit": limit})
        if limit is None:
            return Fragment("OFFSET $offset", {"offset": offset})
        return Fragment("LIMIT $limit OFFSET $offset", {"offset": offset, "limit": limit})
