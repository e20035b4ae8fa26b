from typing import Final, Optional

from sqlcompose.dialects._base import Dialect
from sqlcompose.exceptions import InvalidArgumentError
from sqlcompose.fragment import Fragment
from sqlcompose.parameters import ParameterStyle

__all__ = ("MySQLDialect",)

# Largest BIGINT UNSIGNED, the documented way to ask MySQL for "all remaining rows".
MAX_ROWS: Final = "18446744073709551615"


class MySQLDialect(Dialect):
    """MySQL / MariaDB. Backtick quoting and ``LIMIT offset, count``."""

    name = "mysql"
    sqlglot_dialect = "mysql"
    parameter_style = ParameterStyle.NAMED_PYFORMAT

    def sql_limit(self, offset: Optional[int] = None, limit: Optional[int] = None) -> Fragment:
        if offset is None and limit is None:
            msg = "Invalid argument sql_limit(None, None)"
            raise InvalidArgumentError(msg)
        if offset is None:
            return Fragment("LIMIT $limit", {"limit": limit})
        if limit is None:
            return Fragment(f"LIMIT $offset, {MAX_ROWS}", {"offset": offset})
        return Fragment("LIMIT $offset, $limit", {"offset": offset, "limit": limit})
