from typing import Final, Optional

from sqlcompose.dialects._base import Dialect
from sqlcompose.exceptions import InvalidArgumentError
from sqlcompose.fragment import Fragment
from sqlcompose.parameters import ParameterStyle

__all__ = ("SqliteDialect",)

NO_LIMIT: Final = -1


class SqliteDialect(Dialect):
    """SQLite. Offsets without a limit use ``LIMIT -1``."""

    name = "sqlite"
    sqlglot_dialect = "sqlite"
    parameter_style = ParameterStyle.NAMED_DOLLAR

    def sql_limit(self, offset: Optional[int] = None, limit: Optional[int] = None) -> Fragment:
        if offset is None and limit is None:
            msg = "Invalid argument sql_limit(None, None)"
            raise InvalidArgumentError(msg)
        if offset is None:
            return Fragment("LIMIT $limit", {"limit": limit})
        return Fragment(
            "LIMIT $limit OFFSET $offset", {"offset": offset, "limit": NO_LIMIT if limit is None else limit}
        )
