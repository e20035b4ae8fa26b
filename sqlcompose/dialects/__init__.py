"""Dialects and naming strategies."""

from typing import Optional, Union

from sqlcompose.dialects._base import Dialect, quote_identifier
from sqlcompose.dialects._naming import DefaultNamingStrategy, SnakeCaseNamingStrategy
from sqlcompose.dialects.mysql import MySQLDialect
from sqlcompose.dialects.postgres import PostgresDialect
from sqlcompose.dialects.sqlite import SqliteDialect
from sqlcompose.exceptions import InvalidArgumentError
from sqlcompose.protocols import NamingStrategy

__all__ = (
    "DefaultNamingStrategy",
    "Dialect",
    "MySQLDialect",
    "NamingStrategy",
    "PostgresDialect",
    "SnakeCaseNamingStrategy",
    "SqliteDialect",
    "get_dialect",
    "quote_identifier",
)

DIALECTS: "dict[str, type[Dialect]]" = {
    "sqlite": SqliteDialect,
    "postgres": PostgresDialect,
    "postgresql": PostgresDialect,
    "mysql": MySQLDialect,
    "mariadb": MySQLDialect,
}


def get_dialect(dialect: "Union[Dialect, str, None]" = None, strategy: "Optional[NamingStrategy]" = None) -> Dialect:
    """Resolve a dialect instance from an instance or a name.

    Args:
        dialect: A dialect instance, a dialect name, or ``None`` for SQLite.
        strategy: Naming strategy to apply to the resolved dialect.

    Raises:
        InvalidArgumentError: The dialect name is unknown.

    Returns:
        The dialect.
    """
    if isinstance(dialect, Dialect):
        return dialect.with_strategy(strategy) if strategy is not None else dialect
    name = (dialect or "sqlite").lower()
    try:
        dialect_cls = DIALECTS[name]
    except KeyError:
        msg = f"Unknown dialect {dialect!r}, expected one of {', '.join(sorted(DIALECTS))}"
        raise InvalidArgumentError(msg) from None
    return dialect_cls(strategy)
