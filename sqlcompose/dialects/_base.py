"""Dialect base class.

A dialect owns everything that differs between databases at the SQL text level:
identifier quoting, the LIMIT/OFFSET syntax and the driver's native placeholder
style. Builders never special-case a dialect by name.
"""

import copy
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlglot import exp

from sqlcompose.dialects._naming import DefaultNamingStrategy
from sqlcompose.parameters import ParameterStyle

if TYPE_CHECKING:
    from sqlcompose.fragment import Fragment
    from sqlcompose.protocols import NamingStrategy

__all__ = ("Dialect", "quote_identifier")


@lru_cache(maxsize=2048)
def quote_identifier(name: str, dialect: str) -> str:
    """Quote a single identifier the way ``dialect`` writes quoted identifiers.

    Embedded quote characters are escaped by sqlglot's generator.
    """
    return exp.to_identifier(name, quoted=True).sql(dialect=dialect)


class Dialect(ABC):
    """SQL text conventions of one database."""

    name: ClassVar[str]
    sqlglot_dialect: ClassVar[str]
    parameter_style: ClassVar[ParameterStyle] = ParameterStyle.NAMED_DOLLAR

    def __init__(self, strategy: "Optional[NamingStrategy]" = None) -> None:
        self.strategy: "NamingStrategy" = strategy or DefaultNamingStrategy()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(strategy={type(self.strategy).__name__})"

    def with_strategy(self, strategy: "NamingStrategy") -> "Dialect":
        """Return a copy of this dialect using ``strategy``."""
        clone = copy.copy(self)
        clone.strategy = strategy
        return clone

    def quote(self, name: str) -> str:
        return quote_identifier(name, self.sqlglot_dialect)

    def quote_table(self, name: str) -> str:
        """Quote a table name, quoting each part of a ``schema.table`` name."""
        return ".".join(self.quote(part) for part in self.strategy.table_name(name).split("."))

    def quote_column(self, name: str) -> str:
        return self.quote(self.strategy.column_name(name))

    @abstractmethod
    def sql_limit(self, offset: Optional[int] = None, limit: Optional[int] = None) -> "Fragment":
        """Render LIMIT/OFFSET with ``$limit``/``$offset`` placeholders.

        Raises:
            InvalidArgumentError: Neither ``offset`` nor ``limit`` was given.
        """

    def sql_row_count(self, sql: str) -> str:
        return f"SELECT COUNT(*) FROM ({sql}) AS COUNT"
