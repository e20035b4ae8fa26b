"""Runtime-checkable protocols used to classify values without duck typing."""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

__all__ = ("FragmentLike", "NamingStrategy", "SupportsBuild")


@runtime_checkable
class SupportsBuild(Protocol):
    """Anything that builds into a statement, such as a query builder."""

    def build(self) -> Any:
        """Build the statement."""
        ...


@runtime_checkable
class FragmentLike(Protocol):
    """SQL text plus the parameters it references."""

    sql: str
    params: Mapping[str, Any]


@runtime_checkable
class NamingStrategy(Protocol):
    """Maps class and property names to table and column names."""

    def table_name(self, name: str) -> str:
        """Table name for a class or table alias."""
        ...

    def column_name(self, name: str) -> str:
        """Column name for a property or column alias."""
        ...
