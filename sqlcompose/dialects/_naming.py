"""Naming strategies mapping class and property names to SQL names."""

from sqlcompose.utils.text import snake_case

__all__ = ("DefaultNamingStrategy", "SnakeCaseNamingStrategy")


class DefaultNamingStrategy:
    """Uses class and property names as they are."""

    def table_name(self, name: str) -> str:
        return name

    def column_name(self, name: str) -> str:
        return name


class SnakeCaseNamingStrategy(DefaultNamingStrategy):
    """``OrderItem.firstName`` becomes ``order_item.first_name``."""

    def table_name(self, name: str) -> str:
        return snake_case(name)

    def column_name(self, name: str) -> str:
        return snake_case(name)
