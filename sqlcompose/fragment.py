"""SQL value types produced by composition."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Optional, Union

from sqlcompose.parameters import ParameterStyle, compile_placeholders

if TYPE_CHECKING:
    from sqlcompose.dialects import Dialect

__all__ = ("Fragment", "Raw", "Statement")


@dataclass(frozen=True)
class Fragment:
    """An SQL snippet and the parameters its ``$key`` placeholders refer to."""

    sql: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def __str__(self) -> str:
        return self.sql

    def __iter__(self) -> Iterator[Any]:
        yield self.sql
        yield dict(self.params)


@dataclass(frozen=True)
class Raw:
    """Literal SQL text inlined into a template without becoming a parameter."""

    sql: str

    def __str__(self) -> str:
        return self.sql


@dataclass(frozen=True)
class Statement:
    """A built statement, ready to be handed to a driver.

    ``sql, params = statement`` unpacks it. ``into`` records the type rows are
    expected to map to, when the builder knows it.
    """

    sql: str
    params: dict[str, Any] = field(default_factory=dict)
    into: Optional[Any] = None
    dialect: "Optional[Dialect]" = field(default=None, repr=False, compare=False)
    parameter_style: Optional[Union[ParameterStyle, str]] = field(default=None, repr=False, compare=False)

    def __str__(self) -> str:
        return self.sql

    def __iter__(self) -> Iterator[Any]:
        yield self.sql
        yield self.params

    def to_fragment(self) -> Fragment:
        return Fragment(self.sql, self.params)

    def with_into(self, into: Any) -> "Statement":
        return replace(self, into=into)

    def compile(
        self, style: Optional[Union[ParameterStyle, str]] = None
    ) -> "tuple[str, Union[dict[str, Any], list[Any]]]":
        """Compile to a driver placeholder style.

        Args:
            style: Target style. Defaults to the statement's configured style, then the
                dialect's native style, then ``$name`` placeholders unchanged.

        Returns:
            SQL and parameters in the shape the driver expects.
        """
        target = style or self.parameter_style
        if target is None and self.dialect is not None:
            target = self.dialect.parameter_style
        return compile_placeholders(self.sql, self.params, target or ParameterStyle.NAMED_DOLLAR)
