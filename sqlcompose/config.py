"""Configuration for statement composition."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from sqlcompose.dialects import NamingStrategy
    from sqlcompose.parameters import ParameterStyle

__all__ = ("DEFAULT_INDENT", "ComposeConfig")

DEFAULT_INDENT = "      "


@dataclass
class ComposeConfig:
    """Configuration for builder and statement behavior."""

    parameter_style: "Optional[Union[ParameterStyle, str]]" = None
    """Driver placeholder style used by ``Statement.compile()``. Defaults to the dialect's style."""
    strategy: "Optional[NamingStrategy]" = None
    """Naming strategy override applied to the factory's dialect."""
    indent: str = DEFAULT_INDENT
    """Indentation applied to continuation lines of nested fragments."""
    sort_parameters: bool = True
    """Order built parameters positional-first, then named alphabetically."""
    log_statements: bool = False
    """Emit a DEBUG record for every built statement."""
