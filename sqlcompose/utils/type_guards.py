"""Type guard functions used to classify template values."""

import datetime
import enum
import uuid
from collections.abc import Sequence
from collections.abc import Set as AbstractSet
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from sqlglot import exp
    from typing_extensions import TypeGuard

__all__ = (
    "PARAMETER_TYPES",
    "is_expression",
    "is_parameter_value",
    "is_value_collection",
)

PARAMETER_TYPES: Final = (
    str,
    bytes,
    bytearray,
    bool,
    int,
    float,
    Decimal,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    enum.Enum,
)


def is_parameter_value(obj: Any) -> bool:
    """Check if a value can be bound as a single parameter.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, PARAMETER_TYPES)


def is_value_collection(obj: Any) -> "TypeGuard[Sequence[Any] | AbstractSet[Any]]":
    """Check if a value is a list, tuple or set of parameter values.

    Strings and bytes are scalars, not collections.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    if isinstance(obj, (str, bytes, bytearray)):
        return False
    return isinstance(obj, (list, tuple, AbstractSet))


def is_expression(obj: Any) -> "TypeGuard[exp.Expression]":
    """Check if a value is a sqlglot Expression.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    from sqlglot import exp

    return isinstance(obj, exp.Expression)
