from typing import Any, Optional

__all__ = (
    "CompositionError",
    "InvalidArgumentError",
    "MetadataError",
    "MissingWhereError",
    "NotAColumnError",
    "ParameterCollisionError",
    "SQLComposeError",
    "UnknownColumnError",
    "UnknownPropertyError",
    "UnregisteredTableError",
)


class SQLComposeError(Exception):
    """Base exception class from which all sqlcompose exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLComposeError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class CompositionError(SQLComposeError):
    """A template value could not be turned into SQL text or a parameter."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues composing SQL fragment."
        super().__init__(message)


class ParameterCollisionError(CompositionError):
    """A named parameter was bound twice with different values."""

    key: str

    def __init__(self, key: str, message: Optional[str] = None) -> None:
        if message is None:
            message = f"Named parameter ${key} is already bound to a different value"
        self.key = key
        super().__init__(message)


class MetadataError(SQLComposeError):
    """Base class for table metadata lookup errors."""


class UnregisteredTableError(MetadataError):
    """A class was used as a table but has no registered metadata."""

    def __init__(self, cls: Any) -> None:
        name = getattr(cls, "__name__", repr(cls))
        super().__init__(f"{name} is not a registered table, decorate it with @table()")


class UnknownColumnError(MetadataError, AttributeError):
    """A table reference was asked for a property with no matching column."""

    def __init__(self, table: str, prop: str) -> None:
        self.table = table
        self.prop = prop
        super().__init__(f"{table} has no column {prop!r}")


class UnknownPropertyError(MetadataError):
    """A property name does not exist on the table's class."""

    def __init__(self, table: str, prop: str) -> None:
        self.table = table
        self.prop = prop
        super().__init__(f"Property {prop!r} does not exist on {table}")


class NotAColumnError(MetadataError):
    """A property exists on the class but is not mapped to a column."""

    def __init__(self, table: str, prop: str) -> None:
        self.table = table
        self.prop = prop
        super().__init__(f"Property {table}.{prop} is not a column")


class MissingWhereError(SQLComposeError):
    """An UPDATE or DELETE would run without a WHERE clause."""

    def __init__(self, statement: str = "UPDATE", message: Optional[str] = None) -> None:
        if message is None:
            message = f"{statement} without a WHERE clause, call build(force=True) to allow it"
        super().__init__(message)


class InvalidArgumentError(SQLComposeError):
    """A builder method received an argument of the wrong shape."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Invalid argument passed to builder."
        super().__init__(message)
