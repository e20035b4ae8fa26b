"""Table and column metadata.

Tables are declared on plain annotated classes (dataclasses work well) by marking
column attributes with ``Annotated[..., column(...)]`` and decorating the class with
``@table()``::

    @table()
    @dataclass
    class Contact:
        id: Annotated[int, column("INTEGER", primary_key=True, auto_increment=True)]
        first_name: Annotated[str, column("TEXT", required=True)]
        notes: Optional[str] = None  # a property, but not a column

Builders only ever read this metadata through a :class:`MetaRegistry`.
"""

from dataclasses import dataclass, field, replace
from typing import Annotated, Any, Callable, ClassVar, Optional, TypeVar, Union, get_args, get_origin, get_type_hints

from sqlcompose.exceptions import UnregisteredTableError
from sqlcompose.utils.logging import get_logger

__all__ = (
    "ColumnMeta",
    "MetaRegistry",
    "TableMeta",
    "column",
    "default_registry",
    "meta_of",
    "table",
)

logger = get_logger("meta")

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class ColumnMeta:
    """A mapped column of a table class."""

    name: str
    """Property name on the class."""
    type: str = "TEXT"
    """Declared SQL type."""
    alias: Optional[str] = None
    """Column name when it differs from the property name."""
    primary_key: bool = False
    auto_increment: bool = False
    required: bool = False
    unique: bool = False
    index: bool = False
    default_value: Optional[str] = None

    @property
    def column_name(self) -> str:
        return self.alias or self.name


@dataclass(frozen=True)
class TableMeta:
    """Read-only description of a registered table class."""

    cls: type
    name: str
    alias: Optional[str] = None
    props: tuple[str, ...] = ()
    columns: tuple[ColumnMeta, ...] = ()
    _by_prop: dict[str, ColumnMeta] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_prop", {c.name: c for c in self.columns})

    @property
    def table_name(self) -> str:
        return self.alias or self.name

    @property
    def primary_key(self) -> Optional[ColumnMeta]:
        """The primary key column, falling back to a column named ``id``."""
        for col in self.columns:
            if col.primary_key:
                return col
        return self._by_prop.get("id")

    def column(self, prop: str) -> Optional[ColumnMeta]:
        """Return the column mapped to ``prop`` or ``None``."""
        return self._by_prop.get(prop)

    def has_prop(self, prop: str) -> bool:
        return prop in self.props


def column(
    type: str = "TEXT",  # noqa: A002
    *,
    alias: Optional[str] = None,
    primary_key: bool = False,
    auto_increment: bool = False,
    required: bool = False,
    unique: bool = False,
    index: bool = False,
    default_value: Optional[str] = None,
) -> ColumnMeta:
    """Column marker used inside ``Annotated`` attribute annotations.

    Args:
        type: Declared SQL type of the column.
        alias: Column name when it differs from the property name.
        primary_key: Column is the primary key.
        auto_increment: Column value is generated by the database.
        required: Column is ``NOT NULL``.
        unique: Column has a unique index.
        index: Column has an index.
        default_value: SQL default expression.

    Returns:
        An unnamed column definition, named after its attribute by :func:`table`.
    """
    return ColumnMeta(
        name="",
        type=type,
        alias=alias,
        primary_key=primary_key,
        auto_increment=auto_increment,
        required=required,
        unique=unique,
        index=index,
        default_value=default_value,
    )


def _column_marker(hint: Any) -> Optional[ColumnMeta]:
    if get_origin(hint) is not Annotated:
        return None
    for marker in get_args(hint)[1:]:
        if isinstance(marker, ColumnMeta):
            return marker
    return None


def _describe(cls: type, alias: Optional[str]) -> TableMeta:
    hints = get_type_hints(cls, include_extras=True)
    props: list[str] = []
    columns: list[ColumnMeta] = []
    for name, hint in hints.items():
        if name.startswith("_") or get_origin(hint) is ClassVar:
            continue
        props.append(name)
        marker = _column_marker(hint)
        if marker is not None:
            columns.append(replace(marker, name=name))
    return TableMeta(cls=cls, name=cls.__name__, alias=alias, props=tuple(props), columns=tuple(columns))


class MetaRegistry:
    """Maps table classes to their metadata."""

    def __init__(self) -> None:
        self._tables: dict[type, TableMeta] = {}

    def __contains__(self, cls: object) -> bool:
        return cls in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def register(self, cls: type, alias: Optional[str] = None) -> TableMeta:
        """Describe ``cls`` from its annotations and register it."""
        meta = _describe(cls, alias)
        self._tables[cls] = meta
        logger.debug("Registered table %s with %d columns", meta.table_name, len(meta.columns))
        return meta

    def add(self, meta: TableMeta) -> TableMeta:
        """Register metadata built elsewhere."""
        self._tables[meta.cls] = meta
        return meta

    def get(self, cls: Any) -> TableMeta:
        """Return the metadata of ``cls``.

        Raises:
            UnregisteredTableError: ``cls`` was never registered.
        """
        try:
            return self._tables[cls]
        except (KeyError, TypeError):
            raise UnregisteredTableError(cls) from None


default_registry = MetaRegistry()


def table(
    cls: Optional[T] = None, *, alias: Optional[str] = None, registry: Optional[MetaRegistry] = None
) -> Union[T, Callable[[T], T]]:
    """Class decorator registering a table class.

    Usable bare (``@table``) or called (``@table(alias="people")``).

    Args:
        cls: The class when used without arguments.
        alias: Table name when it differs from the class name.
        registry: Registry to record the table in, the global one by default.

    Returns:
        The class, unchanged.
    """
    target = registry if registry is not None else default_registry

    def decorator(inner: T) -> T:
        target.register(inner, alias)
        return inner

    if cls is None:
        return decorator
    return decorator(cls)


def meta_of(cls: Any) -> TableMeta:
    """Return the globally registered metadata of ``cls``."""
    return default_registry.get(cls)
