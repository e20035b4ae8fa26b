"""Table references and the column expressions they produce."""

from typing import TYPE_CHECKING, Any, Optional, Union

from sqlcompose.exceptions import UnknownColumnError

if TYPE_CHECKING:
    from sqlcompose.dialects import Dialect
    from sqlcompose.meta import TableMeta

__all__ = ("ColumnRef", "TableRef")


class ColumnRef:
    """A rendered column expression such as ``c."firstName"``.

    Further attribute or item access walks into structured column values and renders
    the literal path (``c.address.city``, ``c.history[0]``) without any lookup.
    """

    __slots__ = ("_path", "_sql")

    def __init__(self, sql: str, path: str) -> None:
        self._sql = sql
        self._path = path

    def __getattr__(self, name: str) -> "ColumnRef":
        if name.startswith("_"):
            raise AttributeError(name)
        path = f"{self._path}.{name}"
        return ColumnRef(path, path)

    def __getitem__(self, key: Union[int, str]) -> "ColumnRef":
        path = f"{self._path}[{key}]" if isinstance(key, int) else f'{self._path}["{key}"]'
        return ColumnRef(path, path)

    def __str__(self) -> str:
        return self._sql

    def __repr__(self) -> str:
        return f"ColumnRef({self._sql!r})"


class TableRef:
    """Binds a table's metadata to the alias it has in a query.

    Columns are reached by property name: ``ref.first_name``, ``ref["first_name"]`` or
    ``ref.column("first_name")``. Properties that collide with the attributes below
    (``cls``, ``alias``, ``meta``, ``table``...) need the item or ``column()`` form.
    An empty alias renders unqualified column names.
    """

    __slots__ = ("_alias", "_dialect", "_meta")

    def __init__(self, meta: "TableMeta", dialect: "Dialect", alias: Optional[str] = None) -> None:
        self._meta = meta
        self._dialect = dialect
        self._alias = alias or ""

    @property
    def cls(self) -> type:
        return self._meta.cls

    @property
    def meta(self) -> "TableMeta":
        return self._meta

    @property
    def dialect(self) -> "Dialect":
        return self._dialect

    @property
    def alias(self) -> str:
        return self._alias

    @property
    def table(self) -> str:
        """The quoted table name."""
        return self._dialect.quote_table(self._meta.table_name)

    def column(self, prop: str) -> ColumnRef:
        """Render the column mapped to ``prop``.

        Raises:
            UnknownColumnError: ``prop`` has no column in the table's metadata.
        """
        col = self._meta.column(prop)
        if col is None:
            raise UnknownColumnError(self._meta.name, prop)
        prefix = f"{self._alias}." if self._alias else ""
        return ColumnRef(prefix + self._dialect.quote_column(col.column_name), prefix + prop)

    def as_(self, alias: Optional[str]) -> "TableRef":
        return TableRef(self._meta, self._dialect, alias)

    def __getitem__(self, prop: str) -> ColumnRef:
        return self.column(prop)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.column(name)

    def __str__(self) -> str:
        return self.table

    def __repr__(self) -> str:
        if self._alias:
            return f"TableRef({self._meta.name} as {self._alias})"
        return f"TableRef({self._meta.name})"
