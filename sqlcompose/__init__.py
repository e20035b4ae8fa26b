"""SQLCompose: typed SQL fragments and statement builders."""

from sqlcompose import builder, dialects, exceptions, inspect, meta, utils
from sqlcompose.__metadata__ import __version__
from sqlcompose._sql import SQLFactory
from sqlcompose.builder import (
    DeleteQuery,
    GroupByBuilder,
    HavingBuilder,
    JoinBuilder,
    OrderByBuilder,
    SelectQuery,
    UpdateQuery,
    WhereQuery,
)
from sqlcompose.config import ComposeConfig
from sqlcompose.dialects import (
    DefaultNamingStrategy,
    Dialect,
    MySQLDialect,
    PostgresDialect,
    SnakeCaseNamingStrategy,
    SqliteDialect,
)
from sqlcompose.exceptions import (
    CompositionError,
    InvalidArgumentError,
    MetadataError,
    MissingWhereError,
    NotAColumnError,
    ParameterCollisionError,
    SQLComposeError,
    UnknownColumnError,
    UnknownPropertyError,
    UnregisteredTableError,
)
from sqlcompose.fragment import Fragment, Raw, Statement
from sqlcompose.meta import ColumnMeta, MetaRegistry, TableMeta, column, meta_of, table
from sqlcompose.parameters import ParameterStyle
from sqlcompose.refs import ColumnRef, TableRef

sqlite = SQLFactory("sqlite")
postgres = SQLFactory("postgres")
mysql = SQLFactory("mysql")
sql = sqlite

__all__ = (
    "ColumnMeta",
    "ColumnRef",
    "ComposeConfig",
    "CompositionError",
    "DefaultNamingStrategy",
    "DeleteQuery",
    "Dialect",
    "Fragment",
    "GroupByBuilder",
    "HavingBuilder",
    "InvalidArgumentError",
    "JoinBuilder",
    "MetaRegistry",
    "MetadataError",
    "MissingWhereError",
    "MySQLDialect",
    "NotAColumnError",
    "OrderByBuilder",
    "ParameterCollisionError",
    "ParameterStyle",
    "PostgresDialect",
    "Raw",
    "SQLComposeError",
    "SQLFactory",
    "SelectQuery",
    "SnakeCaseNamingStrategy",
    "SqliteDialect",
    "Statement",
    "TableMeta",
    "TableRef",
    "UnknownColumnError",
    "UnknownPropertyError",
    "UnregisteredTableError",
    "UpdateQuery",
    "WhereQuery",
    "__version__",
    "builder",
    "column",
    "dialects",
    "exceptions",
    "inspect",
    "meta",
    "meta_of",
    "mysql",
    "postgres",
    "sql",
    "sqlite",
    "table",
    "utils",
)
