from sqlcompose.builder._base import JoinDefinition, QueryBuilder, WhereCondition
from sqlcompose.builder._clauses import (
    BuiltJoin,
    ClauseBuilder,
    GroupByBuilder,
    HavingBuilder,
    JoinBuilder,
    OrderByBuilder,
)
from sqlcompose.builder._compose import FragmentComposer, resolve_fragment
from sqlcompose.builder._delete import DeleteQuery
from sqlcompose.builder._select import SelectQuery
from sqlcompose.builder._update import UpdateQuery
from sqlcompose.builder._where import WhereQuery

__all__ = (
    "BuiltJoin",
    "ClauseBuilder",
    "DeleteQuery",
    "FragmentComposer",
    "GroupByBuilder",
    "HavingBuilder",
    "JoinBuilder",
    "JoinDefinition",
    "OrderByBuilder",
    "QueryBuilder",
    "SelectQuery",
    "UpdateQuery",
    "WhereCondition",
    "WhereQuery",
    "resolve_fragment",
)
