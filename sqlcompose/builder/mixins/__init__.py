from sqlcompose.builder.mixins._group_by import GroupByClauseMixin
from sqlcompose.builder.mixins._join import JoinClauseMixin
from sqlcompose.builder.mixins._limit_offset import LimitOffsetClauseMixin
from sqlcompose.builder.mixins._order_by import OrderByClauseMixin
from sqlcompose.builder.mixins._where import WhereClauseMixin

__all__ = (
    "GroupByClauseMixin",
    "JoinClauseMixin",
    "LimitOffsetClauseMixin",
    "OrderByClauseMixin",
    "WhereClauseMixin",
)
