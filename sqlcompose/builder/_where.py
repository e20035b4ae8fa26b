"""Tables, joins and predicates shared by SELECT, UPDATE and DELETE."""

from sqlcompose.builder._base import QueryBuilder
from sqlcompose.builder.mixins import JoinClauseMixin, WhereClauseMixin
from sqlcompose.fragment import Statement

__all__ = ("WhereQuery",)


class WhereQuery(QueryBuilder, JoinClauseMixin, WhereClauseMixin):
    """A FROM list with joins and a WHERE clause.

    Building a bare ``WhereQuery`` renders only its joins and predicates, which is
    useful for splicing them into hand-written statements::

        q = sql.from_(Contact, "c").where(equals={"city": "Austin"})
        sql('SELECT * FROM "Contact" c{}', q)
    """

    def build(self) -> Statement:
        return self._statement(self._build_joins() + self._build_where())
