"""DELETE statement builder."""

from sqlcompose.builder._where import WhereQuery
from sqlcompose.exceptions import InvalidArgumentError, MissingWhereError
from sqlcompose.fragment import Statement

__all__ = ("DeleteQuery",)


class DeleteQuery(WhereQuery):
    """Builds ``DELETE`` statements, refusing to delete every row unless forced."""

    def build(self, force: bool = False) -> Statement:  # type: ignore[override]
        if self._joins:
            msg = "DELETE does not support joins, filter with a subquery instead"
            raise InvalidArgumentError(msg)
        if not self._wheres and not force:
            raise MissingWhereError("DELETE")
        return self._statement(f"DELETE FROM {self._table_sql(self.ref)}{self._build_where()}")
