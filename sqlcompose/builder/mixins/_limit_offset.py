from typing import TYPE_CHECKING, Optional, cast

from typing_extensions import Self

from sqlcompose.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from sqlcompose.builder._base import QueryBuilder

__all__ = ("LimitOffsetClauseMixin",)


class LimitOffsetClauseMixin:
    """Mixin providing LIMIT and OFFSET through the dialect's ``sql_limit``."""

    def _init_limit(self) -> None:
        self._take: Optional[int] = None
        self._skip: Optional[int] = None
        self._limit: str = ""
        self._limit_keys: tuple[str, ...] = ()

    def limit(self, take: Optional[int] = None, skip: Optional[int] = None) -> Self:
        """Set how many rows to return and how many to skip.

        ``limit()`` with neither value removes the clause. The values are bound under
        keys of their own; a caller placeholder named like them keeps its value.

        Raises:
            InvalidArgumentError: A value is negative or not an integer.
        """
        for name, value in (("take", take), ("skip", skip)):
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
                msg = f"{name} must be a non-negative integer, got {value!r}"
                raise InvalidArgumentError(msg)

        builder = cast("QueryBuilder", self)
        builder._params.remove(*self._limit_keys)
        self._take, self._skip = take, skip
        if take is None and skip is None:
            self._limit, self._limit_keys = "", ()
            return self
        self._limit, self._limit_keys = builder._params.merge_generated(builder.dialect.sql_limit(skip, take))
        return self

    def take(self, rows: Optional[int]) -> Self:
        return self.limit(rows, self._skip)

    def skip(self, rows: Optional[int]) -> Self:
        return self.limit(self._take, rows)

    def _build_limit(self) -> str:
        return f"\n {self._limit}" if self._limit else ""
