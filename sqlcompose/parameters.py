"""Parameter bags and placeholder handling.

Composed SQL always uses ``$key`` placeholders. Keys are either *positional*
(``_1``, ``_2``... assigned by the engine and freely renumbered while fragments are
merged) or *named* (chosen by the caller; renamed only when they meet a key the
engine generated for its own SQL).
"""

import logging
import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from enum import Enum
from typing import Any, Final, Optional, Union

from sqlcompose.exceptions import InvalidArgumentError, ParameterCollisionError
from sqlcompose.utils.logging import get_logger, log_with_context

__all__ = (
    "ParamBag",
    "ParameterStyle",
    "compile_placeholders",
    "is_positional_key",
    "placeholder_keys",
    "positional_index",
    "rewrite_placeholders",
    "sort_params",
)

logger = get_logger("parameters")

_PLACEHOLDER_REGEX: Final = re.compile(
    r"""
    (?P<dquote>"(?:[^"\\]|\\.)*") |
    (?P<squote>'(?:[^'\\]|\\.)*') |
    (?P<backtick>`[^`]*`) |
    (?P<dollar_quoted_string>\$(?P<dollar_quote_tag_inner>\w*)?\$(?:.|\n)*?\$(?P=dollar_quote_tag_inner)\$) |
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*(?:[^\*]|\*(?!/))*\*/) |
    (?P<placeholder>\$(?P<key>\w+))
    """,
    re.VERBOSE | re.MULTILINE | re.DOTALL,
)

_POSITIONAL_KEY_REGEX: Final = re.compile(r"^_?(\d+)$")


class ParameterStyle(str, Enum):
    """Placeholder styles a statement can be compiled to."""

    QMARK = "qmark"
    NUMERIC = "numeric"
    NAMED_COLON = "named_colon"
    NAMED_AT = "named_at"
    NAMED_DOLLAR = "named_dollar"
    NAMED_PYFORMAT = "pyformat_named"
    POSITIONAL_PYFORMAT = "pyformat_positional"

    def __str__(self) -> str:
        return self.value


POSITIONAL_STYLES: Final = frozenset(
    {ParameterStyle.QMARK, ParameterStyle.NUMERIC, ParameterStyle.POSITIONAL_PYFORMAT}
)
PYFORMAT_STYLES: Final = frozenset({ParameterStyle.NAMED_PYFORMAT, ParameterStyle.POSITIONAL_PYFORMAT})


def positional_index(key: str) -> Optional[int]:
    """Return the index of a positional key (``_3`` or ``3``), ``None`` for named keys."""
    match = _POSITIONAL_KEY_REGEX.match(key)
    return int(match.group(1)) if match else None


def is_positional_key(key: str) -> bool:
    return positional_index(key) is not None


def placeholder_keys(sql: str) -> list[str]:
    """Keys referenced by ``$key`` placeholders, in order of appearance."""
    return [m.group("key") for m in _PLACEHOLDER_REGEX.finditer(sql) if m.group("key") is not None]


def rewrite_placeholders(sql: str, renames: Mapping[str, str]) -> str:
    """Rename placeholders in a single pass.

    Quoted strings, quoted identifiers and comments are left untouched.
    """
    if not renames:
        return sql

    def _replace(match: "re.Match[str]") -> str:
        key = match.group("key")
        if key is None or key not in renames:
            return match.group(0)
        return f"${renames[key]}"

    return _PLACEHOLDER_REGEX.sub(_replace, sql)


def _same_value(existing: Any, value: Any) -> bool:
    if existing is value:
        return True
    if type(existing) is not type(value):
        return False
    try:
        return bool(existing == value)
    except Exception:  # noqa: BLE001
        return False


def sort_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Order parameters positional keys first (numerically), then named keys alphabetically."""

    def _key(item: tuple[str, Any]) -> tuple[int, int, str]:
        index = positional_index(item[0])
        if index is None:
            return (1, 0, item[0])
        return (0, index, item[0])

    return dict(sorted(params.items(), key=_key))


class ParamBag:
    """Ordered parameter map with collision-free merging.

    Named keys the engine binds for its own SQL (shorthand predicates, SET
    assignments, LIMIT and OFFSET) are *generated*. Caller SQL never shares them:
    an incoming named key matching a generated key moves to a fresh positional key,
    so generated values can be replaced or removed without touching caller SQL.
    """

    __slots__ = ("_generated", "_params")

    def __init__(self, params: Optional[Mapping[str, Any]] = None, generated: Iterable[str] = ()) -> None:
        self._params: dict[str, Any] = dict(params) if params else {}
        self._generated: set[str] = set(generated)

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __getitem__(self, key: str) -> Any:
        return self._params[key]

    def __repr__(self) -> str:
        return f"ParamBag({self._params!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ParamBag):
            return self._params == other._params
        if isinstance(other, Mapping):
            return self._params == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    @property
    def generated(self) -> frozenset[str]:
        """Named keys bound by the engine rather than by caller SQL."""
        return frozenset(self._generated)

    def items(self) -> "Iterable[tuple[str, Any]]":
        return self._params.items()

    def max_position(self) -> int:
        """Highest positional index in the bag, 0 when there is none."""
        indexes = [i for i in (positional_index(k) for k in self._params) if i is not None]
        return max(indexes, default=0)

    def next_key(self) -> str:
        return f"_{self.max_position() + 1}"

    def add(self, value: Any) -> str:
        """Store ``value`` under the next positional key and return that key."""
        key = self.next_key()
        self._params[key] = value
        return key

    def bind(self, name: str, value: Any) -> str:
        """Bind an engine-generated ``value`` to the named key ``name`` when it is free.

        A generated key already holding an equal value is reused. Otherwise, and
        always when caller SQL owns ``name``, the value gets a fresh positional key.
        """
        if name not in self._params:
            self._params[name] = value
            self._generated.add(name)
            return name
        if name in self._generated and _same_value(self._params[name], value):
            return name
        return self.add(value)

    def remove(self, *keys: str) -> None:
        for key in keys:
            self._params.pop(key, None)
            self._generated.discard(key)

    def merge(self, fragment: Any) -> str:
        """Merge a fragment's parameters and return its (possibly rewritten) SQL.

        Args:
            fragment: Any object with ``sql`` and ``params`` attributes.

        Returns:
            The fragment SQL with placeholders renamed to the keys used in this bag.
        """
        return self.merge_params([fragment.sql], fragment.params)[0]

    def merge_params(self, texts: Sequence[str], params: Mapping[str, Any]) -> list[str]:
        """Merge ``params`` and rewrite their placeholders in every one of ``texts``.

        Keys not in the bag are inserted unchanged. When any incoming positional key is
        already taken, or an incoming named key matches a generated key, every incoming
        positional key and every such named key is renumbered after the highest
        positional key in the bag, in the incoming order. Named keys held by caller SQL
        must not be rebound to a different value.

        Raises:
            ParameterCollisionError: A named key is already bound to a different value.
        """
        for key, value in params.items():
            if (
                key in self._params
                and key not in self._generated
                and not is_positional_key(key)
                and not _same_value(self._params[key], value)
            ):
                raise ParameterCollisionError(key)

        movable = [key for key in params if is_positional_key(key) or key in self._generated]
        renames: dict[str, str] = {}
        if any(key in self._params for key in movable):
            start = self.max_position()
            renames = {key: f"_{start + offset}" for offset, key in enumerate(movable, 1)}
            log_with_context(logger, logging.DEBUG, "Renumbered parameters", renamed=renames)

        for key, value in params.items():
            self._params[renames.get(key, key)] = value
        return [rewrite_placeholders(text, renames) for text in texts]

    def merge_generated(self, fragment: Any) -> tuple[str, tuple[str, ...]]:
        """Merge an engine-generated fragment under keys nothing else in the bag uses.

        Incoming keys already in the bag move to fresh positional keys instead of
        being shared, so removing the returned keys never unbinds other SQL.

        Returns:
            The rewritten SQL and the keys this merge inserted.
        """
        renames: dict[str, str] = {}
        inserted: list[str] = []
        for key, value in fragment.params.items():
            new_key = key
            if key in self._params:
                new_key = renames[key] = self.next_key()
            elif not is_positional_key(key):
                self._generated.add(key)
            self._params[new_key] = value
            inserted.append(new_key)
        return rewrite_placeholders(fragment.sql, renames), tuple(inserted)

    def copy(self) -> "ParamBag":
        return ParamBag(self._params, self._generated)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._params)

    def sorted(self) -> dict[str, Any]:
        return sort_params(self._params)


def compile_placeholders(
    sql: str, params: Mapping[str, Any], style: Union[ParameterStyle, str]
) -> tuple[str, Union[dict[str, Any], list[Any]]]:
    """Convert ``$key`` placeholders to a driver placeholder style.

    Args:
        sql: SQL using ``$key`` placeholders.
        params: Values bound to the keys.
        style: Target placeholder style.

    Raises:
        InvalidArgumentError: The style is unknown or a placeholder has no bound value.

    Returns:
        The converted SQL and either a mapping (named styles) or a list (positional styles).
    """
    try:
        target = ParameterStyle(style)
    except ValueError:
        msg = f"Unknown parameter style {style!r}"
        raise InvalidArgumentError(msg) from None

    if target is ParameterStyle.NAMED_DOLLAR:
        return sql, dict(params)

    escape_percent = target in PYFORMAT_STYLES
    parts: list[str] = []
    ordered: list[Any] = []
    numeric: dict[str, int] = {}
    current_pos = 0
    for match in _PLACEHOLDER_REGEX.finditer(sql):
        key = match.group("key")
        if key is None:
            continue
        if key not in params:
            msg = f"Placeholder ${key} has no bound parameter"
            raise InvalidArgumentError(msg)
        text = sql[current_pos : match.start()]
        parts.append(text.replace("%", "%%") if escape_percent else text)
        if target is ParameterStyle.QMARK:
            parts.append("?")
            ordered.append(params[key])
        elif target is ParameterStyle.POSITIONAL_PYFORMAT:
            parts.append("%s")
            ordered.append(params[key])
        elif target is ParameterStyle.NUMERIC:
            if key not in numeric:
                ordered.append(params[key])
                numeric[key] = len(ordered)
            parts.append(f"${numeric[key]}")
        elif target is ParameterStyle.NAMED_COLON:
            parts.append(f":{key}")
        elif target is ParameterStyle.NAMED_AT:
            parts.append(f"@{key}")
        else:
            parts.append(f"%({key})s")
        current_pos = match.end()
    tail = sql[current_pos:]
    parts.append(tail.replace("%", "%%") if escape_percent else tail)

    if target in POSITIONAL_STYLES:
        return "".join(parts), ordered
    return "".join(parts), {key: params[key] for key in dict.fromkeys(placeholder_keys(sql))}
