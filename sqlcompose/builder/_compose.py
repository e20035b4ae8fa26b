"""Template evaluation: literal text plus values in, one :class:`Fragment` out."""

from collections.abc import Mapping, Sequence
from string import Formatter
from typing import TYPE_CHECKING, Any, Optional

from sqlcompose.config import DEFAULT_INDENT
from sqlcompose.exceptions import CompositionError, InvalidArgumentError
from sqlcompose.fragment import Fragment, Raw, Statement
from sqlcompose.parameters import ParamBag
from sqlcompose.protocols import FragmentLike, SupportsBuild
from sqlcompose.refs import ColumnRef, TableRef
from sqlcompose.utils.callables import call_with_refs
from sqlcompose.utils.text import indent_lines
from sqlcompose.utils.type_guards import is_expression, is_parameter_value, is_value_collection

if TYPE_CHECKING:
    from sqlcompose.dialects import Dialect

__all__ = ("FragmentComposer",)

_FORMATTER = Formatter()


class FragmentComposer:
    """Evaluates ``"{} = {}"`` style templates against a dialect.

    Each ``{}`` marker takes the next value (``{0}``, ``{1}`` pick one explicitly,
    ``{{`` and ``}}`` are literal braces). How a value renders depends on its type:

    * column references render as quoted, alias-qualified columns
    * table references render as the quoted table name
    * :class:`Raw` text and sqlglot expressions are inlined
    * fragments, statements and query builders are inlined and their parameters merged
    * lists, tuples and sets become comma separated parameter lists
    * scalar values become positional parameters
    * ``None`` renders as nothing
    """

    def __init__(self, dialect: "Dialect", indent: str = DEFAULT_INDENT) -> None:
        self.dialect = dialect
        self.indent = indent

    def compose(self, template: str, *values: Any) -> Fragment:
        """Evaluate ``template`` with ``values``.

        A template without values is literal SQL and is not scanned for markers.

        Raises:
            CompositionError: A marker has no value, a value is unused, or a value
                cannot be rendered.
        """
        if not values:
            return Fragment(template)

        try:
            parsed = list(_FORMATTER.parse(template))
        except ValueError as e:
            msg = f"Malformed SQL template {template!r}: {e}"
            raise CompositionError(msg) from e

        bag = ParamBag()
        parts: list[str] = []
        used: set[int] = set()
        auto_index = 0
        for literal, field_name, format_spec, conversion in parsed:
            parts.append(literal)
            if field_name is None:
                continue
            if format_spec or conversion:
                msg = f"Format specs are not supported in SQL templates: {template!r}"
                raise CompositionError(msg)
            if field_name == "":
                index = auto_index
                auto_index += 1
            elif field_name.isdigit():
                index = int(field_name)
            else:
                msg = f"Only positional markers are supported in SQL templates, got {{{field_name}}}"
                raise CompositionError(msg)
            if index >= len(values):
                msg = f"Template references value {index} but only {len(values)} values were given"
                raise CompositionError(msg)
            used.add(index)
            parts.append(self.render(values[index], bag))

        if len(used) != len(values):
            msg = f"Template uses {len(used)} of the {len(values)} values given"
            raise CompositionError(msg)
        return Fragment("".join(parts), bag.to_dict())

    def render(self, value: Any, bag: ParamBag) -> str:
        """Render one template value, recording any parameters in ``bag``."""
        if value is None:
            return ""
        if isinstance(value, ColumnRef):
            return str(value)
        if isinstance(value, TableRef):
            return value.table
        if isinstance(value, Raw):
            return value.sql
        if isinstance(value, (Fragment, Statement)):
            return self._inline(value.sql, value.params, bag)
        if is_parameter_value(value):
            return f"${bag.add(value)}"
        if is_expression(value):
            return value.sql(dialect=self.dialect.sqlglot_dialect)
        if is_value_collection(value):
            return ",".join(f"${bag.add(self._collection_item(item))}" for item in value)
        from sqlcompose.builder._clauses import ClauseBuilder

        if isinstance(value, ClauseBuilder):
            msg = f"{type(value).__name__} needs table refs, pass it to the matching query method instead"
            raise CompositionError(msg)
        if isinstance(value, SupportsBuild) and not isinstance(value, type):
            built = value.build()
            if isinstance(built, FragmentLike):
                return self._inline(built.sql, built.params, bag)
        msg = f"Cannot use a value of type {type(value).__name__} in an SQL template"
        raise CompositionError(msg)

    def _inline(self, sql: str, params: Mapping[str, Any], bag: ParamBag) -> str:
        (text,) = bag.merge_params([sql], params)
        return indent_lines(text, self.indent)

    @staticmethod
    def _collection_item(item: Any) -> Any:
        if item is None or is_parameter_value(item):
            return item
        msg = f"Cannot bind a collection item of type {type(item).__name__}"
        raise CompositionError(msg)


def resolve_fragment(
    composer: FragmentComposer,
    arg: Any,
    values: Sequence[Any] = (),
    refs: Sequence[TableRef] = (),
    params: Optional[Mapping[str, Any]] = None,
    *,
    allow_callable: bool = True,
) -> Fragment:
    """Turn a builder argument into a fragment.

    Args:
        composer: Composer used for template strings.
        arg: A template string, fragment, statement, column or table ref, query
            builder, or a callable receiving ``refs`` and returning one of those.
        values: Template values, only valid with a template string.
        refs: Table refs passed to callables.
        params: Named parameters for ``arg`` when it is raw SQL with ``$name``
            placeholders instead of a template.
        allow_callable: Accept callables.

    Raises:
        InvalidArgumentError: ``arg`` has an unsupported shape.

    Returns:
        The resolved fragment.
    """
    if isinstance(arg, str):
        if params is not None:
            if values:
                msg = "Pass either template values or named params, not both"
                raise InvalidArgumentError(msg)
            return Fragment(arg, params)
        return composer.compose(arg, *values)
    if values or params is not None:
        msg = f"Values and params can only accompany SQL text, not {type(arg).__name__}"
        raise InvalidArgumentError(msg)
    if isinstance(arg, Fragment):
        return arg
    if isinstance(arg, Statement):
        return arg.to_fragment()
    if isinstance(arg, (ColumnRef, TableRef)):
        return Fragment(composer.render(arg, ParamBag()))
    if allow_callable and callable(arg) and not isinstance(arg, type):
        return resolve_fragment(composer, call_with_refs(arg, refs), refs=refs, allow_callable=False)
    if isinstance(arg, SupportsBuild) and not isinstance(arg, type):
        built = arg.build()
        if isinstance(built, FragmentLike):
            return Fragment(built.sql, built.params)
    msg = f"Expected SQL text, a Fragment, a builder or a callable, got {type(arg).__name__}"
    raise InvalidArgumentError(msg)
