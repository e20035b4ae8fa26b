"""Debug helpers for looking at built statements and result rows."""

from collections.abc import Mapping, Sequence
from typing import Any

import msgspec
from rich import box, get_console
from rich.console import Console
from rich.table import Table

from sqlcompose._serialization import encode_json
from sqlcompose.protocols import FragmentLike, SupportsBuild

__all__ = ("dump", "dump_table", "print_dump", "print_table")


def dump(obj: Any) -> str:
    """Pretty text for a statement, fragment, builder or plain value.

    Builders are built first. Anything with ``sql`` and ``params`` renders as the SQL
    followed by a ``PARAMS`` line; other values render as indented JSON.
    """
    if isinstance(obj, SupportsBuild) and not isinstance(obj, type) and not isinstance(obj, FragmentLike):
        obj = obj.build()
    if isinstance(obj, FragmentLike) and not isinstance(obj, Mapping):
        return f"{obj.sql}\nPARAMS {dump(dict(obj.params))}\n"
    return msgspec.json.format(encode_json(obj), indent=4)


def dump_table(rows: Sequence[Mapping[str, Any]]) -> str:
    """Render rows as an aligned text table, one column per distinct key.

    Numbers are right aligned, ``None`` renders as an empty cell.
    """
    keys = list(dict.fromkeys(key for row in rows for key in row))
    numeric = {
        key: all(isinstance(row.get(key), (int, float)) for row in rows if row.get(key) is not None) for key in keys
    }
    table = Table(box=box.ASCII, show_edge=True, header_style="", pad_edge=True)
    for key in keys:
        table.add_column(key, justify="right" if numeric[key] else "left", no_wrap=True)
    for row in rows:
        table.add_row(*("" if row.get(key) is None else str(row.get(key)) for key in keys))

    console = Console(color_system=None, width=1_000, highlight=False)
    with console.capture() as capture:
        console.print(table)
    return "\n".join(line.rstrip() for line in capture.get().splitlines()) + "\n"


def print_dump(obj: Any) -> None:
    get_console().print(dump(obj), markup=False, highlight=False)


def print_table(rows: Sequence[Mapping[str, Any]]) -> None:
    get_console().print(dump_table(rows), markup=False, highlight=False)
