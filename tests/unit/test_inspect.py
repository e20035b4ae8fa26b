"""Unit tests for the inspection helpers."""

import datetime
from decimal import Decimal
from pathlib import PurePosixPath

import pytest

from sqlcompose import sql
from sqlcompose._serialization import decode_json, encode_json
from sqlcompose.inspect import dump, dump_table, print_dump, print_table
from tests.unit.models import Contact


class Token:
    def __repr__(self) -> str:
        return "Token()"


def test_dump_fragment() -> None:
    fragment = sql('"id" = {}', 1)
    assert dump(fragment) == '"id" = $_1\nPARAMS {\n    "_1": 1\n}\n'


def test_dump_builder() -> None:
    """Test builders are built before dumping."""
    text = dump(sql.from_(Contact).where(equals={"city": "Austin"}))

    assert text.startswith('SELECT "id", "firstName"')
    assert text.endswith('WHERE "city" = $city\nPARAMS {\n    "city": "Austin"\n}\n')


def test_dump_values() -> None:
    assert dump([{"id": 1}]) == '[\n    {\n        "id": 1\n    }\n]'
    assert dump({"when": datetime.date(2024, 1, 2)}) == '{\n    "when": "2024-01-02"\n}'


def test_dump_table() -> None:
    """Test numbers are right aligned and missing values are blank."""
    rows = [{"id": 1, "name": "Alice"}, {"id": 10, "name": None, "city": "Austin"}]
    text = dump_table(rows)
    lines = text.splitlines()

    assert text.endswith("\n")
    assert all(line == line.rstrip() for line in lines)
    assert any(line.split("|")[1:4] == [" id ", " name  ", " city   "] for line in lines)
    assert "|  1 | Alice |        |" in text
    assert "| 10 |       | Austin |" in text


def test_print_helpers(capsys: pytest.CaptureFixture[str]) -> None:
    print_dump(sql('"id" = {}', 1))
    print_table([{"id": 1}])

    out = capsys.readouterr().out
    assert "PARAMS" in out
    assert "| id |" in out


def test_encode_json_fallbacks() -> None:
    data = {"amount": Decimal("2.50"), "tags": {"a"}, "token": Token(), "path": PurePosixPath("/tmp/x.sql")}
    encoded = encode_json(data)

    assert decode_json(encoded) == {"amount": "2.50", "tags": ["a"], "token": "Token()", "path": "/tmp/x.sql"}
    assert encode_json([1], as_bytes=True) == b"[1]"
