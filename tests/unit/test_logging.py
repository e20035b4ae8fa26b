"""Unit tests for structured logging."""

import logging
import sys

import pytest

from sqlcompose import ComposeConfig, SQLFactory
from sqlcompose._serialization import decode_json
from sqlcompose.fragment import Fragment
from sqlcompose.parameters import ParamBag
from sqlcompose.utils.logging import (
    ROOT_LOGGER_NAME,
    CorrelationIDFilter,
    StructuredFormatter,
    configure_logging,
    get_correlation_id,
    get_logger,
    log_with_context,
    set_correlation_id,
)
from tests.unit.models import Contact


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_get_logger_namespace() -> None:
    assert get_logger().name == ROOT_LOGGER_NAME
    assert get_logger("builder").name == "sqlcompose.builder"
    assert get_logger("sqlcompose.parameters").name == "sqlcompose.parameters"


def test_get_logger_adds_filter_once() -> None:
    logger = get_logger("filters")
    get_logger("filters")
    assert sum(isinstance(f, CorrelationIDFilter) for f in logger.filters) == 1


@pytest.mark.usefixtures("reset_logging")
def test_correlation_id() -> None:
    assert get_correlation_id() is None
    set_correlation_id("req-1")
    assert get_correlation_id() == "req-1"

    record = logging.LogRecord("sqlcompose.test", logging.INFO, __file__, 1, "hello", (), None)
    assert CorrelationIDFilter().filter(record)
    assert record.correlation_id == "req-1"  # type: ignore[attr-defined]


@pytest.mark.usefixtures("reset_logging")
def test_structured_formatter() -> None:
    """Test records are formatted as JSON with extra fields and correlation id."""
    set_correlation_id("req-2")
    record = logging.LogRecord("sqlcompose.test", logging.WARNING, __file__, 42, "hello %s", ("world",), None)
    record.extra_fields = {"sql": "SELECT 1", "parameter_count": 0}  # type: ignore[attr-defined]

    payload = decode_json(StructuredFormatter().format(record))

    assert payload["message"] == "hello world"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "sqlcompose.test"
    assert payload["correlation_id"] == "req-2"
    assert payload["sql"] == "SELECT 1"
    assert payload["parameter_count"] == 0


def test_structured_formatter_collapses_statement_sql() -> None:
    record = logging.LogRecord("sqlcompose.builder", logging.DEBUG, __file__, 1, "Built statement", (), None)
    record.extra_fields = {"sql": 'SELECT "id"\n  FROM "Contact"\n WHERE "id" = $id'}  # type: ignore[attr-defined]

    payload = decode_json(StructuredFormatter().format(record))
    assert payload["sql"] == 'SELECT "id" FROM "Contact" WHERE "id" = $id'
    assert record.extra_fields["sql"].count("\n") == 2  # type: ignore[attr-defined]


def test_structured_formatter_includes_exception() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord(
            "sqlcompose.test", logging.ERROR, __file__, 1, "failed", (), exc_info=sys.exc_info()
        )

    payload = decode_json(StructuredFormatter().format(record))
    assert "ValueError: boom" in payload["exception"]


@pytest.mark.usefixtures("reset_logging")
def test_configure_logging() -> None:
    """Test configuration installs one handler and replaces earlier ones."""
    first = ListHandler()
    logger = configure_logging(level="info", handler=first)

    assert logger is logging.getLogger(ROOT_LOGGER_NAME)
    assert logger.level == logging.INFO
    assert logger.propagate is False
    assert logger.handlers == [first]
    assert isinstance(first.formatter, StructuredFormatter)

    second = ListHandler()
    configure_logging(handler=second, structured=False)
    assert logger.level == logging.DEBUG
    assert logger.handlers == [second]
    assert not isinstance(second.formatter, StructuredFormatter)


@pytest.mark.usefixtures("reset_logging")
def test_configure_logging_defaults_to_stderr() -> None:
    logger = configure_logging()
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.StreamHandler)
    assert logger.handlers[0].stream is sys.stderr  # type: ignore[attr-defined]


@pytest.mark.usefixtures("reset_logging")
def test_log_with_context_respects_level() -> None:
    handler = ListHandler()
    configure_logging(level="INFO", handler=handler)
    logger = get_logger("context")

    log_with_context(logger, logging.DEBUG, "hidden", value=1)
    log_with_context(logger, logging.INFO, "shown", value=2)

    assert [r.getMessage() for r in handler.records] == ["shown"]
    assert handler.records[0].extra_fields == {"value": 2}  # type: ignore[attr-defined]


def test_statement_logging(caplog: pytest.LogCaptureFixture) -> None:
    """Test builders log each built statement when configured to."""
    caplog.set_level(logging.DEBUG, logger=ROOT_LOGGER_NAME)
    factory = SQLFactory(config=ComposeConfig(log_statements=True))

    statement = factory.from_(Contact).id_equals(1).build()

    records = [r for r in caplog.records if r.getMessage() == "Built statement"]
    assert len(records) == 1
    assert records[0].name == "sqlcompose.builder"
    assert records[0].extra_fields == {  # type: ignore[attr-defined]
        "statement": "SelectQuery",
        "sql": statement.sql,
        "parameter_count": 1,
    }


def test_statement_logging_disabled_by_default(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger=ROOT_LOGGER_NAME)
    SQLFactory().from_(Contact).build()
    assert not [r for r in caplog.records if r.getMessage() == "Built statement"]


def test_renumbering_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger=ROOT_LOGGER_NAME)
    bag = ParamBag({"_1": "a"})

    bag.merge(Fragment("$_1 = $_2", {"_1": "b", "_2": "c"}))

    records = [r for r in caplog.records if r.getMessage() == "Renumbered parameters"]
    assert len(records) == 1
    assert records[0].name == "sqlcompose.parameters"
    assert records[0].extra_fields == {"renamed": {"_1": "_2", "_2": "_3"}}  # type: ignore[attr-defined]
