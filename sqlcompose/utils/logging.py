"""Logging for sqlcompose.

Every module logs through :func:`get_logger`, so records land under the ``sqlcompose``
namespace. Builders report built statements and parameter renumbering at ``DEBUG``
with their details in an ``extra_fields`` mapping, which :class:`StructuredFormatter`
writes out as one JSON object per record.
"""

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Final, Optional, Union

from sqlcompose._serialization import encode_json
from sqlcompose.utils.text import collapse_whitespace

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = (
    "ROOT_LOGGER_NAME",
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME: Final = "sqlcompose"
SIMPLE_FORMAT: Final = "%(asctime)s %(levelname)s %(name)s: %(message)s"

correlation_id_var: "ContextVar[Optional[str]]" = ContextVar("correlation_id", default=None)


def set_correlation_id(correlation_id: Optional[str]) -> None:
    """Tag records logged in the current context, ``None`` clears the tag."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


class StructuredFormatter(logging.Formatter):
    """Format records as JSON.

    Statement SQL is collapsed onto a single line so each record stays one line of
    output. Fields passed to :func:`log_with_context` follow the standard ones.
    """

    def format(self, record: "LogRecord") -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            entry["correlation_id"] = correlation_id

        fields: dict[str, Any] = dict(getattr(record, "extra_fields", None) or {})
        if isinstance(fields.get("sql"), str):
            fields["sql"] = collapse_whitespace(fields["sql"])
        entry.update(fields)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return encode_json(entry)


class CorrelationIDFilter(logging.Filter):
    """Copy the current correlation id onto records."""

    def filter(self, record: "LogRecord") -> bool:
        correlation_id = get_correlation_id()
        if correlation_id:
            record.correlation_id = correlation_id  # type: ignore[attr-defined]
        return True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the ``sqlcompose`` namespace.

    Args:
        name: Logger name, prefixed with ``sqlcompose.`` unless it already is.
            ``None`` returns the root ``sqlcompose`` logger.

    Returns:
        The logger, with a :class:`CorrelationIDFilter` attached.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def configure_logging(
    level: Union[int, str] = logging.DEBUG,
    handler: Optional[logging.Handler] = None,
    structured: bool = True,
) -> logging.Logger:
    """Send sqlcompose records to a single handler.

    Handlers from an earlier call are replaced and records stop propagating to the
    root logger. Statement records are only emitted when the factory's
    ``ComposeConfig.log_statements`` is set.

    Args:
        level: A ``logging`` level or its name.
        handler: Where records go, a ``stderr`` stream handler by default.
        structured: Format records with :class:`StructuredFormatter` instead of plain text.

    Returns:
        The ``sqlcompose`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    handler = handler or logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter() if structured else logging.Formatter(SIMPLE_FORMAT))
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log ``message`` with ``extra_fields`` attached to the record."""
    logger.log(level, message, extra={"extra_fields": extra_fields}, stacklevel=2)
