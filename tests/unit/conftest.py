import logging
from collections.abc import Generator

import pytest

from sqlcompose import SQLFactory, mysql, postgres, sqlite
from sqlcompose.utils.logging import ROOT_LOGGER_NAME, set_correlation_id


@pytest.fixture(params=[sqlite, postgres, mysql], ids=["sqlite", "postgres", "mysql"])
def any_sql(request: pytest.FixtureRequest) -> SQLFactory:
    return request.param


@pytest.fixture
def reset_logging() -> Generator[None, None, None]:
    """Restore the sqlcompose logger after a test reconfigures it."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
    set_correlation_id(None)
