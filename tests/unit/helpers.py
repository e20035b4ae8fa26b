from typing import Any

from sqlcompose.utils.text import collapse_whitespace


def normalize(value: Any) -> str:
    """Collapse a statement or builder to single-spaced SQL text."""
    if hasattr(value, "build") and not isinstance(value, str):
        value = value.build()
    return collapse_whitespace(getattr(value, "sql", value))
