"""General text utilities."""

import re
from functools import lru_cache

# Handles sequences like "HTTPRequest" -> "HTTP_Request"
_SNAKE_CASE_RE_ACRONYM_SEQUENCE = re.compile(r"([A-Z\d]+)([A-Z][a-z])")
# Handles transitions like "camelCase" -> "camel_Case"
_SNAKE_CASE_RE_LOWER_UPPER_TRANSITION = re.compile(r"([a-z\d])([A-Z])")
_SNAKE_CASE_RE_REPLACE_SEP = re.compile(r"[-\s.]+")
_SNAKE_CASE_RE_CLEAN_MULTIPLE_UNDERSCORE = re.compile(r"__+")
_WHITESPACE_RE = re.compile(r"\s+")

__all__ = (
    "align_right",
    "collapse_whitespace",
    "indent_lines",
    "snake_case",
)


@lru_cache(maxsize=256)
def snake_case(string: str) -> str:
    """Convert a string to snake_case.

    Handles camelCase, PascalCase and acronyms ("HTTPRequest" becomes
    "http_request"). Spaces, hyphens and dots are treated as separators.

    Args:
        string: The string to convert.

    Returns:
        The snake_case version of the string.
    """
    if not string:
        return ""
    s = _SNAKE_CASE_RE_REPLACE_SEP.sub("_", string.strip())
    s = _SNAKE_CASE_RE_ACRONYM_SEQUENCE.sub(r"\1_\2", s)
    s = _SNAKE_CASE_RE_LOWER_UPPER_TRANSITION.sub(r"\1_\2", s)
    s = _SNAKE_CASE_RE_CLEAN_MULTIPLE_UNDERSCORE.sub("_", s)
    return s.lower().strip("_")


def align_right(keyword: str, width: int = 5) -> str:
    """Right align a clause keyword so statement lines share one gutter.

    ``align_right("AND")`` gives ``"   AND "`` and ``align_right("WHERE")`` gives
    ``" WHERE "``. Keywords wider than the gutter are returned with a single
    trailing space.
    """
    return keyword.rjust(width + 1) + " "


def indent_lines(text: str, indent: str) -> str:
    """Indent every line after the first one."""
    return text.replace("\n", "\n" + indent)


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces."""
    return _WHITESPACE_RE.sub(" ", text).strip()
