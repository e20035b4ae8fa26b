"""Helpers for calling user callbacks with table refs."""

import inspect
from collections.abc import Sequence
from typing import Any, Callable, Optional

__all__ = ("call_with_refs", "positional_arity")


def positional_arity(func: Callable[..., Any]) -> Optional[int]:
    """Number of positional arguments ``func`` accepts, ``None`` when unbounded."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if parameter.kind in {inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD}:
            count += 1
    return count


def call_with_refs(func: Callable[..., Any], refs: Sequence[Any]) -> Any:
    """Call ``func`` with as many of ``refs`` as its signature takes.

    ``lambda c: ...`` receives the first ref, ``lambda *refs: ...`` all of them.
    """
    arity = positional_arity(func)
    args = tuple(refs) if arity is None else tuple(refs[:arity])
    return func(*args)
