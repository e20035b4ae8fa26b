from sqlcompose.utils import callables, logging, text, type_guards

__all__ = ("callables", "logging", "text", "type_guards")
