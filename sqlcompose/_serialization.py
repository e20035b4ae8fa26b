"""JSON encoding helpers backed by msgspec."""

from pathlib import PurePath
from typing import Any, Literal, Union, overload

import msgspec

__all__ = ("decode_json", "encode_json")


def _type_to_string(value: Any) -> Any:
    """Fallback for types msgspec cannot encode natively."""
    if isinstance(value, PurePath):
        return str(value)
    return repr(value)


_encoder = msgspec.json.Encoder(enc_hook=_type_to_string)
_decoder = msgspec.json.Decoder()


@overload
def encode_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def encode_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def encode_json(data: Any, *, as_bytes: bool = False) -> Union[str, bytes]:
    """Encode ``data`` to JSON.

    Values msgspec does not know natively fall back to a string form.

    Args:
        data: Data to encode.
        as_bytes: Return bytes instead of str.

    Returns:
        The JSON document.
    """
    encoded = _encoder.encode(data)
    return encoded if as_bytes else encoded.decode("utf-8")


def decode_json(data: Union[str, bytes]) -> Any:
    """Decode a JSON document."""
    return _decoder.decode(data)
