from dataclasses import dataclass
from typing import Any, List, Union

from .errors import EncodingError

# bulk strings are limited to 512 MB
RESP_MAX = 512 * 1024 * 1024


class ValueType:
    NULL = 0
    NULL_ARRAY = 1
    STRING = 2
    ERROR = 3
    INTEGER = 4
    BULK = 5
    BUF_BULK = 6
    ARRAY = 7


@dataclass
class Value:
    """A single RESP reply or request.

    `type_` is one of the `ValueType` constants and `val` the payload:
    None for the two null kinds, str for STRING, ERROR and BULK, int for
    INTEGER, bytes for BUF_BULK and a list of Value for ARRAY.
    """
    type_: int
    val: Any = None

    @classmethod
    def null(cls) -> "Value":
        return cls(ValueType.NULL)

    @classmethod
    def null_array(cls) -> "Value":
        return cls(ValueType.NULL_ARRAY)

    @classmethod
    def string(cls, s: str) -> "Value":
        return cls(ValueType.STRING, _text(s))

    @classmethod
    def error(cls, msg: str) -> "Value":
        return cls(ValueType.ERROR, _text(msg))

    @classmethod
    def integer(cls, i: int) -> "Value":
        return cls(ValueType.INTEGER, i)

    @classmethod
    def bulk(cls, s: str) -> "Value":
        return cls(ValueType.BULK, _text(s))

    @classmethod
    def buf_bulk(cls, b: Union[bytes, bytearray]) -> "Value":
        return cls(ValueType.BUF_BULK, bytes(b))

    @classmethod
    def array(cls, items: List["Value"]) -> "Value":
        return cls(ValueType.ARRAY, list(items))

    def is_null(self) -> bool:
        return self.type_ in (ValueType.NULL, ValueType.NULL_ARRAY)

    def is_error(self) -> bool:
        return self.type_ == ValueType.ERROR

    def encode(self) -> bytes:
        from .parser import encode
        return encode(self)

    def to_encoded_string(self) -> str:
        try:
            return self.encode().decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(str(e)) from e

    def __str__(self):
        if self.type_ == ValueType.NULL:
            return "(Null)"
        if self.type_ == ValueType.NULL_ARRAY:
            return "(Null Array)"
        if self.type_ == ValueType.INTEGER:
            return str(self.val)
        if self.type_ == ValueType.BUF_BULK:
            hex_bytes = "".join(f" {b:02x}" for b in self.val[:16])
            suffix = " ... >" if len(self.val) > 16 else ">"
            return f"<Buffer{hex_bytes}{suffix}"
        if self.type_ == ValueType.ARRAY:
            return _format_array(self.val, 0)
        return f'"{self.val}"'


def _format_array(items, depth):
    prefix = "  " * depth
    out = ""
    for i, item in enumerate(items):
        if item.type_ == ValueType.ARRAY:
            # header at the parent's indent, items one level deeper
            out += f"{prefix}{i + 1})\n"
            out += _format_array(item.val, depth + 1)
        else:
            out += f"{prefix}{i + 1}) {item}\n"
    return out


def _text(s):
    if not isinstance(s, str):
        raise TypeError(f"Expected str payload, got {type(s).__name__}; use Value.buf_bulk for bytes")
    return s
