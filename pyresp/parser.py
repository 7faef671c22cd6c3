import logging
import re
from collections import deque
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .config import DecoderConfig
from .errors import ErrorCode, ProtocolError
from .value import Value, ValueType

logger = logging.getLogger(__name__)

CRLF = b"\r\n"
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_INTEGER_RE = re.compile(rb"[+-]?[0-9]+")


def _encode_scalar(value: Value) -> bytes:
    if value.type_ == ValueType.NULL:
        return b"$-1\r\n"
    if value.type_ == ValueType.NULL_ARRAY:
        return b"*-1\r\n"
    if value.type_ == ValueType.STRING:
        return b"+" + value.val.encode("utf-8") + CRLF
    if value.type_ == ValueType.ERROR:
        return b"-" + value.val.encode("utf-8") + CRLF
    if value.type_ == ValueType.INTEGER:
        return b":" + str(int(value.val)).encode() + CRLF
    if value.type_ in (ValueType.BULK, ValueType.BUF_BULK):
        payload = value.val if value.type_ == ValueType.BUF_BULK else value.val.encode("utf-8")
        return b"$" + str(len(payload)).encode() + CRLF + payload + CRLF
    raise TypeError(f"Unknown value type: {value.type_!r}")


def encode(value: Value) -> bytes:
    out = bytearray()
    # explicit stack, nesting depth is not bound by the recursion limit
    pending = [value]
    while pending:
        value = pending.pop()
        if value.type_ == ValueType.ARRAY:
            out += b"*" + str(len(value.val)).encode() + CRLF
            pending.extend(reversed(value.val))
        else:
            out += _encode_scalar(value)
    return bytes(out)


def encode_slice(tokens: Iterable[Union[str, bytes]]) -> bytes:
    """Frame a command as an array of bulk strings, e.g. ["SET", "a", "1"]."""
    items = [Value.buf_bulk(t) if isinstance(t, (bytes, bytearray)) else Value.bulk(t) for t in tokens]
    return encode(Value.array(items))


class RESPEncoder():
    # static method, no need to pass 'self'
    @staticmethod
    def encode_simple_str(s: str) -> bytes:
        return encode(Value.string(s))

    @staticmethod
    def encode_bulk_str(s):
        if s is None:
            return encode(Value.null())
        return encode(Value.bulk(s))

    @staticmethod
    def encode_int(i):
        return encode(Value.integer(i))

    @staticmethod
    def encode_err(msg: str) -> bytes:
        return encode(Value.error(msg))

    @staticmethod
    def encode_arr(items):
        if items is None:
            return encode(Value.null_array())
        return encode(Value.array([Value.bulk(item) for item in items]))

    @classmethod
    def to_value(cls, obj) -> Value:
        """Map plain Python data onto the closest RESP value."""
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return Value.null()
        if isinstance(obj, bool):
            return Value.integer(int(obj))
        if isinstance(obj, int):
            return Value.integer(obj)
        if isinstance(obj, str):
            return Value.bulk(obj)
        if isinstance(obj, (bytes, bytearray)):
            return Value.buf_bulk(obj)
        if isinstance(obj, (list, tuple)):
            return Value.array([cls.to_value(item) for item in obj])
        raise TypeError(f"Cannot encode {type(obj).__name__} as RESP")

    @classmethod
    def encode_value(cls, obj):
        return encode(cls.to_value(obj))


class Decoder:
    """Incremental RESP decoder.

    Bytes are appended with `feed`; every complete value found from the
    cursor onward is queued and can be taken out with `read`. A value that
    is only partly buffered is retried from scratch on the next `feed`.
    """

    def __init__(self, buf_bulk: bool = False, config: Optional[DecoderConfig] = None) -> None:
        self.buf_bulk = buf_bulk
        self.config = config or DecoderConfig()
        self.pos = 0
        self.buf = bytearray()
        self.results = deque()

    @classmethod
    def with_buf_bulk(cls, config: Optional[DecoderConfig] = None) -> "Decoder":
        return cls(buf_bulk=True, config=config)

    def feed(self, data: bytes) -> None:
        self.buf += data
        while True:
            try:
                parsed = self._parse_value(self.pos)
            except ProtocolError as e:
                logger.warning("Malformed RESP input at offset %d: %s", self.pos, e)
                self._discard()
                raise
            if parsed is None:
                if self.pos < len(self.buf):
                    logger.debug("Incomplete value, %d bytes buffered", self.buffer_len())
                break
            value, self.pos = parsed
            logger.debug("Decoded value of type %d, cursor at %d", value.type_, self.pos)
            self.results.append(value)
        self._compact()

    def read(self) -> Optional[Value]:
        if not self.results:
            return None
        return self.results.popleft()

    def buffer_len(self) -> int:
        return len(self.buf) - self.pos

    def result_len(self) -> int:
        return len(self.results)

    def reset(self) -> None:
        self._discard()
        self.results.clear()

    def __iter__(self) -> Iterator[Value]:
        while self.results:
            yield self.results.popleft()

    def _discard(self):
        self.buf.clear()
        self.pos = 0

    def _compact(self):
        if self.pos == len(self.buf):
            self._discard()
        elif self.pos >= self.config.compact_threshold:
            del self.buf[:self.pos]
            self.pos = 0

    def _readline(self, pos) -> Optional[Tuple[bytes, int]]:
        end_idx = self.buf.find(CRLF, pos)
        if end_idx < 0:
            return None
        return bytes(self.buf[pos:end_idx]), end_idx + 2

    def _parse_int(self, line: bytes, code: str) -> int:
        if not _INTEGER_RE.fullmatch(line):
            raise ProtocolError(code)
        n = int(line)
        if n < INT64_MIN or n > INT64_MAX:
            raise ProtocolError(code)
        return n

    def _parse_length(self, line: bytes, code: str) -> int:
        n = self._parse_int(line, code)
        if n < -1 or n >= self.config.max_length:
            raise ProtocolError(code)
        return n

    def _parse_value(self, pos: int) -> Optional[Tuple[Value, int]]:
        """Parse one value starting at `pos`.

        Returns the value and the offset just past it, or None when the
        buffer ends first. Nothing on the decoder is changed here, so a
        None result leaves the cursor where it was.

        Open arrays are kept on an explicit stack of (items, count) pairs,
        so nesting depth is not bound by the recursion limit.
        """
        stack: List[Tuple[List[Value], int]] = []
        while True:
            if pos >= len(self.buf):
                return None
            token = self.buf[pos:pos + 1]
            if token not in (b"+", b"-", b":", b"$", b"*"):
                raise ProtocolError(ErrorCode.INVALID_PREFIX, token[0])
            read = self._readline(pos + 1)
            if read is None:
                return None
            line, pos = read

            if token == b"+":
                value = Value.string(self._decode_text(line, ErrorCode.INVALID_STRING))
            elif token == b"-":
                value = Value.error(self._decode_text(line, ErrorCode.INVALID_ERROR))
            elif token == b":":
                value = Value.integer(self._parse_int(line, ErrorCode.INVALID_INTEGER))
            elif token == b"$":
                parsed = self._parse_bulk(line, pos)
                if parsed is None:
                    return None
                value, pos = parsed
            else:
                count = self._parse_length(line, ErrorCode.INVALID_ARRAY)
                if count == -1:
                    value = Value.null_array()
                elif count == 0:
                    value = Value.array([])
                else:
                    stack.append(([], count))
                    continue

            # close every array this value completes
            while stack:
                items, count = stack[-1]
                items.append(value)
                if len(items) < count:
                    break
                stack.pop()
                value = Value.array(items)
            if not stack:
                return value, pos

    def _parse_bulk(self, line: bytes, pos: int) -> Optional[Tuple[Value, int]]:
        bulk_len = self._parse_length(line, ErrorCode.INVALID_BULK)
        if bulk_len == -1:
            return Value.null(), pos
        end = pos + bulk_len
        if end + 2 > len(self.buf):
            return None
        if self.buf[end:end + 2] != CRLF:
            raise ProtocolError(ErrorCode.INVALID_BULK)
        payload = bytes(self.buf[pos:end])
        if self.buf_bulk:
            return Value.buf_bulk(payload), end + 2
        return Value.bulk(self._decode_text(payload, ErrorCode.INVALID_BULK)), end + 2

    @staticmethod
    def _decode_text(data: bytes, code: str) -> str:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            raise ProtocolError(code)
