from typing import Optional


class ErrorCode:
    INVALID_STRING = "Parse '+' failed"
    INVALID_ERROR = "Parse '-' failed"
    INVALID_INTEGER = "Parse ':' failed"
    INVALID_BULK = "Parse '$' failed"
    INVALID_ARRAY = "Parse '*' failed"
    INVALID_PREFIX = "Invalid prefix"


class RESPError(Exception):
    """Base class for everything pyresp raises."""
    pass


class ProtocolError(RESPError, ValueError):
    """Raised when the decoder meets bytes that can never form a valid value."""

    def __init__(self, code: str, prefix: Optional[int] = None):
        self.code = code
        self.prefix = prefix
        if prefix is not None:
            message = f"{code}: {prefix:x}"
        else:
            message = code
        super().__init__(message)


class EncodingError(RESPError, ValueError):
    """Raised when an encoded value is not valid UTF-8 text."""
    pass
