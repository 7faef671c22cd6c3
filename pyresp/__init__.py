"""
pyresp - REdis Serialization Protocol values, encoder and incremental decoder.
"""

from .config import DecoderConfig
from .errors import EncodingError, ErrorCode, ProtocolError, RESPError
from .parser import Decoder, RESPEncoder, encode, encode_slice
from .value import RESP_MAX, Value, ValueType

__version__ = "1.0.0"
__all__ = [
    'Value',
    'ValueType',
    'RESP_MAX',
    'encode',
    'encode_slice',
    'RESPEncoder',
    'Decoder',
    'DecoderConfig',
    'ErrorCode',
    'RESPError',
    'ProtocolError',
    'EncodingError',
]
