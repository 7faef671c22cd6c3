from dataclasses import dataclass

from .value import RESP_MAX


@dataclass
class DecoderConfig:
    """Decoder limits and buffer housekeeping."""
    # bulk lengths and array counts must stay below this
    max_length: int = RESP_MAX
    # consumed bytes kept in the buffer before it is compacted
    compact_threshold: int = 4096
