"""
Event kinds of the Anthropic streaming protocol.
"""
from enum import Enum
from typing import Optional


class StreamEventType(str, Enum):
    """Closed set of upstream stream event types"""
    MESSAGE_START = "message_start"
    CONTENT_BLOCK_START = "content_block_start"
    CONTENT_BLOCK_DELTA = "content_block_delta"
    CONTENT_BLOCK_STOP = "content_block_stop"
    MESSAGE_DELTA = "message_delta"
    MESSAGE_STOP = "message_stop"
    PING = "ping"
    ERROR = "error"

    @classmethod
    def parse(cls, value: object) -> Optional["StreamEventType"]:
        """Return the member for ``value``, or None for an unknown type"""
        try:
            return cls(value)
        except ValueError:
            return None
