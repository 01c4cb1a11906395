"""
OpenAI to Anthropic API compatibility layer.
Converts OpenAI chat completion requests to Anthropic messages requests and
Anthropic responses (JSON and SSE) back to OpenAI chat completions.
"""

# Public API exports
from .models import ChatMessage, extract_text
from .message_converter import normalize_messages
from .request_converter import NormalizationParams, convert_openai_request_to_anthropic
from .response_converter import (
    convert_anthropic_response_to_openai,
    map_stop_reason_to_finish_reason,
)
from .stream_events import StreamEventType
from .stream_converter import (
    AnthropicStreamTranscoder,
    StreamTranscodeState,
    convert_anthropic_stream_to_openai,
)

__all__ = [
    # Message conversion
    "ChatMessage",
    "extract_text",
    "normalize_messages",

    # Request/Response conversion
    "NormalizationParams",
    "convert_openai_request_to_anthropic",
    "convert_anthropic_response_to_openai",
    "map_stop_reason_to_finish_reason",

    # Stream conversion
    "StreamEventType",
    "StreamTranscodeState",
    "AnthropicStreamTranscoder",
    "convert_anthropic_stream_to_openai",
]
