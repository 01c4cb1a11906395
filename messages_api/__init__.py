"""Anthropic Messages API request models and sanitization"""

from .models import TextBlock, AnthropicMessage, ThinkingParameter, AnthropicMessageRequest
from .request_sanitizer import clamp_unit_interval, drop_conflicting_top_p

__all__ = [
    "TextBlock",
    "AnthropicMessage",
    "ThinkingParameter",
    "AnthropicMessageRequest",
    "clamp_unit_interval",
    "drop_conflicting_top_p",
]
