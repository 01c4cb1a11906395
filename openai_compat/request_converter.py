"""
Request conversion from OpenAI to Anthropic format.
"""
import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from messages_api.models import AnthropicMessageRequest, TextBlock, ThinkingParameter
from messages_api.request_sanitizer import clamp_unit_interval
from .message_converter import normalize_messages
from .models import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 8192
DEFAULT_THINKING_BUDGET = 10000
THINKING_HEADROOM_TOKENS = 4096


@dataclass
class NormalizationParams:
    """Sampling and thinking parameters applied on top of the converted messages"""
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    stream: Optional[bool] = None
    thinking: bool = False
    thinking_budget: int = DEFAULT_THINKING_BUDGET
    adaptive_thinking: bool = False

    @classmethod
    def from_request(
        cls,
        openai_request: Dict[str, Any],
        thinking: bool = False,
        thinking_budget: int = DEFAULT_THINKING_BUDGET,
        adaptive_thinking: bool = False,
        default_max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> "NormalizationParams":
        """Pick the parameters out of an inbound chat completion body"""
        max_tokens = openai_request.get("max_tokens")
        if not isinstance(max_tokens, int) or isinstance(max_tokens, bool) or max_tokens <= 0:
            max_tokens = default_max_tokens
        stream = openai_request.get("stream")
        return cls(
            max_tokens=max_tokens,
            temperature=_as_float(openai_request.get("temperature")),
            top_p=_as_float(openai_request.get("top_p")),
            stream=stream if isinstance(stream, bool) else None,
            thinking=thinking,
            thinking_budget=thinking_budget,
            adaptive_thinking=adaptive_thinking,
        )


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def convert_openai_request_to_anthropic(
    messages: Sequence[ChatMessage],
    model: str,
    params: NormalizationParams,
) -> AnthropicMessageRequest:
    """
    Convert an OpenAI chat history and parameters to an Anthropic messages request.

    Args:
        messages: OpenAI chat messages
        model: Upstream model name
        params: Sampling and thinking parameters

    Returns:
        A validated Anthropic messages request
    """
    logger.debug("[REQUEST_CONVERSION] ===== STARTING OPENAI TO ANTHROPIC CONVERSION =====")

    anthropic_messages, system_text = normalize_messages(messages)

    max_tokens = params.max_tokens or DEFAULT_MAX_TOKENS
    thinking: Optional[ThinkingParameter] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None

    if params.thinking:
        if params.adaptive_thinking:
            thinking = ThinkingParameter(type="adaptive")
            logger.debug("[REQUEST_CONVERSION] Adaptive thinking enabled")
        else:
            budget = params.thinking_budget or DEFAULT_THINKING_BUDGET
            thinking = ThinkingParameter(type="enabled", budget_tokens=budget)
            if max_tokens <= budget:
                logger.debug(
                    f"[REQUEST_CONVERSION] max_tokens {max_tokens} does not exceed thinking budget {budget}, "
                    f"raising to {budget + THINKING_HEADROOM_TOKENS}"
                )
                max_tokens = budget + THINKING_HEADROOM_TOKENS
            logger.debug(f"[REQUEST_CONVERSION] Thinking enabled with budget {budget}")
        if params.temperature is not None or params.top_p is not None:
            logger.debug("[REQUEST_CONVERSION] Dropping temperature/top_p (not allowed with thinking)")
    else:
        temperature = clamp_unit_interval(params.temperature)
        if temperature is None:
            top_p = clamp_unit_interval(params.top_p)

    request = AnthropicMessageRequest(
        model=model,
        messages=anthropic_messages,
        max_tokens=max_tokens,
        system=[TextBlock(text=system_text)] if system_text else None,
        temperature=temperature,
        top_p=top_p,
        stream=params.stream,
        thinking=thinking,
    )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"[REQUEST_CONVERSION] Anthropic request: {json.dumps(request.to_payload(), indent=2)}")
    return request
