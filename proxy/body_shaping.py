"""
Per-mode shaping of the inbound request body before it goes upstream.
"""
import copy
import logging
from typing import Any, Dict, List

from config.interceptor import InterceptorConfig
from messages_api.models import AnthropicMessageRequest
from messages_api.request_sanitizer import drop_conflicting_top_p
from openai_compat.models import ChatMessage, extract_text
from openai_compat.request_converter import NormalizationParams, convert_openai_request_to_anthropic

logger = logging.getLogger(__name__)

# Routing and inline credential fields, never forwarded
TRANSPORT_FIELDS = ("custom_url", "api_key_custom", "reverse_proxy", "proxy_password")

# Chat client bookkeeping the upstream does not understand
CLIENT_ONLY_FIELDS = (
    "chat_completion_source",
    "user_name",
    "char_name",
    "group_names",
    "enable_web_search",
    "request_images",
    "request_image_resolution",
    "request_image_aspect_ratio",
    "custom_prompt_post_processing",
    "custom_include_body",
    "custom_exclude_body",
    "custom_include_headers",
    "type",
    "include_reasoning",
    "reasoning_effort",
)

# OpenAI mode keeps the image sizing hints
OPENAI_MODE_STRIPPED_FIELDS = tuple(
    name for name in CLIENT_ONLY_FIELDS
    if name not in ("request_image_resolution", "request_image_aspect_ratio")
)


def strip_transport_fields(body: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of the body without transport fields and None values"""
    return {
        key: value for key, value in body.items()
        if key not in TRANSPORT_FIELDS and value is not None
    }


def _without(body: Dict[str, Any], fields) -> Dict[str, Any]:
    return {key: value for key, value in body.items() if key not in fields}


def _roles(messages: List[Any]) -> str:
    return " ".join(
        f"[{i}]{m.get('role') if isinstance(m, dict) else '?'}" for i, m in enumerate(messages)
    )


def shape_passthrough_body(body: Dict[str, Any], request_id: str = "-") -> Dict[str, Any]:
    """Strip client-only fields and drop messages without text"""
    shaped = _without(body, CLIENT_ONLY_FIELDS)
    messages = shaped.get("messages")
    if isinstance(messages, list):
        shaped["messages"] = [
            m for m in messages
            if isinstance(m, dict) and extract_text(m.get("content")).strip()
        ]
        logger.debug(f"[{request_id}] Passthrough roles: {_roles(shaped['messages'])}")
    logger.debug(f"[{request_id}] Passthrough body keys: [{', '.join(shaped)}]")
    return shaped


def shape_openai_body(body: Dict[str, Any], config: InterceptorConfig, request_id: str = "-") -> Dict[str, Any]:
    """Sanitize sampling parameters and apply the prefill/trim/last-user toggles"""
    shaped = _without(drop_conflicting_top_p(body, request_id), OPENAI_MODE_STRIPPED_FIELDS)
    messages = shaped.get("messages")
    if not isinstance(messages, list) or not messages:
        return shaped
    messages = copy.deepcopy(messages)

    if config.remove_prefill:
        removed = 0
        while len(messages) > 1 and isinstance(messages[-1], dict) and messages[-1].get("role") == "assistant":
            messages.pop()
            removed += 1
        if removed:
            logger.warning(f"[{request_id}] Removed {removed} trailing assistant prefill message(s)")

    if config.trim_assistant:
        for message in messages:
            if isinstance(message, dict) and message.get("role") == "assistant" and isinstance(message.get("content"), str):
                trimmed = message["content"].rstrip()
                if trimmed != message["content"]:
                    logger.debug(
                        f"[{request_id}] Trimmed assistant trailing whitespace "
                        f"({len(message['content'])} -> {len(trimmed)} chars)"
                    )
                    message["content"] = trimmed

    if config.force_last_user:
        last = messages[-1]
        if isinstance(last, dict) and last.get("role") != "user":
            logger.warning(f"[{request_id}] Rewriting last message role {last.get('role')} -> user")
            last["role"] = "user"

    shaped["messages"] = messages
    return shaped


def build_anthropic_request(
    body: Dict[str, Any],
    config: InterceptorConfig,
    request_id: str = "-",
) -> AnthropicMessageRequest:
    """Normalize an OpenAI-shaped body into an Anthropic messages request"""
    sanitized = drop_conflicting_top_p(body, request_id)
    raw_messages = sanitized.get("messages") if isinstance(sanitized.get("messages"), list) else []
    logger.debug(f"[{request_id}] Roles before conversion: {_roles(raw_messages)}")

    params = NormalizationParams.from_request(
        sanitized,
        thinking=config.thinking_enabled,
        thinking_budget=config.thinking_budget,
        adaptive_thinking=config.adaptive_thinking,
        default_max_tokens=config.default_max_tokens,
    )
    model = sanitized.get("model")
    if not isinstance(model, str) or not model:
        model = config.default_model
    request = convert_openai_request_to_anthropic(ChatMessage.coerce_list(raw_messages), model, params)

    logger.info(
        f"[{request_id}] Converted to Anthropic format: system {'present' if request.system else 'absent'}, "
        f"{len(request.messages)} messages{', thinking on' if request.thinking else ''}"
    )
    return request
