"""
Response conversion from Anthropic to OpenAI format.
"""
import time
import json
import logging
import uuid
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)

THINKING_OPEN_MARKER = "<thinking>\n"
THINKING_CLOSE_MARKER = "\n</thinking>\n\n"
EMPTY_RESPONSE_MARKER = "[Empty response]"
PARSE_FAILURE_NOTICE = "[proxy] Failed to parse upstream response"


def map_stop_reason_to_finish_reason(stop_reason: Optional[str]) -> str:
    """Map Anthropic stop_reason to OpenAI finish_reason.

    ``end_turn`` becomes ``stop``; any other value passes through verbatim.
    """
    if not stop_reason or stop_reason == "end_turn":
        return "stop"
    return stop_reason


def new_completion_id() -> str:
    return f"chatcmpl-{uuid.uuid4().hex[:24]}"


def _completion(content: str, finish_reason: str, model: Optional[str]) -> Dict[str, Any]:
    return {
        "id": new_completion_id(),
        "object": "chat.completion",
        "created": int(time.time()),
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": finish_reason,
            }
        ],
    }


def _join_block_text(blocks: List[Any], block_type: str, field: str) -> str:
    parts = []
    for block in blocks:
        if isinstance(block, dict) and block.get("type") == block_type:
            value = block.get(field)
            if isinstance(value, str):
                parts.append(value)
    return "".join(parts)


def convert_anthropic_response_to_openai(raw_body: bytes, model: Optional[str] = None) -> Dict[str, Any]:
    """
    Convert an Anthropic message response body to an OpenAI chat completion.

    Thinking blocks are folded into the message content ahead of the answer,
    wrapped in ``<thinking>`` markers. An unparseable body never raises; it
    yields a completion whose content is a fixed failure notice.

    Args:
        raw_body: Raw upstream response body
        model: Model name to report when the upstream omits it

    Returns:
        OpenAI chat completion response
    """
    logger.debug("[RESPONSE_CONVERSION] ===== CONVERTING ANTHROPIC RESPONSE TO OPENAI =====")

    try:
        data = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"[RESPONSE_CONVERSION] Failed to parse Anthropic response JSON: {e}")
        return _completion(PARSE_FAILURE_NOTICE, "stop", model)

    if not isinstance(data, dict):
        logger.error(f"[RESPONSE_CONVERSION] Anthropic response is not an object: {type(data).__name__}")
        return _completion(PARSE_FAILURE_NOTICE, "stop", model)

    blocks = data.get("content") if isinstance(data.get("content"), list) else []
    thinking_text = _join_block_text(blocks, "thinking", "thinking")
    text = _join_block_text(blocks, "text", "text")

    logger.info(
        f"[RESPONSE_CONVERSION] model={data.get('model') or '(none)'} "
        f"stop_reason={data.get('stop_reason') or '(none)'} "
        f"blocks=[{', '.join(str(b.get('type')) for b in blocks if isinstance(b, dict))}] "
        f"body={len(text)} chars reasoning={len(thinking_text)} chars"
    )

    if thinking_text:
        content = f"{THINKING_OPEN_MARKER}{thinking_text}{THINKING_CLOSE_MARKER}{text}"
        logger.debug(f"[RESPONSE_CONVERSION] Reasoning content:\n{thinking_text}")
    else:
        content = text or EMPTY_RESPONSE_MARKER

    openai_response = _completion(
        content,
        map_stop_reason_to_finish_reason(data.get("stop_reason")),
        data.get("model") or model,
    )

    usage_obj = data.get("usage")
    if isinstance(usage_obj, dict):
        prompt_tokens = usage_obj.get("input_tokens") or 0
        completion_tokens = usage_obj.get("output_tokens") or 0
        openai_response["usage"] = {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        }
        if usage_obj.get("cache_read_input_tokens"):
            logger.debug(f"[RESPONSE_CONVERSION] cache_read_input_tokens={usage_obj['cache_read_input_tokens']}")

    logger.debug("[RESPONSE_CONVERSION] ===== END RESPONSE CONVERSION =====")
    return openai_response
