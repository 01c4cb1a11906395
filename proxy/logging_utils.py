"""
Logging utilities for request debugging and tracing.
"""
import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = ("authorization",)
SENSITIVE_PREVIEW_CHARS = 20


def redact_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Copy of headers with credentials cut to a short prefix"""
    redacted = {}
    for name, value in headers.items():
        if name.lower() in SENSITIVE_HEADERS and value:
            redacted[name] = f"{value[:SENSITIVE_PREVIEW_CHARS]}..."
        else:
            redacted[name] = value
    return redacted


def log_outbound_request(
    request_id: str,
    method: str,
    url: str,
    headers: Dict[str, str],
    body: Optional[Dict[str, Any]] = None,
    mode: Optional[str] = None,
):
    """Log an upstream request: headers redacted, body summarized"""
    logger.info(f"[{request_id}] {method} {url} (mode={mode})")
    for header_name, header_value in redact_headers(headers).items():
        logger.debug(f"[{request_id}] {header_name}: {header_value}")

    if not body:
        return
    messages = body.get("messages") if isinstance(body.get("messages"), list) else []
    logger.debug(f"[{request_id}] Model: {body.get('model', '(none)')}")
    logger.debug(f"[{request_id}] Thinking: {body.get('thinking') or 'none'}")
    logger.debug(f"[{request_id}] Max Tokens: {body.get('max_tokens')}")
    logger.debug(f"[{request_id}] Temperature: {body.get('temperature', '(none)')}")
    logger.debug(f"[{request_id}] Stream: {body.get('stream', False)}")
    logger.debug(f"[{request_id}] Messages: {len(messages)}")
