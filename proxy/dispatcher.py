"""
Dispatch of one chat completion request to the Copilot upstream.
"""
import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx
from fastapi.responses import JSONResponse, Response, StreamingResponse

from config.interceptor import DestinationMode, InterceptorConfig
from credentials import SessionIdentity, refresh_short_lived_token, resolve_long_lived_key
from credentials.resolver import TokenSource
from headers import build_minimal_headers, build_vscode_headers
from openai_compat import convert_anthropic_response_to_openai, convert_anthropic_stream_to_openai
from providers.base_transport import BaseTransport
from utils.storage import CredentialStore
from .body_shaping import (
    build_anthropic_request,
    shape_openai_body,
    shape_passthrough_body,
    strip_transport_fields,
)
from .errors import MissingCredentialError
from .logging_utils import log_outbound_request

logger = logging.getLogger(__name__)


@dataclass
class DispatchContext:
    """Everything a dispatch needs besides the request body"""
    config: InterceptorConfig
    session: SessionIdentity
    transport: BaseTransport
    credential_store: Optional[CredentialStore] = None
    fallback_store: Optional[TokenSource] = None

    def token_override(self) -> Optional[str]:
        """Configured key, else the currently selected stored credential"""
        if self.config.token_override:
            return self.config.token_override
        if self.credential_store is not None:
            return self.credential_store.get_selected_token()
        return None


def build_destination_url(config: InterceptorConfig) -> str:
    """Completion URL for the mode, wrapped by the CORS proxy prefix when set"""
    base = config.api_base.rstrip("/")
    url = f"{base}/v1/messages" if config.is_anthropic else f"{base}/chat/completions"
    if config.cors_proxy_prefix:
        return f"{config.cors_proxy_prefix.rstrip('/')}/{quote(url, safe='')}"
    return url


async def build_request_headers(
    context: DispatchContext,
    long_lived_key: str,
    stream_requested: bool,
) -> Dict[str, str]:
    """Content negotiation plus either the disguise or the minimal header set"""
    config = context.config
    headers = {"Content-Type": "application/json"}
    if config.is_anthropic or not stream_requested:
        headers["Accept"] = "application/json"
    else:
        headers["Accept"] = "text/event-stream"

    if config.use_vscode_headers:
        access_token = await refresh_short_lived_token(
            long_lived_key, context.session, context.transport, config.token_url
        )
        headers["Authorization"] = f"Bearer {access_token or long_lived_key}"
        headers.update(build_vscode_headers(
            context.session,
            config.chat_version,
            config.code_version,
            chrome_version=config.chrome_version,
            electron_version=config.electron_version,
            github_api_version=config.github_api_version,
            overrides=config.header_overrides,
        ))
    else:
        headers["Authorization"] = f"Bearer {long_lived_key}"
        headers.update(build_minimal_headers())
    return headers


def build_anthropic_error_response(status_code: int, reason: str, raw_body: bytes) -> JSONResponse:
    """OpenAI-style error body carrying the upstream message and status"""
    message = f"{status_code} {reason}".strip()
    try:
        data = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            message = error["message"]
        elif data.get("message"):
            message = data["message"]
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "type": "api_error", "code": status_code}},
    )


async def _iter_upstream(response: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    finally:
        await response.aclose()


async def _iter_transcoded(response: httpx.Response, model: str, request_id: str) -> AsyncIterator[bytes]:
    try:
        async for frame in convert_anthropic_stream_to_openai(response.aiter_bytes(), model=model, request_id=request_id):
            yield frame
    finally:
        await response.aclose()


# Hop-by-hop headers plus the framing headers that no longer match once httpx decodes the body
EXCLUDED_RESPONSE_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
    "content-length",
    "content-encoding",
})


def forwardable_headers(response: httpx.Response) -> List[Tuple[bytes, bytes]]:
    """Upstream response headers that can be relayed to the client as-is

    Raw pairs keep repeated headers such as Set-Cookie separate.
    """
    return [
        (name.lower(), value)
        for name, value in response.headers.raw
        if name.decode("latin-1").lower() not in EXCLUDED_RESPONSE_HEADERS
    ]


def _passthrough_response(response: httpx.Response) -> StreamingResponse:
    client_response = StreamingResponse(_iter_upstream(response), status_code=response.status_code)
    client_response.raw_headers = forwardable_headers(response)
    return client_response


async def dispatch(
    body: Dict[str, Any],
    context: DispatchContext,
    request_id: Optional[str] = None,
) -> Response:
    """
    Send one client request upstream and return the client-facing response.

    Args:
        body: Inbound OpenAI-style request body
        context: Configuration, session, transport and credential sources
        request_id: Request ID for logging

    Returns:
        JSONResponse or StreamingResponse for the client

    Raises:
        MissingCredentialError: no credential source yielded a key; nothing was sent
        httpx.HTTPError: the completion call itself failed
    """
    request_id = request_id or str(uuid.uuid4())[:8]
    config = context.config

    long_lived_key = resolve_long_lived_key(
        body,
        context.session,
        override=context.token_override(),
        fallback_store=context.fallback_store,
    )
    if not long_lived_key:
        logger.error(f"[{request_id}] No credential available, refusing to dispatch")
        raise MissingCredentialError()

    stream_requested = bool(body.get("stream"))
    headers = await build_request_headers(context, long_lived_key, stream_requested)

    shaped = strip_transport_fields(body)
    model = shaped.get("model") or config.default_model
    if config.mode == DestinationMode.PASSTHROUGH:
        payload = shape_passthrough_body(shaped, request_id)
    elif config.mode == DestinationMode.ANTHROPIC:
        anthropic_request = build_anthropic_request(shaped, config, request_id)
        payload = anthropic_request.to_payload()
        model = anthropic_request.model
        stream_requested = bool(anthropic_request.stream)
    else:
        payload = shape_openai_body(shaped, config, request_id)

    url = build_destination_url(config)
    log_outbound_request(request_id, "POST", url, headers, payload, mode=config.mode.value)

    start_time = time.time()
    response = await context.transport.send(
        "POST",
        url,
        headers=headers,
        json_body=payload,
        include_credentials=config.basic_auth_compat,
        streaming=stream_requested,
    )
    elapsed = time.time() - start_time

    if not response.is_success:
        if not config.is_anthropic:
            logger.error(f"[{request_id}] Upstream returned {response.status_code} after {elapsed:.2f}s, passing through")
            return _passthrough_response(response)
        try:
            raw_error = await response.aread()
        finally:
            await response.aclose()
        logger.error(
            f"[{request_id}] Upstream returned {response.status_code} after {elapsed:.2f}s: "
            f"{raw_error[:500].decode('utf-8', errors='replace')}"
        )
        return build_anthropic_error_response(response.status_code, response.reason_phrase, raw_error)

    logger.info(f"[{request_id}] Upstream responded {response.status_code} in {elapsed:.2f}s")
    logger.debug(f"[{request_id}] Response headers: {dict(response.headers)}")

    if not config.is_anthropic:
        return _passthrough_response(response)

    if stream_requested:
        return StreamingResponse(
            _iter_transcoded(response, model, request_id),
            media_type="text/event-stream",
        )

    try:
        raw_body = await response.aread()
    finally:
        await response.aclose()
    return JSONResponse(content=convert_anthropic_response_to_openai(raw_body, model=model))
