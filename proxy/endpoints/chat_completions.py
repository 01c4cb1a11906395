"""
OpenAI-compatible chat completions endpoints.

All routes accept the chat client's request body as-is, including its
routing and credential fields, and hand it to the dispatcher.
"""
import json
import logging
import uuid

import httpx
from fastapi import APIRouter, HTTPException, Request

from ..dispatcher import dispatch
from ..errors import MissingCredentialError
from ..state import get_dispatch_context

logger = logging.getLogger(__name__)
router = APIRouter()


async def _handle(raw_request: Request):
    request_id = str(uuid.uuid4())[:8]
    logger.info(f"[{request_id}] ===== NEW CHAT COMPLETION REQUEST ({raw_request.url.path}) =====")

    try:
        body = await raw_request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"[{request_id}] Invalid JSON body: {e}")
        raise HTTPException(status_code=400, detail=f"Invalid JSON body: {e}")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")

    logger.debug(f"[{request_id}] Model: {body.get('model')}")
    logger.debug(f"[{request_id}] Stream: {body.get('stream', False)}")

    try:
        return await dispatch(body, get_dispatch_context(), request_id=request_id)
    except MissingCredentialError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except httpx.TimeoutException:
        logger.error(f"[{request_id}] Upstream request timeout")
        raise HTTPException(status_code=504, detail="Upstream request timeout")
    except httpx.HTTPError as e:
        logger.error(f"[{request_id}] Upstream request failed: {e}")
        raise HTTPException(status_code=502, detail=f"Upstream request failed: {e}")


@router.post("/v1/chat/completions")
async def chat_completions(raw_request: Request):
    """OpenAI-compatible chat completions endpoint"""
    return await _handle(raw_request)


@router.post("/api/backends/chat-completions/generate")
async def chat_completions_generate(raw_request: Request):
    """Chat client backend route, same contract as /v1/chat/completions"""
    return await _handle(raw_request)


@router.post("/api/backends/custom/generate")
async def custom_generate(raw_request: Request):
    """Chat client custom backend route, same contract as /v1/chat/completions"""
    return await _handle(raw_request)
