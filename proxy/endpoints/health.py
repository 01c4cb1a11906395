"""
Health check and status endpoints.
"""
import time
from fastapi import APIRouter

from ..state import credential_available, get_dispatch_context

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    context = get_dispatch_context()
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "mode": context.config.mode.value,
        "thinking": context.config.thinking_enabled,
        "credential_available": credential_available(context),
    }


@router.get("/healthz")
async def healthz_check():
    """Alternative health check endpoint (Kubernetes style)"""
    return {"status": "ok", "timestamp": time.time()}
