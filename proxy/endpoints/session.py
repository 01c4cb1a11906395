"""
Session identity management endpoint.
"""
import logging
from fastapi import APIRouter

from ..state import get_dispatch_context

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/v1/session/reset")
async def reset_session():
    """Discard the disguise identifiers and the cached access token"""
    get_dispatch_context().session.reset()
    return {"status": "reset"}
