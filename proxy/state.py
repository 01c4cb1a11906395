"""
Process-wide dispatch context, built on first use.
"""
import logging
from typing import Optional

import settings
from config.interceptor import InterceptorConfig
from credentials import SessionIdentity, has_any_token
from providers.httpx_transport import HttpxTransport
from utils.storage import CredentialStore, FallbackTokenStore
from .dispatcher import DispatchContext

logger = logging.getLogger(__name__)

_context: Optional[DispatchContext] = None


def get_dispatch_context() -> DispatchContext:
    """Return the shared context, creating it from settings on first call"""
    global _context
    if _context is None:
        config = InterceptorConfig.from_settings()
        _context = DispatchContext(
            config=config,
            session=SessionIdentity(),
            transport=HttpxTransport(),
            credential_store=CredentialStore(settings.CREDENTIALS_FILE),
            fallback_store=FallbackTokenStore(settings.FALLBACK_TOKEN_FILE or None),
        )
        logger.info(
            f"Dispatch context ready: mode={config.mode.value} thinking={config.thinking_enabled} "
            f"vscode_headers={config.use_vscode_headers}"
        )
    return _context


def set_dispatch_context(context: Optional[DispatchContext]) -> None:
    """Replace the shared context (None rebuilds it from settings on next use)"""
    global _context
    _context = context


def credential_available(context: DispatchContext) -> bool:
    return has_any_token(context.session, context.token_override(), context.fallback_store)


async def close_dispatch_context() -> None:
    """Close the shared transport, if a context was ever created"""
    global _context
    if _context is not None:
        await _context.transport.aclose()
        _context = None
