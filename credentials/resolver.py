"""Long-lived credential resolution"""

import logging
from typing import Any, Dict, Optional, Protocol

from .session import SessionIdentity
from .validators import is_github_oauth_token, mask_token, strip_bearer_prefix

logger = logging.getLogger(__name__)

# Request body fields that may carry the key, in priority order
REQUEST_KEY_FIELDS = ("api_key_custom", "api_key", "reverse_proxy_password", "proxy_password")

CUSTOM_HEADERS_FIELD = "custom_include_headers"


class TokenSource(Protocol):
    def get_token(self) -> Optional[str]:
        ...


def _from_request_fields(request_body: Dict[str, Any]) -> Optional[str]:
    for field in REQUEST_KEY_FIELDS:
        value = request_body.get(field)
        if isinstance(value, str) and value.strip():
            logger.info(f"Credential: {field} ({mask_token(value)})")
            return value.strip()
    return None


def _from_custom_headers(request_body: Dict[str, Any]) -> Optional[str]:
    headers = request_body.get(CUSTOM_HEADERS_FIELD)
    if not isinstance(headers, dict):
        return None

    auth = headers.get("Authorization") or headers.get("authorization")
    if isinstance(auth, str):
        token = strip_bearer_prefix(auth)
        if token:
            logger.info(f"Credential: {CUSTOM_HEADERS_FIELD} Authorization ({mask_token(token)})")
            return token

    for name, value in headers.items():
        if is_github_oauth_token(value):
            logger.info(f"Credential: {CUSTOM_HEADERS_FIELD}.{name} ({mask_token(value)})")
            return value.strip()
    return None


def resolve_long_lived_key(
    request_body: Optional[Dict[str, Any]],
    session: SessionIdentity,
    override: Optional[str] = None,
    fallback_store: Optional[TokenSource] = None,
) -> Optional[str]:
    """Find the long-lived key for a request

    Sources, first hit wins:
    1. explicit override (selected stored credential / configured token)
    2. well-known request body fields
    3. the request's custom headers map (Bearer value or a gho_ token)
    4. the last key resolved in this session
    5. the fallback settings store

    Hits from sources 2 and 3 are remembered on the session.

    Returns:
        The key, or None if no source yields a non-empty value
    """
    if override and override.strip():
        return override.strip()

    body = request_body or {}
    found = _from_request_fields(body) or _from_custom_headers(body)
    if found:
        session.cached_api_key = found
        return found

    if session.cached_api_key:
        return session.cached_api_key

    if fallback_store is not None:
        token = fallback_store.get_token()
        if token:
            logger.info(f"Credential: fallback store ({mask_token(token)})")
            return token

    return None


def has_any_token(
    session: SessionIdentity,
    override: Optional[str] = None,
    fallback_store: Optional[TokenSource] = None,
) -> bool:
    """Whether a dispatch could find a credential without request fields"""
    if override and override.strip():
        return True
    if session.cached_api_key:
        return True
    return bool(fallback_store is not None and fallback_store.get_token())
