"""Short-lived Copilot token exchange"""

import json
import logging
from typing import Optional

import httpx

from providers.base_transport import BaseTransport
from .session import SessionIdentity

logger = logging.getLogger(__name__)

TOKEN_EXCHANGE_HEADERS = {
    "Accept": "application/json",
    "Origin": "vscode-file://vscode-app",
}


async def refresh_short_lived_token(
    long_lived_key: str,
    session: SessionIdentity,
    transport: BaseTransport,
    token_url: str,
) -> Optional[str]:
    """Exchange the long-lived key for a short-lived access token

    A cached token with more than 60 seconds left is reused without a
    network call. Failures are logged and yield None; callers then use
    the long-lived key as the bearer token.

    Args:
        long_lived_key: GitHub key used as bearer auth for the exchange
        session: Session holding the token cache
        transport: Outbound HTTP transport
        token_url: Token exchange endpoint

    Returns:
        The access token, or None on failure
    """
    if not long_lived_key:
        return None

    if session.has_valid_access_token():
        logger.debug("Using cached access token")
        return session.access_token

    logger.info("Refreshing access token...")
    headers = {**TOKEN_EXCHANGE_HEADERS, "Authorization": f"Bearer {long_lived_key}"}
    try:
        response = await transport.send("GET", token_url, headers=headers, streaming=False)
        try:
            await response.aread()
        finally:
            await response.aclose()
    except httpx.HTTPError as e:
        logger.error(f"Access token refresh failed with exception: {e}")
        return None

    if not response.is_success:
        logger.error(f"Access token refresh failed with status {response.status_code}: {response.text[:200]}")
        return None

    try:
        data = response.json()
    except json.JSONDecodeError as e:
        logger.error(f"Access token response was not JSON: {e}")
        return None

    token = data.get("token") if isinstance(data, dict) else None
    expires_at = data.get("expires_at") if isinstance(data, dict) else None
    if not token or not expires_at:
        logger.error("Access token response missing token or expires_at")
        return None

    session.store_access_token(token, expires_at)
    logger.info("Successfully refreshed access token")
    return token
