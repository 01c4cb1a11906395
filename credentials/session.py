"""Process-lifetime session identity and token cache"""

import logging
import secrets
import time
import uuid
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# Short-lived tokens are refreshed this long before they expire
TOKEN_EXPIRY_MARGIN_MS = 60_000


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class SessionIdentity:
    """State shared across dispatches

    machine_id and session_id are generated lazily on first use and stay
    stable until reset(). access_token_expiry is in epoch milliseconds.
    """
    machine_id: str = ""
    session_id: str = ""
    access_token: str = ""
    access_token_expiry: int = 0
    cached_api_key: str = ""

    def ensure_identifiers(self) -> None:
        if not self.machine_id:
            self.machine_id = secrets.token_hex(32)
        if not self.session_id:
            self.session_id = f"{uuid.uuid4()}{_now_ms()}"

    def has_valid_access_token(self, now_ms: Optional[int] = None) -> bool:
        """True when a cached token has more than a minute of validity left"""
        if not self.access_token:
            return False
        now_ms = _now_ms() if now_ms is None else now_ms
        return now_ms < self.access_token_expiry - TOKEN_EXPIRY_MARGIN_MS

    def store_access_token(self, token: str, expires_at_seconds: int) -> None:
        self.access_token = token
        self.access_token_expiry = int(expires_at_seconds) * 1000

    def reset(self) -> None:
        """Drop identifiers and the short-lived token; they regenerate on next use"""
        self.access_token = ""
        self.access_token_expiry = 0
        self.machine_id = ""
        self.session_id = ""
        logger.info("Session identity and access token reset")
