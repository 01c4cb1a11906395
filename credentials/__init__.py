"""Credential management for Copilot upstream calls"""

from .session import SessionIdentity, TOKEN_EXPIRY_MARGIN_MS
from .validators import is_github_oauth_token, strip_bearer_prefix, mask_token
from .resolver import resolve_long_lived_key, has_any_token, REQUEST_KEY_FIELDS
from .token_refresh import refresh_short_lived_token

__all__ = [
    "SessionIdentity",
    "TOKEN_EXPIRY_MARGIN_MS",
    "is_github_oauth_token",
    "strip_bearer_prefix",
    "mask_token",
    "resolve_long_lived_key",
    "has_any_token",
    "REQUEST_KEY_FIELDS",
    "refresh_short_lived_token",
]
