"""Credential format helpers"""

import re

# GitHub OAuth tokens (the long-lived key Copilot accepts) start with gho_
GITHUB_OAUTH_TOKEN_PREFIX = "gho_"

_BEARER_PREFIX = re.compile(r"^Bearer\s+", re.IGNORECASE)


def is_github_oauth_token(value) -> bool:
    """Check if a value looks like a GitHub OAuth token"""
    return isinstance(value, str) and value.startswith(GITHUB_OAUTH_TOKEN_PREFIX)


def strip_bearer_prefix(value: str) -> str:
    """Remove a leading 'Bearer ' (any case) and surrounding whitespace"""
    return _BEARER_PREFIX.sub("", value).strip()


def mask_token(value: str, visible: int = 10) -> str:
    """Shorten a secret for log output"""
    if not value:
        return ""
    return f"{value[:visible]}..."
