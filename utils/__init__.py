"""Shared utilities package for the Copilot Interceptor proxy"""

from .storage import CredentialStore, FallbackTokenStore

__all__ = [
    "CredentialStore",
    "FallbackTokenStore",
]
