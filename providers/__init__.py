"""
Outbound HTTP transports.

The dispatcher and the token refresh only see ``BaseTransport``; the
production implementation wraps httpx.
"""
from providers.base_transport import BaseTransport
from providers.httpx_transport import HttpxTransport

__all__ = [
    'BaseTransport',
    'HttpxTransport',
]
