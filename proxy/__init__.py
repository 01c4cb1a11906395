"""
Copilot Interceptor - proxy server package.

Accepts OpenAI chat completion requests and forwards them to the GitHub
Copilot API, either converted to the Anthropic messages format or passed
through, with the responses converted back to OpenAI chat completions.
"""
from .server import ProxyServer
from .app import app

__version__ = "1.0.0"

__all__ = [
    'ProxyServer',
    'app',
]
