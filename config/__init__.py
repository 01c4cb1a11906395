"""Configuration management package for the Copilot Interceptor proxy"""

from .loader import ConfigLoader, get_config_loader

__all__ = [
    "ConfigLoader",
    "get_config_loader",
]
