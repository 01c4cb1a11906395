"""HTTP headers and disguise constants package"""

from .constants import (
    INTEGRATION_ID,
    INTEGRATION_ID_HEADER,
    STATIC_VSCODE_HEADERS,
    USER_AGENT_TEMPLATE,
)
from .disguise import build_vscode_headers, build_minimal_headers

__all__ = [
    "INTEGRATION_ID",
    "INTEGRATION_ID_HEADER",
    "STATIC_VSCODE_HEADERS",
    "USER_AGENT_TEMPLATE",
    "build_vscode_headers",
    "build_minimal_headers",
]
