"""VS Code Copilot Chat header construction"""

import uuid
from typing import Dict, Optional

from credentials.session import SessionIdentity
from .constants import (
    EDITOR_PLUGIN_PREFIX,
    EDITOR_PLUGIN_VERSION_HEADER,
    EDITOR_PREFIX,
    EDITOR_VERSION_HEADER,
    GITHUB_API_VERSION_HEADER,
    INTEGRATION_ID,
    INTEGRATION_ID_HEADER,
    INTERACTION_ID_HEADER,
    MACHINE_ID_HEADER,
    REQUEST_ID_HEADER,
    SESSION_ID_HEADER,
    STATIC_VSCODE_HEADERS,
    USER_AGENT_HEADER,
    USER_AGENT_TEMPLATE,
)


def build_vscode_headers(
    session: SessionIdentity,
    chat_version: str,
    code_version: str,
    chrome_version: str = "142.0.7444.265",
    electron_version: str = "39.4.1",
    github_api_version: str = "2025-10-01",
    overrides: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """Build headers that identify the caller as VS Code Copilot Chat

    Machine and session ids are created on the first call and reused until
    the session is reset; interaction and request ids are new every call.

    Args:
        session: Session identity, filled in lazily
        chat_version: Copilot Chat extension version
        code_version: VS Code version
        overrides: Header values applied last; an empty value removes the header,
            so a renamed header is an empty old name plus the new one

    Returns:
        Header name to value mapping
    """
    session.ensure_identifiers()
    user_agent = USER_AGENT_TEMPLATE.format(
        code_version=code_version,
        chrome_version=chrome_version,
        electron_version=electron_version,
    )
    headers = {
        INTEGRATION_ID_HEADER: INTEGRATION_ID,
        EDITOR_PLUGIN_VERSION_HEADER: f"{EDITOR_PLUGIN_PREFIX}/{chat_version}",
        EDITOR_VERSION_HEADER: f"{EDITOR_PREFIX}/{code_version}",
        USER_AGENT_HEADER: user_agent,
        MACHINE_ID_HEADER: session.machine_id,
        SESSION_ID_HEADER: session.session_id,
        GITHUB_API_VERSION_HEADER: github_api_version,
        INTERACTION_ID_HEADER: str(uuid.uuid4()),
        REQUEST_ID_HEADER: str(uuid.uuid4()),
        **STATIC_VSCODE_HEADERS,
    }
    for name, value in (overrides or {}).items():
        if value:
            headers[name] = value
        else:
            headers.pop(name, None)
    return headers


def build_minimal_headers() -> Dict[str, str]:
    """Integration id only, for requests sent without the disguise"""
    return {INTEGRATION_ID_HEADER: INTEGRATION_ID}
