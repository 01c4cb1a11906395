"""HTTP header names and fixed values for the VS Code Copilot Chat disguise

Version strings are not here: they come from configuration because the
upstream may reject stale editor/extension versions.
"""

from typing import Dict

INTEGRATION_ID_HEADER = "Copilot-Integration-Id"
INTEGRATION_ID = "vscode-chat"

EDITOR_PLUGIN_VERSION_HEADER = "Editor-Plugin-Version"
EDITOR_VERSION_HEADER = "Editor-Version"
USER_AGENT_HEADER = "User-Agent"
MACHINE_ID_HEADER = "Vscode-Machineid"
SESSION_ID_HEADER = "Vscode-Sessionid"
GITHUB_API_VERSION_HEADER = "X-Github-Api-Version"
INTERACTION_ID_HEADER = "X-Interaction-Id"
REQUEST_ID_HEADER = "X-Request-Id"

EDITOR_PLUGIN_PREFIX = "copilot-chat"
EDITOR_PREFIX = "vscode"

# Electron renderer user agent; placeholders filled from configuration
USER_AGENT_TEMPLATE = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Code/{code_version} Chrome/{chrome_version} "
    "Electron/{electron_version} Safari/537.36"
)

# Headers sent verbatim on every disguised request
STATIC_VSCODE_HEADERS: Dict[str, str] = {
    "X-Initiator": "user",
    "X-Interaction-Type": "conversation-panel",
    "X-Vscode-User-Agent-Library-Version": "electron-fetch",
}
