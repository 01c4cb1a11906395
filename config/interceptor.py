"""Runtime interceptor configuration consumed by the dispatcher"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field

import settings


class DestinationMode(str, Enum):
    """Upstream protocol the proxy talks to"""
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    PASSTHROUGH = "passthrough"


class InterceptorConfig(BaseModel):
    """Toggles and parameters for a dispatch

    Built once from ``settings``; tests construct it directly.
    """
    mode: DestinationMode = DestinationMode.ANTHROPIC
    thinking_enabled: bool = False
    thinking_budget: int = Field(default=10000, gt=0)
    adaptive_thinking: bool = False

    use_vscode_headers: bool = True
    remove_prefill: bool = True
    trim_assistant: bool = True
    force_last_user: bool = True
    basic_auth_compat: bool = False

    chat_version: str = "0.38.2026020704"
    code_version: str = "1.109.0"
    chrome_version: str = "142.0.7444.265"
    electron_version: str = "39.4.1"
    github_api_version: str = "2025-10-01"
    header_overrides: Dict[str, str] = Field(default_factory=dict)

    api_base: str = "https://api.githubcopilot.com"
    token_url: str = "https://api.github.com/copilot_internal/v2/token"
    cors_proxy_prefix: str = ""

    token_override: Optional[str] = None
    default_model: str = "claude-sonnet-4.5"
    default_max_tokens: int = 8192

    @staticmethod
    def parse_endpoint(endpoint: str) -> tuple[DestinationMode, bool]:
        """Map an endpoint setting to (mode, thinking_enabled)

        ``anthropic-thinking`` is the legacy spelling of anthropic mode
        with thinking turned on.
        """
        value = (endpoint or "").strip().lower()
        if value == "anthropic-thinking":
            return DestinationMode.ANTHROPIC, True
        return DestinationMode(value), False

    @classmethod
    def from_settings(cls, token_override: Optional[str] = None) -> "InterceptorConfig":
        mode, legacy_thinking = cls.parse_endpoint(settings.ENDPOINT)
        return cls(
            mode=mode,
            thinking_enabled=legacy_thinking or settings.THINKING_ENABLED,
            thinking_budget=settings.THINKING_BUDGET,
            adaptive_thinking=settings.ADAPTIVE_THINKING,
            use_vscode_headers=settings.USE_VSCODE_HEADERS,
            remove_prefill=settings.REMOVE_PREFILL,
            trim_assistant=settings.TRIM_ASSISTANT,
            force_last_user=settings.FORCE_LAST_USER,
            basic_auth_compat=settings.BASIC_AUTH_COMPAT,
            chat_version=settings.CHAT_VERSION,
            code_version=settings.CODE_VERSION,
            chrome_version=settings.CHROME_VERSION,
            electron_version=settings.ELECTRON_VERSION,
            github_api_version=settings.GITHUB_API_VERSION,
            header_overrides={
                str(k): "" if v is None else str(v) for k, v in settings.VSCODE_HEADER_OVERRIDES.items()
            },
            api_base=settings.COPILOT_API_BASE,
            token_url=settings.COPILOT_TOKEN_URL,
            cors_proxy_prefix=settings.CORS_PROXY_PREFIX,
            token_override=token_override or settings.COPILOT_TOKEN or None,
            default_model=settings.DEFAULT_MODEL,
            default_max_tokens=settings.DEFAULT_MAX_TOKENS,
        )

    @property
    def is_anthropic(self) -> bool:
        return self.mode == DestinationMode.ANTHROPIC
