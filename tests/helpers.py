import json
from typing import Callable, List

import httpx

from config.interceptor import DestinationMode, InterceptorConfig
from providers.httpx_transport import HttpxTransport

TOKEN_URL = "https://api.github.com/copilot_internal/v2/token"
API_BASE = "https://api.githubcopilot.com"
ANTHROPIC_URL = f"{API_BASE}/v1/messages"
OPENAI_URL = f"{API_BASE}/chat/completions"


class RecordingTransport(HttpxTransport):
    """HttpxTransport over httpx.MockTransport that keeps every request it saw"""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(client=httpx.AsyncClient(transport=httpx.MockTransport(_record)))

    def requests_to(self, url: str) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url) == url]


def make_config(**overrides) -> InterceptorConfig:
    values = {
        "mode": DestinationMode.ANTHROPIC,
        "use_vscode_headers": False,
        "api_base": API_BASE,
        "token_url": TOKEN_URL,
        "token_override": None,
    }
    values.update(overrides)
    return InterceptorConfig(**values)


def sse(*events: dict) -> bytes:
    return b"".join(
        f"data: {json.dumps(event, ensure_ascii=False)}\n\n".encode("utf-8") for event in events
    )
