"""
httpx-backed transport used for the token exchange and completion calls.
"""
import logging
from typing import Dict, Any, Optional

import httpx

from settings import REQUEST_TIMEOUT, STREAM_TIMEOUT, CONNECT_TIMEOUT, READ_TIMEOUT
from providers.base_transport import BaseTransport

logger = logging.getLogger(__name__)

# STREAM_TIMEOUT with READ_TIMEOUT between chunks for streams, REQUEST_TIMEOUT otherwise
STREAMING_TIMEOUT = httpx.Timeout(STREAM_TIMEOUT, connect=CONNECT_TIMEOUT, read=READ_TIMEOUT)
NON_STREAMING_TIMEOUT = httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT)


class HttpxTransport(BaseTransport):
    """Transport over one long-lived ``httpx.AsyncClient``"""

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            client: Preconfigured client (tests pass one wrapping httpx.MockTransport)
        """
        self.client = client or httpx.AsyncClient(timeout=STREAMING_TIMEOUT)

    async def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        json_body: Optional[Dict[str, Any]] = None,
        include_credentials: bool = False,
        streaming: bool = True,
    ) -> httpx.Response:
        timeout = STREAMING_TIMEOUT if streaming else NON_STREAMING_TIMEOUT
        request = self.client.build_request(method, url, headers=headers, json=json_body, timeout=timeout)
        if not include_credentials and "Cookie" in request.headers:
            # credentials: omit
            del request.headers["Cookie"]

        logger.debug(f"{method} {url} (credentials={'include' if include_credentials else 'omit'})")
        response = await self.client.send(request, stream=True)
        if not include_credentials:
            self.client.cookies.clear()
        return response

    async def aclose(self) -> None:
        await self.client.aclose()
