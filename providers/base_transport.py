"""
Base transport interface for upstream HTTP calls.
Defines the contract the dispatcher and token refresh depend on.
"""
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

import httpx


class BaseTransport(ABC):
    """Abstract outbound HTTP capability"""

    @abstractmethod
    async def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        json_body: Optional[Dict[str, Any]] = None,
        include_credentials: bool = False,
        streaming: bool = True,
    ) -> httpx.Response:
        """Send a request and return the response with its body unread

        Callers must read or close the response (``aread``/``aclose``).

        Args:
            method: HTTP method
            url: Absolute URL
            headers: Request headers
            json_body: Optional JSON body
            include_credentials: Send stored cookies with the request
            streaming: The caller reads the body incrementally; selects the timeout profile

        Returns:
            The streamed HTTP response
        """
        pass

    async def aclose(self) -> None:
        """Release pooled connections"""
        return None
