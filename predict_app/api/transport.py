"""HTTP transport for the backend API."""

import asyncio
import socket
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..errors import NetworkError
from ..logging.config import get_api_logger

logger = get_api_logger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Raw HTTP response; body is left undecoded."""
    status_code: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(ABC):
    """Performs one HTTP exchange without interpreting the body."""

    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        body: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> HttpResponse:
        """
        Send a request and return the response.

        Non-2xx statuses are returned, not raised; only transport-level
        faults raise.

        Raises:
            NetworkError: If the server could not be reached
        """


class UrllibTransport(Transport):
    """urllib-based transport; blocking calls are moved off the event loop."""

    def __init__(self, timeout_seconds: float = 30.0):
        self.timeout_seconds = timeout_seconds

    async def request(
        self,
        method: str,
        url: str,
        body: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> HttpResponse:
        return await asyncio.to_thread(self._send, method, url, body, headers or {})

    def _send(
        self,
        method: str,
        url: str,
        body: Optional[bytes],
        headers: dict[str, str],
    ) -> HttpResponse:
        req = Request(url, data=body, headers=headers, method=method)

        try:
            with urlopen(req, timeout=self.timeout_seconds) as response:
                return HttpResponse(
                    status_code=response.getcode(),
                    body=response.read(),
                    headers=dict(response.headers.items()),
                )

        except HTTPError as e:
            # Error statuses still carry a JSON envelope worth reading
            logger.debug(
                "HTTP error status",
                method=method,
                url=url,
                status_code=e.code,
            )
            return HttpResponse(
                status_code=e.code,
                body=e.read() or b"",
                headers=dict(e.headers.items()) if e.headers else {},
            )

        except (URLError, socket.timeout, OSError) as e:
            logger.warning(
                "Network error",
                method=method,
                url=url,
                error=str(e),
            )
            raise NetworkError(f"Network error: {e}", url=url) from e
