"""Typed client for the Predict backend API."""

import time
from typing import Any, Optional
from urllib.parse import urlencode, urlparse

from ..config.defaults import ApiParams
from ..data.models import LoginResult, MarketSummary, PlatformStats, User
from ..data.parsers import parse_login, parse_market_list, parse_profile, parse_stats
from ..errors import ApiError
from ..logging.config import get_api_logger
from .envelope import encode_json, unwrap
from .transport import Transport, UrllibTransport

logger = get_api_logger(__name__)


class ApiClient:
    """
    Calls the backend endpoints and returns parsed records.

    Every method raises an ApiError subclass on failure; deciding what a
    failure means for the session is left to the caller.
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[Transport] = None,
        user_agent: str = "predict-app/0.1",
        health_path: str = "/health",
    ):
        parsed = urlparse(base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Invalid base URL: {base_url}")

        self.base_url = base_url.rstrip("/")
        self.transport = transport or UrllibTransport()
        self.user_agent = user_agent
        self.health_path = health_path

    @classmethod
    def from_config(cls, params: ApiParams, transport: Optional[Transport] = None) -> "ApiClient":
        """Build a client from API configuration."""
        return cls(
            base_url=params.base_url,
            transport=transport or UrllibTransport(timeout_seconds=params.timeout_seconds),
            user_agent=params.user_agent,
            health_path=params.health_path,
        )

    @property
    def health_url(self) -> str:
        """Liveness probe URL, exposed to the view as a link only."""
        return self.base_url + self.health_path

    async def get_stats(self) -> PlatformStats:
        """GET /api/stats."""
        return parse_stats(await self._call("GET", "/api/stats"))

    async def get_profile(self, token: str) -> User:
        """GET /api/user/profile with the token as bearer credential."""
        data = await self._call(
            "GET",
            "/api/user/profile",
            headers={"Authorization": f"Bearer {token}"},
        )
        return parse_profile(data)

    async def login(self, phone: str, password: str) -> LoginResult:
        """POST /api/auth/login."""
        data = await self._call(
            "POST",
            "/api/auth/login",
            body={"phone": phone, "password": password},
        )
        return parse_login(data)

    async def register(self, phone: str, mpesa_name: str, password: str) -> Any:
        """POST /api/auth/register; the returned data is informational only."""
        return await self._call(
            "POST",
            "/api/auth/register",
            body={"phone": phone, "mpesaName": mpesa_name, "password": password},
        )

    async def list_markets(self, sort: str = "newest", limit: int = 6) -> tuple[MarketSummary, ...]:
        """GET /api/markets?sort=&limit=."""
        query = urlencode({"sort": sort, "limit": limit})
        return parse_market_list(await self._call("GET", f"/api/markets?{query}"))

    async def _call(
        self,
        method: str,
        path: str,
        body: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        request_headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        data = None
        if body is not None:
            data = encode_json(body)
            request_headers["Content-Type"] = "application/json"
        if headers:
            request_headers.update(headers)

        # Path only: query strings and headers may carry credentials
        log = logger.bind(method=method, path=path.split("?", 1)[0])
        start_time = time.time()

        try:
            response = await self.transport.request(
                method, self.base_url + path, body=data, headers=request_headers
            )
            result = unwrap(response)
        except ApiError as e:
            log.warning(
                "API call failed",
                error_type=type(e).__name__,
                error=str(e),
                duration_ms=int((time.time() - start_time) * 1000),
            )
            raise

        log.debug(
            "API call succeeded",
            status_code=response.status_code,
            duration_ms=int((time.time() - start_time) * 1000),
        )
        return result
