"""Pytest configuration and shared fixtures."""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlparse

import pytest

from predict_app.api.client import ApiClient
from predict_app.api.transport import HttpResponse, Transport
from predict_app.config.defaults import get_default_config
from predict_app.coordinator import SessionCoordinator
from predict_app.persistence.token_store import MemoryKeyValueStore, TokenStorage
from predict_app.view.document import View

BASE_URL = "http://predict.test"


@dataclass
class RecordedRequest:
    method: str
    path: str
    query: Dict[str, list]
    body: Optional[Dict[str, Any]]
    headers: Dict[str, str]


class FakeTransport(Transport):
    """In-process transport routing (method, path) to canned responses."""

    def __init__(self):
        self.routes: Dict[tuple, Any] = {}
        self.gates: Dict[tuple, asyncio.Event] = {}
        self.requests: list = []

    def add_json(self, method: str, path: str, payload: Any, status: int = 200) -> None:
        self.routes[(method, path)] = HttpResponse(status, json.dumps(payload).encode())

    def add_success(self, method: str, path: str, data: Any = None, status: int = 200) -> None:
        self.add_json(method, path, {"success": True, "data": data}, status)

    def add_failure(self, method: str, path: str, error: str, status: int = 400) -> None:
        self.add_json(method, path, {"success": False, "error": error}, status)

    def add_raw(self, method: str, path: str, body: bytes, status: int = 200) -> None:
        self.routes[(method, path)] = HttpResponse(status, body)

    def add_error(self, method: str, path: str, error: Exception) -> None:
        self.routes[(method, path)] = error

    def gate(self, method: str, path: str) -> asyncio.Event:
        """Hold requests to this route until the returned event is set."""
        event = asyncio.Event()
        self.gates[(method, path)] = event
        return event

    def calls(self, method: str, path: str) -> list:
        return [r for r in self.requests if r.method == method and r.path == path]

    async def request(self, method, url, body=None, headers=None):
        parsed = urlparse(url)
        self.requests.append(RecordedRequest(
            method=method,
            path=parsed.path,
            query=parse_qs(parsed.query),
            body=json.loads(body) if body else None,
            headers=dict(headers or {}),
        ))

        key = (method, parsed.path)
        # Snapshot the route before waiting so a test can swap it meanwhile
        route = self.routes.get(key)
        gate = self.gates.pop(key, None)
        if gate is not None:
            await gate.wait()

        if route is None:
            return HttpResponse(404, b'{"success": false, "error": "Not found"}')
        if isinstance(route, Exception):
            raise route
        return route


@dataclass
class RecordingView(View):
    """View that keeps every view model it receives."""
    pages: list = field(default_factory=list)
    market_updates: list = field(default_factory=list)
    modals: list = field(default_factory=list)
    notices: list = field(default_factory=list)

    def render(self, vm):
        self.pages.append(vm)

    def render_markets(self, markets):
        self.market_updates.append(markets)

    def render_modal(self, modal):
        self.modals.append(modal)

    def render_notice(self, notice):
        self.notices.append(notice)

    @property
    def last_page(self):
        return self.pages[-1] if self.pages else None


@pytest.fixture
def market_payload() -> Dict[str, Any]:
    """Single market summary as the server sends it."""
    return {
        "_id": "m1",
        "question": "Q?",
        "category": "Politics",
        "resolutionDate": "2024-12-01",
        "probability": {"yesProbability": 0.6, "noProbability": 0.4},
        "volumeYes": 6000,
        "volumeNo": 4000,
        "totalVolume": 10000,
        "tradeCount": 12,
    }


@pytest.fixture
def stats_payload(market_payload) -> Dict[str, Any]:
    """Stats data for a platform with one recent market."""
    return {
        "platform": {
            "activeMarkets": 3,
            "totalTrades": 10,
            "totalVolume": 50000,
            "totalMarkets": 5,
        },
        "recentMarkets": [market_payload],
    }


@pytest.fixture
def user_payload() -> Dict[str, Any]:
    return {
        "_id": "u1",
        "phone": "0712345678",
        "balance": 1500,
        "role": "user",
        "mpesaName": "Jane Wanjiku",
    }


@pytest.fixture
def admin_payload(user_payload) -> Dict[str, Any]:
    return {**user_payload, "_id": "admin1", "role": "admin"}


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def healthy_transport(transport, stats_payload, market_payload) -> FakeTransport:
    """Transport where stats and market listing succeed."""
    transport.add_success("GET", "/api/stats", stats_payload)
    transport.add_success("GET", "/api/markets", [market_payload])
    return transport


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def view() -> RecordingView:
    return RecordingView()


@pytest.fixture
def make_coordinator(store, view):
    """Factory building a coordinator around a fake transport."""
    def _make(transport, config=None, token: Optional[str] = None):
        if token is not None:
            store.set_item("token", token)
        return SessionCoordinator(
            api=ApiClient(BASE_URL, transport=transport),
            token_storage=TokenStorage(store, key="token"),
            view=view,
            config=config or get_default_config(),
        )
    return _make
