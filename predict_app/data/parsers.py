"""
Parsers for converting backend JSON payloads into canonical records.

Each parser takes the ``data`` member of an already-unwrapped response
envelope. Shape problems raise MalformedResponseError so callers can treat
them exactly like any other failed fetch.
"""

import math
from typing import Any

from ..errors import MalformedResponseError
from .models import (
    LoginResult,
    MarketSummary,
    PlatformStats,
    PlatformTotals,
    Probability,
    User,
    UserRole,
)


def _require_mapping(payload: Any, what: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise MalformedResponseError(
            f"Expected {what} object, got {type(payload).__name__}",
            expected_format=what
        )
    return payload


def _number(value: Any, field_name: str, default: float = 0.0) -> float:
    """Coerce a numeric field; null or missing counts as default."""
    if value is None:
        return default
    if isinstance(value, bool):
        raise MalformedResponseError(f"Invalid number for {field_name}: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Invalid number for {field_name}: {value!r}") from e
    if not math.isfinite(number):
        raise MalformedResponseError(f"Non-finite number for {field_name}: {value!r}")
    return number


def _entity_id(payload: dict[str, Any], what: str) -> str:
    # Mongo-backed endpoints send _id, newer ones id
    raw_id = payload.get("_id", payload.get("id"))
    if raw_id is None or raw_id == "":
        raise MalformedResponseError(f"{what} is missing an id", expected_format=what)
    return str(raw_id)


def parse_user(payload: Any) -> User:
    """Parse a user record."""
    data = _require_mapping(payload, "user")

    phone = data.get("phone")
    if not isinstance(phone, str) or not phone:
        raise MalformedResponseError("user is missing a phone number", expected_format="user")

    try:
        role = UserRole(data.get("role") or UserRole.USER.value)
    except ValueError:
        role = UserRole.USER

    return User(
        id=_entity_id(data, "user"),
        phone=phone,
        balance=_number(data.get("balance"), "balance"),
        role=role,
        mpesa_name=data.get("mpesaName"),
    )


def parse_profile(payload: Any) -> User:
    """Parse /api/user/profile data, which nests the record under ``user``."""
    data = _require_mapping(payload, "profile")
    return parse_user(data.get("user"))


def parse_probability(payload: Any) -> Probability:
    """Parse a probability pair and check that it sums to one."""
    data = _require_mapping(payload, "probability")
    probability = Probability(
        yes=_number(data.get("yesProbability"), "yesProbability"),
        no=_number(data.get("noProbability"), "noProbability"),
    )
    if not probability.is_consistent:
        raise MalformedResponseError(
            f"Probabilities do not sum to 1: yes={probability.yes} no={probability.no}",
            expected_format="probability"
        )
    return probability


def parse_market(payload: Any) -> MarketSummary:
    """Parse a single market summary."""
    data = _require_mapping(payload, "market")

    question = data.get("question")
    if not isinstance(question, str) or not question:
        raise MalformedResponseError("market is missing a question", expected_format="market")

    return MarketSummary(
        id=_entity_id(data, "market"),
        question=question,
        category=str(data.get("category") or ""),
        resolution_date=str(data.get("resolutionDate") or ""),
        probability=parse_probability(data.get("probability")),
        volume_yes=_number(data.get("volumeYes"), "volumeYes"),
        volume_no=_number(data.get("volumeNo"), "volumeNo"),
        total_volume=_number(data.get("totalVolume"), "totalVolume"),
        trade_count=int(_number(data.get("tradeCount"), "tradeCount")),
    )


def parse_market_list(payload: Any) -> tuple[MarketSummary, ...]:
    """
    Parse /api/markets data.

    Accepts either a bare list of markets or an object with a ``markets`` list.
    """
    if isinstance(payload, dict):
        payload = payload.get("markets")
    if not isinstance(payload, list):
        raise MalformedResponseError("Expected a list of markets", expected_format="markets")
    return tuple(parse_market(item) for item in payload)


def parse_stats(payload: Any) -> PlatformStats:
    """Parse /api/stats data."""
    data = _require_mapping(payload, "stats")
    platform = _require_mapping(data.get("platform"), "platform")

    totals = PlatformTotals(
        active_markets=int(_number(platform.get("activeMarkets"), "activeMarkets")),
        total_trades=int(_number(platform.get("totalTrades"), "totalTrades")),
        total_volume=_number(platform.get("totalVolume"), "totalVolume"),
        total_markets=int(_number(platform.get("totalMarkets"), "totalMarkets")),
    )

    recent = data.get("recentMarkets") or []
    if not isinstance(recent, list):
        raise MalformedResponseError("recentMarkets must be a list", expected_format="stats")

    return PlatformStats(
        platform=totals,
        recent_markets=tuple(parse_market(item) for item in recent),
    )


def parse_login(payload: Any) -> LoginResult:
    """Parse /api/auth/login data."""
    data = _require_mapping(payload, "login")

    token = data.get("token")
    if not isinstance(token, str) or not token:
        raise MalformedResponseError("login response is missing a token", expected_format="login")

    return LoginResult(token=token, user=parse_user(data.get("user")))
