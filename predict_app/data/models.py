"""
Canonical data models for backend payloads.

This module defines immutable records that represent validated server data
after parsing from the JSON wire format. The client never mutates them;
a newer server response replaces a record wholesale.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

PROBABILITY_EPSILON = 1e-6


class UserRole(str, Enum):
    """Account roles known to the client."""
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class User:
    """Authenticated account as reported by the server."""
    id: str
    phone: str
    balance: float              # KSh
    role: UserRole = UserRole.USER
    mpesa_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


@dataclass(frozen=True)
class Probability:
    """Implied YES/NO probabilities; both sides sum to 1."""
    yes: float
    no: float

    @property
    def is_consistent(self) -> bool:
        return abs((self.yes + self.no) - 1.0) <= PROBABILITY_EPSILON


@dataclass(frozen=True)
class MarketSummary:
    """Read-only projection of a market."""
    id: str
    question: str
    category: str
    resolution_date: str        # As sent by the server (ISO date or datetime)
    probability: Probability
    volume_yes: float = 0.0
    volume_no: float = 0.0
    total_volume: float = 0.0
    trade_count: int = 0


@dataclass(frozen=True)
class PlatformTotals:
    """Aggregate platform counters."""
    active_markets: int
    total_trades: int
    total_volume: float
    total_markets: int


@dataclass(frozen=True)
class PlatformStats:
    """Bootstrap payload of /api/stats; transient, refetched per load."""
    platform: PlatformTotals
    recent_markets: tuple[MarketSummary, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class LoginResult:
    """Successful login payload."""
    token: str
    user: User
