"""
View models: display-ready, immutable snapshots produced by the projection.

Everything here is already formatted; renderers only place values into
markup and never look at session or server records directly.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from ..state.models import ErrorScreen, ModalKind, Notice, ViewState


@dataclass(frozen=True)
class Action:
    """A clickable control bound to a dispatcher command."""
    label: str
    command: str
    params: dict[str, Any] = field(default_factory=dict)
    enabled: bool = True


@dataclass(frozen=True)
class NavViewModel:
    logged_in: bool
    phone: Optional[str] = None
    balance: Optional[str] = None
    is_admin: bool = False
    menu: tuple[Action, ...] = ()


@dataclass(frozen=True)
class HeroViewModel:
    actions: tuple[Action, ...] = ()


@dataclass(frozen=True)
class StatsViewModel:
    active_markets: int
    total_trades: int
    total_volume: str
    total_markets: int


@dataclass(frozen=True)
class MarketCardViewModel:
    id: str
    question: str
    category: str
    ends: str
    yes_pct: str
    no_pct: str
    volume_yes: str
    volume_no: str
    total_volume: str
    trade_count: int
    can_trade: bool
    actions: tuple[Action, ...] = ()


@dataclass(frozen=True)
class MarketsViewModel:
    cards: tuple[MarketCardViewModel, ...] = ()
    sort_options: tuple[Action, ...] = ()
    selected_sort: Optional[str] = None
    can_create: bool = False

    @property
    def count(self) -> int:
        return len(self.cards)


@dataclass(frozen=True)
class ModalViewModel:
    kind: ModalKind
    title: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ViewModel:
    """Whole-page view model."""
    state: ViewState
    nav: Optional[NavViewModel] = None
    hero: Optional[HeroViewModel] = None
    stats: Optional[StatsViewModel] = None
    markets: Optional[MarketsViewModel] = None
    error: Optional[ErrorScreen] = None
    modal: Optional[ModalViewModel] = None
    notice: Optional[Notice] = None
    health_url: Optional[str] = None

    @property
    def market_count(self) -> int:
        return self.markets.count if self.markets else 0
