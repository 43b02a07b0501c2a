"""
Pure state → view-model projection.

Nothing in this module performs I/O or touches the session object; the same
inputs always give the same ViewModel, so it can be tested without a
rendering environment.
"""

from typing import Optional, Sequence

from ..data.models import MarketSummary, PlatformStats, User
from ..state.models import ErrorScreen, Modal, ModalKind, Notice, ViewState
from ..utils.formatting import format_currency, format_date, format_percent
from .models import (
    Action,
    HeroViewModel,
    MarketCardViewModel,
    MarketsViewModel,
    ModalViewModel,
    NavViewModel,
    StatsViewModel,
    ViewModel,
)

SORT_LABELS = {
    "newest": "Newest",
    "volume": "Most Active",
}

_MODAL_TITLES = {
    ModalKind.LOGIN: "Login",
    ModalKind.REGISTER: "Register",
    ModalKind.DEPOSIT: "Deposit",
    ModalKind.WITHDRAW: "Withdraw",
    ModalKind.PROFILE: "My Profile",
    ModalKind.ADMIN_PANEL: "Admin Panel",
    ModalKind.CREATE_MARKET: "New Market",
    ModalKind.MARKET_DETAILS: "Market Details",
}


def project_nav(user: Optional[User]) -> NavViewModel:
    if user is None:
        return NavViewModel(
            logged_in=False,
            menu=(Action("Login / Register", "show_login_modal"),),
        )

    menu = [
        Action("My Profile", "show_profile"),
        Action("Deposit", "show_deposit_modal"),
        Action("Withdraw", "show_withdraw_modal"),
    ]
    if user.is_admin:
        menu.append(Action("Admin Panel", "show_admin_panel"))
    menu.append(Action("Logout", "logout"))

    return NavViewModel(
        logged_in=True,
        phone=user.phone,
        balance=format_currency(user.balance),
        is_admin=user.is_admin,
        menu=tuple(menu),
    )


def project_hero(user: Optional[User]) -> HeroViewModel:
    if user is None:
        return HeroViewModel(actions=(
            Action("Get Started Free", "show_register_modal"),
            Action("Login to Trade", "show_login_modal"),
        ))
    return HeroViewModel(actions=(
        Action("Start Trading", "load_markets"),
        Action("Add Funds", "show_deposit_modal"),
    ))


def project_stats(stats: PlatformStats) -> StatsViewModel:
    platform = stats.platform
    return StatsViewModel(
        active_markets=platform.active_markets,
        total_trades=platform.total_trades,
        total_volume=format_currency(platform.total_volume, round_whole=True),
        total_markets=platform.total_markets,
    )


def project_market(market: MarketSummary, logged_in: bool) -> MarketCardViewModel:
    """Project one market summary into a card."""
    return MarketCardViewModel(
        id=market.id,
        question=market.question,
        category=market.category,
        ends=format_date(market.resolution_date),
        yes_pct=format_percent(market.probability.yes),
        no_pct=format_percent(market.probability.no),
        volume_yes=format_currency(market.volume_yes),
        volume_no=format_currency(market.volume_no),
        total_volume=format_currency(market.total_volume),
        trade_count=market.trade_count,
        can_trade=logged_in,
        actions=(
            Action("Buy YES", "show_trade_modal",
                   {"market_id": market.id, "outcome": "YES"}, enabled=logged_in),
            Action("Buy NO", "show_trade_modal",
                   {"market_id": market.id, "outcome": "NO"}, enabled=logged_in),
            Action("Details", "view_market_details", {"market_id": market.id}),
        ),
    )


def project_markets(
    markets: Sequence[MarketSummary],
    user: Optional[User],
    sorts: Sequence[str] = ("newest", "volume"),
    selected_sort: Optional[str] = None,
) -> MarketsViewModel:
    logged_in = user is not None
    return MarketsViewModel(
        cards=tuple(project_market(m, logged_in) for m in markets),
        sort_options=tuple(
            Action(SORT_LABELS.get(sort, sort.title()), "load_markets", {"sort": sort})
            for sort in sorts
        ),
        selected_sort=selected_sort,
        can_create=bool(user and user.is_admin),
    )


def project_modal(modal: Optional[Modal]) -> Optional[ModalViewModel]:
    if modal is None:
        return None
    if modal.kind is ModalKind.TRADE:
        title = f"Buy {modal.params.get('outcome', '')}".strip()
    else:
        title = _MODAL_TITLES[modal.kind]
    return ModalViewModel(kind=modal.kind, title=title, params=dict(modal.params))


def project(
    state: ViewState,
    user: Optional[User] = None,
    stats: Optional[PlatformStats] = None,
    markets: Optional[Sequence[MarketSummary]] = None,
    modal: Optional[Modal] = None,
    notice: Optional[Notice] = None,
    error: Optional[ErrorScreen] = None,
    health_url: Optional[str] = None,
    sorts: Sequence[str] = ("newest", "volume"),
    selected_sort: Optional[str] = None,
) -> ViewModel:
    """
    Build the whole-page view model.

    Args:
        state: Current view state
        user: Validated user, None when anonymous
        stats: Bootstrap stats; required for ANONYMOUS and AUTHENTICATED
        markets: Market list to show; defaults to the stats' recent markets
        modal: Open dialog, if any
        notice: Message to surface, if any
        error: Error screen content for the ERROR state
        health_url: Liveness probe link
        sorts: Sort tokens offered as buttons
        selected_sort: Sort of the currently shown list

    Returns:
        ViewModel for the renderer
    """
    if state is ViewState.LOADING:
        return ViewModel(state=state, modal=project_modal(modal), notice=notice)

    if state is ViewState.ERROR:
        return ViewModel(state=state, error=error, modal=project_modal(modal), notice=notice)

    if stats is None:
        raise ValueError(f"Stats are required to project the {state.value} view")

    # Anonymous views never show a user even if one is still lingering
    shown_user = user if state is ViewState.AUTHENTICATED else None
    shown_markets = stats.recent_markets if markets is None else markets

    return ViewModel(
        state=state,
        nav=project_nav(shown_user),
        hero=project_hero(shown_user),
        stats=project_stats(stats),
        markets=project_markets(shown_markets, shown_user, sorts, selected_sort),
        modal=project_modal(modal),
        notice=notice,
        health_url=health_url,
    )
