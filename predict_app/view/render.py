"""
HTML fragment renderer.

Turns view models into markup for the page regions. Controls carry a
``data-command`` attribute naming the dispatcher command plus ``data-*``
parameters instead of inline handlers.
"""

from html import escape
from typing import Optional

from ..state.models import Notice, ViewState
from .models import (
    Action,
    MarketCardViewModel,
    MarketsViewModel,
    ModalViewModel,
    NavViewModel,
    StatsViewModel,
    ViewModel,
)

APP_REGION = "app"
MARKETS_REGION = "markets-container"
MODALS_REGION = "modals-container"
NOTICE_REGION = "notice"

REGIONS = (APP_REGION, MARKETS_REGION, MODALS_REGION, NOTICE_REGION)


def _data_attr(name: str) -> str:
    return "data-" + name.replace("_", "-")


def render_action(action: Action, css_class: str = "btn") -> str:
    attrs = [f'class="{css_class}"', f'data-command="{escape(action.command)}"']
    for key, value in action.params.items():
        attrs.append(f'{_data_attr(key)}="{escape(str(value))}"')
    if not action.enabled:
        attrs.append("disabled")
    return f'<button {" ".join(attrs)}>{escape(action.label)}</button>'


def render_nav(nav: NavViewModel) -> str:
    items = "".join(render_action(a, "nav-item") for a in nav.menu)
    account = ""
    if nav.logged_in:
        account = (
            f'<span class="balance">{escape(nav.balance or "")}</span>'
            f'<span class="phone">{escape(nav.phone or "")}</span>'
        )
    return (
        '<nav>'
        '<a class="brand" data-command="retry">KenyaPolitics Predict</a>'
        f'{account}<div class="menu">{items}</div>'
        '</nav>'
    )


def render_stats(stats: StatsViewModel) -> str:
    cells = (
        ("Active Markets", str(stats.active_markets)),
        ("Total Trades", str(stats.total_trades)),
        ("Trading Volume", stats.total_volume),
        ("All Markets", str(stats.total_markets)),
    )
    body = "".join(
        f'<div class="stat"><div class="value">{escape(value)}</div>'
        f'<div class="label">{escape(label)}</div></div>'
        for label, value in cells
    )
    return f'<section class="stats">{body}</section>'


def render_market_card(card: MarketCardViewModel) -> str:
    buttons = "".join(render_action(a, "market-action") for a in card.actions)
    return (
        f'<div class="market-card" data-market-id="{escape(card.id)}">'
        f'<span class="category">{escape(card.category)}</span>'
        f'<span class="ends">Ends: {escape(card.ends)}</span>'
        f'<h3>{escape(card.question)}</h3>'
        f'<div class="yes"><span class="pct">{escape(card.yes_pct)}</span>'
        f'<span class="volume">{escape(card.volume_yes)}</span></div>'
        f'<div class="no"><span class="pct">{escape(card.no_pct)}</span>'
        f'<span class="volume">{escape(card.volume_no)}</span></div>'
        f'<div class="total-volume">{escape(card.total_volume)}</div>'
        f'<div class="trades">{card.trade_count}</div>'
        f'{buttons}'
        '</div>'
    )


def render_markets(markets: MarketsViewModel) -> str:
    """Inner markup of the markets region."""
    return "".join(render_market_card(card) for card in markets.cards)


def render_markets_toolbar(markets: MarketsViewModel) -> str:
    controls = [render_action(a, "sort") for a in markets.sort_options]
    if markets.can_create:
        controls.append(render_action(Action("New Market", "show_create_market_modal"), "admin"))
    return f'<div class="toolbar">{"".join(controls)}</div>'


def render_modal(modal: Optional[ModalViewModel]) -> str:
    if modal is None:
        return ""
    params = "".join(
        f'<input type="hidden" name="{escape(key)}" value="{escape(str(value))}">'
        for key, value in modal.params.items()
    )
    return (
        f'<div class="modal" data-modal="{modal.kind.value}">'
        f'<h3>{escape(modal.title)}</h3>{params}'
        f'{render_action(Action("Close", "close_modal"), "close")}'
        '</div>'
    )


def render_notice(notice: Optional[Notice]) -> str:
    if notice is None:
        return ""
    return f'<div class="notice {notice.level.value}">{escape(notice.text)}</div>'


def render_app(vm: ViewModel) -> str:
    """Markup of the app region for any view state."""
    if vm.state is ViewState.LOADING:
        return '<div class="loading">Loading...</div>'

    if vm.state is ViewState.ERROR:
        title = vm.error.title if vm.error else "Error"
        message = vm.error.message if vm.error else ""
        return (
            '<div class="error-screen">'
            f'<h2>{escape(title)}</h2><p>{escape(message)}</p>'
            f'{render_action(Action("Retry", "retry"))}'
            '</div>'
        )

    hero = "".join(render_action(a, "hero-action") for a in vm.hero.actions) if vm.hero else ""
    markets = vm.markets or MarketsViewModel()
    footer = ""
    if vm.health_url:
        footer = f'<footer><a href="{escape(vm.health_url)}">Health Check</a></footer>'

    return (
        f'{render_nav(vm.nav) if vm.nav else ""}'
        f'<section class="hero">{hero}</section>'
        f'{render_stats(vm.stats) if vm.stats else ""}'
        '<section id="markets">'
        f'{render_markets_toolbar(markets)}'
        f'<div id="{MARKETS_REGION}"></div>'  # filled from its own region
        '</section>'
        f'{footer}'
    )


class HtmlRenderer:
    """Renders view models into per-region HTML fragments."""

    def render(self, vm: ViewModel) -> dict[str, str]:
        markets = vm.markets or MarketsViewModel()
        return {
            APP_REGION: render_app(vm),
            MARKETS_REGION: render_markets(markets),
            MODALS_REGION: render_modal(vm.modal),
            NOTICE_REGION: render_notice(vm.notice),
        }
