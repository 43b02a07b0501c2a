"""Tests for HTML rendering and the in-memory document view."""

import pytest

from predict_app.data.parsers import parse_stats, parse_user
from predict_app.state.models import ErrorScreen, Modal, ModalKind, Notice, NoticeLevel, ViewState
from predict_app.view.document import Document, HtmlView
from predict_app.view.models import Action
from predict_app.view.projection import project, project_markets
from predict_app.view.render import (
    APP_REGION,
    MARKETS_REGION,
    MODALS_REGION,
    NOTICE_REGION,
    render_action,
    render_notice,
)


class TestRenderAction:

    def test_command_and_params(self):
        html = render_action(Action("Buy YES", "show_trade_modal", {"market_id": "m1", "outcome": "YES"}))

        assert 'data-command="show_trade_modal"' in html
        assert 'data-market-id="m1"' in html
        assert 'data-outcome="YES"' in html
        assert "disabled" not in html
        assert "onclick" not in html

    def test_disabled(self):
        assert "disabled" in render_action(Action("Buy NO", "show_trade_modal", enabled=False))

    def test_escaping(self):
        html = render_action(Action("<b>x</b>", "load_markets", {"sort": '"><script>'}))

        assert "<script>" not in html
        assert "&lt;b&gt;" in html


class TestHtmlView:
    """Test that page regions are replaced as view models arrive."""

    def test_anonymous_page(self, stats_payload):
        view = HtmlView()

        view.render(project(
            ViewState.ANONYMOUS,
            stats=parse_stats(stats_payload),
            health_url="http://predict.test/health",
        ))

        app = view.document.get(APP_REGION)
        assert "KSh 50,000" in app
        assert 'data-command="show_register_modal"' in app
        assert 'href="http://predict.test/health"' in app
        markets = view.document.get(MARKETS_REGION)
        assert markets.count('class="market-card"') == 1
        assert "60.0%" in markets
        assert view.document.get(MODALS_REGION) == ""
        assert view.last_view_model.state is ViewState.ANONYMOUS

    def test_authenticated_page(self, stats_payload, admin_payload):
        view = HtmlView()

        view.render(project(
            ViewState.AUTHENTICATED,
            user=parse_user(admin_payload),
            stats=parse_stats(stats_payload),
        ))

        app = view.document.get(APP_REGION)
        assert "KSh 1,500" in app
        assert 'data-command="logout"' in app
        assert 'data-command="show_create_market_modal"' in app

    def test_question_is_escaped(self, stats_payload, market_payload):
        stats_payload["recentMarkets"] = [{**market_payload, "question": "<img src=x onerror=alert(1)>"}]
        view = HtmlView()

        view.render(project(ViewState.ANONYMOUS, stats=parse_stats(stats_payload)))

        assert "<img" not in view.document.get(MARKETS_REGION)

    def test_error_page(self):
        view = HtmlView()

        view.render(project(ViewState.ERROR, error=ErrorScreen("Service Temporarily Unavailable", "Down.")))

        app = view.document.get(APP_REGION)
        assert "Service Temporarily Unavailable" in app
        assert 'data-command="retry"' in app
        assert view.document.get(MARKETS_REGION) == ""

    def test_loading_page(self):
        view = HtmlView()
        view.render(project(ViewState.LOADING))
        assert "Loading" in view.document.get(APP_REGION)

    def test_partial_updates(self, stats_payload):
        view = HtmlView()
        stats = parse_stats(stats_payload)
        view.render(project(ViewState.ANONYMOUS, stats=stats))
        app_before = view.document.get(APP_REGION)

        view.render_markets(project_markets((), None))
        view.render_notice(Notice("Login successful!", NoticeLevel.SUCCESS))

        assert view.document.get(MARKETS_REGION) == ""
        assert view.document.get(APP_REGION) == app_before
        assert "Login successful!" in view.document.get(NOTICE_REGION)

    def test_modal_open_and_close(self, stats_payload):
        view = HtmlView()
        vm = project(
            ViewState.ANONYMOUS,
            stats=parse_stats(stats_payload),
            modal=Modal(ModalKind.LOGIN, {"phone": "0712345678"}),
        )

        view.render_modal(vm.modal)
        modal_html = view.document.get(MODALS_REGION)
        assert 'data-modal="login"' in modal_html
        assert 'value="0712345678"' in modal_html

        view.render_modal(None)
        assert view.document.get(MODALS_REGION) == ""


class TestDocument:

    def test_unknown_region(self):
        with pytest.raises(KeyError):
            Document().replace("sidebar", "<div></div>")

    def test_empty_notice(self):
        assert render_notice(None) == ""
