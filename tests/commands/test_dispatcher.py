"""Tests for the command dispatcher."""

import asyncio
from html.parser import HTMLParser

import pytest

from predict_app.commands import CommandDispatcher, build_dispatcher
from predict_app.commands.dispatcher import command_from_attributes
from predict_app.errors import UnknownCommandError
from predict_app.state.models import ModalKind, ViewState
from predict_app.view.render import MARKETS_REGION, HtmlRenderer


class TestCommandDispatcher:

    def test_sync_and_async_handlers(self):
        dispatcher = CommandDispatcher()

        async def double(value):
            return value * 2

        dispatcher.register("echo", lambda value: value)
        dispatcher.register("double", double)

        assert asyncio.run(dispatcher.dispatch("echo", value=3)) == 3
        assert asyncio.run(dispatcher.dispatch("double", value=3)) == 6

    def test_unknown_command(self):
        with pytest.raises(UnknownCommandError) as exc_info:
            asyncio.run(CommandDispatcher().dispatch("launch_rockets"))
        assert exc_info.value.name == "launch_rockets"

    def test_duplicate_registration(self):
        dispatcher = CommandDispatcher()
        dispatcher.register("logout", lambda: None)

        with pytest.raises(ValueError):
            dispatcher.register("logout", lambda: None)


class TestBuildDispatcher:
    """Test that rendered controls resolve to coordinator operations."""

    def test_every_rendered_command_is_registered(self, healthy_transport, make_coordinator):
        coordinator = make_coordinator(healthy_transport)
        dispatcher = build_dispatcher(coordinator)
        asyncio.run(coordinator.initialize())

        vm = coordinator.view_model()
        actions = list(vm.nav.menu) + list(vm.hero.actions) + list(vm.markets.sort_options)
        for card in vm.markets.cards:
            actions.extend(card.actions)

        for action in actions:
            assert action.command in dispatcher

    def test_dispatch_drives_coordinator(self, healthy_transport, make_coordinator):
        coordinator = make_coordinator(healthy_transport)
        dispatcher = build_dispatcher(coordinator)

        async def scenario():
            await dispatcher.dispatch("initialize")
            await dispatcher.dispatch("show_trade_modal", market_id="m1", outcome="yes")
            return await dispatcher.dispatch("load_markets", sort="volume")

        result = asyncio.run(scenario())

        assert result.ok
        assert coordinator.state is ViewState.ANONYMOUS
        # Anonymous users are sent to the login dialog instead of trading
        assert coordinator.modal.kind is ModalKind.LOGIN
        assert healthy_transport.calls("GET", "/api/markets")[-1].query["sort"] == ["volume"]

    def test_registered_names(self, transport, make_coordinator):
        names = build_dispatcher(make_coordinator(transport)).names()
        assert "login" in names
        assert "retry" in names
        assert names == sorted(names)


class _ButtonCollector(HTMLParser):
    """Collects the attributes of every button in a fragment."""

    def __init__(self):
        super().__init__()
        self.buttons = []

    def handle_starttag(self, tag, attrs):
        if tag == "button":
            self.buttons.append(dict(attrs))


def _card_buttons(coordinator):
    collector = _ButtonCollector()
    collector.feed(HtmlRenderer().render(coordinator.view_model())[MARKETS_REGION])
    return {button["data-command"] + ":" + button.get("data-outcome", ""): button for button in collector.buttons}


class TestRenderedControls:
    """Test that rendered controls dispatch back with their original parameters."""

    def test_attributes_map_to_keyword_params(self):
        name, params = command_from_attributes({
            "class": "market-action",
            "data-command": "show_trade_modal",
            "data-market-id": "m1",
            "data-outcome": "YES",
        })

        assert name == "show_trade_modal"
        assert params == {"market_id": "m1", "outcome": "YES"}

    def test_missing_command_attribute(self):
        with pytest.raises(ValueError):
            command_from_attributes({"data-market-id": "m1"})

    def test_buy_button_opens_trade_dialog(self, healthy_transport, make_coordinator, user_payload):
        healthy_transport.add_success("GET", "/api/user/profile", {"user": user_payload})
        coordinator = make_coordinator(healthy_transport, token="good-token")
        dispatcher = build_dispatcher(coordinator)
        asyncio.run(coordinator.initialize())

        result = asyncio.run(dispatcher.dispatch_element(_card_buttons(coordinator)["show_trade_modal:YES"]))

        assert result.ok
        assert coordinator.modal.kind is ModalKind.TRADE
        assert coordinator.modal.params == {"market_id": "m1", "outcome": "YES"}

    def test_details_button_for_visitor(self, healthy_transport, make_coordinator):
        coordinator = make_coordinator(healthy_transport)
        dispatcher = build_dispatcher(coordinator)
        asyncio.run(coordinator.initialize())

        asyncio.run(dispatcher.dispatch_element(_card_buttons(coordinator)["view_market_details:"]))

        assert coordinator.modal.kind is ModalKind.MARKET_DETAILS
        assert coordinator.modal.params == {"market_id": "m1"}

    def test_disabled_button_is_ignored(self, healthy_transport, make_coordinator):
        coordinator = make_coordinator(healthy_transport)
        dispatcher = build_dispatcher(coordinator)
        asyncio.run(coordinator.initialize())

        button = _card_buttons(coordinator)["show_trade_modal:NO"]
        result = asyncio.run(dispatcher.dispatch_element(button))

        assert "disabled" in button
        assert result is None
        assert coordinator.modal is None
