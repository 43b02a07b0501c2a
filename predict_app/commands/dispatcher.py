"""Command dispatcher keyed by action name."""

import inspect
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

from ..errors import UnknownCommandError
from ..logging.config import get_logger

if TYPE_CHECKING:
    from ..coordinator import SessionCoordinator

logger = get_logger(__name__)

Handler = Callable[..., Any]

COMMAND_ATTR = "data-command"
_DATA_PREFIX = "data-"


def command_from_attributes(attrs: Mapping[str, Optional[str]]) -> tuple[str, dict[str, str]]:
    """
    Recover the command name and keyword parameters from a rendered control.

    ``data-command`` names the command; every other ``data-*`` attribute
    becomes a parameter with hyphens turned back into underscores, so
    ``data-market-id="m1"`` yields ``market_id="m1"``.

    Raises:
        ValueError: If the attributes carry no ``data-command``
    """
    name = attrs.get(COMMAND_ATTR)
    if not name:
        raise ValueError("Element has no data-command attribute")

    params = {}
    for attr, value in attrs.items():
        if attr == COMMAND_ATTR or not attr.startswith(_DATA_PREFIX) or value is None:
            continue
        params[attr[len(_DATA_PREFIX):].replace("-", "_")] = value
    return name, params


class CommandDispatcher:
    """
    Routes named actions (as carried by ``data-command`` attributes) to
    handlers. Handlers may be plain callables or coroutine functions.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def register(self, name: str, handler: Handler) -> None:
        if name in self._handlers:
            raise ValueError(f"Command already registered: {name}")
        self._handlers[name] = handler

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, name: str) -> bool:
        return name in self._handlers

    async def dispatch(self, name: str, **params: Any) -> Any:
        """
        Run the handler registered under ``name``.

        Raises:
            UnknownCommandError: If no handler is registered for ``name``
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise UnknownCommandError(name)

        logger.debug("Dispatching command", command=name, params=sorted(params))
        result = handler(**params)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def dispatch_element(self, attrs: Mapping[str, Optional[str]]) -> Any:
        """
        Dispatch the command carried by a rendered control's attributes.

        Disabled controls are ignored and return None.
        """
        name, params = command_from_attributes(attrs)
        if "disabled" in attrs:
            logger.debug("Ignoring disabled control", command=name)
            return None
        return await self.dispatch(name, **params)


def build_dispatcher(coordinator: "SessionCoordinator") -> CommandDispatcher:
    """Register every user-facing coordinator operation under its action name."""
    dispatcher = CommandDispatcher()
    for name in (
        "initialize",
        "retry",
        "login",
        "register",
        "logout",
        "load_markets",
        "show_login_modal",
        "show_register_modal",
        "show_trade_modal",
        "show_deposit_modal",
        "show_withdraw_modal",
        "show_profile",
        "show_admin_panel",
        "show_create_market_modal",
        "view_market_details",
        "close_modal",
        "dismiss_notice",
    ):
        dispatcher.register(name, getattr(coordinator, name))
    return dispatcher
