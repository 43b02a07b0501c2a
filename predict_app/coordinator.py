"""
Session/view coordinator.

Reconciles the persisted token with the server, fetches bootstrap data and
drives rendering of the current view:

    Persisted token → Stats → Profile validation → Render → Market refresh

Every public operation catches its own failures and maps them onto a
FailureCategory; nothing raised by the API, storage or view escapes.
"""

import time
from dataclasses import asdict
from typing import Optional

from .api.client import ApiClient
from .api.transport import Transport
from .config.defaults import ClientConfig, get_default_config
from .config.loader import ConfigLoader
from .data.models import MarketSummary, PlatformStats, User
from .errors import ApiResponseError, FailureCategory, PersistenceError
from .logging.config import configure_logging, get_session_logger
from .persistence.token_store import TokenStorage, create_store
from .state.machine import ViewStateMachine, resolve_ready_state
from .state.models import (
    ADMIN_MODALS,
    AUTH_REQUIRED_MODALS,
    ErrorScreen,
    Modal,
    ModalKind,
    Notice,
    NoticeLevel,
    OperationResult,
    OperationStatus,
    Session,
    ViewState,
)
from .utils.formatting import mask_phone
from .view.document import HtmlView, View
from .view.models import ViewModel
from .view.projection import project, project_markets, project_modal

session_logger = get_session_logger(__name__)

BOOTSTRAP_ERROR = ErrorScreen(
    title="Service Temporarily Unavailable",
    message="We're experiencing technical difficulties.",
)

TRADE_OUTCOMES = ("YES", "NO")


class SessionCoordinator:
    """
    Owns one client session and keeps it, the persisted token and the
    rendered view consistent with server state.

    Independent coordinators share nothing, so several sessions can live
    side by side (for example in tests).
    """

    def __init__(
        self,
        api: ApiClient,
        token_storage: TokenStorage,
        view: View,
        config: Optional[ClientConfig] = None,
    ) -> None:
        self.api = api
        self.token_storage = token_storage
        self.view = view
        self.config = config or get_default_config()
        self.logger = session_logger

        self.session = Session()
        self.machine = ViewStateMachine()

        self._stats: Optional[PlatformStats] = None
        self._markets: Optional[tuple[MarketSummary, ...]] = None
        self._sort: Optional[str] = None
        self._modal: Optional[Modal] = None
        self._notice: Optional[Notice] = None
        self._error: Optional[ErrorScreen] = None

        # Monotonic request generations; responses from older calls are dropped
        self._init_generation = 0
        self._markets_generation = 0

    @classmethod
    def from_config(
        cls,
        config: Optional[ClientConfig] = None,
        view: Optional[View] = None,
        transport: Optional[Transport] = None,
    ) -> "SessionCoordinator":
        """Wire a coordinator from configuration (loaded from disk when omitted)."""
        if config is None:
            config = ConfigLoader.create().load()
        configure_logging(**asdict(config.logging))

        storage = TokenStorage(create_store(config.storage), key=config.session.token_key)
        return cls(
            api=ApiClient.from_config(config.api, transport=transport),
            token_storage=storage,
            view=view or HtmlView(),
            config=config,
        )

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> ViewState:
        return self.machine.state

    @property
    def user(self) -> Optional[User]:
        return self.session.user

    @property
    def stats(self) -> Optional[PlatformStats]:
        return self._stats

    @property
    def markets(self) -> tuple[MarketSummary, ...]:
        if self._markets is not None:
            return self._markets
        return self._stats.recent_markets if self._stats else ()

    @property
    def modal(self) -> Optional[Modal]:
        return self._modal

    @property
    def notice(self) -> Optional[Notice]:
        return self._notice

    def view_model(self) -> ViewModel:
        """Project the current state into a view model."""
        return project(
            self.machine.state,
            user=self.session.user,
            stats=self._stats,
            markets=self._markets,
            modal=self._modal,
            notice=self._notice,
            error=self._error,
            health_url=self.api.health_url,
            sorts=self.config.markets.allowed_sorts,
            selected_sort=self._sort,
        )

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    async def initialize(self) -> OperationResult:
        """
        Fetch stats, validate any stored token and render the main view.

        Returns:
            SUCCESS when the main view rendered, FAILED (BOOTSTRAP_FATAL) when
            the stats fetch failed, STALE when a newer call took over
        """
        start_time = time.time()
        self._init_generation += 1
        self._markets_generation += 1
        generation = self._init_generation

        self.machine.transition(ViewState.LOADING, "initialize", generation=generation)
        self._render()

        try:
            stats = await self.api.get_stats()
        except Exception as e:
            if self._is_stale(generation):
                return self._stale_result("initialize", generation)

            self.logger.error(
                "Bootstrap failed",
                generation=generation,
                category=FailureCategory.BOOTSTRAP_FATAL.value,
                error_type=type(e).__name__,
                error=str(e),
            )
            self._stats = None
            self._markets = None
            self._error = BOOTSTRAP_ERROR
            self.machine.transition(ViewState.ERROR, "stats_failed", generation=generation)
            self._render()
            return OperationResult(
                status=OperationStatus.FAILED,
                message=BOOTSTRAP_ERROR.title,
                category=FailureCategory.BOOTSTRAP_FATAL,
                error=e,
                duration_ms=int((time.time() - start_time) * 1000),
            )

        if self._is_stale(generation):
            return self._stale_result("initialize", generation)

        self._stats = stats
        self._markets = None
        self._sort = None
        self._error = None

        await self._reconcile_session(generation)
        if self._is_stale(generation):
            return self._stale_result("initialize", generation)

        target = resolve_ready_state(self.session.is_authenticated)
        self.machine.transition(
            target,
            "bootstrap_complete",
            generation=generation,
            context={"recent_markets": len(stats.recent_markets)},
        )
        self._render()

        markets_result = await self.load_markets()

        return OperationResult(
            status=OperationStatus.SUCCESS,
            message=None if markets_result.ok else markets_result.message,
            duration_ms=int((time.time() - start_time) * 1000),
        )

    async def retry(self) -> OperationResult:
        """Full manual retry; the only way out of the error view."""
        return await self.initialize()

    async def _reconcile_session(self, generation: int) -> None:
        """Validate the stored token, downgrading silently on failure."""
        persisted = self._load_persisted_token()
        if persisted is not None:
            self.session.hydrate(persisted)

        token = self.session.token
        if token is None:
            return

        try:
            user = await self.api.get_profile(token)
        except Exception as e:
            if self._is_stale(generation) or self.session.token != token:
                return
            if self._should_invalidate(e):
                self._invalidate(e)
            else:
                self.session.forget_user()
                self.logger.warning(
                    "Profile check failed transiently, keeping stored token",
                    generation=generation,
                    category=FailureCategory.AUTH_SOFT.value,
                    error_type=type(e).__name__,
                    error=str(e),
                )
            return

        # A logout or another login may have replaced the token meanwhile
        if self._is_stale(generation) or self.session.token != token:
            return

        self.session.validate(user)
        self.logger.info(
            "Session validated",
            generation=generation,
            user_id=user.id,
            role=user.role.value,
        )

    def _should_invalidate(self, error: Exception) -> bool:
        if self.config.session.clear_token_on_transient_error:
            return True
        return not getattr(error, "recoverable", False)

    def _invalidate(self, error: Exception) -> None:
        self.session.clear()
        self._clear_persisted_token()
        self.logger.info(
            "Session invalidated",
            category=FailureCategory.AUTH_SOFT.value,
            error_type=type(error).__name__,
            error=str(error),
        )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def login(self, phone: str, password: str) -> OperationResult:
        """
        Authenticate and refresh the whole view.

        On failure the server's error is surfaced and the session is left
        exactly as it was.
        """
        if not phone or not password:
            return self._action_failed("Please enter your phone number and password.")

        log = self.logger.bind(phone=mask_phone(phone))

        try:
            result = await self.api.login(phone, password)
        except ApiResponseError as e:
            log.info("Login rejected", error=e.server_error)
            return self._action_failed(f"Login failed: {e.server_error}", e)
        except Exception as e:
            log.warning("Login error", error_type=type(e).__name__, error=str(e))
            return self._action_failed(f"Login error: {e}", e)

        try:
            self.token_storage.save(result.token)
        except PersistenceError as e:
            log.error("Could not persist session token", error=str(e))

        notice = Notice("Login successful!", NoticeLevel.SUCCESS)
        self.session.establish(result.token, result.user)
        self._modal = None
        self._notice = notice
        self.view.render_modal(None)
        log.info("Login succeeded", user_id=result.user.id)

        await self.initialize()
        return OperationResult(status=OperationStatus.SUCCESS, message=notice.text)

    async def register(self, phone: str, mpesa_name: str, password: str) -> OperationResult:
        """Create an account and point the user at the login dialog."""
        if not phone or not mpesa_name or not password:
            return self._action_failed("Please fill in phone number, M-Pesa name and password.")

        log = self.logger.bind(phone=mask_phone(phone))

        try:
            await self.api.register(phone, mpesa_name, password)
        except ApiResponseError as e:
            log.info("Registration rejected", error=e.server_error)
            return self._action_failed(f"Registration failed: {e.server_error}", e)
        except Exception as e:
            log.warning("Registration error", error_type=type(e).__name__, error=str(e))
            return self._action_failed(f"Registration error: {e}", e)

        notice = Notice("Registration successful! Please login.", NoticeLevel.SUCCESS)
        log.info("Registration succeeded")
        self._set_notice(notice)
        self._set_modal(Modal(ModalKind.LOGIN, {"phone": phone}))
        return OperationResult(status=OperationStatus.SUCCESS, message=notice.text)

    def logout(self) -> OperationResult:
        """Clear the session everywhere and re-render; safe to call repeatedly."""
        was_authenticated = self.session.is_authenticated

        self.session.clear()
        self._clear_persisted_token()
        self._modal = None

        if self.machine.state is ViewState.AUTHENTICATED:
            self.machine.transition(ViewState.ANONYMOUS, "logout")

        if was_authenticated:
            self.logger.info("Logged out")

        self._render()
        return OperationResult(status=OperationStatus.SUCCESS)

    async def load_markets(self, sort: Optional[str] = None) -> OperationResult:
        """
        Refresh the market list; a failure keeps whatever is shown.

        Returns:
            FAILED (BEST_EFFORT) results for the caller to surface or ignore
        """
        sort = sort or self.config.markets.default_sort
        if not self._markets_visible():
            return OperationResult(
                status=OperationStatus.FAILED,
                message="No market list is shown",
                category=FailureCategory.BEST_EFFORT,
            )

        self._markets_generation += 1
        generation = self._markets_generation

        try:
            markets = await self.api.list_markets(sort, self.config.markets.page_limit)
        except Exception as e:
            self.logger.warning(
                "Market refresh failed",
                sort=sort,
                category=FailureCategory.BEST_EFFORT.value,
                error_type=type(e).__name__,
                error=str(e),
            )
            return OperationResult(
                status=OperationStatus.FAILED,
                message=f"Failed to load markets: {e}",
                category=FailureCategory.BEST_EFFORT,
                error=e,
            )

        if generation != self._markets_generation or not self._markets_visible():
            return self._stale_result("load_markets", generation)

        self._markets = markets
        self._sort = sort
        self.view.render_markets(project_markets(
            markets,
            self.session.user if self.machine.state is ViewState.AUTHENTICATED else None,
            self.config.markets.allowed_sorts,
            sort,
        ))
        self.logger.debug("Markets refreshed", sort=sort, count=len(markets))
        return OperationResult(status=OperationStatus.SUCCESS)

    # ------------------------------------------------------------------
    # Dialogs
    # ------------------------------------------------------------------

    def open_modal(self, kind: ModalKind, **params) -> OperationResult:
        """
        Open a dialog. Logged-in-only dialogs fall back to the login dialog
        for anonymous users; admin dialogs are refused for everyone else.
        """
        user = self.session.user if self.machine.state is ViewState.AUTHENTICATED else None

        if kind in AUTH_REQUIRED_MODALS and user is None:
            kind, params = ModalKind.LOGIN, {}

        if kind in ADMIN_MODALS and not (user and user.is_admin):
            return self._action_failed("Admin access required.")

        self._set_modal(Modal(kind, params))
        return OperationResult(status=OperationStatus.SUCCESS)

    def show_login_modal(self) -> OperationResult:
        return self.open_modal(ModalKind.LOGIN)

    def show_register_modal(self) -> OperationResult:
        return self.open_modal(ModalKind.REGISTER)

    def show_trade_modal(self, market_id: str, outcome: str) -> OperationResult:
        outcome = (outcome or "").upper()
        if outcome not in TRADE_OUTCOMES:
            return self._action_failed(f"Unknown outcome: {outcome or '(empty)'}")
        return self.open_modal(ModalKind.TRADE, market_id=market_id, outcome=outcome)

    def show_deposit_modal(self) -> OperationResult:
        return self.open_modal(ModalKind.DEPOSIT)

    def show_withdraw_modal(self) -> OperationResult:
        return self.open_modal(ModalKind.WITHDRAW)

    def show_profile(self) -> OperationResult:
        return self.open_modal(ModalKind.PROFILE)

    def show_admin_panel(self) -> OperationResult:
        return self.open_modal(ModalKind.ADMIN_PANEL)

    def show_create_market_modal(self) -> OperationResult:
        return self.open_modal(ModalKind.CREATE_MARKET)

    def view_market_details(self, market_id: str) -> OperationResult:
        return self.open_modal(ModalKind.MARKET_DETAILS, market_id=market_id)

    def close_modal(self) -> OperationResult:
        self._set_modal(None)
        return OperationResult(status=OperationStatus.SUCCESS)

    def dismiss_notice(self) -> OperationResult:
        self._set_notice(None)
        return OperationResult(status=OperationStatus.SUCCESS)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _render(self) -> None:
        self.view.render(self.view_model())

    def _set_modal(self, modal: Optional[Modal]) -> None:
        self._modal = modal
        self.view.render_modal(project_modal(modal))

    def _set_notice(self, notice: Optional[Notice]) -> None:
        self._notice = notice
        self.view.render_notice(notice)

    def _action_failed(self, text: str, error: Optional[Exception] = None) -> OperationResult:
        self._set_notice(Notice(text, NoticeLevel.ERROR))
        return OperationResult(
            status=OperationStatus.FAILED,
            message=text,
            category=FailureCategory.ACTION_ERROR,
            error=error,
        )

    def _markets_visible(self) -> bool:
        return self.machine.state in (ViewState.ANONYMOUS, ViewState.AUTHENTICATED)

    def _is_stale(self, generation: int) -> bool:
        return generation != self._init_generation

    def _stale_result(self, operation: str, generation: int) -> OperationResult:
        self.logger.debug("Discarding stale response", operation=operation, generation=generation)
        return OperationResult(status=OperationStatus.STALE, message=f"{operation} superseded")

    def _load_persisted_token(self) -> Optional[str]:
        try:
            return self.token_storage.load()
        except PersistenceError as e:
            self.logger.error("Could not read stored token", error=str(e))
            return None

    def _clear_persisted_token(self) -> None:
        try:
            self.token_storage.clear()
        except PersistenceError as e:
            self.logger.error("Could not clear stored token", error=str(e))
