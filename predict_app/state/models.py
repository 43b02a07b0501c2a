"""
Session and view state data models.

This module defines the session record owned by the coordinator, the view
lifecycle states, and the small immutable records (modal, notice, operation
result) that flow from the coordinator into the view projection.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..data.models import User
from ..errors import FailureCategory, SessionError


class ViewState(str, Enum):
    """View lifecycle states."""
    LOADING = "loading"
    ERROR = "error"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class ModalKind(str, Enum):
    """Dialogs the client can open."""
    LOGIN = "login"
    REGISTER = "register"
    TRADE = "trade"
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    PROFILE = "profile"
    ADMIN_PANEL = "admin_panel"
    CREATE_MARKET = "create_market"
    MARKET_DETAILS = "market_details"


# Dialogs that only make sense for a logged-in user
AUTH_REQUIRED_MODALS = frozenset({
    ModalKind.TRADE,
    ModalKind.DEPOSIT,
    ModalKind.WITHDRAW,
    ModalKind.PROFILE,
})

# Dialogs that additionally need the admin role
ADMIN_MODALS = frozenset({
    ModalKind.ADMIN_PANEL,
    ModalKind.CREATE_MARKET,
})


@dataclass(frozen=True)
class Modal:
    """An open dialog and its data contract."""
    kind: ModalKind
    params: dict[str, Any] = field(default_factory=dict)


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """Message surfaced to the user."""
    text: str
    level: NoticeLevel = NoticeLevel.INFO


@dataclass(frozen=True)
class ErrorScreen:
    """Content of the whole-view error state."""
    title: str
    message: str


class OperationStatus(Enum):
    """Outcome of a coordinator operation."""
    SUCCESS = "success"
    FAILED = "failed"
    STALE = "stale"         # Superseded by a newer call; nothing was applied


@dataclass
class OperationResult:
    """Result of a coordinator operation."""
    status: OperationStatus
    message: Optional[str] = None
    category: Optional[FailureCategory] = None
    error: Optional[Exception] = None
    duration_ms: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status is OperationStatus.SUCCESS


class Session:
    """
    Auth token plus the user it was validated for.

    ``user`` is only ever set while a token is held; every mutation keeps
    both fields consistent in a single step.
    """

    def __init__(self, token: Optional[str] = None):
        self._token: Optional[str] = token or None
        self._user: Optional[User] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def hydrate(self, token: Optional[str]) -> None:
        """Adopt a persisted token; the user stays unknown until validated."""
        if token != self._token:
            self._user = None
        self._token = token or None

    def validate(self, user: User) -> None:
        """Attach the server-confirmed user to the current token."""
        if self._token is None:
            raise SessionError("Cannot attach a user to a session without a token")
        self._user = user

    def establish(self, token: str, user: User) -> None:
        """Replace the whole session after a successful login."""
        if not token:
            raise SessionError("Cannot establish a session with an empty token")
        self._token = token
        self._user = user

    def forget_user(self) -> None:
        """Drop the user but keep the token for a later validation attempt."""
        self._user = None

    def clear(self) -> None:
        self._token = None
        self._user = None

    def __repr__(self) -> str:
        # Never expose the token itself
        return f"Session(has_token={self._token is not None}, user={self._user!r})"
