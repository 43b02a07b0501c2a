"""
View lifecycle state machine.

LOADING is entered by every (re)initialization; from there the bootstrap
lands in ERROR, ANONYMOUS or AUTHENTICATED. ERROR only leaves through a new
initialization, which models a manual page reload.
"""

from typing import Any, Optional

from ..errors import StateTransitionError
from ..logging.config import get_session_logger, log_view_transition
from .models import ViewState

state_logger = get_session_logger(__name__)

ALLOWED_TRANSITIONS: dict[ViewState, frozenset[ViewState]] = {
    ViewState.LOADING: frozenset({
        ViewState.LOADING,
        ViewState.ERROR,
        ViewState.ANONYMOUS,
        ViewState.AUTHENTICATED,
    }),
    ViewState.ERROR: frozenset({ViewState.LOADING}),
    ViewState.ANONYMOUS: frozenset({ViewState.LOADING}),
    ViewState.AUTHENTICATED: frozenset({ViewState.LOADING, ViewState.ANONYMOUS}),
}


def is_transition_allowed(current: ViewState, target: ViewState) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def resolve_ready_state(authenticated: bool) -> ViewState:
    """Target state of a bootstrap whose stats fetch succeeded."""
    return ViewState.AUTHENTICATED if authenticated else ViewState.ANONYMOUS


class ViewStateMachine:
    """Tracks the current view state and enforces the allowed transitions."""

    def __init__(self, initial: ViewState = ViewState.LOADING):
        self._state = initial
        self.logger = state_logger

    @property
    def state(self) -> ViewState:
        return self._state

    def transition(
        self,
        target: ViewState,
        trigger: str,
        generation: Optional[int] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> ViewState:
        """
        Move to ``target``.

        Raises:
            StateTransitionError: If the lifecycle does not allow the move
        """
        current = self._state
        if not is_transition_allowed(current, target):
            raise StateTransitionError(
                f"Cannot move view from {current.value} to {target.value}",
                current_state=current.value,
                attempted_transition=f"{current.value}->{target.value}",
                context={"trigger": trigger},
            )

        self._state = target
        log_view_transition(
            self.logger,
            from_state=current.value,
            to_state=target.value,
            trigger=trigger,
            generation=generation,
            context=context,
        )
        return target
