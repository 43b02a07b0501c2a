"""
Session and client-state error classifications.
"""

from typing import Optional, Dict, Any


class SessionError(Exception):
    """Base class for session bookkeeping failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class StateTransitionError(SessionError):
    """View state change not permitted by the lifecycle."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition


class PersistenceError(SessionError):
    """Token storage read or write failure."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class UnknownCommandError(Exception):
    """Dispatch of an action name nobody registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown command: {name}")
        self.name = name
