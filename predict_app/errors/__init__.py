"""
Error classification for the Predict client.

This module provides the exception hierarchy for backend API failures and
session bookkeeping failures, plus the failure categories the coordinator
maps them onto.
"""

from .api import (
    ApiError,
    NetworkError,
    HttpStatusError,
    ApiResponseError,
    MalformedResponseError,
)
from .session import (
    SessionError,
    StateTransitionError,
    PersistenceError,
    UnknownCommandError,
)
from .recovery import FailureCategory

__all__ = [
    # API errors
    "ApiError",
    "NetworkError",
    "HttpStatusError",
    "ApiResponseError",
    "MalformedResponseError",
    # Session errors
    "SessionError",
    "StateTransitionError",
    "PersistenceError",
    "UnknownCommandError",
    # Recovery categories
    "FailureCategory",
]
