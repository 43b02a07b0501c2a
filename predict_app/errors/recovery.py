"""
Failure categories and the behavior each one maps to.

Every error caught inside the coordinator is classified into exactly one
category; the category decides whether the user sees anything.
"""

from enum import Enum


class FailureCategory(str, Enum):
    """Where a failure happened and how it degrades."""
    BOOTSTRAP_FATAL = "bootstrap_fatal"   # stats fetch failed: whole-view error
    AUTH_SOFT = "auth_soft"               # profile validation failed: silent downgrade
    ACTION_ERROR = "action_error"         # login/register failed: inline message
    BEST_EFFORT = "best_effort"           # market refresh failed: logged only
