"""
Command dispatch for user-triggered actions.
"""
from .dispatcher import CommandDispatcher, build_dispatcher

__all__ = ["CommandDispatcher", "build_dispatcher"]
