"""
Session and view state module.

Owns the session record and the view lifecycle state machine.
Handles transitions between LOADING → ERROR | ANONYMOUS | AUTHENTICATED.
"""
