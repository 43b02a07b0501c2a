"""
Persistent client-side storage for the session token.
"""
