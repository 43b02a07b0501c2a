"""
Server payload models.

Typed, read-only records for users, platform statistics and market summaries
parsed out of API response envelopes.
"""
