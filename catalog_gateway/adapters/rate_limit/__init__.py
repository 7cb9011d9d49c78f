"""Rate limiting adapters.

Starts with an in-memory limiter behind an abstract interface so a shared
store can replace it without changing the API layer.
"""
