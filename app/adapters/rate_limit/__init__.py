"""Rate limiting adapters.

The API layer depends on ``AbstractRateLimiter`` only, so the in-process
token bucket can be replaced by a shared store without touching the routes.
"""
