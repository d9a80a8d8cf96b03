"""Rate limiting adapters.

A small abstraction layer so the login throttle can start with an in-memory
map and later move to a shared store without changing the API layer.
"""

from petvalues.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision
from petvalues.adapters.rate_limit.in_memory import InMemoryRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemoryRateLimiter",
    "RateLimitDecision",
]
