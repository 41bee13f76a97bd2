"""Token bucket throttling for MCP tool calls."""

import time
from threading import Lock
from typing import Dict, Optional, Tuple

from ..constants import DEFAULT_RATE_LIMIT
from ..exceptions import RateLimitError


class TokenBucket:
    """Token bucket refilled continuously at a fixed rate."""

    def __init__(self, capacity: int, refill_rate: float) -> None:
        """Initialize token bucket.

        Args:
            capacity: Maximum number of tokens in the bucket
            refill_rate: Number of tokens added per second

        Raises:
            ValueError: If capacity is below 1 or refill_rate is not positive
        """
        if capacity < 1:
            raise ValueError(f"Bucket capacity must be at least 1, got {capacity!r}")
        if not refill_rate > 0:
            raise ValueError(f"Refill rate must be greater than 0, got {refill_rate!r}")
        self.capacity = capacity
        self.refill_rate = refill_rate
        self.tokens = float(capacity)
        self.last_refill = time.monotonic()
        self.lock = Lock()

    def _refill(self) -> None:
        now = time.monotonic()
        self.tokens = min(self.capacity, self.tokens + (now - self.last_refill) * self.refill_rate)
        self.last_refill = now

    def consume(self, tokens: int = 1) -> bool:
        """Take tokens if available.

        Returns:
            True if tokens were consumed, False if not enough were available
        """
        with self.lock:
            self._refill()
            if self.tokens >= tokens:
                self.tokens -= tokens
                return True
            return False

    def time_until_available(self, tokens: int = 1) -> float:
        """Seconds until ``tokens`` can be consumed."""
        with self.lock:
            self._refill()
            if self.tokens >= tokens:
                return 0.0
            return (tokens - self.tokens) / self.refill_rate


class RateLimiter:
    """Per-key token buckets.

    Keys are tool or command names; each key gets its own bucket sized from
    ``limits`` or the default.
    """

    def __init__(
        self,
        default: Tuple[float, int] = DEFAULT_RATE_LIMIT,
        limits: Optional[Dict[str, Tuple[float, int]]] = None,
    ) -> None:
        """Initialize rate limiter.

        Args:
            default: (calls per second, burst capacity) for unlisted keys
            limits: Per-key overrides
        """
        self.default = default
        self.limits = dict(limits or {})
        self.buckets: Dict[str, TokenBucket] = {}
        self.lock = Lock()

    def _get_bucket(self, key: str) -> TokenBucket:
        with self.lock:
            if key not in self.buckets:
                rate_per_second, burst_capacity = self.limits.get(key, self.default)
                self.buckets[key] = TokenBucket(capacity=burst_capacity, refill_rate=rate_per_second)
            return self.buckets[key]

    def check(self, key: str, tokens: int = 1) -> None:
        """Consume tokens for ``key`` or refuse the call.

        Raises:
            RateLimitError: When the bucket is empty; ``retry_after`` says how long to wait
        """
        bucket = self._get_bucket(key)
        if not bucket.consume(tokens):
            retry_after = bucket.time_until_available(tokens)
            raise RateLimitError(f"Rate limit exceeded for {key}", retry_after=retry_after)

    def get_wait_time(self, key: str, tokens: int = 1) -> float:
        return self._get_bucket(key).time_until_available(tokens)
