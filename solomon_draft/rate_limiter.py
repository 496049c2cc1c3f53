"""
solomon_draft/rate_limiter.py
Token-bucket request scheduler for outbound catalog calls.
"""

import time
from typing import Callable

from solomon_draft.constants import SCRYFALL_BURST, SCRYFALL_REQUESTS_PER_SECOND

# Tolerance for floating point drift when refilling
TOKEN_EPSILON = 1e-9


class TokenBucket:
    """
    Allows `rate` requests per second with bursts of up to `capacity`.

    The clock and sleep functions are injectable so tests can drive time
    without waiting.
    """

    def __init__(
        self,
        rate: float = SCRYFALL_REQUESTS_PER_SECOND,
        capacity: float = SCRYFALL_BURST,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if rate <= 0 or capacity < 1:
            raise ValueError("rate must be positive and capacity at least 1")
        self.rate = rate
        self.capacity = capacity
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(capacity)
        self._updated = clock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._updated)
        self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
        self._updated = now

    @property
    def available(self) -> float:
        self._refill()
        return self._tokens

    def try_acquire(self, tokens: float = 1) -> bool:
        """Take tokens if they are available right now"""
        self._refill()
        if self._tokens + TOKEN_EPSILON >= tokens:
            self._tokens = max(0.0, self._tokens - tokens)
            return True
        return False

    def acquire(self, tokens: float = 1) -> None:
        """Block until the tokens can be taken"""
        if tokens > self.capacity:
            raise ValueError(f"Cannot acquire {tokens} tokens from a bucket of {self.capacity}")
        while not self.try_acquire(tokens):
            self._sleep((tokens - self._tokens) / self.rate)

    def wait(self, seconds: float) -> None:
        """Back off for a server-requested delay"""
        if seconds > 0:
            self._sleep(seconds)
