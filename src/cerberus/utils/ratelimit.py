"""Per-client request throttling.

Fixed-window counters keyed by client address. State is process-local.
"""

import logging
import time
from typing import Callable

from cerberus.errors import RateLimited

logger = logging.getLogger(__name__)


class RateLimiter:
    """Allows ``limit`` requests per ``window_seconds`` for each client.

    Example:
        limiter = RateLimiter(limit=60)
        limiter.hit(client_ip)  # raises RateLimited once over budget
    """

    def __init__(
        self,
        limit: int = 60,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the limiter.

        Args:
            limit: Requests allowed per window (0 disables limiting)
            window_seconds: Window length
            clock: Time source, replaceable in tests
        """
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        # client -> (window start, count)
        self._windows: dict[str, tuple[float, int]] = {}

    @property
    def enabled(self) -> bool:
        return self.limit > 0

    def hit(self, client: str) -> None:
        """Record one request for client.

        Raises:
            RateLimited: if the client exceeded its budget for this window
        """
        if not self.enabled:
            return

        now = self._clock()
        started, count = self._windows.get(client, (now, 0))
        if now - started >= self.window_seconds:
            started, count = now, 0

        count += 1
        self._windows[client] = (started, count)

        if count > self.limit:
            if count == self.limit + 1:
                logger.warning(f"Rate limit exceeded for {client} ({self.limit}/window)")
            raise RateLimited()

        if len(self._windows) > 10_000:
            self._prune(now)

    def _prune(self, now: float) -> None:
        """Drop windows that have already closed."""
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    def reset(self) -> None:
        """Clear all counters (useful for testing)."""
        self._windows.clear()
