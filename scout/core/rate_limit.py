"""Best-effort, process-local sliding-window rate limiting."""

import time
from collections import OrderedDict, deque
from collections.abc import Callable

from fastapi import Request
from slowapi.util import get_remote_address

from scout.core.logging import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Sliding-window admission control keyed by client identity.

    Each key holds the timestamps of its requests inside the trailing window.
    Expired timestamps are pruned lazily on every check. A denied attempt is
    still recorded, so retrying while limited keeps the client limited.

    The number of tracked keys is capped: when a new key would exceed
    ``max_keys``, idle keys are dropped first, then the least recently seen.
    """

    def __init__(
        self,
        window_seconds: float = 60.0,
        max_requests: int = 60,
        max_keys: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the limiter.

        Args:
            window_seconds: Length of the trailing window
            max_requests: Requests admitted per key inside one window
            max_keys: Upper bound on tracked client keys
            clock: Monotonic time source in seconds
        """
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.max_keys = max_keys
        self._clock = clock
        self._windows: OrderedDict[str, deque[float]] = OrderedDict()

    def admit(self, client_key: str) -> bool:
        """Record a request for ``client_key`` and return whether it is allowed."""
        try:
            now = self._clock()
            hits = self._windows.get(client_key)
            if hits is None:
                self._make_room(now)
                hits = deque()
                self._windows[client_key] = hits
            else:
                self._windows.move_to_end(client_key)

            self._expire(hits, now)
            hits.append(now)

            if len(hits) > self.max_requests:
                logger.bind(client=client_key, hits=len(hits)).warning("rate_limit_denied")
                return False
            return True
        except Exception as e:
            # Fail open
            logger.bind(error=str(e)).warning("rate_limit_error")
            return True

    def prune(self) -> int:
        """Drop every key whose window has fully expired. Returns the number dropped."""
        now = self._clock()
        idle = []
        for key, hits in self._windows.items():
            self._expire(hits, now)
            if not hits:
                idle.append(key)
        for key in idle:
            del self._windows[key]
        return len(idle)

    def reset(self) -> None:
        """Forget all tracked clients."""
        self._windows.clear()

    def tracked_keys(self) -> int:
        return len(self._windows)

    def _expire(self, hits: deque[float], now: float) -> None:
        cutoff = now - self.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def _make_room(self, now: float) -> None:
        if len(self._windows) < self.max_keys:
            return
        dropped = self.prune()
        # Evict least recently seen keys
        while len(self._windows) >= self.max_keys:
            self._windows.popitem(last=False)
            dropped += 1
        logger.bind(dropped=dropped, tracked=len(self._windows)).debug("rate_limit_keys_evicted")


def client_key_from_request(request: Request) -> str:
    """First hop of X-Forwarded-For, else the socket peer address."""
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop
    return get_remote_address(request) or "unknown"
