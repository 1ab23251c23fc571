"""Per-user sliding-window rate limiter (core domain).

State lives only in memory and is lost on restart. A user's timestamps are
pruned lazily when that same user is checked again, so an idle user keeps at
most ``max_requests`` entries until they return or are forgotten.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, List, Optional

from core.config import RateLimitConfig


def _now_ms() -> int:
    return int(time.time() * 1000)


class RateLimiter:
    """Caps each user at max_requests within any trailing window_ms interval."""

    def __init__(self, config: RateLimitConfig, clock: Callable[[], int] = _now_ms) -> None:
        if config.max_requests <= 0:
            raise ValueError("max_requests must be a positive integer")
        if config.window_ms <= 0:
            raise ValueError("window_ms must be a positive integer")
        self._config = config
        self._clock = clock
        self._requests: Dict[str, List[int]] = {}
        # The event loop never suspends inside check_and_record; the lock keeps
        # the same guarantee when the limiter is shared between threads.
        self._lock = threading.Lock()

    @property
    def config(self) -> RateLimitConfig:
        return self._config

    def check_and_record(self, user_id: str, now: Optional[int] = None) -> bool:
        """Return True and record the attempt if the user is under the limit.

        Rejected attempts are not recorded and leave the stored state as is.
        """

        if now is None:
            now = self._clock()
        window_ms = self._config.window_ms
        with self._lock:
            # An entry exactly window_ms old is already expired.
            recent = [ts for ts in self._requests.get(user_id, []) if now - ts < window_ms]
            if len(recent) >= self._config.max_requests:
                return False
            recent.append(now)
            self._requests[user_id] = recent
            return True

    def forget(self, user_id: str) -> None:
        with self._lock:
            self._requests.pop(user_id, None)

    def tracked_users(self) -> List[str]:
        with self._lock:
            return list(self._requests)

    def recorded(self, user_id: str) -> int:
        """Number of timestamps currently held for a user, expired ones included."""

        with self._lock:
            return len(self._requests.get(user_id, ()))
