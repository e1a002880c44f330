"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Central limit strings and decorators
keep rate limits in one place.
"""

import time
from collections.abc import Callable
from threading import Lock

from fastapi import HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import get_settings
from app.core.messages import translate

limiter = Limiter(key_func=get_remote_address)

AUTH_LIMIT = "10/minute"
PIN_LIMIT = "10/minute"
WRITE_ENDPOINT_LIMIT = "60/minute"
CODE_VALIDATION_LIMIT = "20/minute"

limit_auth = limiter.limit(AUTH_LIMIT)
limit_pin = limiter.limit(PIN_LIMIT)
limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_code_validation = limiter.limit(CODE_VALIDATION_LIMIT)


class SlidingWindowLimiter:
    """In-memory sliding window: at most `attempts` hits per client per `window_seconds`.

    Backs up the slowapi limit on public code validation so invite and
    transfer codes cannot be enumerated from one client. Clients idle for a
    whole window are dropped on the next sweep, at most once per window.
    """

    def __init__(
        self, attempts: int, window_seconds: int, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.attempts = attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, list[float]] = {}
        self._last_sweep = clock()
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._hits)

    def _sweep(self, cutoff: float) -> None:
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]

    def hit(self, key: str) -> bool:
        """Record a hit for key; False when the window is already full."""
        now = self._clock()
        cutoff = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            recent = [t for t in self._hits.get(key, ()) if t > cutoff]
            if len(recent) >= self.attempts:
                self._hits[key] = recent
                return False
            recent.append(now)
            self._hits[key] = recent
            return True

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


_code_validation_window: SlidingWindowLimiter | None = None


def get_code_validation_window() -> SlidingWindowLimiter:
    global _code_validation_window
    if _code_validation_window is None:
        settings = get_settings()
        _code_validation_window = SlidingWindowLimiter(
            settings.code_validation_attempts, settings.code_validation_window_seconds
        )
    return _code_validation_window


def check_code_validation_rate(request: Request) -> None:
    """Raise 429 if this client validated too many codes in the current window."""
    if not get_code_validation_window().hit(get_remote_address(request)):
        raise HTTPException(status_code=429, detail=translate("too_many_attempts"))
