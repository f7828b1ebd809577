from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional


@dataclass
class RateLimiterState:
    attempts: List[datetime] = field(default_factory=list)
    locked_until: Optional[datetime] = None
    window_ms: int = 0

    def is_idle(self, now: datetime) -> bool:
        """No active lockout and no attempt left inside the window."""
        if self.locked_until is not None and now < self.locked_until:
            return False
        window = timedelta(milliseconds=self.window_ms)
        return all(now - ts >= window for ts in self.attempts)


class RateLimiter:
    """
    Sliding-window attempt counter with a hard lockout, keyed by caller-chosen strings.

    Keys are fully independent, so the admin login flow and the reservation form
    can share one limiter with different thresholds.
    """

    def __init__(self) -> None:
        self._states: Dict[str, RateLimiterState] = {}

    def check(
        self,
        key: str,
        max_attempts: int,
        window_ms: int,
        *,
        now: datetime,
        lockout_ms: int | None = None,
    ) -> bool:
        self._evict_idle(now, keep=key)
        state = self._states.setdefault(key, RateLimiterState())
        if state.locked_until is not None:
            if now < state.locked_until:
                return False
            state.locked_until = None
            state.attempts.clear()

        state.window_ms = window_ms
        window = timedelta(milliseconds=window_ms)
        state.attempts = [ts for ts in state.attempts if now - ts < window]
        state.attempts.append(now)
        if len(state.attempts) > max_attempts:
            duration = lockout_ms if lockout_ms is not None else window_ms
            state.locked_until = now + timedelta(milliseconds=duration)
            return False
        return True

    def __len__(self) -> int:
        return len(self._states)

    def _evict_idle(self, now: datetime, *, keep: str) -> None:
        idle = [key for key, state in self._states.items() if key != keep and state.is_idle(now)]
        for key in idle:
            del self._states[key]

    def reset(self, key: str) -> None:
        self._states.pop(key, None)

    def locked_until(self, key: str) -> Optional[datetime]:
        state = self._states.get(key)
        return state.locked_until if state else None

    def retry_after(self, key: str, *, now: datetime) -> float:
        """Seconds until the lockout on `key` expires (0 when not locked)."""
        until = self.locked_until(key)
        if until is None or until <= now:
            return 0.0
        return (until - now).total_seconds()

    def state(self, key: str) -> RateLimiterState:
        return self._states.get(key) or RateLimiterState()
