"""In-process request counter with optional per-second and per-day caps."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from headlinevibes import config
from headlinevibes.models import BackfillEstimate

logger = logging.getLogger(__name__)

_SECOND_WINDOW = 1.0


class RequestCounter:
    """Counts provider requests; caps left as ``None`` are counted but never enforced.

    ``now`` returns epoch seconds and exists so tests can drive the clock.
    """

    def __init__(
        self,
        daily_requests_cap: int | None = config.DAILY_REQUESTS_CAP,
        per_second_cap: int | None = config.PER_SECOND_CAP,
        now: Callable[[], float] = time.time,
    ) -> None:
        self._daily_cap = daily_requests_cap
        self._per_second_cap = per_second_cap
        self._now = now
        self._lock = threading.Lock()

        self._day_key: str | None = None
        self._day_count = 0
        self._window_start = 0.0
        self._window_count = 0

    def estimate_backfill_cost(self, days: int, pages_per_day: int) -> BackfillEstimate:
        """Requests needed to backfill *days* at *pages_per_day*, checked against the daily cap."""
        if days <= 0 or pages_per_day <= 0:
            return BackfillEstimate(requests=0, feasible=True, reason="No work required")
        requests_needed = days * pages_per_day
        if self._daily_cap is not None and requests_needed > self._daily_cap:
            return BackfillEstimate(
                requests=requests_needed,
                feasible=False,
                reason=(
                    f"Estimated requests ({requests_needed}) exceed daily cap "
                    f"({self._daily_cap})"
                ),
            )
        return BackfillEstimate(requests=requests_needed, feasible=True)

    def should_throttle(self) -> bool:
        """True if one more request now would break a cap. Does not count anything."""
        now = self._now()
        with self._lock:
            if (
                self._per_second_cap is not None
                and now - self._window_start < _SECOND_WINDOW
                and self._window_count >= self._per_second_cap
            ):
                logger.warning("Per-second request cap reached (%d)", self._per_second_cap)
                return True
            if self._daily_cap is not None:
                today = self._count_for_day(self._format_day_key(now))
                if today >= self._daily_cap:
                    logger.warning("Daily request cap reached (%d/%d)", today, self._daily_cap)
                    return True
        return False

    def record_request(self, count: int = 1) -> None:
        """Record *count* requests just made."""
        if count <= 0:
            return
        now = self._now()
        with self._lock:
            if now - self._window_start >= _SECOND_WINDOW:
                self._window_start = now
                self._window_count = 0
            self._window_count += count

            day_key = self._format_day_key(now)
            if self._day_key != day_key:
                self._day_key = day_key
                self._day_count = 0
            self._day_count += count

    def state(self) -> dict[str, Any]:
        with self._lock:
            return {
                "per_second": {
                    "cap": self._per_second_cap,
                    "window_start": self._window_start,
                    "window_count": self._window_count,
                },
                "daily": {
                    "cap": self._daily_cap,
                    "day_key": self._day_key,
                    "day_count": self._day_count,
                },
            }

    # ── private ─────────────────────────────────────────────────────────

    def _count_for_day(self, day_key: str) -> int:
        return self._day_count if self._day_key == day_key else 0

    @staticmethod
    def _format_day_key(epoch_seconds: float) -> str:
        return datetime.fromtimestamp(epoch_seconds, tz=UTC).strftime("%Y-%m-%d")
