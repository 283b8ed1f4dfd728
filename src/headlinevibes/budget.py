"""Month-to-date token budget for the news-search provider.

Pricing policy:

- a search whose window lies entirely within the recent horizon (30 days
  back from now) costs 1 token per page;
- anything older is historical and costs ``multiplier × years`` tokens per
  page, where ``years`` counts every calendar year the window touches.

Gating against the monthly allowance:

- projected usage up to the soft cap is ``allowed``;
- above the soft cap it is ``throttled`` but still allowed;
- above the hard cap it stays ``throttled`` unless it would also exceed the
  allowance itself without overage permission, in which case it is
  ``blocked``.

Allowed checks reserve their estimate immediately; blocked checks reserve
nothing. :meth:`TokenBudget.record_actual` reconciles a reservation once the
real request count is known.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import UTC, date, datetime

from headlinevibes import config
from headlinevibes.dates import normalize_date
from headlinevibes.models import BudgetState, BudgetStatus, TokenCheckResult

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return date.fromisoformat(normalize_date(value))
    if isinstance(value, date):
        return value
    return date.fromisoformat(normalize_date(value))


def count_distinct_years(start: date, end: date) -> int:
    """Calendar years touched by ``[start, end]`` (at least one)."""
    return max(1, end.year - start.year + 1)


class TokenBudget:
    """In-process month-to-date ledger with soft/hard cap gating.

    Ledger mutations are serialised with a lock so the MTD count never
    reflects a reservation that its check did not justify.
    """

    def __init__(
        self,
        monthly_tokens: int = config.MONTHLY_TOKENS,
        soft_cap_pct: int = config.SOFT_CAP_PCT,
        hard_cap_pct: int = config.HARD_CAP_PCT,
        allow_overage: bool = config.ALLOW_OVERAGE,
        historical_multiplier: int = config.HISTORICAL_MULTIPLIER,
        recent_window_days: int = config.RECENT_WINDOW_DAYS,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._monthly_tokens = monthly_tokens
        self._soft_cap_pct = soft_cap_pct
        self._hard_cap_pct = hard_cap_pct
        self._allow_overage = allow_overage
        self._multiplier = historical_multiplier
        self._recent_days = recent_window_days
        self._now = now

        self._lock = threading.Lock()
        self._month_key: str | None = None
        self._mtd_tokens = 0

    # ── public ──────────────────────────────────────────────────────────

    def estimate(
        self,
        start_date: date | datetime | str,
        end_date: date | datetime | str,
        pages_planned: int,
    ) -> int:
        """Tokens an article search over ``[start_date, end_date]`` would cost."""
        if pages_planned <= 0:
            return 0

        start = _as_date(start_date)
        end = _as_date(end_date)
        today = self._now().astimezone(UTC).date()

        is_recent = (
            (today - end).days <= self._recent_days
            and (today - start).days <= self._recent_days
        )
        if is_recent:
            per_page = 1
        else:
            per_page = self._multiplier * count_distinct_years(start, end)
        return per_page * pages_planned

    def check_and_reserve(
        self, estimate: int, allow_overage: bool | None = None
    ) -> TokenCheckResult:
        """Gate *estimate* against the caps; reserve it unless blocked."""
        with self._lock:
            self._ensure_month()

            soft_cap = self._soft_cap_pct / 100 * self._monthly_tokens
            hard_cap = self._hard_cap_pct / 100 * self._monthly_tokens
            projected = self._mtd_tokens + estimate

            status: BudgetStatus = "allowed"
            allowed = True
            if projected > hard_cap:
                permit = self._allow_overage if allow_overage is None else allow_overage
                if not permit and projected > self._monthly_tokens:
                    status = "blocked"
                    allowed = False
                else:
                    status = "throttled"
            elif projected > soft_cap:
                status = "throttled"

            if allowed:
                self._mtd_tokens += estimate

            result = self._result(allowed, status)

        if status == "blocked":
            logger.warning(
                "Token budget blocked: estimate=%d mtd=%d allowance=%d",
                estimate,
                result.mtd_tokens,
                result.monthly_tokens,
            )
        elif status == "throttled":
            logger.info(
                "Token budget throttled: estimate=%d mtd=%d allowance=%d",
                estimate,
                result.mtd_tokens,
                result.monthly_tokens,
            )
        return result

    def record_actual(self, actual: int, previously_estimated: int) -> None:
        """Apply ``actual - previously_estimated`` to the ledger (floored at 0)."""
        with self._lock:
            self._ensure_month()
            delta = actual - previously_estimated
            self._mtd_tokens = max(0, self._mtd_tokens + delta)
            mtd = self._mtd_tokens
        if delta:
            logger.debug("Token budget reconciled by %+d → mtd=%d", delta, mtd)

    def state(self) -> BudgetState:
        with self._lock:
            self._ensure_month()
            return BudgetState(
                month_key=self._month_key or "",
                mtd_tokens=self._mtd_tokens,
                monthly_tokens=self._monthly_tokens,
                soft_cap_pct=self._soft_cap_pct,
                hard_cap_pct=self._hard_cap_pct,
                allow_overage=self._allow_overage,
            )

    # ── private ─────────────────────────────────────────────────────────

    def _ensure_month(self) -> None:
        key = self._now().astimezone(UTC).strftime("%Y-%m")
        if self._month_key != key:
            if self._month_key is not None:
                logger.info("Token budget month rolled over %s → %s", self._month_key, key)
            self._month_key = key
            self._mtd_tokens = 0

    def _result(self, allowed: bool, status: BudgetStatus) -> TokenCheckResult:
        return TokenCheckResult(
            allowed=allowed,
            status=status,
            mtd_tokens=self._mtd_tokens,
            monthly_tokens=self._monthly_tokens,
            soft_cap_pct=self._soft_cap_pct,
            hard_cap_pct=self._hard_cap_pct,
        )
