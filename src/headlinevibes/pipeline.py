"""Analysis orchestration: budget → fetch → filter → categorise → sample → score."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from headlinevibes import config
from headlinevibes.budget import TokenBudget
from headlinevibes.categorize import SourceCategorizer, default_categorizer
from headlinevibes.dates import month_range, parse_date_nl
from headlinevibes.errors import (
    InvalidInputError,
    RateLimitedError,
    ResourceExhaustedError,
)
from headlinevibes.fetch import HeadlineFetcher
from headlinevibes.models import (
    LEANINGS,
    Article,
    DailyDiagnostics,
    DailyResult,
    DateRange,
    FilteringStats,
    GeneralSentiment,
    InvestorSentiment,
    LeaningSentiments,
    MonthFailure,
    MonthlyDiagnostics,
    MonthlyResult,
    MonthlySamplingDiagnostics,
    MonthSuccess,
    OverallSentiment,
    PoliticalLeaning,
    PoliticalSentiment,
    SamplingDiagnostics,
    ScoringBaseline,
    TokenBudgetDiagnostics,
    TokenCheckResult,
)
from headlinevibes.newsapi import NewsApiClient
from headlinevibes.normalize import round2
from headlinevibes.ratelimit import RequestCounter
from headlinevibes.relevance import evaluate_headline_relevance
from headlinevibes.resolver import SourceResolver
from headlinevibes.sampling import sample_by_source
from headlinevibes.scoring import assemble_score_dimensions, score_general, score_investor
from headlinevibes.source_cache import SourceCache
from headlinevibes.summaries import summarize_general_sentiment, summarize_investor_sentiment

logger = logging.getLogger(__name__)

MAX_SAMPLE_HEADLINES = 5


def summarize_leaning(headlines: list[str]) -> PoliticalSentiment:
    return PoliticalSentiment(
        general=score_general(headlines),
        investor=score_investor(headlines).score,
        headlines=len(headlines),
        sample_headlines=headlines[:MAX_SAMPLE_HEADLINES],
    )


def _leaning_sentiments(by_leaning: dict[PoliticalLeaning, list[str]]) -> LeaningSentiments:
    return LeaningSentiments(**{k: summarize_leaning(by_leaning.get(k, [])) for k in LEANINGS})


def _positive(name: str, value: int | None, default: int) -> int:
    """Return *value* (or *default* when unset); anything below 1 is rejected."""
    resolved = default if value is None else value
    if resolved < 1:
        raise InvalidInputError(f"{name} must be at least 1, got {resolved}")
    return resolved


def _token_diagnostics(
    check: TokenCheckResult, estimate: int, requests_made: int, mtd_tokens: int | None = None
) -> TokenBudgetDiagnostics:
    return TokenBudgetDiagnostics(
        status=check.status,
        estimate_tokens=estimate,
        requests_made=requests_made,
        mtd_tokens=check.mtd_tokens if mtd_tokens is None else mtd_tokens,
        monthly_tokens=check.monthly_tokens,
        soft_cap_pct=check.soft_cap_pct,
        hard_cap_pct=check.hard_cap_pct,
    )


class HeadlineAnalyzer:
    """Daily and monthly headline analysis over shared budget and rate state.

    Months are processed one after another and pages within a fetch are
    sequential, so the ledger is always updated in request order.
    """

    def __init__(
        self,
        fetcher: HeadlineFetcher,
        budget: TokenBudget,
        counter: RequestCounter,
        categorizer: SourceCategorizer,
        sources: list[str] | None = None,
        page_cap: int = config.PAGE_CAP_PER_DAY,
        language: str = config.NEWS_API_LANGUAGE,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._budget = budget
        self._counter = counter
        self._categorizer = categorizer
        self._sources = list(sources) if sources is not None else list(categorizer.universe.preferred)
        self._page_cap = page_cap
        self._language = language
        self._now = now or (lambda: datetime.now(UTC))

    @property
    def budget(self) -> TokenBudget:
        return self._budget

    @property
    def counter(self) -> RequestCounter:
        return self._counter

    def _leaning_of(self, article: Article) -> PoliticalLeaning:
        return self._categorizer.leaning_for(article.id, article.source_name)

    # ── daily ───────────────────────────────────────────────────────────

    def analyze_daily(
        self,
        date_text: str,
        *,
        sources: list[str] | None = None,
        page_cap: int | None = None,
        max_headlines: int | None = None,
        baseline: ScoringBaseline | None = None,
        allow_overage: bool | None = None,
    ) -> DailyResult:
        """Analyze the headlines of one day.

        Raises:
            InvalidInputError: *date_text* cannot be parsed or a cap is below 1.
            RateLimitedError: the request counter is at a cap.
            ResourceExhaustedError: the token budget blocked the fetch.
            ProviderError: the provider failed before returning any page.
        """
        day = parse_date_nl(date_text, self._now())
        sources = self._sources if sources is None else list(sources)
        page_cap = _positive("page_cap", page_cap, self._page_cap)
        max_headlines = _positive("max_headlines", max_headlines, max(100, page_cap * 100))

        if self._counter.should_throttle():
            raise RateLimitedError("Rate limit exceeded. Please retry later.")

        estimate = self._budget.estimate(day, day, page_cap)
        check = self._budget.check_and_reserve(estimate, allow_overage=allow_overage)
        if not check.allowed:
            raise ResourceExhaustedError(
                f"Token budget exhausted for {day}.", check=check, estimate=estimate
            )

        logger.info("=== daily analysis start [%s, budget=%s] ===", day, check.status)
        try:
            fetched = self._fetcher.fetch_day(
                day, sources=sources, page_cap=page_cap, language=self._language
            )
        except Exception:
            self._budget.record_actual(0, estimate)
            raise
        self._counter.record_request(fetched.request_count)
        self._budget.record_actual(
            self._budget.estimate(day, day, fetched.request_count), estimate
        )
        articles = fetched.articles

        # ── distributions over everything fetched ─────────────────────
        source_distribution: dict[str, int] = {}
        political_distribution: dict[str, int] = {"left": 0, "center": 0, "right": 0, "other": 0}
        relevant_by_source: dict[str, list[Article]] = {}
        relevant_count = 0

        for article in articles:
            source_name = article.source_name or "Unknown"
            source_distribution[source_name] = source_distribution.get(source_name, 0) + 1
            political_distribution[self._leaning_of(article)] += 1

            if evaluate_headline_relevance(article.title).relevant:
                relevant_count += 1
                relevant_by_source.setdefault(source_name, []).append(article)

        # ── sample evenly across sources, then score the sample ──────
        sample = sample_by_source(relevant_by_source, max_headlines, self._leaning_of)

        filtering_stats = FilteringStats(
            total_headlines=len(articles),
            relevant_headlines=relevant_count,
            relevance_rate=round2(relevant_count / len(articles) * 100) if articles else 0.0,
        )

        investor = score_investor(sample.headlines)
        general_score = score_general(sample.headlines)
        political_sentiments = _leaning_sentiments(sample.by_leaning)
        bias_inputs = {
            leaning: getattr(political_sentiments, leaning).general
            for leaning in LEANINGS
            if sample.by_leaning[leaning]
        }
        scores = assemble_score_dimensions(sample.headlines, bias_inputs, baseline)

        logger.info(
            "Day %s: %d fetched, %d relevant, %d sampled from %d sources (quota=%d)",
            day,
            len(articles),
            relevant_count,
            len(sample.headlines),
            len(relevant_by_source),
            sample.per_source_quota,
        )

        return DailyResult(
            date=day,
            overall_sentiment=OverallSentiment(
                general=GeneralSentiment(
                    score=general_score,
                    synopsis=summarize_general_sentiment(general_score, sample.headlines),
                ),
                investor=InvestorSentiment(
                    score=investor.score,
                    synopsis=summarize_investor_sentiment(
                        investor.score, sample.headlines, investor.key_terms
                    ),
                    key_terms=investor.key_terms,
                ),
            ),
            political_sentiments=political_sentiments,
            filtering_stats=filtering_stats,
            headlines_analyzed=len(sample.headlines),
            sources_analyzed=len(relevant_by_source),
            source_distribution=source_distribution,
            political_distribution=political_distribution,
            sample_headlines_by_leaning={
                leaning: sample.by_leaning[leaning][:MAX_SAMPLE_HEADLINES] for leaning in LEANINGS
            },
            scores=scores,
            diagnostics=DailyDiagnostics(
                token_budget=_token_diagnostics(
                    check, estimate, fetched.request_count, self._budget.state().mtd_tokens
                ),
                sampling=SamplingDiagnostics(
                    sources_targeted=len(sources),
                    sources_with_relevant=len(relevant_by_source),
                    page_cap=page_cap,
                    pages_fetched=fetched.pages_fetched,
                    per_source_quota=sample.per_source_quota,
                ),
            ),
        )

    # ── monthly ─────────────────────────────────────────────────────────

    def analyze_monthly(
        self,
        start_month: str,
        end_month: str,
        *,
        sources: list[str] | None = None,
        page_cap: int | None = None,
        allow_overage: bool | None = None,
    ) -> MonthlyResult:
        """Analyze every calendar month in ``[start_month, end_month]`` (``YYYY-MM``).

        A month whose budget check or fetch fails is recorded as a
        :class:`MonthFailure` and the remaining months still run.

        Raises:
            InvalidInputError: a month bound is malformed or *page_cap* is below 1.
        """
        ranges = month_range(start_month, end_month)
        sources = self._sources if sources is None else list(sources)
        page_cap = _positive("page_cap", page_cap, self._page_cap)
        result = MonthlyResult()

        for start, end in ranges:
            key = start[:7]
            date_range = DateRange(start=start, end=end)
            estimate = self._budget.estimate(start, end, page_cap)
            check = self._budget.check_and_reserve(estimate, allow_overage=allow_overage)

            if not check.allowed:
                logger.warning("Month %s skipped: token budget exhausted", key)
                result.months[key] = self._month_failure(
                    date_range, check, estimate, len(sources), page_cap,
                    "Token budget exhausted before fetch.",
                )
                continue

            try:
                fetched = self._fetcher.fetch(
                    start, end, sources=sources, page_cap=page_cap, language=self._language
                )
            except Exception as exc:
                logger.exception("Month %s failed", key)
                self._budget.record_actual(0, estimate)
                message = str(exc) or f"{type(exc).__name__} while fetching monthly headlines."
                result.months[key] = self._month_failure(
                    date_range, check, estimate, len(sources), page_cap, message
                )
                continue

            self._counter.record_request(fetched.request_count)
            self._budget.record_actual(
                self._budget.estimate(start, end, fetched.request_count), estimate
            )

            by_leaning: dict[PoliticalLeaning, list[str]] = {k: [] for k in LEANINGS}
            for article in fetched.articles:
                by_leaning[self._leaning_of(article)].append(article.title)

            result.months[key] = MonthSuccess(
                date_range=date_range,
                total_headlines=len(fetched.articles),
                political_sentiments=_leaning_sentiments(by_leaning),
                diagnostics=MonthlyDiagnostics(
                    token_budget=_token_diagnostics(
                        check, estimate, fetched.request_count, self._budget.state().mtd_tokens
                    ),
                    sampling=MonthlySamplingDiagnostics(
                        sources_targeted=len(sources),
                        page_cap=page_cap,
                        pages_fetched=fetched.pages_fetched,
                    ),
                ),
            )
            logger.info("Month %s: %d headlines", key, len(fetched.articles))

        return result

    def _month_failure(
        self,
        date_range: DateRange,
        check: TokenCheckResult,
        estimate: int,
        sources_targeted: int,
        page_cap: int,
        message: str,
    ) -> MonthFailure:
        return MonthFailure(
            date_range=date_range,
            diagnostics=MonthlyDiagnostics(
                token_budget=_token_diagnostics(
                    check, estimate, 0, self._budget.state().mtd_tokens
                ),
                sampling=MonthlySamplingDiagnostics(
                    sources_targeted=sources_targeted, page_cap=page_cap, pages_fetched=0
                ),
            ),
            error=message,
        )


def build_analyzer() -> HeadlineAnalyzer:
    """Wire an analyzer from environment configuration."""
    client = NewsApiClient()
    resolver = SourceResolver(client, cache=SourceCache(config.source_cache_path()))
    return HeadlineAnalyzer(
        fetcher=HeadlineFetcher(client, resolver),
        budget=TokenBudget(),
        counter=RequestCounter(),
        categorizer=default_categorizer(),
    )
