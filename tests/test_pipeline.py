"""Integration tests for the daily and monthly analysis flows (fake fetcher)."""

from datetime import UTC, datetime

import pytest

from headlinevibes.budget import TokenBudget
from headlinevibes.categorize import SourceCategorizer
from headlinevibes.errors import (
    InvalidInputError,
    ProviderError,
    RateLimitedError,
    ResourceExhaustedError,
)
from headlinevibes.models import Article, FetchResult, MonthFailure, MonthSuccess
from headlinevibes.pipeline import HeadlineAnalyzer
from headlinevibes.ratelimit import RequestCounter
from headlinevibes.sources import default_universe

NOW = datetime(2025, 2, 12, 12, 0, tzinfo=UTC)

DAY_ARTICLES = [
    Article(
        id="cnn.com",
        source_name="CNN",
        title="Stocks rally as Federal Reserve signals interest rate cut",
    ),
    Article(id="foxnews.com", source_name="Fox News", title="Inflation fears weigh on Wall Street"),
    Article(source_name="Associated Press", title="Easy pasta recipe for busy weeknights"),
    Article(source_name="Bloomberg", title="Earnings beat expectations at major bank"),
]


class _FakeFetcher:
    def __init__(
        self,
        articles: list[Article] | None = None,
        fail_on: set[str] | None = None,
        request_count: int = 1,
        error: type[Exception] = ProviderError,
    ) -> None:
        self.error = error
        self.articles = articles or []
        self.fail_on = fail_on or set()
        self.request_count = request_count
        self.calls: list[tuple[str, str, list[str] | None, int]] = []

    def fetch_day(self, day, sources=None, page_cap=2, language="eng") -> FetchResult:
        return self.fetch(day, day, sources, page_cap, language)

    def fetch(self, start_date, end_date, sources=None, page_cap=2, language="eng") -> FetchResult:
        self.calls.append((start_date, end_date, sources, page_cap))
        if start_date in self.fail_on:
            raise self.error(f"provider down for {start_date}")
        return FetchResult(
            articles=list(self.articles),
            request_count=self.request_count,
            pages_fetched=self.request_count,
        )


def _budget(monthly: int = 1000) -> TokenBudget:
    return TokenBudget(
        monthly_tokens=monthly,
        soft_cap_pct=80,
        hard_cap_pct=95,
        allow_overage=False,
        historical_multiplier=5,
        recent_window_days=30,
        now=lambda: NOW,
    )


def _make(
    fetcher: _FakeFetcher,
    budget: TokenBudget | None = None,
    counter: RequestCounter | None = None,
) -> HeadlineAnalyzer:
    return HeadlineAnalyzer(
        fetcher=fetcher,
        budget=budget or _budget(),
        counter=counter or RequestCounter(None, None),
        categorizer=SourceCategorizer(default_universe()),
        sources=["cnn", "fox-news"],
        page_cap=2,
        language="eng",
        now=lambda: NOW,
    )


class TestAnalyzeDaily:
    def test_happy_path(self) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES)
        analyzer = _make(fetcher)
        result = analyzer.analyze_daily("yesterday")

        assert result.date == "2025-02-11"
        assert fetcher.calls == [("2025-02-11", "2025-02-11", ["cnn", "fox-news"], 2)]

        stats = result.filtering_stats
        assert (stats.total_headlines, stats.relevant_headlines) == (4, 3)
        assert stats.relevance_rate == 75.0

        assert result.political_distribution == {"left": 1, "center": 2, "right": 1, "other": 0}
        assert result.source_distribution["Associated Press"] == 1
        assert result.headlines_analyzed == 3
        assert result.sources_analyzed == 3

        assert result.political_sentiments.left.headlines == 1
        assert result.political_sentiments.right.headlines == 1
        assert result.sample_headlines_by_leaning["center"] == [
            "Earnings beat expectations at major bank"
        ]
        assert result.overall_sentiment.investor.score == result.scores.investor_sentiment
        assert result.overall_sentiment.general.score == result.scores.general_sentiment
        assert "Sentiment distribution" in result.overall_sentiment.general.synopsis

        budget = result.diagnostics.token_budget
        assert budget.status == "allowed"
        assert budget.estimate_tokens == 2
        assert budget.requests_made == 1
        # reserved 2, reconciled down to the single page actually fetched
        assert budget.mtd_tokens == 1
        assert analyzer.budget.state().mtd_tokens == 1
        assert analyzer.counter.state()["daily"]["day_count"] == 1

        sampling = result.diagnostics.sampling
        assert sampling.sources_targeted == 2
        assert sampling.sources_with_relevant == 3
        assert sampling.pages_fetched == 1
        assert sampling.per_source_quota == 66

    def test_empty_day(self) -> None:
        result = _make(_FakeFetcher([])).analyze_daily("2025-02-11")
        assert result.filtering_stats.relevance_rate == 0.0
        assert result.headlines_analyzed == 0
        assert result.overall_sentiment.general.score == 5.0
        assert result.overall_sentiment.general.synopsis.startswith("No qualifying")

    def test_blocked_by_budget(self) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES)
        budget = _budget(monthly=1)
        with pytest.raises(ResourceExhaustedError) as exc_info:
            _make(fetcher, budget=budget).analyze_daily("2025-02-11")
        assert exc_info.value.check.status == "blocked"
        assert exc_info.value.estimate == 2
        assert fetcher.calls == []
        assert budget.state().mtd_tokens == 0

    def test_rate_limited(self) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES)
        counter = RequestCounter(daily_requests_cap=1, per_second_cap=None)
        counter.record_request()
        with pytest.raises(RateLimitedError):
            _make(fetcher, counter=counter).analyze_daily("2025-02-11")
        assert fetcher.calls == []

    def test_invalid_date(self) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES)
        with pytest.raises(InvalidInputError):
            _make(fetcher).analyze_daily("banana")
        assert fetcher.calls == []

    def test_provider_failure_releases_reservation(self) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES, fail_on={"2025-02-11"})
        analyzer = _make(fetcher)
        with pytest.raises(ProviderError):
            analyzer.analyze_daily("2025-02-11")
        assert analyzer.budget.state().mtd_tokens == 0

    def test_unexpected_failure_releases_reservation(self) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES, fail_on={"2025-02-11"}, error=ValueError)
        analyzer = _make(fetcher)
        with pytest.raises(ValueError):
            analyzer.analyze_daily("2025-02-11")
        assert analyzer.budget.state().mtd_tokens == 0

    @pytest.mark.parametrize("page_cap", [0, -1])
    def test_non_positive_page_cap_rejected(self, page_cap: int) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES)
        analyzer = _make(fetcher)
        with pytest.raises(InvalidInputError):
            analyzer.analyze_daily("2025-02-11", page_cap=page_cap)
        assert fetcher.calls == []
        assert analyzer.budget.state().mtd_tokens == 0

    def test_non_positive_max_headlines_rejected(self) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES)
        with pytest.raises(InvalidInputError):
            _make(fetcher).analyze_daily("2025-02-11", max_headlines=0)
        assert fetcher.calls == []


class TestAnalyzeMonthly:
    def test_failed_month_does_not_stop_others(self) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES, fail_on={"2024-12-01"})
        analyzer = _make(fetcher)
        result = analyzer.analyze_monthly("2024-11", "2025-01")

        assert list(result.months) == ["2024-11", "2024-12", "2025-01"]
        assert [c[0] for c in fetcher.calls] == ["2024-11-01", "2024-12-01", "2025-01-01"]

        nov = result.months["2024-11"]
        assert isinstance(nov, MonthSuccess)
        # no relevance filter: the recipe headline counts too
        assert nov.total_headlines == 4
        assert nov.political_sentiments.center.headlines == 2
        assert nov.date_range.end == "2024-11-30"

        dec = result.months["2024-12"]
        assert isinstance(dec, MonthFailure)
        assert dec.error == "provider down for 2024-12-01"
        assert dec.total_headlines == 0

        assert isinstance(result.months["2025-01"], MonthSuccess)
        # historical months: reserve 10 each, reconcile to 5 per successful month
        assert analyzer.budget.state().mtd_tokens == 10

    def test_budget_exhaustion_marks_month(self) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES)
        result = _make(fetcher, budget=_budget(monthly=12)).analyze_monthly("2024-11", "2025-01")

        assert isinstance(result.months["2024-11"], MonthSuccess)
        blocked = result.months["2024-12"]
        assert isinstance(blocked, MonthFailure)
        assert blocked.error == "Token budget exhausted before fetch."
        assert blocked.diagnostics.token_budget.status == "blocked"
        assert len(fetcher.calls) == 1

    def test_negative_page_cap_cannot_overrun_allowance(self) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES)
        budget = _budget(monthly=10)
        budget.check_and_reserve(10)
        with pytest.raises(InvalidInputError):
            _make(fetcher, budget=budget).analyze_monthly("2024-01", "2024-03", page_cap=-1)
        assert fetcher.calls == []
        assert budget.state().mtd_tokens == 10

    def test_start_after_end(self) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES)
        result = _make(fetcher).analyze_monthly("2025-03", "2025-01")
        assert result.months == {}
        assert fetcher.calls == []

    def test_malformed_month(self) -> None:
        with pytest.raises(InvalidInputError):
            _make(_FakeFetcher()).analyze_monthly("2025-1", "2025-03")

    def test_json_outcome_tag(self) -> None:
        fetcher = _FakeFetcher(DAY_ARTICLES, fail_on={"2025-01-01"})
        dumped = _make(fetcher).analyze_monthly("2025-01", "2025-01").model_dump(mode="json")
        assert dumped["months"]["2025-01"]["outcome"] == "error"
