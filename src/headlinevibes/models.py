"""Domain models used across the pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field

PoliticalLeaning = Literal["left", "center", "right"]
BudgetStatus = Literal["allowed", "throttled", "blocked"]

LEANINGS: tuple[PoliticalLeaning, ...] = ("left", "center", "right")


class Article(BaseModel):
    id: str | None = None  # provider source URI, when known
    source_name: str = "Unknown"
    title: str = Field(min_length=1, max_length=512)
    published_at: datetime | None = None
    url: str | None = None


class RelevanceAssessment(BaseModel):
    relevant: bool
    score: float = 0.0
    matched_terms: list[str] = Field(default_factory=list)
    excluded_term: str | None = None


class InvestorScore(BaseModel):
    score: float
    key_terms: dict[str, int] = Field(default_factory=dict)


class ScoreDimensions(BaseModel):
    """Six independent 0..10 scores, rounded to 2 decimals."""

    attention: float = 5.0
    investor_sentiment: float = 5.0
    general_sentiment: float = 5.0
    bias_intensity: float = 5.0
    novelty: float = 5.0
    vol_shock: float = 5.0


class ScoringBaseline(BaseModel):
    """Reference data for the novelty and volatility-shock dimensions."""

    key_terms: dict[str, int] = Field(default_factory=dict)
    signal_series: list[float] = Field(default_factory=list)


# ── Budget / fetch ─────────────────────────────────────────────────────────


class TokenCheckResult(BaseModel):
    allowed: bool
    status: BudgetStatus
    mtd_tokens: int
    monthly_tokens: int
    soft_cap_pct: int
    hard_cap_pct: int


class BudgetState(BaseModel):
    month_key: str
    mtd_tokens: int
    monthly_tokens: int
    soft_cap_pct: int
    hard_cap_pct: int
    allow_overage: bool


class BackfillEstimate(BaseModel):
    requests: int
    feasible: bool
    reason: str | None = None


class FetchResult(BaseModel):
    articles: list[Article] = Field(default_factory=list)
    request_count: int = 0
    pages_fetched: int = 0


class SourceCacheEntry(BaseModel):
    uri: str
    title: str
    updated_at: datetime


# ── Results ────────────────────────────────────────────────────────────────


class DateRange(BaseModel):
    start: str  # YYYY-MM-DD
    end: str  # YYYY-MM-DD


class PoliticalSentiment(BaseModel):
    general: float = 5.0
    investor: float = 5.0
    headlines: int = 0
    sample_headlines: list[str] = Field(default_factory=list)


class LeaningSentiments(BaseModel):
    left: PoliticalSentiment = Field(default_factory=PoliticalSentiment)
    center: PoliticalSentiment = Field(default_factory=PoliticalSentiment)
    right: PoliticalSentiment = Field(default_factory=PoliticalSentiment)


class GeneralSentiment(BaseModel):
    score: float
    synopsis: str


class InvestorSentiment(BaseModel):
    score: float
    synopsis: str
    key_terms: dict[str, int] = Field(default_factory=dict)


class OverallSentiment(BaseModel):
    general: GeneralSentiment
    investor: InvestorSentiment


class FilteringStats(BaseModel):
    total_headlines: int
    relevant_headlines: int
    relevance_rate: float  # percent, 2dp


class TokenBudgetDiagnostics(BaseModel):
    status: BudgetStatus
    estimate_tokens: int
    requests_made: int
    mtd_tokens: int
    monthly_tokens: int
    soft_cap_pct: int
    hard_cap_pct: int


class SamplingDiagnostics(BaseModel):
    sources_targeted: int
    sources_with_relevant: int
    page_cap: int
    pages_fetched: int
    per_source_quota: int


class MonthlySamplingDiagnostics(BaseModel):
    sources_targeted: int
    page_cap: int
    pages_fetched: int


class DailyDiagnostics(BaseModel):
    token_budget: TokenBudgetDiagnostics
    sampling: SamplingDiagnostics


class MonthlyDiagnostics(BaseModel):
    token_budget: TokenBudgetDiagnostics
    sampling: MonthlySamplingDiagnostics


class DailyResult(BaseModel):
    date: str
    overall_sentiment: OverallSentiment
    political_sentiments: LeaningSentiments
    filtering_stats: FilteringStats
    headlines_analyzed: int
    sources_analyzed: int
    source_distribution: dict[str, int] = Field(default_factory=dict)
    political_distribution: dict[str, int] = Field(default_factory=dict)
    sample_headlines_by_leaning: dict[str, list[str]] = Field(default_factory=dict)
    scores: ScoreDimensions = Field(default_factory=ScoreDimensions)
    diagnostics: DailyDiagnostics


class MonthSuccess(BaseModel):
    outcome: Literal["ok"] = "ok"
    date_range: DateRange
    total_headlines: int
    political_sentiments: LeaningSentiments
    diagnostics: MonthlyDiagnostics


class MonthFailure(BaseModel):
    outcome: Literal["error"] = "error"
    date_range: DateRange
    total_headlines: int = 0
    political_sentiments: LeaningSentiments = Field(default_factory=LeaningSentiments)
    diagnostics: MonthlyDiagnostics
    error: str = Field(min_length=1)


MonthEntry = Annotated[MonthSuccess | MonthFailure, Field(discriminator="outcome")]


class MonthlyResult(BaseModel):
    months: dict[str, MonthEntry] = Field(default_factory=dict)


# ── Provider payloads ──────────────────────────────────────────────────────


class ArticlePage(BaseModel):
    """One page of article-search results."""

    articles: list[Article] = Field(default_factory=list)
    raw_count: int = 0  # results on the page before mapping
    total_pages: int | None = None  # None when the provider does not say
    current_page: int = 1


class SourceCandidate(BaseModel):
    uri: str
    title: str
