"""Narrative synopses for scores and short plain-text reports for the CLI."""

from __future__ import annotations

from headlinevibes.models import LEANINGS, DailyResult, MonthFailure, MonthlyResult
from headlinevibes.scoring import comparative

_STRONG = 0.5
_MODERATE = 0.2


def _pct(part: int, total: int) -> str:
    if not total:
        return "0"
    return f"{part / total * 100:.0f}"


def _tier(score: float, narratives: tuple[str, str, str, str, str]) -> str:
    if score >= 7:
        return narratives[0]
    if score >= 5.5:
        return narratives[1]
    if score >= 4.5:
        return narratives[2]
    if score >= 3:
        return narratives[3]
    return narratives[4]


def summarize_general_sentiment(score: float, headlines: list[str]) -> str:
    if not headlines:
        return "No qualifying investor headlines were available for this date."

    comps = [comparative(h) for h in headlines]
    total = len(comps)
    strong_pos = sum(1 for c in comps if c > _STRONG)
    moderate_pos = sum(1 for c in comps if _MODERATE < c <= _STRONG)
    moderate_neg = sum(1 for c in comps if -_STRONG <= c < -_MODERATE)
    strong_neg = sum(1 for c in comps if c < -_STRONG)

    narrative = _tier(
        score,
        (
            "Market sentiment appears bullish, with strong positive coverage likely "
            "boosting investor confidence.",
            "Market sentiment leans optimistic, with positive developments outweighing concerns.",
            "Market sentiment is balanced without a strong directional bias.",
            "Market sentiment leans cautious, with mixed but predominantly negative signals.",
            "Market sentiment appears bearish, highlighting risks that may pressure confidence.",
        ),
    )
    series = [
        f"{strong_pos} headlines ({_pct(strong_pos, total)}%) strongly positive",
        f"{moderate_pos} headlines ({_pct(moderate_pos, total)}%) moderately positive",
        f"{moderate_neg} headlines ({_pct(moderate_neg, total)}%) moderately negative",
        f"{strong_neg} headlines ({_pct(strong_neg, total)}%) strongly negative",
    ]
    return narrative + "\n\nSentiment distribution:\n- " + "\n- ".join(series)


def summarize_investor_sentiment(
    score: float, headlines: list[str], key_terms: dict[str, int]
) -> str:
    if not headlines:
        return "No investor-relevant headlines were available to assess the investment climate."

    top = sorted(key_terms.items(), key=lambda kv: kv[1], reverse=True)[:5]
    term_list = ", ".join(f"{term} ({count}x)" for term, count in top) or "none detected"

    narrative = _tier(
        score,
        (
            "Highly conducive to new investment interest. Strong positive signals and "
            "opportunities dominate coverage.",
            "Favorable conditions for investor interest. Positive indicators likely attract "
            "qualified investors.",
            "Neutral investment climate with balanced opportunities and risks.",
            "Mixed outlook; cautionary signals may temper investor enthusiasm.",
            "Current news cycle likely discourages fresh investment interest due to notable "
            "challenges.",
        ),
    )
    return f"{narrative}\n\nKey investment terms: {term_list}"


def render_daily_text(result: DailyResult) -> str:
    """Short human-readable summary of a daily analysis."""
    stats = result.filtering_stats
    budget = result.diagnostics.token_budget
    lines = [
        f"Headline vibes for {result.date}",
        f"General sentiment: {result.overall_sentiment.general.score:.2f}/10",
        f"Investor sentiment: {result.overall_sentiment.investor.score:.2f}/10",
        (
            f"Headlines: {stats.relevant_headlines}/{stats.total_headlines} relevant "
            f"({stats.relevance_rate:.2f}%), {result.headlines_analyzed} analyzed "
            f"from {result.sources_analyzed} sources"
        ),
    ]
    for leaning in LEANINGS:
        ps = getattr(result.political_sentiments, leaning)
        lines.append(
            f"  {leaning:<6} general={ps.general:.2f} investor={ps.investor:.2f} "
            f"headlines={ps.headlines}"
        )
    lines.append(
        f"Token budget: {budget.status}, {budget.mtd_tokens}/{budget.monthly_tokens} used "
        f"(estimate {budget.estimate_tokens}, requests {budget.requests_made})"
    )
    return "\n".join(lines)


def render_monthly_text(result: MonthlyResult) -> str:
    """Short human-readable summary of a monthly analysis."""
    if not result.months:
        return "No months in the requested range."
    lines: list[str] = []
    for month, entry in result.months.items():
        if isinstance(entry, MonthFailure):
            lines.append(f"{month}: error: {entry.error}")
            continue
        ps = entry.political_sentiments
        lines.append(
            f"{month}: {entry.total_headlines} headlines | "
            + " | ".join(
                f"{leaning} {getattr(ps, leaning).general:.2f}/{getattr(ps, leaning).investor:.2f}"
                for leaning in LEANINGS
            )
        )
    return "\n".join(lines)
