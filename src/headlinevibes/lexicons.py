"""Term lists for relevance filtering, investor scoring and attention heuristics.

All terms are lowercase and matched as substrings of a lowercased headline,
so short tokens that hide inside common words (``"nba"`` in ``"unbanked"``,
``"dow"`` in ``"window"``) are deliberately avoided.
"""

from __future__ import annotations

# ── Relevance: exclusion wins over inclusion; first listed hit is reported ─
RELEVANCE_EXCLUSION: tuple[str, ...] = (
    "recipe",
    "horoscope",
    "celebrity",
    "red carpet",
    "box office",
    "movie review",
    "kardashian",
    "royal wedding",
    "dating advice",
    "weight loss",
    "touchdown",
    "quarterback",
    "basketball",
    "world series",
    "fashion week",
    "reality show",
    "crossword",
)

RELEVANCE_INCLUSION: dict[str, float] = {
    # Monetary policy and macro
    "interest rate": 3,
    "federal reserve": 3,
    "central bank": 3,
    "rate cut": 2,
    "rate hike": 2,
    "inflation": 3,
    "recession": 3,
    "gdp": 2,
    "unemployment": 2,
    "jobs report": 2,
    "treasury": 2,
    "bond yield": 2,
    "tariff": 2,
    "trade deal": 2,
    "economy": 2,
    "economic": 1,
    "consumer spending": 2,
    "housing market": 2,
    "mortgage": 1,
    # Markets
    "stock": 2,
    "market": 1,
    "wall street": 2,
    "s&p 500": 3,
    "nasdaq": 3,
    "dow jones": 3,
    "investor": 2,
    "shares": 1,
    "crude": 1,
    "oil price": 2,
    "bitcoin": 1,
    "crypto": 1,
    # Corporate
    "earnings": 3,
    "revenue": 2,
    "profit": 2,
    "dividend": 2,
    "merger": 2,
    "acquisition": 2,
    "initial public offering": 2,
    "layoffs": 1,
    "bankruptcy": 2,
    "bank": 1,
}

# ── Investor sentiment: weighted positive / negative financial terms ──────
INVESTOR_LEXICON: dict[str, int] = {
    # Strong positive
    "bull market": 2,
    "bullish": 2,
    "record high": 2,
    "outperform": 2,
    "breakthrough": 2,
    "innovation": 2,
    "growth": 2,
    "expansion": 2,
    "rally": 2,
    "surge": 2,
    "record profit": 2,
    "beat expectations": 2,
    "strong demand": 2,
    "market leader": 2,
    "competitive advantage": 2,
    # Moderate positive
    "investment": 1,
    "dividend": 1,
    "profit": 1,
    "earnings": 1,
    "partnership": 1,
    "acquisition": 1,
    "opportunity": 1,
    "recovery": 1,
    "stability": 1,
    "stable": 1,
    "guidance": 1,
    "momentum": 1,
    # Strong negative
    "bear market": -2,
    "bearish": -2,
    "crash": -2,
    "recession": -2,
    "bankruptcy": -2,
    "default": -2,
    "crisis": -2,
    "collapse": -2,
    "investigation": -2,
    "fraud": -2,
    "lawsuit": -2,
    "downgrade": -2,
    "miss expectations": -2,
    "weak demand": -2,
    "market correction": -2,
    # Moderate negative
    "volatility": -1,
    "volatile": -1,
    "uncertainty": -1,
    "uncertain": -1,
    "risk": -1,
    "concern": -1,
    "warning": -1,
    "caution": -1,
    "slowdown": -1,
    "decline": -1,
    "loss": -1,
    "debt": -1,
    "regulatory": -1,
    "inflation": -1,
}

# ── Attention ──────────────────────────────────────────────────────────────
CLICKBAIT_PHRASES: tuple[str, ...] = (
    "shocking",
    "you won't believe",
    "must see",
    "breaking",
    "surprising",
    "revealed",
    "secret",
    "what happened next",
    "unbelievable",
    "jaw-dropping",
)
