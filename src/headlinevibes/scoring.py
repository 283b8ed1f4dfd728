"""Headline scoring on a bounded 0..10 scale.

Every scorer maps a raw statistic through :func:`normalize_range` and
returns the neutral midpoint (5.0) when it has nothing to score.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from headlinevibes.lexicons import CLICKBAIT_PHRASES, INVESTOR_LEXICON
from headlinevibes.models import InvestorScore, ScoreDimensions, ScoringBaseline
from headlinevibes.normalize import clamp, normalize_headline, normalize_range, round2

logger = logging.getLogger(__name__)

NEUTRAL = 5.0

_analyzer = SentimentIntensityAnalyzer()

_NON_ALPHA_RE = re.compile(r"[^A-Za-z]")
_CAPS_RE = re.compile(r"[A-Z]{5,}")

# ── Attention weights (tuneable) ───────────────────────────────────────────
_W_EXCLAIM = 0.8
_W_QUESTION = 0.5
_W_CAPS = 0.7
_W_CLICKBAIT = 1.2
_MAX_EXCLAIM = 2
_MAX_QUESTION = 2
_MAX_CAPS = 3

# Raw ranges mapped onto 0..10
_GENERAL_RANGE = (-1.0, 1.0)
_INVESTOR_RANGE = (-4.0, 4.0)
_BIAS_RANGE = (0.0, 20.0)
_NOVELTY_RANGE = (0.0, 2.0)
_VOL_SHOCK_RANGE = (-3.0, 3.0)


def comparative(text: str) -> float:
    """Sentiment of *text* in ``[-1, 1]`` (VADER compound score)."""
    return float(_analyzer.polarity_scores(text or "").get("compound", 0.0))


def _attention_one(headline: str) -> float:
    text = normalize_headline(headline)
    s = min(_MAX_EXCLAIM, text.count("!")) * _W_EXCLAIM
    s += min(_MAX_QUESTION, text.count("?")) * _W_QUESTION

    # Short acronyms (FED, GDP) are not shouting; five or more capitals are.
    caps_tokens = sum(
        1 for tok in headline.split() if _CAPS_RE.search(_NON_ALPHA_RE.sub("", tok))
    )
    s += min(_MAX_CAPS, caps_tokens) * _W_CAPS

    s += sum(_W_CLICKBAIT for phrase in CLICKBAIT_PHRASES if phrase in text)
    return clamp(s, 0.0, 10.0)


def score_attention(headlines: list[str]) -> float:
    """Average attention-grabbing intensity (punctuation, caps, clickbait)."""
    if not headlines:
        return NEUTRAL
    avg = sum(_attention_one(h) for h in headlines) / len(headlines)
    return round2(clamp(avg, 0.0, 10.0))


def score_investor(headlines: list[str]) -> InvestorScore:
    """Weighted investor-lexicon score plus per-term headline counts."""
    if not headlines:
        return InvestorScore(score=NEUTRAL)

    raw = 0.0
    term_freq: dict[str, int] = {}
    for headline in headlines:
        text = normalize_headline(headline)
        for term, weight in INVESTOR_LEXICON.items():
            if term in text:
                raw += weight
                term_freq[term] = term_freq.get(term, 0) + 1

    avg = raw / len(headlines)
    return InvestorScore(
        score=round2(normalize_range(avg, _INVESTOR_RANGE)),
        key_terms=term_freq,
    )


def score_general(headlines: list[str]) -> float:
    """Mean comparative sentiment mapped from [-1, 1]."""
    if not headlines:
        return NEUTRAL
    avg = sum(comparative(h) for h in headlines) / len(headlines)
    return round2(normalize_range(avg, _GENERAL_RANGE))


def score_bias_intensity(by_leaning: Mapping[str, float]) -> float:
    """Divergence of left and right from center for one dimension.

    Missing left/right scores default to center (no divergence).
    """
    if not by_leaning:
        return NEUTRAL
    center = clamp(by_leaning.get("center", NEUTRAL), 0.0, 10.0)
    left = clamp(by_leaning.get("left", center), 0.0, 10.0)
    right = clamp(by_leaning.get("right", center), 0.0, 10.0)
    raw = abs(left - center) + abs(right - center)
    return round2(normalize_range(raw, _BIAS_RANGE))


def score_novelty(today_terms: Mapping[str, int], baseline_terms: Mapping[str, int]) -> float:
    """L1 distance between today's and the baseline term distributions."""
    if not today_terms or not baseline_terms:
        return NEUTRAL
    sum_today = sum(today_terms.values()) or 1
    sum_base = sum(baseline_terms.values()) or 1

    l1 = 0.0
    for term in set(today_terms) | set(baseline_terms):
        p = today_terms.get(term, 0) / sum_today
        q = baseline_terms.get(term, 0) / sum_base
        l1 += abs(p - q)
    return round2(normalize_range(l1, _NOVELTY_RANGE))


def _variance(values: list[float]) -> float:
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def score_vol_shock(today: list[float], baseline: list[float]) -> float:
    """z-like jump of today's signal variance over the baseline variance."""
    if not today or not baseline:
        return NEUTRAL
    v_today = _variance(today)
    v_base = _variance(baseline)
    std = max(1e-6, math.sqrt(abs(v_base)))
    z = (v_today - v_base) / std
    return round2(normalize_range(z, _VOL_SHOCK_RANGE))


def assemble_score_dimensions(
    headlines: list[str],
    by_leaning_for_bias: Mapping[str, float],
    baseline: ScoringBaseline | None = None,
) -> ScoreDimensions:
    """Compute all six dimensions for a sampled headline set.

    Without a *baseline*, novelty and volatility shock stay neutral.
    """
    baseline = baseline or ScoringBaseline()
    investor = score_investor(headlines)
    signal = [comparative(h) for h in headlines]
    dims = ScoreDimensions(
        attention=score_attention(headlines),
        investor_sentiment=investor.score,
        general_sentiment=score_general(headlines),
        bias_intensity=score_bias_intensity(by_leaning_for_bias),
        novelty=score_novelty(investor.key_terms, baseline.key_terms),
        vol_shock=score_vol_shock(signal, baseline.signal_series),
    )
    logger.debug("Scored %d headlines: %s", len(headlines), dims.model_dump())
    return dims
