"""Investor-relevance filter for headlines."""

from __future__ import annotations

from headlinevibes.lexicons import RELEVANCE_EXCLUSION, RELEVANCE_INCLUSION
from headlinevibes.models import RelevanceAssessment
from headlinevibes.normalize import normalize_headline


def evaluate_headline_relevance(headline: str) -> RelevanceAssessment:
    """Check exclusion terms first, then sum inclusion weights.

    Each inclusion term counts once per headline no matter how often it
    occurs.
    """
    text = normalize_headline(headline)

    for term in RELEVANCE_EXCLUSION:
        if term in text:
            return RelevanceAssessment(relevant=False, score=0.0, excluded_term=term)

    score = 0.0
    matched: list[str] = []
    for term, weight in RELEVANCE_INCLUSION.items():
        if term in text:
            score += weight
            matched.append(term)

    return RelevanceAssessment(relevant=score > 0, score=score, matched_terms=matched)
