"""Balanced per-source sampling of relevant headlines."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from headlinevibes.models import Article, PoliticalLeaning

logger = logging.getLogger(__name__)


@dataclass
class Sample:
    headlines: list[str] = field(default_factory=list)
    by_leaning: dict[PoliticalLeaning, list[str]] = field(
        default_factory=lambda: {"left": [], "center": [], "right": []}
    )
    per_source_quota: int = 0


def per_source_quota(max_headlines: int, source_count: int) -> int:
    """Even share of *max_headlines* per source (at least 1)."""
    if source_count <= 0:
        return max_headlines
    return max(1, max_headlines // source_count)


def sample_by_source(
    relevant_by_source: dict[str, list[Article]],
    max_headlines: int,
    leaning_of: Callable[[Article], PoliticalLeaning],
) -> Sample:
    """Walk sources in insertion order, taking at most the quota from each.

    The total never exceeds *max_headlines*. A source's leaning is taken
    from its first article.
    """
    quota = per_source_quota(max_headlines, len(relevant_by_source))
    sample = Sample(per_source_quota=quota)

    for source_name, articles in relevant_by_source.items():
        if len(sample.headlines) >= max_headlines:
            break
        if not articles:
            continue
        leaning = leaning_of(articles[0])
        room = max_headlines - len(sample.headlines)
        taken = [a.title for a in articles[: min(quota, room)]]
        sample.headlines.extend(taken)
        sample.by_leaning[leaning].extend(taken)
        logger.debug("Sampled %d/%d from %s", len(taken), len(articles), source_name)

    return sample
