"""Numeric range mapping and string helpers shared by scoring and categorisation."""

from __future__ import annotations

import math
import re

_APOSTROPHE_RE = re.compile(r"['’]")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def clamp(value: float, low: float, high: float) -> float:
    """Clamp *value* to ``[low, high]``; NaN maps to *low*."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def normalize_range(
    value: float,
    input_range: tuple[float, float],
    output_range: tuple[float, float] = (0.0, 10.0),
) -> float:
    """Linearly map *value* from *input_range* to *output_range*, clamped.

    >>> normalize_range(0.25, (-1, 1))
    6.25
    """
    in_min, in_max = input_range
    out_min, out_max = output_range
    span_in = in_max - in_min
    if span_in == 0:
        return out_min
    mapped = (value - in_min) / span_in * (out_max - out_min) + out_min
    return clamp(mapped, min(out_min, out_max), max(out_min, out_max))


def round2(value: float) -> float:
    return round(value, 2)


def to_kebab_id(text: str | None) -> str:
    """Slug a source name: ``"The Wall Street Journal"`` → ``the-wall-street-journal``."""
    if not text:
        return ""
    slug = _APOSTROPHE_RE.sub("", text.lower())
    slug = _NON_ALNUM_RE.sub("-", slug)
    return slug.strip("-")


def normalize_headline(text: str | None) -> str:
    """Lowercase and trim a headline for lexicon matching."""
    return (text or "").lower().strip()
