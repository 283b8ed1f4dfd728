"""Curated US source universe and its political-leaning groups.

The universe is read from ``config/sources.yml`` when present::

    left:
      - cnn
    center:
      - associated-press
    right:
      - fox-news

Ids are provider-style kebab slugs. A missing or unreadable file falls back
to the built-in lists below.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from headlinevibes.models import LEANINGS, PoliticalLeaning
from headlinevibes.normalize import to_kebab_id

logger = logging.getLogger(__name__)

_DEFAULT_GROUPS: dict[PoliticalLeaning, tuple[str, ...]] = {
    "left": (
        "the-washington-post",
        "cnn",
        "nbc-news",
        "abc-news",
        "cbs-news",
        "time",
        "business-insider",
        "politico",
        "vice-news",
        "huffpost",
        "vox",
        "the-atlantic",
        "mother-jones",
    ),
    "center": (
        "associated-press",
        "bloomberg",
        "usa-today",
        "the-wall-street-journal",
        "marketwatch",
        "fortune",
        "cnbc",
    ),
    "right": (
        "fox-news",
        "fox-business",
        "the-hill",
        "national-review",
        "washington-examiner",
        "newsmax",
        "washington-times",
        "breitbart-news",
        "the-american-conservative",
    ),
}


@dataclass(frozen=True)
class SourceUniverse:
    """Preferred sources grouped by leaning; ``preferred`` keeps file order."""

    groups: dict[str, frozenset[str]] = field(default_factory=dict)
    preferred: tuple[str, ...] = ()

    def members(self, leaning: PoliticalLeaning) -> frozenset[str]:
        return self.groups.get(leaning, frozenset())

    def is_preferred(self, source_id: str) -> bool:
        return source_id in self.preferred


def _build(groups: dict[str, list[str]]) -> SourceUniverse:
    ordered: list[str] = []
    sets: dict[str, frozenset[str]] = {}
    for leaning in LEANINGS:
        ids = [to_kebab_id(s) for s in groups.get(leaning, []) if s]
        ids = [i for i in ids if i]
        sets[leaning] = frozenset(ids)
        ordered.extend(i for i in ids if i not in ordered)
    return SourceUniverse(groups=sets, preferred=tuple(ordered))


def default_universe() -> SourceUniverse:
    return _build({k: list(v) for k, v in _DEFAULT_GROUPS.items()})


def load_source_universe(path: str | Path | None) -> SourceUniverse:
    """Load the universe YAML at *path*, or the built-in defaults."""
    if path is None:
        return default_universe()
    p = Path(path)
    if not p.exists():
        logger.warning("Sources file not found, using built-in list: %s", p)
        return default_universe()

    with open(p) as fh:
        cfg: Any = yaml.safe_load(fh)

    if not isinstance(cfg, dict):
        logger.warning("Sources file %s is not a mapping; using built-in list.", p)
        return default_universe()

    unknown = set(cfg) - set(LEANINGS)
    if unknown:
        logger.warning("Ignoring unknown leaning groups in %s: %s", p, sorted(unknown))

    groups: dict[str, list[str]] = {}
    for leaning in LEANINGS:
        entries = cfg.get(leaning) or []
        groups[leaning] = [str(e) for e in entries]

    universe = _build(groups)
    logger.debug("Loaded %d preferred sources from %s", len(universe.preferred), p)
    return universe
