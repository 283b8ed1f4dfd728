"""Resolve friendly source names to provider source URIs (cache-aside).

Resolution is best-effort: a name that cannot be resolved is logged and
dropped, and an empty result simply means the fetch runs without a source
filter.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Protocol

from headlinevibes import config
from headlinevibes.errors import ProviderError
from headlinevibes.models import SourceCandidate
from headlinevibes.normalize import to_kebab_id
from headlinevibes.source_cache import SourceCache

logger = logging.getLogger(__name__)


class SourceSuggester(Protocol):
    def suggest_sources(self, name: str, language: str = ...) -> list[SourceCandidate]: ...


def looks_like_uri(name: str) -> bool:
    """Provider URIs are domains (``cnn.com``); curated slugs never contain a dot."""
    return "." in name


def pick_candidate(name: str, candidates: list[SourceCandidate]) -> SourceCandidate | None:
    """Prefer an exact normalized-title match, else the first candidate with a URI."""
    wanted = to_kebab_id(name)
    for cand in candidates:
        if cand.uri and to_kebab_id(cand.title) == wanted:
            return cand
    for cand in candidates:
        if cand.uri:
            return cand
    return None


class SourceResolver:
    """Maps names to URIs via a :class:`SourceCache`, asking the provider on a miss."""

    def __init__(
        self,
        suggester: SourceSuggester,
        cache: SourceCache | None = None,
        language: str = config.NEWS_API_LANGUAGE,
    ) -> None:
        self._suggester = suggester
        self._cache = cache
        self._language = language

    def resolve(self, names: list[str]) -> list[str]:
        """Return unique URIs for *names*, in input order."""
        uris: list[str] = []
        seen: set[str] = set()

        def _add(uri: str) -> None:
            if uri not in seen:
                seen.add(uri)
                uris.append(uri)

        for name in names:
            if not name or not isinstance(name, str):
                continue
            if looks_like_uri(name):
                _add(name)
                continue

            slug = to_kebab_id(name)
            cached = self._cache_get(slug)
            if cached is not None:
                _add(cached)
                continue

            uri = self._suggest(name, slug)
            if uri:
                _add(uri)

        logger.info("Resolved %d/%d sources to provider URIs", len(uris), len(names))
        return uris

    # ── private ─────────────────────────────────────────────────────────

    def _suggest(self, name: str, slug: str) -> str | None:
        try:
            candidates = self._suggester.suggest_sources(name, self._language)
        except ProviderError as exc:
            logger.warning("Source suggestion failed for '%s': %s", name, exc)
            return None

        chosen = pick_candidate(name, candidates)
        if chosen is None:
            logger.info("No provider source found for '%s'", name)
            return None

        if self._cache is not None:
            try:
                self._cache.put(slug, chosen.uri, chosen.title)
            except sqlite3.Error:
                logger.exception("Failed to cache source URI for '%s'", name)
        return chosen.uri

    def _cache_get(self, slug: str) -> str | None:
        if self._cache is None:
            return None
        try:
            entry = self._cache.get(slug)
        except sqlite3.Error:
            logger.exception("Source cache read failed for '%s'", slug)
            return None
        return entry.uri if entry else None
