"""Map sources to political-leaning buckets.

Every source lands in a bucket: anything not explicitly listed as left or
right is counted as center.
"""

from __future__ import annotations

from headlinevibes import config
from headlinevibes.models import PoliticalLeaning
from headlinevibes.normalize import to_kebab_id
from headlinevibes.sources import SourceUniverse, load_source_universe


def normalize_source_id(name: str | None) -> str:
    """Kebab-case slug of a source name, used when the canonical id is missing."""
    return to_kebab_id(name)


def resolve_source_id(source_id: str | None = None, name: str | None = None) -> str:
    """Prefer the canonical id, else the slugged name."""
    return source_id or normalize_source_id(name)


class SourceCategorizer:
    """Leaning lookup over a :class:`SourceUniverse`."""

    def __init__(self, universe: SourceUniverse) -> None:
        self._universe = universe

    @property
    def universe(self) -> SourceUniverse:
        return self._universe

    def _lookup(self, key: str) -> PoliticalLeaning | None:
        if key in self._universe.members("left"):
            return "left"
        if key in self._universe.members("right"):
            return "right"
        if key in self._universe.members("center"):
            return "center"
        return None

    def leaning_for(
        self, source_id: str | None = None, name: str | None = None
    ) -> PoliticalLeaning:
        """Resolve a leaning from the canonical id, then the slugged name.

        Provider URIs (``cnn.com``) are not curated slugs, so an unlisted id
        falls through to the name before defaulting to center.
        """
        for key in (source_id, normalize_source_id(name)):
            if not key:
                continue
            leaning = self._lookup(key)
            if leaning is not None:
                return leaning
        return "center"

    def is_preferred(self, source_id: str | None = None, name: str | None = None) -> bool:
        resolved = resolve_source_id(source_id, name)
        return bool(resolved) and self._universe.is_preferred(resolved)


_default: SourceCategorizer | None = None


def default_categorizer() -> SourceCategorizer:
    """Process-wide categorizer built from the configured sources file."""
    global _default
    if _default is None:
        _default = SourceCategorizer(load_source_universe(config.SOURCES_FILE))
    return _default


def source_to_leaning(source_id: str | None = None, name: str | None = None) -> PoliticalLeaning:
    return default_categorizer().leaning_for(source_id, name)


def is_preferred_source(source_id: str | None = None, name: str | None = None) -> bool:
    return default_categorizer().is_preferred(source_id, name)
