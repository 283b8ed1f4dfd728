"""Unit tests for balanced per-source sampling."""

from headlinevibes.models import Article, PoliticalLeaning
from headlinevibes.sampling import per_source_quota, sample_by_source


def _make(source: str, n: int) -> list[Article]:
    return [Article(title=f"{source} headline {i}", source_name=source) for i in range(n)]


def _leaning(article: Article) -> PoliticalLeaning:
    return "left" if article.source_name == "CNN" else "center"


class TestQuota:
    def test_even_share(self) -> None:
        assert per_source_quota(100, 3) == 33

    def test_at_least_one(self) -> None:
        assert per_source_quota(2, 5) == 1

    def test_no_sources(self) -> None:
        assert per_source_quota(100, 0) == 100


class TestSampleBySource:
    def test_balanced_and_bounded(self) -> None:
        relevant = {s: _make(s, 50) for s in ("CNN", "Bloomberg", "Fortune")}
        sample = sample_by_source(relevant, 100, _leaning)
        assert sample.per_source_quota == 33
        assert len(sample.headlines) == 99
        assert len(sample.by_leaning["left"]) == 33
        assert len(sample.by_leaning["center"]) == 66
        assert sample.by_leaning["right"] == []

    def test_never_exceeds_max(self) -> None:
        relevant = {f"S{i}": _make(f"S{i}", 1) for i in range(5)}
        sample = sample_by_source(relevant, 2, _leaning)
        assert len(sample.headlines) == 2
        assert sample.headlines == ["S0 headline 0", "S1 headline 0"]

    def test_small_sources_take_everything(self) -> None:
        relevant = {"CNN": _make("CNN", 2), "Bloomberg": _make("Bloomberg", 1)}
        sample = sample_by_source(relevant, 100, _leaning)
        assert len(sample.headlines) == 3

    def test_empty(self) -> None:
        sample = sample_by_source({}, 100, _leaning)
        assert sample.headlines == []
        assert sample.per_source_quota == 100
