"""Unit tests for the source universe and leaning categorizer."""

from pathlib import Path

from headlinevibes.categorize import (
    SourceCategorizer,
    is_preferred_source,
    resolve_source_id,
    source_to_leaning,
)
from headlinevibes.sources import default_universe, load_source_universe


def _make() -> SourceCategorizer:
    return SourceCategorizer(default_universe())


class TestLeaningFor:
    def test_listed_ids(self) -> None:
        cat = _make()
        assert cat.leaning_for("cnn") == "left"
        assert cat.leaning_for("fox-news") == "right"
        assert cat.leaning_for("bloomberg") == "center"

    def test_unknown_is_center(self) -> None:
        assert _make().leaning_for("some-local-gazette") == "center"
        assert _make().leaning_for(None, None) == "center"

    def test_name_used_when_id_unlisted(self) -> None:
        cat = _make()
        assert cat.leaning_for("cnn.com", "CNN") == "left"
        assert cat.leaning_for(None, "Fox News") == "right"

    def test_preferred(self) -> None:
        cat = _make()
        assert cat.is_preferred("cnn")
        assert cat.is_preferred(None, "The Wall Street Journal")
        assert not cat.is_preferred("some-local-gazette")
        assert not cat.is_preferred(None, None)


class TestSourceToLeaning:
    def test_configured_default(self) -> None:
        assert source_to_leaning("cnn") == "left"
        assert source_to_leaning(None, "Fox Business") == "right"
        assert source_to_leaning(None, "Unheard Of Herald") == "center"

    def test_preferred_helper(self) -> None:
        assert is_preferred_source(None, "Bloomberg")
        assert not is_preferred_source("unheard-of-herald")


class TestResolveSourceId:
    def test_prefers_id(self) -> None:
        assert resolve_source_id("abc-news", "Something Else") == "abc-news"

    def test_falls_back_to_slug(self) -> None:
        assert resolve_source_id(None, "Fox News") == "fox-news"


class TestLoadSourceUniverse:
    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "sources.yml"
        path.write_text("left:\n  - Daily Left\ncenter:\n  - mid-wire\nright: []\nother:\n  - x\n")
        universe = load_source_universe(path)
        assert universe.members("left") == frozenset({"daily-left"})
        assert universe.members("right") == frozenset()
        assert universe.preferred == ("daily-left", "mid-wire")

        cat = SourceCategorizer(universe)
        assert cat.leaning_for(None, "Daily Left") == "left"
        assert cat.leaning_for("cnn") == "center"

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        universe = load_source_universe(tmp_path / "nope.yml")
        assert universe == default_universe()

    def test_non_mapping_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "sources.yml"
        path.write_text("- cnn\n- fox-news\n")
        assert load_source_universe(path) == default_universe()

    def test_default_universe_shape(self) -> None:
        universe = default_universe()
        assert len(universe.preferred) == 29
        assert "associated-press" in universe.members("center")
