"""Unit tests for range mapping and slug helpers."""

import pytest

from headlinevibes.normalize import clamp, normalize_headline, normalize_range, round2, to_kebab_id


class TestNormalizeRange:
    def test_midpoint_mapping(self) -> None:
        assert normalize_range(0.25, (-1, 1)) == pytest.approx(6.25)
        assert normalize_range(0, (-4, 4)) == pytest.approx(5.0)

    def test_clamped_to_output(self) -> None:
        assert normalize_range(5, (-1, 1)) == 10.0
        assert normalize_range(-5, (-1, 1)) == 0.0

    def test_degenerate_input_range(self) -> None:
        assert normalize_range(3, (2, 2)) == 0.0

    def test_inverse_mapping_recovers_value(self) -> None:
        for x in (-1.0, -0.3, 0.0, 0.42, 1.0):
            forward = normalize_range(x, (-1, 1))
            assert normalize_range(forward, (0, 10), (-1, 1)) == pytest.approx(x)


class TestClamp:
    def test_bounds(self) -> None:
        assert clamp(11, 0, 10) == 10
        assert clamp(-1, 0, 10) == 0
        assert clamp(4.5, 0, 10) == 4.5

    def test_nan_maps_to_low(self) -> None:
        assert clamp(float("nan"), 0.0, 10.0) == 0.0


class TestStrings:
    def test_kebab(self) -> None:
        assert to_kebab_id("The Wall Street Journal") == "the-wall-street-journal"
        assert to_kebab_id("Fox News") == "fox-news"
        assert to_kebab_id("  Vox's Take!  ") == "voxs-take"
        assert to_kebab_id(None) == ""

    def test_headline(self) -> None:
        assert normalize_headline("  Stocks RALLY ") == "stocks rally"
        assert normalize_headline(None) == ""

    def test_round2(self) -> None:
        assert round2(3.14159) == 3.14
