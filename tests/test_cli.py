"""Unit tests for the command-line entry-point."""

import argparse
import json
from datetime import UTC, datetime

import pytest

from headlinevibes.__main__ import (
    EXIT_INVALID_INPUT,
    EXIT_PROVIDER_ERROR,
    EXIT_RESOURCE_EXHAUSTED,
    main,
    run,
)
from headlinevibes.budget import TokenBudget
from headlinevibes.categorize import SourceCategorizer
from headlinevibes.errors import ProviderError
from headlinevibes.models import Article, FetchResult
from headlinevibes.pipeline import HeadlineAnalyzer
from headlinevibes.ratelimit import RequestCounter
from headlinevibes.sources import default_universe

NOW = datetime(2025, 2, 12, 12, 0, tzinfo=UTC)


class _FakeFetcher:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail

    def fetch_day(self, day, sources=None, page_cap=2, language="eng") -> FetchResult:
        return self.fetch(day, day, sources, page_cap, language)

    def fetch(self, start_date, end_date, sources=None, page_cap=2, language="eng") -> FetchResult:
        if self.fail:
            raise ProviderError("provider down")
        return FetchResult(
            articles=[Article(source_name="CNN", title="Stocks rally on strong earnings")],
            request_count=1,
            pages_fetched=1,
        )


def _make(fail: bool = False, monthly_tokens: int = 1000) -> HeadlineAnalyzer:
    budget = TokenBudget(
        monthly_tokens=monthly_tokens,
        soft_cap_pct=80,
        hard_cap_pct=95,
        allow_overage=False,
        historical_multiplier=5,
        recent_window_days=30,
        now=lambda: NOW,
    )
    return HeadlineAnalyzer(
        fetcher=_FakeFetcher(fail),
        budget=budget,
        counter=RequestCounter(None, None),
        categorizer=SourceCategorizer(default_universe()),
        sources=["cnn"],
        page_cap=2,
        now=lambda: NOW,
    )


def _args(command: str = "daily", **overrides: object) -> argparse.Namespace:
    values: dict[str, object] = {
        "command": command,
        "date": "2025-02-11",
        "start_month": "2025-01",
        "end_month": "2025-01",
        "sources": None,
        "page_cap": None,
        "max_headlines": None,
        "allow_overage": None,
        "json": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


class TestRun:
    def test_daily_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(_args(json=True), _make()) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["date"] == "2025-02-11"
        assert payload["filtering_stats"]["total_headlines"] == 1

    def test_daily_text(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(_args(), _make()) == 0
        assert capsys.readouterr().out.startswith("Headline vibes for 2025-02-11")

    def test_monthly_text(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(_args("monthly"), _make()) == 0
        assert capsys.readouterr().out.startswith("2025-01: 1 headlines")

    def test_invalid_input(self) -> None:
        assert run(_args(date="banana"), _make()) == EXIT_INVALID_INPUT

    def test_budget_exhausted(self) -> None:
        assert run(_args(), _make(monthly_tokens=1)) == EXIT_RESOURCE_EXHAUSTED

    def test_provider_error(self) -> None:
        assert run(_args(), _make(fail=True)) == EXIT_PROVIDER_ERROR

    def test_negative_page_cap(self) -> None:
        assert run(_args("monthly", page_cap=-1), _make()) == EXIT_INVALID_INPUT


class TestMain:
    def test_no_command_prints_help(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
