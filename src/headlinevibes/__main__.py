"""CLI entry-point: ``python -m headlinevibes daily`` / ``python -m headlinevibes monthly``."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import BaseModel

from headlinevibes import config
from headlinevibes.errors import (
    InvalidInputError,
    ProviderError,
    RateLimitedError,
    ResourceExhaustedError,
)
from headlinevibes.pipeline import HeadlineAnalyzer, build_analyzer
from headlinevibes.summaries import render_daily_text, render_monthly_text

logger = logging.getLogger(__name__)

EXIT_CONFIG = 1
EXIT_INVALID_INPUT = 2
EXIT_RESOURCE_EXHAUSTED = 3
EXIT_RATE_LIMITED = 4
EXIT_PROVIDER_ERROR = 5


def _emit(result: BaseModel, text: str, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        print(text)


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--source",
        action="append",
        dest="sources",
        metavar="NAME",
        help="Source name or URI to restrict the search to (repeatable).",
    )
    p.add_argument(
        "--page-cap",
        type=int,
        default=None,
        help=f"Maximum pages per fetch (default: {config.PAGE_CAP_PER_DAY}).",
    )
    p.add_argument(
        "--allow-overage",
        action="store_true",
        default=None,
        help="Permit requests past the monthly token allowance.",
    )
    p.add_argument("--json", action="store_true", help="Print the full result as JSON.")


def run(args: argparse.Namespace, analyzer: HeadlineAnalyzer) -> int:
    """Execute one parsed command; returns the process exit code."""
    try:
        if args.command == "daily":
            daily = analyzer.analyze_daily(
                args.date,
                sources=args.sources,
                page_cap=args.page_cap,
                max_headlines=args.max_headlines,
                allow_overage=args.allow_overage,
            )
            _emit(daily, render_daily_text(daily), args.json)
        else:
            monthly = analyzer.analyze_monthly(
                args.start_month,
                args.end_month,
                sources=args.sources,
                page_cap=args.page_cap,
                allow_overage=args.allow_overage,
            )
            _emit(monthly, render_monthly_text(monthly), args.json)
    except InvalidInputError as exc:
        logger.error("%s", exc)
        return EXIT_INVALID_INPUT
    except ResourceExhaustedError as exc:
        logger.error(
            "%s (mtd=%d/%d, estimate=%d)",
            exc,
            exc.check.mtd_tokens,
            exc.check.monthly_tokens,
            exc.estimate,
        )
        return EXIT_RESOURCE_EXHAUSTED
    except RateLimitedError as exc:
        logger.error("%s", exc)
        return EXIT_RATE_LIMITED
    except ProviderError as exc:
        logger.error("%s", exc)
        return EXIT_PROVIDER_ERROR
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="headlinevibes",
        description="Political and investor sentiment of US news headlines.",
    )
    sub = parser.add_subparsers(dest="command")

    # ── daily ──────────────────────────────────────────────────────────
    daily_parser = sub.add_parser("daily", help="Analyze the headlines of one day.")
    daily_parser.add_argument(
        "date",
        help='Date to analyze: "yesterday", "last Friday", "3 days ago" or YYYY-MM-DD.',
    )
    daily_parser.add_argument(
        "--max-headlines",
        type=int,
        default=None,
        help="Cap on sampled headlines (default: 100 per page, at least 100).",
    )
    _add_common(daily_parser)

    # ── monthly ────────────────────────────────────────────────────────
    monthly_parser = sub.add_parser(
        "monthly",
        help="Per-leaning sentiment for every month in a range.",
    )
    monthly_parser.add_argument("start_month", help="First month, YYYY-MM.")
    monthly_parser.add_argument("end_month", help="Last month, YYYY-MM (inclusive).")
    _add_common(monthly_parser)

    args = parser.parse_args(argv)

    if args.command not in ("daily", "monthly"):
        parser.print_help()
        sys.exit(EXIT_CONFIG)

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        analyzer = build_analyzer()
    except ValueError as exc:
        logger.error("%s Set it in .env or the environment.", exc)
        sys.exit(EXIT_CONFIG)

    sys.exit(run(args, analyzer))


if __name__ == "__main__":
    main()
