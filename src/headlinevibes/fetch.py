"""Paginated article retrieval across a curated source list.

Pages are requested strictly in order. Pagination stops at the page cap,
on a short page, when the provider reports no further pages, or when a
page request fails. ``request_count`` is the number of page requests that
returned a page, which is what the token budget is reconciled against.
"""

from __future__ import annotations

import logging
from typing import Protocol

from headlinevibes import config
from headlinevibes.dates import normalize_date
from headlinevibes.errors import ProviderError
from headlinevibes.models import Article, ArticlePage, FetchResult
from headlinevibes.newsapi import PAGE_SIZE

logger = logging.getLogger(__name__)


class ArticleSearcher(Protocol):
    def search_articles(
        self,
        start_date: str,
        end_date: str,
        page: int = ...,
        page_size: int = ...,
        source_uris: list[str] | None = ...,
        language: str = ...,
    ) -> ArticlePage: ...


class SourceResolving(Protocol):
    def resolve(self, names: list[str]) -> list[str]: ...


class HeadlineFetcher:
    """Drive bounded pagination for one date window."""

    def __init__(
        self,
        client: ArticleSearcher,
        resolver: SourceResolving | None = None,
        resolve_limit: int = config.SOURCE_RESOLVE_LIMIT,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self._client = client
        self._resolver = resolver
        self._resolve_limit = resolve_limit
        self._page_size = page_size

    def fetch_day(
        self,
        day: str,
        sources: list[str] | None = None,
        page_cap: int = config.PAGE_CAP_PER_DAY,
        language: str = config.NEWS_API_LANGUAGE,
    ) -> FetchResult:
        """Fetch articles published on a single UTC day."""
        normalized = normalize_date(day)
        return self.fetch(normalized, normalized, sources, page_cap, language)

    def fetch(
        self,
        start_date: str,
        end_date: str,
        sources: list[str] | None = None,
        page_cap: int = config.PAGE_CAP_PER_DAY,
        language: str = config.NEWS_API_LANGUAGE,
    ) -> FetchResult:
        """Fetch up to *page_cap* pages for ``[start_date, end_date]``.

        A *page_cap* below 1 requests nothing, matching its zero-token estimate.

        Raises:
            ProviderError: if the first page fails, so nothing was retrieved.
                Failures on later pages end pagination with partial results.
        """
        if page_cap < 1:
            logger.warning(
                "Page cap %d plans no pages; skipping %s..%s", page_cap, start_date, end_date
            )
            return FetchResult()
        source_uris = self._resolve_sources(sources)

        articles: list[Article] = []
        pages_fetched = 0
        page = 1
        while page <= page_cap:
            try:
                result = self._client.search_articles(
                    start_date,
                    end_date,
                    page=page,
                    page_size=self._page_size,
                    source_uris=source_uris or None,
                    language=language,
                )
            except ProviderError as exc:
                logger.error("Error fetching page %d (%s..%s): %s", page, start_date, end_date, exc)
                if pages_fetched == 0:
                    raise
                break

            pages_fetched += 1
            articles.extend(result.articles)

            if result.raw_count < self._page_size:
                break
            if result.total_pages is not None and page >= result.total_pages:
                break
            page += 1

        logger.info(
            "Fetched %d articles in %d page(s) for %s..%s (cap=%d)",
            len(articles),
            pages_fetched,
            start_date,
            end_date,
            page_cap,
        )
        return FetchResult(articles=articles, request_count=pages_fetched, pages_fetched=pages_fetched)

    # ── private ─────────────────────────────────────────────────────────

    def _resolve_sources(self, sources: list[str] | None) -> list[str]:
        if not sources or self._resolver is None:
            return []
        try:
            return self._resolver.resolve(list(sources)[: self._resolve_limit])
        except ProviderError as exc:
            logger.error("Source resolution failed; fetching without source filter: %s", exc)
            return []
