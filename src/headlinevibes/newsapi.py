"""Minimal Event Registry (newsapi.ai) client: article search and source suggestions."""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

import requests
from pydantic import ValidationError

from headlinevibes import config
from headlinevibes.errors import ProviderError
from headlinevibes.models import Article, ArticlePage, SourceCandidate

logger = logging.getLogger(__name__)

PAGE_SIZE = 100  # provider maximum per article-search page
MAX_TITLE_LENGTH = 512

_ARTICLES_PATH = "article/getArticles"
_SUGGEST_PATH = "suggestSourcesFast"
_DEFAULT_RETRY_AFTER = 60


def _retry_after_seconds(value: str | None) -> int:
    """Seconds to wait for a ``Retry-After`` value (delta-seconds or HTTP-date)."""
    if not value:
        return _DEFAULT_RETRY_AFTER
    value = value.strip()
    if value.isdigit():
        return int(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable Retry-After %r; using %ds", value, _DEFAULT_RETRY_AFTER)
        return _DEFAULT_RETRY_AFTER
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    return max(0, int((when - datetime.now(UTC)).total_seconds()))


class NewsApiClient:
    """Thin wrapper around the provider's article-search and source-suggest endpoints.

    Each :meth:`search_articles` call is one billable, rate-limited request.
    """

    def __init__(
        self,
        api_key: str = config.NEWS_API_KEY,
        base_url: str = config.NEWS_API_BASE_URL,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("NEWS_API_KEY is required but was empty.")
        self._api_key = api_key
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    # ── public ──────────────────────────────────────────────────────────
    def search_articles(
        self,
        start_date: str,
        end_date: str,
        page: int = 1,
        page_size: int = PAGE_SIZE,
        source_uris: list[str] | None = None,
        language: str = config.NEWS_API_LANGUAGE,
    ) -> ArticlePage:
        """Fetch one page of articles published within ``[start_date, end_date]``."""
        body: dict[str, Any] = {
            "resultType": "articles",
            "dateStart": start_date,
            "dateEnd": end_date,
            "lang": language,
            "articlesPage": page,
            "articlesCount": page_size,
            "articlesSortBy": "date",
            "articleBodyLen": 0,
        }
        if source_uris:
            body["sourceUri"] = list(source_uris)

        logger.info(
            "POST %s page=%d window=%s..%s sources=%d",
            _ARTICLES_PATH,
            page,
            start_date,
            end_date,
            len(source_uris or []),
        )
        data = self._request("POST", _ARTICLES_PATH, json=body)
        if not isinstance(data, dict):
            raise ProviderError("News API returned an unexpected article payload")

        block = data.get("articles") or {}
        pages = block.get("pages")
        raw_results: list[dict[str, Any]] = block.get("results") or []
        articles = [a for a in (self._map_article(r) for r in raw_results) if a is not None]
        return ArticlePage(
            articles=articles,
            raw_count=len(raw_results),
            total_pages=int(pages) if pages is not None else None,
            current_page=int(block.get("page") or page),
        )

    def suggest_sources(
        self, name: str, language: str = config.NEWS_API_LANGUAGE
    ) -> list[SourceCandidate]:
        """Return provider source candidates for a free-text source *name*."""
        data = self._request(
            "GET", _SUGGEST_PATH, params={"text": name, "lang": language}, timeout=15.0
        )

        # The endpoint answers with a bare list or a wrapped one depending on version.
        if isinstance(data, list):
            raw: Any = data
        else:
            raw = data.get("suggestedSources") or data.get("sources") or data.get("results") or []
        if not isinstance(raw, list):
            return []

        candidates: list[SourceCandidate] = []
        for item in raw:
            if not isinstance(item, dict) or not isinstance(item.get("uri"), str):
                continue
            candidates.append(
                SourceCandidate(uri=item["uri"], title=str(item.get("title") or item["uri"]))
            )
        return candidates

    # ── private ─────────────────────────────────────────────────────────
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        url = self._base_url + path
        query = {**(params or {}), "apiKey": self._api_key}
        timeout = timeout or self._timeout

        try:
            resp = self._session.request(method, url, params=query, json=json, timeout=timeout)
            if resp.status_code == 429:
                retry_after = _retry_after_seconds(resp.headers.get("Retry-After"))
                logger.warning("Rate-limited; sleeping %ds", retry_after)
                time.sleep(retry_after)
                resp = self._session.request(
                    method, url, params=query, json=json, timeout=timeout
                )
        except requests.RequestException as exc:
            raise ProviderError(f"News API request to {path} failed: {exc}") from exc

        if resp.status_code != 200:
            raise ProviderError(
                f"News API returned {resp.status_code}: {resp.text[:500]}",
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderError(f"News API returned invalid JSON for {path}") from exc

    @staticmethod
    def _map_article(raw: dict[str, Any]) -> Article | None:
        title = (raw.get("title") or "").strip()
        if not title:
            return None
        source = raw.get("source") or {}
        try:
            return Article(
                id=source.get("uri"),
                source_name=source.get("title") or "Unknown",
                title=title[:MAX_TITLE_LENGTH],
                published_at=raw.get("dateTime"),
                url=raw.get("url"),
            )
        except ValidationError:
            logger.debug("Skipping malformed article: %s", raw.get("uri"))
            return None
