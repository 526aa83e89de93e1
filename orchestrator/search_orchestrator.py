"""
SearchOrchestrator - entry point of the Grok search pipeline.

Key guarantees:
- Validation failures surface as ValidationError before any network call
- Transport and extraction failures surface as SearchError
- Only comprehensive results are cached; basic results always hit the API
- ServiceStats counters are updated on every call
"""

import re
from typing import Any, Sequence

from api.base_client import BaseSearchClient
from api.grok_client import GrokSearchClient
from config.config import Config
from models.errors import GrokSearchError, SearchError, ValidationError
from models.search import (
    MAX_QUERY_LENGTH,
    AnalysisMode,
    ComprehensiveResult,
    DateRange,
    ProviderRequest,
    SearchQuery,
    SearchResult,
    SourceKind,
)
from orchestrator.context import ServiceStats
from orchestrator.date_validator import validate_date_range
from orchestrator.prompts import get_system_prompt, get_user_prompt
from orchestrator.response_extractor import ResponseExtractor
from tools.web.cache import ResultCache, build_cache_key
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "grok-3-latest"

# Control characters except tab, newline and carriage return
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]+")


def sanitize_query(query_text: Any) -> str:
    """
    Replace control characters with a space and trim.

    Raises:
        ValidationError: If the query is not a string, is empty after
            sanitization, or is longer than 1000 characters
    """
    if not isinstance(query_text, str) or not query_text:
        raise ValidationError("Search query must be a non-empty string")

    sanitized = _CONTROL_CHARS.sub(" ", query_text).strip()
    if not sanitized:
        raise ValidationError("Search query cannot be empty after sanitization")
    if len(sanitized) > MAX_QUERY_LENGTH:
        raise ValidationError(f"Search query too long (max {MAX_QUERY_LENGTH} characters)")
    return sanitized


def _normalize_handles(handles: Sequence[str] | str | None) -> tuple[str, ...] | None:
    if handles is None:
        return None
    if isinstance(handles, str):
        return (handles,)
    return tuple(handles)


def get_search_sources(
    source_kind: SourceKind, handles: Sequence[str] | None = None
) -> list[dict[str, Any]]:
    """Map a source kind to Grok's search_parameters.sources list."""
    if source_kind is SourceKind.WEB:
        return [{"type": "web"}]
    if source_kind is SourceKind.NEWS:
        return [{"type": "news"}, {"type": "web"}]
    if source_kind is SourceKind.SOCIAL:
        x_source: dict[str, Any] = {"type": "x"}
        if handles:
            x_source["x_handles"] = list(handles)
        return [x_source]
    return [{"type": "web"}, {"type": "news"}, {"type": "x"}]


class SearchOrchestrator:
    def __init__(
        self,
        client: BaseSearchClient,
        cache: ResultCache | None = None,
        extractor: ResponseExtractor | None = None,
        stats: ServiceStats | None = None,
        model_name: str = DEFAULT_MODEL,
    ):
        self.client = client
        self.cache = cache if cache is not None else ResultCache()
        self.extractor = extractor or ResponseExtractor()
        self.stats = stats or ServiceStats()
        self.model_name = model_name

    async def search(
        self,
        query_text: str,
        source_kind: str | SourceKind = SourceKind.WEB,
        max_results: int = 10,
        handles: Sequence[str] | None = None,
        from_date: str | None = None,
        to_date: str | None = None,
        analysis_mode: str | AnalysisMode = AnalysisMode.BASIC,
    ) -> SearchResult:
        """
        Run one search end to end.

        Args:
            query_text: Raw query from the caller
            source_kind: web, news, social (or twitter/x) or general
            max_results: Result cap in [1, 20]
            handles: X handles to restrict a social search to
            from_date: Optional YYYY-MM-DD lower bound
            to_date: Optional YYYY-MM-DD upper bound
            analysis_mode: basic or comprehensive

        Returns:
            BasicResult or ComprehensiveResult

        Raises:
            ValidationError: Bad query, bounds, mode or dates
            SearchError: The request or its interpretation failed
        """
        self.stats.record_request()
        try:
            return await self._search(
                query_text, source_kind, max_results, handles, from_date, to_date, analysis_mode
            )
        except GrokSearchError:
            self.stats.record_error()
            raise

    async def _search(
        self,
        query_text,
        source_kind,
        max_results,
        handles,
        from_date,
        to_date,
        analysis_mode,
    ) -> SearchResult:
        query = SearchQuery(
            text=sanitize_query(query_text),
            source_kind=SourceKind.parse(source_kind),
            max_results=max_results,
            analysis_mode=AnalysisMode.parse(analysis_mode),
            handles=_normalize_handles(handles),
            date_range=DateRange(from_date=from_date or None, to_date=to_date or None),
        )

        cache_key = build_cache_key(query) if query.is_comprehensive else None
        if cache_key is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(
                    "Cache hit for comprehensive analysis",
                    extra={"extra_fields": {"query": query.text}},
                )
                return cached

        validate_date_range(query.date_range.from_date, query.date_range.to_date)

        try:
            request = self.build_request(query)
            raw_response = await self.client.execute(request, self.stats)
            result = self.extractor.extract(raw_response, query)
        except Exception as e:
            message = e.message if isinstance(e, GrokSearchError) else str(e)
            logger.error(
                "Search failed",
                extra={
                    "extra_fields": {
                        "query": query.text,
                        "error": message,
                        "error_type": type(e).__name__,
                    }
                },
            )
            raise SearchError(f"Search failed: {message}", cause=e) from e

        if cache_key is not None and isinstance(result, ComprehensiveResult):
            if not result.is_fallback:
                self.cache.set(cache_key, result)

        logger.info(
            "Search completed",
            extra={
                "extra_fields": {
                    "source_kind": query.source_kind.value,
                    "analysis_mode": query.analysis_mode.value,
                    "total_results": result.total_results,
                }
            },
        )
        return result

    def build_request(self, query: SearchQuery) -> ProviderRequest:
        """Derive the provider request deterministically from a validated query."""
        search_parameters: dict[str, Any] = {
            "mode": "on",
            "return_citations": True,
            "max_search_results": query.max_results,
            "sources": get_search_sources(query.source_kind, query.handles),
        }
        if query.date_range.from_date:
            search_parameters["from_date"] = query.date_range.from_date
        if query.date_range.to_date:
            search_parameters["to_date"] = query.date_range.to_date

        return ProviderRequest(
            model=self.model_name,
            messages=[
                {
                    "role": "system",
                    "content": get_system_prompt(query.source_kind, query.analysis_mode),
                },
                {"role": "user", "content": get_user_prompt(query.text)},
            ],
            max_tokens=query.analysis_mode.max_tokens,
            search_parameters=search_parameters,
        )

    def check_health(self) -> dict[str, Any]:
        client_health = self.client.check_health()
        return {
            "healthy": client_health["healthy"],
            "has_api_key": client_health["has_api_key"],
            "cache_size": self.cache.size,
            "last_error": self.stats.last_error,
        }


def create_search_orchestrator(config: Config | None = None) -> SearchOrchestrator:
    """
    Create a SearchOrchestrator from configuration.

    Environment variables (through Config):
        XAI_API_KEY: xAI API key (missing key leaves the client unhealthy)
        GROK_TIMEOUT: Request timeout in ms (default: 30000)
        GROK_MAX_RETRIES: Retries for transient failures (default: 3)
        GROK_CACHE_MAX_SIZE / GROK_CACHE_TTL_MINUTES: Comprehensive result cache

    Returns:
        Configured SearchOrchestrator instance
    """
    config = config or Config()
    client = GrokSearchClient(
        api_key=config.XAI_API_KEY,
        model_name=config.GROK_MODEL,
        base_url=config.GROK_BASE_URL,
        timeout_ms=config.GROK_TIMEOUT_MS,
        max_retries=config.GROK_MAX_RETRIES,
    )
    cache = ResultCache(
        max_size=config.GROK_CACHE_MAX_SIZE,
        ttl_seconds=config.GROK_CACHE_TTL_MINUTES * 60,
    )
    logger.info(
        "Search orchestrator created",
        extra={"extra_fields": {"model": config.GROK_MODEL, "has_api_key": client.is_healthy}},
    )
    return SearchOrchestrator(client=client, cache=cache, model_name=config.GROK_MODEL)
