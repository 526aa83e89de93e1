"""
Structured result extraction from Grok's free-text answers.

Grok is asked for JSON but may wrap it in prose, code fences or markers. The
text goes through an ordered tuple of pure strategies; the first one that
yields a JSON object wins. When none does, or the object has the wrong shape
for the requested mode, a fallback result is synthesized from the raw text.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Callable

from models.search import (
    BASIC_SOURCE_TAG,
    COMPREHENSIVE_FALLBACK_SOURCE_TAG,
    COMPREHENSIVE_SOURCE_TAG,
    MAX_SNIPPET_CHARS,
    AnalysisMode,
    BasicResult,
    CitationRecord,
    ComprehensiveResult,
    RawProviderResponse,
    ResultItem,
    SearchQuery,
    SearchResult,
    today_iso,
)
from tools.web.citations import CitationEnricher
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ITEM_SOURCE = "web-search"
_ITEM_FIELDS = {
    "title",
    "snippet",
    "url",
    "source",
    "published_date",
    "author",
    "citation_url",
    "citation_index",
    "citation_metadata",
}

_BRACE_SPAN = re.compile(r"\{[\s\S]*\}")
_FENCED_BLOCK = re.compile(r"```[\w-]+\s*([\s\S]*?)\s*```")
_MARKER = re.compile(r"(?:json|JSON|response):\s*(\{[\s\S]*\})")
_LEADING_NON_BRACE = re.compile(r"^[^{]*")
_TRAILING_NON_BRACE = re.compile(r"[^}]*$")


def _load_object(text: str) -> dict[str, Any] | None:
    try:
        data = json.loads(text)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def extract_brace_span(text: str) -> dict[str, Any] | None:
    """First '{' through last '}'."""
    match = _BRACE_SPAN.search(text)
    return _load_object(match.group(0)) if match else None


def extract_fenced_block(text: str) -> dict[str, Any] | None:
    """Body of a language-tagged ``` code fence."""
    match = _FENCED_BLOCK.search(text)
    return _load_object(match.group(1)) if match else None


def extract_after_marker(text: str) -> dict[str, Any] | None:
    """Object following a 'json:' or 'response:' marker."""
    match = _MARKER.search(text)
    return _load_object(match.group(1)) if match else None


def extract_stripped(text: str) -> dict[str, Any] | None:
    """Whole text minus leading and trailing non-brace characters."""
    cleaned = _TRAILING_NON_BRACE.sub("", _LEADING_NON_BRACE.sub("", text, count=1), count=1)
    return _load_object(cleaned) if cleaned.startswith("{") else None


ExtractionStrategy = Callable[[str], "dict[str, Any] | None"]

EXTRACTION_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    extract_brace_span,
    extract_fenced_block,
    extract_after_marker,
    extract_stripped,
)


@dataclass(frozen=True)
class ParsedPayload:
    data: dict[str, Any]
    strategy: str


@dataclass(frozen=True)
class Unparsed:
    reason: str


ExtractionOutcome = ParsedPayload | Unparsed


def parse_payload(
    text: str, strategies: tuple[ExtractionStrategy, ...] = EXTRACTION_STRATEGIES
) -> ExtractionOutcome:
    """Run strategies in order and stop at the first JSON object."""
    for strategy in strategies:
        data = strategy(text)
        if data is not None:
            return ParsedPayload(data=data, strategy=strategy.__name__)
    return Unparsed(reason="no_json_object")


def check_shape(outcome: ExtractionOutcome, analysis_mode: AnalysisMode) -> ExtractionOutcome:
    """Reject parsed objects that do not fit the requested analysis mode."""
    if isinstance(outcome, Unparsed):
        return outcome

    data = outcome.data
    if analysis_mode is AnalysisMode.COMPREHENSIVE:
        if data.get("analysis_mode") == "comprehensive" or "comprehensive_analysis" in data:
            return outcome
        return Unparsed(reason="missing_comprehensive_markers")

    if isinstance(data.get("results"), list):
        return outcome
    return Unparsed(reason="missing_results_list")


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class ResponseExtractor:
    """
    Turns a RawProviderResponse into a BasicResult or ComprehensiveResult.

    extract() never raises: structure that cannot be recovered degrades into
    a single-item fallback result built from the raw text.
    """

    def __init__(
        self,
        enricher: CitationEnricher | None = None,
        strategies: tuple[ExtractionStrategy, ...] = EXTRACTION_STRATEGIES,
    ):
        self.enricher = enricher or CitationEnricher()
        self.strategies = strategies

    def extract(self, raw_response: RawProviderResponse, query: SearchQuery) -> SearchResult:
        """
        Build the typed result for a query.

        Args:
            raw_response: Provider text and citation URLs
            query: The validated query (supplies text, mode and max_results)

        Returns:
            BasicResult or ComprehensiveResult depending on query.analysis_mode
        """
        content = raw_response.content or ""
        citations = list(raw_response.citations)
        citation_metadata = self.enricher.enrich(citations)

        outcome = check_shape(parse_payload(content, self.strategies), query.analysis_mode)

        if isinstance(outcome, Unparsed):
            logger.warning(
                "Falling back to raw search text",
                extra={
                    "extra_fields": {
                        "reason": outcome.reason,
                        "analysis_mode": query.analysis_mode.value,
                        "content_length": len(content),
                    }
                },
            )
            return self._fallback(query, content, citations, citation_metadata)

        logger.debug(
            "Extracted structured search payload",
            extra={"extra_fields": {"strategy": outcome.strategy}},
        )
        if query.is_comprehensive:
            return self._comprehensive(query, outcome.data, citations, citation_metadata)
        return self._basic(query, outcome.data, citations, citation_metadata)

    def _comprehensive(
        self,
        query: SearchQuery,
        data: dict[str, Any],
        citations: list[str],
        citation_metadata: list[CitationRecord],
    ) -> ComprehensiveResult:
        raw_results = _as_list(data.get("raw_results")) or _as_list(data.get("results"))
        return ComprehensiveResult(
            query=query.text,
            comprehensive_analysis=_as_text(data.get("comprehensive_analysis")),
            key_findings=_as_list(data.get("key_findings")),
            timeline=_as_list(data.get("timeline")),
            direct_quotes=_as_list(data.get("direct_quotes")),
            related_context=_as_text(data.get("related_context")),
            multiple_perspectives=_as_list(data.get("multiple_perspectives")),
            implications=_as_dict(data.get("implications")),
            verification_status=_as_dict(data.get("verification_status")),
            raw_results=raw_results,
            summary=_as_text(data.get("summary")),
            source=COMPREHENSIVE_SOURCE_TAG,
            citations=citations,
            citation_metadata=citation_metadata,
        )

    def _basic(
        self,
        query: SearchQuery,
        data: dict[str, Any],
        citations: list[str],
        citation_metadata: list[CitationRecord],
    ) -> BasicResult:
        raw_items = [item for item in data["results"] if isinstance(item, dict)]
        items = [
            self._enrich_item(index, item, citations, citation_metadata)
            for index, item in enumerate(raw_items[: query.max_results])
        ]
        return BasicResult(
            query=query.text,
            results=items,
            citations=citations,
            citation_metadata=citation_metadata,
            summary=_as_text(data.get("summary")),
        )

    def _enrich_item(
        self,
        index: int,
        item: dict[str, Any],
        citations: list[str],
        citation_metadata: list[CitationRecord],
    ) -> ResultItem:
        own_url = item.get("url") or None
        url = own_url
        citation_index = None

        # Approximate mapping: shared URLs or count mismatches can mis-attribute
        if citations:
            if url is None:
                url = citations[index] if index < len(citations) else citations[0]
            if own_url is not None:
                citation_index = citations.index(own_url) if own_url in citations else None
            else:
                citation_index = min(index, len(citations) - 1)

        cited = citation_index is not None
        author = item.get("author")
        return ResultItem(
            title=_as_text(item.get("title")),
            snippet=_as_text(item.get("snippet"))[:MAX_SNIPPET_CHARS],
            url=_as_text(url) if url is not None else None,
            source=_as_text(item.get("source")) or DEFAULT_ITEM_SOURCE,
            published_date=_as_text(item.get("published_date")) or today_iso(),
            author=_as_text(author) if author else None,
            citation_url=citations[citation_index] if cited else None,
            citation_index=citation_index,
            citation_metadata=citation_metadata[citation_index] if cited else None,
            extra={k: v for k, v in item.items() if k not in _ITEM_FIELDS},
        )

    def _fallback(
        self,
        query: SearchQuery,
        content: str,
        citations: list[str],
        citation_metadata: list[CitationRecord],
    ) -> SearchResult:
        first = citations[0] if citations else None
        item = ResultItem(
            title=f"Search results for: {query.text}",
            snippet=content[:MAX_SNIPPET_CHARS],
            url=first,
            source=BASIC_SOURCE_TAG,
            published_date=today_iso(),
            citation_url=first,
            citation_index=0 if first is not None else None,
            citation_metadata=citation_metadata[0] if first is not None else None,
        )

        if query.is_comprehensive:
            return ComprehensiveResult(
                query=query.text,
                comprehensive_analysis=(
                    content
                    if len(content) > 100
                    else "Unable to extract comprehensive analysis from response"
                ),
                related_context="Analysis could not be properly extracted from the response",
                verification_status={
                    "confirmed_facts": [],
                    "unconfirmed_claims": [],
                    "contradictory_information": [],
                },
                raw_results=[item],
                summary="Raw search results from Grok (comprehensive analysis parsing failed)",
                source=COMPREHENSIVE_FALLBACK_SOURCE_TAG,
                citations=citations,
                citation_metadata=citation_metadata,
            )

        return BasicResult(
            query=query.text,
            results=[item],
            citations=citations,
            citation_metadata=citation_metadata,
            summary="Live search results from Grok (structured results could not be extracted)",
        )
