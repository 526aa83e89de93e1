from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from .errors import ValidationError

MAX_QUERY_LENGTH = 1000
MIN_RESULTS = 1
MAX_RESULTS = 20
MAX_SNIPPET_CHARS = 500

BASIC_SOURCE_TAG = "grok-live-search"
COMPREHENSIVE_SOURCE_TAG = "grok-comprehensive-analysis"
COMPREHENSIVE_FALLBACK_SOURCE_TAG = "grok-comprehensive-analysis-fallback"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def today_iso() -> str:
    return date.today().isoformat()


class SourceKind(Enum):
    """Upstream content classes a search can target."""

    WEB = "web"
    NEWS = "news"
    SOCIAL = "social"
    GENERAL = "general"

    @classmethod
    def parse(cls, value: "str | SourceKind") -> "SourceKind":
        if isinstance(value, SourceKind):
            return value
        normalized = str(value or "").strip().lower()
        if normalized in ("twitter", "x"):
            return cls.SOCIAL
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(kind.value for kind in cls)
            raise ValidationError(
                f"Unsupported search type '{value}'. Must be one of: {valid}"
            ) from None


class AnalysisMode(Enum):
    BASIC = "basic"
    COMPREHENSIVE = "comprehensive"

    @classmethod
    def parse(cls, value: "str | AnalysisMode") -> "AnalysisMode":
        if isinstance(value, AnalysisMode):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            raise ValidationError(
                f"Unsupported analysis mode '{value}'. Must be 'basic' or 'comprehensive'"
            ) from None

    @property
    def max_tokens(self) -> int:
        return 4000 if self is AnalysisMode.COMPREHENSIVE else 2000


@dataclass(frozen=True)
class DateRange:
    from_date: str | None = None
    to_date: str | None = None


@dataclass(frozen=True)
class SearchQuery:
    """
    Normalized, validated search input.

    Built once per tool invocation by the orchestrator after sanitizing the
    text and checking bounds and dates.
    """

    text: str
    source_kind: SourceKind = SourceKind.WEB
    max_results: int = 10
    analysis_mode: AnalysisMode = AnalysisMode.BASIC
    handles: tuple[str, ...] | None = None
    date_range: DateRange = field(default_factory=DateRange)

    def __post_init__(self):
        if not self.text:
            raise ValidationError("Search query cannot be empty after sanitization")
        if len(self.text) > MAX_QUERY_LENGTH:
            raise ValidationError(f"Search query too long (max {MAX_QUERY_LENGTH} characters)")
        if isinstance(self.max_results, bool) or not isinstance(self.max_results, int):
            raise ValidationError("max_results must be an integer")
        if not MIN_RESULTS <= self.max_results <= MAX_RESULTS:
            raise ValidationError(
                f"max_results must be between {MIN_RESULTS} and {MAX_RESULTS}"
            )

    @property
    def is_comprehensive(self) -> bool:
        return self.analysis_mode is AnalysisMode.COMPREHENSIVE


@dataclass(frozen=True)
class ProviderRequest:
    model: str
    messages: list[dict[str, str]]
    max_tokens: int
    search_parameters: dict[str, Any]
    temperature: float = 0.1
    stream: bool = False


@dataclass(frozen=True)
class RawProviderResponse:
    content: str
    citations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CitationRecord:
    index: int
    url: str
    domain: str | None = None
    scheme: str | None = None
    is_secure: bool = False
    path: str | None = None
    parse_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "index": self.index,
            "url": self.url,
            "domain": self.domain,
            "protocol": f"{self.scheme}:" if self.scheme else None,
            "is_secure": self.is_secure,
            "path": self.path,
        }
        if self.parse_error:
            data["error"] = self.parse_error
        return data


@dataclass(frozen=True)
class ResultItem:
    title: str
    snippet: str
    url: str | None
    source: str
    published_date: str
    author: str | None = None
    citation_url: str | None = None
    citation_index: int | None = None
    citation_metadata: CitationRecord | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        cited = (self.citation_url, self.citation_index, self.citation_metadata)
        if any(v is not None for v in cited) and not all(v is not None for v in cited):
            raise ValueError("citation_url, citation_index and citation_metadata go together")

    @property
    def has_citation(self) -> bool:
        return self.citation_index is not None

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.extra)
        data.update(
            {
                "title": self.title,
                "snippet": self.snippet,
                "url": self.url,
                "source": self.source,
                "published_date": self.published_date,
            }
        )
        if self.author is not None:
            data["author"] = self.author
        if self.has_citation:
            data["citation_url"] = self.citation_url
            data["citation_index"] = self.citation_index
            data["citation_metadata"] = self.citation_metadata.to_dict()
        return data


@dataclass(frozen=True)
class BasicResult:
    query: str
    results: list[ResultItem]
    citations: list[str]
    citation_metadata: list[CitationRecord]
    summary: str
    search_time: str = field(default_factory=utc_timestamp)
    source: str = BASIC_SOURCE_TAG
    analysis_mode: str = AnalysisMode.BASIC.value

    @property
    def total_results(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "analysis_mode": self.analysis_mode,
            "results": [item.to_dict() for item in self.results],
            "citations": list(self.citations),
            "citation_metadata": [record.to_dict() for record in self.citation_metadata],
            "summary": self.summary,
            "total_results": self.total_results,
            "search_time": self.search_time,
            "source": self.source,
        }


@dataclass(frozen=True)
class ComprehensiveResult:
    query: str
    comprehensive_analysis: str
    citations: list[str]
    citation_metadata: list[CitationRecord]
    key_findings: list[dict[str, Any]] = field(default_factory=list)
    timeline: list[dict[str, Any]] = field(default_factory=list)
    direct_quotes: list[dict[str, Any]] = field(default_factory=list)
    related_context: str = ""
    multiple_perspectives: list[dict[str, Any]] = field(default_factory=list)
    implications: dict[str, Any] = field(default_factory=dict)
    verification_status: dict[str, Any] = field(default_factory=dict)
    raw_results: list[Any] = field(default_factory=list)
    summary: str = ""
    search_time: str = field(default_factory=utc_timestamp)
    source: str = COMPREHENSIVE_SOURCE_TAG
    analysis_mode: str = AnalysisMode.COMPREHENSIVE.value

    @property
    def total_results(self) -> int:
        return len(self.raw_results)

    @property
    def is_fallback(self) -> bool:
        return self.source == COMPREHENSIVE_FALLBACK_SOURCE_TAG

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "analysis_mode": self.analysis_mode,
            "comprehensive_analysis": self.comprehensive_analysis,
            "key_findings": list(self.key_findings),
            "timeline": list(self.timeline),
            "direct_quotes": list(self.direct_quotes),
            "related_context": self.related_context,
            "multiple_perspectives": list(self.multiple_perspectives),
            "implications": dict(self.implications),
            "verification_status": dict(self.verification_status),
            "raw_results": [
                item.to_dict() if isinstance(item, ResultItem) else item
                for item in self.raw_results
            ],
            "summary": self.summary,
            "total_results": self.total_results,
            "search_time": self.search_time,
            "source": self.source,
            "citations": list(self.citations),
            "citation_metadata": [record.to_dict() for record in self.citation_metadata],
        }


SearchResult = BasicResult | ComprehensiveResult
