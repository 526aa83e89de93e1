"""
Models package for search queries, results and pipeline errors.
"""

from .errors import (
    ApiError,
    GrokSearchError,
    NetworkError,
    RequestTimeoutError,
    SearchError,
    ServiceUnavailableError,
    ValidationError,
)
from .search import (
    AnalysisMode,
    BasicResult,
    CitationRecord,
    ComprehensiveResult,
    DateRange,
    ProviderRequest,
    RawProviderResponse,
    ResultItem,
    SearchQuery,
    SearchResult,
    SourceKind,
)

__all__ = [
    "AnalysisMode",
    "ApiError",
    "BasicResult",
    "CitationRecord",
    "ComprehensiveResult",
    "DateRange",
    "GrokSearchError",
    "NetworkError",
    "ProviderRequest",
    "RawProviderResponse",
    "RequestTimeoutError",
    "ResultItem",
    "SearchError",
    "SearchQuery",
    "SearchResult",
    "ServiceUnavailableError",
    "SourceKind",
    "ValidationError",
]
