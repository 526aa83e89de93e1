"""Result caching and citation enrichment for Grok live search."""

from .cache import ResultCache, build_cache_key
from .citations import CitationEnricher

__all__ = ["CitationEnricher", "ResultCache", "build_cache_key"]
