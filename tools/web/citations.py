"""Citation URL enrichment."""

from urllib.parse import urlsplit

from models.search import CitationRecord
from utils.logger import get_logger

logger = get_logger(__name__)

INVALID_URL_ERROR = "Invalid URL format"


class CitationEnricher:
    """Turns provider citation URLs into structured metadata records."""

    def enrich(self, citations: list[str] | None) -> list[CitationRecord]:
        """
        Build one CitationRecord per citation, preserving order.

        A malformed URL never aborts the batch; its record carries a parse
        error and empty domain/scheme/path instead.
        """
        records = [self._enrich_one(index, url) for index, url in enumerate(citations or [])]

        invalid = sum(1 for record in records if record.parse_error)
        if invalid:
            logger.debug(
                "Citations with invalid URLs",
                extra={"extra_fields": {"invalid": invalid, "total": len(records)}},
            )
        return records

    def _enrich_one(self, index: int, url: str) -> CitationRecord:
        try:
            parts = urlsplit(url)
            hostname = parts.hostname
        except (TypeError, ValueError, AttributeError):
            return self._invalid(index, url)

        if not parts.scheme or not hostname:
            return self._invalid(index, url)

        return CitationRecord(
            index=index,
            url=url,
            domain=hostname,
            scheme=parts.scheme,
            is_secure=parts.scheme == "https",
            path=parts.path or "/",
        )

    @staticmethod
    def _invalid(index: int, url) -> CitationRecord:
        return CitationRecord(
            index=index,
            url=url if isinstance(url, str) else str(url),
            parse_error=INVALID_URL_ERROR,
        )
