"""Pydantic response models (DTOs) for MCP tool results."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _request_id() -> str:
    return f"req_{uuid.uuid4().hex[:16]}"


class SearchErrorDTO(BaseModel):
    """Envelope returned as the text of an isError tool result."""

    error: str
    status: str = "failed"
    query: str = "unknown"
    search_type: str = "web"
    analysis_mode: str = "basic"
    from_date: Optional[str] = None
    to_date: Optional[str] = None
    timestamp: str = Field(default_factory=_utc_now)
    request_id: str = Field(default_factory=_request_id)


class ApiDetailsDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_api_key: bool = Field(alias="hasApiKey")
    cache_size: int = Field(alias="cacheSize")
    last_error: Optional[str] = Field(None, alias="lastError")


class HealthResponseDTO(BaseModel):
    server_healthy: bool = True
    api_healthy: bool
    uptime_ms: int
    total_requests: int
    error_count: int
    success_rate: str
    api_details: ApiDetailsDTO

    @classmethod
    def from_diagnostics(cls, health: dict, stats) -> "HealthResponseDTO":
        """Build from SearchOrchestrator.check_health() and its ServiceStats."""
        return cls(
            api_healthy=health["healthy"],
            uptime_ms=stats.uptime_ms,
            total_requests=stats.total_requests,
            error_count=stats.error_count,
            success_rate=stats.success_rate,
            api_details=ApiDetailsDTO(
                has_api_key=health["has_api_key"],
                cache_size=health["cache_size"],
                last_error=health["last_error"],
            ),
        )
