"""Pydantic models for MCP tool-call arguments."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.search import MAX_RESULTS, MIN_RESULTS


class SearchToolArguments(BaseModel):
    """Arguments shared by every search tool; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    query: str = ""
    search_type: str = "web"
    max_results: int = Field(10, ge=MIN_RESULTS, le=MAX_RESULTS)
    analysis_mode: str = "basic"
    handles: Optional[list[str]] = None
    from_date: Optional[str] = None
    to_date: Optional[str] = None

    @field_validator("handles")
    @classmethod
    def strip_at_signs(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return None
        return [handle.strip().lstrip("@") for handle in value if handle.strip()]
